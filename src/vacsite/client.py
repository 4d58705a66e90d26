"""High-level async client for the site's content backend."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from vacsite import resources as _resources
from vacsite._api.auth import sign_in_with_password
from vacsite._api.contact import insert_submission
from vacsite._constants import (
    RESOURCE_FOOTER,
    RESOURCE_JOB_OPENINGS,
    RESOURCE_SITE_SETTINGS,
    RESOURCE_TESTIMONIALS,
    feature_key,
    footer_section_key,
    hero_banner_key,
    page_theme_key,
)
from vacsite._transport import RestTransport, Transport
from vacsite.admin import ContentAdmin
from vacsite.cache.consumer import ChangeCallback, LiveResource
from vacsite.cache.events import Broadcaster
from vacsite.cache.loader import ReadThroughLoader, Resolved
from vacsite.cache.storage import FileStorage, MemoryStorage, Storage
from vacsite.cache.store import DurableStore
from vacsite.cache.watcher import StorageWatcher
from vacsite.config import SiteConfig
from vacsite.exceptions import AdminAuthRequiredError, ContactFormError, SiteError, SpamDetectedError
from vacsite.forms import detect_spam, sanitize_contact_form, validate_contact_form
from vacsite.models.contact import ContactForm
from vacsite.models.footer import FooterSectionType
from vacsite.models.settings import SettingsSnapshot
from vacsite.session import AdminSession

_logger = logging.getLogger(__name__)


class SiteClient:
    """Async client for one browsing context of the site.

    Usage::

        async with SiteClient(SiteConfig.from_env()) as client:
            settings = await client.get_site_settings()

    Clients that share a storage area (the same ``cache_dir``, or the same
    :class:`MemoryStorage` passed as ``storage``) see each other's cache
    writes as invalidations.
    """

    def __init__(
        self,
        config: SiteConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        storage: Storage | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._injected_transport = transport
        self._transport: Transport | None = None
        self._storage = storage
        self._broadcaster = Broadcaster()
        self._store: DurableStore | None = None
        self._watcher: StorageWatcher | None = None
        self._admin_session: AdminSession | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SiteClient:
        self._config.validate()
        if self._injected_transport is not None:
            self._transport = self._injected_transport
        else:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = RestTransport(self._config, self._http_session)
        if self._storage is None:
            self._storage = FileStorage(self._config.cache_dir) if self._config.cache_dir else MemoryStorage()
        self._store = DurableStore(self._storage, self._broadcaster, namespace=self._config.storage_namespace)
        if self._config.cross_context_enabled:
            self._watcher = StorageWatcher(self._store, self._broadcaster, interval=self._config.watch_interval)
            self._watcher.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._watcher is not None:
            await self._watcher.stop()
            self._watcher = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> SiteConfig:
        return self._config

    @property
    def broadcaster(self) -> Broadcaster:
        return self._broadcaster

    @property
    def store(self) -> DurableStore:
        if self._store is None:
            raise SiteError("Client not initialized. Use 'async with SiteClient(...) as client:'")
        return self._store

    @property
    def watcher(self) -> StorageWatcher | None:
        return self._watcher

    @property
    def admin_session(self) -> AdminSession | None:
        return self._admin_session

    @property
    def admin(self) -> ContentAdmin:
        """Content management operations; requires :meth:`login`."""
        self._require_admin_session()
        return ContentAdmin(self)

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise SiteError("Client not initialized. Use 'async with SiteClient(...) as client:'")
        return self._transport

    def _require_admin_session(self) -> AdminSession:
        session = self._admin_session
        if session is None:
            raise AdminAuthRequiredError("Please log in to perform admin operations")
        if session.is_expired:
            self._admin_session = None
            raise AdminAuthRequiredError("Admin session expired, please log in again")
        return session

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> AdminSession:
        """Sign in an administrator."""
        self._admin_session = await sign_in_with_password(self._require_transport(), email, password)
        _logger.info("Admin %s signed in", self._admin_session.email or self._admin_session.user_id)
        await ContentAdmin(self).log_activity("admin_login", "authentication")
        return self._admin_session

    async def logout(self) -> None:
        """Forget the admin session. Idempotent."""
        if self._admin_session is None:
            return
        await ContentAdmin(self).log_activity("admin_logout", "authentication")
        self._admin_session = None

    # ------------------------------------------------------------------
    # Cached reads
    # ------------------------------------------------------------------

    def loader(self, resource_key: str) -> ReadThroughLoader[Any, Any]:
        """Build the read-through loader for *resource_key*.

        Accepted keys: ``site_settings``, ``footer``, ``testimonials``,
        ``job_openings``, ``footer:<section>``, ``hero_banner:<page>``,
        ``feature:<setting_key>`` and ``page_theme:<page>``.
        """
        transport = self._require_transport()
        store = self.store
        simple: dict[str, Callable[[Transport, DurableStore], ReadThroughLoader[Any, Any]]] = {
            RESOURCE_SITE_SETTINGS: _resources.site_settings_loader,
            RESOURCE_FOOTER: _resources.footer_loader,
            RESOURCE_TESTIMONIALS: _resources.testimonials_loader,
            RESOURCE_JOB_OPENINGS: _resources.job_openings_loader,
        }
        if resource_key in simple:
            return simple[resource_key](transport, store)

        kind, _, name = resource_key.partition(":")
        if not name:
            raise ValueError(f"Unknown resource key {resource_key!r}")
        if kind == "footer":
            return _resources.footer_section_loader(transport, store, FooterSectionType(name))
        if kind == "hero_banner":
            return _resources.hero_banner_loader(transport, store, name)
        if kind == "feature":
            return _resources.feature_loader(transport, store, name)
        if kind == "page_theme":
            return _resources.page_theme_loader(transport, store, name)
        raise ValueError(f"Unknown resource key {resource_key!r}")

    async def resolve(self, resource_key: str) -> Resolved[Any]:
        """Load *resource_key* with its provenance. Never raises for backend errors."""
        return await self.loader(resource_key).resolve()

    async def refresh(self, resource_key: str) -> Resolved[Any]:
        """Re-load *resource_key* from the backend, updating the cache."""
        return await self.resolve(resource_key)

    def live(self, resource_key: str, *, on_change: ChangeCallback[Any] | None = None) -> LiveResource[Any]:
        """A consumer for *resource_key*; call ``mount()`` to start it."""
        return LiveResource(self.loader(resource_key), self._broadcaster, on_change=on_change)

    async def get_site_settings(self) -> SettingsSnapshot:
        return await self.loader(RESOURCE_SITE_SETTINGS).load()

    async def get_footer(self) -> dict[str, list[dict[str, Any]]]:
        return await self.loader(RESOURCE_FOOTER).load()

    async def get_footer_section(self, section: FooterSectionType | str) -> list[dict[str, Any]]:
        return await self.loader(footer_section_key(FooterSectionType(section).value)).load()

    async def get_hero_banner(self, page_name: str) -> dict[str, Any]:
        return await self.loader(hero_banner_key(page_name)).load()

    async def get_testimonials(self) -> list[dict[str, Any]]:
        return await self.loader(RESOURCE_TESTIMONIALS).load()

    async def is_feature_enabled(self, setting_key: str) -> bool:
        return await self.loader(feature_key(setting_key)).load()

    async def get_job_openings(self) -> list[dict[str, Any]]:
        return await self.loader(RESOURCE_JOB_OPENINGS).load()

    async def get_page_theme(self, page_name: str) -> str | None:
        return await self.loader(page_theme_key(page_name)).load()

    # ------------------------------------------------------------------
    # Public writes
    # ------------------------------------------------------------------

    async def submit_contact(self, form: ContactForm) -> ContactForm:
        """Validate, sanitize and store a contact form submission.

        Raises
        ------
        ContactFormError
            The form is invalid; nothing was sent.
        SpamDetectedError
            The content matched a spam pattern; nothing was sent.
        SiteError
            The backend rejected or could not store the submission.
        """
        errors = validate_contact_form(form)
        if errors:
            raise ContactFormError(errors)
        clean = sanitize_contact_form(form)
        if detect_spam(clean):
            _logger.info("Contact submission rejected as spam")
            raise SpamDetectedError()
        await insert_submission(self._require_transport(), clean)
        return clean
