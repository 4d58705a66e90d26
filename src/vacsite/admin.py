"""Admin write path for :class:`vacsite.client.SiteClient`.

Every operation needs a signed-in session and sends its access token.
Backend errors propagate to the caller unchanged and are never retried;
use :func:`describe_error` to turn them into user-facing text. After a
successful write, the affected cached resources are re-loaded from the
backend, which stores the fresh snapshot and notifies every listener.
"""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Literal

from vacsite._api import activity as _activity_api
from vacsite._api import contact as _contact_api
from vacsite._api import footer as _footer_api
from vacsite._api import hero_banners as _banner_api
from vacsite._api import job_openings as _jobs_api
from vacsite._api import media as _media_api
from vacsite._api import site_settings as _settings_api
from vacsite._api import testimonials as _testimonials_api
from vacsite._constants import (
    HERO_DEFAULT_SETTING_KEYS,
    RESOURCE_FOOTER,
    RESOURCE_JOB_OPENINGS,
    RESOURCE_SITE_SETTINGS,
    RESOURCE_TESTIMONIALS,
    feature_key,
    footer_section_key,
    hero_banner_key,
    page_theme_key,
)
from vacsite.exceptions import AdminAuthRequiredError, BackendApiError, BackendTransportError, SiteError
from vacsite.models.banner import HeroBanner
from vacsite.models.contact import ActivityLogEntry, ContactSubmission, SubmissionStatus
from vacsite.models.footer import FooterItem, FooterSectionType
from vacsite.models.job import JobOpening
from vacsite.models.media import MediaObject
from vacsite.models.settings import SettingsSnapshot, SiteSetting, settings_to_snapshot
from vacsite.models.testimonial import Testimonial

if TYPE_CHECKING:
    from vacsite.client import SiteClient

_logger = logging.getLogger(__name__)

#: Footer sections rebuilt from site settings by ``sync_footer_from_settings``.
SETTINGS_FOOTER_SECTIONS: tuple[FooterSectionType, ...] = (
    FooterSectionType.COMPANY_INFO,
    FooterSectionType.CONTACT_INFO,
    FooterSectionType.SOCIAL_LINKS,
    FooterSectionType.LEGAL,
)

_PAGE_THEME_PREFIX = "page_theme_"
_HERO_BANNER_PREFIX = hero_banner_key("")


def _now_ms() -> int:
    return int(datetime.datetime.now(datetime.UTC).timestamp() * 1000)


def describe_error(exc: BaseException, operation: str = "complete the operation") -> tuple[str, str]:
    """Map a write-path error to a ``(title, description)`` pair for the user."""
    code = getattr(exc, "code", "") or ""
    message = str(exc)

    if isinstance(exc, AdminAuthRequiredError):
        return "Authentication Required", "Please log in to perform admin operations."
    if code == "42501" or "permission" in message:
        return (
            "Permission Denied",
            "You don't have permission to perform this action. Please check your authentication.",
        )
    if code == "PGRST301":
        return "Connection Error", "Unable to connect to the database. Please try again."
    if code == "23503":
        return "Reference Error", "This item cannot be deleted because it's referenced by other data."
    if code == "23505":
        return "Duplicate Error", "This item already exists. Please use a different name or value."
    if "JWT" in message:
        return "Session Expired", "Your session has expired. Please log in again."
    if "RLS" in message:
        return (
            "Security Policy",
            "Database security policies prevent this action. Contact support if this persists.",
        )
    if isinstance(exc, BackendTransportError):
        return "Connection Error", "Unable to connect to the database. Please try again."
    return "Database Error", message or f"Failed to {operation}"


def build_footer_from_settings(settings: SettingsSnapshot, *, year: int) -> list[FooterItem]:
    """Footer rows for the settings-managed sections, in display order."""
    def get(key: str) -> str:
        return (settings.get(key) or "").strip()

    items: list[FooterItem] = []

    def add(section: FooterSectionType, index: int, **fields: str | None) -> int:
        items.append(FooterItem(section_type=section, order_index=index, is_active=True, **fields))
        return index + 1

    if get("company_name") or get("company_tagline"):
        add(
            FooterSectionType.COMPANY_INFO,
            0,
            title=get("company_name") or "Company",
            content=get("company_tagline") or None,
        )

    index = 0
    if email := get("primary_email"):
        index = add(
            FooterSectionType.CONTACT_INFO,
            index,
            title="Email",
            content=email,
            link_url=f"mailto:{email}",
            link_text=email,
            icon_name="mail",
        )
    if phone := get("primary_phone"):
        index = add(
            FooterSectionType.CONTACT_INFO,
            index,
            title="Phone",
            content=phone,
            link_url=f"tel:{phone}",
            link_text=phone,
            icon_name="phone",
        )
    if address := get("address"):
        add(FooterSectionType.CONTACT_INFO, index, title="Address", content=address, icon_name="map-pin")

    index = 0
    for key, title, icon in (
        ("linkedin_url", "LinkedIn", "linkedin"),
        ("twitter_url", "Twitter", "twitter"),
        ("youtube_url", "YouTube", "youtube"),
    ):
        if url := get(key):
            index = add(FooterSectionType.SOCIAL_LINKS, index, title=title, link_url=url, link_text=title, icon_name=icon)

    index = 0
    copyright_text = get("footer_copyright_text") or f"© {year} {get('company_name')}".strip()
    if copyright_text:
        index = add(FooterSectionType.LEGAL, index, title="Copyright", content=copyright_text)
    if certifications := get("footer_certifications_text"):
        index = add(FooterSectionType.LEGAL, index, title="Certifications", content=certifications)
    for key, title in (("footer_privacy_url", "Privacy Policy"), ("footer_terms_url", "Terms of Service")):
        if url := get(key):
            index = add(FooterSectionType.LEGAL, index, title=title, content="#", link_url=url, link_text=title)

    return items


class ContentAdmin:
    """Content management operations bound to a signed-in client."""

    def __init__(self, client: SiteClient) -> None:
        self._client = client

    def _token(self) -> str:
        return self._client._require_admin_session().access_token

    async def _refresh_if_cached(self, resource_key: str) -> None:
        if self._client.store.updated_at(resource_key) is not None:
            await self._client.refresh(resource_key)

    # ------------------------------------------------------------------
    # Audit
    # ------------------------------------------------------------------

    async def log_activity(self, action: str, resource: str | None = None) -> None:
        """Record an admin action. Never raises."""
        session = self._client.admin_session
        if session is None:
            return
        entry = ActivityLogEntry(user_id=session.user_id, user_email=session.email, action=action, resource=resource)
        try:
            await _activity_api.insert_activity(
                self._client._require_transport(),
                entry,
                access_token=session.access_token,
            )
        except SiteError:
            _logger.debug("Activity log insert failed for %s", action, exc_info=True)

    # ------------------------------------------------------------------
    # Site settings
    # ------------------------------------------------------------------

    async def update_setting(
        self,
        key: str,
        value: str | None,
        *,
        setting_type: str = "text",
        description: str | None = None,
    ) -> SiteSetting:
        """Create or overwrite one setting and refresh the settings cache."""
        token = self._token()
        saved = await _settings_api.upsert_setting(
            self._client._require_transport(),
            key=key,
            value=value,
            access_token=token,
            setting_type=setting_type,
            description=description,
        )
        await self.log_activity("update_setting", key)
        await self._client.refresh(RESOURCE_SITE_SETTINGS)
        await self._refresh_if_cached(feature_key(key))
        if key.startswith(_PAGE_THEME_PREFIX):
            await self._refresh_if_cached(page_theme_key(key[len(_PAGE_THEME_PREFIX) :]))
        if key in HERO_DEFAULT_SETTING_KEYS:
            await self._refresh_cached_banners()
        return saved

    async def _refresh_cached_banners(self) -> None:
        # Default banners carry the hero_default_* styling.
        for resource_key in sorted(self._client.store.stamps()):
            if resource_key.startswith(_HERO_BANNER_PREFIX):
                await self._client.refresh(resource_key)

    async def remove_logo(self) -> SiteSetting:
        return await self.update_setting("logo_url", None)

    async def upload_logo(self, filename: str, content: bytes, *, content_type: str | None = None) -> SiteSetting:
        """Upload a logo image and point ``logo_url`` at it."""
        content_type = _media_api.guess_content_type(filename, content_type)
        if not content_type.startswith("image/"):
            raise ValueError(f"Logo must be an image, got {content_type}")
        uploaded = await self.upload_media(filename, content, content_type=content_type, stem="logo")
        return await self.update_setting("logo_url", self.media_url(uploaded.name))

    async def sync_footer_from_settings(self, *, year: int | None = None) -> list[FooterItem]:
        """Rebuild the settings-managed footer sections from current settings.

        Rows of those sections are replaced wholesale; other sections are
        left untouched.
        """
        token = self._token()
        transport = self._client._require_transport()
        settings = settings_to_snapshot(await _settings_api.fetch_site_settings(transport))
        items = build_footer_from_settings(settings, year=year or datetime.datetime.now(datetime.UTC).year)
        saved = await _footer_api.replace_sections(transport, SETTINGS_FOOTER_SECTIONS, items, access_token=token)
        await self.log_activity("sync_footer", "footer_content")
        await self._refresh_footer(*SETTINGS_FOOTER_SECTIONS)
        return saved

    # ------------------------------------------------------------------
    # Footer
    # ------------------------------------------------------------------

    async def _refresh_footer(self, *sections: FooterSectionType) -> None:
        await self._client.refresh(RESOURCE_FOOTER)
        for section in sections:
            await self._client.refresh(footer_section_key(section.value))

    async def list_footer_items(self, section: FooterSectionType | str) -> list[FooterItem]:
        """Every row of *section*, inactive ones included."""
        return await _footer_api.fetch_footer_items(
            self._client._require_transport(),
            section=FooterSectionType(section),
            active_only=False,
            access_token=self._token(),
        )

    async def save_footer_item(self, item: FooterItem) -> FooterItem:
        """Update *item*, or append it to the end of its section when new."""
        token = self._token()
        transport = self._client._require_transport()
        if item.id:
            saved = await _footer_api.update_footer_item(transport, item, access_token=token)
        else:
            existing = await self.list_footer_items(item.section_type)
            next_index = max((row.order_index for row in existing), default=-1) + 1
            item = item.model_copy(update={"order_index": next_index})
            saved = await _footer_api.insert_footer_item(transport, item, access_token=token)
        await self._refresh_footer(saved.section_type)
        return saved

    async def delete_footer_item(self, item_id: str, *, section: FooterSectionType | str) -> None:
        await _footer_api.delete_footer_item(self._client._require_transport(), item_id, access_token=self._token())
        await self._refresh_footer(FooterSectionType(section))

    async def move_footer_item(
        self,
        item_id: str,
        *,
        section: FooterSectionType | str,
        direction: Literal["up", "down"],
    ) -> None:
        """Swap an item's position with its neighbour in the section."""
        items = await self.list_footer_items(section)
        position = next((i for i, row in enumerate(items) if row.id == item_id), None)
        if position is None:
            raise BackendApiError(f"footer item {item_id} not found in {section}", table="footer_content")
        other = position - 1 if direction == "up" else position + 1
        if other < 0 or other >= len(items):
            return
        token = self._token()
        transport = self._client._require_transport()
        first, second = items[position], items[other]
        await _footer_api.update_footer_item(
            transport, first.model_copy(update={"order_index": second.order_index}), access_token=token
        )
        await _footer_api.update_footer_item(
            transport, second.model_copy(update={"order_index": first.order_index}), access_token=token
        )
        await self._refresh_footer(FooterSectionType(section))

    # ------------------------------------------------------------------
    # Hero banners
    # ------------------------------------------------------------------

    async def save_banner(self, page_name: str, banner: HeroBanner) -> HeroBanner:
        """Create or replace the banner of *page_name*."""
        banner = banner.model_copy(update={"page_name": page_name})
        saved = await _banner_api.upsert_hero_banner(
            self._client._require_transport(),
            banner,
            access_token=self._token(),
        )
        await self._client.refresh(hero_banner_key(page_name))
        return saved

    async def delete_banner(self, page_name: str) -> None:
        await _banner_api.delete_hero_banner(
            self._client._require_transport(),
            page_name,
            access_token=self._token(),
        )
        await self._client.refresh(hero_banner_key(page_name))

    async def upload_banner_media(
        self,
        page_name: str,
        filename: str,
        content: bytes,
        *,
        content_type: str | None = None,
    ) -> HeroBanner:
        """Upload an image or video and make it the banner media of *page_name*.

        A page without a banner row gets one with default texts.
        """
        content_type = _media_api.guess_content_type(filename, content_type)
        if not content_type.startswith(("image/", "video/")):
            raise ValueError(f"Banner media must be an image or a video, got {content_type}")
        uploaded = await self.upload_media(filename, content, content_type=content_type, stem=page_name)
        current = await _banner_api.fetch_hero_banner(self._client._require_transport(), page_name)
        banner = (current or HeroBanner(page_name=page_name)).model_copy(
            update={"media_url": self.media_url(uploaded.name), "media_type": uploaded.media_type}
        )
        return await self.save_banner(page_name, banner)

    # ------------------------------------------------------------------
    # Media library
    # ------------------------------------------------------------------

    def media_url(self, name: str) -> str:
        """Public URL of an object in the media bucket."""
        return _media_api.public_url(self._client.config.base_url, name)

    async def upload_media(
        self,
        filename: str,
        content: bytes,
        *,
        content_type: str | None = None,
        stem: str = "media",
    ) -> MediaObject:
        """Store a file in the media bucket under a fresh ``<stem>-<timestamp>`` name."""
        if not content:
            raise ValueError(f"{filename} is empty")
        name = _media_api.object_name(stem, filename, timestamp_ms=_now_ms())
        uploaded = await _media_api.upload_object(
            self._client._require_transport(),
            name,
            content,
            content_type=_media_api.guess_content_type(filename, content_type),
            access_token=self._token(),
        )
        await self.log_activity("upload_media", name)
        return uploaded

    async def list_media(self, *, prefix: str = "", limit: int = 100, offset: int = 0) -> list[MediaObject]:
        """Files in the media bucket, newest first."""
        return await _media_api.list_objects(
            self._client._require_transport(),
            access_token=self._token(),
            prefix=prefix,
            limit=limit,
            offset=offset,
        )

    async def delete_media(self, *names: str) -> None:
        """Delete files from the media bucket. Banners or the logo still
        pointing at them are left as they are."""
        if not names:
            return
        await _media_api.delete_objects(self._client._require_transport(), names, access_token=self._token())
        await self.log_activity("delete_media", ",".join(names))

    # ------------------------------------------------------------------
    # Job openings
    # ------------------------------------------------------------------

    async def list_job_openings(self) -> list[JobOpening]:
        """All openings, inactive ones included, newest first."""
        return await _jobs_api.fetch_job_openings(
            self._client._require_transport(),
            active_only=False,
            access_token=self._token(),
        )

    async def save_job_opening(self, job: JobOpening) -> JobOpening:
        saved = await _jobs_api.save_job_opening(self._client._require_transport(), job, access_token=self._token())
        await self._client.refresh(RESOURCE_JOB_OPENINGS)
        return saved

    async def set_job_active(self, job_id: str, active: bool) -> JobOpening:
        saved = await _jobs_api.set_job_active(
            self._client._require_transport(),
            job_id,
            active,
            access_token=self._token(),
        )
        await self._client.refresh(RESOURCE_JOB_OPENINGS)
        return saved

    async def delete_job_opening(self, job_id: str) -> None:
        await _jobs_api.delete_job_opening(self._client._require_transport(), job_id, access_token=self._token())
        await self._client.refresh(RESOURCE_JOB_OPENINGS)

    # ------------------------------------------------------------------
    # Testimonials
    # ------------------------------------------------------------------

    async def list_testimonials(self) -> list[Testimonial]:
        return await _testimonials_api.fetch_testimonials(
            self._client._require_transport(),
            limit=None,
            active_only=False,
            access_token=self._token(),
        )

    async def save_testimonial(self, item: Testimonial) -> Testimonial:
        saved = await _testimonials_api.save_testimonial(
            self._client._require_transport(),
            item,
            access_token=self._token(),
        )
        await self._client.refresh(RESOURCE_TESTIMONIALS)
        return saved

    async def delete_testimonial(self, item_id: str) -> None:
        await _testimonials_api.delete_testimonial(
            self._client._require_transport(),
            item_id,
            access_token=self._token(),
        )
        await self._client.refresh(RESOURCE_TESTIMONIALS)

    # ------------------------------------------------------------------
    # Contact submissions
    # ------------------------------------------------------------------

    async def list_submissions(
        self,
        *,
        status: SubmissionStatus | None = None,
        search: str = "",
        page: int = 1,
        page_size: int = 10,
    ) -> list[ContactSubmission]:
        rows = await _contact_api.list_submissions(
            self._client._require_transport(),
            access_token=self._token(),
            status=status,
            search=search,
            page=page,
            page_size=page_size,
        )
        await self.log_activity("view_contact_submissions", "contact_submissions")
        return rows

    async def update_submission_status(self, submission_id: str, status: SubmissionStatus) -> ContactSubmission:
        saved = await _contact_api.update_submission_status(
            self._client._require_transport(),
            submission_id,
            status,
            access_token=self._token(),
        )
        await self.log_activity("status_update", f"contact_submission:{submission_id}")
        return saved
