"""Read-through loaders for every cached resource of the site.

Each factory wires a backend fetch, the transform into the cached shape
and the fallback default into a :class:`~vacsite.cache.ReadThroughLoader`.
Seeding of empty answers is decided here, per resource:

* ``footer:quick_links`` and the ``quick_links`` group of ``footer`` fall
  back to :data:`~vacsite.defaults.DEFAULT_QUICK_LINKS` when the backend
  has no rows for the section.
* ``testimonials`` falls back to the first demo testimonials when no
  active testimonial exists.

Every other resource stores an empty answer as-is.
"""

from __future__ import annotations

import logging
from typing import Any

from vacsite._api.footer import fetch_footer_items
from vacsite._api.hero_banners import fetch_hero_banner
from vacsite._api.job_openings import fetch_job_openings
from vacsite._api.site_settings import fetch_setting, fetch_site_settings
from vacsite._api.testimonials import fetch_testimonials
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
from vacsite._transport import Transport
from vacsite.cache.loader import ReadThroughLoader
from vacsite.cache.store import DurableStore
from vacsite.defaults import (
    DEFAULT_QUICK_LINKS,
    DEFAULT_SITE_SETTINGS,
    DEMO_TESTIMONIALS,
    FALLBACK_JOB_OPENINGS,
    TESTIMONIALS_SHOWN,
    default_hero_banner,
)
from vacsite.exceptions import SiteError
from vacsite.models.banner import HeroBanner
from vacsite.models.footer import FooterItem, FooterSectionType
from vacsite.models.job import JobOpening
from vacsite.models.settings import SettingsSnapshot, SiteSetting, settings_to_snapshot
from vacsite.models.testimonial import Testimonial

_logger = logging.getLogger(__name__)

PAGE_THEMES = frozenset({"light", "dark"})

FooterSnapshot = dict[str, list[dict[str, Any]]]


# ------------------------------------------------------------------
# Shape checks for cached snapshots
# ------------------------------------------------------------------


def _is_str_map(value: Any) -> bool:
    return isinstance(value, dict) and all(isinstance(k, str) and isinstance(v, str) for k, v in value.items())


def _is_dict_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, dict) for item in value)


def _is_footer(value: Any) -> bool:
    return isinstance(value, dict) and all(_is_dict_list(items) for items in value.values())


def _is_banner(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("page_name"), str)


# ------------------------------------------------------------------
# Transforms
# ------------------------------------------------------------------


def _seed_quick_links(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return items or [dict(link) for link in DEFAULT_QUICK_LINKS]


def group_footer_items(items: list[FooterItem]) -> FooterSnapshot:
    """Group rows by section type, keeping their order within a section."""
    grouped: FooterSnapshot = {}
    for item in items:
        grouped.setdefault(item.section_type.value, []).append(item.to_cache())
    grouped[FooterSectionType.QUICK_LINKS.value] = _seed_quick_links(
        grouped.get(FooterSectionType.QUICK_LINKS.value, [])
    )
    return grouped


def _testimonials_snapshot(items: list[Testimonial]) -> list[dict[str, Any]]:
    if not items:
        return demo_testimonials()
    return [item.to_cache() for item in items]


def demo_testimonials() -> list[dict[str, Any]]:
    return [dict(item) for item in DEMO_TESTIMONIALS[:TESTIMONIALS_SHOWN]]


def cached_settings(store: DurableStore) -> SettingsSnapshot | None:
    """The cached ``site_settings`` snapshot, if it has the expected shape."""
    cached = store.load(RESOURCE_SITE_SETTINGS)
    return cached if _is_str_map(cached) else None


def _page_theme(setting: SiteSetting | None) -> str | None:
    if setting is None or setting.setting_value is None:
        return None
    theme = setting.setting_value.strip().lower()
    return theme if theme in PAGE_THEMES else None


# ------------------------------------------------------------------
# Loader factories
# ------------------------------------------------------------------


def site_settings_loader(
    transport: Transport,
    store: DurableStore,
) -> ReadThroughLoader[list[SiteSetting], SettingsSnapshot]:
    """``site_settings``: every setting as a key/value map."""
    return ReadThroughLoader(
        RESOURCE_SITE_SETTINGS,
        fetch=lambda: fetch_site_settings(transport),
        transform=settings_to_snapshot,
        default=DEFAULT_SITE_SETTINGS,
        store=store,
        is_valid=_is_str_map,
    )


def footer_loader(
    transport: Transport,
    store: DurableStore,
) -> ReadThroughLoader[list[FooterItem], FooterSnapshot]:
    """``footer``: active footer rows grouped by section type."""
    return ReadThroughLoader(
        RESOURCE_FOOTER,
        fetch=lambda: fetch_footer_items(transport),
        transform=group_footer_items,
        default=lambda: {FooterSectionType.QUICK_LINKS.value: _seed_quick_links([])},
        store=store,
        is_valid=_is_footer,
    )


def footer_section_loader(
    transport: Transport,
    store: DurableStore,
    section: FooterSectionType | str,
) -> ReadThroughLoader[list[FooterItem], list[dict[str, Any]]]:
    """``footer:<section>``: active rows of one section, in order.

    ``quick_links`` is seeded with the built-in links when empty.
    """
    section = FooterSectionType(section)
    seeded = section is FooterSectionType.QUICK_LINKS

    def transform(items: list[FooterItem]) -> list[dict[str, Any]]:
        rows = [item.to_cache() for item in items]
        return _seed_quick_links(rows) if seeded else rows

    return ReadThroughLoader(
        footer_section_key(section.value),
        fetch=lambda: fetch_footer_items(transport, section=section),
        transform=transform,
        default=lambda: _seed_quick_links([]) if seeded else [],
        store=store,
        is_valid=_is_dict_list,
    )


def hero_banner_loader(
    transport: Transport,
    store: DurableStore,
    page_name: str,
) -> ReadThroughLoader[tuple[HeroBanner | None, SettingsSnapshot | None], dict[str, Any]]:
    """``hero_banner:<page>``: the page's banner, or the default banner.

    A page without a banner row is a valid answer and resolves to the
    default banner. Its overlay and text colour come from the backend's
    ``hero_default_*`` settings, or from the cached settings when those
    cannot be read.
    """

    async def fetch() -> tuple[HeroBanner | None, SettingsSnapshot | None]:
        banner = await fetch_hero_banner(transport, page_name)
        if banner is not None:
            return banner, None
        try:
            rows = await fetch_site_settings(transport, keys=HERO_DEFAULT_SETTING_KEYS)
        except SiteError as exc:
            _logger.debug("Hero defaults unavailable, using cached settings: %s", exc)
            return None, cached_settings(store)
        return None, settings_to_snapshot(rows)

    def transform(answer: tuple[HeroBanner | None, SettingsSnapshot | None]) -> dict[str, Any]:
        banner, settings = answer
        if banner is None:
            return default_hero_banner(page_name, settings)
        return banner.to_cache()

    return ReadThroughLoader(
        hero_banner_key(page_name),
        fetch=fetch,
        transform=transform,
        default=lambda: default_hero_banner(page_name, cached_settings(store)),
        store=store,
        is_valid=_is_banner,
    )


def testimonials_loader(
    transport: Transport,
    store: DurableStore,
) -> ReadThroughLoader[list[Testimonial], list[dict[str, Any]]]:
    """``testimonials``: the first active testimonials, or demo ones."""
    return ReadThroughLoader(
        RESOURCE_TESTIMONIALS,
        fetch=lambda: fetch_testimonials(transport, limit=TESTIMONIALS_SHOWN),
        transform=_testimonials_snapshot,
        default=demo_testimonials,
        store=store,
        is_valid=_is_dict_list,
    )


def feature_loader(
    transport: Transport,
    store: DurableStore,
    setting_key: str,
) -> ReadThroughLoader[SiteSetting | None, bool]:
    """``feature:<setting_key>``: a boolean toggle, off unless ``"true"``."""

    def transform(setting: SiteSetting | None) -> bool:
        if setting is None or setting.setting_value is None:
            return False
        return setting.setting_value.strip().lower() == "true"

    return ReadThroughLoader(
        feature_key(setting_key),
        fetch=lambda: fetch_setting(transport, setting_key),
        transform=transform,
        default=False,
        store=store,
        is_valid=lambda value: isinstance(value, bool),
    )


def job_openings_loader(
    transport: Transport,
    store: DurableStore,
) -> ReadThroughLoader[list[JobOpening], list[dict[str, Any]]]:
    """``job_openings``: active openings, urgent first then newest."""
    return ReadThroughLoader(
        RESOURCE_JOB_OPENINGS,
        fetch=lambda: fetch_job_openings(transport),
        transform=lambda jobs: [job.to_cache() for job in jobs],
        default=FALLBACK_JOB_OPENINGS,
        store=store,
        is_valid=_is_dict_list,
    )


def page_theme_loader(
    transport: Transport,
    store: DurableStore,
    page_name: str,
) -> ReadThroughLoader[SiteSetting | None, str | None]:
    """``page_theme:<page>``: forced ``light``/``dark`` theme, or ``None``."""
    return ReadThroughLoader(
        page_theme_key(page_name),
        fetch=lambda: fetch_setting(transport, f"page_theme_{page_name}"),
        transform=_page_theme,
        default=None,
        store=store,
        is_valid=lambda value: value in PAGE_THEMES,
    )
