"""``hero_banners`` table: at most one banner per page."""

from __future__ import annotations

from vacsite._api._common import delete_rows, eq, select_single, upsert_rows
from vacsite._constants import TABLE_HERO_BANNERS
from vacsite._transport import Transport
from vacsite.exceptions import BackendApiError
from vacsite.models.banner import HeroBanner

_WRITABLE = (
    "page_name",
    "title",
    "subtitle",
    "media_type",
    "media_url",
    "overlay_opacity",
    "text_color",
    "cta_text",
    "cta_link",
)


async def fetch_hero_banner(transport: Transport, page_name: str) -> HeroBanner | None:
    """Fetch the banner for *page_name*; ``None`` when none is configured."""
    row = await select_single(transport, TABLE_HERO_BANNERS, filters={"page_name": eq(page_name)})
    return HeroBanner.model_validate(row) if row is not None else None


async def upsert_hero_banner(transport: Transport, banner: HeroBanner, *, access_token: str) -> HeroBanner:
    data = banner.to_cache()
    row = {key: data.get(key) for key in _WRITABLE}
    saved = await upsert_rows(
        transport,
        TABLE_HERO_BANNERS,
        [row],
        on_conflict="page_name",
        access_token=access_token,
    )
    if not saved:
        raise BackendApiError(
            f"{TABLE_HERO_BANNERS} upsert for page {banner.page_name!r} returned no row",
            table=TABLE_HERO_BANNERS,
        )
    return HeroBanner.model_validate(saved[0])


async def delete_hero_banner(transport: Transport, page_name: str, *, access_token: str) -> None:
    await delete_rows(transport, TABLE_HERO_BANNERS, filters={"page_name": eq(page_name)}, access_token=access_token)
