"""``site_settings`` table: one row per setting key."""

from __future__ import annotations

from collections.abc import Iterable

from vacsite._api._common import eq, in_, select_rows, select_single, upsert_rows
from vacsite._constants import TABLE_SITE_SETTINGS
from vacsite._transport import Transport
from vacsite.exceptions import BackendApiError
from vacsite.models.settings import SiteSetting


async def fetch_site_settings(
    transport: Transport,
    *,
    keys: Iterable[str] | None = None,
) -> list[SiteSetting]:
    """Fetch all settings, or only *keys* when given."""
    filters = {"setting_key": in_(keys)} if keys is not None else None
    rows = await select_rows(transport, TABLE_SITE_SETTINGS, filters=filters, order_by="setting_key.asc")
    return [SiteSetting.model_validate(row) for row in rows]


async def fetch_setting(transport: Transport, key: str) -> SiteSetting | None:
    """Fetch one setting; ``None`` when the key has never been saved."""
    row = await select_single(transport, TABLE_SITE_SETTINGS, filters={"setting_key": eq(key)})
    return SiteSetting.model_validate(row) if row is not None else None


async def upsert_setting(
    transport: Transport,
    *,
    key: str,
    value: str | None,
    access_token: str,
    setting_type: str = "text",
    description: str | None = None,
) -> SiteSetting:
    """Create or overwrite the row for *key*."""
    row = {
        "setting_key": key,
        "setting_value": value,
        "setting_type": setting_type,
        "description": description if description is not None else key.replace("_", " "),
    }
    saved = await upsert_rows(
        transport,
        TABLE_SITE_SETTINGS,
        [row],
        on_conflict="setting_key",
        access_token=access_token,
    )
    if not saved:
        raise BackendApiError(f"{TABLE_SITE_SETTINGS} upsert of {key!r} returned no row", table=TABLE_SITE_SETTINGS)
    return SiteSetting.model_validate(saved[0])
