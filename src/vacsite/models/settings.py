"""Site setting rows."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import Field

from vacsite.models._base import SiteRowModel

SettingsSnapshot = dict[str, str]
"""Mapping of ``setting_key`` to ``setting_value``."""


class SiteSetting(SiteRowModel):
    """One row of the ``site_settings`` table."""

    id: str | None = None
    setting_key: str = Field(min_length=1)
    setting_value: str | None = None
    setting_type: str = "text"
    description: str | None = None
    updated_at: str | None = None


def settings_to_snapshot(rows: Iterable[SiteSetting]) -> SettingsSnapshot:
    """Compact rows into a key/value map, skipping unset values."""
    return {row.setting_key: row.setting_value for row in rows if row.setting_value is not None}


def setting_bool(snapshot: SettingsSnapshot, key: str, default: bool = False) -> bool:
    value = snapshot.get(key)
    if value is None:
        return default
    return value.strip().lower() == "true"
