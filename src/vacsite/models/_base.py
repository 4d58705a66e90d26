"""Base model for backend rows.

Every row model inherits from :class:`SiteRowModel` which provides:

* ``null`` columns dropped before validation so the field default is
  used instead (the backend returns ``null`` for unset nullable columns).
* A ``raw`` dict that captures the original row.
* :meth:`SiteRowModel.to_cache` for the JSON-safe shape kept in the local
  cache.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SiteRowModel(BaseModel):
    """Base for rows read from the hosted backend."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original row as returned by the backend."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        """Drop ``None`` columns and stash the raw row."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Keep an explicit raw= from the caller; otherwise stash the row.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned

    def to_cache(self) -> dict[str, Any]:
        """JSON-safe dict without ``raw``."""
        return self.model_dump(mode="json")
