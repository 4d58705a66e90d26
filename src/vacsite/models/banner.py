"""Hero banner rows."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field, field_validator

from vacsite.models._base import SiteRowModel

DEFAULT_OVERLAY_OPACITY = 0.7
DEFAULT_TEXT_COLOR = "white"


class MediaType(StrEnum):
    IMAGE = "image"
    VIDEO = "video"


class HeroBanner(SiteRowModel):
    """One row of the ``hero_banners`` table (one banner per page)."""

    id: str | None = None
    page_name: str = Field(min_length=1)
    title: str = "Welcome"
    subtitle: str | None = None
    media_type: MediaType = MediaType.IMAGE
    media_url: str | None = None
    overlay_opacity: float = DEFAULT_OVERLAY_OPACITY
    """Overlay opacity, clamped to ``0..1``."""
    text_color: str = DEFAULT_TEXT_COLOR
    cta_text: str | None = None
    cta_link: str | None = None

    @field_validator("overlay_opacity", mode="before")
    @classmethod
    def _clamp_opacity(cls, value: object) -> float:
        try:
            opacity = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return DEFAULT_OVERLAY_OPACITY
        if opacity != opacity:  # NaN
            return DEFAULT_OVERLAY_OPACITY
        return min(1.0, max(0.0, opacity))

    @field_validator("media_type", mode="before")
    @classmethod
    def _unknown_media_is_image(cls, value: object) -> object:
        if isinstance(value, str) and value.lower() not in {m.value for m in MediaType}:
            return MediaType.IMAGE
        return value.lower() if isinstance(value, str) else value
