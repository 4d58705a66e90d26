"""Testimonial rows."""

from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator

from vacsite.models._base import SiteRowModel


class Testimonial(SiteRowModel):
    """One row of the ``testimonials`` table."""

    id: str | None = None
    name: str
    position: str = Field(default="", validation_alias=AliasChoices("position", "role"))
    """Job title of the person quoted (``role`` column)."""
    company: str = ""
    content: str
    rating: int = 5
    project: str = ""
    order_index: int = 0
    is_active: bool = True

    @field_validator("rating", mode="before")
    @classmethod
    def _clamp_rating(cls, value: object) -> int:
        try:
            rating = int(value)  # type: ignore[call-overload]
        except (TypeError, ValueError):
            return 5
        return min(5, max(1, rating))
