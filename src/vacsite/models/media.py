"""Objects in the site's media bucket."""

from __future__ import annotations

from typing import Any

from pydantic import model_validator

from vacsite.models._base import SiteRowModel
from vacsite.models.banner import MediaType


def media_type_for(content_type: str | None) -> MediaType:
    """Banner media type for a MIME type; anything not ``video/*`` is an image."""
    if content_type and content_type.lower().startswith("video/"):
        return MediaType.VIDEO
    return MediaType.IMAGE


class MediaObject(SiteRowModel):
    """One entry of a storage bucket listing.

    ``size`` and ``mimetype`` are lifted out of the listing's nested
    ``metadata`` object.
    """

    name: str
    id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    size: int = 0
    mimetype: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_metadata(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        metadata = values.get("metadata")
        if not isinstance(metadata, dict):
            return values
        lifted = dict(values)
        for key in ("size", "mimetype"):
            if lifted.get(key) is None and metadata.get(key) is not None:
                lifted[key] = metadata[key]
        return lifted

    @property
    def media_type(self) -> MediaType:
        return media_type_for(self.mimetype)
