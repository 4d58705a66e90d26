"""Media storage bucket: uploaded logos, banner images and videos.

Objects live in the backend's storage API rather than a table. Reads of
uploaded files go through their public URL; listing, uploading and
deleting need an admin token.
"""

from __future__ import annotations

import mimetypes
from collections.abc import Iterable
from pathlib import PurePosixPath
from urllib.parse import quote

from vacsite._api._common import raise_for_error
from vacsite._constants import MEDIA_BUCKET, STORAGE_PREFIX
from vacsite._transport import Transport
from vacsite.models.media import MediaObject

_PLACEHOLDER = ".emptyFolderPlaceholder"
_FALLBACK_CONTENT_TYPE = "application/octet-stream"


def guess_content_type(filename: str, content_type: str | None = None) -> str:
    """*content_type* if given, otherwise a guess from the file extension."""
    if content_type:
        return content_type
    return mimetypes.guess_type(filename)[0] or _FALLBACK_CONTENT_TYPE


def object_name(stem: str, filename: str, *, timestamp_ms: int) -> str:
    """Unique object name ``<stem>-<timestamp>.<ext>`` for an uploaded file."""
    suffix = PurePosixPath(filename).suffix.lower()
    return f"{stem}-{timestamp_ms}{suffix}"


def public_url(base_url: str, name: str, *, bucket: str = MEDIA_BUCKET) -> str:
    """URL the public site uses to display object *name*."""
    return f"{base_url}{STORAGE_PREFIX}/public/{bucket}/{quote(name)}"


async def upload_object(
    transport: Transport,
    name: str,
    content: bytes,
    *,
    content_type: str,
    access_token: str,
    bucket: str = MEDIA_BUCKET,
    upsert: bool = False,
) -> MediaObject:
    """Store *content* as object *name*; an existing name is an error unless *upsert*."""
    response = await transport.request(
        "POST",
        f"{STORAGE_PREFIX}/{bucket}/{quote(name)}",
        content=content,
        headers={
            "content-type": content_type,
            "cache-control": "max-age=3600",
            "x-upsert": "true" if upsert else "false",
        },
        access_token=access_token,
    )
    raise_for_error(bucket, response)
    return MediaObject(name=name, size=len(content), mimetype=content_type)


async def list_objects(
    transport: Transport,
    *,
    access_token: str,
    prefix: str = "",
    limit: int = 100,
    offset: int = 0,
    bucket: str = MEDIA_BUCKET,
) -> list[MediaObject]:
    """Objects under *prefix*, newest first. Folder entries are skipped."""
    response = await transport.request(
        "POST",
        f"{STORAGE_PREFIX}/list/{bucket}",
        json_body={
            "prefix": prefix,
            "limit": limit,
            "offset": offset,
            "sortBy": {"column": "created_at", "order": "desc"},
        },
        access_token=access_token,
    )
    raise_for_error(bucket, response)
    entries = response.data if isinstance(response.data, list) else []
    return [
        MediaObject.model_validate(entry)
        for entry in entries
        if isinstance(entry, dict) and entry.get("id") and entry.get("name") != _PLACEHOLDER
    ]


async def delete_objects(
    transport: Transport,
    names: Iterable[str],
    *,
    access_token: str,
    bucket: str = MEDIA_BUCKET,
) -> None:
    names = list(names)
    if not names:
        return
    response = await transport.request(
        "DELETE",
        f"{STORAGE_PREFIX}/{bucket}",
        json_body={"prefixes": names},
        access_token=access_token,
    )
    raise_for_error(bucket, response)
