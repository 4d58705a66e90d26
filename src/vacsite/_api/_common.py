"""Shared helpers for the backend table modules.

This module centralizes the most repeated patterns:
- building PostgREST filter and ordering parameters
- mapping backend error bodies to the exception hierarchy
- selecting, inserting, upserting, updating and deleting rows

It is internal to vacsite and may change at any time.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from vacsite._constants import (
    DUPLICATE_CODES,
    NOT_FOUND_CODES,
    PERMISSION_CODES,
    REFERENCED_CODES,
    REST_PREFIX,
    SESSION_EXPIRED_CODES,
)
from vacsite._transport import RestResponse, Transport
from vacsite.exceptions import (
    BackendApiError,
    BackendNotFoundError,
    BackendPermissionError,
    BackendTransportError,
    DuplicateRowError,
    ReferencedRowError,
    SessionExpiredError,
)

_SINGLE_OBJECT = "application/vnd.pgrst.object+json"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def eq(value: Any) -> str:
    """``column=eq.<value>`` filter operand."""
    if value is None:
        return "is.null"
    return f"eq.{_format_value(value)}"


def in_(values: Iterable[Any]) -> str:
    """``column=in.(a,b)`` filter operand."""
    quoted = []
    for value in values:
        text = _format_value(value)
        if any(ch in text for ch in ',()"'):
            text = '"' + text.replace('"', '\\"') + '"'
        quoted.append(text)
    return f"in.({','.join(quoted)})"


def order(*columns: tuple[str, bool]) -> str:
    """``order=`` parameter from ``(column, ascending)`` pairs."""
    return ",".join(f"{column}.{'asc' if ascending else 'desc'}" for column, ascending in columns)


def _error_fields(data: Any) -> tuple[str, str]:
    if isinstance(data, Mapping):
        code = str(data.get("code") or data.get("error_code") or data.get("error") or "")
        message = str(data.get("message") or data.get("msg") or data.get("error_description") or "")
        return code, message
    return "", str(data)[:200]


def raise_for_error(table: str, response: RestResponse) -> None:
    """Raise the mapped exception for a non-2xx reply, do nothing otherwise."""
    if response.ok:
        return
    code, message = _error_fields(response.data)
    text = f"{table} failed: code={code or response.status} message={message}"
    kwargs: dict[str, Any] = {"code": code, "table": table, "status_code": response.status}

    if code in NOT_FOUND_CODES:
        raise BackendNotFoundError(text, **kwargs)
    if code in PERMISSION_CODES or "permission" in message.lower() or "row-level security" in message.lower():
        raise BackendPermissionError(text, **kwargs)
    if code in DUPLICATE_CODES:
        raise DuplicateRowError(text, **kwargs)
    if code in REFERENCED_CODES:
        raise ReferencedRowError(text, **kwargs)
    if code in SESSION_EXPIRED_CODES or "jwt" in message.lower():
        raise SessionExpiredError(text, **kwargs)
    if not code and response.status >= 500:
        raise BackendTransportError(text, status_code=response.status, table=table)
    raise BackendApiError(text, **kwargs)


def _rows(table: str, data: Any) -> list[dict[str, Any]]:
    if data is None:
        return []
    if isinstance(data, list):
        return [row for row in data if isinstance(row, dict)]
    if isinstance(data, dict):
        return [data]
    raise BackendApiError(f"{table} returned unexpected payload type {type(data).__name__}", table=table)


async def select_rows(
    transport: Transport,
    table: str,
    *,
    filters: Mapping[str, str] | None = None,
    columns: str = "*",
    order_by: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
    access_token: str | None = None,
) -> list[dict[str, Any]]:
    """Read rows; an empty list is a valid answer."""
    params: dict[str, str] = {"select": columns}
    params.update(filters or {})
    if order_by:
        params["order"] = order_by
    if limit is not None:
        params["limit"] = str(limit)
    if offset:
        params["offset"] = str(offset)
    response = await transport.request("GET", f"{REST_PREFIX}/{table}", params=params, access_token=access_token)
    raise_for_error(table, response)
    return _rows(table, response.data)


async def select_single(
    transport: Transport,
    table: str,
    *,
    filters: Mapping[str, str],
    columns: str = "*",
    access_token: str | None = None,
) -> dict[str, Any] | None:
    """Read exactly one row; ``None`` when the backend reports no match."""
    params: dict[str, str] = {"select": columns}
    params.update(filters)
    response = await transport.request(
        "GET",
        f"{REST_PREFIX}/{table}",
        params=params,
        headers={"accept": _SINGLE_OBJECT},
        access_token=access_token,
    )
    try:
        raise_for_error(table, response)
    except BackendNotFoundError:
        return None
    rows = _rows(table, response.data)
    return rows[0] if rows else None


async def insert_rows(
    transport: Transport,
    table: str,
    rows: list[dict[str, Any]],
    *,
    access_token: str | None = None,
    returning: bool = True,
) -> list[dict[str, Any]]:
    response = await transport.request(
        "POST",
        f"{REST_PREFIX}/{table}",
        json_body=rows,
        headers={"prefer": "return=representation" if returning else "return=minimal"},
        access_token=access_token,
    )
    raise_for_error(table, response)
    return _rows(table, response.data)


async def upsert_rows(
    transport: Transport,
    table: str,
    rows: list[dict[str, Any]],
    *,
    on_conflict: str,
    access_token: str | None = None,
) -> list[dict[str, Any]]:
    response = await transport.request(
        "POST",
        f"{REST_PREFIX}/{table}",
        params={"on_conflict": on_conflict},
        json_body=rows,
        headers={"prefer": "resolution=merge-duplicates,return=representation"},
        access_token=access_token,
    )
    raise_for_error(table, response)
    return _rows(table, response.data)


async def update_rows(
    transport: Transport,
    table: str,
    patch: dict[str, Any],
    *,
    filters: Mapping[str, str],
    access_token: str | None = None,
) -> list[dict[str, Any]]:
    if not filters:
        raise ValueError("update without filters would touch every row")
    response = await transport.request(
        "PATCH",
        f"{REST_PREFIX}/{table}",
        params=dict(filters),
        json_body=patch,
        headers={"prefer": "return=representation"},
        access_token=access_token,
    )
    raise_for_error(table, response)
    return _rows(table, response.data)


async def delete_rows(
    transport: Transport,
    table: str,
    *,
    filters: Mapping[str, str],
    access_token: str | None = None,
) -> None:
    if not filters:
        raise ValueError("delete without filters would touch every row")
    response = await transport.request(
        "DELETE",
        f"{REST_PREFIX}/{table}",
        params=dict(filters),
        access_token=access_token,
    )
    raise_for_error(table, response)
