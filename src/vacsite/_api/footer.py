"""``footer_content`` table: ordered items grouped by section type."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from vacsite._api._common import delete_rows, eq, in_, insert_rows, order, select_rows, update_rows
from vacsite._constants import TABLE_FOOTER_CONTENT
from vacsite._transport import Transport
from vacsite.exceptions import BackendApiError
from vacsite.models.footer import FooterItem, FooterSectionType

_WRITABLE = ("section_type", "title", "content", "link_url", "link_text", "icon_name", "order_index", "is_active")


def _row_for_write(item: FooterItem) -> dict[str, Any]:
    data = item.to_cache()
    return {key: data.get(key) for key in _WRITABLE}


async def fetch_footer_items(
    transport: Transport,
    *,
    section: FooterSectionType | None = None,
    active_only: bool = True,
    access_token: str | None = None,
) -> list[FooterItem]:
    """Fetch footer rows ordered by ``order_index``."""
    filters: dict[str, str] = {}
    if active_only:
        filters["is_active"] = eq(True)
    if section is not None:
        filters["section_type"] = eq(section.value)
    rows = await select_rows(
        transport,
        TABLE_FOOTER_CONTENT,
        filters=filters,
        order_by=order(("order_index", True)),
        access_token=access_token,
    )
    return [FooterItem.model_validate(row) for row in rows]


async def insert_footer_item(transport: Transport, item: FooterItem, *, access_token: str) -> FooterItem:
    saved = await insert_rows(transport, TABLE_FOOTER_CONTENT, [_row_for_write(item)], access_token=access_token)
    if not saved:
        raise BackendApiError(f"{TABLE_FOOTER_CONTENT} insert returned no row", table=TABLE_FOOTER_CONTENT)
    return FooterItem.model_validate(saved[0])


async def update_footer_item(transport: Transport, item: FooterItem, *, access_token: str) -> FooterItem:
    if not item.id:
        raise ValueError("footer item update needs an id")
    saved = await update_rows(
        transport,
        TABLE_FOOTER_CONTENT,
        _row_for_write(item),
        filters={"id": eq(item.id)},
        access_token=access_token,
    )
    if not saved:
        raise BackendApiError(f"{TABLE_FOOTER_CONTENT} row {item.id} not updated", table=TABLE_FOOTER_CONTENT)
    return FooterItem.model_validate(saved[0])


async def delete_footer_item(transport: Transport, item_id: str, *, access_token: str) -> None:
    await delete_rows(transport, TABLE_FOOTER_CONTENT, filters={"id": eq(item_id)}, access_token=access_token)


async def replace_sections(
    transport: Transport,
    sections: Iterable[FooterSectionType],
    items: list[FooterItem],
    *,
    access_token: str,
) -> list[FooterItem]:
    """Delete every row of *sections*, then insert *items* in their place."""
    section_values = [section.value for section in sections]
    await delete_rows(
        transport,
        TABLE_FOOTER_CONTENT,
        filters={"section_type": in_(section_values)},
        access_token=access_token,
    )
    if not items:
        return []
    saved = await insert_rows(
        transport,
        TABLE_FOOTER_CONTENT,
        [_row_for_write(item) for item in items],
        access_token=access_token,
    )
    return [FooterItem.model_validate(row) for row in saved]
