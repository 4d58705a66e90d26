"""``testimonials`` table."""

from __future__ import annotations

from typing import Any

from vacsite._api._common import delete_rows, eq, insert_rows, order, select_rows, update_rows
from vacsite._constants import TABLE_TESTIMONIALS
from vacsite._transport import Transport
from vacsite.exceptions import BackendApiError
from vacsite.models.testimonial import Testimonial

PUBLIC_COLUMNS = "id,name,role,company,content,rating,order_index,is_active"


def _row_for_write(item: Testimonial) -> dict[str, Any]:
    return {
        "name": item.name,
        "role": item.position or None,
        "company": item.company or None,
        "content": item.content,
        "rating": item.rating,
        "order_index": item.order_index,
        "is_active": item.is_active,
    }


async def fetch_testimonials(
    transport: Transport,
    *,
    limit: int | None = 3,
    active_only: bool = True,
    access_token: str | None = None,
) -> list[Testimonial]:
    """Fetch testimonials ordered by ``order_index``."""
    filters = {"is_active": eq(True)} if active_only else None
    rows = await select_rows(
        transport,
        TABLE_TESTIMONIALS,
        columns=PUBLIC_COLUMNS,
        filters=filters,
        order_by=order(("order_index", True)),
        limit=limit,
        access_token=access_token,
    )
    return [Testimonial.model_validate(row) for row in rows]


async def save_testimonial(transport: Transport, item: Testimonial, *, access_token: str) -> Testimonial:
    """Insert when *item* has no id, update otherwise."""
    if item.id:
        saved = await update_rows(
            transport,
            TABLE_TESTIMONIALS,
            _row_for_write(item),
            filters={"id": eq(item.id)},
            access_token=access_token,
        )
    else:
        saved = await insert_rows(transport, TABLE_TESTIMONIALS, [_row_for_write(item)], access_token=access_token)
    if not saved:
        raise BackendApiError(f"{TABLE_TESTIMONIALS} save returned no row", table=TABLE_TESTIMONIALS)
    return Testimonial.model_validate(saved[0])


async def delete_testimonial(transport: Transport, item_id: str, *, access_token: str) -> None:
    await delete_rows(transport, TABLE_TESTIMONIALS, filters={"id": eq(item_id)}, access_token=access_token)
