"""``job_openings`` table."""

from __future__ import annotations

from typing import Any

from vacsite._api._common import delete_rows, eq, insert_rows, order, select_rows, update_rows
from vacsite._constants import TABLE_JOB_OPENINGS
from vacsite._transport import Transport
from vacsite.exceptions import BackendApiError
from vacsite.models.job import JobOpening

_WRITABLE = (
    "title",
    "department",
    "location",
    "type",
    "experience",
    "skills",
    "description",
    "requirements",
    "is_urgent",
    "is_active",
)


def _row_for_write(job: JobOpening) -> dict[str, Any]:
    data = job.to_cache()
    return {key: data.get(key) for key in _WRITABLE}


async def fetch_job_openings(
    transport: Transport,
    *,
    active_only: bool = True,
    access_token: str | None = None,
) -> list[JobOpening]:
    """Public listing: active openings, urgent first, newest first.

    With ``active_only=False`` (admin listing) the order is newest first.
    """
    if active_only:
        filters: dict[str, str] | None = {"is_active": eq(True)}
        order_by = order(("is_urgent", False), ("created_at", False))
    else:
        filters = None
        order_by = order(("created_at", False))
    rows = await select_rows(
        transport,
        TABLE_JOB_OPENINGS,
        filters=filters,
        order_by=order_by,
        access_token=access_token,
    )
    return [JobOpening.model_validate(row) for row in rows]


async def save_job_opening(transport: Transport, job: JobOpening, *, access_token: str) -> JobOpening:
    """Insert when *job* has no id, update otherwise."""
    if job.id:
        saved = await update_rows(
            transport,
            TABLE_JOB_OPENINGS,
            _row_for_write(job),
            filters={"id": eq(job.id)},
            access_token=access_token,
        )
    else:
        saved = await insert_rows(transport, TABLE_JOB_OPENINGS, [_row_for_write(job)], access_token=access_token)
    if not saved:
        raise BackendApiError(f"{TABLE_JOB_OPENINGS} save returned no row", table=TABLE_JOB_OPENINGS)
    return JobOpening.model_validate(saved[0])


async def set_job_active(transport: Transport, job_id: str, active: bool, *, access_token: str) -> JobOpening:
    saved = await update_rows(
        transport,
        TABLE_JOB_OPENINGS,
        {"is_active": active},
        filters={"id": eq(job_id)},
        access_token=access_token,
    )
    if not saved:
        raise BackendApiError(f"{TABLE_JOB_OPENINGS} row {job_id} not updated", table=TABLE_JOB_OPENINGS)
    return JobOpening.model_validate(saved[0])


async def delete_job_opening(transport: Transport, job_id: str, *, access_token: str) -> None:
    await delete_rows(transport, TABLE_JOB_OPENINGS, filters={"id": eq(job_id)}, access_token=access_token)
