"""``admin_activity_logs`` table (write-only audit trail)."""

from __future__ import annotations

from vacsite._api._common import insert_rows
from vacsite._constants import TABLE_ACTIVITY_LOGS
from vacsite._transport import Transport
from vacsite.models.contact import ActivityLogEntry


async def insert_activity(transport: Transport, entry: ActivityLogEntry, *, access_token: str) -> None:
    await insert_rows(
        transport,
        TABLE_ACTIVITY_LOGS,
        [entry.model_dump(mode="json")],
        access_token=access_token,
        returning=False,
    )
