"""``contact_submissions`` table."""

from __future__ import annotations

from vacsite._api._common import eq, insert_rows, order, select_rows, update_rows
from vacsite._constants import TABLE_CONTACT_SUBMISSIONS
from vacsite._transport import Transport
from vacsite.exceptions import BackendApiError
from vacsite.models.contact import ContactForm, ContactSubmission, SubmissionStatus


async def insert_submission(transport: Transport, form: ContactForm) -> None:
    """Store a (validated, sanitized) form.

    Anonymous visitors may insert but not read back, so no row is returned.
    """
    row = {
        "name": form.name,
        "email": form.email,
        "company": form.company or None,
        "phone": form.phone or None,
        "service_interest": form.service_interest or None,
        "message": form.message,
        "consultation_requested": form.consultation_requested,
        "status": SubmissionStatus.NEW.value,
    }
    await insert_rows(transport, TABLE_CONTACT_SUBMISSIONS, [row], returning=False)


def _search_operand(term: str) -> str:
    # PostgREST reserves , ( ) inside or=(...) groups.
    cleaned = "".join(ch for ch in term if ch not in ",()*").strip()
    pattern = f"*{cleaned}*"
    return f"(name.ilike.{pattern},email.ilike.{pattern},company.ilike.{pattern})"


async def list_submissions(
    transport: Transport,
    *,
    access_token: str,
    status: SubmissionStatus | None = None,
    search: str = "",
    page: int = 1,
    page_size: int = 10,
) -> list[ContactSubmission]:
    """Admin listing, newest first, one page at a time (pages start at 1)."""
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be >= 1")
    filters: dict[str, str] = {}
    if status is not None:
        filters["status"] = eq(status.value)
    if search.strip():
        filters["or"] = _search_operand(search)
    rows = await select_rows(
        transport,
        TABLE_CONTACT_SUBMISSIONS,
        filters=filters,
        order_by=order(("created_at", False)),
        limit=page_size,
        offset=(page - 1) * page_size,
        access_token=access_token,
    )
    return [ContactSubmission.model_validate(row) for row in rows]


async def update_submission_status(
    transport: Transport,
    submission_id: str,
    status: SubmissionStatus,
    *,
    access_token: str,
) -> ContactSubmission:
    saved = await update_rows(
        transport,
        TABLE_CONTACT_SUBMISSIONS,
        {"status": status.value},
        filters={"id": eq(submission_id)},
        access_token=access_token,
    )
    if not saved:
        raise BackendApiError(
            f"{TABLE_CONTACT_SUBMISSIONS} row {submission_id} not updated",
            table=TABLE_CONTACT_SUBMISSIONS,
        )
    return ContactSubmission.model_validate(saved[0])
