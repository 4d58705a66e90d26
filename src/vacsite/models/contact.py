"""Contact form input and stored submissions."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from vacsite.models._base import SiteRowModel


class SubmissionStatus(StrEnum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESPONDED = "responded"
    CLOSED = "closed"


class ContactForm(BaseModel):
    """Raw contact form input, before sanitizing."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = ""
    email: str = ""
    company: str = ""
    phone: str = ""
    service_interest: str = ""
    message: str = ""
    consultation_requested: bool = False


class ContactSubmission(SiteRowModel):
    """One row of the ``contact_submissions`` table."""

    id: str | None = None
    name: str
    email: str
    company: str | None = None
    phone: str | None = None
    service_interest: str | None = None
    message: str
    consultation_requested: bool = False
    status: SubmissionStatus = SubmissionStatus.NEW
    created_at: str | None = None
    updated_at: str | None = None


class ActivityLogEntry(BaseModel):
    """Audit row written to ``admin_activity_logs`` for admin actions."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    user_email: str = ""
    action: str = Field(min_length=1)
    resource: str | None = None
    user_agent: str = "vacsite"
