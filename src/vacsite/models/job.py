"""Job opening rows."""

from __future__ import annotations

from pydantic import Field, field_validator

from vacsite.models._base import SiteRowModel


class JobOpening(SiteRowModel):
    """One row of the ``job_openings`` table."""

    id: str | None = None
    title: str = Field(min_length=1)
    department: str = ""
    location: str = ""
    type: str = "Full-time"
    experience: str = ""
    skills: list[str] = Field(default_factory=list)
    description: str | None = None
    requirements: str | None = None
    is_urgent: bool = False
    is_active: bool = True
    created_at: str | None = None

    @field_validator("skills", mode="before")
    @classmethod
    def _split_skills(cls, value: object) -> object:
        """Accept the admin form's comma-separated text as well as a list."""
        if isinstance(value, str):
            return [skill.strip() for skill in value.split(",") if skill.strip()]
        if isinstance(value, list):
            return [str(skill).strip() for skill in value if str(skill).strip()]
        return value
