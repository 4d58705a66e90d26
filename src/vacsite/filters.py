"""Client-side filtering for the careers and testimonials pages."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

_ALL = "all"


def _active(value: str | None) -> bool:
    return value is not None and value.strip().lower() not in ("", _ALL)


def _matches_search(job: Mapping[str, Any], term: str) -> bool:
    if term in str(job.get("title") or "").lower():
        return True
    if term in str(job.get("description") or "").lower():
        return True
    return any(term in str(skill).lower() for skill in job.get("skills") or [])


def filter_jobs(
    jobs: Iterable[Mapping[str, Any]],
    *,
    search: str = "",
    department: str | None = None,
    location: str | None = None,
    job_type: str | None = None,
) -> list[Mapping[str, Any]]:
    """Filter cached job openings the way the careers page does.

    Parameters
    ----------
    jobs : iterable of mapping
        Job openings in their cached shape.
    search : str
        Case-insensitive match against title, description or any skill.
    department : str, optional
        Exact department; ``"all"`` or empty disables the filter.
    location : str, optional
        Case-insensitive substring of the location.
    job_type : str, optional
        Exact employment type (``Full-time``, ``Contract``...).

    Returns
    -------
    list
        Matching jobs in their original order.
    """
    term = search.strip().lower()
    result = []
    for job in jobs:
        if term and not _matches_search(job, term):
            continue
        if _active(department) and job.get("department") != department:
            continue
        if _active(location) and location.strip().lower() not in str(job.get("location") or "").lower():  # type: ignore[union-attr]
            continue
        if _active(job_type) and job.get("type") != job_type:
            continue
        result.append(job)
    return result


def job_departments(jobs: Iterable[Mapping[str, Any]]) -> list[str]:
    """Sorted distinct departments, for the department picker."""
    return sorted({str(job["department"]) for job in jobs if job.get("department")})


def filter_testimonials(
    items: Iterable[Mapping[str, Any]],
    *,
    min_rating: int = 1,
    company: str | None = None,
) -> list[Mapping[str, Any]]:
    """Testimonials rated at least *min_rating*, optionally from one company."""
    result = []
    for item in items:
        if int(item.get("rating") or 5) < min_rating:
            continue
        if _active(company) and str(item.get("company") or "").lower() != company.strip().lower():  # type: ignore[union-attr]
            continue
        result.append(item)
    return result
