"""Custom exception hierarchy for vacsite."""

from __future__ import annotations


class SiteError(Exception):
    """Base exception for all vacsite errors."""


class SiteConfigError(SiteError):
    """Invalid or missing configuration."""


class BackendTransportError(SiteError):
    """HTTP-level failure (network, timeout, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        table: str = "",
    ) -> None:
        self.status_code = status_code
        self.table = table
        super().__init__(message)


class BackendApiError(SiteError):
    """Backend answered with an error body (PostgREST or Postgres code)."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        table: str = "",
        status_code: int | None = None,
    ) -> None:
        self.code = code
        self.table = table
        self.status_code = status_code
        super().__init__(message)


class BackendNotFoundError(BackendApiError):
    """A single-row read matched no row (``PGRST116``).

    This is an expected state (e.g. a page without a configured banner),
    not a failure of the backend.
    """


class BackendPermissionError(BackendApiError):
    """Row-level security rejected the statement (``42501``)."""


class DuplicateRowError(BackendApiError):
    """Unique constraint violated (``23505``)."""


class ReferencedRowError(BackendApiError):
    """Row is still referenced by other data (``23503``)."""


class SessionExpiredError(BackendApiError):
    """Access token rejected by the backend (JWT expired or invalid)."""


class AuthenticationError(SiteError):
    """Admin sign-in was rejected."""


class AdminAuthRequiredError(SiteError):
    """An admin operation was attempted without a live session."""


class ContactFormError(SiteError):
    """Contact form input failed validation.

    ``errors`` holds ``(field, message)`` pairs in form order.
    """

    def __init__(self, errors: list[tuple[str, str]]) -> None:
        self.errors = list(errors)
        summary = "; ".join(f"{field}: {message}" for field, message in self.errors)
        super().__init__(f"Invalid contact form: {summary}")


class SpamDetectedError(ContactFormError):
    """Contact form content matched a spam pattern."""

    def __init__(self) -> None:
        super().__init__([("message", "Message looks like spam")])
