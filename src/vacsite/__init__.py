"""vacsite - Async data layer for the Vijay Apps Consultants website."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("vacsite")
except PackageNotFoundError:
    __version__ = "0+local"
from vacsite.admin import ContentAdmin, describe_error
from vacsite.cache import (
    ALL_RESOURCES,
    Broadcaster,
    DurableStore,
    FileStorage,
    LiveResource,
    MemoryStorage,
    Provenance,
    ReadThroughLoader,
    Resolved,
    Storage,
    StorageWatcher,
)
from vacsite.client import SiteClient
from vacsite.config import SiteConfig
from vacsite.exceptions import (
    AdminAuthRequiredError,
    AuthenticationError,
    BackendApiError,
    BackendNotFoundError,
    BackendPermissionError,
    BackendTransportError,
    ContactFormError,
    DuplicateRowError,
    ReferencedRowError,
    SessionExpiredError,
    SiteConfigError,
    SiteError,
    SpamDetectedError,
)
from vacsite.filters import filter_jobs, filter_testimonials
from vacsite.models import (
    ContactForm,
    ContactSubmission,
    FooterItem,
    FooterSectionType,
    HeroBanner,
    JobOpening,
    MediaType,
    SiteSetting,
    SubmissionStatus,
    Testimonial,
)
from vacsite.session import AdminSession

__all__ = [
    "__version__",
    "ALL_RESOURCES",
    "AdminAuthRequiredError",
    "AdminSession",
    "AuthenticationError",
    "BackendApiError",
    "BackendNotFoundError",
    "BackendPermissionError",
    "BackendTransportError",
    "Broadcaster",
    "ContactForm",
    "ContactFormError",
    "ContactSubmission",
    "ContentAdmin",
    "DuplicateRowError",
    "DurableStore",
    "FileStorage",
    "FooterItem",
    "FooterSectionType",
    "HeroBanner",
    "JobOpening",
    "LiveResource",
    "MediaType",
    "MemoryStorage",
    "Provenance",
    "ReadThroughLoader",
    "ReferencedRowError",
    "Resolved",
    "SessionExpiredError",
    "SiteClient",
    "SiteConfig",
    "SiteConfigError",
    "SiteError",
    "SiteSetting",
    "SpamDetectedError",
    "Storage",
    "StorageWatcher",
    "SubmissionStatus",
    "Testimonial",
    "describe_error",
    "filter_jobs",
    "filter_testimonials",
]
