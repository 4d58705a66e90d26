"""Data models for backend rows."""

from vacsite.models._base import SiteRowModel
from vacsite.models.banner import DEFAULT_OVERLAY_OPACITY, DEFAULT_TEXT_COLOR, HeroBanner, MediaType
from vacsite.models.contact import ActivityLogEntry, ContactForm, ContactSubmission, SubmissionStatus
from vacsite.models.footer import FooterItem, FooterSectionType
from vacsite.models.job import JobOpening
from vacsite.models.media import MediaObject, media_type_for
from vacsite.models.settings import SettingsSnapshot, SiteSetting, setting_bool, settings_to_snapshot
from vacsite.models.testimonial import Testimonial

__all__ = [
    "DEFAULT_OVERLAY_OPACITY",
    "DEFAULT_TEXT_COLOR",
    "ActivityLogEntry",
    "ContactForm",
    "ContactSubmission",
    "FooterItem",
    "FooterSectionType",
    "HeroBanner",
    "JobOpening",
    "MediaObject",
    "MediaType",
    "SettingsSnapshot",
    "SiteRowModel",
    "SiteSetting",
    "SubmissionStatus",
    "Testimonial",
    "media_type_for",
    "setting_bool",
    "settings_to_snapshot",
]
