"""Contact form validation, sanitizing and spam screening."""

from __future__ import annotations

import re

from vacsite.models.contact import ContactForm

_NAME_RE = re.compile(r"^[a-zA-Z\s'-]+$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^\+?[1-9]\d{0,15}$")
_PHONE_NOISE_RE = re.compile(r"[\s\-()]")
_WHITESPACE_RE = re.compile(r"\s+")

MAX_COMPANY_LENGTH = 100
MIN_MESSAGE_LENGTH = 10
MAX_MESSAGE_LENGTH = 1000

_SPAM_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(click here|visit now|buy now)\b", re.IGNORECASE),
    re.compile(r"https?://\S+\.(tk|ml|ga|cf)\b", re.IGNORECASE),
    re.compile(r"\b(viagra|cialis|casino|lottery|winner)\b", re.IGNORECASE),
)


def validate_contact_form(form: ContactForm) -> list[tuple[str, str]]:
    """Return ``(field, message)`` pairs for every invalid field.

    An empty list means the form may be submitted.
    """
    errors: list[tuple[str, str]] = []

    name = form.name.strip()
    if not name:
        errors.append(("name", "Full name is required"))
    elif len(name) < 2:
        errors.append(("name", "Name must be at least 2 characters long"))
    elif not _NAME_RE.match(name):
        errors.append(("name", "Name can only contain letters, spaces, hyphens, and apostrophes"))

    email = form.email.strip()
    if not email:
        errors.append(("email", "Email address is required"))
    elif not _EMAIL_RE.match(email):
        errors.append(("email", "Please enter a valid email address"))

    if form.phone.strip():
        phone = _PHONE_NOISE_RE.sub("", form.phone)
        if not _PHONE_RE.match(phone):
            errors.append(("phone", "Please enter a valid phone number"))

    if len(form.company.strip()) > MAX_COMPANY_LENGTH:
        errors.append(("company", f"Company name must be less than {MAX_COMPANY_LENGTH} characters"))

    message = form.message.strip()
    if not message:
        errors.append(("message", "Message is required"))
    elif len(message) < MIN_MESSAGE_LENGTH:
        errors.append(("message", f"Message must be at least {MIN_MESSAGE_LENGTH} characters long"))
    elif len(message) > MAX_MESSAGE_LENGTH:
        errors.append(("message", f"Message must be less than {MAX_MESSAGE_LENGTH} characters"))

    return errors


def sanitize_contact_form(form: ContactForm) -> ContactForm:
    """Trim every field, collapse inner whitespace and lower-case the email."""
    return ContactForm(
        name=_WHITESPACE_RE.sub(" ", form.name.strip()),
        email=form.email.strip().lower(),
        company=_WHITESPACE_RE.sub(" ", form.company.strip()),
        phone=form.phone.strip(),
        service_interest=form.service_interest.strip(),
        message=form.message.strip(),
        consultation_requested=form.consultation_requested,
    )


def detect_spam(form: ContactForm) -> bool:
    """Whether the name, company or message matches a known spam pattern."""
    text = f"{form.name} {form.company} {form.message}"
    return any(pattern.search(text) for pattern in _SPAM_PATTERNS)
