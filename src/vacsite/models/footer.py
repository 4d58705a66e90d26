"""Footer content rows."""

from __future__ import annotations

from enum import StrEnum

from vacsite.models._base import SiteRowModel


class FooterSectionType(StrEnum):
    COMPANY_INFO = "company_info"
    CONTACT_INFO = "contact_info"
    SOCIAL_LINKS = "social_links"
    QUICK_LINKS = "quick_links"
    SERVICES = "services"
    LEGAL = "legal"


class FooterItem(SiteRowModel):
    """One row of the ``footer_content`` table."""

    id: str | None = None
    section_type: FooterSectionType
    title: str | None = None
    content: str | None = None
    link_url: str | None = None
    link_text: str | None = None
    icon_name: str | None = None
    order_index: int = 0
    is_active: bool = True

    @property
    def label(self) -> str:
        """Text shown for link-style sections."""
        return self.title or self.content or self.link_text or ""
