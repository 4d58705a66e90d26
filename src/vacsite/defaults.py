"""Compiled-in fallback content.

Used only when neither the backend nor the local cache can answer. These
values never change at runtime; loaders hand out copies.
"""

from __future__ import annotations

from typing import Any

from vacsite.models.banner import DEFAULT_OVERLAY_OPACITY, DEFAULT_TEXT_COLOR, HeroBanner
from vacsite.models.settings import SettingsSnapshot

DEFAULT_SITE_SETTINGS: SettingsSnapshot = {
    "company_name": "Vijay Apps Consultants",
    "company_tagline": (
        "Leading Oracle E-Business Suite & Fusion consulting firm delivering "
        "AI-enhanced enterprise solutions."
    ),
    "primary_email": "Vijay@2025apps",
    "testimonials_enabled": "false",
    "default_theme": "light",
    "hero_default_overlay_opacity": str(DEFAULT_OVERLAY_OPACITY),
    "hero_default_text_color": DEFAULT_TEXT_COLOR,
    "cta_button_text": "Book Free Consultation",
    "footer_copyright_text": "© Vijay Apps Consultants. All rights reserved.",
    "footer_certifications_text": "Oracle Certified Gold Partner | ISO 27001 Certified",
}

DEFAULT_QUICK_LINKS: list[dict[str, Any]] = [
    {
        "id": f"default-quick-link-{index}",
        "section_type": "quick_links",
        "title": title,
        "content": None,
        "link_url": url,
        "link_text": title,
        "icon_name": None,
        "order_index": index,
        "is_active": True,
    }
    for index, (title, url) in enumerate(
        [
            ("Home", "/"),
            ("About Us", "/about"),
            ("Services", "/services"),
            ("Careers", "/careers"),
            ("Contact", "/contact"),
        ]
    )
]

DEMO_TESTIMONIALS: list[dict[str, Any]] = [
    {
        "id": "1",
        "name": "Sarah Johnson",
        "position": "IT Director",
        "company": "Global Manufacturing Corp",
        "content": (
            "Vijay Apps Consultants transformed our entire Oracle EBS implementation. Their "
            "expertise in supply chain optimization helped us reduce costs by 30% while improving "
            "efficiency."
        ),
        "rating": 5,
        "project": "Oracle EBS R12 Implementation",
    },
    {
        "id": "2",
        "name": "Michael Chen",
        "position": "CFO",
        "company": "TechStart Solutions",
        "content": (
            "Outstanding Oracle Fusion Cloud implementation. The AI-enhanced reporting solutions "
            "they built gave us real-time insights we never had before."
        ),
        "rating": 5,
        "project": "Oracle Fusion Cloud Migration",
    },
    {
        "id": "3",
        "name": "Amanda Rodriguez",
        "position": "VP Operations",
        "company": "Retail Dynamics Inc",
        "content": (
            "Their managed support service is exceptional. 24/7 availability, proactive "
            "monitoring, and quick issue resolution."
        ),
        "rating": 5,
        "project": "Managed Oracle Support",
    },
    {
        "id": "4",
        "name": "David Kim",
        "position": "CTO",
        "company": "Enterprise Logistics",
        "content": (
            "The custom Oracle integrations they developed streamlined our entire logistics "
            "operation."
        ),
        "rating": 5,
        "project": "Custom Oracle Development",
    },
    {
        "id": "5",
        "name": "Lisa Thompson",
        "position": "HR Director",
        "company": "People First Corp",
        "content": (
            "Oracle HCM implementation was smooth and well-planned. Payroll processing time "
            "reduced by 60%."
        ),
        "rating": 5,
        "project": "Oracle HCM Implementation",
    },
    {
        "id": "6",
        "name": "Robert Singh",
        "position": "IT Manager",
        "company": "Financial Services Ltd",
        "content": (
            "Cloud migration project was executed perfectly. Zero downtime during the transition "
            "and all data integrity maintained."
        ),
        "rating": 5,
        "project": "Oracle Cloud Migration",
    },
]

#: Number of testimonials shown on the home page.
TESTIMONIALS_SHOWN = 3


def _job(
    job_id: str,
    title: str,
    department: str,
    location: str,
    job_type: str,
    experience: str,
    skills: list[str],
    description: str,
    requirements: list[str],
    is_urgent: bool,
) -> dict[str, Any]:
    return {
        "id": job_id,
        "title": title,
        "department": department,
        "location": location,
        "type": job_type,
        "experience": experience,
        "skills": skills,
        "description": description,
        "requirements": "\n".join(f"• {line}" for line in requirements),
        "is_urgent": is_urgent,
        "is_active": True,
        "created_at": None,
    }


FALLBACK_JOB_OPENINGS: list[dict[str, Any]] = [
    _job(
        "1",
        "Senior Oracle Fusion Developer",
        "Engineering",
        "Remote / Hybrid",
        "Full-time",
        "5+ years",
        ["Oracle Fusion", "PL/SQL", "Java", "REST APIs", "OIC"],
        "Lead Oracle Fusion development projects and mentor junior developers in creating "
        "scalable enterprise solutions.",
        [
            "5+ years of Oracle Fusion development experience",
            "Strong expertise in PL/SQL and Java",
            "Experience with Oracle Integration Cloud (OIC)",
        ],
        True,
    ),
    _job(
        "2",
        "Oracle EBS Functional Consultant",
        "Consulting",
        "Onsite / Remote",
        "Full-time",
        "3-5 years",
        ["Oracle EBS", "Financials", "Supply Chain", "HRMS", "Business Analysis"],
        "Work with clients to implement and optimize Oracle EBS modules for business process "
        "improvements.",
        [
            "3-5 years of Oracle EBS functional experience",
            "Expertise in Financials, Supply Chain, or HRMS modules",
            "Client-facing experience",
        ],
        False,
    ),
    _job(
        "3",
        "Cloud Integration Specialist",
        "Cloud Solutions",
        "Remote",
        "Contract",
        "4+ years",
        ["OIC", "Oracle Cloud", "Integration", "SOA", "APIs"],
        "Design and implement cloud integration solutions using Oracle Integration Cloud and "
        "related technologies.",
        [
            "4+ years of integration experience",
            "Knowledge of SOA architecture",
            "API development and management",
        ],
        False,
    ),
    _job(
        "4",
        "Oracle Database Administrator",
        "Infrastructure",
        "Hybrid",
        "Full-time",
        "3+ years",
        ["Oracle Database", "Performance Tuning", "Backup & Recovery", "RAC", "DataGuard"],
        "Manage and optimize Oracle database environments. Ensure high availability, "
        "performance, and security of mission-critical database systems.",
        [
            "3+ years of Oracle DBA experience",
            "Performance tuning expertise",
            "RAC and DataGuard knowledge",
        ],
        False,
    ),
    _job(
        "5",
        "Oracle Project Manager",
        "Management",
        "Onsite",
        "Full-time",
        "6+ years",
        ["Project Management", "Oracle Implementation", "PMP", "Agile", "Stakeholder Management"],
        "Lead Oracle implementation projects from initiation to completion.",
        [
            "6+ years of project management experience",
            "Oracle implementation project experience",
            "PMP certification preferred",
        ],
        True,
    ),
]


def default_hero_banner(page_name: str, settings: SettingsSnapshot | None = None) -> dict[str, Any]:
    """Banner shown for a page without a configured row.

    Overlay opacity and text colour come from the ``hero_default_*``
    settings when a snapshot is given.
    """
    settings = settings or {}
    banner = HeroBanner(
        page_name=page_name,
        overlay_opacity=settings.get("hero_default_overlay_opacity", DEFAULT_OVERLAY_OPACITY),
        text_color=settings.get("hero_default_text_color") or DEFAULT_TEXT_COLOR,
    )
    return banner.to_cache()
