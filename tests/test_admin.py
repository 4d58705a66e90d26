from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from vacsite._transport import RestResponse
from vacsite.admin import build_footer_from_settings, describe_error
from vacsite.client import SiteClient
from vacsite.config import SiteConfig
from vacsite.exceptions import (
    AdminAuthRequiredError,
    AuthenticationError,
    BackendApiError,
    BackendPermissionError,
    BackendTransportError,
    DuplicateRowError,
    ReferencedRowError,
    SessionExpiredError,
)
from vacsite.models import FooterItem, FooterSectionType, HeroBanner, JobOpening, SubmissionStatus, Testimonial

if TYPE_CHECKING:
    from conftest import FakeRestBackend


@pytest.fixture
def config() -> SiteConfig:
    return SiteConfig(supabase_url="https://example.supabase.co", anon_key="anon-key", cross_context_enabled=False)


async def _signed_in(client: SiteClient, backend: FakeRestBackend) -> None:
    await client.login(backend.admin_email, backend.admin_password)


@pytest.mark.asyncio
async def test_admin_requires_login(config: SiteConfig, backend: FakeRestBackend) -> None:
    async with SiteClient(config, transport=backend) as client:
        with pytest.raises(AdminAuthRequiredError):
            _ = client.admin


@pytest.mark.asyncio
async def test_rejected_login(config: SiteConfig, backend: FakeRestBackend) -> None:
    async with SiteClient(config, transport=backend) as client:
        with pytest.raises(AuthenticationError, match="Invalid login credentials"):
            await client.login(backend.admin_email, "wrong")
        assert client.admin_session is None


@pytest.mark.asyncio
async def test_login_and_logout_are_audited(config: SiteConfig, backend: FakeRestBackend) -> None:
    async with SiteClient(config, transport=backend) as client:
        session = await client.login(backend.admin_email, backend.admin_password)
        assert session.user_id == "admin-1"
        await client.logout()
        await client.logout()
        assert client.admin_session is None

    actions = [row["action"] for row in backend.tables["admin_activity_logs"]]
    assert actions == ["admin_login", "admin_logout"]


@pytest.mark.asyncio
async def test_update_setting_refreshes_settings_cache(config: SiteConfig, backend: FakeRestBackend) -> None:
    backend.seed("site_settings", {"setting_key": "company_name", "setting_value": "Old Name"})
    async with SiteClient(config, transport=backend) as client:
        assert (await client.get_site_settings())["company_name"] == "Old Name"
        heard: list[str] = []
        client.broadcaster.subscribe("site_settings", lambda: heard.append("x"))

        await _signed_in(client, backend)
        saved = await client.admin.update_setting("company_name", "Acme")

        assert saved.setting_value == "Acme"
        assert client.store.load("site_settings")["company_name"] == "Acme"
        assert heard == ["x"]
    assert len(backend.tables["site_settings"]) == 1
    assert "admin-access-token" in backend.tokens


@pytest.mark.asyncio
async def test_update_setting_refreshes_cached_feature_flag(config: SiteConfig, backend: FakeRestBackend) -> None:
    async with SiteClient(config, transport=backend) as client:
        assert await client.is_feature_enabled("testimonials_enabled") is False
        await _signed_in(client, backend)
        await client.admin.update_setting("testimonials_enabled", "true")
        assert client.store.load("feature:testimonials_enabled") is True


@pytest.mark.asyncio
async def test_hero_default_edit_restyles_mounted_default_banner(config: SiteConfig, backend: FakeRestBackend) -> None:
    backend.seed("site_settings", {"setting_key": "hero_default_overlay_opacity", "setting_value": "0.3"})
    async with SiteClient(config, transport=backend) as client:
        banner = client.live("hero_banner:home")
        assert (await banner.mount())["overlay_opacity"] == 0.3

        await _signed_in(client, backend)
        await client.admin.update_setting("hero_default_overlay_opacity", "0.2")
        await banner.settle()

        assert banner.value["overlay_opacity"] == 0.2
        assert client.store.load("hero_banner:home")["overlay_opacity"] == 0.2
        banner.unmount()


@pytest.mark.asyncio
async def test_hero_default_edit_leaves_configured_banner_alone(config: SiteConfig, backend: FakeRestBackend) -> None:
    backend.seed("hero_banners", {"page_name": "about", "title": "About", "overlay_opacity": 0.9})
    async with SiteClient(config, transport=backend) as client:
        await client.get_hero_banner("about")
        await _signed_in(client, backend)
        await client.admin.update_setting("hero_default_text_color", "black")
        banner = client.store.load("hero_banner:about")
    assert (banner["overlay_opacity"], banner["text_color"]) == (0.9, "white")


@pytest.mark.asyncio
async def test_write_errors_propagate_without_retry(config: SiteConfig, backend: FakeRestBackend) -> None:
    backend.fail(
        "site_settings",
        RestResponse(403, {"code": "42501", "message": "new row violates row-level security policy"}),
        method="POST",
    )
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        with pytest.raises(BackendPermissionError) as excinfo:
            await client.admin.update_setting("company_name", "Acme")

    assert backend.count("POST", "site_settings") == 1
    assert describe_error(excinfo.value)[0] == "Permission Denied"


@pytest.mark.asyncio
async def test_activity_log_failure_does_not_fail_the_write(config: SiteConfig, backend: FakeRestBackend) -> None:
    backend.fail("admin_activity_logs", BackendTransportError("down"), method="POST")
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        saved = await client.admin.update_setting("primary_phone", "+1 555 0100")
    assert saved.setting_key == "primary_phone"


@pytest.mark.asyncio
async def test_remove_logo(config: SiteConfig, backend: FakeRestBackend) -> None:
    backend.seed("site_settings", {"setting_key": "logo_url", "setting_value": "https://cdn/logo.png"})
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        await client.admin.remove_logo()
        assert "logo_url" not in await client.get_site_settings()


def test_build_footer_from_settings() -> None:
    items = build_footer_from_settings(
        {
            "company_name": "Acme",
            "primary_email": "hi@acme.test",
            "address": "1 Main St",
            "linkedin_url": "https://linkedin.com/acme",
            "footer_privacy_url": "/privacy",
        },
        year=2026,
    )
    by_section: dict[str, list[FooterItem]] = {}
    for item in items:
        by_section.setdefault(item.section_type.value, []).append(item)

    assert by_section["company_info"][0].title == "Acme"
    assert [(i.title, i.order_index) for i in by_section["contact_info"]] == [("Email", 0), ("Address", 1)]
    assert by_section["contact_info"][0].link_url == "mailto:hi@acme.test"
    assert by_section["social_links"][0].icon_name == "linkedin"
    assert [i.title for i in by_section["legal"]] == ["Copyright", "Privacy Policy"]
    assert by_section["legal"][0].content == "© 2026 Acme"


@pytest.mark.asyncio
async def test_sync_footer_replaces_only_managed_sections(config: SiteConfig, backend: FakeRestBackend) -> None:
    backend.seed("site_settings", {"setting_key": "company_name", "setting_value": "Acme"})
    backend.seed(
        "footer_content",
        {"section_type": "legal", "title": "Old legal", "order_index": 0, "is_active": True},
        {"section_type": "quick_links", "title": "Blog", "link_url": "/blog", "order_index": 0, "is_active": True},
    )
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        await client.admin.sync_footer_from_settings(year=2026)
        footer = await client.get_footer()

    assert [item["title"] for item in footer["legal"]] == ["Copyright"]
    assert [item["title"] for item in footer["quick_links"]] == ["Blog"]
    assert footer["company_info"][0]["title"] == "Acme"


@pytest.mark.asyncio
async def test_new_footer_item_is_appended(config: SiteConfig, backend: FakeRestBackend) -> None:
    backend.seed(
        "footer_content",
        {"section_type": "services", "title": "EBS", "order_index": 0, "is_active": True},
        {"section_type": "services", "title": "Fusion", "order_index": 4, "is_active": False},
    )
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        saved = await client.admin.save_footer_item(FooterItem(section_type=FooterSectionType.SERVICES, title="OIC"))
        assert saved.order_index == 5
        cached = client.store.load("footer:services")
        assert [item["title"] for item in cached] == ["EBS", "OIC"]


@pytest.mark.asyncio
async def test_move_and_delete_footer_items(config: SiteConfig, backend: FakeRestBackend) -> None:
    backend.seed(
        "footer_content",
        {"id": "a", "section_type": "services", "title": "A", "order_index": 0, "is_active": True},
        {"id": "b", "section_type": "services", "title": "B", "order_index": 1, "is_active": True},
    )
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        await client.admin.move_footer_item("b", section="services", direction="up")
        assert [i["title"] for i in await client.get_footer_section("services")] == ["B", "A"]

        await client.admin.delete_footer_item("a", section="services")
        assert [i["title"] for i in client.store.load("footer:services")] == ["B"]

        with pytest.raises(BackendApiError):
            await client.admin.move_footer_item("missing", section="services", direction="down")


@pytest.mark.asyncio
async def test_banner_save_and_delete_refresh_cache(config: SiteConfig, backend: FakeRestBackend) -> None:
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        await client.admin.save_banner("services", HeroBanner(page_name="ignored", title="Our Services"))
        assert client.store.load("hero_banner:services")["title"] == "Our Services"
        assert backend.tables["hero_banners"][0]["page_name"] == "services"

        await client.admin.save_banner("services", HeroBanner(page_name="services", title="Updated"))
        assert len(backend.tables["hero_banners"]) == 1

        await client.admin.delete_banner("services")
        assert client.store.load("hero_banner:services")["title"] == "Welcome"


@pytest.mark.asyncio
async def test_job_lifecycle_updates_public_listing(config: SiteConfig, backend: FakeRestBackend) -> None:
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        job = await client.admin.save_job_opening(
            JobOpening(title="Oracle SCM Consultant", department="Consulting", skills="SCM, OM , ")
        )
        assert job.skills == ["SCM", "OM"]
        assert [j["title"] for j in client.store.load("job_openings")] == ["Oracle SCM Consultant"]

        await client.admin.set_job_active(job.id, False)
        assert client.store.load("job_openings") == []
        assert [j.title for j in await client.admin.list_job_openings()] == ["Oracle SCM Consultant"]

        await client.admin.delete_job_opening(job.id)
        assert await client.admin.list_job_openings() == []


@pytest.mark.asyncio
async def test_testimonial_save_refreshes_public_list(config: SiteConfig, backend: FakeRestBackend) -> None:
    async with SiteClient(config, transport=backend) as client:
        assert (await client.get_testimonials())[0]["name"] == "Sarah Johnson"
        await _signed_in(client, backend)
        saved = await client.admin.save_testimonial(
            Testimonial(name="Priya Patel", position="CIO", company="Acme", content="Superb delivery.")
        )
        assert backend.tables["testimonials"][0]["role"] == "CIO"
        assert [t["name"] for t in client.store.load("testimonials")] == ["Priya Patel"]

        await client.admin.delete_testimonial(saved.id)
        assert client.store.load("testimonials")[0]["name"] == "Sarah Johnson"
        assert await client.admin.list_testimonials() == []


@pytest.mark.asyncio
async def test_contact_submissions_listing_and_status(config: SiteConfig, backend: FakeRestBackend) -> None:
    backend.seed(
        "contact_submissions",
        {"name": "Ann", "email": "ann@a.test", "message": "Hello there", "status": "new"},
        {"name": "Bob", "email": "bob@b.test", "company": "Annex", "message": "Hi again", "status": "closed"},
        {"name": "Cid", "email": "cid@c.test", "message": "Question", "status": "new"},
    )
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        admin = client.admin
        assert [s.name for s in await admin.list_submissions()] == ["Cid", "Bob", "Ann"]
        assert [s.name for s in await admin.list_submissions(status=SubmissionStatus.NEW)] == ["Cid", "Ann"]
        assert [s.name for s in await admin.list_submissions(search="ann")] == ["Bob", "Ann"]
        assert [s.name for s in await admin.list_submissions(page=2, page_size=2)] == ["Ann"]

        ann = backend.tables["contact_submissions"][0]["id"]
        updated = await admin.update_submission_status(ann, SubmissionStatus.RESPONDED)
        assert updated.status is SubmissionStatus.RESPONDED

        with pytest.raises(ValueError):
            await admin.list_submissions(page=0)


@pytest.mark.parametrize(
    ("exc", "title"),
    [
        (BackendPermissionError("denied", code="42501"), "Permission Denied"),
        (SessionExpiredError("x", code="PGRST301"), "Connection Error"),
        (ReferencedRowError("x", code="23503"), "Reference Error"),
        (DuplicateRowError("x", code="23505"), "Duplicate Error"),
        (SessionExpiredError("JWT expired"), "Session Expired"),
        (BackendApiError("blocked by RLS"), "Security Policy"),
        (BackendTransportError("connection reset"), "Connection Error"),
        (AdminAuthRequiredError("no session"), "Authentication Required"),
        (BackendApiError("check constraint failed"), "Database Error"),
    ],
)
def test_describe_error(exc: Exception, title: str) -> None:
    assert describe_error(exc)[0] == title


def test_describe_error_falls_back_to_message() -> None:
    assert describe_error(BackendApiError("check constraint failed")) == ("Database Error", "check constraint failed")
