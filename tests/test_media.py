from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

import pytest

from vacsite import admin as admin_module
from vacsite._api import media as media_api
from vacsite._transport import RestResponse
from vacsite.client import SiteClient
from vacsite.config import SiteConfig
from vacsite.exceptions import BackendPermissionError, DuplicateRowError
from vacsite.models import HeroBanner, MediaObject, MediaType, media_type_for

if TYPE_CHECKING:
    from conftest import FakeRestBackend

PUBLIC = "https://example.supabase.co/storage/v1/object/public/hero-media"


@pytest.fixture
def config() -> SiteConfig:
    return SiteConfig(supabase_url="https://example.supabase.co", anon_key="anon-key", cross_context_enabled=False)


@pytest.fixture(autouse=True)
def fixed_clock(monkeypatch: pytest.MonkeyPatch) -> None:
    ticks = itertools.count(1700000000000)
    monkeypatch.setattr(admin_module, "_now_ms", lambda: next(ticks))


async def _signed_in(client: SiteClient, backend: FakeRestBackend) -> None:
    await client.login(backend.admin_email, backend.admin_password)


def test_object_name_keeps_lowercased_extension() -> None:
    assert media_api.object_name("logo", "Brand.PNG", timestamp_ms=42) == "logo-42.png"
    assert media_api.object_name("home", "clip", timestamp_ms=7) == "home-7"


def test_public_url_quotes_the_name() -> None:
    url = media_api.public_url("https://x.co", "a b.png")
    assert url == "https://x.co/storage/v1/object/public/hero-media/a%20b.png"


@pytest.mark.parametrize(
    ("content_type", "expected"),
    [
        ("video/mp4", MediaType.VIDEO),
        ("VIDEO/webm", MediaType.VIDEO),
        ("image/jpeg", MediaType.IMAGE),
        (None, MediaType.IMAGE),
    ],
)
def test_media_type_for(content_type: str | None, expected: MediaType) -> None:
    assert media_type_for(content_type) is expected


def test_listing_entry_lifts_metadata() -> None:
    entry = MediaObject.model_validate(
        {
            "name": "home-1.mp4",
            "id": "abc",
            "created_at": "2026-01-01T00:00:00Z",
            "metadata": {"size": 2048, "mimetype": "video/mp4", "eTag": "x"},
        }
    )
    assert entry.size == 2048
    assert entry.media_type is MediaType.VIDEO


@pytest.mark.asyncio
async def test_upload_logo_points_logo_url_at_public_file(config: SiteConfig, backend: FakeRestBackend) -> None:
    async with SiteClient(config, transport=backend) as client:
        assert "logo_url" not in await client.get_site_settings()
        await _signed_in(client, backend)

        saved = await client.admin.upload_logo("brand.png", b"\x89PNG")

        assert saved.setting_value == f"{PUBLIC}/logo-1700000000000.png"
        assert client.store.load("site_settings")["logo_url"] == saved.setting_value
    assert backend.uploads["logo-1700000000000.png"] == b"\x89PNG"
    assert backend.objects["hero-media"]["logo-1700000000000.png"]["metadata"]["mimetype"] == "image/png"
    actions = [row["action"] for row in backend.tables["admin_activity_logs"]]
    assert "upload_media" in actions


@pytest.mark.asyncio
async def test_logo_must_be_an_image(config: SiteConfig, backend: FakeRestBackend) -> None:
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        with pytest.raises(ValueError, match="image"):
            await client.admin.upload_logo("terms.pdf", b"%PDF", content_type="application/pdf")
    assert backend.count("POST", "storage/hero-media") == 0


@pytest.mark.asyncio
async def test_empty_upload_is_rejected(config: SiteConfig, backend: FakeRestBackend) -> None:
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        with pytest.raises(ValueError, match="empty"):
            await client.admin.upload_media("blank.png", b"")
    assert backend.objects == {}


@pytest.mark.asyncio
async def test_upload_banner_video_refreshes_cached_banner(config: SiteConfig, backend: FakeRestBackend) -> None:
    backend.seed("hero_banners", {"page_name": "about", "title": "About Us", "media_type": "image"})
    async with SiteClient(config, transport=backend) as client:
        assert (await client.get_hero_banner("about"))["media_url"] is None
        await _signed_in(client, backend)

        saved = await client.admin.upload_banner_media("about", "intro.mp4", b"\x00\x00", content_type="video/mp4")

        assert saved.media_type is MediaType.VIDEO
        cached = client.store.load("hero_banner:about")
        assert cached["media_url"] == f"{PUBLIC}/about-1700000000000.mp4"
        assert cached["media_type"] == "video"
        assert cached["title"] == "About Us"
    assert len(backend.tables["hero_banners"]) == 1


@pytest.mark.asyncio
async def test_upload_banner_media_creates_missing_banner(config: SiteConfig, backend: FakeRestBackend) -> None:
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        saved = await client.admin.upload_banner_media("careers", "team.jpg", b"\xff\xd8", content_type="image/jpeg")

        assert saved.page_name == "careers"
        assert saved.title == HeroBanner(page_name="careers").title
        assert client.store.load("hero_banner:careers")["media_type"] == "image"


@pytest.mark.asyncio
async def test_banner_media_rejects_other_files(config: SiteConfig, backend: FakeRestBackend) -> None:
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        with pytest.raises(ValueError, match="image or a video"):
            await client.admin.upload_banner_media("home", "notes.txt", b"hi", content_type="text/plain")


@pytest.mark.asyncio
async def test_list_media_newest_first_without_folder_entries(config: SiteConfig, backend: FakeRestBackend) -> None:
    backend.objects["hero-media"] = {
        ".emptyFolderPlaceholder": {
            "name": ".emptyFolderPlaceholder",
            "id": "placeholder",
            "created_at": "2025-01-01T00:00:00Z",
            "metadata": {"size": 0, "mimetype": "application/octet-stream"},
        },
        "archive": {"name": "archive", "id": None, "created_at": "2025-01-02T00:00:00Z", "metadata": None},
    }
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        await client.admin.upload_media("a.png", b"a", content_type="image/png")
        await client.admin.upload_media("b.mp4", b"bb", content_type="video/mp4")

        listed = await client.admin.list_media()
        limited = await client.admin.list_media(limit=1, offset=1)

    assert [entry.name for entry in listed] == ["media-1700000000001.mp4", "media-1700000000000.png"]
    assert [entry.size for entry in listed] == [2, 1]
    assert [entry.name for entry in limited] == ["media-1700000000000.png"]


@pytest.mark.asyncio
async def test_delete_media(config: SiteConfig, backend: FakeRestBackend) -> None:
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        first = await client.admin.upload_media("a.png", b"a", content_type="image/png")
        second = await client.admin.upload_media("b.png", b"b", content_type="image/png")

        await client.admin.delete_media(first.name)
        await client.admin.delete_media()

        assert [entry.name for entry in await client.admin.list_media()] == [second.name]
    assert backend.count("DELETE", "storage/hero-media") == 1
    actions = [row["action"] for row in backend.tables["admin_activity_logs"]]
    assert "delete_media" in actions


@pytest.mark.asyncio
async def test_name_collision_maps_to_duplicate(
    config: SiteConfig, backend: FakeRestBackend, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(admin_module, "_now_ms", lambda: 5)
    async with SiteClient(config, transport=backend) as client:
        await _signed_in(client, backend)
        await client.admin.upload_media("a.png", b"a", content_type="image/png")
        with pytest.raises(DuplicateRowError):
            await client.admin.upload_media("a.png", b"b", content_type="image/png")
    assert backend.uploads["media-5.png"] == b"a"


@pytest.mark.asyncio
async def test_storage_policy_errors_propagate(config: SiteConfig, backend: FakeRestBackend) -> None:
    backend.fail(
        "storage/hero-media",
        RestResponse(403, {"error": "Unauthorized", "message": "new row violates row-level security policy"}),
        method="POST",
    )
    async with SiteClient(config, transport=backend) as client:
        await client.get_site_settings()
        await _signed_in(client, backend)
        with pytest.raises(BackendPermissionError):
            await client.admin.upload_logo("brand.png", b"\x89PNG")
        assert "logo_url" not in client.store.load("site_settings")
