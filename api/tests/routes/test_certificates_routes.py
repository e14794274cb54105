"""Tests for the certificate page and image routes."""

import html
import re
from pathlib import Path
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from core.config import Settings, clear_settings_cache
from core.ratelimit import limiter
from services import certificates_service
from services.certificates_service import build_add_to_profile_url, build_share_url
from tests.factories import make_participant

pytestmark = pytest.mark.integration

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


class TestCertificatePage:
    async def test_unknown_id_returns_404_page(self, client: AsyncClient, write_store):
        write_store([make_participant(id="a1b2c3d4")])

        response = await client.get("/cert/deadbeef")

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/html")
        assert "Certificate Not Found" in response.text
        assert 'href="/"' in response.text

    async def test_renders_certificate_details(self, client: AsyncClient, write_store):
        participant = make_participant(id="a1b2c3d4", name="Jane Doe")
        write_store([participant])

        response = await client.get("/cert/a1b2c3d4")

        assert response.status_code == 200
        body = response.text
        assert "Jane Doe" in body
        assert "February 13, 2026" in body
        assert "AI Opener Certificate" in body
        assert "Miles Partnership" in body
        assert "a1b2c3d4" in body

    async def test_open_graph_metadata(self, client: AsyncClient, write_store):
        write_store([make_participant(id="a1b2c3d4")])

        response = await client.get("/cert/a1b2c3d4")

        assert (
            '<meta property="og:image" '
            'content="https://certs.example.com/cert/a1b2c3d4/image">'
        ) in response.text
        assert (
            '<meta property="og:url" content="https://certs.example.com/cert/a1b2c3d4">'
        ) in response.text

    async def test_certificate_img_is_same_origin_for_csp(
        self, client: AsyncClient, write_store
    ):
        write_store([make_participant(id="a1b2c3d4")])

        response = await client.get("/cert/a1b2c3d4")

        csp = response.headers["content-security-policy"]
        img_sources = next(
            directive.split()[1:]
            for directive in csp.split(";")
            if directive.split()[0] == "img-src"
        )
        assert "'self'" in img_sources
        assert "https://certs.example.com" not in img_sources
        match = re.search(r'<img class="certificate" src="([^"]+)"', response.text)
        assert match is not None
        assert match.group(1) == "/cert/a1b2c3d4/image"

    async def test_linkedin_buttons(
        self, client: AsyncClient, write_store, settings_env: Settings
    ):
        participant = make_participant(id="a1b2c3d4")
        write_store([participant])

        response = await client.get("/cert/a1b2c3d4")

        add_url = html.escape(build_add_to_profile_url(participant, settings_env))
        share_url = html.escape(build_share_url(participant, settings_env))
        assert f'href="{add_url}"' in response.text
        assert f'href="{share_url}"' in response.text
        assert "Add to Profile" in response.text
        assert "Share" in response.text

    async def test_name_is_escaped(self, client: AsyncClient, write_store):
        write_store([make_participant(id="a1b2c3d4", name='Jane "JD" <Doe>')])

        response = await client.get("/cert/a1b2c3d4")

        assert "<Doe>" not in response.text
        assert "&lt;Doe&gt;" in response.text

    async def test_sees_records_added_after_startup(
        self, client: AsyncClient, write_store
    ):
        write_store([make_participant(id="00000001")])
        assert (await client.get("/cert/00000002")).status_code == 404

        write_store([make_participant(id="00000001"), make_participant(id="00000002")])

        assert (await client.get("/cert/00000002")).status_code == 200


class TestCertificateImage:
    async def test_unknown_id_returns_404_text(self, client: AsyncClient, write_store):
        write_store([make_participant(id="a1b2c3d4")])

        response = await client.get("/cert/deadbeef/image")

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Certificate not found"

    async def test_returns_png(self, client: AsyncClient, write_store):
        write_store([make_participant(id="a1b2c3d4")])

        response = await client.get("/cert/a1b2c3d4/image")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["cache-control"] == "public, max-age=86400"
        assert response.content.startswith(PNG_MAGIC)

    async def test_repeat_requests_are_byte_identical_and_rendered_once(
        self, client: AsyncClient, write_store
    ):
        write_store([make_participant(id="a1b2c3d4")])

        with patch(
            "services.certificates_service.render_certificate",
            wraps=certificates_service.render_certificate,
        ) as spy:
            first = await client.get("/cert/a1b2c3d4/image")
            second = await client.get("/cert/a1b2c3d4/image")

        assert first.content == second.content
        assert spy.call_count == 1

    async def test_cached_image_is_stale_after_record_edit(
        self, client: AsyncClient, write_store
    ):
        write_store([make_participant(id="a1b2c3d4", name="Jane Doe")])
        before = await client.get("/cert/a1b2c3d4/image")

        write_store([make_participant(id="a1b2c3d4", name="Janet Doe")])
        after = await client.get("/cert/a1b2c3d4/image")

        assert before.content == after.content

    async def test_missing_template_returns_500_text(
        self,
        client: AsyncClient,
        write_store,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ):
        write_store([make_participant(id="a1b2c3d4")])
        monkeypatch.setenv("TEMPLATE_IMAGE_PATH", str(tmp_path / "missing.png"))
        clear_settings_cache()

        response = await client.get("/cert/a1b2c3d4/image")

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Error generating certificate image"

    async def test_rate_limited(
        self, client: AsyncClient, write_store, monkeypatch: pytest.MonkeyPatch
    ):
        write_store([make_participant(id="a1b2c3d4")])
        monkeypatch.setenv("IMAGE_RATE_LIMIT", "1/minute")
        clear_settings_cache()
        limiter.reset()

        with patch("core.ratelimit.limiter.enabled", True):
            first = await client.get("/cert/a1b2c3d4/image")
            second = await client.get("/cert/a1b2c3d4/image")

        limiter.reset()
        assert first.status_code == 200
        assert second.status_code == 429
        assert second.json()["detail"] == "Rate limit exceeded. Please slow down."
