"""Pytest configuration and shared fixtures.

This module provides:
- Settings pointed at a per-test data file and template image
- A Pillow-generated 1200x630 template graphic
- A helper to seed the JSON store
- An httpx client for the FastAPI app (rate limiting is disabled in routes/conftest.py)
"""

import json
from collections.abc import AsyncGenerator, Callable, Sequence
from pathlib import Path
import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image

from core.config import Settings, clear_settings_cache, get_settings
from rendering.certificates import TEMPLATE_SIZE
from repositories.participant_repository import ParticipantRepository
from schemas import Participant

TEST_BASE_URL = "https://certs.example.com"


@pytest.fixture(autouse=True)
def _clear_settings():
    """Clear lru_cache between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "participants.json"


@pytest.fixture
def template_image(tmp_path: Path) -> Path:
    path = tmp_path / "assets" / "certificate-template.png"
    path.parent.mkdir(parents=True)
    Image.new("RGB", TEMPLATE_SIZE, "#1a1a2e").save(path, format="PNG")
    return path


@pytest.fixture
def settings_env(
    monkeypatch: pytest.MonkeyPatch, data_file: Path, template_image: Path
) -> Settings:
    """Environment-driven settings for app and CLI tests."""
    monkeypatch.setenv("DATA_FILE", str(data_file))
    monkeypatch.setenv("TEMPLATE_IMAGE_PATH", str(template_image))
    monkeypatch.setenv("BASE_URL", TEST_BASE_URL)
    monkeypatch.setenv("ORG_NAME", "Miles+Partnership")
    clear_settings_cache()
    return get_settings()


@pytest.fixture
def repo(data_file: Path) -> ParticipantRepository:
    return ParticipantRepository(data_file)


@pytest.fixture
def write_store(data_file: Path) -> Callable[[Sequence[Participant]], None]:
    """Seed the store file the way the importer writes it."""

    def _write(participants: Sequence[Participant]) -> None:
        data_file.parent.mkdir(parents=True, exist_ok=True)
        records = [p.to_record() for p in participants]
        data_file.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")

    return _write


@pytest.fixture
async def client(settings_env: Settings) -> AsyncGenerator[AsyncClient]:
    """HTTP client for the app with a clean image cache per test."""
    from main import app

    app.state.image_cache.clear()
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.state.image_cache.clear()
