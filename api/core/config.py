"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROGRAM_NAME = "AI Opener Certificate"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    port: int = 3000

    # Public origin used in share links and importer output.
    # Empty means "http://localhost:{port}".
    base_url: str = ""

    # "+" is rendered as a space wherever the name is displayed or encoded
    org_name: str = "Miles+Partnership"

    # JSON array of participants, relative to the working directory
    data_file: str = "data/participants.json"

    # Background graphic (1200x630) that names and dates are drawn onto
    template_image_path: str = "assets/certificate-template.png"

    # TrueType fonts for the overlay text; Pillow's bundled font is used
    # when these are not installed
    font_path: str = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"
    font_bold_path: str = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"

    # slowapi limit string for the image endpoint
    image_rate_limit: str = "120/minute"

    debug: bool = False  # Enables /docs

    log_level: str = "INFO"
    # "console" (colored when stderr is a terminal) or "json"
    log_format: str = "console"

    @property
    def base_url_resolved(self) -> str:
        """BASE_URL without a trailing slash, derived from PORT if unset."""
        if self.base_url:
            return self.base_url.rstrip("/")
        return f"http://localhost:{self.port}"

    @property
    def org_display_name(self) -> str:
        return self.org_name.replace("+", " ")

    @property
    def data_file_path(self) -> Path:
        return Path(self.data_file)

    @property
    def template_image_file(self) -> Path:
        return Path(self.template_image_path)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this in tests to reset settings between test cases.
    After clearing, the next get_settings() call will create
    a fresh Settings instance with current environment variables.

    Example:
        def test_something(monkeypatch):
            monkeypatch.setenv("ORG_NAME", "Acme+Corp")
            clear_settings_cache()
            settings = get_settings()  # Fresh instance
    """
    get_settings.cache_clear()
