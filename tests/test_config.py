"""Tests for config/settings.py"""

import pytest
from pydantic import ValidationError


class TestSettings:
    """Test Settings configuration."""

    def test_settings_loads(self):
        """Ensure Settings can be instantiated."""
        from config.settings import Settings

        settings = Settings()
        assert settings is not None

    def test_default_values(self):
        """Test default values are set and have correct types."""
        from config.settings import Settings

        settings = Settings()
        assert isinstance(settings.port, int)
        assert isinstance(settings.host, str)
        assert settings.display_timezone == "UTC"
        assert settings.spoiler_label == "Spoiler (click to reveal)"
        assert settings.preload_languages == []

    def test_get_settings_cached(self):
        """Test get_settings returns cached instance."""
        from config.settings import get_settings

        s1 = get_settings()
        s2 = get_settings()
        assert s1 is s2  # Same object (cached)

    def test_preload_languages_from_env(self, monkeypatch):
        """Comma separated PRELOAD_LANGUAGES becomes a list."""
        from config.settings import Settings

        monkeypatch.setenv("PRELOAD_LANGUAGES", "rust, go,,sql ")
        settings = Settings()
        assert settings.preload_languages == ["rust", "go", "sql"]

    def test_empty_preload_languages(self, monkeypatch):
        from config.settings import Settings

        monkeypatch.setenv("PRELOAD_LANGUAGES", "")
        assert Settings().preload_languages == []

    def test_display_timezone_from_env(self, monkeypatch):
        from config.settings import Settings

        monkeypatch.setenv("DISPLAY_TIMEZONE", "Europe/Berlin")
        assert Settings().display_timezone == "Europe/Berlin"

    def test_invalid_display_timezone(self, monkeypatch):
        """Unknown IANA zones are rejected at load time."""
        from config.settings import Settings

        monkeypatch.setenv("DISPLAY_TIMEZONE", "Atlantis/Capital")
        with pytest.raises(ValidationError):
            Settings()

    def test_directory_display_timezone(self, monkeypatch):
        """Region directories such as "America" are not zones."""
        from config.settings import Settings

        monkeypatch.setenv("DISPLAY_TIMEZONE", "America")
        with pytest.raises(ValidationError):
            Settings()

    def test_default_code_language_from_env(self, monkeypatch):
        from config.settings import Settings

        monkeypatch.setenv("DEFAULT_CODE_LANGUAGE", "python")
        assert Settings().default_code_language == "python"
