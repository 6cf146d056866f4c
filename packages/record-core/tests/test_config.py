"""Tests for environment-based settings."""

from record_core.config import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("RECORD_API_URL", "RECORD_USER_ID", "RECORD_RECENT_WINDOW_DAYS"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings()
        assert settings.api_url == "http://localhost:8080"
        assert settings.user_id == ""
        assert settings.recent_window_days == 7
        assert settings.serialize_like_toggles is False

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("RECORD_API_URL", "https://api.example.com")
        monkeypatch.setenv("RECORD_USER_ID", "u1")
        monkeypatch.setenv("RECORD_SERIALIZE_LIKE_TOGGLES", "true")
        settings = Settings()
        assert settings.api_url == "https://api.example.com"
        assert settings.user_id == "u1"
        assert settings.serialize_like_toggles is True
