"""Tests for environment configuration."""

import pytest

from skybrief.config import Settings, clamp_enroute_points, DEFAULT_CACHE_TTL_SECONDS


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("CHECKWX_API_KEY", "AVWX_API_TOKEN", "SKYBRIEF_CACHE_TTL_SECONDS",
                     "SKYBRIEF_DISABLE_PUBLIC_API", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings.from_env()

        assert settings.cache_ttl_seconds == DEFAULT_CACHE_TTL_SECONDS == 300
        assert settings.checkwx_api_key is None
        assert settings.disable_public_api is False
        assert settings.log_level == "INFO"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CHECKWX_API_KEY", "abc")
        monkeypatch.setenv("SKYBRIEF_CACHE_TTL_SECONDS", "60")
        monkeypatch.setenv("SKYBRIEF_DISABLE_PUBLIC_API", "true")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        settings = Settings.from_env()

        assert settings.checkwx_api_key == "abc"
        assert settings.cache_ttl_seconds == 60
        assert settings.disable_public_api is True
        assert settings.log_level == "DEBUG"

    def test_blank_key_is_missing(self, monkeypatch):
        monkeypatch.setenv("AVWX_API_TOKEN", "  ")
        assert Settings.from_env().avwx_api_token is None

    def test_invalid_integer(self, monkeypatch):
        monkeypatch.setenv("SKYBRIEF_MAX_WORKERS", "many")
        with pytest.raises(ValueError):
            Settings.from_env()

    def test_timeout_clamped(self):
        assert Settings(http_timeout=60).http_timeout == 15
        assert Settings(http_timeout=1).http_timeout == 10

    def test_invalid_ttl(self):
        with pytest.raises(ValueError):
            Settings(cache_ttl_seconds=0)


class TestClampEnroutePoints:

    def test_clamp(self):
        assert clamp_enroute_points(None) == 8
        assert clamp_enroute_points(1) == 2
        assert clamp_enroute_points(12) == 12
        assert clamp_enroute_points(500) == 50
