"""Tests for Settings defaults, environment overrides and storage keys."""

from __future__ import annotations

import pytest

from src.hookline.config import Environment, Settings, StorageBackend, get_settings


class TestSettings:
    """Tests for the Settings model."""

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("STORAGE_BACKEND", raising=False)
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.ENVIRONMENT == Environment.development
        assert settings.STORAGE_BACKEND == StorageBackend.json
        assert settings.SEED_SAMPLE_DATA is True
        assert settings.RECENT_ACTIVITY_LIMIT == 5

    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("STORAGE_BACKEND", "redis")
        monkeypatch.setenv("SEED_SAMPLE_DATA", "false")
        monkeypatch.setenv("ENVIRONMENT", "production")
        settings = Settings(_env_file=None)
        assert settings.STORAGE_BACKEND == StorageBackend.redis
        assert settings.SEED_SAMPLE_DATA is False
        assert settings.ENVIRONMENT == Environment.production

    def test_unknown_backend_rejected(self) -> None:
        with pytest.raises(ValueError):
            Settings(_env_file=None, STORAGE_BACKEND="sqlite")

    def test_storage_key(self) -> None:
        assert Settings(_env_file=None).storage_key("contacts") == "hl_contacts"
        assert Settings(_env_file=None, STORAGE_KEY_PREFIX="crm:").storage_key("deals") == "crm:deals"

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()

    @pytest.mark.parametrize("limit", [0, -3])
    def test_recent_activity_limit_must_be_positive(self, limit: int) -> None:
        with pytest.raises(ValueError):
            Settings(_env_file=None, RECENT_ACTIVITY_LIMIT=limit)

    def test_recent_activity_limit_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("RECENT_ACTIVITY_LIMIT", "-1")
        with pytest.raises(ValueError):
            Settings(_env_file=None)
