import pytest
from pydantic import ValidationError

from asoniped_backend.settings import BackendSettings, get_settings


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", '["https://asoniped.org"]')
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.auth_secret_key == "test-secret-key"
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["https://asoniped.org"]


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValidationError):
        BackendSettings(log_level="chatty")
