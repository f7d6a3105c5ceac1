import pytest
from pydantic import ValidationError

from typerone.core.config import DEV_JWT_SECRET, Settings

STRONG_SECRET = "x" * 40


def test_defaults():
    config = Settings(_env_file=None, MODE="development", JWT_SECRET=STRONG_SECRET)

    assert config.JWT_ACCESS_TOKEN_EXPIRY == "15m"
    assert config.JWT_REFRESH_TOKEN_EXPIRY == "7d"
    assert config.PASSWORD_RESET_TTL_SECONDS == 300
    assert config.JWT_ALGORITHM == "HS256"
    assert not config.is_production


def test_short_secret_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, JWT_SECRET="too-short")


def test_unknown_mode_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, MODE="staging")


def test_dev_secret_is_rejected_in_production():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, MODE="production", JWT_SECRET=DEV_JWT_SECRET)


def test_production_with_real_secret():
    config = Settings(_env_file=None, MODE="production", JWT_SECRET=STRONG_SECRET)

    assert config.is_production


def test_stale_cookie_secret_in_environment_is_ignored(monkeypatch):
    monkeypatch.setenv("COOKIE_SECRET", "left-over-from-an-old-deploy")

    config = Settings(_env_file=None, JWT_SECRET=STRONG_SECRET)

    assert "COOKIE_SECRET" not in Settings.model_fields
    assert not hasattr(config, "COOKIE_SECRET")
