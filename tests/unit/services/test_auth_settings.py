from datetime import timedelta

import pytest

from config import ApplicationConfig
from src.app.services.auth_settings import AuthSettings


def test_from_config_defaults():
    settings = AuthSettings.from_config(ApplicationConfig)

    assert settings.access_ttl == timedelta(seconds=ApplicationConfig.ACCESS_TOKEN_EXPIRES_SECONDS)
    assert settings.refresh_ttl == timedelta(days=ApplicationConfig.REFRESH_TOKEN_EXPIRES_DAYS)
    assert settings.jwt_access_secret != settings.jwt_refresh_secret


def test_identical_secrets_rejected():
    with pytest.raises(ValueError):
        AuthSettings(jwt_access_secret="same", jwt_refresh_secret="same")


def test_non_positive_ttl_rejected():
    with pytest.raises(ValueError):
        AuthSettings(
            jwt_access_secret="a",
            jwt_refresh_secret="b",
            access_token_expires_seconds=0,
        )
