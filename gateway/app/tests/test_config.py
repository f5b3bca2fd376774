import pytest
from pydantic import ValidationError
from fastapi.testclient import TestClient

from gateway.app.config import Settings, validate_configuration
from gateway.app.main import create_app


REQUIRED = {
    "GOOGLE_CLIENT_ID": "test-client-id",
    "GOOGLE_CLIENT_SECRET": "test-client-secret",
    "REDIRECT_URL": "https://app.example.com/auth/callback",
    "CLIENT_URL": "https://app.example.com/",
    "TOKEN_SECRET": "test-session-secret-0123456789abcdef",
}


def make_settings(**overrides) -> Settings:
    values = {**REQUIRED, **overrides}
    return Settings(_env_file=None, **values)


def test_defaults():
    settings = make_settings()

    assert settings.TOKEN_EXPIRATION_SECONDS == 36000
    assert settings.PORT == 5000
    assert settings.SESSION_JWT_ALGORITHM == "HS256"
    assert settings.PROVIDER_AUTH_URL == "https://accounts.google.com/o/oauth2/auth"
    assert settings.PROVIDER_TOKEN_URL == "https://oauth2.googleapis.com/token"
    assert settings.allowed_origins_list == ["https://app.example.com"]


def test_settings_are_immutable():
    settings = make_settings()

    with pytest.raises(ValidationError):
        settings.TOKEN_SECRET = "changed-secret-0123456789abcdefghij"


def test_loaded_from_environment(monkeypatch):
    for key, value in REQUIRED.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("PORT", "8081")

    settings = Settings(_env_file=None)

    assert settings.GOOGLE_CLIENT_ID == "test-client-id"
    assert settings.PORT == 8081


@pytest.mark.parametrize("overrides", [
    {"SESSION_JWT_ALGORITHM": "none"},
    {"SESSION_JWT_ALGORITHM": "RS256"},
    {"TOKEN_SECRET": "too-short"},
    {"REDIRECT_URL": "app.example.com/callback"},
    {"LOG_LEVEL": "chatty"},
])
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValidationError):
        make_settings(**overrides)


def test_public_view_omits_secrets():
    view = make_settings().public_view()

    assert REQUIRED["TOKEN_SECRET"] not in view.values()
    assert REQUIRED["GOOGLE_CLIENT_SECRET"] not in view.values()
    assert view["client_id"] == "test-client-id"


def test_validate_configuration_flags_fixed_state():
    report = validate_configuration(make_settings())

    assert report["valid"] is True
    assert any("OAUTH_STATE" in w for w in report["warnings"])


def test_validate_configuration_rejects_reused_secret():
    secret = "shared-secret-0123456789abcdefghijkl"
    report = validate_configuration(
        make_settings(GOOGLE_CLIENT_SECRET=secret, TOKEN_SECRET=secret)
    )

    assert report["valid"] is False
    assert report["errors"]


def test_startup_refuses_reused_secret():
    secret = "shared-secret-0123456789abcdefghijkl"
    app = create_app(make_settings(GOOGLE_CLIENT_SECRET=secret, TOKEN_SECRET=secret))

    with pytest.raises(RuntimeError, match="TOKEN_SECRET"):
        with TestClient(app):
            pass


def test_startup_with_valid_configuration():
    app = create_app(make_settings())

    with TestClient(app, base_url="https://testserver") as client:
        assert client.get("/health").status_code == 200
        assert app.state.http_client is not None
