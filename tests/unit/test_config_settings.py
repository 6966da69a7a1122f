import pytest

from idm_integration.config import settings
from idm_integration.config.settings import IdmSettings, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in (
        "KEYCLOAK_URL",
        "KEYCLOAK_CONTEXT_PATH",
        "KEYCLOAK_REALM",
        "KEYCLOAK_SERVICE_CLIENT_ID",
        "KEYCLOAK_SERVICE_CLIENT_SECRET",
        "KEYCLOAK_REQUEST_TIMEOUT",
    ):
        monkeypatch.delenv(var, raising=False)

    real_path = settings.Path

    def fake_path(target):
        if str(target) == "/run/secrets":
            return tmp_path
        return real_path(target)

    monkeypatch.setattr(settings, "Path", fake_path)


def test_defaults():
    cfg = load_settings()
    assert cfg == IdmSettings()
    assert cfg.server_auth_url == "http://keycloak:8080/auth"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("KEYCLOAK_URL", "https://idm.example.com/")
    monkeypatch.setenv("KEYCLOAK_CONTEXT_PATH", "")
    monkeypatch.setenv("KEYCLOAK_REALM", "officer-portal")
    monkeypatch.setenv("KEYCLOAK_SERVICE_CLIENT_ID", "portal")
    monkeypatch.setenv("KEYCLOAK_SERVICE_CLIENT_SECRET", "env-secret")
    monkeypatch.setenv("KEYCLOAK_REQUEST_TIMEOUT", "2.5")

    cfg = load_settings()

    assert cfg.server_auth_url == "https://idm.example.com"
    assert cfg.realm == "officer-portal"
    assert cfg.client_id == "portal"
    assert cfg.client_secret_resolved == "env-secret"
    assert cfg.request_timeout == 2.5


def test_invalid_timeout(monkeypatch):
    monkeypatch.setenv("KEYCLOAK_REQUEST_TIMEOUT", "soon")
    with pytest.raises(RuntimeError):
        load_settings()


def test_secret_file_wins_over_environment(monkeypatch, tmp_path):
    (tmp_path / "keycloak_service_client_secret").write_text("file-secret\n")
    monkeypatch.setenv("KEYCLOAK_SERVICE_CLIENT_SECRET", "env-secret")
    assert load_settings().client_secret == "file-secret"


def test_configured_secret_preferred():
    assert IdmSettings(client_secret="from-config").client_secret_resolved == "from-config"


def test_missing_secret_raises():
    with pytest.raises(ValueError):
        IdmSettings().client_secret_resolved
