"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info(f"Loaded {secret_name} from /run/secrets")
                return secret_value
        except OSError as e:
            logger.warning(f"Failed to read /run/secrets/{secret_name}: {e}")

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.info(f"Loaded {env_var} from environment (fallback)")
            return secret_value

    return None


@dataclass
class IdmSettings:
    """Keycloak connection settings supplied by the host application."""
    server_url: str = "http://keycloak:8080"
    context_path: str = "/auth"
    realm: str = "demo"
    client_id: str = "automation-cli"
    client_secret: str = ""
    request_timeout: float = 5

    @property
    def server_auth_url(self) -> str:
        return f"{self.server_url.rstrip('/')}{self.context_path.rstrip('/')}"

    @property
    def client_secret_resolved(self) -> str:
        """Service account client secret.

        Priority:
        1. Configured value in client_secret
        2. Docker secrets: /run/secrets/keycloak_service_client_secret
        3. Environment variable: KEYCLOAK_SERVICE_CLIENT_SECRET

        Raises:
            ValueError: If no secret is available
        """
        if self.client_secret:
            return self.client_secret

        secret = _load_secret_from_file("keycloak_service_client_secret", "KEYCLOAK_SERVICE_CLIENT_SECRET")
        if secret:
            return secret

        raise ValueError(
            "KEYCLOAK_SERVICE_CLIENT_SECRET not found. "
            "Provide it via Docker secrets or environment variable."
        )


def _parse_timeout(raw: Optional[str]) -> float:
    if not raw:
        return IdmSettings.request_timeout
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"KEYCLOAK_REQUEST_TIMEOUT must be a number, got {raw!r}")


def load_settings() -> IdmSettings:
    """Load Keycloak settings from environment and /run/secrets."""
    settings = IdmSettings(
        server_url=os.environ.get("KEYCLOAK_URL", IdmSettings.server_url),
        context_path=os.environ.get("KEYCLOAK_CONTEXT_PATH", IdmSettings.context_path),
        realm=os.environ.get("KEYCLOAK_REALM", IdmSettings.realm),
        client_id=os.environ.get("KEYCLOAK_SERVICE_CLIENT_ID", IdmSettings.client_id),
        client_secret=_load_secret_from_file("keycloak_service_client_secret", "KEYCLOAK_SERVICE_CLIENT_SECRET") or "",
        request_timeout=_parse_timeout(os.environ.get("KEYCLOAK_REQUEST_TIMEOUT")),
    )
    logger.info(
        f"Keycloak settings: url={settings.server_auth_url}, realm={settings.realm}, "
        f"client_id={settings.client_id}, secret={'***' if settings.client_secret else 'EMPTY'}"
    )
    return settings
