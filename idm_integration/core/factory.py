"""Builds IDM services for a Keycloak server."""
from __future__ import annotations
import logging
from typing import Optional

from .idm_service import IdmService, PublicIdmService
from .keycloak.client import REQUEST_TIMEOUT, KeycloakClient, PublicKeycloakClient

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_PATH = "/auth"


class IdmServiceFactory:
    """Creates IdmService / PublicIdmService instances.

    Usage:
        factory = IdmServiceFactory("http://keycloak:8080")
        idm = factory.create_idm_service("demo", "automation-cli", secret)
        realm = factory.create_public_idm_service().get_realm("demo")
    """

    def __init__(
        self,
        server_url: str,
        context_path: str = DEFAULT_CONTEXT_PATH,
        timeout: float = REQUEST_TIMEOUT,
    ):
        """Initialize factory.

        Args:
            server_url: Keycloak server URL without context path
            context_path: Keycloak context path ("/auth" for legacy distributions, "" for Quarkus)
            timeout: Per-request timeout in seconds
        """
        self.server_url = server_url.rstrip("/")
        self.context_path = context_path.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "IdmServiceFactory":
        return cls(settings.server_url, settings.context_path, settings.request_timeout)

    @property
    def server_auth_url(self) -> str:
        return f"{self.server_url}{self.context_path}"

    def create_idm_service(self, realm: str, client_id: str, client_secret: str) -> IdmService:
        """Create an admin service authenticating with client credentials in ``realm``."""
        logger.info(f"Creating IDM service for realm {realm} (client {client_id})")
        client = KeycloakClient(self.server_auth_url, timeout=self.timeout)
        client.authenticate_service_account(realm, client_id, client_secret)
        return IdmService(client, realm)

    def create_public_idm_service(self, timeout: Optional[float] = None) -> PublicIdmService:
        client = PublicKeycloakClient(self.server_auth_url, timeout=timeout or self.timeout)
        return PublicIdmService(client)
