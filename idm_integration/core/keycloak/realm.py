"""Keycloak realm operations."""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from .client import KeycloakClient
from .exceptions import wrap_keycloak_request

logger = logging.getLogger(__name__)


@dataclass
class RealmResource:
    """Handle of a realm, passed to the other services to scope their calls."""
    name: str
    representation: Dict[str, Any] = field(default_factory=dict)

    @property
    def admin_path(self) -> str:
        return f"/admin/realms/{self.name}"


class RealmService:
    """Service for the configured Keycloak realm."""

    def __init__(self, client: KeycloakClient, realm: str):
        """Initialize realm service.

        Args:
            client: Authenticated Keycloak client
            realm: Realm name
        """
        self.client = client
        self.realm = realm

    def get_realm_resource(self) -> RealmResource:
        """Fetch the realm representation.

        Raises:
            KeycloakOperationError: If the realm cannot be read
        """
        logger.info(f"Selecting keycloak realm {self.realm}")
        representation = wrap_keycloak_request(
            lambda: self.client.get(f"/admin/realms/{self.realm}").json(),
            f"Couldn't find realm {self.realm}",
        )
        logger.info(f"Keycloak realm {self.realm} found")
        return RealmResource(name=self.realm, representation=representation)

    def get_client_access_token(self) -> str:
        """Return the current service account access token."""
        return wrap_keycloak_request(
            lambda: self.client.access_token,
            f"Couldn't get access token, realm {self.realm}",
        )
