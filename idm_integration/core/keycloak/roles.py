"""Keycloak role management operations."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .client import KeycloakClient
from .exceptions import KeycloakOperationError, wrap_keycloak_request
from .realm import RealmResource

logger = logging.getLogger(__name__)


@dataclass
class RoleScope:
    """Realm-level role mappings of a single user."""
    realm: str
    user_id: str

    @property
    def path(self) -> str:
        return f"/admin/realms/{self.realm}/users/{self.user_id}/role-mappings/realm"


def _role_names(roles: List[Dict[str, Any]]) -> List[str]:
    return [role.get("name") for role in roles]


class RoleService:
    """Service for managing Keycloak realm roles."""

    def __init__(self, client: KeycloakClient):
        """Initialize role service.

        Args:
            client: Authenticated Keycloak client
        """
        self.client = client

    def get_roles(self, realm_resource: RealmResource) -> List[Dict[str, Any]]:
        """List realm role representations."""
        realm = realm_resource.name
        logger.info(f"Selecting keycloak roles in realm {realm}")
        roles = wrap_keycloak_request(
            lambda: self.client.get(f"{realm_resource.admin_path}/roles").json(),
            f"Couldn't select roles from realm {realm}",
        )
        logger.info(f"Found {len(roles)} keycloak roles in realm {realm}")
        return roles

    def get_role(self, realm_resource: RealmResource, role: str) -> Dict[str, Any]:
        """Return the representation of a single realm role."""
        realm = realm_resource.name
        logger.info(f"Finding role {role} in keycloak realm {realm}")
        result = wrap_keycloak_request(
            lambda: self.client.get(f"{realm_resource.admin_path}/roles/{role}").json(),
            f"Couldn't find role {role} in realm {realm}",
        )
        logger.info(f"Role {role} in realm {realm} is found")
        return result

    def get_role_user_members(
        self,
        realm_resource: RealmResource,
        role: str,
        first: Optional[int] = None,
        max_results: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """List users holding a realm role.

        Args:
            realm_resource: Realm handle
            role: Role name
            first: Offset of the first user to return
            max_results: Maximum number of users to return
        """
        realm = realm_resource.name
        params = {}
        if first is not None:
            params["first"] = first
        if max_results is not None:
            params["max"] = max_results

        logger.info(f"Selecting keycloak users with role {role} in realm {realm}")
        members = wrap_keycloak_request(
            lambda: self.client.get(f"{realm_resource.admin_path}/roles/{role}/users", params=params or None).json(),
            f"Couldn't get keycloak users with role {role} in realm {realm}",
        )
        logger.info(f"Selected {len(members)} users with role {role} in realm {realm}")
        return members

    def get_role_scope(self, realm_resource: RealmResource, user_id: str) -> RoleScope:
        """Return the realm-level role scope of a user.

        No request is made; the scope is a handle for list/add/remove.
        """
        if not user_id:
            raise KeycloakOperationError(
                f"Couldn't find keycloak role scope resource by userId {user_id} in realm {realm_resource.name}"
            )
        logger.info(f"Found role scope resource by userId {user_id} in realm {realm_resource.name}")
        return RoleScope(realm=realm_resource.name, user_id=user_id)

    def list_role_scope(self, scope: RoleScope) -> List[Dict[str, Any]]:
        """List realm roles currently assigned to the user."""
        return wrap_keycloak_request(
            lambda: self.client.get(scope.path).json(),
            f"Couldn't get realm roles of user {scope.user_id} in realm {scope.realm}",
        )

    def add_roles(self, scope: RoleScope, roles: List[Dict[str, Any]]) -> None:
        """Assign realm roles to the user."""
        names = _role_names(roles)
        logger.info(f"Adding roles {names} to user {scope.user_id}")
        wrap_keycloak_request(
            lambda: self.client.post(scope.path, json=roles),
            lambda: f"Couldn't add roles {names} to user",
        )
        logger.info(f"Roles {names} added to user {scope.user_id}")

    def remove_roles(self, scope: RoleScope, roles: List[Dict[str, Any]]) -> None:
        """Revoke realm roles from the user."""
        names = _role_names(roles)
        logger.info(f"Removing roles {names} from user {scope.user_id}")
        wrap_keycloak_request(
            lambda: self.client.delete(scope.path, json=roles),
            lambda: f"Couldn't remove roles {names} from user",
        )
        logger.info(f"Roles {names} removed from user {scope.user_id}")
