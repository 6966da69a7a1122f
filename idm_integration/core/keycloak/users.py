"""Keycloak user management operations."""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from .client import KeycloakClient
from .exceptions import KeycloakAPIError, UserAlreadyExistsError, UserLookupError, wrap_keycloak_request
from .realm import RealmResource

logger = logging.getLogger(__name__)


class UserService:
    """Service for managing Keycloak users."""

    def __init__(self, client: KeycloakClient):
        """Initialize user service.

        Args:
            client: Authenticated Keycloak client
        """
        self.client = client

    def get_users_by_username(self, realm_resource: RealmResource, username: str) -> List[Dict[str, Any]]:
        """Return users whose username exactly matches (case-insensitive in Keycloak).

        Args:
            realm_resource: Realm handle
            username: Username to search for

        Returns:
            List of user representations, usually zero or one
        """
        realm = realm_resource.name
        logger.info(f"Finding user {username} in keycloak realm {realm}")
        users = wrap_keycloak_request(
            lambda: self.client.get(
                f"{realm_resource.admin_path}/users",
                params={"username": username, "exact": "true"},
            ).json(),
            f"Couldn't find users {username} in realm {realm}",
        )
        logger.info(f"Found {len(users)} users with username {username} in realm {realm}")
        return users

    def get_user(self, realm_resource: RealmResource, user_id: str) -> Dict[str, Any]:
        """Return the full representation of a user."""
        return wrap_keycloak_request(
            lambda: self.client.get(f"{realm_resource.admin_path}/users/{user_id}").json(),
            f"Couldn't find user {user_id} in realm {realm_resource.name}",
        )

    def save_user_attribute(
        self,
        realm_resource: RealmResource,
        user_id: str,
        attribute: str,
        values: List[str],
    ) -> None:
        """Replace one attribute's value list (read-modify-write, no locking).

        Concurrent writers to the same user may lose updates.

        Args:
            realm_resource: Realm handle
            user_id: User ID
            attribute: Attribute name
            values: New value list
        """
        realm = realm_resource.name
        logger.info(f"Saving user attribute {attribute} in realm {realm}")

        def _save() -> None:
            url = f"{realm_resource.admin_path}/users/{user_id}"
            user_rep = self.client.get(url).json()
            if user_rep.get("attributes") is None:
                user_rep["attributes"] = {}
            user_rep["attributes"][attribute] = values
            self.client.put(url, json=user_rep)

        wrap_keycloak_request(
            _save,
            f"Couldn't save attribute {attribute} of user {user_id} in realm {realm}",
        )
        logger.info(f"User attribute {attribute} is saved in realm {realm}")

    def create_user(self, realm_resource: RealmResource, representation: Dict[str, Any]) -> str:
        """Create a user and return its ID.

        Args:
            realm_resource: Realm handle
            representation: Keycloak user representation

        Returns:
            ID of the new user

        Raises:
            UserAlreadyExistsError: If Keycloak reports a conflict (HTTP 409)
            KeycloakOperationError: On any other failure
            ValueError: If the representation has no username
        """
        realm = realm_resource.name
        username = representation.get("username")
        if not username:
            raise ValueError(f"Couldn't create user without username in realm {realm}")

        def _create():
            try:
                return self.client.post(f"{realm_resource.admin_path}/users", json=representation)
            except KeycloakAPIError as exc:
                if exc.status_code == 409:
                    raise UserAlreadyExistsError(f"User with username {username} already exists") from exc
                raise

        logger.info(f"Creating user {username} in realm {realm}")
        resp = wrap_keycloak_request(_create, f"Couldn't create user {username} in realm {realm}")

        user_id = self._id_from_location(resp.headers.get("Location"))
        if not user_id:
            matches = self.get_users_by_username(realm_resource, username)
            user_id = next((u["id"] for u in matches if (u.get("username") or "").lower() == username.lower()), None)
        logger.info(f"User {username} created in realm {realm} (id={user_id})")
        return user_id

    def update_user(self, realm_resource: RealmResource, representation: Dict[str, Any]) -> None:
        """Overwrite a user with the given full representation.

        Raises:
            UserLookupError: If the representation carries no ``id``
        """
        user_id = representation.get("id")
        if not user_id:
            raise UserLookupError(f"Couldn't update user {representation.get('username')} without id")
        logger.info(f"Updating user {user_id} in realm {realm_resource.name}")
        wrap_keycloak_request(
            lambda: self.client.put(f"{realm_resource.admin_path}/users/{user_id}", json=representation),
            f"Couldn't update user {user_id} in realm {realm_resource.name}",
        )

    @staticmethod
    def _id_from_location(location: Optional[str]) -> Optional[str]:
        """Extract the user ID from a ``.../users/{id}`` Location header."""
        if not location:
            return None
        return location.rstrip("/").rsplit("/", 1)[-1] or None
