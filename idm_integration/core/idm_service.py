"""IDM façade over the Keycloak services.

Architecture:
    host app ──> IdmService ──> core.keycloak services ──> Keycloak
                     │
                     └──> IdmUsersMapper (fullName filter + sort)

    host app ──> PublicIdmService ──> PublicKeycloakClient (no credentials)
"""
from __future__ import annotations
import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Union

from .idm_mapper import IdmUsersMapper
from .keycloak.client import KeycloakClient, PublicKeycloakClient
from .keycloak.exceptions import UserLookupError, wrap_keycloak_request
from .keycloak.realm import RealmResource, RealmService
from .keycloak.roles import RoleService
from .keycloak.search import SearchRequest, SearchService
from .keycloak.users import UserService
from .model import FULL_NAME_ATTRIBUTE, FULL_NAME_ATTRIBUTE_INDEX, IdmRole, IdmUser, IdmUsersResponse, PublishedIdmRealm

logger = logging.getLogger(__name__)


class IdmService:
    """Admin operations on one realm, authenticated as a service account."""

    def __init__(self, client: KeycloakClient, realm: str):
        self.client = client
        self.realm = realm
        self.realms = RealmService(client, realm)
        self.roles = RoleService(client)
        self.users = UserService(client)
        self.search = SearchService(client, realm)

    def get_client_access_token(self) -> str:
        return self.realms.get_client_access_token()

    def get_roles(self) -> List[IdmRole]:
        return [
            IdmRole(name=role.get("name"), id=role.get("id"), description=role.get("description"))
            for role in self.get_role_representations()
        ]

    def get_role_representations(self) -> List[Dict[str, Any]]:
        """Raw role representations, usable with add_roles/remove_roles."""
        realm_resource = self.realms.get_realm_resource()
        return self.roles.get_roles(realm_resource)

    def add_role(self, username: str, role: str) -> None:
        realm_resource = self.realms.get_realm_resource()
        role_rep = self.roles.get_role(realm_resource, role)
        self._add_roles(realm_resource, username, [role_rep])

    def add_roles(self, username: str, roles: List[Dict[str, Any]]) -> None:
        """Assign already-resolved role representations to a user."""
        realm_resource = self.realms.get_realm_resource()
        self._add_roles(realm_resource, username, roles)

    def remove_role(self, username: str, role: str) -> None:
        realm_resource = self.realms.get_realm_resource()
        role_rep = self.roles.get_role(realm_resource, role)
        self._remove_roles(realm_resource, username, [role_rep])

    def remove_roles(self, username: str, roles: List[Dict[str, Any]]) -> None:
        realm_resource = self.realms.get_realm_resource()
        self._remove_roles(realm_resource, username, roles)

    def get_user_roles(self, username: str) -> List[IdmRole]:
        """Realm roles currently assigned to the user."""
        realm_resource = self.realms.get_realm_resource()
        user = self._get_single_user(realm_resource, username)
        scope = self.roles.get_role_scope(realm_resource, user["id"])
        return [IdmRole(name=role.get("name"), id=role.get("id")) for role in self.roles.list_role_scope(scope)]

    def get_role_user_members(
        self,
        role: str,
        first: Optional[int] = None,
        max_results: Optional[int] = None,
    ) -> List[IdmUser]:
        realm_resource = self.realms.get_realm_resource()
        members = self.roles.get_role_user_members(realm_resource, role, first, max_results)
        return IdmUsersMapper.to_idm_users(members)

    def search_users(self, request: SearchRequest) -> Union[List[IdmUser], IdmUsersResponse]:
        """Search users by attributes.

        Legacy request variants return a sorted list of users; paginated
        variants return an IdmUsersResponse carrying the provider's
        pagination unchanged.
        """
        result = self.search.search(request)
        if request.PAGINATED:
            return IdmUsersMapper.to_idm_users_response(result)
        return IdmUsersMapper.to_idm_users(result)

    def get_user_by_username(self, username: str) -> List[IdmUser]:
        realm_resource = self.realms.get_realm_resource()
        return IdmUsersMapper.to_idm_users(self.users.get_users_by_username(realm_resource, username))

    def save_user_attribute(self, username: str, attribute: str, values: List[str]) -> None:
        """Replace one attribute of the first user matching ``username``."""
        realm_resource = self.realms.get_realm_resource()
        users = self.users.get_users_by_username(realm_resource, username)
        if not users:
            raise UserLookupError(f"Found 0 users with name {username}, but expect one")
        self.users.save_user_attribute(realm_resource, users[0]["id"], attribute, values)

    def create_user(self, user: IdmUser, roles: Optional[List[str]] = None) -> str:
        """Create a user and assign realm roles by name.

        Returns:
            ID of the new user

        Raises:
            UserAlreadyExistsError: If the username is taken
        """
        realm_resource = self.realms.get_realm_resource()
        user_id = self.users.create_user(realm_resource, self._to_representation(user))
        if roles:
            role_reps = [self.roles.get_role(realm_resource, role) for role in roles]
            scope = self.roles.get_role_scope(realm_resource, user_id)
            self.roles.add_roles(scope, role_reps)
        return user_id

    def update_user(self, user: IdmUser) -> None:
        """Overwrite the user's mutable fields (username, enabled, attributes).

        A user without an id is resolved by username first.

        Raises:
            UserLookupError: If the id is missing and the username does not match exactly one user
        """
        realm_resource = self.realms.get_realm_resource()
        representation = self._to_representation(user)
        if not representation.get("id"):
            representation["id"] = self._get_single_user(realm_resource, user.username)["id"]
        self.users.update_user(realm_resource, representation)

    def _add_roles(self, realm_resource: RealmResource, username: str, roles: List[Dict[str, Any]]) -> None:
        user = self._get_single_user(realm_resource, username)
        scope = self.roles.get_role_scope(realm_resource, user["id"])
        self.roles.add_roles(scope, roles)

    def _remove_roles(self, realm_resource: RealmResource, username: str, roles: List[Dict[str, Any]]) -> None:
        user = self._get_single_user(realm_resource, username)
        scope = self.roles.get_role_scope(realm_resource, user["id"])
        self.roles.remove_roles(scope, roles)

    def _get_single_user(self, realm_resource: RealmResource, username: str) -> Dict[str, Any]:
        users = self.users.get_users_by_username(realm_resource, username)
        if len(users) != 1:
            raise UserLookupError(f"Found {len(users)} users with name {username}, but expect one")
        return users[0]

    @staticmethod
    def _to_representation(user: IdmUser) -> Dict[str, Any]:
        fields = asdict(user)
        attributes = fields["attributes"]
        if fields["full_name"]:
            names = list(attributes.get(FULL_NAME_ATTRIBUTE) or [])
            if names:
                names[FULL_NAME_ATTRIBUTE_INDEX] = fields["full_name"]
            else:
                names = [fields["full_name"]]
            attributes[FULL_NAME_ATTRIBUTE] = names
        representation = {
            "username": fields["username"],
            "enabled": fields["enabled"],
            "attributes": attributes,
        }
        if fields["id"]:
            representation["id"] = fields["id"]
        return representation


class PublicIdmService:
    """Reads public realm metadata; no credentials required."""

    def __init__(self, client: PublicKeycloakClient):
        self.client = client

    def get_realm(self, realm: str) -> PublishedIdmRealm:
        representation = wrap_keycloak_request(
            lambda: self.client.get_realm_representation(realm),
            f"Couldn't get published realm {realm}",
        )
        return PublishedIdmRealm(public_key=representation.get("public_key"))
