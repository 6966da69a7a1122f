"""Keycloak Admin API client library.

Every provider call goes through ``wrap_keycloak_request`` so that transport
and HTTP failures surface as ``KeycloakOperationError`` with a message naming
the attempted operation.

Architecture:
- client.py: HTTP client with service-account authentication and auto-refresh
- realm.py: Realm handle and access token
- users.py: User lookup, attribute update, create and update
- roles.py: Realm roles, role members and user role mappings
- search.py: Attribute search request variants and endpoint dispatch
- exceptions.py: Typed exceptions and the failure-translation helper

Usage:
    from idm_integration.core.keycloak import KeycloakClient, RealmService, UserService

    client = KeycloakClient("http://keycloak:8080/auth")
    client.authenticate_service_account("demo", "automation-cli", "secret")

    realm = RealmService(client, "demo").get_realm_resource()
    users = UserService(client).get_users_by_username(realm, "alice")
"""
from .client import (
    KeycloakClient,
    PublicKeycloakClient,
    REQUEST_TIMEOUT,
)
from .exceptions import (
    KeycloakError,
    KeycloakAPIError,
    KeycloakOperationError,
    UserAlreadyExistsError,
    UserLookupError,
    UserMappingError,
    wrap_keycloak_request,
)
from .realm import RealmResource, RealmService
from .roles import RoleScope, RoleService
from .users import UserService
from .search import (
    SearchRequest,
    SearchService,
    SearchUserQuery,
    SearchUsersByAttributesRequest,
    SearchUsersByAttributesResponse,
    SearchUsersByEqualsAndStartsWithAttributesRequest,
    SearchUsersByRoleAndAttributesRequest,
)

__all__ = [
    # Client
    "KeycloakClient",
    "PublicKeycloakClient",
    "REQUEST_TIMEOUT",

    # Exceptions
    "KeycloakError",
    "KeycloakAPIError",
    "KeycloakOperationError",
    "UserAlreadyExistsError",
    "UserLookupError",
    "UserMappingError",
    "wrap_keycloak_request",

    # Services
    "RealmResource",
    "RealmService",
    "RoleScope",
    "RoleService",
    "UserService",
    "SearchService",

    # Search requests
    "SearchRequest",
    "SearchUserQuery",
    "SearchUsersByEqualsAndStartsWithAttributesRequest",
    "SearchUsersByAttributesRequest",
    "SearchUsersByRoleAndAttributesRequest",
    "SearchUsersByAttributesResponse",
]
