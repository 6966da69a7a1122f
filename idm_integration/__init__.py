"""Keycloak IDM integration.

Exposes IdmService (admin operations on one realm) and PublicIdmService
(published realm metadata) built by IdmServiceFactory.
"""
from .config import IdmSettings, load_settings
from .core.factory import IdmServiceFactory
from .core.idm_mapper import IdmUsersMapper
from .core.idm_service import IdmService, PublicIdmService
from .core.keycloak import (
    KeycloakError,
    KeycloakAPIError,
    KeycloakOperationError,
    UserAlreadyExistsError,
    UserLookupError,
    UserMappingError,
    SearchUserQuery,
    SearchUsersByAttributesRequest,
    SearchUsersByEqualsAndStartsWithAttributesRequest,
    SearchUsersByRoleAndAttributesRequest,
)
from .core.model import (
    IdmRole,
    IdmUser,
    IdmUsersResponse,
    OffsetPagination,
    Pagination,
    PublishedIdmRealm,
)

__version__ = "1.0.0"

__all__ = [
    "IdmSettings",
    "load_settings",
    "IdmServiceFactory",
    "IdmUsersMapper",
    "IdmService",
    "PublicIdmService",
    "KeycloakError",
    "KeycloakAPIError",
    "KeycloakOperationError",
    "UserAlreadyExistsError",
    "UserLookupError",
    "UserMappingError",
    "SearchUserQuery",
    "SearchUsersByAttributesRequest",
    "SearchUsersByEqualsAndStartsWithAttributesRequest",
    "SearchUsersByRoleAndAttributesRequest",
    "IdmRole",
    "IdmUser",
    "IdmUsersResponse",
    "OffsetPagination",
    "Pagination",
    "PublishedIdmRealm",
]
