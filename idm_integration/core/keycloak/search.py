"""Attribute-based user search against the Keycloak search extension.

The extension evolved through several request shapes. Each shape is its own
request class; ``SearchService.search`` posts any of them to the matching
endpoint and returns either a plain user list (legacy shapes) or a
``SearchUsersByAttributesResponse`` (paginated shapes).
"""
from __future__ import annotations
import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Union, get_args

from ..model import DRFO, EDRPOU, OffsetPagination, Pagination
from .client import KeycloakClient
from .exceptions import wrap_keycloak_request

logger = logging.getLogger(__name__)


def _drop_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


@dataclass
class SearchUserQuery:
    """Exact match on single-valued attributes.

    Deprecated: use SearchUsersByAttributesRequest.
    """
    ENDPOINT: ClassVar[str] = "/realms/{realm}/users/search"
    PAGINATED: ClassVar[bool] = False
    PAGINATION_TOKEN: ClassVar[bool] = False
    DEPRECATED: ClassVar[bool] = True

    attributes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        drfo: Optional[str] = None,
        edrpou: Optional[str] = None,
        attributes: Optional[Dict[str, str]] = None,
    ) -> "SearchUserQuery":
        merged = dict(attributes or {})
        if drfo is not None:
            merged[DRFO] = drfo
        if edrpou is not None:
            merged[EDRPOU] = edrpou
        return cls(attributes=merged)

    def to_payload(self) -> Dict[str, Any]:
        return {"attributes": self.attributes}


@dataclass
class SearchUsersByEqualsAndStartsWithAttributesRequest:
    """Exact and prefix match on single-valued attributes.

    Deprecated: use SearchUsersByAttributesRequest.
    """
    ENDPOINT: ClassVar[str] = "/realms/{realm}/users/search-by-attributes"
    PAGINATED: ClassVar[bool] = False
    PAGINATION_TOKEN: ClassVar[bool] = False
    DEPRECATED: ClassVar[bool] = True

    attributes_equals: Optional[Dict[str, str]] = None
    attributes_starts_with: Optional[Dict[str, str]] = None

    def to_payload(self) -> Dict[str, Any]:
        return _drop_none({
            "attributesEquals": self.attributes_equals,
            "attributesStartsWith": self.attributes_starts_with,
        })


@dataclass
class SearchUsersByAttributesRequest:
    """Paginated search with continuation token.

    ``attributes_that_are_start_for`` matches users whose attribute value is a
    prefix of one of the given values (the inverse of starts-with).
    """
    ENDPOINT: ClassVar[str] = "/realms/{realm}/users/v2/search-by-attributes"
    PAGINATED: ClassVar[bool] = True
    PAGINATION_TOKEN: ClassVar[bool] = True
    DEPRECATED: ClassVar[bool] = False

    attributes_equals: Optional[Dict[str, List[str]]] = None
    attributes_starts_with: Optional[Dict[str, List[str]]] = None
    attributes_that_are_start_for: Optional[Dict[str, List[str]]] = None
    pagination: Optional[Pagination] = None

    def to_payload(self) -> Dict[str, Any]:
        pagination = None
        if self.pagination is not None:
            pagination = _drop_none({
                "limit": self.pagination.limit,
                "continueToken": self.pagination.continue_token,
            })
        return _drop_none({
            "attributesEquals": self.attributes_equals,
            "attributesStartsWith": self.attributes_starts_with,
            "attributesThatAreStartFor": self.attributes_that_are_start_for,
            "pagination": pagination,
        })


@dataclass
class SearchUsersByRoleAndAttributesRequest:
    """Offset-paginated search restricted to holders of a realm role.

    The provider returns no continuation token for this shape, so the
    response never carries pagination.
    """
    ENDPOINT: ClassVar[str] = "/realms/{realm}/users/v3/search-by-attributes"
    PAGINATED: ClassVar[bool] = True
    PAGINATION_TOKEN: ClassVar[bool] = False
    DEPRECATED: ClassVar[bool] = False

    role_name: Optional[str] = None
    attributes_equals: Optional[Dict[str, List[str]]] = None
    attributes_starts_with: Optional[Dict[str, List[str]]] = None
    pagination: Optional[OffsetPagination] = None

    def to_payload(self) -> Dict[str, Any]:
        pagination = None
        if self.pagination is not None:
            pagination = _drop_none({"offset": self.pagination.offset, "limit": self.pagination.limit})
        return _drop_none({
            "attributesEquals": self.attributes_equals,
            "attributesStartsWith": self.attributes_starts_with,
            "roleName": self.role_name,
            "pagination": pagination,
        })


SearchRequest = Union[
    SearchUserQuery,
    SearchUsersByEqualsAndStartsWithAttributesRequest,
    SearchUsersByAttributesRequest,
    SearchUsersByRoleAndAttributesRequest,
]


@dataclass
class SearchUsersByAttributesResponse:
    """Raw page returned by the paginated search endpoints."""
    users: List[Dict[str, Any]] = field(default_factory=list)
    pagination: Optional[Pagination] = None

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "SearchUsersByAttributesResponse":
        pagination = payload.get("pagination")
        return cls(
            users=payload.get("users") or [],
            pagination=Pagination(
                limit=pagination.get("limit"),
                continue_token=pagination.get("continueToken"),
            ) if pagination else None,
        )


class SearchService:
    """Posts search requests to the realm's search endpoints."""

    def __init__(self, client: KeycloakClient, realm: str):
        self.client = client
        self.realm = realm

    def search(self, request: SearchRequest) -> Union[List[Dict[str, Any]], SearchUsersByAttributesResponse]:
        """Run a search request.

        Args:
            request: Any of the search request variants

        Returns:
            A list of user representations for legacy variants, a
            SearchUsersByAttributesResponse for paginated ones

        Raises:
            TypeError: If ``request`` is not a known search variant
            KeycloakOperationError: If the search call fails
        """
        if not isinstance(request, get_args(SearchRequest)):
            raise TypeError(f"Unsupported search request: {type(request).__name__}")
        if request.DEPRECATED:
            warnings.warn(
                f"{type(request).__name__} is deprecated, use SearchUsersByAttributesRequest",
                DeprecationWarning,
                stacklevel=3,
            )

        path = request.ENDPOINT.format(realm=self.realm)
        logger.info(f"Searching users by attributes in realm {self.realm} ({type(request).__name__})")
        payload = wrap_keycloak_request(
            lambda: self.client.post(path, json=request.to_payload()).json(),
            f"Couldn't find users by attributes in realm {self.realm}",
        )
        if request.PAGINATED:
            response = SearchUsersByAttributesResponse.from_json(payload)
            if not request.PAGINATION_TOKEN:
                response.pagination = None
            return response
        return payload
