"""Keycloak user representation → IdmUser transformations.

Usage:
    users = IdmUsersMapper.to_idm_users(keycloak_users)
    page = IdmUsersMapper.to_idm_users_response(search_response)
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List

from .keycloak.exceptions import UserMappingError
from .keycloak.search import SearchUsersByAttributesResponse
from .model import FULL_NAME_ATTRIBUTE, FULL_NAME_ATTRIBUTE_INDEX, IdmUser, IdmUsersResponse


class IdmUsersMapper:
    """Maps raw Keycloak users to domain users."""

    @staticmethod
    def has_full_name_attribute(kc_user: Dict[str, Any]) -> bool:
        """Return True if the user carries the fullName attribute.

        Service accounts have no fullName, so this is what filters them out.
        """
        attributes = kc_user.get("attributes")
        return attributes is not None and attributes.get(FULL_NAME_ATTRIBUTE) is not None

    @staticmethod
    def get_full_name(kc_user: Dict[str, Any]) -> str:
        """Return the first fullName value.

        Raises:
            UserMappingError: If the fullName list is present but empty
        """
        values = kc_user["attributes"][FULL_NAME_ATTRIBUTE]
        if len(values) <= FULL_NAME_ATTRIBUTE_INDEX:
            raise UserMappingError(
                f"User {kc_user.get('username')} has an empty {FULL_NAME_ATTRIBUTE} attribute"
            )
        return values[FULL_NAME_ATTRIBUTE_INDEX]

    @staticmethod
    def to_idm_user(kc_user: Dict[str, Any]) -> IdmUser:
        """Convert a Keycloak user representation to an IdmUser.

        Args:
            kc_user: Keycloak user representation with the fullName attribute

        Returns:
            IdmUser with the attribute map copied unchanged

        Example:
            >>> user = IdmUsersMapper.to_idm_user({
            ...     "id": "abc123",
            ...     "username": "jane_doe",
            ...     "enabled": True,
            ...     "attributes": {"fullName": ["Jane Doe"], "drfo": ["123"]},
            ... })
            >>> user.full_name
            'Jane Doe'
        """
        return IdmUser(
            id=kc_user.get("id"),
            username=kc_user.get("username"),
            full_name=IdmUsersMapper.get_full_name(kc_user),
            enabled=kc_user.get("enabled", True),
            attributes=kc_user["attributes"],
        )

    @staticmethod
    def to_idm_users(kc_users: Iterable[Dict[str, Any]]) -> List[IdmUser]:
        """Map users that have a fullName, sorted by full name."""
        users = [
            IdmUsersMapper.to_idm_user(kc_user)
            for kc_user in kc_users
            if IdmUsersMapper.has_full_name_attribute(kc_user)
        ]
        return sorted(users, key=lambda user: user.full_name)

    @staticmethod
    def to_idm_users_response(response: SearchUsersByAttributesResponse) -> IdmUsersResponse:
        return IdmUsersResponse(
            users=IdmUsersMapper.to_idm_users(response.users),
            pagination=response.pagination,
        )
