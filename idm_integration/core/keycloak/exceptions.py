"""Keycloak-specific exceptions for error handling."""
from __future__ import annotations
import logging
from typing import Callable, TypeVar, Union

import requests

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeycloakError(Exception):
    """Base exception for all Keycloak operations."""
    pass


class KeycloakAPIError(KeycloakError):
    """HTTP error from Keycloak Admin API.

    Attributes:
        status_code: HTTP status code
        message: Error message from response
        endpoint: API endpoint that failed
    """

    def __init__(self, status_code: int, message: str, endpoint: str):
        self.status_code = status_code
        self.message = message
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {endpoint}: {message}")


class KeycloakOperationError(KeycloakError):
    """A provider call failed; the original failure is chained as __cause__."""
    pass


class UserAlreadyExistsError(KeycloakError):
    """User creation failed - username already exists."""
    pass


class UserLookupError(KeycloakError):
    """Username lookup did not return exactly one user."""
    pass


class UserMappingError(KeycloakError):
    """User attributes are present but unusable (e.g. empty fullName list)."""
    pass


def wrap_keycloak_request(call: Callable[[], T], message: Union[str, Callable[[], str]]) -> T:
    """Run a provider call and translate transport failures.

    Args:
        call: Zero-argument callable performing the request
        message: Failure description, or a callable producing it

    Returns:
        Whatever ``call`` returns

    Raises:
        KeycloakOperationError: If the call raised an HTTP, transport or decoding error
    """
    try:
        return call()
    except (KeycloakAPIError, requests.RequestException, ValueError) as exc:
        text = message() if callable(message) else message
        logger.warning(f"{text}: {exc}")
        raise KeycloakOperationError(text) from exc
