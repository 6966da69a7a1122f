"""Low-level HTTP client for Keycloak Admin API.

Handles service-account authentication, token management, and HTTP operations.
"""
from __future__ import annotations
import logging
import threading
from typing import Optional, Dict, Any
from datetime import datetime, timedelta

import requests

from .exceptions import KeycloakAPIError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 5

# Refresh a cached token this long before Keycloak says it expires
TOKEN_EXPIRY_LEEWAY = timedelta(seconds=10)


class KeycloakClient:
    """HTTP client for Keycloak Admin API with automatic token management.

    Features:
    - Client credentials authentication against the service realm
    - Automatic token refresh when expired
    - Centralized error handling

    Usage:
        client = KeycloakClient("http://keycloak:8080/auth", timeout=5)
        client.authenticate_service_account("demo", "automation-cli", "secret")
        response = client.get("/admin/realms/demo/users")
    """

    def __init__(self, base_url: str, timeout: float = REQUEST_TIMEOUT):
        """Initialize Keycloak client.

        Args:
            base_url: Keycloak base URL including the context path (e.g. ``http://kc:8080/auth``)
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token: Optional[str] = None
        self._token_expires_at: Optional[datetime] = None
        self._auth_params: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def authenticate_service_account(self, auth_realm: str, client_id: str, client_secret: str) -> None:
        """Store service account credentials; the token is fetched lazily.

        Args:
            auth_realm: Realm where service account client exists
            client_id: Service account client ID
            client_secret: Service account client secret
        """
        self._auth_params = {
            "auth_realm": auth_realm,
            "client_id": client_id,
            "client_secret": client_secret,
        }
        self._token = None
        self._token_expires_at = None

    @property
    def access_token(self) -> str:
        """Current access token, refreshed when expired or expiring soon."""
        self._ensure_authenticated()
        return self._token

    def _ensure_authenticated(self) -> None:
        """Ensure we have a valid token, refreshing if necessary."""
        if not self._auth_params:
            raise KeycloakAPIError(401, "Not authenticated - call authenticate_service_account first", "")

        with self._lock:
            if self._token and self._token_expires_at and datetime.now() < self._token_expires_at - TOKEN_EXPIRY_LEEWAY:
                return
            token, expires_in = self._get_service_account_token(
                self._auth_params["auth_realm"],
                self._auth_params["client_id"],
                self._auth_params["client_secret"],
            )
            self._token = token
            self._token_expires_at = datetime.now() + timedelta(seconds=expires_in)

    def _headers(self, kwargs: Dict[str, Any]) -> Dict[str, str]:
        self._ensure_authenticated()
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Execute GET request with automatic authentication.

        Args:
            path: API endpoint path (e.g., "/admin/realms/demo/users")
            params: Query parameters
            **kwargs: Additional arguments for requests.get

        Returns:
            Response object

        Raises:
            KeycloakAPIError: On HTTP error
        """
        headers = self._headers(kwargs)
        resp = requests.get(f"{self.base_url}{path}", params=params, headers=headers, timeout=self.timeout, **kwargs)
        self._handle_error(resp)
        return resp

    def post(self, path: str, json: Any = None, data: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Execute POST request with automatic authentication.

        Args:
            path: API endpoint path
            json: JSON payload
            data: Form data payload
            **kwargs: Additional arguments for requests.post

        Returns:
            Response object

        Raises:
            KeycloakAPIError: On HTTP error
        """
        headers = self._headers(kwargs)
        resp = requests.post(f"{self.base_url}{path}", json=json, data=data, headers=headers, timeout=self.timeout, **kwargs)
        self._handle_error(resp)
        return resp

    def put(self, path: str, json: Any = None, **kwargs) -> requests.Response:
        """Execute PUT request with automatic authentication.

        Raises:
            KeycloakAPIError: On HTTP error
        """
        headers = self._headers(kwargs)
        resp = requests.put(f"{self.base_url}{path}", json=json, headers=headers, timeout=self.timeout, **kwargs)
        self._handle_error(resp)
        return resp

    def delete(self, path: str, **kwargs) -> requests.Response:
        """Execute DELETE request with automatic authentication.

        Keycloak expects the role list in the body when removing role mappings,
        so ``json=`` is passed through.

        Raises:
            KeycloakAPIError: On HTTP error
        """
        headers = self._headers(kwargs)
        resp = requests.delete(f"{self.base_url}{path}", headers=headers, timeout=self.timeout, **kwargs)
        self._handle_error(resp)
        return resp

    def _get_service_account_token(self, auth_realm: str, client_id: str, client_secret: str) -> tuple[str, int]:
        """Fetch a service account token using client credentials flow."""
        url = f"{self.base_url}/realms/{auth_realm}/protocol/openid-connect/token"
        data = {
            "grant_type": "client_credentials",
            "client_id": client_id,
            "client_secret": client_secret,
        }
        logger.debug(f"Requesting service account token for client {client_id} in realm {auth_realm}")
        resp = requests.post(url, data=data, timeout=self.timeout)
        if resp.status_code != 200:
            raise KeycloakAPIError(resp.status_code, resp.text, url)
        payload = resp.json()
        return payload["access_token"], int(payload.get("expires_in", 60))

    def _handle_error(self, resp: requests.Response) -> None:
        """Centralized error handling for HTTP responses.

        Raises:
            KeycloakAPIError: If response status indicates error
        """
        if resp.status_code >= 400:
            raise KeycloakAPIError(resp.status_code, resp.text, resp.url)


class PublicKeycloakClient:
    """Anonymous client for the public realm endpoints."""

    def __init__(self, base_url: str, timeout: float = REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def get_realm_representation(self, realm: str) -> Dict[str, Any]:
        """Return the published realm metadata (``realm``, ``public_key``, ...).

        Raises:
            KeycloakAPIError: On HTTP error
        """
        url = f"{self.base_url}/realms/{realm}"
        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code >= 400:
            raise KeycloakAPIError(resp.status_code, resp.text, url)
        return resp.json()
