"""Pytest shared fixtures: a stubbed Keycloak behind requests."""
import json
import pathlib
import sys
from typing import Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from idm_integration.core.keycloak import KeycloakClient, RealmResource

SERVER_URL = "http://kc:8080"
BASE_URL = f"{SERVER_URL}/auth"
REALM = "testRealm"
ADMIN = f"/admin/realms/{REALM}"


class _StubResponse:
    def __init__(self, payload=None, status_code: int = 200, headers: Optional[dict] = None, url: str = ""):
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {}
        self.url = url
        self.text = json.dumps(payload) if payload is not None else ""

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(response=self)


class StubKeycloak:
    """Routes requests.* calls to canned responses keyed by (method, path)."""

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.add("POST", f"/realms/{REALM}/protocol/openid-connect/token",
                 {"access_token": "test-token", "expires_in": 300})

    def add(self, method, path, payload=None, status_code=200, headers=None, exc=None):
        self.routes[(method, f"{BASE_URL}{path}")] = (payload, status_code, headers, exc)

    def requests_for(self, method, path):
        url = f"{BASE_URL}{path}"
        return [call for call in self.calls if call[0] == method and call[1] == url]

    def dispatch(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        route = self.routes.get((method, url))
        if route is None:
            raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")
        payload, status_code, headers, exc = route
        if exc is not None:
            raise exc
        return _StubResponse(payload, status_code, headers, url)


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def keycloak_stub(monkeypatch):
    """Prevent unit tests from hitting a live Keycloak."""
    stub = StubKeycloak()
    for method in ("get", "post", "put", "delete"):
        monkeypatch.setattr(
            requests,
            method,
            lambda url, *args, _method=method.upper(), **kwargs: stub.dispatch(_method, url, **kwargs),
        )
    return stub


@pytest.fixture()
def kc_client():
    client = KeycloakClient(BASE_URL)
    client.authenticate_service_account(REALM, "idm-client", "idm-secret")
    return client


@pytest.fixture()
def realm_resource():
    return RealmResource(name=REALM, representation={"realm": REALM})


def kc_user(username, full_name=None, user_id=None, enabled=True, **attributes):
    """Build a Keycloak user representation."""
    attrs = {key: list(value) for key, value in attributes.items()}
    if full_name is not None:
        attrs["fullName"] = [full_name]
    return {
        "id": user_id or f"{username}-id",
        "username": username,
        "enabled": enabled,
        "attributes": attrs or None,
    }
