import base64

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from conftest import BASE_URL, REALM
from idm_integration.core.idm_service import PublicIdmService
from idm_integration.core.keycloak import KeycloakOperationError, PublicKeycloakClient
from idm_integration.core.model import PublishedIdmRealm


def _der_public_key() -> str:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    der = key.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return base64.b64encode(der).decode()


def test_get_realm_returns_public_key(keycloak_stub):
    keycloak_stub.add("GET", f"/realms/{REALM}", {
        "realm": REALM,
        "public_key": "MIIBIjANBgkq",
        "token-service": f"{BASE_URL}/realms/{REALM}/protocol/openid-connect",
    })
    realm = PublicIdmService(PublicKeycloakClient(BASE_URL)).get_realm(REALM)
    assert realm == PublishedIdmRealm(public_key="MIIBIjANBgkq")


def test_get_realm_failure(keycloak_stub):
    keycloak_stub.add("GET", f"/realms/{REALM}", {"error": "Realm does not exist"}, status_code=404)
    with pytest.raises(KeycloakOperationError, match="Couldn't get published realm testRealm"):
        PublicIdmService(PublicKeycloakClient(BASE_URL)).get_realm(REALM)


def test_public_key_pem_round_trips_through_cryptography():
    realm = PublishedIdmRealm(public_key=_der_public_key())
    pem = realm.public_key_pem()
    assert pem.startswith("-----BEGIN PUBLIC KEY-----\n")
    loaded = serialization.load_pem_public_key(pem.encode())
    assert loaded.public_numbers() == realm.load_public_key().public_numbers()


def test_missing_public_key():
    with pytest.raises(ValueError):
        PublishedIdmRealm(public_key=None).public_key_pem()
