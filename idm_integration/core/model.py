"""Domain objects returned to host applications."""
from __future__ import annotations
import base64
import textwrap
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from cryptography.hazmat.primitives import serialization

# Keycloak user attributes with a fixed meaning for the platform
FULL_NAME_ATTRIBUTE = "fullName"
FULL_NAME_ATTRIBUTE_INDEX = 0
DRFO = "drfo"
EDRPOU = "edrpou"
KATOTTG = "KATOTTG"


@dataclass
class IdmUser:
    """User as exposed to the host application."""
    id: Optional[str]
    username: str
    full_name: Optional[str] = None
    enabled: bool = True
    attributes: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class IdmRole:
    """Realm-level role."""
    name: str
    id: Optional[str] = None
    description: Optional[str] = None


@dataclass
class Pagination:
    """Continuation-token pagination; ``continue_token`` is opaque."""
    limit: Optional[int] = None
    continue_token: Optional[int] = None


@dataclass
class OffsetPagination:
    offset: Optional[int] = None
    limit: Optional[int] = None


@dataclass
class IdmUsersResponse:
    """A page of mapped users plus the provider's pagination, if any."""
    users: List[IdmUser] = field(default_factory=list)
    pagination: Optional[Pagination] = None


@dataclass
class PublishedIdmRealm:
    """Public realm metadata. Only the signing key is kept."""
    public_key: Optional[str]

    def public_key_pem(self) -> str:
        """Return the base64 DER public key wrapped as a PEM block."""
        if not self.public_key:
            raise ValueError("Realm does not publish a public key")
        body = "\n".join(textwrap.wrap(self.public_key, 64))
        return f"-----BEGIN PUBLIC KEY-----\n{body}\n-----END PUBLIC KEY-----\n"

    def load_public_key(self):
        """Load the key with ``cryptography`` for signature verification."""
        if not self.public_key:
            raise ValueError("Realm does not publish a public key")
        return serialization.load_der_public_key(base64.b64decode(self.public_key))
