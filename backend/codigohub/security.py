"""
CodigoHub Backend — Identity, Roles and Credentials
====================================================

What:  The Actor type, the Role enum, password hashing and bearer tokens.
Why:   Every authenticated service call receives `actor = (id, role)`.
       Resolving it from the Authorization header happens here, once, so
       services only ever see an Actor.
How:   - Passwords: werkzeug.security (salted PBKDF2/scrypt hashes)
       - Tokens:    PyJWT, HS256, claims `sub` (user id as str) and `rol`
       - FastAPI:   get_current_actor dependency built on HTTPBearer
"""

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from werkzeug.security import check_password_hash, generate_password_hash

from codigohub.config import settings
from codigohub.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    """User roles. ADMIN overrides ownership checks in every manager."""

    USUARIO = "usuario"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    """The authenticated identity performing an operation."""

    id: int
    role: Role = Role.USUARIO

    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def owns(self, owner_id: Optional[int]) -> bool:
        return owner_id is not None and self.id == owner_id


# ── Passwords ─────────────────────────────────────────────────────────────
def hash_password(raw_password: str) -> str:
    return generate_password_hash(raw_password)


def verify_password(password_hash: str, raw_password: str) -> bool:
    return check_password_hash(password_hash, raw_password)


# ── Tokens ────────────────────────────────────────────────────────────────
def create_access_token(user_id: int, role: Role) -> str:
    """
    Issue a signed bearer token for a user.

    PyJWT requires `sub` to be a string; it is converted back to int in
    decode_access_token.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "rol": role.value,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expires_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Actor:
    """
    Verify a bearer token and build the Actor it identifies.

    Raises:
        AuthenticationError: expired, tampered or malformed token
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError as e:
        logger.warning("Rejected bearer token: %s", str(e))
        raise AuthenticationError("Invalid token")

    try:
        return Actor(id=int(payload["sub"]), role=Role(payload.get("rol", Role.USUARIO.value)))
    except (KeyError, ValueError):
        raise AuthenticationError("Invalid token claims")


# ── FastAPI Dependency ────────────────────────────────────────────────────
# auto_error=False so a missing header goes through our own 401 handler
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Actor:
    """Resolve the Actor for an authenticated route."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing bearer token")
    return decode_access_token(credentials.credentials)
