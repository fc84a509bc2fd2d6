"""Cryptographic utilities - password hashing and tokens.

Two kinds of token exist. Invitation tokens are opaque random strings; only
their SHA-256 digest is stored, so a database leak does not leak usable
invitations. Session tokens are signed JWTs that name the user and nothing
else: role and business are always read from the database.
"""

import secrets
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from hashlib import sha256
from uuid import UUID

import argon2
from jose import JWTError, jwt

from src.teamspace.core.config import get_settings

ACCESS_TOKEN_TYPE = "access"
INVITATION_TOKEN_BYTES = 32


@lru_cache
def password_hasher() -> argon2.PasswordHasher:
    settings = get_settings()
    return argon2.PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


@lru_cache
def dummy_password_hash() -> str:
    """Hash checked when the email is unknown, so login timing does not reveal it."""
    return password_hasher().hash(secrets.token_urlsafe(16))


def hash_password(password: str) -> str:
    return password_hasher().hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """False on mismatch and on a hash that is not Argon2 at all."""
    try:
        return password_hasher().verify(hashed, password)
    except (argon2.exceptions.VerificationError, argon2.exceptions.InvalidHashError):
        return False


def generate_invitation_token() -> str:
    return secrets.token_urlsafe(INVITATION_TOKEN_BYTES)


def hash_token(token: str) -> str:
    return sha256(token.encode()).hexdigest()


def create_access_token(user_id: UUID, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": str(user_id),
        "exp": datetime.now(UTC) + lifetime,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(  # type: ignore[no-any-return]
        claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
    )


def decode_access_token(token: str) -> UUID | None:
    """User id named by a valid, unexpired access token, else None."""
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    if claims.get("type") != ACCESS_TOKEN_TYPE:
        return None
    try:
        return UUID(str(claims.get("sub")))
    except ValueError:
        return None
