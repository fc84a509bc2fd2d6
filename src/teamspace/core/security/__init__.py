"""Security utilities.

Re-exports all security-related functions for convenience.
"""

from src.teamspace.core.security.crypto import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_access_token,
    dummy_password_hash,
    generate_invitation_token,
    hash_password,
    hash_token,
    verify_password,
)

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "create_access_token",
    "decode_access_token",
    "dummy_password_hash",
    "generate_invitation_token",
    "hash_password",
    "hash_token",
    "verify_password",
]
