"""Tests for password hashing, session tokens and invitation token hashing."""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import jwt

from src.teamspace.core.config import get_settings
from src.teamspace.core.security import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_access_token,
    generate_invitation_token,
    hash_password,
    hash_token,
    verify_password,
)

pytestmark = pytest.mark.unit


class TestPasswordHashing:
    def test_round_trip(self):
        hashed = hash_password("Correct-Horse-Battery-42!")
        assert hashed != "Correct-Horse-Battery-42!"
        assert verify_password("Correct-Horse-Battery-42!", hashed)

    def test_wrong_password(self):
        assert not verify_password("wrong", hash_password("Correct-Horse-Battery-42!"))

    def test_garbage_hash_is_false_not_error(self):
        assert not verify_password("anything", "not-an-argon2-hash")

    def test_hashes_are_salted(self):
        assert hash_password("same") != hash_password("same")


class TestInvitationTokens:
    def test_tokens_are_unique_and_url_safe(self):
        tokens = {generate_invitation_token() for _ in range(50)}
        assert len(tokens) == 50
        for token in tokens:
            assert 16 <= len(token) <= 128
            assert all(c.isalnum() or c in "-_" for c in token)

    def test_hash_is_deterministic_and_not_the_token(self):
        token = generate_invitation_token()
        assert hash_token(token) == hash_token(token)
        assert hash_token(token) != token
        assert len(hash_token(token)) == 64


class TestAccessTokens:
    def test_round_trip_returns_the_user_id(self):
        user_id = uuid4()
        assert decode_access_token(create_access_token(user_id)) == user_id

    def test_claims_carry_identity_only(self):
        settings = get_settings()
        claims = jwt.decode(
            create_access_token(uuid4()),
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        assert claims["type"] == ACCESS_TOKEN_TYPE
        assert "role" not in claims
        assert "business_id" not in claims

    def test_expired_token_is_rejected(self):
        token = create_access_token(uuid4(), expires_delta=timedelta(seconds=-1))
        assert decode_access_token(token) is None

    def test_token_signed_with_other_key_is_rejected(self):
        settings = get_settings()
        forged = jwt.encode(
            {"sub": str(uuid4()), "type": ACCESS_TOKEN_TYPE},
            "another-secret-key-that-is-also-long-enough",
            algorithm=settings.jwt_algorithm,
        )
        assert decode_access_token(forged) is None

    def test_other_token_type_is_rejected(self):
        settings = get_settings()
        refresh = jwt.encode(
            {"sub": str(uuid4()), "type": "refresh"},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        assert decode_access_token(refresh) is None

    def test_garbage_is_rejected(self):
        assert decode_access_token("not.a.jwt") is None
