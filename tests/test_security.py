"""Unit tests for core/security.py password hashing and access tokens."""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

from jose import jwt

from core.config import get_settings
from core.security import (
    create_access_token,
    get_password_hash,
    read_access_token,
    verify_password,
)


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_get_password_hash_returns_hash(self):
        """Password hash should not equal the plaintext."""
        password = "securepassword123"  # pragma: allowlist secret
        hashed = get_password_hash(password)
        assert hashed != password
        assert hashed.startswith("$argon2id$")

    def test_verify_password_correct(self):
        password = "securepassword123"  # pragma: allowlist secret
        assert verify_password(password, get_password_hash(password)) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("correctpassword")  # pragma: allowlist secret
        assert verify_password("wrongpassword", hashed) is False

    def test_verify_password_malformed_hash(self):
        """Malformed hash should return False, not raise."""
        assert verify_password("anypassword", "not-a-valid-hash") is False


class TestAccessToken:
    """Tests for issuing and reading bearer tokens."""

    def test_token_round_trips_the_user_id(self):
        user_id = uuid4()
        assert read_access_token(create_access_token(user_id)) == user_id

    def test_custom_expiration_is_encoded(self):
        user_id = uuid4()
        token = create_access_token(user_id, expires_delta=timedelta(hours=2))
        claims = jwt.get_unverified_claims(token)
        default = jwt.get_unverified_claims(create_access_token(user_id))
        assert claims["sub"] == str(user_id)
        assert claims["exp"] > default["exp"]

    def test_expired_token_reads_as_anonymous(self):
        token = create_access_token(uuid4(), expires_delta=timedelta(minutes=-1))
        assert read_access_token(token) is None

    def test_garbage_token_reads_as_anonymous(self):
        assert read_access_token("not.a.valid.jwt") is None

    def test_token_signed_with_another_secret_is_ignored(self):
        settings = get_settings()
        token = jwt.encode(
            {"sub": str(uuid4()), "exp": 9999999999},
            "some-other-secret",
            algorithm=settings.ALGORITHM,
        )
        assert read_access_token(token) is None

    def test_token_without_usable_subject_is_ignored(self):
        settings = get_settings()
        for claims in ({"exp": 9999999999}, {"sub": "alice", "exp": 9999999999}):
            token = jwt.encode(
                claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM
            )
            assert read_access_token(token) is None
