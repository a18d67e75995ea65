"""Unit tests for JWTService."""

from datetime import timedelta
from uuid import uuid4

import jwt
import pytest

from smarttask_identity.exceptions import InvalidTokenError
from smarttask_identity.services import JWTService

SECRET = "unit-test-secret-" + "k" * 64
OTHER_SECRET = "another-secret-" + "z" * 64


class TestJWTServiceInit:
    """Tests for JWTService initialization."""

    def test_init_with_valid_secret(self):
        service = JWTService(secret_key=SECRET)

        assert service.access_token_expire == timedelta(minutes=10)

    def test_init_with_empty_secret_raises(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            JWTService(secret_key="")

    def test_init_with_short_secret_raises(self):
        with pytest.raises(ValueError, match="at least 32 bytes"):
            JWTService(secret_key="too-short")

    def test_init_with_custom_expiry(self):
        service = JWTService(secret_key=SECRET, access_token_expire_minutes=30)

        assert service.access_token_expire == timedelta(minutes=30)


class TestAccessTokens:
    """Tests for access token creation and verification."""

    def setup_method(self):
        self.service = JWTService(secret_key=SECRET)
        self.user_id = uuid4()
        self.email = "test@example.com"

    def test_verify_valid_access_token(self):
        token = self.service.create_access_token(user_id=self.user_id, email=self.email)

        payload = self.service.verify_token(token)

        assert payload.user_id == self.user_id
        assert payload.email == self.email
        assert payload.token_type == "access"
        assert payload.is_access_token()

    def test_token_carries_issuer_audience_and_algorithm(self):
        token = self.service.create_access_token(user_id=self.user_id, email=self.email)

        header = jwt.get_unverified_header(token)
        claims = jwt.decode(token, options={"verify_signature": False})

        assert header["alg"] == "HS512"
        assert claims["iss"] == "smart-task-ai2"
        assert claims["aud"] == "smart-task-ai2-users"
        assert claims["sub"] == str(self.user_id)
        assert claims["exp"] - claims["iat"] == 600

    def test_verify_expired_token_raises(self):
        token = self.service.create_access_token(
            user_id=self.user_id,
            email=self.email,
            expires_delta=timedelta(seconds=-1),
        )

        with pytest.raises(InvalidTokenError, match="expired"):
            self.service.verify_token(token)

    def test_verify_token_signed_with_other_key_raises(self):
        other = JWTService(secret_key=OTHER_SECRET)
        token = other.create_access_token(user_id=self.user_id, email=self.email)

        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token)

    def test_verify_token_with_other_issuer_raises(self):
        other = JWTService(secret_key=SECRET, issuer="someone-else")
        token = other.create_access_token(user_id=self.user_id, email=self.email)

        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token)

    def test_verify_token_with_other_audience_raises(self):
        other = JWTService(secret_key=SECRET, audience="other-users")
        token = other.create_access_token(user_id=self.user_id, email=self.email)

        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token)

    def test_verify_hs256_token_raises(self):
        """Only HS512 is accepted, even with the right key."""
        token = jwt.encode(
            {
                "sub": str(self.user_id),
                "email": self.email,
                "type": "access",
                "iat": 0,
                "exp": 4102444800,
                "iss": "smart-task-ai2",
                "aud": "smart-task-ai2-users",
            },
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token)

    def test_verify_unsigned_token_raises(self):
        token = jwt.encode(
            {"sub": str(self.user_id), "email": self.email, "type": "access"},
            key=None,
            algorithm="none",
        )

        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token)

    def test_verify_malformed_token_raises(self):
        with pytest.raises(InvalidTokenError):
            self.service.verify_token("not.a.token")

    def test_verify_token_missing_claims_raises(self):
        token = jwt.encode(
            {"sub": str(self.user_id), "exp": 4102444800},
            SECRET,
            algorithm="HS512",
        )

        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token)

    def test_verify_token_with_non_uuid_subject_raises(self):
        token = jwt.encode(
            {
                "sub": "not-a-uuid",
                "email": self.email,
                "type": "access",
                "iat": 0,
                "exp": 4102444800,
                "iss": "smart-task-ai2",
                "aud": "smart-task-ai2-users",
            },
            SECRET,
            algorithm="HS512",
        )

        with pytest.raises(InvalidTokenError, match="Malformed"):
            self.service.verify_token(token)


class TestDecodeAccessToken:
    def setup_method(self):
        self.service = JWTService(secret_key=SECRET)

    def test_returns_payload_for_valid_token(self):
        user_id = uuid4()
        token = self.service.create_access_token(user_id, "a@x.com")

        payload = self.service.decode_access_token(token)

        assert payload is not None
        assert payload.user_id == user_id

    def test_returns_none_for_garbage(self):
        assert self.service.decode_access_token("garbage") is None
        assert self.service.decode_access_token("") is None

    def test_returns_none_for_non_access_type(self):
        token = jwt.encode(
            {
                "sub": str(uuid4()),
                "email": "a@x.com",
                "type": "refresh",
                "iat": 0,
                "exp": 4102444800,
                "iss": "smart-task-ai2",
                "aud": "smart-task-ai2-users",
            },
            SECRET,
            algorithm="HS512",
        )

        assert self.service.decode_access_token(token) is None
