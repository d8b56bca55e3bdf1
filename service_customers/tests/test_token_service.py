"""
Unit tests for TokenService.
"""

import pytest
import jwt
from datetime import datetime, timezone
from unittest.mock import patch

from service_customers.app.auth.token_service import _UNKNOWN_USER_PASSWORD, TokenService, IssuedToken
from service_customers.app.auth.token_validator import TokenValidator
from shared.config import default_credentials
from shared.errors import InvalidCredentialsError
from shared.test_helpers import TEST_SECRET, FrozenClock, TestDataFactory


class TestTokenService:
    """Test cases for TokenService."""

    @pytest.fixture
    def clock(self):
        """Fixed clock."""
        return FrozenClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))

    @pytest.fixture
    def token_service(self, clock):
        """Create TokenService instance."""
        return TokenService(TEST_SECRET, default_credentials(), ttl_seconds=3600, clock=clock)

    @pytest.fixture
    def token_validator(self, clock):
        """Create TokenValidator sharing the same clock."""
        return TokenValidator(TEST_SECRET, clock=clock)

    @pytest.mark.parametrize("user", TestDataFactory.create_test_users(), ids=lambda u: u.username)
    def test_issued_token_round_trips(self, token_service, token_validator, user):
        """Test claims of an issued token survive validation unchanged."""
        issued = token_service.issue_token(user.username, user.password)
        claims = token_validator.validate(issued.access_token)

        assert claims.subject == user.username
        assert claims.role == user.role

    def test_issue_token_sets_expiry_from_ttl(self, token_service, clock):
        """Test iat/exp in the signed payload."""
        issued = token_service.issue_token("user", "password")
        payload = jwt.decode(issued.access_token, TEST_SECRET, algorithms=["HS256"],
                             options={"verify_exp": False})

        assert isinstance(issued, IssuedToken)
        assert issued.token_type == "Bearer"
        assert issued.expires_in == 3600
        assert payload["iat"] == int(clock.now.timestamp())
        assert payload["exp"] == payload["iat"] + 3600
        assert payload["sub"] == "user"
        assert payload["role"] == "User"

    def test_wrong_password_rejected(self, token_service):
        """Test wrong password."""
        with pytest.raises(InvalidCredentialsError):
            token_service.issue_token("user", "not-the-password")

    def test_unknown_user_rejected(self, token_service):
        """Test unknown username."""
        with pytest.raises(InvalidCredentialsError):
            token_service.issue_token("mallory", "password")

    def test_unknown_user_and_wrong_password_look_identical(self, token_service):
        """Test the two failure modes cannot be told apart."""
        with pytest.raises(InvalidCredentialsError) as unknown:
            token_service.issue_token("mallory", "password")
        with pytest.raises(InvalidCredentialsError) as wrong:
            token_service.issue_token("user", "wrong")

        assert unknown.value.code == wrong.value.code == "INVALID_CREDENTIALS"
        assert unknown.value.message == wrong.value.message
        assert unknown.value.details == wrong.value.details

    def test_unknown_user_not_compared_to_signing_secret(self, token_service):
        """Test an unknown user is checked against a dummy value, never the signing key."""
        with patch("service_customers.app.auth.token_service.hmac.compare_digest",
                   return_value=False) as compare:
            with pytest.raises(InvalidCredentialsError):
                token_service.issue_token("mallory", TEST_SECRET)

        expected, supplied = compare.call_args.args
        assert expected == _UNKNOWN_USER_PASSWORD
        assert expected != TEST_SECRET.encode("utf-8")
        assert supplied == TEST_SECRET.encode("utf-8")

    @pytest.mark.parametrize("username,password", [("", "password"), ("user", ""), ("", "")])
    def test_empty_credentials_rejected(self, token_service, username, password):
        """Test empty username or password."""
        with pytest.raises(InvalidCredentialsError):
            token_service.issue_token(username, password)

    def test_password_is_case_sensitive(self, token_service):
        """Test password comparison is exact."""
        with pytest.raises(InvalidCredentialsError):
            token_service.issue_token("user", "PASSWORD")

    def test_token_signed_with_service_secret(self, token_service):
        """Test a different secret cannot verify the token."""
        issued = token_service.issue_token("admin", "password")

        with pytest.raises(jwt.InvalidSignatureError):
            jwt.decode(issued.access_token, "x" * 32, algorithms=["HS256"])
