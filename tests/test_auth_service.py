"""Tests for registration, sessions and password hashing."""

import hashlib

import pytest

from conftest import basic_auth
from filestore.auth import extract_token, hash_password, parse_basic_credentials, verify_password
from filestore.exceptions import MissingFieldError, UnauthorizedError, UserAlreadyExistsError
from filestore.repositories.user_repository import UserRepository
from filestore.utils import utcnow


class TestPasswordHashing:

    def test_hash_is_salted(self):
        assert hash_password("secret123") != hash_password("secret123")

    def test_verify_bcrypt_hash(self):
        stored = hash_password("secret123")
        assert verify_password("secret123", stored)
        assert not verify_password("wrong", stored)

    def test_verify_legacy_sha1_hash(self):
        stored = hashlib.sha1(b"secret123").hexdigest()
        assert verify_password("secret123", stored)
        assert not verify_password("secret124", stored)

    def test_verify_garbage_hash(self):
        assert not verify_password("secret123", "not-a-hash")


class TestCredentialParsing:

    def test_parse_basic_credentials(self):
        assert parse_basic_credentials(basic_auth("bob@dylan.com", "toto1234!")) == ("bob@dylan.com", "toto1234!")

    def test_password_may_contain_colon(self):
        assert parse_basic_credentials(basic_auth("a@b.c", "pa:ss")) == ("a@b.c", "pa:ss")

    @pytest.mark.parametrize("header", [
        None,
        "",
        "Bearer abc",
        "Basic",
        "Basic !!!not-base64!!!",
        basic_auth("no-password", "").rstrip("="),
    ])
    def test_malformed_headers_are_unauthorized(self, header):
        with pytest.raises(UnauthorizedError):
            parse_basic_credentials(header)

    def test_extract_token_prefers_x_token(self):
        assert extract_token("abc", "Bearer def") == "abc"
        assert extract_token(None, "Bearer def") == "def"
        assert extract_token(None, "Basic xyz") is None
        assert extract_token(None, None) is None


class TestRegister:

    def test_register_user(self, auth_service):
        user = auth_service.register("alice@example.com", "secret123")

        assert user.email == "alice@example.com"
        assert user.user_id
        assert user.password_hash != "secret123"

    def test_register_duplicate_email(self, auth_service):
        auth_service.register("alice@example.com", "secret123")

        with pytest.raises(UserAlreadyExistsError) as exc_info:
            auth_service.register("alice@example.com", "other")
        assert str(exc_info.value) == "Already exist"

    def test_register_missing_fields(self, auth_service):
        with pytest.raises(MissingFieldError, match="Missing email"):
            auth_service.register(None, "secret123")
        with pytest.raises(MissingFieldError, match="Missing password"):
            auth_service.register("alice@example.com", "")


class TestSessions:

    def test_authenticate_then_resolve(self, auth_service):
        user = auth_service.register("alice@example.com", "secret123")

        token = auth_service.authenticate(basic_auth("alice@example.com", "secret123"))

        assert auth_service.resolve_identity(token) == user.user_id

    def test_each_login_opens_a_new_session(self, auth_service):
        user = auth_service.register("alice@example.com", "secret123")
        header = basic_auth("alice@example.com", "secret123")

        first = auth_service.authenticate(header)
        second = auth_service.authenticate(header)

        assert first != second
        assert auth_service.resolve_identity(first) == user.user_id
        assert auth_service.resolve_identity(second) == user.user_id

    def test_session_key_expires_after_ttl(self, auth_service, fake_redis):
        auth_service.register("alice@example.com", "secret123")
        token = auth_service.authenticate(basic_auth("alice@example.com", "secret123"))

        fake_redis.advance(24 * 3600 + 1)

        with pytest.raises(UnauthorizedError):
            auth_service.resolve_identity(token)

    def test_authenticate_unknown_email(self, auth_service):
        with pytest.raises(UnauthorizedError):
            auth_service.authenticate(basic_auth("nobody@example.com", "secret123"))

    def test_authenticate_wrong_password(self, auth_service):
        auth_service.register("alice@example.com", "secret123")

        with pytest.raises(UnauthorizedError):
            auth_service.authenticate(basic_auth("alice@example.com", "secret124"))

    def test_authenticate_legacy_user(self, auth_service, database):
        UserRepository(database).create_user(
            user_id="legacy-user",
            email="bob@dylan.com",
            password_hash=hashlib.sha1(b"toto1234!").hexdigest(),
            created_at=utcnow(),
        )

        token = auth_service.authenticate(basic_auth("bob@dylan.com", "toto1234!"))

        assert auth_service.resolve_identity(token) == "legacy-user"

    def test_revoke(self, auth_service):
        auth_service.register("alice@example.com", "secret123")
        token = auth_service.authenticate(basic_auth("alice@example.com", "secret123"))

        auth_service.revoke(token)

        with pytest.raises(UnauthorizedError):
            auth_service.resolve_identity(token)

    def test_second_revoke_reports_unauthorized(self, auth_service):
        auth_service.register("alice@example.com", "secret123")
        token = auth_service.authenticate(basic_auth("alice@example.com", "secret123"))
        auth_service.revoke(token)

        with pytest.raises(UnauthorizedError):
            auth_service.revoke(token)

    @pytest.mark.parametrize("token", [None, "", "unknown-token"])
    def test_resolve_invalid_tokens(self, auth_service, token):
        with pytest.raises(UnauthorizedError):
            auth_service.resolve_identity(token)

    def test_resolve_optional_identity(self, auth_service):
        user = auth_service.register("alice@example.com", "secret123")
        token = auth_service.authenticate(basic_auth("alice@example.com", "secret123"))

        assert auth_service.resolve_optional_identity(token) == user.user_id
        assert auth_service.resolve_optional_identity("stale") is None
        assert auth_service.resolve_optional_identity(None) is None
