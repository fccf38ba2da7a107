"""Tests for the authentication and session services."""

import json

import pytest
from fastapi import Response

from src.config import Settings
from src.exceptions import AuthenticationError, ConflictError
from src.models.user import User
from src.schemas.auth import UserResponse
from src.services.auth import (
    authenticate_user,
    ensure_users_table,
    get_password_hash,
    get_user_by_email,
    register_user,
    verify_password,
)
from src.services.session import decode_session, encode_session


class TestPasswordHashing:
    """Tests for the bcrypt helpers."""

    def test_hash_is_salted(self):
        """Verify the same password hashes differently each time."""
        first = get_password_hash("longenough1")
        second = get_password_hash("longenough1")
        assert first != second
        assert verify_password("longenough1", first)
        assert verify_password("longenough1", second)

    def test_cost_factor(self):
        """Verify hashes use cost 10."""
        assert get_password_hash("longenough1").startswith("$2b$10$")

    def test_wrong_password(self):
        """Verify a different password does not match."""
        assert not verify_password("wrong", get_password_hash("longenough1"))

    def test_malformed_hash(self):
        """Verify an unidentifiable hash is a mismatch, not an error."""
        assert verify_password("longenough1", "plaintext") is False


class TestRegisterUser:
    """Tests for register_user."""

    @pytest.mark.asyncio
    async def test_creates_user(self, db):
        """Test a row is created with a hashed password."""
        user = await register_user(db, "Ada", "ada@x.com", "longenough1")

        assert user.id is not None
        assert get_user_by_email(db, "ada@x.com").id == user.id
        assert verify_password("longenough1", user.password_hash)

    @pytest.mark.asyncio
    async def test_duplicate_email(self, db):
        """Test a second registration raises ConflictError."""
        await register_user(db, "Ada", "ada@x.com", "longenough1")

        with pytest.raises(ConflictError):
            await register_user(db, "Other", "ada@x.com", "longenough2")

        assert db.query(User).count() == 1

    def test_ensure_users_table_is_idempotent(self, db):
        """Test the table check can run repeatedly."""
        ensure_users_table(db)
        ensure_users_table(db)
        assert db.query(User).count() == 0


class TestAuthenticateUser:
    """Tests for authenticate_user."""

    @pytest.mark.asyncio
    async def test_valid_credentials(self, db):
        """Test the stored user is returned."""
        created = await register_user(db, "Ada", "ada@x.com", "longenough1")
        user = await authenticate_user(db, "ada@x.com", "longenough1")
        assert user.id == created.id

    @pytest.mark.asyncio
    async def test_unknown_email(self, db):
        """Test an unknown email raises the generic error."""
        with pytest.raises(AuthenticationError) as exc_info:
            await authenticate_user(db, "nobody@x.com", "longenough1")
        assert exc_info.value.to_dict() == {"error": "Invalid credentials"}

    @pytest.mark.asyncio
    async def test_wrong_password(self, db):
        """Test a wrong password raises the same generic error."""
        await register_user(db, "Ada", "ada@x.com", "longenough1")
        with pytest.raises(AuthenticationError) as exc_info:
            await authenticate_user(db, "ada@x.com", "wrong")
        assert exc_info.value.to_dict() == {"error": "Invalid credentials"}


class TestSessionCookie:
    """Tests for session encoding."""

    def test_encode_has_only_identity(self):
        """Verify the cookie carries id, name and email and nothing else."""
        user = User(id=3, name="Ada", email="ada@x.com", password_hash="secret-hash")
        assert json.loads(encode_session(user)) == {"id": 3, "name": "Ada", "email": "ada@x.com"}

    def test_decode(self):
        """Verify a well-formed cookie decodes to the identity."""
        decoded = decode_session('{"id": 3, "name": "Ada", "email": "ada@x.com"}')
        assert decoded == UserResponse(id=3, name="Ada", email="ada@x.com")

    @pytest.mark.parametrize("raw", [None, "", "nope", '{"id": 3}', "[]"])
    def test_decode_unusable(self, raw):
        """Verify unusable cookies decode to None."""
        assert decode_session(raw) is None

    def test_clear_sets_epoch_expiry(self):
        """Verify both cookies are expired."""
        from src.services.session import clear_session_cookies

        response = Response()
        clear_session_cookies(response, Settings(environment="test"))

        cookies = response.headers.getlist("set-cookie")
        assert len(cookies) == 2
        assert all("Thu, 01 Jan 1970 00:00:00 GMT" in c for c in cookies)
        assert response.headers["pragma"] == "no-cache"
