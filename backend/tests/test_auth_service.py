"""
WeatherNotes — Auth Service Tests
==================================

What:  Registration, login and the Session Identity helpers.
How:   Real bcrypt at the minimum cost factor against the SQLite test
       database; store failures are scripted on the mock session.

What we test:
    ✅ Passwords are stored as bcrypt digests, never plaintext
    ✅ A duplicate email is rejected and leaves one row
    ✅ Wrong password / unknown email / corrupt digest all fail login
    ✅ The session payload carries id, email, city and nothing else
"""

import bcrypt
import pytest
from unittest.mock import AsyncMock
from sqlalchemy import UniqueConstraint, func, select
from sqlalchemy.exc import OperationalError

from weathernotes.exceptions import (
    DuplicateRegistrationError,
    InvalidCredentialsError,
    InvalidRegistrationError,
    PasswordHashingError,
    UserNotFoundError,
)
from weathernotes.models.user import User
from weathernotes.schemas.session import SESSION_KEY
from weathernotes.services.auth_service import AuthService, normalize_email


async def _user_count(db, email: str) -> int:
    result = await db.execute(select(func.count()).select_from(User).where(User.email == email))
    return result.scalar_one()


class TestRegister:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_register_stores_digest(self, db_session):
        user = await self.service.register(db_session, "a@x.com", "pw", "Paris")

        assert user.id is not None
        assert user.city == "Paris"
        assert user.password != "pw"
        assert bcrypt.checkpw(b"pw", user.password.encode("utf-8"))

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, db_session):
        await self.service.register(db_session, "a@x.com", "pw", "Paris")

        with pytest.raises(DuplicateRegistrationError):
            await self.service.register(db_session, "a@x.com", "other", "Rome")

        assert await _user_count(db_session, "a@x.com") == 1

    @pytest.mark.asyncio
    async def test_email_is_normalized(self, db_session):
        user = await self.service.register(db_session, "  A@X.com ", "pw", "Paris")
        assert user.email == "a@x.com"

        with pytest.raises(DuplicateRegistrationError):
            await self.service.register(db_session, "a@x.COM", "pw", "Paris")

    @pytest.mark.asyncio
    async def test_blank_email_rejected(self, db_session):
        with pytest.raises(InvalidRegistrationError) as exc_info:
            await self.service.register(db_session, "   ", "pw", "Paris")
        assert exc_info.value.redirect_to == "/register"

    @pytest.mark.asyncio
    async def test_blank_password_rejected(self, db_session):
        with pytest.raises(InvalidRegistrationError):
            await self.service.register(db_session, "a@x.com", "", "Paris")
        assert await _user_count(db_session, "a@x.com") == 0

    def test_email_constraint_matches_migration(self):
        names = {
            c.name for c in User.__table__.constraints if isinstance(c, UniqueConstraint)
        }
        assert "uq_users_email" in names

    def test_normalize_email(self):
        assert normalize_email(" Foo@Bar.COM ") == "foo@bar.com"
        assert normalize_email(None) == ""


class TestLogin:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_login_success(self, db_session, make_user):
        created = await make_user("a@x.com", "pw", "Paris")

        user = await self.service.login(db_session, "a@x.com", "pw")

        assert user.id == created.id

    @pytest.mark.asyncio
    async def test_wrong_password(self, db_session, make_user):
        await make_user("a@x.com", "pw")

        with pytest.raises(InvalidCredentialsError):
            await self.service.login(db_session, "a@x.com", "nope")

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session):
        with pytest.raises(UserNotFoundError):
            await self.service.login(db_session, "ghost@x.com", "pw")

    @pytest.mark.asyncio
    async def test_blank_fields(self, db_session):
        with pytest.raises(InvalidCredentialsError):
            await self.service.login(db_session, "", "")

    @pytest.mark.asyncio
    async def test_lookup_failure_is_a_failed_login(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("gone"))
        )
        with pytest.raises(InvalidCredentialsError):
            await self.service.login(mock_db_session, "a@x.com", "pw")

    @pytest.mark.asyncio
    async def test_corrupt_digest_never_logs_in(self, db_session):
        db_session.add(User(email="a@x.com", password="not-a-bcrypt-hash", city=""))
        await db_session.commit()

        with pytest.raises(PasswordHashingError):
            await self.service.login(db_session, "a@x.com", "pw")


class TestSessionIdentity:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_establish_and_resolve(self, make_user):
        user = await make_user("a@x.com", "pw", "Paris")
        session = {"stale": True}

        self.service.establish_session(session, user)

        assert session == {SESSION_KEY: {"id": user.id, "email": "a@x.com", "city": "Paris"}}
        identity = self.service.current_user(session)
        assert identity.id == user.id
        assert identity.city == "Paris"

    def test_anonymous(self):
        assert self.service.current_user({}) is None

    def test_malformed_payload_is_discarded(self):
        session = {SESSION_KEY: {"email": "a@x.com"}}

        assert self.service.current_user(session) is None
        assert SESSION_KEY not in session

    def test_logout_clears_session(self):
        session = {SESSION_KEY: {"id": 1, "email": "a@x.com", "city": ""}}

        self.service.logout(session)

        assert session == {}
        assert self.service.current_user(session) is None
