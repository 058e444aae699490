"""
WeatherNotes — Auth Service
============================

What:  Registration, login, and the Session Identity lifecycle.
Why:   Keeps credential rules (uniqueness, hashing, verification) out of the
       route handlers and testable without HTTP.
How:   Stateless service; each call receives the db session and, for the
       session helpers, the request's session mapping.

Flows:
    register: normalize → reject duplicate → hash → INSERT → commit
    login:    normalize → SELECT by email → verify digest
    session:  establish_session / current_user / logout operate on the
              signed-cookie mapping provided by SessionMiddleware

Failure semantics:
    - Unknown email       → UserNotFoundError
    - Wrong password      → InvalidCredentialsError
    - bcrypt error        → PasswordHashingError (never treated as success)
    - Store error (login) → logged, InvalidCredentialsError
    - Store error (register) → DatabaseError (write path)
"""

import logging
from typing import Any, MutableMapping, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from weathernotes.exceptions import (
    DatabaseError,
    DuplicateRegistrationError,
    InvalidCredentialsError,
    InvalidRegistrationError,
    UserNotFoundError,
)
from weathernotes.models.user import User
from weathernotes.schemas.session import SESSION_KEY, SessionIdentity
from weathernotes.services.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> str:
    """Emails are compared trimmed and case-insensitively."""
    return (email or "").strip().lower()


class AuthService:
    """Business logic for accounts and sessions."""

    async def register(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        city: str,
    ) -> User:
        """
        Create a new account.

        Args:
            db: Async database session
            email: Login email (normalized before storage)
            password: Plaintext password (hashed before storage)
            city: Free-text city for the weather widget

        Returns:
            The stored User with its generated id.

        Raises:
            InvalidRegistrationError: email or password is blank
            DuplicateRegistrationError: email already registered
            PasswordHashingError: bcrypt rejected the password
            DatabaseError: the insert failed
        """
        email = normalize_email(email)
        if not email:
            raise InvalidRegistrationError(field="email")
        if not password:
            raise InvalidRegistrationError(field="password")

        try:
            existing = await db.execute(select(User.id).where(User.email == email))
            if existing.scalar_one_or_none() is not None:
                logger.info("Registration rejected: email already registered")
                raise DuplicateRegistrationError()
        except SQLAlchemyError as e:
            logger.error("Database error checking for existing user: %s", str(e))
            raise DatabaseError(
                message="Could not create your account. Please try again.",
                context={"error_type": type(e).__name__},
            )

        digest = await hash_password(password)

        user = User(email=email, password=digest, city=(city or "").strip())
        try:
            db.add(user)
            await db.flush()
            await db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            await db.rollback()
            logger.info("Registration rejected: unique constraint on email")
            raise DuplicateRegistrationError()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create your account. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("User %s registered", user.id)
        return user

    async def login(self, db: AsyncSession, email: str, password: str) -> User:
        """
        Verify credentials.

        Returns:
            The matching User.

        Raises:
            UserNotFoundError: no account for this email
            InvalidCredentialsError: wrong password, or the lookup failed
            PasswordHashingError: stored digest could not be checked
        """
        email = normalize_email(email)
        if not email or not password:
            raise InvalidCredentialsError(context={"reason": "blank_field"})

        try:
            result = await db.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login lookup: %s", str(e))
            raise InvalidCredentialsError(context={"error_type": type(e).__name__})

        if user is None:
            logger.info("Login failed: user not found")
            raise UserNotFoundError()

        if not await verify_password(password, user.password):
            logger.info("Login failed for user %s: wrong password", user.id)
            raise InvalidCredentialsError(context={"user_id": user.id})

        logger.info("User %s logged in", user.id)
        return user

    # ── Session Identity ──────────────────────────────────────────────────

    def establish_session(
        self, session: MutableMapping[str, Any], user: User
    ) -> SessionIdentity:
        """Store the identity of `user` in the request session."""
        identity = SessionIdentity.model_validate(user)
        # Drop anything left from a previous login in the same browser
        session.clear()
        session[SESSION_KEY] = identity.to_session()
        return identity

    def current_user(
        self, session: MutableMapping[str, Any]
    ) -> Optional[SessionIdentity]:
        """
        Resolve the Session Identity stored at login time.

        A pure lookup of the cookie payload, no query. A payload that does not
        validate (older cookie format, tampering already rejected by the
        signature) is removed and the request is treated as anonymous.
        """
        payload = session.get(SESSION_KEY)
        if payload is None:
            return None
        try:
            return SessionIdentity.model_validate(payload)
        except PydanticValidationError:
            logger.warning("Discarding malformed session payload")
            session.pop(SESSION_KEY, None)
            return None

    def logout(self, session: MutableMapping[str, Any]) -> None:
        """Invalidate the Session Identity and any other per-session state."""
        session.clear()


auth_service = AuthService()
