"""
WeatherNotes — Password Hashing Capability
===========================================

What:  Two functions: hash_password(password) -> digest and
       verify_password(password, digest) -> bool.
Why:   AuthService sequences these with its store queries as ordinary awaits.
How:   bcrypt with a configurable cost factor (BCRYPT_ROUNDS, default 10).
       bcrypt is CPU-bound (~50-100ms at cost 10), so both calls run in
       Starlette's threadpool instead of on the event loop.

Failure semantics:
    bcrypt raises ValueError for a malformed digest or a password longer than
    72 bytes. Both are logged and surfaced as PasswordHashingError, which the
    app treats as an authentication failure. A failure is never a success.
"""

import logging

import bcrypt
from starlette.concurrency import run_in_threadpool

from weathernotes.config import settings
from weathernotes.exceptions import PasswordHashingError

logger = logging.getLogger(__name__)


def _hash(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _verify(password: str, digest: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), digest.encode("utf-8"))


async def hash_password(password: str) -> str:
    """
    Hash a plaintext password for storage.

    Raises:
        PasswordHashingError: bcrypt rejected the input (redirects to /register).
    """
    try:
        return await run_in_threadpool(_hash, password, settings.bcrypt_rounds)
    except ValueError as e:
        logger.error("Error hashing password: %s", str(e))
        raise PasswordHashingError(
            redirect_to="/register",
            context={"error_type": type(e).__name__},
        )


async def verify_password(password: str, digest: str) -> bool:
    """
    Check a plaintext password against a stored digest.

    Returns:
        True on match, False on mismatch.

    Raises:
        PasswordHashingError: the digest is corrupt or the password unusable.
    """
    try:
        return await run_in_threadpool(_verify, password, digest)
    except ValueError as e:
        logger.error("Error comparing passwords: %s", str(e))
        raise PasswordHashingError(context={"error_type": type(e).__name__})
