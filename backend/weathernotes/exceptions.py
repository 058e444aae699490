"""
WeatherNotes — Custom Exception Hierarchy
==========================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Services signal outcomes by raising; global handlers (registered in
       main.py) turn each type into a redirect or an error page, so no route
       needs its own try/except and no internal detail reaches the browser.
How:   Each exception carries a user-safe message and an optional context dict.
       Context is logged server-side only.

Exception Hierarchy:
    WeatherNotesError (base)
    ├── AuthenticationError            → 303 to exc.redirect_to
    │   ├── InvalidCredentialsError    → /login
    │   ├── UserNotFoundError          → /login
    │   ├── InvalidRegistrationError   → /register
    │   └── PasswordHashingError       → /login or /register
    ├── DuplicateRegistrationError     → 303 /login
    ├── NotAuthenticatedError          → 303 /login
    ├── NotFoundError                  → 303 /app
    ├── ExternalServiceError           → never surfaces; page shows fallback text
    │   ├── WeatherNotFoundError
    │   └── WeatherServiceError
    └── DatabaseError                  → 500 error page
"""

from typing import Any, Dict, Optional


class WeatherNotesError(Exception):
    """
    Base exception for all WeatherNotes application errors.

    Attributes:
        message:  User-facing error description (safe to render)
        context:  Additional debug info (logged but NOT rendered)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


# ══════════════════════════════════════════════════════════════════════════
# Authentication
# ══════════════════════════════════════════════════════════════════════════

class AuthenticationError(WeatherNotesError):
    """
    Credentials could not be verified.

    redirect_to names the form the user is sent back to. Subclasses only
    differ for logging; the browser sees the same redirect for a wrong
    password and an unknown email.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        redirect_to: str = "/login",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.redirect_to = redirect_to


class InvalidCredentialsError(AuthenticationError):
    """Password did not match the stored digest."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid email or password", context=context)


class UserNotFoundError(AuthenticationError):
    """No user is registered under the submitted email."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid email or password", context=context)


class InvalidRegistrationError(AuthenticationError):
    """Registration form was missing a required field."""

    def __init__(self, field: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["field"] = field
        super().__init__(
            message=f"The {field} field is required",
            redirect_to="/register",
            context=ctx,
        )
        self.field = field


class PasswordHashingError(AuthenticationError):
    """bcrypt refused to hash or verify (e.g. corrupt digest, oversized password)."""

    def __init__(
        self,
        redirect_to: str = "/login",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message="Your password could not be processed",
            redirect_to=redirect_to,
            context=context,
        )


class DuplicateRegistrationError(WeatherNotesError):
    """A user with this email already exists; the user is sent to log in instead."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="An account with this email already exists", context=context)


class NotAuthenticatedError(WeatherNotesError):
    """The route requires a Session Identity and the request has none."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Please log in to continue", context=context)


# ══════════════════════════════════════════════════════════════════════════
# Notes
# ══════════════════════════════════════════════════════════════════════════

class NotFoundError(WeatherNotesError):
    """
    Raised when a requested resource does not exist for the requester.

    A note owned by another user is reported exactly like a missing note.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


# ══════════════════════════════════════════════════════════════════════════
# External services
# ══════════════════════════════════════════════════════════════════════════

class ExternalServiceError(WeatherNotesError):
    """Base for failures of third-party HTTP services."""


class WeatherNotFoundError(ExternalServiceError):
    """The weather API answered, but without current conditions for the city."""

    def __init__(self, city: str = "", context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["city"] = city
        super().__init__(message="No weather data found for your location.", context=ctx)
        self.city = city


class WeatherServiceError(ExternalServiceError):
    """
    The weather request itself failed.

    When: network error, timeout, non-2xx status, malformed body, missing key.
    """

    def __init__(
        self,
        message: str = "Weather service is temporarily unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


# ══════════════════════════════════════════════════════════════════════════
# Persistence
# ══════════════════════════════════════════════════════════════════════════

class DatabaseError(WeatherNotesError):
    """
    Raised when database operations fail unexpectedly.

    The rendered message is always generic; the SQL error stays in the logs.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
