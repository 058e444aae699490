"""
WeatherNotes — Route Dependencies
==================================

What:  FastAPI dependencies shared by the page and note routers.
How:   `optional_user` resolves the Session Identity if there is one;
       `require_user` additionally raises NotAuthenticatedError, which the
       global handler turns into a redirect to /login.
"""

from pathlib import Path
from typing import Optional

from fastapi import Depends, Request
from fastapi.templating import Jinja2Templates

from weathernotes.exceptions import NotAuthenticatedError
from weathernotes.schemas.session import SessionIdentity
from weathernotes.services.auth_service import auth_service

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def optional_user(request: Request) -> Optional[SessionIdentity]:
    return auth_service.current_user(request.session)


def require_user(
    user: Optional[SessionIdentity] = Depends(optional_user),
) -> SessionIdentity:
    if user is None:
        raise NotAuthenticatedError()
    return user
