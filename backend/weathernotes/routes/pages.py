"""
WeatherNotes — Account Page Routes
===================================

What:  Landing page, login, registration and logout.
How:   GET routes render forms; POST routes delegate to AuthService and
       answer with a 303 redirect. Failures raise, and the global handlers
       pick the redirect (see main.register_exception_handlers).

Route Inventory:
    GET  /           landing page
    GET  /login      login form, or → /app when already logged in
    POST /login      credentials → /app | → /login
    GET  /register   registration form, or → /app when already logged in
    POST /register   new account + auto-login → /app | duplicate → /login
    GET  /logout     clear the session → /
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from weathernotes.database import get_db_session
from weathernotes.dependencies import optional_user, templates
from weathernotes.schemas.session import SessionIdentity
from weathernotes.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])


@router.get("/", response_class=HTMLResponse, summary="Landing page")
async def home(
    request: Request,
    user: Optional[SessionIdentity] = Depends(optional_user),
):
    return templates.TemplateResponse(request, "home.html", {"user": user})


@router.get("/login", response_class=HTMLResponse, summary="Login form")
async def login_form(
    request: Request,
    user: Optional[SessionIdentity] = Depends(optional_user),
):
    # Already authenticated: skip the form
    if user is not None:
        return RedirectResponse("/app", status_code=303)
    return templates.TemplateResponse(request, "login.html", {})


@router.get("/register", response_class=HTMLResponse, summary="Registration form")
async def register_form(
    request: Request,
    user: Optional[SessionIdentity] = Depends(optional_user),
):
    if user is not None:
        return RedirectResponse("/app", status_code=303)
    return templates.TemplateResponse(request, "register.html", {})


@router.post("/login", summary="Submit credentials")
async def login(
    request: Request,
    username: str = Form(default="", description="Login email"),
    password: str = Form(default=""),
    db: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    """
    Verify credentials and start a session.

    Failure (unknown email, wrong password, hashing error) raises an
    AuthenticationError; its handler redirects to /login with no session.
    """
    user = await auth_service.login(db, username, password)
    auth_service.establish_session(request.session, user)
    return RedirectResponse("/app", status_code=303)


@router.post("/register", summary="Create an account")
async def register(
    request: Request,
    username: str = Form(default="", description="Login email"),
    password: str = Form(default=""),
    city: str = Form(default=""),
    db: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    """
    Create the account and log it in immediately.

    An existing email raises DuplicateRegistrationError, handled as a
    redirect to /login. No second row is ever written.
    """
    user = await auth_service.register(db, username, password, city)
    auth_service.establish_session(request.session, user)
    return RedirectResponse("/app", status_code=303)


@router.get("/logout", summary="End the session")
async def logout(request: Request) -> RedirectResponse:
    auth_service.logout(request.session)
    return RedirectResponse("/", status_code=303)
