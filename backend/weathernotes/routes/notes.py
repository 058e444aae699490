"""
WeatherNotes — Notes Route Handlers
====================================

What:  The main notes page and the note form posts.
How:   Every route requires a Session Identity (require_user) and passes the
       user's id to NoteService, which scopes each query to that owner.
       Form posts answer with 303 → /app only after the write committed.

Route Inventory:
    GET  /app          notes list + weather widget
    POST /submit       create a note
    POST /app-edit     notes page with one note loaded into the edit form
    POST /app-update   partial update of a note
    POST /app-delete   delete a note

Errors (handled globally):
    NotAuthenticatedError → 303 /login
    NotFoundError         → 303 /app (unknown id or another user's note)
    DatabaseError         → 500 error page; never a success redirect
"""

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from weathernotes.database import get_db_session
from weathernotes.dependencies import require_user, templates
from weathernotes.schemas.note import NoteCreate, NoteUpdate
from weathernotes.schemas.session import SessionIdentity
from weathernotes.services.note_service import note_service
from weathernotes.services.page_service import load_app_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])


@router.get("/app", response_class=HTMLResponse, summary="Notes and weather")
async def app_page(
    request: Request,
    user: SessionIdentity = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Render the user's notes beside the weather for their city.

    The weather is fetched fresh for this request and handed straight to the
    template; a failed lookup shows the fallback message instead.
    """
    context = await load_app_page(db, user)
    return templates.TemplateResponse(request, "app.html", {"user": user, **context})


@router.post("/submit", summary="Create a note")
async def submit_note(
    title: str = Form(default=""),
    content: str = Form(default=""),
    user: SessionIdentity = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    await note_service.create_note(db, user.id, NoteCreate(title=title, content=content))
    return RedirectResponse("/app", status_code=303)


@router.post("/app-edit", response_class=HTMLResponse, summary="Load a note for editing")
async def edit_note(
    request: Request,
    id: int = Form(..., description="Note id"),
    user: SessionIdentity = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
):
    context = await load_app_page(db, user, note_to_edit_id=id)
    return templates.TemplateResponse(request, "app.html", {"user": user, **context})


@router.post("/app-update", summary="Update a note")
async def update_note(
    id: int = Form(..., description="Note id"),
    title: str = Form(default=""),
    content: str = Form(default=""),
    user: SessionIdentity = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    """Blank fields keep their stored values."""
    await note_service.update_note(db, user.id, id, NoteUpdate(title=title, content=content))
    return RedirectResponse("/app", status_code=303)


@router.post("/app-delete", summary="Delete a note")
async def delete_note(
    id: int = Form(..., description="Note id"),
    user: SessionIdentity = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    await note_service.delete_note(db, user.id, id)
    return RedirectResponse("/app", status_code=303)
