"""
WeatherNotes — Notes Page Composition
======================================

What:  Builds the render context of the main notes page (GET /app, POST /app-edit).
Why:   The rules for which values appear on the page live in one pure function
       that can be tested without HTTP, a database, or the weather API.

Composition rule:
    notes  | weather | context
    -------+---------+---------------------------------------
    yes    | yes     | notes + weather
    yes    | no      | notes + fallback message
    no     | yes     | weather
    no     | no      | fallback message

    An edit request adds the located note as `note_to_edit`.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from weathernotes.exceptions import ExternalServiceError
from weathernotes.models.note import Note
from weathernotes.schemas.session import SessionIdentity
from weathernotes.schemas.weather import WEATHER_FALLBACK_MESSAGE, WeatherSnapshot
from weathernotes.services.note_service import note_service
from weathernotes.services.weather_service import weather_service

logger = logging.getLogger(__name__)


def build_app_context(
    notes: List[Note],
    weather: Optional[WeatherSnapshot],
    note_to_edit: Optional[Note] = None,
) -> Dict[str, Any]:
    """Apply the composition rule; keys absent from the result are not rendered."""
    context: Dict[str, Any] = {}
    if notes:
        context["notes"] = notes
    if weather is not None:
        context["weather"] = weather
    else:
        context["weather_message"] = WEATHER_FALLBACK_MESSAGE
    if note_to_edit is not None:
        context["note_to_edit"] = note_to_edit
    return context


async def lookup_weather(city: str) -> Optional[WeatherSnapshot]:
    """Weather for `city`, or None when the lookup fails in any way."""
    try:
        return await weather_service.fetch_current(city)
    except ExternalServiceError as e:
        logger.info("Rendering weather fallback: %s", e.message)
        return None


async def load_app_page(
    db: AsyncSession,
    user: SessionIdentity,
    note_to_edit_id: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Everything the notes page needs for `user`, in request order:
    (when editing) the scoped note lookup, then weather, then the list.

    An edit target the user does not own raises before the weather API
    is called.

    Raises:
        NotFoundError: note_to_edit_id is not one of the user's notes
        DatabaseError: a note query failed
    """
    note_to_edit = None
    if note_to_edit_id is not None:
        note_to_edit = await note_service.get_note(db, user.id, note_to_edit_id)
    weather = await lookup_weather(user.city)
    notes = await note_service.list_notes(db, user.id)
    return build_app_context(notes, weather, note_to_edit)
