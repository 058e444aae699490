"""
WeatherNotes — Note Service
============================

What:  CRUD over a user's notes, every operation scoped by owner.
Why:   Encapsulates note rules (default title, partial update, ownership)
       independent of HTTP concerns.
How:   Stateless service; each call receives the db session and the id of the
       authenticated user. The database is the only source of truth: no note
       list is kept between requests, and edit/update/delete resolve their
       target with `WHERE id = :note_id AND creator = :user_id`.

Ownership:
    A note that exists but belongs to someone else is indistinguishable from
    a missing note: both raise NotFoundError.

Atomicity:
    update and delete are each one parameterized statement, relying on the
    database's single-row atomicity. Writes commit before returning, so the
    route only redirects after the change is durable.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from weathernotes.exceptions import DatabaseError, NotFoundError
from weathernotes.models.note import UNTITLED, Note
from weathernotes.models.user import User  # noqa: F401  (resolves notes.creator FK)
from weathernotes.schemas.note import NoteCreate, NoteUpdate

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        NotFoundError propagates as-is. Any SQLAlchemy error is logged with
        its details and re-raised as a generic DatabaseError.
    """

    async def list_notes(self, db: AsyncSession, user_id: int) -> List[Note]:
        """
        All notes created by `user_id`, oldest first.

        Query plan:
            SELECT * FROM notes WHERE creator = :user_id ORDER BY id
            → idx_notes_creator
        """
        try:
            result = await db.execute(
                select(Note).where(Note.creator == user_id).order_by(Note.id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes for user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not retrieve your notes. Please try again.",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

    async def create_note(
        self, db: AsyncSession, user_id: int, data: NoteCreate
    ) -> Note:
        """
        Store a new note owned by `user_id`.

        A blank title is replaced by "Untitled". Returns the stored note
        including its generated id.
        """
        note = Note(
            title=data.title or UNTITLED,
            content=data.content,
            creator=user_id,
        )
        try:
            db.add(note)
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error creating note for user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Your note could not be saved. Please try again.",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

        logger.info("Note %s created by user %s", note.id, user_id)
        return note

    async def get_note(self, db: AsyncSession, user_id: int, note_id: int) -> Note:
        """
        Fetch one note owned by `user_id`.

        Raises:
            NotFoundError: no such note, or it belongs to another user
            DatabaseError: query execution failed
        """
        try:
            result = await db.execute(
                select(Note).where(Note.id == note_id, Note.creator == user_id)
            )
            note: Optional[Note] = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": note_id},
            )

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    async def update_note(
        self, db: AsyncSession, user_id: int, note_id: int, data: NoteUpdate
    ) -> Note:
        """
        Apply a partial update.

        Fields left blank keep their stored value; `creator` is never part of
        the statement. With nothing to change, this is an ownership-checked read.

        Raises:
            NotFoundError: no such note for this user
            DatabaseError: the statement failed
        """
        changes = data.changes()
        if not changes:
            return await self.get_note(db, user_id, note_id)

        try:
            result = await db.execute(
                update(Note)
                .where(Note.id == note_id, Note.creator == user_id)
                .values(**changes)
                .returning(Note)
            )
            note: Optional[Note] = result.scalar_one_or_none()
            if note is None:
                raise NotFoundError(resource="note", resource_id=str(note_id))
            await db.commit()
        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Your changes could not be saved. Please try again.",
                context={"note_id": note_id, "error_type": type(e).__name__},
            )

        logger.info("Note %s updated by user %s (%s)", note_id, user_id, ", ".join(sorted(changes)))
        return note

    async def delete_note(self, db: AsyncSession, user_id: int, note_id: int) -> None:
        """
        Remove a note owned by `user_id`.

        Raises:
            NotFoundError: no row matched (missing or not owned)
            DatabaseError: the statement failed
        """
        try:
            result = await db.execute(
                delete(Note).where(Note.id == note_id, Note.creator == user_id)
            )
            if result.rowcount == 0:
                raise NotFoundError(resource="note", resource_id=str(note_id))
            await db.commit()
        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="The note could not be deleted. Please try again.",
                context={"note_id": note_id, "error_type": type(e).__name__},
            )

        logger.info("Note %s deleted by user %s", note_id, user_id)


note_service = NoteService()
