"""
WeatherNotes — Note SQLAlchemy Model
=====================================

What:  ORM model representing the `notes` table.
Why:   Maps Python objects to database rows for type-safe database operations.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - Integer primary key generated by the database
    - title / content: TEXT, no artificial length limit
    - creator: FK to users.id, set once at creation and never part of an update
    - Index on creator: every query filters on it (list, find, update, delete)
"""

from sqlalchemy import ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from weathernotes.database import Base

# Substituted when a note is submitted with a blank title
UNTITLED = "Untitled"


class Note(Base):
    """
    A personal text note.

    Ownership:
        Only the creator may read, edit or delete a note. The model does not
        enforce this; NoteService adds `creator == user_id` to every query.
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=UNTITLED,
        comment="Note title; 'Untitled' when submitted blank",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Note body",
    )

    creator: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning user; immutable after creation",
    )

    __table_args__ = (
        Index("idx_notes_creator", "creator"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, creator={self.creator}, title='{self.title}')>"
