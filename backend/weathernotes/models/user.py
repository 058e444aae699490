"""
WeatherNotes — User SQLAlchemy Model
=====================================

What:  ORM model representing the `users` table (the credential store).
Who:   Read and written by AuthService; referenced by notes.creator.

Lifecycle:
    Created on registration, read on login. Never updated or deleted by the app.

Security:
    `password` holds a bcrypt digest produced by services.passwords, never the
    plaintext. The column keeps its historical name so existing databases
    created by the previous deployment work unchanged.
"""

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from weathernotes.database import Base


class User(Base):
    __tablename__ = "users"

    # Named to match migration 001 so autogenerate sees no drift
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Login identifier; stored trimmed and lower-cased by AuthService
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Login identifier (unique)",
    )

    password: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="bcrypt digest of the user's password",
    )

    city: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
        comment="Free-text city used for the weather widget",
    )

    def __repr__(self) -> str:
        # No password digest in reprs: they end up in logs
        return f"<User(id={self.id}, email='{self.email}', city='{self.city}')>"
