"""
WeatherNotes — Application Package Initializer
===============================================

What: Marks the `weathernotes` directory as a Python package.
Why:  Enables imports like `from weathernotes.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    Server-rendered notes application with a weather widget.

    ┌─────────────────────────────────────┐
    │      Routes (HTML pages + forms)    │  ← HTTP, sessions, redirects
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Auth, notes, weather, page context
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch SQL; services never touch HTTP responses.
"""

__version__ = "1.0.0"
