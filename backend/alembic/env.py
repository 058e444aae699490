"""
Alembic Migration Environment
===============================

What:  Runs WeatherNotes migrations against the database named by the app
       settings (PG_* or DATABASE_URL); `sqlalchemy.url` in alembic.ini is unused.
How:   Online mode opens a NullPool async engine and applies migrations through
       run_sync(). SQLite targets use batch mode, since SQLite cannot ALTER
       most constraints in place.
Who:   `alembic upgrade head` before first start; `alembic revision
       --autogenerate` after model changes.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool
from alembic import context

from weathernotes.config import settings
from weathernotes.database import Base

# Autogenerate only compares tables registered on Base.metadata
from weathernotes.models.note import Note  # noqa: F401
from weathernotes.models.user import User  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=settings.is_sqlite,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Print the migration SQL instead of executing it."""
    _configure(
        url=settings.sqlalchemy_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(settings.sqlalchemy_url, poolclass=NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_with_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
