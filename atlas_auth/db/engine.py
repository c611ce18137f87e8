"""Database handle and session dependency.

The engine (and its connection pool) is owned by a ``Database`` object that
the application lifespan creates once and stores on ``app.state``. Request
handlers receive sessions through ``get_session``; nothing in the codebase
holds a module-level engine.
"""

from collections.abc import Generator
from typing import Annotated, Any

from fastapi import Depends, Request
from sqlmodel import Session, SQLModel, create_engine

import atlas_auth.models  # noqa: F401  (registers table models in metadata)
from atlas_auth.core.exceptions import InternalError
from atlas_auth.core.settings import Settings


class Database:
    """Process-wide database handle."""

    def __init__(self, url: str, *, echo: bool = False, **engine_kwargs: Any):
        connect_args: dict[str, object] = engine_kwargs.pop("connect_args", {})
        if url.startswith("sqlite"):
            # Required for SQLite when used with FastAPI across threads.
            connect_args.setdefault("check_same_thread", False)
        self.engine = create_engine(
            url, echo=echo, connect_args=connect_args, **engine_kwargs
        )

    def create_tables(self) -> None:
        SQLModel.metadata.create_all(self.engine)

    def session(self) -> Session:
        return Session(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def init_database(settings: Settings) -> Database:
    """Create the database handle at process start."""
    database = Database(settings.database_url)
    if settings.database_create_tables:
        database.create_tables()
    return database


def get_database(request: Request) -> Database:
    database: Database | None = getattr(request.app.state, "database", None)
    if database is None:
        raise InternalError("Database is not initialized")
    return database


def get_session(
    database: Annotated[Database, Depends(get_database)],
) -> Generator[Session, None, None]:
    with database.session() as session:
        yield session
