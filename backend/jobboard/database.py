from contextlib import contextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DataError, DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
import logging

from jobboard.config import Settings
from jobboard.errors import AppError, UpstreamFailure

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def _create_engine(url: str):
    engine = create_async_engine(url, echo=False)

    if make_url(url).get_backend_name() == "sqlite":
        # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


class Database:
    """
    Process-wide store client.

    Holds the user-scoped engine and the elevated admin engine. Created once
    per application and shared by every request; each request opens its own
    session from the factories below.
    """

    def __init__(self, url: str, admin_url: str = ""):
        self.url = url
        self.engine = _create_engine(url)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

        if admin_url and admin_url != url:
            self.admin_engine = _create_engine(admin_url)
        else:
            self.admin_engine = self.engine
        self.admin_session_factory = async_sessionmaker(
            self.admin_engine, class_=AsyncSession, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.database_url, settings.admin_database_url)

    async def init(self) -> None:
        url = make_url(self.url)
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
        if self.admin_engine is not self.engine:
            await self.admin_engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    async with get_database(request).session_factory() as session:
        yield session


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return True when an IntegrityError came from a UNIQUE constraint (SQLSTATE 23505)."""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == "23505":
        return True
    text = str(orig if orig is not None else exc)
    return "UNIQUE constraint failed" in text or "duplicate key value" in text


@contextmanager
def store_errors(action: str):
    """
    Translate store exceptions raised inside the block into UpstreamFailure.

    Integrity and data errors are attributable to the request (400); anything
    else from the store is reported as a server failure (500).
    """
    try:
        yield
    except AppError:
        raise
    except (IntegrityError, DBAPIError) as e:
        client_error = isinstance(e, (IntegrityError, DataError))
        logger.error(f"Store error while trying to {action}: {e}")
        raise UpstreamFailure(f"Failed to {action}", client_error=client_error) from e
    except SQLAlchemyError as e:
        logger.error(f"Store error while trying to {action}: {e}")
        raise UpstreamFailure(f"Failed to {action}") from e
