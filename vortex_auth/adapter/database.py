"""
Database engines.

The credential store runs on either an embedded SQLite file or Postgres.
Both expose the same unit of work; everything dialect specific (URL
handling, connection setup, reading unique-constraint violations) lives in
the Database subclass picked once at startup.
"""

import logging
import os
import re
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import vortex_auth.domain.entities  # noqa: F401  (registers tables on SQLModel.metadata)

logger = logging.getLogger(__name__)

# Columns carrying a unique constraint, in the order they are matched
# against constraint names / error messages.
UNIQUE_FIELDS = ("username", "email", "token_hash")


def _field_from_text(text: str) -> Optional[str]:
    for field in UNIQUE_FIELDS:
        if field in text:
            return "token" if field == "token_hash" else field
    return None


class Database(ABC):
    """Owns the async engine and session factory for one SQL dialect"""

    name: str

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: AsyncEngine = self._create_engine(url, echo)
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

    @abstractmethod
    def _create_engine(self, url: str, echo: bool) -> AsyncEngine:
        pass

    @abstractmethod
    def conflict_field(self, exc: IntegrityError) -> Optional[str]:
        """
        Name the field behind a unique-constraint violation.

        Returns None when the integrity error is not a uniqueness conflict
        (NOT NULL, foreign key, ...).
        """
        pass

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info(f"{self.name} schema ready")

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info(f"{self.name} connection pool closed")


class SqliteDatabase(Database):
    """Embedded file store (aiosqlite)"""

    name = "SQLite"

    # e.g. "UNIQUE constraint failed: users.username"
    _UNIQUE_FAILED = re.compile(r"UNIQUE constraint failed: ([\w.]+)")

    def __init__(self, path: str, echo: bool = False):
        self.path = path
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        super().__init__(f"sqlite+aiosqlite:///{path}", echo)

    def _create_engine(self, url: str, echo: bool) -> AsyncEngine:
        engine = create_async_engine(url, echo=echo, future=True)

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    def conflict_field(self, exc: IntegrityError) -> Optional[str]:
        match = self._UNIQUE_FAILED.search(str(exc.orig))
        if match is None:
            return None
        return _field_from_text(match.group(1)) or match.group(1)


class PostgresDatabase(Database):
    """Postgres via asyncpg"""

    name = "PostgreSQL"

    UNIQUE_VIOLATION = "23505"

    def _create_engine(self, url: str, echo: bool) -> AsyncEngine:
        return create_async_engine(
            self.normalize_url(url), echo=echo, future=True, pool_pre_ping=True
        )

    @staticmethod
    def normalize_url(url: str) -> str:
        """
        Turn a libpq style URL into an asyncpg SQLAlchemy URL.

        postgres://u:p@h/db?sslmode=disable -> postgresql+asyncpg://u:p@h/db
        """
        parts = urlsplit(url)
        scheme = parts.scheme
        if scheme in ("postgres", "postgresql"):
            scheme = "postgresql+asyncpg"

        query = []
        for key, value in parse_qsl(parts.query):
            if key == "sslmode":
                # asyncpg takes "ssl" instead of libpq's "sslmode"
                if value != "disable":
                    query.append(("ssl", value))
                continue
            query.append((key, value))

        return urlunsplit((scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))

    def conflict_field(self, exc: IntegrityError) -> Optional[str]:
        # SQLAlchemy wraps asyncpg's exception; the original is the cause
        orig = exc.orig
        pg_error = getattr(orig, "__cause__", None) or orig
        sqlstate = getattr(pg_error, "sqlstate", None) or getattr(orig, "sqlstate", None)
        if sqlstate is not None and sqlstate != self.UNIQUE_VIOLATION:
            return None

        constraint = getattr(pg_error, "constraint_name", None)
        if constraint:
            return _field_from_text(constraint) or constraint
        if "duplicate key" in str(orig):
            return _field_from_text(str(orig))
        return None


def create_database(config) -> Database:
    """Pick the engine from DB_TYPE"""
    if config.DB_TYPE == "postgres":
        logger.info("Using PostgreSQL credential store")
        return PostgresDatabase(config.DB_URL)
    logger.info(f"Using SQLite credential store at {config.SQLITE_PATH}")
    return SqliteDatabase(config.SQLITE_PATH)
