from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from vortex_auth.adapter.database import Database
from vortex_auth.app.repositories.errors import BackendError, ConflictError


class SqlRepository:
    """Shared plumbing: every engine error leaves as a StoreError"""

    def __init__(self, session: AsyncSession, database: Database):
        self.session = session
        self.database = database

    @asynccontextmanager
    async def translate_errors(self):
        try:
            yield
        except IntegrityError as exc:
            field = self.database.conflict_field(exc)
            if field is None:
                raise BackendError(f"Integrity error: {exc.orig}") from exc
            raise ConflictError(field) from exc
        except SQLAlchemyError as exc:
            raise BackendError(str(exc)) from exc
