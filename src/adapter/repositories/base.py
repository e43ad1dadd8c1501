import asyncio
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.services.storage_errors import StorageFailure, UniqueViolation

DEFAULT_STORAGE_TIMEOUT = 5.0

# SQLSTATE class 23 code for unique_violation (PostgreSQL drivers)
UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Tell unique-key collisions apart from FK, NOT NULL and CHECK failures."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == UNIQUE_VIOLATION_SQLSTATE
    # SQLite: "UNIQUE constraint failed: ..."
    return "unique constraint" in str(orig).lower()


@asynccontextmanager
async def storage_guard(timeout: float):
    """Bound a storage call by timeout and translate driver errors."""
    try:
        async with asyncio.timeout(timeout):
            yield
    except IntegrityError as exc:
        if is_unique_violation(exc):
            raise UniqueViolation(str(exc.orig)) from exc
        raise StorageFailure(str(exc.orig)) from exc
    except TimeoutError as exc:
        raise StorageFailure(f"Storage call exceeded {timeout}s") from exc
    except SQLAlchemyError as exc:
        raise StorageFailure(str(exc)) from exc


class SqlRepository:
    """Shared plumbing for SQLModel repositories"""

    def __init__(self, session: AsyncSession, timeout: float = DEFAULT_STORAGE_TIMEOUT):
        self.session = session
        self.timeout = timeout

    def guard(self):
        return storage_guard(self.timeout)

    async def _add(self, entity):
        async with self.guard():
            self.session.add(entity)
            await self.session.flush()
            await self.session.refresh(entity)
        return entity
