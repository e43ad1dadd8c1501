"""
Database lifecycle.

The engine is created when the process starts and disposed when it stops;
request handlers borrow sessions from the instance held on app.state.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, db_uri: str, storage_timeout: float, echo: bool = False):
        self.db_uri = db_uri
        self.storage_timeout = storage_timeout
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self._session_factory = None

    async def connect(self, create_tables: bool = False):
        self.engine = create_async_engine(self.db_uri, echo=self.echo, future=True)
        self._session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        if create_tables:
            # Registers every table on SQLModel.metadata
            import src.domain.entities  # noqa: F401

            async with self.engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
            logger.info("Database tables created")
        logger.info("Database engine initialized")

    async def disconnect(self):
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database engine disposed")
        self.engine = None
        self._session_factory = None

    def session(self) -> AsyncSession:
        if self._session_factory is None:
            raise RuntimeError("Database.connect() must be awaited before use")
        return self._session_factory()

    def unit_of_work(self, session: AsyncSession) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(session, timeout=self.storage_timeout)
