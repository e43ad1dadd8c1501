from typing import Iterable, List, Optional
from uuid import UUID

from sqlmodel import select

from src.adapter.repositories.base import SqlRepository
from src.app.repositories.user_repository import IUserRepository
from src.domain.entities import User


class UserRepository(SqlRepository, IUserRepository):
    """User repository implementation using SQLModel"""

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        async with self.guard():
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        async with self.guard():
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, user_ids: Iterable[UUID]) -> List[User]:
        ids = list(set(user_ids))
        if not ids:
            return []
        stmt = select(User).where(User.id.in_(ids))
        async with self.guard():
            result = await self.session.execute(stmt)
        return list(result.scalars().all())
