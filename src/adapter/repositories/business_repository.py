from typing import Iterable, List, Optional
from uuid import UUID

from sqlmodel import select

from src.adapter.repositories.base import SqlRepository
from src.app.repositories.business_repository import IBusinessRepository
from src.domain.entities import Business


class BusinessRepository(SqlRepository, IBusinessRepository):
    """Business repository implementation using SQLModel"""

    async def get_by_id(self, business_id: UUID) -> Optional[Business]:
        stmt = select(Business).where(Business.id == business_id)
        async with self.guard():
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, business_ids: Iterable[UUID]) -> List[Business]:
        ids = list(set(business_ids))
        if not ids:
            return []
        stmt = select(Business).where(Business.id.in_(ids))
        async with self.guard():
            result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_owner(self, owner_id: UUID) -> List[Business]:
        stmt = select(Business).where(Business.owner_id == owner_id)
        async with self.guard():
            result = await self.session.execute(stmt)
        return list(result.scalars().all())
