from typing import List, Optional
from uuid import UUID

from sqlmodel import select

from src.adapter.repositories.base import SqlRepository
from src.app.repositories.staff_membership_repository import IStaffMembershipRepository
from src.domain.entities import StaffMembership


class StaffMembershipRepository(SqlRepository, IStaffMembershipRepository):
    """StaffMembership repository implementation using SQLModel"""

    async def get_by_user_and_business(
        self, user_id: UUID, business_id: UUID
    ) -> Optional[StaffMembership]:
        """Get membership by user and business"""
        stmt = select(StaffMembership).where(
            StaffMembership.user_id == user_id,
            StaffMembership.business_id == business_id,
        )
        async with self.guard():
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_elsewhere(
        self, user_id: UUID, business_id: UUID
    ) -> Optional[StaffMembership]:
        stmt = (
            select(StaffMembership)
            .where(
                StaffMembership.user_id == user_id,
                StaffMembership.business_id != business_id,
                StaffMembership.is_active == True,
            )
            .limit(1)
        )
        async with self.guard():
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_business(self, business_id: UUID) -> List[StaffMembership]:
        stmt = (
            select(StaffMembership)
            .where(StaffMembership.business_id == business_id)
            .order_by(StaffMembership.is_active.desc(), StaffMembership.created_at.desc())
        )
        async with self.guard():
            result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, membership: StaffMembership) -> StaffMembership:
        """Create a new membership"""
        return await self._add(membership)

    async def update(self, membership: StaffMembership) -> StaffMembership:
        """Update existing membership"""
        return await self._add(membership)
