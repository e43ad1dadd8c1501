from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select

from src.adapter.repositories.base import SqlRepository
from src.app.repositories.invitation_repository import IInvitationRepository
from src.domain.entities import Invitation, InvitationStatus


class InvitationRepository(SqlRepository, IInvitationRepository):
    """Invitation repository implementation using SQLModel"""

    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        stmt = (
            select(Invitation)
            .where(Invitation.id == invitation_id)
            .execution_options(populate_existing=True)
        )
        async with self.guard():
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        stmt = select(Invitation).where(Invitation.token == token)
        async with self.guard():
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_pending_by_business_and_email(
        self, business_id: UUID, email: str
    ) -> Optional[Invitation]:
        """Get the pending invitation (expired or not) for a business and email"""
        stmt = select(Invitation).where(
            Invitation.business_id == business_id,
            Invitation.email == email,
            Invitation.status == InvitationStatus.pending,
        )
        async with self.guard():
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_active_by_email(self, email: str, now: datetime) -> List[Invitation]:
        """Pending, unexpired invitations for an email, newest first"""
        stmt = (
            select(Invitation)
            .where(
                Invitation.email == email,
                Invitation.status == InvitationStatus.pending,
                Invitation.expires_at > now,
            )
            .order_by(Invitation.created_at.desc())
        )
        async with self.guard():
            result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_business(self, business_id: UUID) -> List[Invitation]:
        """All invitations of a business, newest first"""
        stmt = (
            select(Invitation)
            .where(Invitation.business_id == business_id)
            .order_by(Invitation.created_at.desc())
        )
        async with self.guard():
            result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        return await self._add(invitation)

    async def transition(
        self,
        invitation_id: UUID,
        to_status: InvitationStatus,
        now: datetime,
        require_unexpired: bool = True,
        **values,
    ) -> Optional[Invitation]:
        """Conditional UPDATE guarded by status = pending (and the deadline)"""
        stmt = update(Invitation).where(
            Invitation.id == invitation_id,
            Invitation.status == InvitationStatus.pending,
        )
        if require_unexpired:
            stmt = stmt.where(Invitation.expires_at > now)
        stmt = stmt.values(status=to_status, **values).execution_options(
            synchronize_session=False
        )

        async with self.guard():
            result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return None
        return await self.get_by_id(invitation_id)

    async def expire_stale(self, now: datetime) -> int:
        """Rewrite pending invitations past their deadline to expired"""
        stmt = (
            update(Invitation)
            .where(
                Invitation.status == InvitationStatus.pending,
                Invitation.expires_at <= now,
            )
            .values(status=InvitationStatus.expired)
            .execution_options(synchronize_session=False)
        )
        async with self.guard():
            result = await self.session.execute(stmt)
        return result.rowcount

    async def expire_pending_by_email(self, email: str, exclude_id: UUID) -> int:
        """Conditional bulk UPDATE; rows answered concurrently are left alone"""
        stmt = (
            update(Invitation)
            .where(
                Invitation.email == email,
                Invitation.status == InvitationStatus.pending,
                Invitation.id != exclude_id,
            )
            .values(status=InvitationStatus.expired)
            .execution_options(synchronize_session=False)
        )
        async with self.guard():
            result = await self.session.execute(stmt)
        return result.rowcount
