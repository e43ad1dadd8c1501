"""
Helpers shared by the invitation use cases.
"""

import secrets
from datetime import timedelta
from typing import Iterable, List
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Business, Invitation

from .dtos import InvitationResponse

DEFAULT_INVITE_TTL = timedelta(days=7)


def generate_invite_token() -> str:
    """64 hex characters from 32 random bytes"""
    return secrets.token_hex(32)


async def can_manage_staff(uow: UnitOfWork, user_id: UUID, business: Business) -> bool:
    """Owners always can; staff need an active membership with canManageStaff."""
    if business.owner_id == user_id:
        return True

    membership = await uow.memberships.get_by_user_and_business(user_id, business.id)
    if membership is None or not membership.is_active:
        return False
    return membership.granted_permissions().can_manage_staff


async def works_for_another_business(
    uow: UnitOfWork, user_id: UUID, business_id: UUID
) -> bool:
    """A user belongs to one business: one they own or one active staff membership."""
    for owned in await uow.businesses.list_by_owner(user_id):
        if owned.id != business_id:
            return True
    return await uow.memberships.get_active_elsewhere(user_id, business_id) is not None


async def with_summaries(
    uow: UnitOfWork, invitations: Iterable[Invitation]
) -> List[InvitationResponse]:
    """Join business and inviter summaries onto invitations, two reads total."""
    invitations = list(invitations)
    if not invitations:
        return []

    businesses = {
        b.id: b
        for b in await uow.businesses.get_by_ids(i.business_id for i in invitations)
    }
    inviters = {
        u.id: u for u in await uow.users.get_by_ids(i.invited_by for i in invitations)
    }

    return [
        InvitationResponse.from_entity(
            invitation,
            business=businesses.get(invitation.business_id),
            inviter=inviters.get(invitation.invited_by),
        )
        for invitation in invitations
    ]
