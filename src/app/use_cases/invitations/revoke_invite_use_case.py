"""
Revoke Invite Use Case

Handles withdrawing an outstanding invitation.
"""

import logging
from datetime import datetime
from typing import Callable
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.storage_errors import storage_errors_as_result
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AuditEvent, InvitationStatus

from .common import can_manage_staff
from .dtos import RevokeInviteResponse

logger = logging.getLogger(__name__)


class RevokeInviteUseCase:
    """
    Use case for revoking pending invitations.

    Business Rules:
    - Only the owner or staff with canManageStaff can revoke
    - Revoking rewrites status to expired; the record is kept for audit
    - Accepted, declined or already expired invitations cannot be revoked
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.uow = uow
        self.clock = clock

    @storage_errors_as_result
    async def execute(
        self, requester_id: UUID, invitation_id: UUID
    ) -> Result[RevokeInviteResponse]:
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None:
                return Return.err(Error("INVITATION_NOT_FOUND", "Invitation not found"))

            business = await self.uow.businesses.get_by_id(invitation.business_id)
            if business is None or not await can_manage_staff(
                self.uow, requester_id, business
            ):
                return Return.err(
                    Error(
                        "INSUFFICIENT_PERMISSIONS",
                        "Only the owner or staff managers can revoke invitations",
                    )
                )

            if invitation.status != InvitationStatus.pending:
                return Return.err(
                    Error(
                        "INVALID_INVITATION_STATE",
                        f"Cannot revoke an invitation that has been {invitation.status.value}",
                    )
                )

            updated = await self.uow.invitations.transition(
                invitation.id,
                InvitationStatus.expired,
                self.clock(),
                require_unexpired=False,
            )
            if updated is None:
                return Return.err(
                    Error(
                        "INVALID_INVITATION_STATE",
                        "This invitation has already been answered",
                    )
                )

            audit = AuditEvent(
                business_id=invitation.business_id,
                user_id=requester_id,
                action="invitation_revoked",
                event_metadata={
                    "invitation_id": str(invitation.id),
                    "email": invitation.email,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(f"Invitation {invitation.id} revoked by user {requester_id}")

            return Return.ok(RevokeInviteResponse(status="revoked"))
