"""
Update Invite Permissions Use Case

Changes the permissions an outstanding invitation will grant.
"""

import logging
from datetime import datetime
from typing import Callable
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.storage_errors import storage_errors_as_result
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AuditEvent, InvitationStatus, StaffPermissions

from .common import can_manage_staff
from .dtos import InvitationResponse

logger = logging.getLogger(__name__)


class UpdateInvitePermissionsUseCase:
    """
    Use case for editing the permissions of a pending invitation.

    Business Rules:
    - Only the owner or staff with canManageStaff can edit
    - Only active (pending, unexpired) invitations can be edited
    - The write is conditional on the invitation still being pending, so an
      acceptance racing the edit grants one consistent permission set
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.uow = uow
        self.clock = clock

    @storage_errors_as_result
    async def execute(
        self, requester_id: UUID, invitation_id: UUID, permissions: StaffPermissions
    ) -> Result[InvitationResponse]:
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
                        "Only the owner or staff managers can edit invitations",
                    )
                )

            now = self.clock()
            if invitation.is_expired(now):
                return Return.err(
                    Error("INVITATION_EXPIRED", "This invitation has expired")
                )
            if invitation.status != InvitationStatus.pending:
                return Return.err(
                    Error(
                        "INVALID_INVITATION_STATE",
                        f"This invitation has already been {invitation.status.value}",
                    )
                )

            updated = await self.uow.invitations.transition(
                invitation.id,
                InvitationStatus.pending,
                now,
                permissions=permissions.to_storage(),
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
                action="invitation_permissions_updated",
                event_metadata={
                    "invitation_id": str(invitation.id),
                    "permissions": permissions.to_storage(),
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(f"Permissions of invitation {invitation.id} updated")

            return Return.ok(InvitationResponse.from_entity(updated, business=business))
