"""
Deactivate Staff Member Use Case

Removes a member from a business's staff without deleting the record.
"""

import logging
from datetime import datetime
from typing import Callable
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.storage_errors import storage_errors_as_result
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invitations.common import can_manage_staff
from src.domain.base import utc_now
from src.domain.entities import AuditEvent

from .dtos import DeactivateStaffMemberResponse

logger = logging.getLogger(__name__)


class DeactivateStaffMemberUseCase:
    """
    Use case for deactivating a staff member.

    Business Rules:
    - Only the owner or staff with canManageStaff can deactivate staff
    - Managers cannot deactivate themselves
    - The membership is kept with is_active=False; it grants nothing and the
      user becomes free to join another business
    - Deactivating an inactive member is a no-op success
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.uow = uow
        self.clock = clock

    @storage_errors_as_result
    async def execute(
        self, requester_id: UUID, business_id: UUID, user_id: UUID
    ) -> Result[DeactivateStaffMemberResponse]:
        async with self.uow:
            business = await self.uow.businesses.get_by_id(business_id)
            if business is None:
                return Return.err(Error("BUSINESS_NOT_FOUND", "Business not found"))

            if requester_id == user_id or not await can_manage_staff(
                self.uow, requester_id, business
            ):
                return Return.err(
                    Error(
                        "INSUFFICIENT_PERMISSIONS",
                        "Only the owner or another staff manager can deactivate this member",
                    )
                )

            membership = await self.uow.memberships.get_by_user_and_business(
                user_id, business_id
            )
            if membership is None:
                return Return.err(
                    Error("MEMBERSHIP_NOT_FOUND", "Staff member not found")
                )

            if membership.is_active:
                membership.is_active = False
                membership.updated_at = self.clock()
                await self.uow.memberships.update(membership)

                audit = AuditEvent(
                    business_id=business_id,
                    user_id=requester_id,
                    action="staff_member_deactivated",
                    event_metadata={"member_user_id": str(user_id)},
                )
                await self.uow.audit_events.create(audit)

                await self.uow.commit()

                logger.info(f"Staff member {user_id} of business {business_id} deactivated")

            return Return.ok(DeactivateStaffMemberResponse(status="deactivated"))
