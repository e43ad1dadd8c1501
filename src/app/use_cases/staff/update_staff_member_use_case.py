"""
Update Staff Member Use Case

Changes what an existing staff member may do, or reactivates them.
"""

import logging
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.storage_errors import storage_errors_as_result
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invitations.common import (
    can_manage_staff,
    works_for_another_business,
)
from src.domain.base import utc_now
from src.domain.entities import AuditEvent, StaffPermissions

from .dtos import StaffMemberResponse

logger = logging.getLogger(__name__)


class UpdateStaffMemberUseCase:
    """
    Use case for editing a staff membership.

    Business Rules:
    - Only the owner or staff with canManageStaff can edit staff
    - Managers cannot edit their own membership
    - At least one of permissions / is_active must be given
    - Reactivating is refused while the member belongs to another business
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.uow = uow
        self.clock = clock

    @storage_errors_as_result
    async def execute(
        self,
        requester_id: UUID,
        business_id: UUID,
        user_id: UUID,
        permissions: Optional[StaffPermissions] = None,
        is_active: Optional[bool] = None,
    ) -> Result[StaffMemberResponse]:
        """
        Execute update staff member use case.

        Args:
            requester_id: User making the change
            business_id: Business the membership belongs to
            user_id: Staff member being changed
            permissions: Replacement permission set, if changing
            is_active: New active flag, if changing

        Returns:
            Result with the updated StaffMemberResponse DTO, or Error
        """
        if permissions is None and is_active is None:
            return Return.err(
                Error("VALIDATION_ERROR", "Nothing to update: give permissions or isActive")
            )

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
                        "Only the owner or another staff manager can edit this member",
                    )
                )

            membership = await self.uow.memberships.get_by_user_and_business(
                user_id, business_id
            )
            if membership is None:
                return Return.err(
                    Error("MEMBERSHIP_NOT_FOUND", "Staff member not found")
                )

            if (
                is_active
                and not membership.is_active
                and await works_for_another_business(self.uow, user_id, business_id)
            ):
                return Return.err(
                    Error(
                        "ALREADY_IN_ANOTHER_BUSINESS",
                        "This member is already part of another business",
                    )
                )

            changes = {}
            if permissions is not None:
                membership.permissions = permissions.to_storage()
                changes["permissions"] = membership.permissions
            if is_active is not None:
                membership.is_active = is_active
                changes["is_active"] = is_active
            membership.updated_at = self.clock()

            updated = await self.uow.memberships.update(membership)
            user = await self.uow.users.get_by_id(user_id)

            audit = AuditEvent(
                business_id=business_id,
                user_id=requester_id,
                action="staff_member_updated",
                event_metadata={"member_user_id": str(user_id), **changes},
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(f"Staff member {user_id} of business {business_id} updated")

            return Return.ok(StaffMemberResponse.from_entity(updated, user))
