"""
Get Staff Permissions Use Case

Answers what a user may do within a business.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.storage_errors import storage_errors_as_result
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invitations.common import can_manage_staff
from src.domain.entities import StaffPermissions, UserRole

from .dtos import StaffPermissionsResponse


class GetStaffPermissionsUseCase:
    """
    Use case for the staff permission check.

    Business Rules:
    - The business owner holds every permission
    - Staff hold the permissions of their active membership
    - Users may check themselves; checking others needs canManageStaff
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @storage_errors_as_result
    async def execute(
        self, requester_id: UUID, business_id: UUID, user_id: UUID
    ) -> Result[StaffPermissionsResponse]:
        async with self.uow:
            business = await self.uow.businesses.get_by_id(business_id)
            if business is None:
                return Return.err(Error("BUSINESS_NOT_FOUND", "Business not found"))

            if requester_id != user_id and not await can_manage_staff(
                self.uow, requester_id, business
            ):
                return Return.err(
                    Error(
                        "INSUFFICIENT_PERMISSIONS",
                        "Only the owner or staff managers can view other staff permissions",
                    )
                )

            if business.owner_id == user_id:
                return Return.ok(
                    StaffPermissionsResponse(
                        business_id=str(business_id),
                        user_id=str(user_id),
                        role=UserRole.owner.value,
                        permissions=StaffPermissions.all_granted(),
                    )
                )

            membership = await self.uow.memberships.get_by_user_and_business(
                user_id, business_id
            )
            if membership is None or not membership.is_active:
                return Return.err(
                    Error(
                        "MEMBERSHIP_NOT_FOUND",
                        "User is not an active staff member of this business",
                    )
                )

            return Return.ok(
                StaffPermissionsResponse(
                    business_id=str(business_id),
                    user_id=str(user_id),
                    role=membership.role.value,
                    permissions=membership.granted_permissions(),
                )
            )
