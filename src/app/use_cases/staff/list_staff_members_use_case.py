"""
List Staff Members Use Case

The staff page roster of a business.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.storage_errors import storage_errors_as_result
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invitations.common import can_manage_staff

from .dtos import StaffMemberListResponse, StaffMemberResponse


class ListStaffMembersUseCase:
    """
    Use case for listing the staff of a business.

    Business Rules:
    - Only the owner or staff with canManageStaff can list staff
    - Deactivated members are listed too, after the active ones
    - Each member carries a user summary, joined in one read
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @storage_errors_as_result
    async def execute(
        self, requester_id: UUID, business_id: UUID
    ) -> Result[StaffMemberListResponse]:
        async with self.uow:
            business = await self.uow.businesses.get_by_id(business_id)
            if business is None:
                return Return.err(Error("BUSINESS_NOT_FOUND", "Business not found"))

            if not await can_manage_staff(self.uow, requester_id, business):
                return Return.err(
                    Error(
                        "INSUFFICIENT_PERMISSIONS",
                        "Only the owner or staff managers can view staff",
                    )
                )

            memberships = await self.uow.memberships.list_by_business(business_id)
            users = {
                u.id: u
                for u in await self.uow.users.get_by_ids(m.user_id for m in memberships)
            }

            return Return.ok(
                StaffMemberListResponse(
                    members=[
                        StaffMemberResponse.from_entity(m, users.get(m.user_id))
                        for m in memberships
                    ]
                )
            )
