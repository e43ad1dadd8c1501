"""
List Business Invites Use Case

Lists every invitation a business has issued, for its staff page.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.storage_errors import storage_errors_as_result
from src.app.services.unit_of_work import UnitOfWork

from .common import can_manage_staff, with_summaries
from .dtos import InvitationListResponse


class ListBusinessInvitesUseCase:
    """
    Use case for listing a business's invitations in any status.

    Business Rules:
    - Only the owner or staff with canManageStaff can list
    - Newest first, with inviter summaries
    - Stored status is reported as is; expiry is visible through expiresAt
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @storage_errors_as_result
    async def execute(
        self, requester_id: UUID, business_id: UUID
    ) -> Result[InvitationListResponse]:
        async with self.uow:
            business = await self.uow.businesses.get_by_id(business_id)
            if business is None:
                return Return.err(Error("BUSINESS_NOT_FOUND", "Business not found"))

            if not await can_manage_staff(self.uow, requester_id, business):
                return Return.err(
                    Error(
                        "INSUFFICIENT_PERMISSIONS",
                        "Only the owner or staff managers can view invitations",
                    )
                )

            invitations = await self.uow.invitations.list_by_business(business_id)
            return Return.ok(
                InvitationListResponse(invites=await with_summaries(self.uow, invitations))
            )
