"""
List Pending Invites Use Case

Resolves the invitations an invitee should be notified about.
"""

from datetime import datetime
from typing import Callable

from libs.result import Error, Result, Return
from src.app.services.storage_errors import storage_errors_as_result
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now

from .common import with_summaries
from .dtos import InvitationListResponse


class ListPendingInvitesUseCase:
    """
    Use case for listing an invitee's actionable invitations.

    Business Rules:
    - Email is matched exactly as stored, no normalization
    - No user with that email means no notifications, not an error
    - Only pending invitations whose deadline is still ahead are returned
    - Newest first, with business and inviter summaries joined in
    - Read-only
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.uow = uow
        self.clock = clock

    @storage_errors_as_result
    async def execute(self, email: str) -> Result[InvitationListResponse]:
        if not email or not email.strip():
            return Return.err(Error("VALIDATION_ERROR", "Email is required"))

        async with self.uow:
            user = await self.uow.users.get_by_email(email)
            if user is None:
                return Return.ok(InvitationListResponse(invites=[]))

            now = self.clock()
            invitations = await self.uow.invitations.list_active_by_email(email, now)
            invitations = [i for i in invitations if i.is_active(now)]

            return Return.ok(
                InvitationListResponse(invites=await with_summaries(self.uow, invitations))
            )
