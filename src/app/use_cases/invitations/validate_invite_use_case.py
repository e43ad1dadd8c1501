"""
Validate Invite Use Case

Looks up an invitation by token for the accept-invite page.
"""

from datetime import datetime
from typing import Callable

from libs.result import Error, Result, Return
from src.app.services.storage_errors import storage_errors_as_result
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import InvitationStatus

from .common import with_summaries
from .dtos import ValidateInviteResponse


class ValidateInviteUseCase:
    """Read-only check that a token still points at an actionable invitation."""

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.uow = uow
        self.clock = clock

    @storage_errors_as_result
    async def execute(self, token: str) -> Result[ValidateInviteResponse]:
        if not token:
            return Return.err(Error("VALIDATION_ERROR", "Token is required"))

        async with self.uow:
            invitation = await self.uow.invitations.get_by_token(token)
            if invitation is None:
                return Return.err(
                    Error("INVITATION_NOT_FOUND", "Invalid or non-existent invitation token")
                )

            if invitation.is_expired(self.clock()):
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

            [response] = await with_summaries(self.uow, [invitation])
            return Return.ok(ValidateInviteResponse(invite=response))
