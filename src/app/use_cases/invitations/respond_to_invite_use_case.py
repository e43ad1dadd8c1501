"""
Respond To Invite Use Case

Handles an invitee accepting or declining an invitation by token.
"""

import logging
from datetime import datetime
from typing import Callable
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.storage_errors import storage_errors_as_result
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import (
    AuditEvent,
    Invitation,
    InvitationStatus,
    InviteAction,
    StaffMembership,
)

from .common import works_for_another_business
from .dtos import InvitationResponse

logger = logging.getLogger(__name__)


class RespondToInviteUseCase:
    """
    Use case for accepting or declining invitations.

    Business Rules:
    - Action must be accept or decline
    - Unknown token is rejected (INVITATION_NOT_FOUND)
    - Past the deadline is rejected whatever the stored status (INVITATION_EXPIRED)
    - Only pending invitations can be answered (INVALID_INVITATION_STATE),
      so answering twice fails the second time
    - Accept grants the invitation's permissions to the (user, business)
      membership and marks the invitation accepted in one transaction;
      the grant is written first
    - The status change is a conditional update; of two concurrent
      responders exactly one wins
    - A user who owns or actively works for another business cannot accept
      (ALREADY_IN_ANOTHER_BUSINESS)
    - Accepting expires every other pending invitation for the same email
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.uow = uow
        self.clock = clock

    @storage_errors_as_result
    async def execute(
        self, token: str, action: str, acting_user_id: UUID
    ) -> Result[InvitationResponse]:
        """
        Execute respond to invite use case.

        Args:
            token: Invitation token
            action: "accept" or "decline"
            acting_user_id: Authenticated user answering the invitation

        Returns:
            Result with the updated InvitationResponse DTO, or Error
        """
        try:
            invite_action = InviteAction(action)
        except ValueError:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    f"Invalid action: {action}. Must be one of: accept, decline",
                )
            )

        if not token:
            return Return.err(Error("VALIDATION_ERROR", "Token is required"))

        async with self.uow:
            invitation = await self.uow.invitations.get_by_token(token)
            if invitation is None:
                return Return.err(
                    Error("INVITATION_NOT_FOUND", "Invalid or non-existent invitation token")
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

            if invite_action == InviteAction.accept:
                user = await self.uow.users.get_by_id(acting_user_id)
                if user is None:
                    return Return.err(Error("USER_NOT_FOUND", "User not found"))

                if await works_for_another_business(
                    self.uow, acting_user_id, invitation.business_id
                ):
                    return Return.err(
                        Error(
                            "ALREADY_IN_ANOTHER_BUSINESS",
                            "You are already part of another business; "
                            "leave it before joining this one",
                        )
                    )

                await self._grant_permissions(invitation, acting_user_id, now)
                updated = await self.uow.invitations.transition(
                    invitation.id,
                    InvitationStatus.accepted,
                    now,
                    accepted_at=now,
                    accepted_by=acting_user_id,
                )
                audit_action = "invitation_accepted"
            else:
                updated = await self.uow.invitations.transition(
                    invitation.id,
                    InvitationStatus.declined,
                    now,
                    declined_at=now,
                )
                audit_action = "invitation_declined"

            if updated is None:
                # Lost the race; leaving the unit rolls back any grant
                logger.warning(
                    f"Invitation {invitation.id} changed state during {invite_action.value}"
                )
                return Return.err(
                    Error(
                        "INVALID_INVITATION_STATE",
                        "This invitation has already been answered",
                    )
                )

            event_metadata = {
                "invitation_id": str(invitation.id),
                "email": invitation.email,
            }
            if invite_action == InviteAction.accept:
                # Staff join a single business; the other offers lapse
                expired = await self.uow.invitations.expire_pending_by_email(
                    invitation.email, invitation.id
                )
                event_metadata["expired_other_invites"] = expired

            audit = AuditEvent(
                business_id=invitation.business_id,
                user_id=acting_user_id,
                action=audit_action,
                event_metadata=event_metadata,
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(
                f"Invitation {invitation.id} {updated.status.value} by user {acting_user_id}"
            )

            return Return.ok(InvitationResponse.from_entity(updated))

    async def _grant_permissions(
        self, invitation: Invitation, user_id: UUID, now: datetime
    ) -> StaffMembership:
        membership = await self.uow.memberships.get_by_user_and_business(
            user_id, invitation.business_id
        )

        if membership is None:
            membership = StaffMembership(
                user_id=user_id,
                business_id=invitation.business_id,
                role=invitation.role,
                permissions=dict(invitation.permissions),
                is_active=True,
                invitation_id=invitation.id,
                created_at=now,
                updated_at=now,
            )
            return await self.uow.memberships.create(membership)

        membership.role = invitation.role
        membership.permissions = dict(invitation.permissions)
        membership.is_active = True
        membership.invitation_id = invitation.id
        membership.updated_at = now
        return await self.uow.memberships.update(membership)
