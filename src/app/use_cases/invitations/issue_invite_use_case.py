"""
Issue Invite Use Case

Handles inviting a prospective staff member to join a business.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.storage_errors import (
    STORAGE_ERROR,
    UniqueViolation,
    storage_errors_as_result,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import (
    AuditEvent,
    Invitation,
    InvitationStatus,
    StaffPermissions,
    StaffRole,
)

from .common import (
    DEFAULT_INVITE_TTL,
    can_manage_staff,
    generate_invite_token,
    works_for_another_business,
)
from .dtos import InvitationResponse, IssueInviteResponse

logger = logging.getLogger(__name__)


class IssueInviteUseCase:
    """
    Use case for issuing staff invitations.

    Business Rules:
    - Only the business owner or staff with canManageStaff can invite
    - Role must be a valid StaffRole (only "staff")
    - Active members of the business cannot be invited again
    - Users who own or actively work for another business cannot be invited
    - At most one active (pending, unexpired) invitation per (business, email)
    - A pending invitation past its deadline is rewritten to expired first
    - Token is 32 random bytes, hex encoded; expiry is issuance + 7 days
    - A unique-key collision retries the whole attempt once, then fails
    - Email delivery is not performed here; the invite URL is returned instead
    """

    MAX_ATTEMPTS = 2

    def __init__(
        self,
        uow: UnitOfWork,
        app_url: str = "http://localhost:3001",
        ttl: timedelta = DEFAULT_INVITE_TTL,
        clock: Callable[[], datetime] = utc_now,
        token_factory: Callable[[], str] = generate_invite_token,
    ):
        self.uow = uow
        self.app_url = app_url.rstrip("/")
        self.ttl = ttl
        self.clock = clock
        self.token_factory = token_factory

    @storage_errors_as_result
    async def execute(
        self,
        business_id: UUID,
        invited_by: UUID,
        email: str,
        permissions: Optional[StaffPermissions] = None,
        role: str = StaffRole.staff.value,
    ) -> Result[IssueInviteResponse]:
        """
        Execute issue invite use case.

        Args:
            business_id: Business the invitee would join
            invited_by: User ID of the person sending the invite
            email: Email address to invite (stored exactly as given)
            permissions: Capabilities granted on acceptance (defaults apply)
            role: Role to assign, only "staff" is accepted

        Returns:
            Result with IssueInviteResponse DTO, or Error
        """
        try:
            staff_role = StaffRole(role)
        except ValueError:
            return Return.err(
                Error("VALIDATION_ERROR", f"Invalid role: {role}. Must be: staff")
            )

        if not email or not email.strip():
            return Return.err(Error("VALIDATION_ERROR", "Email is required"))

        permissions = permissions or StaffPermissions()

        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            async with self.uow:
                business = await self.uow.businesses.get_by_id(business_id)
                if business is None:
                    return Return.err(Error("BUSINESS_NOT_FOUND", "Business not found"))

                if not await can_manage_staff(self.uow, invited_by, business):
                    return Return.err(
                        Error(
                            "INSUFFICIENT_PERMISSIONS",
                            "Only the owner or staff managers can invite staff",
                        )
                    )

                existing_user = await self.uow.users.get_by_email(email)
                if existing_user:
                    membership = await self.uow.memberships.get_by_user_and_business(
                        existing_user.id, business_id
                    )
                    if membership and membership.is_active:
                        return Return.err(
                            Error(
                                "ALREADY_MEMBER",
                                "User is already an active staff member of this business",
                            )
                        )
                    if await works_for_another_business(
                        self.uow, existing_user.id, business_id
                    ):
                        return Return.err(
                            Error(
                                "ALREADY_IN_ANOTHER_BUSINESS",
                                "User is already part of another business",
                            )
                        )

                now = self.clock()

                pending = await self.uow.invitations.get_pending_by_business_and_email(
                    business_id, email
                )
                if pending is not None:
                    if not pending.is_expired(now):
                        return Return.err(
                            Error(
                                "INVITE_ALREADY_EXISTS",
                                "A pending invitation already exists for this email",
                            )
                        )
                    # Frees the active-invite key held by a stale pending row
                    await self.uow.invitations.transition(
                        pending.id,
                        InvitationStatus.expired,
                        now,
                        require_unexpired=False,
                    )

                invitation = Invitation(
                    business_id=business_id,
                    invited_by=invited_by,
                    email=email,
                    role=staff_role,
                    permissions=permissions.to_storage(),
                    status=InvitationStatus.pending,
                    token=self.token_factory(),
                    expires_at=now + self.ttl,
                    created_at=now,
                )

                try:
                    await self.uow.invitations.create(invitation)

                    audit = AuditEvent(
                        business_id=business_id,
                        user_id=invited_by,
                        action="invite_sent",
                        event_metadata={
                            "invitation_id": str(invitation.id),
                            "invited_email": email,
                            "permissions": permissions.to_storage(),
                        },
                    )
                    await self.uow.audit_events.create(audit)

                    await self.uow.commit()
                except UniqueViolation as exc:
                    logger.warning(
                        f"Unique key collision issuing invite for business {business_id} "
                        f"(attempt {attempt}/{self.MAX_ATTEMPTS}): {exc}"
                    )
                    continue

                logger.info(
                    f"Invitation {invitation.id} issued for business {business_id}"
                )

                return Return.ok(
                    IssueInviteResponse(
                        invite=InvitationResponse.from_entity(invitation, business=business),
                        invite_url=f"{self.app_url}/accept-invite?token={invitation.token}",
                    )
                )

        return Return.err(STORAGE_ERROR)
