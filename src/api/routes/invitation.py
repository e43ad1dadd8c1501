from datetime import timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field

from config import ApplicationConfig
from libs.result import Error
from src.api.error import ClientError, ServerError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invitations import (
    InvitationListResponse,
    InvitationResponse,
    IssueInviteResponse,
    IssueInviteUseCase,
    ListPendingInvitesUseCase,
    RespondToInviteUseCase,
    RevokeInviteResponse,
    RevokeInviteUseCase,
    UpdateInvitePermissionsUseCase,
    ValidateInviteResponse,
    ValidateInviteUseCase,
)
from src.app.use_cases.invitations.dtos import ApiModel
from src.depends import CurrentUser, get_current_user, get_unit_of_work
from src.domain.entities import StaffPermissions

router = APIRouter(prefix="/invites", tags=["Invitations"])

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"


def parse_uuid(value: str, what: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise ClientError(
            Error("VALIDATION_ERROR", f"Invalid {what} format"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class IssueInviteRequest(ApiModel):
    """
    Issue invite HTTP request payload

    Validates incoming request for inviting a staff member. The email is kept
    exactly as sent; lookups match it verbatim.
    """

    business_id: str = Field(..., description="Business the invitee would join")
    invited_by: str = Field(..., description="User ID of the inviter")
    email: str = Field(
        ..., max_length=255, pattern=EMAIL_PATTERN, description="Email address to invite"
    )
    permissions: StaffPermissions = Field(
        default_factory=StaffPermissions, description="Permissions granted on acceptance"
    )
    role: str = Field("staff", description="Role to assign (staff)")


class RespondToInviteRequest(ApiModel):
    """Respond to invite HTTP request payload"""

    token: str = Field(..., min_length=1, description="Invitation token")
    action: str = Field(..., description="accept or decline")


class UpdateInvitePermissionsRequest(ApiModel):
    """Update invite permissions HTTP request payload"""

    permissions: StaffPermissions


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=InvitationListResponse,
)
async def list_pending_invites(
    email: str = Query(..., description="Invitee email, matched exactly"),
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Pending Invites

    Returns the caller's pending, unexpired invitations, newest first, with
    business and inviter summaries. Unknown emails yield an empty list.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR (missing email)
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: email is not the caller's
        - 503 Service Unavailable: STORAGE_ERROR
    """
    if not email.strip():
        raise ClientError(
            Error("VALIDATION_ERROR", "Email is required"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if email != current_user.email:
        raise ClientError(
            Error("FORBIDDEN", "You can only view your own invitations"),
            status_code=status.HTTP_403_FORBIDDEN,
        )

    use_case = ListPendingInvitesUseCase(uow)
    result = await use_case.execute(email)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "STORAGE_ERROR":
            raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ServerError(error)

    return result.value


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=IssueInviteResponse,
)
async def issue_invite(
    request: IssueInviteRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Issue Invite

    Creates a pending invitation with a 7-day lifetime and returns it along
    with the accept-invite URL. The inviter must be the caller, and must own
    the business or hold canManageStaff.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR (bad ids, email, role or permissions)
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: invitedBy is not the caller, INSUFFICIENT_PERMISSIONS
        - 404 Not Found: BUSINESS_NOT_FOUND
        - 409 Conflict: INVITE_ALREADY_EXISTS, ALREADY_MEMBER,
          ALREADY_IN_ANOTHER_BUSINESS
        - 503 Service Unavailable: STORAGE_ERROR
    """
    business_id = parse_uuid(request.business_id, "business ID")
    invited_by = parse_uuid(request.invited_by, "inviter ID")

    if str(invited_by) != current_user.user_id:
        raise ClientError(
            Error("FORBIDDEN", "Invitations can only be issued in your own name"),
            status_code=status.HTTP_403_FORBIDDEN,
        )

    use_case = IssueInviteUseCase(
        uow,
        app_url=ApplicationConfig.APP_URL,
        ttl=timedelta(days=ApplicationConfig.INVITE_TTL_DAYS),
    )
    result = await use_case.execute(
        business_id, invited_by, request.email, request.permissions, request.role
    )

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "INSUFFICIENT_PERMISSIONS":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "BUSINESS_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code in (
            "INVITE_ALREADY_EXISTS",
            "ALREADY_MEMBER",
            "ALREADY_IN_ANOTHER_BUSINESS",
        ):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "STORAGE_ERROR":
            raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ServerError(error)

    return result.value


@router.post(
    "/respond",
    status_code=status.HTTP_200_OK,
    response_model=InvitationResponse,
)
async def respond_to_invite(
    request: RespondToInviteRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Respond to Invite

    Accepts or declines an invitation by token on behalf of the caller.
    Accepting grants the invitation's permissions for its business.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR (unknown action, missing token)
        - 401 Unauthorized: Invalid or expired JWT
        - 404 Not Found: INVITATION_NOT_FOUND, USER_NOT_FOUND
        - 409 Conflict: INVALID_INVITATION_STATE (already answered or revoked),
          ALREADY_IN_ANOTHER_BUSINESS
        - 410 Gone: INVITATION_EXPIRED
        - 503 Service Unavailable: STORAGE_ERROR
    """
    acting_user_id = parse_uuid(current_user.user_id, "user ID")

    use_case = RespondToInviteUseCase(uow)
    result = await use_case.execute(request.token, request.action, acting_user_id)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code in ("INVITATION_NOT_FOUND", "USER_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code in ("INVALID_INVITATION_STATE", "ALREADY_IN_ANOTHER_BUSINESS"):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "INVITATION_EXPIRED":
            raise ClientError(error, status_code=status.HTTP_410_GONE)
        elif error.code == "STORAGE_ERROR":
            raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ServerError(error)

    return result.value


@router.get(
    "/validate",
    status_code=status.HTTP_200_OK,
    response_model=ValidateInviteResponse,
)
async def validate_invite(
    token: Optional[str] = Query(None, description="Invitation token"),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Validate Invite

    Shows an actionable invitation with its business and inviter before the
    invitee signs in. Holding the token is the credential.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR (missing token)
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: INVALID_INVITATION_STATE
        - 410 Gone: INVITATION_EXPIRED
        - 503 Service Unavailable: STORAGE_ERROR
    """
    use_case = ValidateInviteUseCase(uow)
    result = await use_case.execute(token)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "INVITATION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "INVALID_INVITATION_STATE":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "INVITATION_EXPIRED":
            raise ClientError(error, status_code=status.HTTP_410_GONE)
        elif error.code == "STORAGE_ERROR":
            raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ServerError(error)

    return result.value


@router.patch(
    "/{invite_id}",
    status_code=status.HTTP_200_OK,
    response_model=InvitationResponse,
)
async def update_invite_permissions(
    invite_id: str,
    request: UpdateInvitePermissionsRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Invite Permissions

    Replaces the permissions a pending invitation will grant.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: INSUFFICIENT_PERMISSIONS
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: INVALID_INVITATION_STATE
        - 410 Gone: INVITATION_EXPIRED
        - 503 Service Unavailable: STORAGE_ERROR
    """
    requester_id = parse_uuid(current_user.user_id, "user ID")
    invitation_id = parse_uuid(invite_id, "invitation ID")

    use_case = UpdateInvitePermissionsUseCase(uow)
    result = await use_case.execute(requester_id, invitation_id, request.permissions)

    if result.is_err():
        error = result.error
        if error.code == "INSUFFICIENT_PERMISSIONS":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "INVITATION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "INVALID_INVITATION_STATE":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "INVITATION_EXPIRED":
            raise ClientError(error, status_code=status.HTTP_410_GONE)
        elif error.code == "STORAGE_ERROR":
            raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ServerError(error)

    return result.value


@router.delete(
    "/{invite_id}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeInviteResponse,
)
async def revoke_invite(
    invite_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Revoke Invite

    Withdraws a pending invitation by setting its status to expired.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR (invalid invite_id format)
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: INSUFFICIENT_PERMISSIONS
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: INVALID_INVITATION_STATE
        - 503 Service Unavailable: STORAGE_ERROR
    """
    requester_id = parse_uuid(current_user.user_id, "user ID")
    invitation_id = parse_uuid(invite_id, "invitation ID")

    use_case = RevokeInviteUseCase(uow)
    result = await use_case.execute(requester_id, invitation_id)

    if result.is_err():
        error = result.error
        if error.code == "INSUFFICIENT_PERMISSIONS":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "INVITATION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "INVALID_INVITATION_STATE":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "STORAGE_ERROR":
            raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ServerError(error)

    return result.value
