from typing import Optional

from fastapi import APIRouter, Depends, status

from src.api.error import ClientError, ServerError
from src.api.routes.invitation import parse_uuid
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invitations import InvitationListResponse, ListBusinessInvitesUseCase
from src.app.use_cases.invitations.dtos import ApiModel
from src.app.use_cases.staff import (
    DeactivateStaffMemberResponse,
    DeactivateStaffMemberUseCase,
    GetStaffPermissionsUseCase,
    ListStaffMembersUseCase,
    StaffMemberListResponse,
    StaffMemberResponse,
    StaffPermissionsResponse,
    UpdateStaffMemberUseCase,
)
from src.depends import CurrentUser, get_current_user, get_unit_of_work
from src.domain.entities import StaffPermissions

router = APIRouter(prefix="/businesses", tags=["Business"])


class UpdateStaffMemberRequest(ApiModel):
    """Update staff member HTTP request payload; omitted fields are left as they are"""

    permissions: Optional[StaffPermissions] = None
    is_active: Optional[bool] = None


@router.get(
    "/{business_id}/invites",
    status_code=status.HTTP_200_OK,
    response_model=InvitationListResponse,
)
async def list_business_invites(
    business_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Business Invites

    Returns every invitation the business has issued, newest first.
    Requires ownership or canManageStaff.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR (invalid business_id format)
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: INSUFFICIENT_PERMISSIONS
        - 404 Not Found: BUSINESS_NOT_FOUND
        - 503 Service Unavailable: STORAGE_ERROR
    """
    requester_id = parse_uuid(current_user.user_id, "user ID")
    business_uuid = parse_uuid(business_id, "business ID")

    use_case = ListBusinessInvitesUseCase(uow)
    result = await use_case.execute(requester_id, business_uuid)

    if result.is_err():
        error = result.error
        if error.code == "INSUFFICIENT_PERMISSIONS":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "BUSINESS_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "STORAGE_ERROR":
            raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ServerError(error)

    return result.value


@router.get(
    "/{business_id}/staff/{user_id}/permissions",
    status_code=status.HTTP_200_OK,
    response_model=StaffPermissionsResponse,
)
async def get_staff_permissions(
    business_id: str,
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get Staff Permissions

    Effective permissions of a user within a business. The owner holds every
    permission. Users may read their own entry; reading others requires
    ownership or canManageStaff.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: INSUFFICIENT_PERMISSIONS
        - 404 Not Found: BUSINESS_NOT_FOUND, MEMBERSHIP_NOT_FOUND
        - 503 Service Unavailable: STORAGE_ERROR
    """
    requester_id = parse_uuid(current_user.user_id, "user ID")
    business_uuid = parse_uuid(business_id, "business ID")
    user_uuid = parse_uuid(user_id, "user ID")

    use_case = GetStaffPermissionsUseCase(uow)
    result = await use_case.execute(requester_id, business_uuid, user_uuid)

    if result.is_err():
        error = result.error
        if error.code == "INSUFFICIENT_PERMISSIONS":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code in ("BUSINESS_NOT_FOUND", "MEMBERSHIP_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "STORAGE_ERROR":
            raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ServerError(error)

    return result.value


@router.get(
    "/{business_id}/staff",
    status_code=status.HTTP_200_OK,
    response_model=StaffMemberListResponse,
)
async def list_staff_members(
    business_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Staff Members

    Active members first, then deactivated ones; newest first within each.
    Requires ownership or canManageStaff.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR (invalid business_id format)
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: INSUFFICIENT_PERMISSIONS
        - 404 Not Found: BUSINESS_NOT_FOUND
        - 503 Service Unavailable: STORAGE_ERROR
    """
    requester_id = parse_uuid(current_user.user_id, "user ID")
    business_uuid = parse_uuid(business_id, "business ID")

    use_case = ListStaffMembersUseCase(uow)
    result = await use_case.execute(requester_id, business_uuid)

    if result.is_err():
        error = result.error
        if error.code == "INSUFFICIENT_PERMISSIONS":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "BUSINESS_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "STORAGE_ERROR":
            raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ServerError(error)

    return result.value


@router.patch(
    "/{business_id}/staff/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=StaffMemberResponse,
)
async def update_staff_member(
    business_id: str,
    user_id: str,
    request: UpdateStaffMemberRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Staff Member

    Replaces a member's permissions and/or sets their active flag.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: INSUFFICIENT_PERMISSIONS
        - 404 Not Found: BUSINESS_NOT_FOUND, MEMBERSHIP_NOT_FOUND
        - 409 Conflict: ALREADY_IN_ANOTHER_BUSINESS (reactivation)
        - 503 Service Unavailable: STORAGE_ERROR
    """
    requester_id = parse_uuid(current_user.user_id, "user ID")
    business_uuid = parse_uuid(business_id, "business ID")
    user_uuid = parse_uuid(user_id, "user ID")

    use_case = UpdateStaffMemberUseCase(uow)
    result = await use_case.execute(
        requester_id,
        business_uuid,
        user_uuid,
        permissions=request.permissions,
        is_active=request.is_active,
    )

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "INSUFFICIENT_PERMISSIONS":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code in ("BUSINESS_NOT_FOUND", "MEMBERSHIP_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "ALREADY_IN_ANOTHER_BUSINESS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "STORAGE_ERROR":
            raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ServerError(error)

    return result.value


@router.delete(
    "/{business_id}/staff/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=DeactivateStaffMemberResponse,
)
async def deactivate_staff_member(
    business_id: str,
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Deactivate Staff Member

    Keeps the membership but sets it inactive; it then grants nothing.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: INSUFFICIENT_PERMISSIONS
        - 404 Not Found: BUSINESS_NOT_FOUND, MEMBERSHIP_NOT_FOUND
        - 503 Service Unavailable: STORAGE_ERROR
    """
    requester_id = parse_uuid(current_user.user_id, "user ID")
    business_uuid = parse_uuid(business_id, "business ID")
    user_uuid = parse_uuid(user_id, "user ID")

    use_case = DeactivateStaffMemberUseCase(uow)
    result = await use_case.execute(requester_id, business_uuid, user_uuid)

    if result.is_err():
        error = result.error
        if error.code == "INSUFFICIENT_PERMISSIONS":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code in ("BUSINESS_NOT_FOUND", "MEMBERSHIP_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "STORAGE_ERROR":
            raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ServerError(error)

    return result.value
