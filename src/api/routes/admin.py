"""
Admin API Routes - Maintenance Endpoints

Intended for schedulers and internal integrations.
Authentication is via Admin API Key, not user JWTs.
"""

from fastapi import APIRouter, Depends, status

from src.api.error import ServerError
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invitations import ExpireInvitesResponse, ExpireInvitesUseCase
from src.depends import get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/invites/expire",
    status_code=status.HTTP_200_OK,
    response_model=ExpireInvitesResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def expire_invites(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Expire Invites

    Marks every pending invitation past its deadline as expired and returns
    how many were changed. Safe to run repeatedly.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 503 Service Unavailable: STORAGE_ERROR
    """
    use_case = ExpireInvitesUseCase(uow)
    result = await use_case.execute()

    if result.is_err():
        error = result.error
        if error.code == "STORAGE_ERROR":
            raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ServerError(error)

    return result.value
