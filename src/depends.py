from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from src.adapter.database import Database
from src.api.utils.jwt import verify_jwt

security = HTTPBearer()


class CurrentUser(BaseModel):
    """Identity supplied by the identity provider's bearer token"""

    user_id: str
    email: str


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_unit_of_work(database: Database = Depends(get_database)):
    async with database.session() as session:
        yield database.unit_of_work(session)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        CurrentUser with user_id and email

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    token = credentials.credentials
    payload = verify_jwt(token)

    if payload is None or "user_id" not in payload or "email" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return CurrentUser(user_id=payload["user_id"], email=payload["email"])
