"""
Staff Use Case DTOs (Data Transfer Objects)
"""

from typing import List, Optional

from src.app.use_cases.invitations.dtos import ApiModel, UserSummary
from src.domain.entities import StaffMembership, StaffPermissions, User


class StaffPermissionsResponse(ApiModel):
    """Response for get staff permissions use case"""

    business_id: str
    user_id: str
    role: str
    permissions: StaffPermissions


class StaffMemberResponse(ApiModel):
    """A staff membership with the member's summary"""

    id: str
    user_id: str
    business_id: str
    role: str
    permissions: StaffPermissions
    is_active: bool
    invitation_id: Optional[str] = None
    created_at: str
    updated_at: str
    user: Optional[UserSummary] = None

    @classmethod
    def from_entity(
        cls, membership: StaffMembership, user: Optional[User] = None
    ) -> "StaffMemberResponse":
        return cls(
            id=str(membership.id),
            user_id=str(membership.user_id),
            business_id=str(membership.business_id),
            role=membership.role.value,
            permissions=membership.granted_permissions(),
            is_active=membership.is_active,
            invitation_id=str(membership.invitation_id) if membership.invitation_id else None,
            created_at=membership.created_at.isoformat(),
            updated_at=membership.updated_at.isoformat(),
            user=UserSummary.from_entity(user) if user else None,
        )


class StaffMemberListResponse(ApiModel):
    """Response for list staff members use case"""

    members: List[StaffMemberResponse]


class DeactivateStaffMemberResponse(ApiModel):
    """Response for deactivate staff member use case"""

    status: str
