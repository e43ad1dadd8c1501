"""
Invitation Use Case DTOs (Data Transfer Objects)

Response classes for the invitation domain. Field names serialize in
camelCase so the HTTP payloads mirror the invitation data model.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.domain.entities import Business, Invitation, StaffPermissions, User


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Summaries joined into invitation responses
# ============================================================================


class BusinessSummary(ApiModel):
    """Business fields shown to an invitee"""

    id: str
    name: str
    slug: str

    @classmethod
    def from_entity(cls, business: Business) -> "BusinessSummary":
        return cls(id=str(business.id), name=business.name, slug=business.slug)


class UserSummary(ApiModel):
    """Inviter fields shown alongside an invitation"""

    id: str
    name: str
    email: str

    @classmethod
    def from_entity(cls, user: User) -> "UserSummary":
        return cls(id=str(user.id), name=user.name, email=user.email)


# ============================================================================
# Response DTOs
# ============================================================================


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


class InvitationResponse(ApiModel):
    """A single invitation"""

    id: str
    business_id: str
    invited_by: str
    email: str
    role: str
    permissions: StaffPermissions
    status: str
    token: str
    expires_at: str
    accepted_at: Optional[str] = None
    declined_at: Optional[str] = None
    accepted_by: Optional[str] = None
    created_at: Optional[str] = None
    business: Optional[BusinessSummary] = None
    inviter: Optional[UserSummary] = None

    @classmethod
    def from_entity(
        cls,
        invitation: Invitation,
        business: Optional[Business] = None,
        inviter: Optional[User] = None,
    ) -> "InvitationResponse":
        return cls(
            id=str(invitation.id),
            business_id=str(invitation.business_id),
            invited_by=str(invitation.invited_by),
            email=invitation.email,
            role=invitation.role.value,
            permissions=invitation.granted_permissions(),
            status=invitation.status.value,
            token=invitation.token,
            expires_at=invitation.expires_at.isoformat(),
            accepted_at=_iso(invitation.accepted_at),
            declined_at=_iso(invitation.declined_at),
            accepted_by=str(invitation.accepted_by) if invitation.accepted_by else None,
            created_at=_iso(invitation.created_at),
            business=BusinessSummary.from_entity(business) if business else None,
            inviter=UserSummary.from_entity(inviter) if inviter else None,
        )


class IssueInviteResponse(ApiModel):
    """Response for issue invite use case"""

    invite: InvitationResponse
    invite_url: str


class InvitationListResponse(ApiModel):
    """Response for the invitation listing use cases"""

    invites: List[InvitationResponse]


class ValidateInviteResponse(ApiModel):
    """Response for validate invite use case"""

    invite: InvitationResponse


class RevokeInviteResponse(ApiModel):
    """Response for revoke invite use case"""

    status: str


class ExpireInvitesResponse(ApiModel):
    """Response for expire invites use case"""

    expired: int
