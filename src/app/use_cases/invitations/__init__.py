"""
Staff Invitation Use Cases

All invitation-related business logic.
"""

from .dtos import (
    BusinessSummary,
    ExpireInvitesResponse,
    InvitationListResponse,
    InvitationResponse,
    IssueInviteResponse,
    RevokeInviteResponse,
    UserSummary,
    ValidateInviteResponse,
)
from .expire_invites_use_case import ExpireInvitesUseCase
from .issue_invite_use_case import IssueInviteUseCase
from .list_business_invites_use_case import ListBusinessInvitesUseCase
from .list_pending_invites_use_case import ListPendingInvitesUseCase
from .respond_to_invite_use_case import RespondToInviteUseCase
from .revoke_invite_use_case import RevokeInviteUseCase
from .update_invite_permissions_use_case import UpdateInvitePermissionsUseCase
from .validate_invite_use_case import ValidateInviteUseCase

__all__ = [
    "IssueInviteUseCase",
    "ListPendingInvitesUseCase",
    "RespondToInviteUseCase",
    "ValidateInviteUseCase",
    "ListBusinessInvitesUseCase",
    "UpdateInvitePermissionsUseCase",
    "RevokeInviteUseCase",
    "ExpireInvitesUseCase",
    "IssueInviteResponse",
    "InvitationResponse",
    "InvitationListResponse",
    "ValidateInviteResponse",
    "RevokeInviteResponse",
    "ExpireInvitesResponse",
    "BusinessSummary",
    "UserSummary",
]
