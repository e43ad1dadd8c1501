"""
Use Cases

Organized into domain folders:
- invitations/: Staff invitation lifecycle
- staff/: Staff permission checks

Import from subdirectories for better organization.
"""

from .invitations import (
    ExpireInvitesUseCase,
    IssueInviteUseCase,
    ListBusinessInvitesUseCase,
    ListPendingInvitesUseCase,
    RespondToInviteUseCase,
    RevokeInviteUseCase,
    UpdateInvitePermissionsUseCase,
    ValidateInviteUseCase,
)
from .staff import GetStaffPermissionsUseCase

__all__ = [
    # Invitations
    "IssueInviteUseCase",
    "ListPendingInvitesUseCase",
    "RespondToInviteUseCase",
    "ValidateInviteUseCase",
    "ListBusinessInvitesUseCase",
    "UpdateInvitePermissionsUseCase",
    "RevokeInviteUseCase",
    "ExpireInvitesUseCase",
    # Staff
    "GetStaffPermissionsUseCase",
]
