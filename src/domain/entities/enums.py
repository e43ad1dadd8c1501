"""
Staff Invitation Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserRole(str, Enum):
    """Account role of a user"""

    owner = "owner"
    staff = "staff"


class StaffRole(str, Enum):
    """Role granted through a staff invitation"""

    staff = "staff"


class InvitationStatus(str, Enum):
    """Invitation status"""

    pending = "pending"
    accepted = "accepted"
    declined = "declined"
    expired = "expired"


class InviteAction(str, Enum):
    """Response an invitee can give to an invitation"""

    accept = "accept"
    decline = "decline"
