"""
Staff Invitation Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    InvitationStatus,
    InviteAction,
    StaffRole,
    UserRole,
)
from .permissions import StaffPermissions

# Export all entities
from .user import User
from .business import Business
from .staff_membership import StaffMembership
from .invitation import Invitation
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "UserRole",
    "StaffRole",
    "InvitationStatus",
    "InviteAction",
    # Value objects
    "StaffPermissions",
    # Entities
    "User",
    "Business",
    "StaffMembership",
    "Invitation",
    "AuditEvent",
]
