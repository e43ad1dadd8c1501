"""
Staff Use Cases

Permission checks and membership management for business staff.
"""

from .deactivate_staff_member_use_case import DeactivateStaffMemberUseCase
from .dtos import (
    DeactivateStaffMemberResponse,
    StaffMemberListResponse,
    StaffMemberResponse,
    StaffPermissionsResponse,
)
from .get_staff_permissions_use_case import GetStaffPermissionsUseCase
from .list_staff_members_use_case import ListStaffMembersUseCase
from .update_staff_member_use_case import UpdateStaffMemberUseCase

__all__ = [
    "DeactivateStaffMemberUseCase",
    "DeactivateStaffMemberResponse",
    "GetStaffPermissionsUseCase",
    "ListStaffMembersUseCase",
    "StaffMemberListResponse",
    "StaffMemberResponse",
    "StaffPermissionsResponse",
    "UpdateStaffMemberUseCase",
]
