"""
StaffMembership Entity

Links a User to a Business with a set of staff permissions.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import StaffRole
from .permissions import StaffPermissions


class StaffMembership(SQLModel, table=True):
    """
    StaffMembership entity - the user-business association invitations grant.

    Business Rules:
    - (user_id, business_id) must be unique
    - Accepting an invitation creates the membership or overwrites its permissions
    - Inactive memberships grant nothing
    """

    __tablename__ = "staff_memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    business_id: UUID = Field(foreign_key="businesses.id", nullable=False, index=True)

    role: StaffRole = Field(default=StaffRole.staff)
    permissions: dict = Field(
        default_factory=lambda: StaffPermissions().to_storage(),
        sa_column=Column(JSON, nullable=False),
    )
    is_active: bool = Field(default=True)

    # Invitation that last granted these permissions
    invitation_id: Optional[UUID] = Field(default=None)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_staff_membership_user_business", "user_id", "business_id", unique=True),
    )

    def granted_permissions(self) -> StaffPermissions:
        return StaffPermissions.model_validate(self.permissions)
