"""
Invitation Entity

Token-based invitations for prospective staff members of a business.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import InvitationStatus, StaffRole
from .permissions import StaffPermissions


class Invitation(SQLModel, table=True):
    """
    Invitation entity - grants the token holder the right to join a business.

    Business Rules:
    - Created by the owner or a staff manager, expires after 7 days
    - At most one pending invitation per (business_id, email)
    - Token is unique, cryptographically random and never changes
    - Expiry is judged against the clock at use time, not the stored status
    - accepted_at / declined_at / accepted_by are written once, on the transition
    """

    __tablename__ = "staff_invites"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    business_id: UUID = Field(foreign_key="businesses.id", nullable=False, index=True)
    invited_by: UUID = Field(foreign_key="users.id", nullable=False)
    email: str = Field(max_length=255, nullable=False, index=True)

    role: StaffRole = Field(default=StaffRole.staff)
    permissions: dict = Field(
        default_factory=lambda: StaffPermissions().to_storage(),
        sa_column=Column(JSON, nullable=False),
    )

    status: InvitationStatus = Field(default=InvitationStatus.pending)
    token: str = Field(unique=True, index=True, max_length=64)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    accepted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    declined_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    accepted_by: Optional[UUID] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_staff_invite_expires_at", "expires_at"),
        Index("idx_staff_invite_business_email_status", "business_id", "email", "status"),
        Index(
            "uq_staff_invite_active",
            "business_id",
            "email",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_active(self, now: datetime) -> bool:
        return self.status == InvitationStatus.pending and not self.is_expired(now)

    def granted_permissions(self) -> StaffPermissions:
        return StaffPermissions.model_validate(self.permissions)
