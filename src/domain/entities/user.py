"""
User Entity

A person known to the identity provider, either a business owner or staff.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import UserRole


class User(SQLModel, table=True):
    """
    User entity - read-only from the invitation workflow's point of view.

    Business Rules:
    - Email must be unique across all users
    - Sign-up and profile management belong to the identity provider
    - A user without a record here has no invitations to see
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    auth_user_id: Optional[str] = Field(default=None, index=True, max_length=255)

    name: str = Field(max_length=255)
    email: str = Field(unique=True, index=True, max_length=255)

    role: UserRole = Field(default=UserRole.staff)
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_role", "role"),)
