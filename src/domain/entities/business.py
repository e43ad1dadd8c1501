"""
Business Entity

A salon or service business that owns staff and invitations.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utc_now


class Business(SQLModel, table=True):
    """
    Business entity - only the fields invitations need.

    Business Rules:
    - Slug is unique and used in public booking links
    - The owner always holds every staff permission
    """

    __tablename__ = "businesses"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    slug: str = Field(unique=True, index=True, max_length=255)

    owner_id: Optional[UUID] = Field(default=None, foreign_key="users.id", index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
