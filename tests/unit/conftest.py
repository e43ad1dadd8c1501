from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.domain.entities import (
    Business,
    Invitation,
    InvitationStatus,
    StaffPermissions,
    StaffRole,
    User,
)

NOW = datetime(2026, 3, 2, 9, 30, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.get_by_ids = AsyncMock(return_value=[])

    uow.businesses = MagicMock()
    uow.businesses.get_by_id = AsyncMock(return_value=None)
    uow.businesses.get_by_ids = AsyncMock(return_value=[])
    uow.businesses.list_by_owner = AsyncMock(return_value=[])

    uow.memberships = MagicMock()
    uow.memberships.get_by_user_and_business = AsyncMock(return_value=None)
    uow.memberships.get_active_elsewhere = AsyncMock(return_value=None)
    uow.memberships.list_by_business = AsyncMock(return_value=[])
    uow.memberships.create = AsyncMock(side_effect=lambda membership: membership)
    uow.memberships.update = AsyncMock(side_effect=lambda membership: membership)

    uow.invitations = MagicMock()
    uow.invitations.get_by_id = AsyncMock(return_value=None)
    uow.invitations.get_by_token = AsyncMock(return_value=None)
    uow.invitations.get_pending_by_business_and_email = AsyncMock(return_value=None)
    uow.invitations.list_active_by_email = AsyncMock(return_value=[])
    uow.invitations.list_by_business = AsyncMock(return_value=[])
    uow.invitations.create = AsyncMock(side_effect=lambda invitation: invitation)
    uow.invitations.transition = AsyncMock(return_value=None)
    uow.invitations.expire_stale = AsyncMock(return_value=0)
    uow.invitations.expire_pending_by_email = AsyncMock(return_value=0)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()

    return uow


@pytest.fixture
def owner():
    return User(id=uuid4(), name="Olivia Owner", email="owner@glow.example")


@pytest.fixture
def invitee():
    return User(id=uuid4(), name="Alex Stylist", email="a@x.com")


@pytest.fixture
def business(owner):
    return Business(id=uuid4(), name="Glow Salon", slug="glow-salon", owner_id=owner.id)


@pytest.fixture
def make_invitation(business, owner):
    """Build invitations relative to the fixed clock"""

    def _make(
        status=InvitationStatus.pending,
        expires_in=timedelta(days=7),
        email="a@x.com",
        permissions=None,
        created_at=None,
    ):
        return Invitation(
            id=uuid4(),
            business_id=business.id,
            invited_by=owner.id,
            email=email,
            role=StaffRole.staff,
            permissions=(permissions or StaffPermissions()).to_storage(),
            status=status,
            token=uuid4().hex + uuid4().hex,
            expires_at=NOW + expires_in,
            created_at=created_at or NOW - timedelta(hours=1),
        )

    return _make


@pytest.fixture
def applies_transition():
    """Builds a side_effect for uow.invitations.transition that mutates the invitation"""

    def _build(invitation):
        async def _transition(invitation_id, to_status, now, require_unexpired=True, **values):
            invitation.status = to_status
            for key, value in values.items():
                setattr(invitation, key, value)
            return invitation

        return _transition

    return _build
