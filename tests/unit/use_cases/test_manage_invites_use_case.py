from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.use_cases.invitations import (
    ExpireInvitesUseCase,
    ListBusinessInvitesUseCase,
    RevokeInviteUseCase,
    UpdateInvitePermissionsUseCase,
    ValidateInviteUseCase,
)
from src.domain.entities import InvitationStatus, StaffMembership, StaffPermissions


# ============================================================================
# Validate
# ============================================================================


@pytest.mark.asyncio
async def test_validate_active_invite(mock_uow, clock, business, owner, make_invitation):
    invitation = make_invitation()
    mock_uow.invitations.get_by_token.return_value = invitation
    mock_uow.businesses.get_by_ids.return_value = [business]
    mock_uow.users.get_by_ids.return_value = [owner]

    result = await ValidateInviteUseCase(mock_uow, clock=clock).execute(invitation.token)

    assert result.is_ok()
    assert result.value.invite.id == str(invitation.id)
    assert result.value.invite.business.name == "Glow Salon"
    assert result.value.invite.inviter.name == "Olivia Owner"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,expires_in,code",
    [
        (InvitationStatus.pending, timedelta(seconds=-1), "INVITATION_EXPIRED"),
        (InvitationStatus.accepted, timedelta(days=1), "INVALID_INVITATION_STATE"),
        (InvitationStatus.declined, timedelta(days=1), "INVALID_INVITATION_STATE"),
    ],
)
async def test_validate_inactive_invite(
    mock_uow, clock, make_invitation, status, expires_in, code
):
    invitation = make_invitation(status=status, expires_in=expires_in)
    mock_uow.invitations.get_by_token.return_value = invitation

    result = await ValidateInviteUseCase(mock_uow, clock=clock).execute(invitation.token)

    assert result.is_err()
    assert result.error.code == code


@pytest.mark.asyncio
async def test_validate_requires_token(mock_uow, clock):
    result = await ValidateInviteUseCase(mock_uow, clock=clock).execute(None)

    assert result.error.code == "VALIDATION_ERROR"


# ============================================================================
# List business invites
# ============================================================================


@pytest.mark.asyncio
async def test_owner_lists_business_invites(mock_uow, business, owner, make_invitation):
    invitations = [make_invitation(), make_invitation(status=InvitationStatus.declined)]
    mock_uow.businesses.get_by_id.return_value = business
    mock_uow.invitations.list_by_business.return_value = invitations
    mock_uow.businesses.get_by_ids.return_value = [business]
    mock_uow.users.get_by_ids.return_value = [owner]

    result = await ListBusinessInvitesUseCase(mock_uow).execute(owner.id, business.id)

    assert result.is_ok()
    assert [i.status for i in result.value.invites] == ["pending", "declined"]
    mock_uow.invitations.list_by_business.assert_awaited_once_with(business.id)


@pytest.mark.asyncio
async def test_plain_staff_cannot_list_business_invites(mock_uow, business):
    staff_id = uuid4()
    mock_uow.businesses.get_by_id.return_value = business
    mock_uow.memberships.get_by_user_and_business.return_value = StaffMembership(
        user_id=staff_id, business_id=business.id
    )

    result = await ListBusinessInvitesUseCase(mock_uow).execute(staff_id, business.id)

    assert result.error.code == "INSUFFICIENT_PERMISSIONS"


@pytest.mark.asyncio
async def test_inactive_manager_cannot_list_business_invites(mock_uow, business):
    manager_id = uuid4()
    mock_uow.businesses.get_by_id.return_value = business
    mock_uow.memberships.get_by_user_and_business.return_value = StaffMembership(
        user_id=manager_id,
        business_id=business.id,
        permissions=StaffPermissions(can_manage_staff=True).to_storage(),
        is_active=False,
    )

    result = await ListBusinessInvitesUseCase(mock_uow).execute(manager_id, business.id)

    assert result.error.code == "INSUFFICIENT_PERMISSIONS"


@pytest.mark.asyncio
async def test_list_business_invites_unknown_business(mock_uow, owner):
    result = await ListBusinessInvitesUseCase(mock_uow).execute(owner.id, uuid4())

    assert result.error.code == "BUSINESS_NOT_FOUND"


# ============================================================================
# Update permissions
# ============================================================================


@pytest.mark.asyncio
async def test_update_pending_invite_permissions(
    mock_uow, clock, now, business, owner, make_invitation, applies_transition
):
    invitation = make_invitation()
    mock_uow.invitations.get_by_id.return_value = invitation
    mock_uow.businesses.get_by_id.return_value = business
    mock_uow.invitations.transition.side_effect = applies_transition(invitation)
    permissions = StaffPermissions(can_manage_bookings=False, can_manage_services=True)

    result = await UpdateInvitePermissionsUseCase(mock_uow, clock=clock).execute(
        owner.id, invitation.id, permissions
    )

    assert result.is_ok()
    assert result.value.status == "pending"
    assert result.value.permissions == permissions
    mock_uow.invitations.transition.assert_awaited_once_with(
        invitation.id,
        InvitationStatus.pending,
        now,
        permissions=permissions.to_storage(),
    )
    assert (
        mock_uow.audit_events.create.call_args[0][0].action
        == "invitation_permissions_updated"
    )
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,expires_in,code",
    [
        (InvitationStatus.pending, timedelta(seconds=-1), "INVITATION_EXPIRED"),
        (InvitationStatus.accepted, timedelta(days=1), "INVALID_INVITATION_STATE"),
    ],
)
async def test_update_inactive_invite_rejected(
    mock_uow, clock, business, owner, make_invitation, status, expires_in, code
):
    invitation = make_invitation(status=status, expires_in=expires_in)
    mock_uow.invitations.get_by_id.return_value = invitation
    mock_uow.businesses.get_by_id.return_value = business

    result = await UpdateInvitePermissionsUseCase(mock_uow, clock=clock).execute(
        owner.id, invitation.id, StaffPermissions()
    )

    assert result.error.code == code
    mock_uow.invitations.transition.assert_not_called()


@pytest.mark.asyncio
async def test_update_unknown_invite(mock_uow, clock, owner):
    result = await UpdateInvitePermissionsUseCase(mock_uow, clock=clock).execute(
        owner.id, uuid4(), StaffPermissions()
    )

    assert result.error.code == "INVITATION_NOT_FOUND"


@pytest.mark.asyncio
async def test_update_by_outsider_rejected(mock_uow, clock, business, make_invitation):
    invitation = make_invitation()
    mock_uow.invitations.get_by_id.return_value = invitation
    mock_uow.businesses.get_by_id.return_value = business

    result = await UpdateInvitePermissionsUseCase(mock_uow, clock=clock).execute(
        uuid4(), invitation.id, StaffPermissions()
    )

    assert result.error.code == "INSUFFICIENT_PERMISSIONS"


# ============================================================================
# Revoke
# ============================================================================


@pytest.mark.asyncio
async def test_revoke_pending_invite(
    mock_uow, clock, now, business, owner, make_invitation, applies_transition
):
    invitation = make_invitation()
    mock_uow.invitations.get_by_id.return_value = invitation
    mock_uow.businesses.get_by_id.return_value = business
    mock_uow.invitations.transition.side_effect = applies_transition(invitation)

    result = await RevokeInviteUseCase(mock_uow, clock=clock).execute(owner.id, invitation.id)

    assert result.is_ok()
    assert result.value.status == "revoked"
    assert invitation.status == InvitationStatus.expired
    mock_uow.invitations.transition.assert_awaited_once_with(
        invitation.id, InvitationStatus.expired, now, require_unexpired=False
    )
    assert mock_uow.audit_events.create.call_args[0][0].action == "invitation_revoked"


@pytest.mark.asyncio
async def test_revoke_answered_invite_rejected(mock_uow, clock, business, owner, make_invitation):
    invitation = make_invitation(status=InvitationStatus.accepted)
    mock_uow.invitations.get_by_id.return_value = invitation
    mock_uow.businesses.get_by_id.return_value = business

    result = await RevokeInviteUseCase(mock_uow, clock=clock).execute(owner.id, invitation.id)

    assert result.error.code == "INVALID_INVITATION_STATE"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_revoke_loses_race_with_responder(
    mock_uow, clock, business, owner, make_invitation
):
    invitation = make_invitation()
    mock_uow.invitations.get_by_id.return_value = invitation
    mock_uow.businesses.get_by_id.return_value = business
    mock_uow.invitations.transition.return_value = None

    result = await RevokeInviteUseCase(mock_uow, clock=clock).execute(owner.id, invitation.id)

    assert result.error.code == "INVALID_INVITATION_STATE"
    mock_uow.commit.assert_not_called()


# ============================================================================
# Expiry sweep
# ============================================================================


@pytest.mark.asyncio
async def test_sweep_reports_count(mock_uow, clock, now):
    mock_uow.invitations.expire_stale.return_value = 3

    result = await ExpireInvitesUseCase(mock_uow, clock=clock).execute()

    assert result.is_ok()
    assert result.value.expired == 3
    mock_uow.invitations.expire_stale.assert_awaited_once_with(now)
    audit_event = mock_uow.audit_events.create.call_args[0][0]
    assert audit_event.action == "invitations_expired"
    assert audit_event.event_metadata["count"] == 3
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_sweep_with_nothing_to_expire(mock_uow, clock):
    result = await ExpireInvitesUseCase(mock_uow, clock=clock).execute()

    assert result.value.expired == 0
    mock_uow.audit_events.create.assert_not_called()
