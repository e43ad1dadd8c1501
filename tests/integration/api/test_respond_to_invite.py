from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.base import utc_now
from src.domain.entities import (
    AuditEvent,
    Business,
    Invitation,
    InvitationStatus,
    StaffMembership,
    StaffPermissions,
)


async def issue(client, seed, auth_headers, **permissions):
    response = await client.post(
        "/invites",
        json={
            "businessId": str(seed.business.id),
            "invitedBy": str(seed.owner.id),
            "email": seed.invitee.email,
            "permissions": permissions or {"canManageBookings": True},
        },
        headers=auth_headers(seed.owner),
    )
    assert response.status_code == 201
    return response.json()["invite"]


async def respond(client, token, action, user, auth_headers):
    return await client.post(
        "/invites/respond",
        json={"token": token, "action": action},
        headers=auth_headers(user),
    )


@pytest.mark.asyncio
async def test_invite_list_accept_then_permission_check(
    client: AsyncClient, seed, auth_headers
):
    """Issue, see it in pending invites, accept it, then hold its permissions"""
    invite = await issue(client, seed, auth_headers, canManageBookings=True)

    listed = await client.get(
        "/invites", params={"email": "a@x.com"}, headers=auth_headers(seed.invitee)
    )
    assert listed.status_code == 200
    invites = listed.json()["invites"]
    assert len(invites) == 1
    assert invites[0]["businessId"] == str(seed.business.id)

    accepted = await respond(client, invite["token"], "accept", seed.invitee, auth_headers)
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"
    assert accepted.json()["acceptedBy"] == str(seed.invitee.id)
    assert accepted.json()["acceptedAt"] is not None

    permissions = await client.get(
        f"/businesses/{seed.business.id}/staff/{seed.invitee.id}/permissions",
        headers=auth_headers(seed.invitee),
    )
    assert permissions.status_code == 200
    assert permissions.json()["role"] == "staff"
    assert permissions.json()["permissions"]["canManageBookings"] is True


@pytest.mark.asyncio
async def test_expired_invite_cannot_be_accepted(
    client: AsyncClient, seed, auth_headers, db_session, fetch
):
    """Past its deadline the invite stays queryable but is never actionable"""
    expired = Invitation(
        business_id=seed.business.id,
        invited_by=seed.owner.id,
        email=seed.invitee.email,
        token="e" * 64,
        expires_at=utc_now() - timedelta(seconds=1),
    )
    db_session.add(expired)
    await db_session.commit()

    response = await respond(client, expired.token, "accept", seed.invitee, auth_headers)

    assert response.status_code == 410
    assert response.json()["error"]["code"] == "INVITATION_EXPIRED"

    [stored] = await fetch(select(Invitation).where(Invitation.id == expired.id))
    assert stored.status == InvitationStatus.pending

    listed = await client.get(
        "/invites", params={"email": seed.invitee.email}, headers=auth_headers(seed.invitee)
    )
    assert listed.json()["invites"] == []

    memberships = await fetch(
        select(StaffMembership).where(StaffMembership.user_id == seed.invitee.id)
    )
    assert memberships == []


@pytest.mark.asyncio
async def test_accept_is_atomic_with_grant(client: AsyncClient, seed, auth_headers, fetch):
    invite = await issue(client, seed, auth_headers, canManageBookings=True, canViewReports=True)

    response = await respond(client, invite["token"], "accept", seed.invitee, auth_headers)
    assert response.status_code == 200

    [stored] = await fetch(select(Invitation).where(Invitation.token == invite["token"]))
    [membership] = await fetch(
        select(StaffMembership).where(
            StaffMembership.user_id == seed.invitee.id,
            StaffMembership.business_id == seed.business.id,
        )
    )
    assert stored.status == InvitationStatus.accepted
    assert stored.accepted_by == seed.invitee.id
    assert membership.is_active is True
    assert membership.invitation_id == stored.id
    assert membership.granted_permissions() == StaffPermissions(
        can_manage_bookings=True, can_view_reports=True
    )

    events = await fetch(select(AuditEvent).where(AuditEvent.action == "invitation_accepted"))
    assert len(events) == 1


@pytest.mark.asyncio
async def test_accepting_twice_is_invalid_state(client: AsyncClient, seed, auth_headers):
    invite = await issue(client, seed, auth_headers)

    first = await respond(client, invite["token"], "accept", seed.invitee, auth_headers)
    second = await respond(client, invite["token"], "accept", seed.invitee, auth_headers)

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "INVALID_INVITATION_STATE"


@pytest.mark.asyncio
async def test_decline_grants_nothing(client: AsyncClient, seed, auth_headers, fetch):
    invite = await issue(client, seed, auth_headers)

    response = await respond(client, invite["token"], "decline", seed.invitee, auth_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "declined"
    assert response.json()["declinedAt"] is not None
    assert response.json()["acceptedBy"] is None

    memberships = await fetch(
        select(StaffMembership).where(StaffMembership.user_id == seed.invitee.id)
    )
    assert memberships == []

    again = await respond(client, invite["token"], "accept", seed.invitee, auth_headers)
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_revoked_invite_cannot_be_accepted(client: AsyncClient, seed, auth_headers):
    invite = await issue(client, seed, auth_headers)

    revoked = await client.delete(f"/invites/{invite['id']}", headers=auth_headers(seed.owner))
    response = await respond(client, invite["token"], "accept", seed.invitee, auth_headers)

    assert revoked.status_code == 200
    assert revoked.json() == {"status": "revoked"}
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "INVALID_INVITATION_STATE"


@pytest.mark.asyncio
async def test_unknown_token(client: AsyncClient, seed, auth_headers):
    response = await respond(client, "0" * 64, "accept", seed.invitee, auth_headers)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "INVITATION_NOT_FOUND"


@pytest.mark.asyncio
async def test_unknown_action(client: AsyncClient, seed, auth_headers):
    invite = await issue(client, seed, auth_headers)

    response = await respond(client, invite["token"], "ignore", seed.invitee, auth_headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def add_business(db_session, owner, name="Fade Barbers", slug="fade-barbers"):
    other = Business(name=name, slug=slug, owner_id=owner.id)
    db_session.add(other)
    await db_session.commit()
    return other


@pytest.mark.asyncio
async def test_accepting_one_offer_expires_the_others(
    client: AsyncClient, seed, auth_headers, db_session, fetch
):
    other = await add_business(db_session, seed.owner)
    mine = await issue(client, seed, auth_headers)
    theirs = await client.post(
        "/invites",
        json={
            "businessId": str(other.id),
            "invitedBy": str(seed.owner.id),
            "email": seed.invitee.email,
        },
        headers=auth_headers(seed.owner),
    )
    assert theirs.status_code == 201

    accepted = await respond(client, mine["token"], "accept", seed.invitee, auth_headers)
    listed = await client.get(
        "/invites", params={"email": seed.invitee.email}, headers=auth_headers(seed.invitee)
    )
    late = await respond(
        client, theirs.json()["invite"]["token"], "accept", seed.invitee, auth_headers
    )

    assert accepted.status_code == 200
    assert listed.json()["invites"] == []
    assert late.status_code == 409
    assert late.json()["error"]["code"] == "INVALID_INVITATION_STATE"

    [stored] = await fetch(
        select(Invitation).where(Invitation.token == theirs.json()["invite"]["token"])
    )
    assert stored.status == InvitationStatus.expired


@pytest.mark.asyncio
async def test_active_staff_elsewhere_cannot_accept(
    client: AsyncClient, seed, auth_headers, db_session, fetch
):
    other = await add_business(db_session, seed.owner)
    invite = await issue(client, seed, auth_headers)
    # Joined the other business after the invite went out
    db_session.add(StaffMembership(user_id=seed.invitee.id, business_id=other.id))
    await db_session.commit()

    response = await respond(client, invite["token"], "accept", seed.invitee, auth_headers)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "ALREADY_IN_ANOTHER_BUSINESS"
    [stored] = await fetch(select(Invitation).where(Invitation.token == invite["token"]))
    assert stored.status == InvitationStatus.pending
    memberships = await fetch(
        select(StaffMembership).where(StaffMembership.business_id == seed.business.id)
    )
    assert seed.invitee.id not in {m.user_id for m in memberships}


@pytest.mark.asyncio
async def test_deactivated_staff_elsewhere_can_accept(
    client: AsyncClient, seed, auth_headers, db_session
):
    other = await add_business(db_session, seed.owner)
    db_session.add(
        StaffMembership(user_id=seed.invitee.id, business_id=other.id, is_active=False)
    )
    await db_session.commit()
    invite = await issue(client, seed, auth_headers)

    response = await respond(client, invite["token"], "accept", seed.invitee, auth_headers)

    assert response.status_code == 200
