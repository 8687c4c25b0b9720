"""Tests for the buddy request state machine."""

from uuid import uuid4

import pytest

from app.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidRequestError,
    InvalidStateError,
    NotFoundError,
)
from app.models.buddy_request import BuddyRequest, BuddyRequestStatus
from app.services.buddy_request_service import BuddyRequestService
from app.services.roster_service import PlanRosterService


def test_create_request(db, setup_user, setup_other_user):
    svc = BuddyRequestService(db)
    request = svc.create_request(
        setup_user.id, setup_other_user.id, message="  Want to travel?  "
    )
    assert request.status == BuddyRequestStatus.PENDING.value
    assert request.plan_id is None
    assert request.message == "Want to travel?"


def test_create_request_to_self(db, setup_user):
    with pytest.raises(InvalidRequestError):
        BuddyRequestService(db).create_request(setup_user.id, setup_user.id)


def test_create_request_unknown_recipient_or_plan(db, setup_user, setup_other_user):
    svc = BuddyRequestService(db)
    with pytest.raises(NotFoundError):
        svc.create_request(setup_user.id, uuid4())
    with pytest.raises(NotFoundError):
        svc.create_request(setup_user.id, setup_other_user.id, plan_id=uuid4())


def test_duplicate_request_without_plan_conflicts(db, setup_user, setup_other_user):
    svc = BuddyRequestService(db)
    svc.create_request(setup_user.id, setup_other_user.id)
    with pytest.raises(ConflictError):
        svc.create_request(setup_user.id, setup_other_user.id)
    assert db.query(BuddyRequest).count() == 1


def test_duplicate_request_with_plan_conflicts(
    db, setup_plan, setup_user, setup_other_user
):
    svc = BuddyRequestService(db)
    svc.create_request(setup_other_user.id, setup_user.id, plan_id=setup_plan.id)
    with pytest.raises(ConflictError):
        svc.create_request(setup_other_user.id, setup_user.id, plan_id=setup_plan.id)
    assert db.query(BuddyRequest).count() == 1


def test_plan_context_is_part_of_the_key(db, setup_plan, setup_user, setup_other_user):
    svc = BuddyRequestService(db)
    svc.create_request(setup_other_user.id, setup_user.id)
    svc.create_request(setup_other_user.id, setup_user.id, plan_id=setup_plan.id)
    # The reverse direction is a different request too.
    svc.create_request(setup_user.id, setup_other_user.id)
    assert db.query(BuddyRequest).count() == 3


def test_no_plan_duplicate_rejected_by_constraint(db, setup_user, setup_other_user, monkeypatch):
    """Even when the pre-check misses, the unique key rejects a second no-plan request."""
    svc = BuddyRequestService(db)
    svc.create_request(setup_user.id, setup_other_user.id)
    monkeypatch.setattr(svc, "find_request", lambda *args, **kwargs: None)
    with pytest.raises(ConflictError):
        svc.create_request(setup_user.id, setup_other_user.id)
    assert db.query(BuddyRequest).count() == 1


def test_rejected_request_cannot_be_resent(db, setup_user, setup_other_user):
    svc = BuddyRequestService(db)
    request = svc.create_request(setup_user.id, setup_other_user.id)
    svc.resolve_request(request.id, setup_other_user.id, BuddyRequestStatus.REJECTED)
    with pytest.raises(ConflictError):
        svc.create_request(setup_user.id, setup_other_user.id)


def test_resolve_only_by_recipient(db, setup_user, setup_other_user, setup_third_user):
    svc = BuddyRequestService(db)
    request = svc.create_request(setup_user.id, setup_other_user.id)
    for actor in (setup_user, setup_third_user):
        with pytest.raises(ForbiddenError):
            svc.resolve_request(request.id, actor.id, BuddyRequestStatus.ACCEPTED)
    db.refresh(request)
    assert request.status == BuddyRequestStatus.PENDING.value


def test_resolve_unknown_request(db, setup_user):
    with pytest.raises(NotFoundError):
        BuddyRequestService(db).resolve_request(
            uuid4(), setup_user.id, BuddyRequestStatus.ACCEPTED
        )


@pytest.mark.parametrize(
    "first, second",
    [
        (BuddyRequestStatus.ACCEPTED, BuddyRequestStatus.REJECTED),
        (BuddyRequestStatus.REJECTED, BuddyRequestStatus.ACCEPTED),
        (BuddyRequestStatus.ACCEPTED, BuddyRequestStatus.ACCEPTED),
    ],
)
def test_resolved_request_is_terminal(db, setup_user, setup_other_user, first, second):
    svc = BuddyRequestService(db)
    request = svc.create_request(setup_user.id, setup_other_user.id)
    svc.resolve_request(request.id, setup_other_user.id, first)

    with pytest.raises(InvalidStateError):
        svc.resolve_request(request.id, setup_other_user.id, second)

    db.refresh(request)
    assert request.status == first.value


def test_accept_with_plan_adds_sender_to_roster(
    db, setup_plan, setup_user, setup_other_user
):
    svc = BuddyRequestService(db)
    request = svc.create_request(
        setup_other_user.id, setup_user.id, plan_id=setup_plan.id
    )
    resolved = svc.resolve_request(
        request.id, setup_user.id, BuddyRequestStatus.ACCEPTED
    )
    assert resolved.status == BuddyRequestStatus.ACCEPTED.value
    assert PlanRosterService(db).member_ids(setup_plan.id) == [setup_other_user.id]


def test_reject_with_plan_leaves_roster_alone(
    db, setup_plan, setup_user, setup_other_user
):
    svc = BuddyRequestService(db)
    request = svc.create_request(
        setup_other_user.id, setup_user.id, plan_id=setup_plan.id
    )
    svc.resolve_request(request.id, setup_user.id, BuddyRequestStatus.REJECTED)
    assert PlanRosterService(db).member_ids(setup_plan.id) == []


def test_accept_when_plan_full_still_accepts(
    db, setup_plan, setup_user, setup_other_user, setup_third_user
):
    """X and Z both ask to join Y's one-seat plan; only X gets the seat."""
    x, y, z = setup_other_user, setup_user, setup_third_user
    svc = BuddyRequestService(db)

    from_x = svc.create_request(x.id, y.id, plan_id=setup_plan.id)
    svc.resolve_request(from_x.id, y.id, BuddyRequestStatus.ACCEPTED)
    roster = PlanRosterService(db)
    assert roster.member_ids(setup_plan.id) == [x.id]

    from_z = svc.create_request(z.id, y.id, plan_id=setup_plan.id)
    resolved = svc.resolve_request(from_z.id, y.id, BuddyRequestStatus.ACCEPTED)

    assert resolved.status == BuddyRequestStatus.ACCEPTED.value
    assert roster.member_ids(setup_plan.id) == [x.id]
    db.refresh(setup_plan)
    assert setup_plan.member_count == 1


def test_accept_when_sender_already_on_roster(
    db, setup_plan, setup_user, setup_other_user
):
    PlanRosterService(db).join(setup_plan.id, setup_other_user.id)
    svc = BuddyRequestService(db)
    request = svc.create_request(
        setup_other_user.id, setup_user.id, plan_id=setup_plan.id
    )
    resolved = svc.resolve_request(
        request.id, setup_user.id, BuddyRequestStatus.ACCEPTED
    )
    assert resolved.status == BuddyRequestStatus.ACCEPTED.value
    db.refresh(setup_plan)
    assert setup_plan.member_count == 1


def test_list_for_directions(db, setup_user, setup_other_user, setup_third_user):
    svc = BuddyRequestService(db)
    sent = svc.create_request(setup_user.id, setup_other_user.id)
    received = svc.create_request(setup_third_user.id, setup_user.id)

    assert [r.id for r in svc.list_for(setup_user.id, "sent")] == [sent.id]
    assert [r.id for r in svc.list_for(setup_user.id, "received")] == [received.id]
    assert {r.id for r in svc.list_for(setup_user.id, "both")} == {sent.id, received.id}
    # newest first
    assert svc.list_for(setup_user.id, "both")[0].id == received.id


def test_list_for_invalid_direction(db, setup_user):
    with pytest.raises(InvalidRequestError):
        BuddyRequestService(db).list_for(setup_user.id, "sideways")
