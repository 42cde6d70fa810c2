"""
Tests for the scheduling service (overlap, daily show limit, lifecycle)
"""

import threading
from types import SimpleNamespace

import pytest
from sqlalchemy import func, select

from conftest import at, event_data
from planning.core.errors import (
    AuthorizationError, BusyError, CapacityError, ConflictError, NotFoundError, ValidationError,
)
from planning.core.locks import _lock_for, room_lock
from planning.models.event import Event
from planning.models.user import UserRole
from planning.schemas.event import EventDuplicate, EventUpdate
from planning.services import scheduling


def count_events(db):
    return db.scalar(select(func.count()).select_from(Event))


# ----------------------------------------------------------------------
# Regras puras
# ----------------------------------------------------------------------
def test_touching_intervals_do_not_overlap():
    assert not scheduling.overlaps(at(10), at(12), at(12), at(14))
    assert not scheduling.overlaps(at(12), at(14), at(10), at(12))
    assert scheduling.overlaps(at(10), at(12), at(11, 59), at(14))


def test_conflicting_types_deduplicated_in_table_order():
    existing = [
        SimpleNamespace(type="rental", start=at(9), end=at(11)),
        SimpleNamespace(type="show", start=at(10), end=at(11)),
        SimpleNamespace(type="show", start=at(10, 30), end=at(12)),
        SimpleNamespace(type="regie", start=at(9), end=at(12)),
        SimpleNamespace(type="calage", start=at(15), end=at(16)),
    ]
    assert scheduling.conflicting_types("show", at(10), at(12), existing) == ["show", "rental"]


def test_conflict_check_is_repeatable():
    existing = [SimpleNamespace(type="show", start=at(10), end=at(12))]
    first = scheduling.conflicting_types("event", at(11), at(13), existing)
    assert first == scheduling.conflicting_types("event", at(11), at(13), existing) == ["show"]


def test_show_fields():
    assert scheduling.show_fields("show", None) == {"show_status": "provisional", "color": "#F59E0B"}
    assert scheduling.show_fields("show", "ticketsOpen")["color"] == "#DC2626"
    assert scheduling.show_fields("permanence", "confirmed") == {"show_status": None, "color": "#10B981"}


# ----------------------------------------------------------------------
# Cenários
# ----------------------------------------------------------------------
def test_show_and_permanence_can_overlap(db_session, room, artiste):
    """Scenario: permanence over a show is accepted"""
    scheduling.create_event(db_session, event_data(room, "show", at(10), at(12)), artiste)
    scheduling.create_event(db_session, event_data(room, "permanence", at(11), at(13)), artiste)
    assert count_events(db_session) == 2


def test_two_shows_cannot_overlap(db_session, room, artiste):
    """Scenario: a second show over the first one is rejected"""
    scheduling.create_event(db_session, event_data(room, "show", at(10), at(12)), artiste)
    with pytest.raises(ConflictError) as exc:
        scheduling.create_event(db_session, event_data(room, "show", at(11), at(13)), artiste)
    assert exc.value.conflicting_types == ["show"]
    assert "show" in exc.value.message
    assert count_events(db_session) == 1


def test_sixth_show_of_the_day_is_rejected(db_session, room, artiste):
    """Scenario: daily show limit"""
    for hour in (8, 10, 12, 14, 16):
        scheduling.create_event(db_session, event_data(room, "show", at(hour), at(hour + 1)), artiste)
    with pytest.raises(CapacityError) as exc:
        scheduling.create_event(db_session, event_data(room, "show", at(20), at(21)), artiste)
    assert exc.value.limit == 5
    assert exc.value.details["count"] == 5
    assert count_events(db_session) == 5


def test_show_limit_is_per_room_and_per_day(db_session, room, other_room, artiste):
    for hour in (8, 10, 12, 14, 16):
        scheduling.create_event(db_session, event_data(room, "show", at(hour), at(hour + 1)), artiste)
    scheduling.create_event(db_session, event_data(other_room, "show", at(20), at(21)), artiste)
    scheduling.create_event(db_session, event_data(room, "show", at(20, day=2), at(21, day=2)), artiste)
    # outros tipos não contam
    scheduling.create_event(db_session, event_data(room, "event", at(20), at(21)), artiste)
    assert count_events(db_session) == 8


def test_calage_cannot_overlap_rental(db_session, room, artiste):
    """Scenario: calage inside a rental is rejected"""
    scheduling.create_event(db_session, event_data(room, "rental", at(9), at(10)), artiste)
    with pytest.raises(ConflictError) as exc:
        scheduling.create_event(db_session, event_data(room, "calage", at(9, 30), at(9, 45)), artiste)
    assert exc.value.conflicting_types == ["rental"]


def test_touching_events_are_accepted(db_session, room, artiste):
    scheduling.create_event(db_session, event_data(room, "show", at(10), at(12)), artiste)
    scheduling.create_event(db_session, event_data(room, "show", at(12), at(14)), artiste)
    assert count_events(db_session) == 2


def test_same_time_in_other_room_is_accepted(db_session, room, other_room, artiste):
    scheduling.create_event(db_session, event_data(room, "show", at(10), at(12)), artiste)
    scheduling.create_event(db_session, event_data(other_room, "show", at(10), at(12)), artiste)
    assert count_events(db_session) == 2


def test_unknown_room_is_not_found(db_session, room, artiste):
    data = event_data(room)
    data.room_id = 999
    with pytest.raises(NotFoundError):
        scheduling.create_event(db_session, data, artiste)


def test_assignment_forced_empty_for_disabled_type(db_session, room, artiste):
    """Scenario: assignment disabled for type event"""
    ev = scheduling.create_event(
        db_session, event_data(room, "event", assigned_users=[artiste.id]), artiste
    )
    assert ev.assigned_users == []


def test_create_sets_creator_status_and_color(db_session, room, artiste):
    ev = scheduling.create_event(db_session, event_data(room, "show", assigned_users=[artiste.id]), artiste)
    assert ev.creator_id == artiste.id
    assert ev.show_status == "provisional"
    assert ev.color == "#F59E0B"
    assert [u.id for u in ev.assigned_users] == [artiste.id]


def test_ineligible_assignee_rejects_the_event(db_session, room, artiste, permanence_user):
    with pytest.raises(ValidationError) as exc:
        scheduling.create_event(
            db_session, event_data(room, "show", assigned_users=[permanence_user.id]), artiste
        )
    assert exc.value.details["ineligible_user_ids"] == [permanence_user.id]
    assert count_events(db_session) == 0


# ----------------------------------------------------------------------
# Atualização
# ----------------------------------------------------------------------
def test_update_excludes_itself(db_session, room, artiste):
    """Scenario: moving an event over its own previous slot"""
    ev = scheduling.create_event(db_session, event_data(room, "show", at(10), at(11)), artiste)
    updated = scheduling.update_event(db_session, ev.id, EventUpdate(start=at(10, 30), end=at(11, 30)), artiste)
    assert updated.start == at(10, 30)
    assert updated.end == at(11, 30)


def test_update_description_only(db_session, room, artiste):
    ev = scheduling.create_event(db_session, event_data(room, "show", at(10), at(12)), artiste)
    updated = scheduling.update_event(db_session, ev.id, EventUpdate(description="Relâche"), artiste)
    assert updated.description == "Relâche"


def test_failed_update_keeps_previous_state(db_session, room, artiste):
    scheduling.create_event(db_session, event_data(room, "show", at(14), at(16)), artiste)
    ev = scheduling.create_event(db_session, event_data(room, "show", at(10), at(12)), artiste)

    with pytest.raises(ConflictError):
        scheduling.update_event(db_session, ev.id, EventUpdate(start=at(13), end=at(15), title="Moved"), artiste)

    db_session.refresh(ev)
    assert (ev.start, ev.end, ev.title) == (at(10), at(12), "show test")


def test_update_rejects_inverted_range(db_session, room, artiste):
    ev = scheduling.create_event(db_session, event_data(room, "show", at(10), at(12)), artiste)
    with pytest.raises(ValidationError):
        scheduling.update_event(db_session, ev.id, EventUpdate(end=at(9)), artiste)


def test_update_rejects_null_required_field(db_session, room, artiste):
    ev = scheduling.create_event(db_session, event_data(room, "show"), artiste)
    with pytest.raises(ValidationError):
        scheduling.update_event(db_session, ev.id, EventUpdate(title=None), artiste)


def test_changing_type_to_show_checks_daily_limit(db_session, room, artiste):
    for hour in (8, 10, 12, 14, 16):
        scheduling.create_event(db_session, event_data(room, "show", at(hour), at(hour + 1)), artiste)
    perm = scheduling.create_event(db_session, event_data(room, "permanence", at(20), at(21)), artiste)
    with pytest.raises(CapacityError):
        scheduling.update_event(db_session, perm.id, EventUpdate(type="show"), artiste)


def test_show_can_be_edited_on_a_full_day(db_session, room, artiste):
    shows = [
        scheduling.create_event(db_session, event_data(room, "show", at(h), at(h + 1)), artiste)
        for h in (8, 10, 12, 14, 16)
    ]
    updated = scheduling.update_event(
        db_session, shows[0].id, EventUpdate(start=at(7), end=at(8), show_status="confirmed"), artiste
    )
    assert updated.show_status == "confirmed"
    assert updated.color == "#16A34A"


def test_type_change_keeps_only_eligible_assignees(db_session, room, artiste, permanence_user):
    ev = scheduling.create_event(db_session, event_data(room, "show", assigned_users=[artiste.id]), artiste)
    updated = scheduling.update_event(db_session, ev.id, EventUpdate(type="permanence"), artiste)
    assert updated.assigned_users == []
    assert updated.show_status is None

    updated = scheduling.update_event(
        db_session, ev.id, EventUpdate(assigned_users=[permanence_user.id]), artiste
    )
    assert [u.id for u in updated.assigned_users] == [permanence_user.id]


def test_type_change_drops_inactive_assignees(db_session, room, artiste, make_user):
    gone = make_user(UserRole.administrateur.value)
    kept = make_user(UserRole.administrateur.value)
    ev = scheduling.create_event(
        db_session, event_data(room, "permanence", assigned_users=[gone.id, kept.id]), artiste
    )
    gone.is_active = False
    db_session.commit()

    updated = scheduling.update_event(db_session, ev.id, EventUpdate(type="regie"), artiste)
    assert [u.id for u in updated.assigned_users] == [kept.id]


def test_explicit_ineligible_assignee_still_rejected(db_session, room, artiste, permanence_user):
    ev = scheduling.create_event(db_session, event_data(room, "show"), artiste)
    with pytest.raises(ValidationError):
        scheduling.update_event(db_session, ev.id, EventUpdate(assigned_users=[permanence_user.id]), artiste)


def test_moving_show_to_full_room_checks_daily_limit(db_session, room, other_room, artiste):
    for hour in (8, 10, 12, 14, 16):
        scheduling.create_event(db_session, event_data(other_room, "show", at(hour), at(hour + 1)), artiste)
    show = scheduling.create_event(db_session, event_data(room, "show", at(20), at(21)), artiste)

    with pytest.raises(CapacityError):
        scheduling.update_event(db_session, show.id, EventUpdate(room_id=other_room.id), artiste)
    db_session.refresh(show)
    assert show.room_id == room.id


def test_moving_show_to_full_day_checks_daily_limit(db_session, room, artiste):
    for hour in (8, 10, 12, 14, 16):
        scheduling.create_event(
            db_session, event_data(room, "show", at(hour, day=2), at(hour + 1, day=2)), artiste
        )
    show = scheduling.create_event(db_session, event_data(room, "show", at(10), at(11)), artiste)

    with pytest.raises(CapacityError):
        scheduling.update_event(
            db_session, show.id, EventUpdate(start=at(20, day=2), end=at(21, day=2)), artiste
        )
    db_session.refresh(show)
    assert show.start == at(10)


def test_moving_to_other_room_checks_overlap(db_session, room, other_room, artiste):
    scheduling.create_event(db_session, event_data(other_room, "show", at(10), at(12)), artiste)
    calage = scheduling.create_event(db_session, event_data(room, "calage", at(10), at(12)), artiste)

    with pytest.raises(ConflictError) as exc:
        scheduling.update_event(db_session, calage.id, EventUpdate(room_id=other_room.id), artiste)
    assert exc.value.conflicting_types == ["show"]
    db_session.refresh(calage)
    assert calage.room_id == room.id


# ----------------------------------------------------------------------
# Duplicação e remoção
# ----------------------------------------------------------------------
def test_duplicate_keeps_duration_and_fields(db_session, room, other_room, artiste):
    ev = scheduling.create_event(
        db_session, event_data(room, "show", at(20), at(22, 30), description="Première"), artiste
    )
    copy = scheduling.duplicate_event(
        db_session, ev.id, EventDuplicate(start=at(20, day=2), room_id=other_room.id), artiste
    )
    assert copy.id != ev.id
    assert copy.room_id == other_room.id
    assert copy.end - copy.start == ev.end - ev.start
    assert copy.description == "Première"


def test_duplicate_runs_the_same_checks(db_session, room, artiste):
    ev = scheduling.create_event(db_session, event_data(room, "show", at(10), at(12)), artiste)
    with pytest.raises(ConflictError):
        scheduling.duplicate_event(db_session, ev.id, EventDuplicate(start=at(11)), artiste)


def test_duplicate_drops_assignees_no_longer_eligible(db_session, room, artiste, make_user):
    other = make_user(UserRole.artiste.value)
    ev = scheduling.create_event(
        db_session, event_data(room, "show", assigned_users=[artiste.id, other.id]), artiste
    )
    artiste.role = UserRole.regie.value
    db_session.commit()

    copy = scheduling.duplicate_event(db_session, ev.id, EventDuplicate(start=at(10, day=2)), other)
    assert [u.id for u in copy.assigned_users] == [other.id]


def test_only_admin_deletes(db_session, room, artiste, admin):
    ev = scheduling.create_event(db_session, event_data(room, "show", assigned_users=[artiste.id]), artiste)
    with pytest.raises(AuthorizationError):
        scheduling.delete_event(db_session, ev.id, artiste)

    scheduling.delete_event(db_session, ev.id, admin)
    assert count_events(db_session) == 0
    db_session.refresh(artiste)
    assert artiste.assigned_events == []


def test_delete_unknown_event(db_session, admin):
    with pytest.raises(NotFoundError):
        scheduling.delete_event(db_session, 42, admin)


def test_show_limit_status(db_session, room, artiste):
    scheduling.create_event(db_session, event_data(room, "show", at(10), at(12)), artiste)
    status = scheduling.show_limit_status(db_session, room.id, at(0).date())
    assert status == {"room_id": room.id, "day": at(0).date(), "count": 1, "limit": 5, "valid": True}


def test_show_limit_status_unknown_room(db_session):
    with pytest.raises(NotFoundError):
        scheduling.show_limit_status(db_session, 999, at(0).date())


# ----------------------------------------------------------------------
# Concorrência
# ----------------------------------------------------------------------
def test_concurrent_overlapping_creates_keep_one(session_factory, room, artiste):
    """Two overlapping shows submitted at once: exactly one is stored"""
    results = []
    barrier = threading.Barrier(2)

    def submit():
        db = session_factory()
        try:
            user = db.get(type(artiste), artiste.id)
            barrier.wait()
            scheduling.create_event(db, event_data(room, "show", at(10), at(12)), user)
            results.append("ok")
        except ConflictError:
            results.append("conflict")
        finally:
            db.close()

    threads = [threading.Thread(target=submit) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == ["conflict", "ok"]
    db = session_factory()
    try:
        assert count_events(db) == 1
    finally:
        db.close()


def test_busy_room_lock_raises_domain_error(db_session, room):
    held = _lock_for(room.id)
    held.acquire()
    try:
        with pytest.raises(BusyError) as exc:
            with room_lock(db_session, room.id, timeout=0.01):
                pass
        assert exc.value.status_code == 503
        assert exc.value.details == {"room_id": room.id}
    finally:
        held.release()
