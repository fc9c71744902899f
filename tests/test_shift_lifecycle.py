"""
Shift lifecycle and statistics tests
"""

from datetime import timedelta
import uuid

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from careshift.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from careshift.core.timeutils import hours_between, round2
from careshift.models.shift import Shift, ShiftStatus
from careshift.repositories.shifts import ShiftStore
from careshift.services.statistics import summarize


def test_start_shift_creates_in_progress_shift(lifecycle, careworker, clock):
    shift = lifecycle.start_shift(careworker.id, note="Morning round")

    assert shift.status == ShiftStatus.IN_PROGRESS
    assert shift.start_time == clock.now
    assert shift.end_time == clock.now
    assert shift.total_hours == 0
    assert shift.day == "Monday"
    assert shift.note == "Morning round"
    assert careworker.last_clock_in == clock.now


def test_second_start_is_rejected(lifecycle, careworker):
    lifecycle.start_shift(careworker.id)

    with pytest.raises(ConflictError) as exc:
        lifecycle.start_shift(careworker.id)
    assert exc.value.message == "You already have an active shift. Please end it first."


def test_manager_cannot_clock_in(lifecycle, manager_user):
    with pytest.raises(PermissionDeniedError) as exc:
        lifecycle.start_shift(manager_user.id)
    assert exc.value.message == "Only careworkers can create shifts"


def test_manager_cannot_clock_out(lifecycle, manager_user):
    with pytest.raises(PermissionDeniedError) as exc:
        lifecycle.end_shift(manager_user.id)
    assert exc.value.message == "Only careworkers can update shifts"


def test_unknown_location_is_rejected(lifecycle, careworker):
    with pytest.raises(NotFoundError) as exc:
        lifecycle.start_shift(careworker.id, location_id=uuid.uuid4())
    assert exc.value.message == "Location not found"


def test_end_without_active_shift(lifecycle, careworker):
    with pytest.raises(NotFoundError) as exc:
        lifecycle.end_shift(careworker.id)
    assert exc.value.message == "No active shift found"


def test_ninety_minutes_is_one_and_a_half_hours(lifecycle, careworker, clock):
    lifecycle.start_shift(careworker.id)
    clock.advance(minutes=90)

    completion = lifecycle.end_shift(careworker.id)

    assert completion.shift.total_hours == 1.5
    assert completion.shift.status == ShiftStatus.COMPLETED
    assert completion.shift.end_time == clock.now
    assert completion.message == "Shift completed! Total hours: 1.5"


def test_start_end_roundtrip_allows_new_shift(lifecycle, careworker, clock):
    first = lifecycle.start_shift(careworker.id)
    clock.advance(hours=1)
    lifecycle.end_shift(careworker.id)

    clock.advance(hours=1)
    second = lifecycle.start_shift(careworker.id)

    assert second.id != first.id
    assert second.is_active()


def test_end_note_replaces_only_when_given(lifecycle, careworker, clock):
    lifecycle.start_shift(careworker.id, note="Started early")
    clock.advance(hours=1)
    completion = lifecycle.end_shift(careworker.id)
    assert completion.shift.note == "Started early"

    lifecycle.start_shift(careworker.id, note="Started early")
    clock.advance(hours=1)
    completion = lifecycle.end_shift(careworker.id, note="Handover done")
    assert completion.shift.note == "Handover done"


def test_statistics_after_three_shifts(lifecycle, careworker, clock):
    for hours in (2, 3, 4):
        lifecycle.start_shift(careworker.id)
        clock.advance(hours=hours)
        completion = lifecycle.end_shift(careworker.id)
        clock.advance(hours=12)

    assert completion.user.total_shifts == 3
    assert completion.user.average_hours == 3.0


def test_note_update_and_clear(lifecycle, careworker):
    shift = lifecycle.start_shift(careworker.id)

    updated = lifecycle.update_note(shift.id, careworker.id, note="Patient asleep")
    assert updated.note == "Patient asleep"

    cleared = lifecycle.update_note(shift.id, careworker.id, note="")
    assert cleared.note is None


def test_note_update_on_someone_elses_shift(lifecycle, careworker, other_careworker):
    shift = lifecycle.start_shift(careworker.id, note="Mine")

    with pytest.raises(PermissionDeniedError) as exc:
        lifecycle.update_note(shift.id, other_careworker.id, note="Not yours")
    assert exc.value.message == "You can only update your own shifts"
    assert lifecycle.shifts.get(shift.id).note == "Mine"


def test_note_update_on_missing_shift(lifecycle, careworker):
    with pytest.raises(NotFoundError) as exc:
        lifecycle.update_note(uuid.uuid4(), careworker.id, note="x")
    assert exc.value.message == "Shift not found"


def test_index_rejects_second_active_shift(db, careworker, clock):
    store = ShiftStore(db)
    store.create_shift(Shift.begin(careworker.id, clock.now))

    with pytest.raises(IntegrityError):
        store.create_shift(Shift.begin(careworker.id, clock.now))
    db.rollback()


def test_racing_start_maps_to_conflict(lifecycle, careworker, monkeypatch):
    lifecycle.start_shift(careworker.id)
    # The racing request's check ran before the first insert was visible
    monkeypatch.setattr(lifecycle.shifts, "find_active_shift", lambda user_id: None)

    with pytest.raises(ConflictError):
        lifecycle.start_shift(careworker.id)


def test_completed_shift_cannot_complete_again(careworker, clock):
    shift = Shift.begin(careworker.id, clock.now)
    shift.complete(clock.advance(hours=1))

    with pytest.raises(ValueError):
        shift.complete(clock.advance(hours=1))


def test_failed_recompute_leaves_shift_in_progress(lifecycle, careworker, clock, monkeypatch):
    shift = lifecycle.start_shift(careworker.id)
    clock.advance(hours=2)

    def broken(user_id):
        raise RuntimeError("statistics store unavailable")

    monkeypatch.setattr(lifecycle.statistics, "recompute", broken)
    with pytest.raises(RuntimeError):
        lifecycle.end_shift(careworker.id)

    lifecycle.session.rollback()
    assert lifecycle.shifts.get(shift.id).status == ShiftStatus.IN_PROGRESS


def test_summarize(lifecycle, careworker, other_careworker, clock):
    lifecycle.start_shift(careworker.id)
    clock.advance(hours=2)
    lifecycle.end_shift(careworker.id)
    lifecycle.start_shift(other_careworker.id)

    summary = summarize(lifecycle.shifts.list_all())

    assert summary.total_shifts == 2
    assert summary.completed == 1
    assert summary.in_progress == 1
    assert summary.total_hours == 2.0
    assert summary.average_hours == 1.0
    assert [d.date for d in summary.by_date] == ["2026-03-02"]
    assert summary.by_date[0].total == 2


def test_summarize_empty():
    summary = summarize([])
    assert summary.total_shifts == 0
    assert summary.average_hours == 0.0
    assert summary.by_date == []


def test_rounding_helpers(clock):
    start = clock.now
    assert hours_between(start, clock.advance(minutes=20)) == 0.33
    # Half away from zero, unlike round()
    assert round2(1.125) == 1.13
    assert round2(-1.125) == -1.13


def test_timestamps_are_stored_as_aware_utc(lifecycle, careworker, clock, engine):
    shift = lifecycle.start_shift(careworker.id)
    clock.advance(minutes=30)
    lifecycle.end_shift(careworker.id)

    with Session(engine) as other:
        stored = other.get(Shift, shift.id)
        assert stored.start_time.tzinfo is not None
        assert stored.start_time.utcoffset() == timedelta(0)
        assert stored.start_time == clock.now - timedelta(minutes=30)
        assert stored.end_time == clock.now
        assert stored.created_at.tzinfo is not None
        assert stored.total_hours == 0.5


def test_hours_between_accepts_naive_utc(clock):
    start = clock.now.replace(tzinfo=None)
    assert hours_between(start, clock.advance(hours=2)) == 2.0
