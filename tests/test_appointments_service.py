from datetime import date, datetime, time

import pytest

from mediplus.application.services.appointments_service import AppointmentsService
from mediplus.exceptions import (
    CapacityExceeded,
    DoctorUnavailable,
    DuplicateBooking,
    NotFound,
    SerialsExhausted,
    StorageFailure,
    TooLateToCancel,
)

NEXT_MONDAY = date(2026, 10, 26)


def make_service(ledger, schedules, clock):
    return AppointmentsService(repo=ledger, schedules=schedules, clock=clock)


def test_book_success_stamps_next_occurrence(ledger, schedules, clock):
    schedules.add(1, "Monday", 3)
    svc = make_service(ledger, schedules, clock)
    out = svc.book(10, 1, "Monday")
    assert out.serial_no == 1
    assert out.status == "Booked"
    assert out.appointment_date == NEXT_MONDAY


def test_book_rejects_day_without_schedule(ledger, schedules, clock):
    schedules.add(1, "Monday", 3)
    svc = make_service(ledger, schedules, clock)
    with pytest.raises(DoctorUnavailable):
        svc.book(10, 1, "Tuesday")
    assert ledger.rows == []


def test_capacity_and_gap_reuse_after_cancel(ledger, schedules, clock):
    schedules.add(1, "Monday", 3)
    svc = make_service(ledger, schedules, clock)
    booked = [svc.book(p, 1, "Monday") for p in (10, 11, 12)]
    assert [a.serial_no for a in booked] == [1, 2, 3]

    with pytest.raises(CapacityExceeded):
        svc.book(13, 1, "Monday")

    svc.cancel(11, booked[1].id)
    fourth = svc.book(13, 1, "Monday")
    assert fourth.serial_no == 2
    assert ledger.count_active(1, "Monday") == 3


def test_single_slot_is_reused_after_cancel(ledger, schedules, clock):
    schedules.add(1, "Monday", 1)
    svc = make_service(ledger, schedules, clock)
    first = svc.book(10, 1, "Monday")
    assert first.serial_no == 1
    svc.cancel(10, first.id)
    again = svc.book(10, 1, "Monday")
    assert again.serial_no == 1


def test_duplicate_booking_until_cancelled(ledger, schedules, clock):
    schedules.add(1, "Monday", 5)
    svc = make_service(ledger, schedules, clock)
    first = svc.book(10, 1, "Monday")
    with pytest.raises(DuplicateBooking):
        svc.book(10, 1, "Monday")
    svc.cancel(10, first.id)
    assert svc.book(10, 1, "Monday").status == "Booked"


def test_completed_booking_does_not_block_new_booking(ledger, schedules, clock):
    schedules.add(1, "Monday", 5)
    svc = make_service(ledger, schedules, clock)
    first = svc.book(10, 1, "Monday")
    ledger.set_status(first.id, "Completed")
    second = svc.book(10, 1, "Monday")
    assert second.serial_no == 2


def test_allocator_guards_capacity_independently(ledger, schedules, clock):
    schedules.add(1, "Monday", 2)
    svc = make_service(ledger, schedules, clock)
    svc.book(10, 1, "Monday")
    svc.book(11, 1, "Monday")
    ledger.count_active = lambda doctor_id, day: 0
    with pytest.raises(SerialsExhausted):
        svc.book(12, 1, "Monday")


def test_book_retries_after_slot_conflict(ledger, schedules, clock):
    schedules.add(1, "Monday", 3)
    svc = make_service(ledger, schedules, clock)
    ledger.conflicts_to_raise = 1
    out = svc.book(10, 1, "Monday")
    assert out.serial_no == 1
    assert ledger.scopes_entered == 2
    assert len(ledger.rows) == 1


def test_book_gives_up_after_max_retries(ledger, schedules, clock):
    schedules.add(1, "Monday", 3)
    svc = make_service(ledger, schedules, clock)
    ledger.conflicts_to_raise = 10
    with pytest.raises(StorageFailure):
        svc.book(10, 1, "Monday")
    assert ledger.scopes_entered == 3
    assert ledger.rows == []


def test_cancel_inside_24_hours_is_rejected(ledger, schedules, clock):
    schedules.add(1, "Monday", 3)
    svc = make_service(ledger, schedules, clock)
    appt = svc.book(10, 1, "Monday")

    clock.at = datetime(2026, 10, 25, 0, 1)  # 23h59m before
    with pytest.raises(TooLateToCancel):
        svc.cancel(10, appt.id)
    assert ledger.rows[0].status == "Booked"

    clock.at = datetime(2026, 10, 24, 23, 59)  # 24h01m before
    svc.cancel(10, appt.id)
    assert ledger.rows[0].status == "Cancelled"


def test_cancel_requires_own_booked_appointment(ledger, schedules, clock):
    schedules.add(1, "Monday", 3)
    svc = make_service(ledger, schedules, clock)
    appt = svc.book(10, 1, "Monday")

    with pytest.raises(NotFound):
        svc.cancel(99, appt.id)

    svc.cancel(10, appt.id)
    with pytest.raises(NotFound):
        svc.cancel(10, appt.id)


def test_patient_view_estimates_booked_only(ledger, schedules, clock):
    schedules.add(1, "Monday", 10, start=time(9, 0), avg=10)
    svc = make_service(ledger, schedules, clock)
    appts = [svc.book(p, 1, "Monday") for p in (10, 11, 12, 13)]

    view = svc.list_for_patient(13)[0]
    assert view.estimate.patients_ahead == 3
    assert view.estimate.estimated_time == "09:30"
    assert view.estimate.queue_position == 4

    ledger.set_status(appts[0].id, "Completed")
    ledger.set_status(appts[1].id, "Completed")

    view = svc.list_for_patient(13)[0]
    assert view.estimate.patients_ahead == 1
    assert view.estimate.estimated_time == "09:10"
    assert view.estimate.queue_position == 2

    assert svc.list_for_patient(10)[0].estimate is None


def test_completions_on_other_dates_do_not_count(ledger, schedules, clock):
    schedules.add(1, "Monday", 10)
    svc = make_service(ledger, schedules, clock)
    old = ledger.create(20, 1, "Monday", 1, date(2026, 10, 12))
    ledger.set_status(old.id, "Completed")
    appt = svc.book(10, 1, "Monday")
    assert appt.serial_no == 2

    view = svc.list_for_patient(10)[0]
    assert view.estimate.patients_ahead == 1
