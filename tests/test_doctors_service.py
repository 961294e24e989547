from datetime import date, time

import pytest

from mediplus.application.ports.doctors_repo import DoctorDto
from mediplus.application.services.doctors_service import DoctorsService
from mediplus.application.services.recommendation_service import RecommendationService
from mediplus.exceptions import NotFound, ValidationError
from mediplus.scheduling import format_minutes

NEXT_MONDAY = date(2026, 10, 26)


class FakeDoctors:
    def __init__(self):
        self.doctors = {
            1: DoctorDto(1, "Dr. Rahman", "Private", "City Hospital", "Cardiologist", "heart, chest pain"),
        }

    def list_all(self):
        return list(self.doctors.values())

    def get_by_id(self, doctor_id):
        return self.doctors.get(doctor_id)


class FakeMatcher:
    def __init__(self, doctor_id):
        self.doctor_id = doctor_id
        self.seen = []

    def match(self, description):
        self.seen.append(description)
        return self.doctor_id


@pytest.fixture
def svc(ledger, schedules):
    return DoctorsService(doctors=FakeDoctors(), schedules=schedules, appointments=ledger)


def test_availability_counts_active_and_next_serial(svc, ledger, schedules):
    schedules.add(1, "Monday", 3)
    schedules.add(1, "Thursday", 2)
    a = ledger.create(10, 1, "Monday", 1, NEXT_MONDAY)
    ledger.create(11, 1, "Monday", 2, NEXT_MONDAY)
    ledger.set_status(a.id, "Cancelled")
    ledger.create(12, 1, "Thursday", 1, date(2026, 10, 22))
    ledger.create(13, 1, "Thursday", 2, date(2026, 10, 22))

    monday, thursday = svc.availability(1)
    assert (monday.day, monday.booked_count, monday.slots_available) == ("Monday", 1, 2)
    assert monday.next_serial == 1
    assert monday.status == "Available"
    assert (thursday.slots_available, thursday.next_serial, thursday.status) == (0, None, "Full")


def test_daily_queue_groups_by_weekday_with_planned_times(svc, ledger, schedules):
    schedules.add(1, "Wednesday", 5, start=time(14, 0), avg=20)
    schedules.add(1, "Monday", 5, start=time(9, 0), avg=15)
    ledger.create(12, 1, "Monday", 2, NEXT_MONDAY)
    first = ledger.create(10, 1, "Monday", 1, NEXT_MONDAY)
    ledger.set_status(first.id, "Completed")
    ledger.create(11, 1, "Wednesday", 1, date(2026, 10, 21))
    ledger.create(14, 1, "Friday", 1, date(2026, 10, 23))  # no schedule

    groups = svc.daily_queue(1)
    assert [g.schedule.day for g in groups] == ["Monday", "Wednesday"]
    monday = groups[0]
    assert [e.row.appointment.serial_no for e in monday.entries] == [1, 2]
    assert [format_minutes(e.estimated_minutes) for e in monday.entries] == ["09:00", "09:15"]
    assert format_minutes(groups[1].entries[0].estimated_minutes) == "14:00"


def test_get_doctor_not_found(svc):
    with pytest.raises(NotFound):
        svc.get_doctor(42)


def test_recommendation_returns_doctor_and_schedule(svc, schedules):
    schedules.add(1, "Monday", 3)
    matcher = FakeMatcher(1)
    rec = RecommendationService(matcher=matcher, doctors=svc).recommend("  chest pain  ")
    assert matcher.seen == ["chest pain"]
    assert rec.doctor.full_name == "Dr. Rahman"
    assert rec.schedule[0].next_serial == 1


def test_recommendation_requires_description(svc):
    with pytest.raises(ValidationError):
        RecommendationService(matcher=FakeMatcher(1), doctors=svc).recommend("   ")
