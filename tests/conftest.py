import os

# Must be set before mediplus.config is imported
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GEMINI_API_KEY"] = "test-key"

from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, date, time
from typing import Dict, List, Optional, Tuple

import pytest

from mediplus.application.ports.appointments_repo import (
    AppointmentDto,
    DoctorQueueRow,
    PatientAppointmentRow,
)
from mediplus.exceptions import SlotConflict
from mediplus.scheduling import ScheduleEntry

# 2026-10-19 is a Monday
MONDAY = date(2026, 10, 19)


class FixedClock:
    def __init__(self, at: datetime):
        self.at = at

    def now(self) -> datetime:
        return self.at


class FakeSchedules:
    def __init__(self):
        self.entries: Dict[Tuple[int, str], ScheduleEntry] = {}

    def add(self, doctor_id: int, day: str, max_patients: int, start: time = time(9, 0), avg: int = 10) -> ScheduleEntry:
        entry = ScheduleEntry(doctor_id, day, max_patients, start, avg)
        self.entries[(doctor_id, day)] = entry
        return entry

    def get_schedule(self, doctor_id: int, day: str) -> Optional[ScheduleEntry]:
        return self.entries.get((doctor_id, day))

    def list_for_doctor(self, doctor_id: int) -> List[ScheduleEntry]:
        from mediplus.scheduling import weekday_index
        return sorted(
            (e for (d, _), e in self.entries.items() if d == doctor_id),
            key=lambda e: weekday_index(e.day),
        )


class FakeLedger:
    def __init__(self):
        self.rows: List[AppointmentDto] = []
        self._id = 1
        self.conflicts_to_raise = 0
        self.scopes_entered = 0

    @contextmanager
    def booking_scope(self, doctor_id: int, day: str):
        self.scopes_entered += 1
        snapshot = [replace(r) for r in self.rows]
        next_id = self._id
        try:
            yield
            if self.conflicts_to_raise:
                self.conflicts_to_raise -= 1
                raise SlotConflict("simulated concurrent insert")
        except Exception:
            self.rows = snapshot
            self._id = next_id
            raise

    def _get(self, appointment_id: int) -> Optional[AppointmentDto]:
        return next((r for r in self.rows if r.id == appointment_id), None)

    def set_status(self, appointment_id: int, status: str) -> None:
        self._get(appointment_id).status = status

    def count_active(self, doctor_id, day):
        return sum(1 for r in self.rows if r.doctor_id == doctor_id and r.day == day and r.status != "Cancelled")

    def find_booked(self, patient_id, doctor_id, day):
        return next(
            (r for r in self.rows
             if r.patient_id == patient_id and r.doctor_id == doctor_id and r.day == day and r.status == "Booked"),
            None,
        )

    def serials_with_status(self, doctor_id, day):
        return sorted((r.serial_no, r.status) for r in self.rows if r.doctor_id == doctor_id and r.day == day)

    def create(self, patient_id, doctor_id, day, serial_no, appointment_date):
        appt = AppointmentDto(self._id, patient_id, doctor_id, day, serial_no, appointment_date, "Booked", datetime(2026, 1, 1))
        self.rows.append(appt)
        self._id += 1
        return appt

    def get_booked_for_patient(self, appointment_id, patient_id):
        r = self._get(appointment_id)
        return r if r and r.patient_id == patient_id and r.status == "Booked" else None

    def cancel_booked(self, appointment_id, patient_id):
        r = self.get_booked_for_patient(appointment_id, patient_id)
        if not r:
            return False
        r.status = "Cancelled"
        return True

    def get_for_doctor(self, appointment_id, doctor_id):
        r = self._get(appointment_id)
        return r if r and r.doctor_id == doctor_id else None

    def count_completed_before(self, doctor_id, day, serial_no, appointment_date):
        return sum(
            1 for r in self.rows
            if r.doctor_id == doctor_id and r.day == day and r.serial_no < serial_no
            and r.status == "Completed" and r.appointment_date == appointment_date
        )

    def list_for_patient(self, patient_id):
        rows = sorted((r for r in self.rows if r.patient_id == patient_id), key=lambda r: r.appointment_date, reverse=True)
        return [PatientAppointmentRow(r, f"Dr. {r.doctor_id}", "City Hospital", "Cardiology", None, None) for r in rows]

    def list_for_doctor(self, doctor_id):
        return [DoctorQueueRow(r, f"Patient {r.patient_id}") for r in self.rows if r.doctor_id == doctor_id]


@pytest.fixture
def clock():
    return FixedClock(datetime.combine(MONDAY, time(10, 0)))


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def schedules():
    return FakeSchedules()
