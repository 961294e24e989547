"""Slot allocation and queue arithmetic for weekly recurring doctor schedules.

Everything here is pure: callers fetch ledger state and pass it in, so the
same rules serve the booking transaction, the availability views and tests.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Iterable

from .exceptions import SerialsExhausted


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


# Index matches date.weekday(): Monday == 0
WEEKDAYS = tuple(d.value for d in Weekday)


def weekday_of(d: date) -> str:
    return WEEKDAYS[d.weekday()]


def weekday_index(day: str) -> int:
    try:
        return WEEKDAYS.index(day)
    except ValueError:
        raise ValueError(f"Unknown weekday: {day!r}") from None


@dataclass(frozen=True)
class ScheduleEntry:
    doctor_id: int
    day: str
    max_patients: int
    start_time: time
    avg_time_per_patient: int


@dataclass(frozen=True)
class QueueEstimate:
    queue_position: int
    patients_ahead: int
    estimated_minutes: int

    @property
    def estimated_time(self) -> str:
        return format_minutes(self.estimated_minutes)


def allocate_serial(max_patients: int, held_serials: Iterable[int]) -> int:
    """Return the lowest serial in 1..max_patients not held by a live appointment.

    Cancelled appointments must already be excluded from ``held_serials`` so
    their numbers are handed out again. Raises SerialsExhausted when every
    serial up to capacity is taken.
    """
    held = set(held_serials)
    serial = 1
    while serial in held:
        serial += 1
    if serial > max_patients:
        raise SerialsExhausted()
    return serial


def next_occurrence(day: str, today: date) -> date:
    """Next calendar date falling on ``day``, 1 to 7 days after ``today``.

    A booking on today's own weekday lands on the same weekday next week.
    """
    offset = weekday_index(day) - today.weekday()
    if offset <= 0:
        offset += 7
    return today + timedelta(days=offset)


def hours_until(appointment_date: date, now: datetime) -> float:
    """Hours from ``now`` until midnight at the start of ``appointment_date``."""
    starts_at = datetime.combine(appointment_date, time.min)
    return (starts_at - now).total_seconds() / 3600


def minutes_of_day(t: time) -> int:
    return t.hour * 60 + t.minute


def format_minutes(minutes: int) -> str:
    # No wrap at midnight: 1470 renders as "24:30"
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def estimate_queue(serial_no: int, completed_ahead: int, schedule: ScheduleEntry) -> QueueEstimate:
    """Live queue position for a booked serial given completed predecessors.

    Only completions shrink the wait: patients are seen in serial order and a
    no-show ahead still counts until its appointment is completed.
    """
    patients_ahead = max(0, serial_no - 1 - completed_ahead)
    estimated = minutes_of_day(schedule.start_time) + patients_ahead * schedule.avg_time_per_patient
    return QueueEstimate(
        queue_position=patients_ahead + 1,
        patients_ahead=patients_ahead,
        estimated_minutes=estimated,
    )


def planned_minutes(serial_no: int, schedule: ScheduleEntry) -> int:
    """Doctor-side planning time, ignoring completion state."""
    return minutes_of_day(schedule.start_time) + (serial_no - 1) * schedule.avg_time_per_patient


def slots_available(max_patients: int, active_count: int) -> int:
    return max(0, max_patients - active_count)
