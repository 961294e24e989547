from dataclasses import dataclass, field
from typing import List, Optional

from ..ports.appointments_repo import AppointmentsRepository, DoctorQueueRow
from ..ports.doctors_repo import DoctorsRepository, DoctorDto
from ..ports.schedule_repo import ScheduleRepository
from ...db.models import AppointmentStatus
from ...exceptions import NotFound, SerialsExhausted
from ...scheduling import ScheduleEntry, allocate_serial, planned_minutes, slots_available


@dataclass
class DayAvailability:
    day: str
    max_patients: int
    booked_count: int
    slots_available: int
    next_serial: Optional[int]

    @property
    def status(self) -> str:
        return "Available" if self.next_serial is not None else "Full"


@dataclass
class QueueEntry:
    row: DoctorQueueRow
    estimated_minutes: int


@dataclass
class DayQueue:
    schedule: ScheduleEntry
    entries: List[QueueEntry] = field(default_factory=list)


@dataclass
class DoctorsService:
    doctors: DoctorsRepository
    schedules: ScheduleRepository
    appointments: AppointmentsRepository

    def list_doctors(self) -> List[DoctorDto]:
        return self.doctors.list_all()

    def get_doctor(self, doctor_id: int) -> DoctorDto:
        doctor = self.doctors.get_by_id(doctor_id)
        if not doctor:
            raise NotFound("Doctor not found")
        return doctor

    def availability(self, doctor_id: int) -> List[DayAvailability]:
        result = []
        for schedule in self.schedules.list_for_doctor(doctor_id):
            active = self.appointments.count_active(doctor_id, schedule.day)
            next_serial = None
            if active < schedule.max_patients:
                held = {
                    serial for serial, status in self.appointments.serials_with_status(doctor_id, schedule.day)
                    if status != AppointmentStatus.CANCELLED.value
                }
                try:
                    next_serial = allocate_serial(schedule.max_patients, held)
                except SerialsExhausted:
                    next_serial = None
            result.append(DayAvailability(
                day=schedule.day,
                max_patients=schedule.max_patients,
                booked_count=active,
                slots_available=slots_available(schedule.max_patients, active),
                next_serial=next_serial,
            ))
        return result

    def daily_queue(self, doctor_id: int) -> List[DayQueue]:
        """Doctor's appointments grouped by scheduled weekday, Monday first."""
        by_day = {s.day: DayQueue(schedule=s) for s in self.schedules.list_for_doctor(doctor_id)}
        rows = sorted(
            self.appointments.list_for_doctor(doctor_id),
            key=lambda r: (r.appointment.day, r.appointment.serial_no),
        )
        for row in rows:
            group = by_day.get(row.appointment.day)
            if group is None:
                continue
            group.entries.append(QueueEntry(
                row=row,
                estimated_minutes=planned_minutes(row.appointment.serial_no, group.schedule),
            ))
        return list(by_day.values())
