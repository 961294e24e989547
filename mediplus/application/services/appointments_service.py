from dataclasses import dataclass
from typing import List, Optional
import logging

from ..ports.appointments_repo import AppointmentsRepository, AppointmentDto, PatientAppointmentRow
from ..ports.schedule_repo import ScheduleRepository
from ..ports.clock import Clock
from ...db.models import AppointmentStatus
from ...exceptions import (
    CapacityExceeded,
    DoctorUnavailable,
    DuplicateBooking,
    NotFound,
    SlotConflict,
    StorageFailure,
    TooLateToCancel,
)
from ...scheduling import (
    QueueEstimate,
    allocate_serial,
    estimate_queue,
    hours_until,
    next_occurrence,
)

logger = logging.getLogger(__name__)


@dataclass
class PatientAppointmentView:
    row: PatientAppointmentRow
    estimate: Optional[QueueEstimate] = None


@dataclass
class AppointmentsService:
    repo: AppointmentsRepository
    schedules: ScheduleRepository
    clock: Clock
    cancellation_cutoff_hours: int = 24
    max_retries: int = 3

    def book(self, patient_id: int, doctor_id: int, day: str) -> AppointmentDto:
        for attempt in range(1, self.max_retries + 1):
            try:
                with self.repo.booking_scope(doctor_id, day):
                    appt = self._book_once(patient_id, doctor_id, day)
            except SlotConflict:
                logger.warning(
                    f"Booking conflict for doctor {doctor_id} on {day} (attempt {attempt}/{self.max_retries})"
                )
                continue
            logger.info(
                f"Booked appointment {appt.id}: patient {patient_id}, doctor {doctor_id}, "
                f"{day} {appt.appointment_date} serial {appt.serial_no}"
            )
            return appt
        raise StorageFailure("Could not allocate a slot, please try again")

    def _book_once(self, patient_id: int, doctor_id: int, day: str) -> AppointmentDto:
        schedule = self.schedules.get_schedule(doctor_id, day)
        if not schedule:
            raise DoctorUnavailable()

        if self.repo.count_active(doctor_id, day) >= schedule.max_patients:
            raise CapacityExceeded()

        if self.repo.find_booked(patient_id, doctor_id, day):
            raise DuplicateBooking()

        held = {
            serial for serial, status in self.repo.serials_with_status(doctor_id, day)
            if status != AppointmentStatus.CANCELLED.value
        }
        serial_no = allocate_serial(schedule.max_patients, held)

        appointment_date = next_occurrence(day, self.clock.now().date())
        return self.repo.create(patient_id, doctor_id, day, serial_no, appointment_date)

    def cancel(self, patient_id: int, appointment_id: int) -> None:
        appt = self.repo.get_booked_for_patient(appointment_id, patient_id)
        if not appt:
            raise NotFound("Appointment not found or already cancelled")

        if hours_until(appt.appointment_date, self.clock.now()) < self.cancellation_cutoff_hours:
            raise TooLateToCancel(
                f"Cannot cancel within {self.cancellation_cutoff_hours} hours of the appointment. "
                "Please contact the hospital directly."
            )

        if not self.repo.cancel_booked(appointment_id, patient_id):
            raise NotFound("Appointment not found or already cancelled")
        logger.info(f"Cancelled appointment {appointment_id} for patient {patient_id}")

    def list_for_patient(self, patient_id: int) -> List[PatientAppointmentView]:
        views = []
        for row in self.repo.list_for_patient(patient_id):
            appt = row.appointment
            estimate = None
            if appt.status == AppointmentStatus.BOOKED.value:
                schedule = self.schedules.get_schedule(appt.doctor_id, appt.day)
                if schedule:
                    completed = self.repo.count_completed_before(
                        appt.doctor_id, appt.day, appt.serial_no, appt.appointment_date
                    )
                    estimate = estimate_queue(appt.serial_no, completed, schedule)
            views.append(PatientAppointmentView(row=row, estimate=estimate))
        return views
