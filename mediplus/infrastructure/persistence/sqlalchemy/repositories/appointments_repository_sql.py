from contextlib import contextmanager
from datetime import date
from typing import Iterator, List, Optional, Tuple
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from .....db.models import Appointment, AppointmentStatus, Doctor, DoctorSchedule, Patient
from .....db.models.clinic.appointment import ACTIVE_SERIAL_INDEX, BOOKED_PATIENT_INDEX
from .....exceptions import SlotConflict, StorageFailure
from .....application.ports.appointments_repo import (
    AppointmentsRepository,
    AppointmentDto,
    DoctorQueueRow,
    PatientAppointmentRow,
)
from ..integrity import violates_unique

logger = logging.getLogger(__name__)

# A lost race on either index is retried by the booking service
SLOT_INDEXES = (ACTIVE_SERIAL_INDEX, BOOKED_PATIENT_INDEX)


def appt_to_dto(a: Appointment) -> AppointmentDto:
    return AppointmentDto(
        id=a.id,
        patient_id=a.patient_id,
        doctor_id=a.doctor_id,
        day=a.day,
        serial_no=a.serial_no,
        appointment_date=a.appointment_date,
        status=a.status,
        created_at=a.created_at,
    )


class SqlAppointmentsRepository(AppointmentsRepository):
    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def booking_scope(self, doctor_id: int, day: str) -> Iterator[None]:
        try:
            # Locking the schedule row serializes bookings per (doctor, day).
            # SQLite ignores FOR UPDATE; its single writer plus the slot
            # unique indexes give the same guarantee.
            self.session.exec(
                select(DoctorSchedule.id)
                .where(DoctorSchedule.doctor_id == doctor_id)
                .where(DoctorSchedule.day == day)
                .with_for_update()
            ).first()
            yield
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if any(violates_unique(e, name) for name in SLOT_INDEXES):
                raise SlotConflict(str(e.orig)) from e
            logger.error(f"Integrity error booking doctor {doctor_id} on {day}: {e}", exc_info=True)
            raise StorageFailure() from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Booking transaction failed for doctor {doctor_id} on {day}: {e}", exc_info=True)
            raise StorageFailure() from e
        except Exception:
            self.session.rollback()
            raise

    def count_active(self, doctor_id: int, day: str) -> int:
        return self.session.exec(
            select(func.count(Appointment.id))
            .where(Appointment.doctor_id == doctor_id)
            .where(Appointment.day == day)
            .where(Appointment.status != AppointmentStatus.CANCELLED.value)
        ).one()

    def find_booked(self, patient_id: int, doctor_id: int, day: str) -> Optional[AppointmentDto]:
        a = self.session.exec(
            select(Appointment)
            .where(Appointment.patient_id == patient_id)
            .where(Appointment.doctor_id == doctor_id)
            .where(Appointment.day == day)
            .where(Appointment.status == AppointmentStatus.BOOKED.value)
        ).first()
        return appt_to_dto(a) if a else None

    def serials_with_status(self, doctor_id: int, day: str) -> List[Tuple[int, str]]:
        rows = self.session.exec(
            select(Appointment.serial_no, Appointment.status)
            .where(Appointment.doctor_id == doctor_id)
            .where(Appointment.day == day)
            .order_by(Appointment.serial_no.asc())
        ).all()
        return [(serial, status) for serial, status in rows]

    def create(self, patient_id: int, doctor_id: int, day: str, serial_no: int, appointment_date: date) -> AppointmentDto:
        appt = Appointment(
            patient_id=patient_id,
            doctor_id=doctor_id,
            day=day,
            serial_no=serial_no,
            appointment_date=appointment_date,
            status=AppointmentStatus.BOOKED.value,
        )
        self.session.add(appt)
        # Flush surfaces unique-index conflicts inside the booking scope
        self.session.flush()
        return appt_to_dto(appt)

    def get_booked_for_patient(self, appointment_id: int, patient_id: int) -> Optional[AppointmentDto]:
        a = self.session.exec(
            select(Appointment)
            .where(Appointment.id == appointment_id)
            .where(Appointment.patient_id == patient_id)
            .where(Appointment.status == AppointmentStatus.BOOKED.value)
        ).first()
        return appt_to_dto(a) if a else None

    def cancel_booked(self, appointment_id: int, patient_id: int) -> bool:
        try:
            a = self.session.exec(
                select(Appointment)
                .where(Appointment.id == appointment_id)
                .where(Appointment.patient_id == patient_id)
                .with_for_update()
            ).first()
            if not a or a.status != AppointmentStatus.BOOKED.value:
                self.session.rollback()
                return False
            a.status = AppointmentStatus.CANCELLED.value
            self.session.add(a)
            self.session.commit()
            return True
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error cancelling appointment {appointment_id}: {e}", exc_info=True)
            raise StorageFailure() from e

    def get_for_doctor(self, appointment_id: int, doctor_id: int) -> Optional[AppointmentDto]:
        a = self.session.exec(
            select(Appointment)
            .where(Appointment.id == appointment_id)
            .where(Appointment.doctor_id == doctor_id)
        ).first()
        return appt_to_dto(a) if a else None

    def count_completed_before(self, doctor_id: int, day: str, serial_no: int, appointment_date: date) -> int:
        return self.session.exec(
            select(func.count(Appointment.id))
            .where(Appointment.doctor_id == doctor_id)
            .where(Appointment.day == day)
            .where(Appointment.serial_no < serial_no)
            .where(Appointment.status == AppointmentStatus.COMPLETED.value)
            .where(Appointment.appointment_date == appointment_date)
        ).one()

    def list_for_patient(self, patient_id: int) -> List[PatientAppointmentRow]:
        rows = self.session.exec(
            select(Appointment, Doctor)
            .join(Doctor, Doctor.id == Appointment.doctor_id)
            .where(Appointment.patient_id == patient_id)
            .order_by(Appointment.appointment_date.desc(), Appointment.id.desc())
        ).all()
        return [
            PatientAppointmentRow(
                appointment=appt_to_dto(a),
                doctor_name=d.full_name,
                hospital_name=d.hospital_name,
                specialty=d.specialty,
                hospital_lat=d.hospital_lat,
                hospital_lng=d.hospital_lng,
            )
            for a, d in rows
        ]

    def list_for_doctor(self, doctor_id: int) -> List[DoctorQueueRow]:
        rows = self.session.exec(
            select(Appointment, Patient)
            .join(Patient, Patient.id == Appointment.patient_id)
            .where(Appointment.doctor_id == doctor_id)
            .order_by(Appointment.day, Appointment.serial_no)
        ).all()
        return [DoctorQueueRow(appointment=appt_to_dto(a), patient_name=p.full_name) for a, p in rows]
