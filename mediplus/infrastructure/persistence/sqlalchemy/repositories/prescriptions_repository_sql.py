from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from .....db.models import Appointment, AppointmentStatus, Doctor, Prescription, PrescriptionMedicine
from .....db.models.clinic.prescription import PRESCRIPTION_APPOINTMENT_UNIQUE
from .....exceptions import DuplicatePrescription, NotFound, StorageFailure
from .....application.ports.prescriptions_repo import (
    PrescriptionsRepository,
    MedicineDto,
    PatientPrescriptionDto,
)
from ..integrity import violates_unique

logger = logging.getLogger(__name__)


def medicine_to_dto(m: PrescriptionMedicine) -> MedicineDto:
    return MedicineDto(
        medicine_name=m.medicine_name,
        times_per_day=m.times_per_day,
        duration_days=m.duration_days,
        dosage_pattern=m.dosage_pattern,
        instructions=m.instructions,
    )


class SqlPrescriptionsRepository(PrescriptionsRepository):
    def __init__(self, session: Session):
        self.session = session

    def create_and_complete(self, appointment_id: int, additional_notes: Optional[str], medicines: List[MedicineDto]) -> int:
        try:
            appt = self.session.exec(
                select(Appointment).where(Appointment.id == appointment_id).with_for_update()
            ).first()
            if not appt or appt.status != AppointmentStatus.BOOKED.value:
                raise NotFound("Appointment not found or already completed")

            prescription = Prescription(appointment_id=appointment_id, additional_notes=additional_notes)
            self.session.add(prescription)
            self.session.flush()
            prescription_id = prescription.id

            for med in medicines:
                self.session.add(PrescriptionMedicine(
                    prescription_id=prescription_id,
                    medicine_name=med.medicine_name,
                    dosage_pattern=med.dosage_pattern,
                    times_per_day=med.times_per_day,
                    duration_days=med.duration_days,
                    instructions=med.instructions,
                ))

            appt.status = AppointmentStatus.COMPLETED.value
            self.session.add(appt)
            self.session.commit()
            return prescription_id
        except IntegrityError as e:
            self.session.rollback()
            if violates_unique(e, PRESCRIPTION_APPOINTMENT_UNIQUE, ["prescriptions.appointment_id"]):
                raise DuplicatePrescription() from e
            logger.error(f"Integrity error creating prescription for appointment {appointment_id}: {e}", exc_info=True)
            raise StorageFailure("Failed to create prescription") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error creating prescription for appointment {appointment_id}: {e}", exc_info=True)
            raise StorageFailure("Failed to create prescription") from e
        except Exception:
            self.session.rollback()
            raise

    def list_for_patient(self, patient_id: int) -> List[PatientPrescriptionDto]:
        rows = self.session.exec(
            select(Prescription, Appointment, Doctor)
            .join(Appointment, Appointment.id == Prescription.appointment_id)
            .join(Doctor, Doctor.id == Appointment.doctor_id)
            .where(Appointment.patient_id == patient_id)
            .options(selectinload(Prescription.medicines))
            .order_by(Prescription.created_at.desc(), Prescription.id.desc())
        ).all()
        return [
            PatientPrescriptionDto(
                prescription_id=p.id,
                appointment_id=a.id,
                additional_notes=p.additional_notes,
                created_at=p.created_at,
                appointment_date=a.appointment_date,
                day=a.day,
                doctor_name=d.full_name,
                doctor_sector=d.sector,
                specialty=d.specialty,
                medicines=[medicine_to_dto(m) for m in sorted(p.medicines, key=lambda m: m.id)],
            )
            for p, a, d in rows
        ]
