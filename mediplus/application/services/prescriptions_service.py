from dataclasses import dataclass, field
from typing import List, Optional
import logging

from ..ports.appointments_repo import AppointmentsRepository
from ..ports.prescriptions_repo import PrescriptionsRepository, MedicineDto, PatientPrescriptionDto
from ..ports.clock import Clock
from ...db.models import AppointmentStatus
from ...exceptions import NotFound, ValidationError, WrongDay
from ...scheduling import weekday_of

logger = logging.getLogger(__name__)

# Morning+noon+night pattern inferred from how often the medicine is taken
DEFAULT_DOSAGE_PATTERNS = {1: "1+0+0", 2: "1+0+1", 3: "1+1+1"}


@dataclass
class PrescriptionResult:
    prescription_id: int
    appointment_id: int
    medicines: List[MedicineDto] = field(default_factory=list)
    additional_notes: Optional[str] = None
    status: str = AppointmentStatus.COMPLETED.value


def normalize_medicines(medicines: List[MedicineDto]) -> List[MedicineDto]:
    if not medicines:
        raise ValidationError("Appointment ID and at least one medicine are required")

    normalized = []
    for med in medicines:
        name = (med.medicine_name or "").strip()
        if not name or not med.times_per_day or not med.duration_days:
            raise ValidationError("Each medicine must have name, times per day, and duration")
        if med.times_per_day < 1 or med.duration_days < 1:
            raise ValidationError("Times per day and duration must be positive")
        normalized.append(MedicineDto(
            medicine_name=name,
            times_per_day=med.times_per_day,
            duration_days=med.duration_days,
            dosage_pattern=med.dosage_pattern or DEFAULT_DOSAGE_PATTERNS.get(med.times_per_day, "1+0+0"),
            instructions=med.instructions,
        ))
    return normalized


@dataclass
class PrescriptionsService:
    appointments: AppointmentsRepository
    prescriptions: PrescriptionsRepository
    clock: Clock

    def complete_with_prescription(
        self,
        doctor_id: int,
        appointment_id: int,
        medicines: List[MedicineDto],
        additional_notes: Optional[str] = None,
    ) -> PrescriptionResult:
        # Reject malformed input before touching the ledger
        medicines = normalize_medicines(medicines)

        appt = self.appointments.get_for_doctor(appointment_id, doctor_id)
        if not appt:
            raise NotFound("Appointment not found or already completed")

        # Only today's queue can be closed out
        if appt.day != weekday_of(self.clock.now().date()):
            raise WrongDay()

        if appt.status != AppointmentStatus.BOOKED.value:
            raise NotFound("Appointment not found or already completed")

        prescription_id = self.prescriptions.create_and_complete(appointment_id, additional_notes, medicines)
        logger.info(f"Prescription {prescription_id} filed; appointment {appointment_id} completed by doctor {doctor_id}")
        return PrescriptionResult(
            prescription_id=prescription_id,
            appointment_id=appointment_id,
            medicines=medicines,
            additional_notes=additional_notes,
        )

    def list_for_patient(self, patient_id: int) -> List[PatientPrescriptionDto]:
        return self.prescriptions.list_for_patient(patient_id)
