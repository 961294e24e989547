from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Protocol


@dataclass
class MedicineDto:
    medicine_name: Optional[str]
    times_per_day: Optional[int]
    duration_days: Optional[int]
    dosage_pattern: Optional[str] = None
    instructions: Optional[str] = None


@dataclass
class PatientPrescriptionDto:
    prescription_id: int
    appointment_id: int
    additional_notes: Optional[str]
    created_at: datetime
    appointment_date: date
    day: str
    doctor_name: str
    doctor_sector: Optional[str] = None
    specialty: Optional[str] = None
    medicines: List[MedicineDto] = field(default_factory=list)


class PrescriptionsRepository(Protocol):
    def create_and_complete(self, appointment_id: int, additional_notes: Optional[str], medicines: List[MedicineDto]) -> int:
        """Write the prescription and mark the appointment Completed atomically.

        Returns the new prescription id. Raises DuplicatePrescription when the
        appointment already has one and NotFound when it is no longer Booked.
        """
        ...

    def list_for_patient(self, patient_id: int) -> List[PatientPrescriptionDto]:
        """Patient's prescriptions with their medicines, newest first."""
        ...
