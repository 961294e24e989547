# mediplus/schemas/prescriptions/prescription.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime

__all__ = ["MedicineIn", "MedicineOut", "PrescriptionCreate", "PrescriptionResponse", "PatientPrescriptionResponse"]

class MedicineIn(BaseModel):
    # Completeness is checked by the prescriptions service so that a missing
    # field is reported with the same validation_error code
    medicine_name: Optional[str] = None
    times_per_day: Optional[int] = None
    duration_days: Optional[int] = None
    dosage_pattern: Optional[str] = None
    instructions: Optional[str] = None

class MedicineOut(BaseModel):
    medicine_name: str
    dosage_pattern: str
    times_per_day: int
    duration_days: int
    instructions: Optional[str] = None

class PrescriptionCreate(BaseModel):
    appointment_id: int
    medicines: List[MedicineIn] = []
    additional_notes: Optional[str] = None

class PrescriptionResponse(BaseModel):
    prescription_id: int
    appointment_id: int
    medicines: List[MedicineOut]
    additional_notes: Optional[str] = None
    status: str
    message: str = "Prescription created and appointment marked as completed"

class PatientPrescriptionResponse(BaseModel):
    prescription_id: int
    appointment_id: int
    additional_notes: Optional[str] = None
    created_at: datetime
    appointment_date: date
    day: str
    doctor_name: str
    doctor_sector: Optional[str] = None
    specialty: Optional[str] = None
    medicines: List[MedicineOut] = []
