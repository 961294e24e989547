# mediplus/schemas/doctors/doctor.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date

__all__ = [
    "DoctorResponse",
    "DayAvailabilityResponse",
    "DoctorQueueAppointment",
    "DoctorDayQueueResponse",
    "RecommendRequest",
    "ScheduleAvailability",
    "RecommendResponse",
]

class DoctorResponse(BaseModel):
    doctor_id: int
    full_name: str
    sector: Optional[str] = None
    hospital_name: Optional[str] = None
    specialty: Optional[str] = None

class DayAvailabilityResponse(BaseModel):
    day: str
    slots_available: int
    max_patients: int

class DoctorQueueAppointment(BaseModel):
    appointment_id: int
    serial_no: int
    patient_name: str
    patient_id: int
    appointment_date: date
    status: str
    estimated_time: str

class DoctorDayQueueResponse(BaseModel):
    day: str
    max_patients: int
    start_time: str  # HH:MM
    avg_time_per_patient: int
    appointments: List[DoctorQueueAppointment] = []

class RecommendRequest(BaseModel):
    description: str = Field(min_length=1)

class ScheduleAvailability(BaseModel):
    day: str
    total_capacity: int
    booked_count: int
    next_serial: Optional[int] = None
    status: str  # 'Available' | 'Full'

class RecommendResponse(BaseModel):
    doctor_id: int
    name: str
    specialty: Optional[str] = None
    sector: Optional[str] = None
    schedule: List[ScheduleAvailability] = []
