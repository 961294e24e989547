# mediplus/schemas/appointments/appointment.py
from pydantic import BaseModel, Field, AliasChoices
from typing import Optional
from datetime import date

from ...scheduling import Weekday

__all__ = ["AppointmentCreate", "AppointmentResponse", "PatientAppointmentResponse"]

class AppointmentCreate(BaseModel):
    doctor_id: int = Field(validation_alias=AliasChoices("doctor_id", "doctorId"))
    day: Weekday

class AppointmentResponse(BaseModel):
    appointment_id: int
    doctor_id: int
    day: str
    serial_no: int
    appointment_date: date
    status: str

class PatientAppointmentResponse(AppointmentResponse):
    doctor_name: str
    hospital_name: Optional[str] = None
    hospital_lat: Optional[float] = None
    hospital_lng: Optional[float] = None
    specialty: Optional[str] = None
    # Queue fields are only present for Booked appointments
    estimated_time: Optional[str] = None
    estimated_minutes: Optional[int] = None
    queue_position: Optional[int] = None
    patients_ahead: Optional[int] = None
