# mediplus/db/models/clinic/appointment.py
from typing import Optional
from enum import Enum
from datetime import datetime, date
from sqlalchemy import Index, text
from sqlmodel import SQLModel, Field


class AppointmentStatus(str, Enum):
    BOOKED = "Booked"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


ACTIVE_SERIAL_INDEX = "uq_appointments_active_serial"
BOOKED_PATIENT_INDEX = "uq_appointments_booked_patient"

# Expression key parts evaluate to NULL for rows outside the rule, and unique
# indexes admit repeated NULLs on SQLite, PostgreSQL and MySQL 8.0.13+.
# MySQL requires the outer parentheses around a functional key part.
_ACTIVE_SERIAL = text("(CASE WHEN status <> 'Cancelled' THEN serial_no END)")
_BOOKED_PATIENT = text("(CASE WHEN status = 'Booked' THEN patient_id END)")


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    # Serials are unique among live rows; cancelled rows free their serial for reuse
    __table_args__ = (
        Index(ACTIVE_SERIAL_INDEX, "doctor_id", "day", _ACTIVE_SERIAL, unique=True),
        Index(BOOKED_PATIENT_INDEX, "doctor_id", "day", _BOOKED_PATIENT, unique=True),
    )
    id: Optional[int] = Field(default=None, primary_key=True)
    patient_id: int = Field(foreign_key="patients.id", index=True)
    doctor_id: int = Field(foreign_key="doctors.id", index=True)
    day: str = Field(max_length=9)
    serial_no: int
    appointment_date: date
    status: str = Field(default=AppointmentStatus.BOOKED.value, max_length=10)
    created_at: datetime = Field(default_factory=datetime.utcnow)
