# mediplus/db/models/clinic/prescription.py
from typing import Optional, List
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime

PRESCRIPTION_APPOINTMENT_UNIQUE = "uq_prescriptions_appointment"

class Prescription(SQLModel, table=True):
    __tablename__ = "prescriptions"
    __table_args__ = (
        UniqueConstraint("appointment_id", name=PRESCRIPTION_APPOINTMENT_UNIQUE),
    )
    id: Optional[int] = Field(default=None, primary_key=True)
    appointment_id: int = Field(foreign_key="appointments.id")
    additional_notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    medicines: List["PrescriptionMedicine"] = Relationship(back_populates="prescription")


class PrescriptionMedicine(SQLModel, table=True):
    __tablename__ = "prescription_medicines"
    id: Optional[int] = Field(default=None, primary_key=True)
    prescription_id: int = Field(foreign_key="prescriptions.id", index=True)
    medicine_name: str = Field(max_length=200)
    dosage_pattern: str = Field(default="0+0+0", max_length=50)
    times_per_day: int
    duration_days: int
    instructions: Optional[str] = None

    # Relationships
    prescription: Optional[Prescription] = Relationship(back_populates="medicines")
