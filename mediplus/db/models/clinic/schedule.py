# mediplus/db/models/clinic/schedule.py
from typing import Optional
from datetime import time
from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import SQLModel, Field

class DoctorSchedule(SQLModel, table=True):
    __tablename__ = "doctor_schedules"
    __table_args__ = (
        UniqueConstraint("doctor_id", "day", name="uq_doctor_schedules_doctor_day"),
        CheckConstraint("max_patients > 0", name="ck_doctor_schedules_max_patients"),
        CheckConstraint("avg_time_per_patient > 0", name="ck_doctor_schedules_avg_time"),
    )
    id: Optional[int] = Field(default=None, primary_key=True)
    doctor_id: int = Field(foreign_key="doctors.id", index=True)
    day: str = Field(max_length=9)
    max_patients: int
    start_time: time
    avg_time_per_patient: int  # minutes
