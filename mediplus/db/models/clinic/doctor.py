# mediplus/db/models/clinic/doctor.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

class Doctor(SQLModel, table=True):
    __tablename__ = "doctors"
    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str = Field(max_length=100)
    sector: Optional[str] = None
    hospital_name: Optional[str] = None
    specialty: Optional[str] = None
    keywords: str = Field(default="")  # comma separated
    hospital_lat: Optional[float] = None
    hospital_lng: Optional[float] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
