from typing import List, Optional
from sqlmodel import Session, select

from .....db.models import Doctor
from .....application.ports.doctors_repo import DoctorsRepository, DoctorDto


class SqlDoctorsRepository(DoctorsRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, d: Doctor) -> DoctorDto:
        return DoctorDto(
            id=d.id,
            full_name=d.full_name,
            sector=d.sector,
            hospital_name=d.hospital_name,
            specialty=d.specialty,
            keywords=d.keywords or "",
            hospital_lat=d.hospital_lat,
            hospital_lng=d.hospital_lng,
        )

    def list_all(self) -> List[DoctorDto]:
        rows = self.session.exec(select(Doctor).order_by(Doctor.id)).all()
        return [self._to_dto(d) for d in rows]

    def get_by_id(self, doctor_id: int) -> Optional[DoctorDto]:
        d = self.session.exec(select(Doctor).where(Doctor.id == doctor_id)).first()
        return self._to_dto(d) if d else None
