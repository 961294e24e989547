from typing import List, Optional
from sqlmodel import Session, select

from .....db.models import DoctorSchedule
from .....scheduling import ScheduleEntry, weekday_index
from .....application.ports.schedule_repo import ScheduleRepository


def _to_entry(s: DoctorSchedule) -> ScheduleEntry:
    return ScheduleEntry(
        doctor_id=s.doctor_id,
        day=s.day,
        max_patients=s.max_patients,
        start_time=s.start_time,
        avg_time_per_patient=s.avg_time_per_patient,
    )


class SqlScheduleRepository(ScheduleRepository):
    def __init__(self, session: Session):
        self.session = session

    def get_schedule(self, doctor_id: int, day: str) -> Optional[ScheduleEntry]:
        s = self.session.exec(
            select(DoctorSchedule)
            .where(DoctorSchedule.doctor_id == doctor_id)
            .where(DoctorSchedule.day == day)
        ).first()
        return _to_entry(s) if s else None

    def list_for_doctor(self, doctor_id: int) -> List[ScheduleEntry]:
        rows = self.session.exec(select(DoctorSchedule).where(DoctorSchedule.doctor_id == doctor_id)).all()
        return sorted((_to_entry(s) for s in rows), key=lambda e: weekday_index(e.day))
