from typing import List, Optional, Protocol

from ...scheduling import ScheduleEntry


class ScheduleRepository(Protocol):
    def get_schedule(self, doctor_id: int, day: str) -> Optional[ScheduleEntry]:
        ...

    def list_for_doctor(self, doctor_id: int) -> List[ScheduleEntry]:
        ...
