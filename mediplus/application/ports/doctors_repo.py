from dataclasses import dataclass
from typing import List, Optional, Protocol


@dataclass
class DoctorDto:
    id: int
    full_name: str
    sector: Optional[str]
    hospital_name: Optional[str]
    specialty: Optional[str]
    keywords: str
    hospital_lat: Optional[float] = None
    hospital_lng: Optional[float] = None


class DoctorsRepository(Protocol):
    def list_all(self) -> List[DoctorDto]:
        ...

    def get_by_id(self, doctor_id: int) -> Optional[DoctorDto]:
        ...
