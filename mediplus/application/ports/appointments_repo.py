from dataclasses import dataclass
from typing import ContextManager, List, Optional, Protocol, Tuple
from datetime import datetime, date


@dataclass
class AppointmentDto:
    id: int
    patient_id: int
    doctor_id: int
    day: str
    serial_no: int
    appointment_date: date
    status: str
    created_at: datetime


@dataclass
class PatientAppointmentRow:
    appointment: AppointmentDto
    doctor_name: str
    hospital_name: Optional[str]
    specialty: Optional[str]
    hospital_lat: Optional[float]
    hospital_lng: Optional[float]


@dataclass
class DoctorQueueRow:
    appointment: AppointmentDto
    patient_name: str


class AppointmentsRepository(Protocol):
    def booking_scope(self, doctor_id: int, day: str) -> ContextManager[None]:
        """One transaction, serialized per (doctor, day).

        Commits on clean exit and rolls back otherwise. A unique-index
        violation surfaces as SlotConflict so the caller can retry.
        """
        ...

    def count_active(self, doctor_id: int, day: str) -> int:
        ...

    def find_booked(self, patient_id: int, doctor_id: int, day: str) -> Optional[AppointmentDto]:
        ...

    def serials_with_status(self, doctor_id: int, day: str) -> List[Tuple[int, str]]:
        ...

    def create(self, patient_id: int, doctor_id: int, day: str, serial_no: int, appointment_date: date) -> AppointmentDto:
        ...

    def get_booked_for_patient(self, appointment_id: int, patient_id: int) -> Optional[AppointmentDto]:
        ...

    def cancel_booked(self, appointment_id: int, patient_id: int) -> bool:
        ...

    def get_for_doctor(self, appointment_id: int, doctor_id: int) -> Optional[AppointmentDto]:
        ...

    def count_completed_before(self, doctor_id: int, day: str, serial_no: int, appointment_date: date) -> int:
        ...

    def list_for_patient(self, patient_id: int) -> List[PatientAppointmentRow]:
        ...

    def list_for_doctor(self, doctor_id: int) -> List[DoctorQueueRow]:
        ...
