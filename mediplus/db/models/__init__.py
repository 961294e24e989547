# Models package (re-export feature modules for stable imports)
from .users.patient import Patient
from .clinic.doctor import Doctor
from .clinic.schedule import DoctorSchedule
from .clinic.appointment import Appointment, AppointmentStatus
from .clinic.prescription import Prescription, PrescriptionMedicine

__all__ = [
    "Patient",
    "Doctor",
    "DoctorSchedule",
    "Appointment",
    "AppointmentStatus",
    "Prescription",
    "PrescriptionMedicine",
]
