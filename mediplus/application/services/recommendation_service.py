from dataclasses import dataclass
from typing import List
import logging

from ..ports.doctor_matcher import DoctorMatcher
from ..ports.doctors_repo import DoctorDto
from .doctors_service import DoctorsService, DayAvailability
from ...exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class Recommendation:
    doctor: DoctorDto
    schedule: List[DayAvailability]


@dataclass
class RecommendationService:
    matcher: DoctorMatcher
    doctors: DoctorsService

    def recommend(self, description: str) -> Recommendation:
        if not description or not description.strip():
            raise ValidationError("Description is required")

        doctor_id = self.matcher.match(description.strip())
        doctor = self.doctors.get_doctor(doctor_id)
        logger.info(f"Recommended doctor {doctor_id} for symptom description")
        return Recommendation(doctor=doctor, schedule=self.doctors.availability(doctor_id))
