"""FastAPI dependency wiring: one SQLModel session per request feeds every repository."""
from typing import List

from fastapi import Depends, Request
from sqlmodel import Session

from .config import settings
from .database import engine, get_session
from .application.ports.clock import Clock
from .application.ports.doctor_matcher import DoctorMatcher
from .application.ports.doctors_repo import DoctorDto
from .application.services.appointments_service import AppointmentsService
from .application.services.doctors_service import DoctorsService
from .application.services.prescriptions_service import PrescriptionsService
from .application.services.recommendation_service import RecommendationService
from .infrastructure.clock.system_clock import SystemClock
from .infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from .infrastructure.persistence.sqlalchemy.repositories.doctors_repository_sql import SqlDoctorsRepository
from .infrastructure.persistence.sqlalchemy.repositories.prescriptions_repository_sql import SqlPrescriptionsRepository
from .infrastructure.persistence.sqlalchemy.repositories.schedule_repository_sql import SqlScheduleRepository


def get_clock() -> Clock:
    return SystemClock()


def get_appointments_service(
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock),
) -> AppointmentsService:
    return AppointmentsService(
        repo=SqlAppointmentsRepository(session),
        schedules=SqlScheduleRepository(session),
        clock=clock,
        cancellation_cutoff_hours=settings.CANCELLATION_CUTOFF_HOURS,
        max_retries=settings.BOOKING_MAX_RETRIES,
    )


def get_prescriptions_service(
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock),
) -> PrescriptionsService:
    return PrescriptionsService(
        appointments=SqlAppointmentsRepository(session),
        prescriptions=SqlPrescriptionsRepository(session),
        clock=clock,
    )


def get_doctors_service(session: Session = Depends(get_session)) -> DoctorsService:
    return DoctorsService(
        doctors=SqlDoctorsRepository(session),
        schedules=SqlScheduleRepository(session),
        appointments=SqlAppointmentsRepository(session),
    )


def load_doctor_profiles() -> List[DoctorDto]:
    with Session(engine) as session:
        return SqlDoctorsRepository(session).list_all()


def get_doctor_matcher(request: Request) -> DoctorMatcher:
    return request.app.state.doctor_index


def get_recommendation_service(
    matcher: DoctorMatcher = Depends(get_doctor_matcher),
    doctors: DoctorsService = Depends(get_doctors_service),
) -> RecommendationService:
    return RecommendationService(matcher=matcher, doctors=doctors)
