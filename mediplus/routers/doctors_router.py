from typing import List
from fastapi import APIRouter, Depends, HTTPException
import logging

from ..auth import Identity, get_current_identity
from ..deps import get_doctors_service
from ..application.services.doctors_service import DoctorsService
from ..schemas.doctors.doctor import DoctorResponse, DayAvailabilityResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/doctors", tags=["Doctors"])


@router.get("", response_model=List[DoctorResponse])
def get_doctors(
    identity: Identity = Depends(get_current_identity),
    doctors_service: DoctorsService = Depends(get_doctors_service),
):
    try:
        return [
            DoctorResponse(
                doctor_id=d.id,
                full_name=d.full_name,
                sector=d.sector,
                hospital_name=d.hospital_name,
                specialty=d.specialty,
            )
            for d in doctors_service.list_doctors()
        ]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving doctors: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch doctors")


@router.get("/{doctor_id}/availability", response_model=List[DayAvailabilityResponse])
def get_doctor_availability(
    doctor_id: int,
    identity: Identity = Depends(get_current_identity),
    doctors_service: DoctorsService = Depends(get_doctors_service),
):
    try:
        return [
            DayAvailabilityResponse(day=a.day, slots_available=a.slots_available, max_patients=a.max_patients)
            for a in doctors_service.availability(doctor_id)
        ]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving availability for doctor {doctor_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch availability")
