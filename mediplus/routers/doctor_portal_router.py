from typing import List
from fastapi import APIRouter, Depends, HTTPException
import logging

from ..auth import get_current_doctor
from ..deps import get_doctors_service, get_prescriptions_service
from ..application.ports.prescriptions_repo import MedicineDto
from ..application.services.doctors_service import DoctorsService
from ..application.services.prescriptions_service import PrescriptionsService
from ..scheduling import format_minutes, minutes_of_day
from ..schemas.common.common import ErrorResponse
from ..schemas.doctors.doctor import DoctorDayQueueResponse, DoctorQueueAppointment
from ..schemas.prescriptions.prescription import MedicineOut, PrescriptionCreate, PrescriptionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/doctor", tags=["Doctor Portal"])


@router.get("/appointments", response_model=List[DoctorDayQueueResponse])
def get_doctor_appointments(
    doctor_id: int = Depends(get_current_doctor),
    doctors_service: DoctorsService = Depends(get_doctors_service),
):
    try:
        result = []
        for group in doctors_service.daily_queue(doctor_id):
            s = group.schedule
            result.append(DoctorDayQueueResponse(
                day=s.day,
                max_patients=s.max_patients,
                start_time=format_minutes(minutes_of_day(s.start_time)),
                avg_time_per_patient=s.avg_time_per_patient,
                appointments=[
                    DoctorQueueAppointment(
                        appointment_id=e.row.appointment.id,
                        serial_no=e.row.appointment.serial_no,
                        patient_name=e.row.patient_name,
                        patient_id=e.row.appointment.patient_id,
                        appointment_date=e.row.appointment.appointment_date,
                        status=e.row.appointment.status,
                        estimated_time=format_minutes(e.estimated_minutes),
                    )
                    for e in group.entries
                ],
            ))
        return result
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving appointments for doctor {doctor_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch appointments")


@router.post(
    "/prescription",
    response_model=PrescriptionResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def create_prescription(
    payload: PrescriptionCreate,
    doctor_id: int = Depends(get_current_doctor),
    prescriptions_service: PrescriptionsService = Depends(get_prescriptions_service),
):
    try:
        result = prescriptions_service.complete_with_prescription(
            doctor_id,
            payload.appointment_id,
            [MedicineDto(**m.model_dump()) for m in payload.medicines],
            payload.additional_notes,
        )
        return PrescriptionResponse(
            prescription_id=result.prescription_id,
            appointment_id=result.appointment_id,
            medicines=[MedicineOut(**vars(m)) for m in result.medicines],
            additional_notes=result.additional_notes,
            status=result.status,
        )
    except HTTPException as e:
        if e.status_code < 500:
            logger.warning(f"Prescription for appointment {payload.appointment_id} rejected: {e.detail}")
        raise
    except Exception as e:
        logger.error(f"Error creating prescription: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create prescription")
