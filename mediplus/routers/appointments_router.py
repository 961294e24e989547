from typing import List
from fastapi import APIRouter, Depends, HTTPException
import logging

from ..auth import get_current_patient
from ..deps import get_appointments_service
from ..application.services.appointments_service import AppointmentsService, PatientAppointmentView
from ..schemas.appointments.appointment import AppointmentCreate, AppointmentResponse, PatientAppointmentResponse
from ..schemas.common.common import ErrorResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])


def _patient_view_response(view: PatientAppointmentView) -> PatientAppointmentResponse:
    a = view.row.appointment
    out = PatientAppointmentResponse(
        appointment_id=a.id,
        doctor_id=a.doctor_id,
        day=a.day,
        serial_no=a.serial_no,
        appointment_date=a.appointment_date,
        status=a.status,
        doctor_name=view.row.doctor_name,
        hospital_name=view.row.hospital_name,
        hospital_lat=view.row.hospital_lat,
        hospital_lng=view.row.hospital_lng,
        specialty=view.row.specialty,
    )
    if view.estimate:
        out.estimated_time = view.estimate.estimated_time
        out.estimated_minutes = view.estimate.estimated_minutes
        out.queue_position = view.estimate.queue_position
        out.patients_ahead = view.estimate.patients_ahead
    return out


@router.post(
    "/book",
    response_model=AppointmentResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def book_appointment(
    appointment_data: AppointmentCreate,
    patient_id: int = Depends(get_current_patient),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        appt = appt_service.book(patient_id, appointment_data.doctor_id, appointment_data.day.value)
        return AppointmentResponse(
            appointment_id=appt.id,
            doctor_id=appt.doctor_id,
            day=appt.day,
            serial_no=appt.serial_no,
            appointment_date=appt.appointment_date,
            status=appt.status,
        )
    except HTTPException as e:
        if e.status_code < 500:
            logger.warning(f"Booking rejected for patient {patient_id}: {e.detail}")
        raise
    except Exception as e:
        logger.error(f"Error booking appointment: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Booking failed")


@router.get("/my", response_model=List[PatientAppointmentResponse])
def get_my_appointments(
    patient_id: int = Depends(get_current_patient),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        return [_patient_view_response(v) for v in appt_service.list_for_patient(patient_id)]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving appointments: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch appointments")


@router.patch(
    "/{appointment_id}/cancel",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def cancel_appointment(
    appointment_id: int,
    patient_id: int = Depends(get_current_patient),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    try:
        appt_service.cancel(patient_id, appointment_id)
        return MessageResponse(message="Appointment cancelled successfully")
    except HTTPException as e:
        if e.status_code < 500:
            logger.warning(f"Cancellation of appointment {appointment_id} rejected: {e.detail}")
        raise
    except Exception as e:
        logger.error(f"Error cancelling appointment {appointment_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to cancel appointment")
