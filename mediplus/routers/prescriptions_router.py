from typing import List
from fastapi import APIRouter, Depends, HTTPException
import logging

from ..auth import get_current_patient
from ..deps import get_prescriptions_service
from ..application.services.prescriptions_service import PrescriptionsService
from ..schemas.prescriptions.prescription import MedicineOut, PatientPrescriptionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/prescriptions", tags=["Prescriptions"])


@router.get("/my", response_model=List[PatientPrescriptionResponse])
def get_my_prescriptions(
    patient_id: int = Depends(get_current_patient),
    prescriptions_service: PrescriptionsService = Depends(get_prescriptions_service),
):
    try:
        return [
            PatientPrescriptionResponse(
                prescription_id=p.prescription_id,
                appointment_id=p.appointment_id,
                additional_notes=p.additional_notes,
                created_at=p.created_at,
                appointment_date=p.appointment_date,
                day=p.day,
                doctor_name=p.doctor_name,
                doctor_sector=p.doctor_sector,
                specialty=p.specialty,
                medicines=[MedicineOut(**vars(m)) for m in p.medicines],
            )
            for p in prescriptions_service.list_for_patient(patient_id)
        ]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving prescriptions for patient {patient_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch prescriptions")
