from fastapi import APIRouter, Depends, HTTPException
import logging

from ..auth import get_current_patient
from ..deps import get_recommendation_service
from ..application.services.recommendation_service import RecommendationService
from ..schemas.doctors.doctor import RecommendRequest, RecommendResponse, ScheduleAvailability

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Recommendation"])


@router.post("/recommend", response_model=RecommendResponse)
def recommend_doctor(
    payload: RecommendRequest,
    patient_id: int = Depends(get_current_patient),
    recommendation_service: RecommendationService = Depends(get_recommendation_service),
):
    try:
        rec = recommendation_service.recommend(payload.description)
        return RecommendResponse(
            doctor_id=rec.doctor.id,
            name=rec.doctor.full_name,
            specialty=rec.doctor.specialty,
            sector=rec.doctor.sector,
            schedule=[
                ScheduleAvailability(
                    day=a.day,
                    total_capacity=a.max_patients,
                    booked_count=a.booked_count,
                    next_serial=a.next_serial,
                    status=a.status,
                )
                for a in rec.schedule
            ],
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Recommendation error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Processing failed")
