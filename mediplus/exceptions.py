from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Optional


class APIException(HTTPException):
    status_code_default = 400
    code = "error"
    message = "Request failed"

    def __init__(self, detail: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(
            status_code=status_code or self.status_code_default,
            detail=detail or self.message,
        )


# Precondition failures: expected, user-actionable, never retried

class DoctorUnavailable(APIException):
    code = "doctor_unavailable"
    message = "Doctor is not available on this day"


class CapacityExceeded(APIException):
    status_code_default = 409
    code = "capacity_exceeded"
    message = "No slots available for this day"


class DuplicateBooking(APIException):
    status_code_default = 409
    code = "duplicate_booking"
    message = "You already have an appointment with this doctor on this day"


class SerialsExhausted(APIException):
    status_code_default = 409
    code = "serials_exhausted"
    message = "No serial numbers available for this day"


class NotFound(APIException):
    status_code_default = 404
    code = "not_found"
    message = "Not found"


class TooLateToCancel(APIException):
    code = "too_late_to_cancel"
    message = "Cannot cancel within 24 hours of the appointment. Please contact the hospital directly."


class WrongDay(APIException):
    code = "wrong_day"
    message = "Prescriptions can only be written for today's appointments"


class DuplicatePrescription(APIException):
    status_code_default = 409
    code = "duplicate_prescription"
    message = "Prescription already exists for this appointment"


class ValidationError(APIException):
    code = "validation_error"
    message = "Invalid request"


class StorageFailure(APIException):
    status_code_default = 500
    code = "storage_failure"
    message = "Storage operation failed"


class RecommendationFailed(APIException):
    status_code_default = 502
    code = "recommendation_failed"
    message = "Doctor recommendation failed"


class SlotConflict(Exception):
    """A concurrent booking claimed the same serial or patient slot first."""


def create_error_response(error_message: str, code: Optional[str] = None) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": None,
        "error": error_message,
        "code": code,
    }


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.detail, getattr(exc, "code", None)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies share the error envelope of ValidationError"""
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg')}" if field else ValidationError.message
    return JSONResponse(
        status_code=ValidationError.status_code_default,
        content=create_error_response(message, ValidationError.code),
    )
