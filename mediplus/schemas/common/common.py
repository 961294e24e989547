# mediplus/schemas/common/common.py
from pydantic import BaseModel
from typing import Optional

__all__ = ["ErrorResponse", "MessageResponse", "HealthResponse"]

class ErrorResponse(BaseModel):
    success: bool = False
    data: None = None
    error: str
    code: Optional[str] = None

class MessageResponse(BaseModel):
    message: str

class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    timestamp: str
