"""Bearer-token verification. Tokens are issued by the external auth service."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .config import settings

logger = logging.getLogger(__name__)

PATIENT = "patient"
DOCTOR = "doctor"

oauth2_scheme = HTTPBearer(auto_error=False)


@dataclass
class Identity:
    user_id: int
    role: str


def decode_jwt_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and verify JWT token"""
    if not settings.SECRET_KEY or settings.SECRET_KEY == "change-me-in-prod":
        logger.warning("JWT_SECRET_KEY not configured; rejecting token")
        return None
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def get_current_identity(credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme)) -> Identity:
    if not credentials or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Access token required")
    payload = decode_jwt_token(credentials.credentials)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        raise HTTPException(status_code=401, detail="Invalid token: invalid user ID format")
    return Identity(user_id=user_id, role=payload.get("role", PATIENT))


def get_current_patient(identity: Identity = Depends(get_current_identity)) -> int:
    if identity.role != PATIENT:
        raise HTTPException(status_code=403, detail="Patient access required")
    return identity.user_id


def get_current_doctor(identity: Identity = Depends(get_current_identity)) -> int:
    if identity.role != DOCTOR:
        raise HTTPException(status_code=403, detail="Doctor access required")
    return identity.user_id
