# Routers package
from . import appointments_router
from . import doctors_router
from . import doctor_portal_router
from . import recommend_router
from . import prescriptions_router

__all__ = [
    "appointments_router",
    "doctors_router",
    "doctor_portal_router",
    "recommend_router",
    "prescriptions_router",
]
