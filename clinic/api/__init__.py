# API routes
from fastapi import APIRouter
from clinic.api.patients import router as patients_router
from clinic.api.doctors import router as doctors_router
from clinic.api.appointments import router as appointments_router

# Combine all routers
router = APIRouter()
router.include_router(patients_router)
router.include_router(doctors_router)
router.include_router(appointments_router)

__all__ = ["router"]
