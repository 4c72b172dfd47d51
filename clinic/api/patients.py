"""
Patient portal endpoints
"""
from typing import List
from fastapi import APIRouter, HTTPException, Request

from clinic.database.schemas import (
    Appointment,
    LoginRequest,
    PatientPublic,
    PatientRegistration,
    PatientUpdate,
)
from clinic.services.auth import RegistrationError, authenticate_patient, register_patient
from clinic.services.booking import appointment_history, upcoming_for_patient
from clinic.api.utils import get_store

router = APIRouter()


@router.post("/patients/register", response_model=PatientPublic)
async def register(registration: PatientRegistration, request: Request):
    """
    Register a patient account

    The system ID is generated; the registered ID number is what the patient logs in with.
    """
    store = get_store(request)
    try:
        patient = register_patient(
            store,
            name=registration.name,
            registered_id=registration.registered_id_number,
            password=registration.password,
            confirm_password=registration.confirm_password,
            medical_history=registration.medical_history,
        )
    except RegistrationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PatientPublic.from_record(patient)


@router.post("/patients/login", response_model=PatientPublic)
async def login(credentials: LoginRequest, request: Request):
    """
    Log in with registered ID number and password
    """
    store = get_store(request)
    patient = authenticate_patient(store, credentials.username, credentials.password)
    if patient is None:
        raise HTTPException(status_code=401, detail="Invalid registered ID or password")
    return PatientPublic.from_record(patient)


@router.get("/patients/{patient_id}", response_model=PatientPublic)
async def get_patient(patient_id: str, request: Request):
    store = get_store(request)
    patient = store.get_patient_by_id(patient_id)
    if patient.is_empty():
        raise HTTPException(status_code=404, detail="Patient not found")
    return PatientPublic.from_record(patient)


@router.patch("/patients/{patient_id}", response_model=PatientPublic)
async def update_patient(patient_id: str, patient_updates: PatientUpdate, request: Request):
    """
    Update patient name and/or medical history

    Uses latest values for any fields provided in the request.
    """
    store = get_store(request)
    existing = store.get_patient_by_id(patient_id)
    if existing.is_empty():
        raise HTTPException(status_code=404, detail="Patient not found")

    updates = patient_updates.model_dump(exclude_unset=True, exclude_none=True)
    merged = existing.model_copy(update=updates)
    if not store.update_patient(merged):
        raise HTTPException(status_code=500, detail="Could not save patient")
    return PatientPublic.from_record(merged)


@router.get("/patients/{patient_id}/appointments", response_model=List[Appointment])
async def get_patient_appointments(patient_id: str, request: Request):
    """
    List a patient's appointments (including cancelled ones) by date and time
    """
    store = get_store(request)
    if store.get_patient_by_id(patient_id).is_empty():
        raise HTTPException(status_code=404, detail="Patient not found")
    return appointment_history(store, patient_id)


@router.get("/patients/{patient_id}/appointments/upcoming", response_model=List[Appointment])
async def get_upcoming_appointments(patient_id: str, request: Request):
    """
    List a patient's appointments from today on, skipping cancelled and completed ones
    """
    store = get_store(request)
    if store.get_patient_by_id(patient_id).is_empty():
        raise HTTPException(status_code=404, detail="Patient not found")
    return upcoming_for_patient(store, patient_id)
