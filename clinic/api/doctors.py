"""
Doctor portal endpoints
"""
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Request

from clinic.core.security import hash_password
from clinic.database.schemas import (
    Appointment,
    Doctor,
    DoctorCreate,
    DoctorPublic,
    LoginRequest,
    Report,
)
from clinic.services.auth import authenticate_doctor
from clinic.services.booking import (
    BookingError,
    available_slots,
    doctors_for_specialization,
    list_specializations,
)
from clinic.services.reports import generate_report
from clinic.api.utils import booking_http_error, get_store

router = APIRouter()


def _require_doctor(request: Request, doctor_id: str) -> Doctor:
    doctor = get_store(request).get_doctor_by_id(doctor_id)
    if doctor.is_empty():
        raise HTTPException(status_code=404, detail="Doctor not found")
    return doctor


@router.get("/doctors", response_model=List[DoctorPublic])
async def list_doctors(request: Request, specialization: Optional[str] = None):
    """
    List doctors, optionally only those with the given specialization
    """
    store = get_store(request)
    if specialization:
        doctors = doctors_for_specialization(store, specialization)
    else:
        doctors = store.get_all_doctors()
    return [DoctorPublic.from_record(d) for d in doctors]


@router.get("/doctors/specializations", response_model=List[str])
async def get_specializations(request: Request):
    return list_specializations(get_store(request))


@router.post("/doctors", response_model=DoctorPublic)
async def add_doctor(doctor_data: DoctorCreate, request: Request):
    """
    Add a doctor to the roster (administrative)

    The system ID, which is also the login username, is generated.
    """
    store = get_store(request)
    if not doctor_data.name.strip() or not doctor_data.password:
        raise HTTPException(status_code=400, detail="Name and password are required")

    doctor = Doctor(
        system_id=store.generate_new_doctor_id(),
        name=doctor_data.name.strip(),
        hashed_password=hash_password(doctor_data.password),
        specialization=doctor_data.specialization.strip(),
    )
    if not store.add_doctor(doctor):
        raise HTTPException(status_code=409, detail="Doctor could not be added")
    return DoctorPublic.from_record(doctor)


@router.post("/doctors/login", response_model=DoctorPublic)
async def login(credentials: LoginRequest, request: Request):
    store = get_store(request)
    doctor = authenticate_doctor(store, credentials.username, credentials.password)
    if doctor is None:
        raise HTTPException(status_code=401, detail="Invalid doctor ID or password")
    return DoctorPublic.from_record(doctor)


@router.get("/doctors/{doctor_id}", response_model=DoctorPublic)
async def get_doctor(doctor_id: str, request: Request):
    return DoctorPublic.from_record(_require_doctor(request, doctor_id))


@router.get("/doctors/{doctor_id}/schedule", response_model=List[Appointment])
async def get_schedule(doctor_id: str, date: str, request: Request):
    """
    All appointments of a doctor on a date, cancelled ones included
    """
    _require_doctor(request, doctor_id)
    return get_store(request).get_appointments_by_date(date, doctor_id)


@router.get("/doctors/{doctor_id}/available-slots", response_model=List[str])
async def get_available_slots(doctor_id: str, date: str, request: Request):
    _require_doctor(request, doctor_id)
    try:
        return available_slots(get_store(request), doctor_id, date)
    except BookingError as e:
        raise booking_http_error(e)


@router.get("/doctors/{doctor_id}/report", response_model=Report)
async def get_report(doctor_id: str, request: Request, report_type: str = "today", date: Optional[str] = None):
    """
    Plain-text schedule report

    report_type: 'today', 'date' (uses `date`) or 'monthly' (month of `date`)
    """
    doctor = _require_doctor(request, doctor_id)
    try:
        selected = datetime.strptime(date, "%Y-%m-%d").date() if date else datetime.now().date()
    except ValueError:
        raise HTTPException(status_code=400, detail="date must be in YYYY-MM-DD format")

    try:
        content = generate_report(get_store(request), doctor, report_type, selected)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Report(report_type=report_type, content=content)
