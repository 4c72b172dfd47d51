"""
Appointment endpoints

Booking, walk-ins, cancellation and status updates. Cancellation never removes a
record, it only changes the status so the slot can be booked again.
"""
from fastapi import APIRouter, HTTPException, Request

from clinic.database.schemas import (
    Appointment,
    BookingRequest,
    CancelRequest,
    StatusUpdate,
    WalkInRequest,
)
from clinic.services.booking import (
    BookingError,
    add_walk_in,
    book_appointment,
    cancel_appointment,
    update_status,
)
from clinic.api.utils import booking_http_error, get_store

router = APIRouter()


@router.post("/appointments", response_model=Appointment)
async def book(booking: BookingRequest, request: Request):
    """
    Book an appointment for a registered patient

    Returns 409 if the doctor already has an active appointment in that slot.
    """
    try:
        return book_appointment(
            get_store(request),
            patient_id=booking.patient_system_id,
            doctor_id=booking.doctor_system_id,
            date=booking.date,
            time=booking.time,
        )
    except BookingError as e:
        raise booking_http_error(e)


@router.post("/appointments/walk-in", response_model=Appointment)
async def walk_in(walk_in_request: WalkInRequest, request: Request):
    """
    Add a walk-in appointment (doctor flow)

    Creates a temporary patient record when the registered ID is blank or unknown.
    """
    try:
        return add_walk_in(
            get_store(request),
            doctor_id=walk_in_request.doctor_system_id,
            date=walk_in_request.date,
            time=walk_in_request.time,
            patient_name=walk_in_request.patient_name,
            registered_id=walk_in_request.registered_id_number,
        )
    except BookingError as e:
        raise booking_http_error(e)


@router.get("/appointments/{appointment_id}", response_model=Appointment)
async def get_appointment(appointment_id: str, request: Request):
    appointment = get_store(request).get_appointment_by_id(appointment_id)
    if appointment.is_empty():
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment


@router.post("/appointments/{appointment_id}/cancel", response_model=Appointment)
async def cancel(appointment_id: str, cancel_request: CancelRequest, request: Request):
    try:
        return cancel_appointment(
            get_store(request),
            appointment_id,
            by_clinic=cancel_request.by_clinic,
            reason=cancel_request.reason,
            patient_id=cancel_request.patient_system_id,
        )
    except BookingError as e:
        raise booking_http_error(e)


@router.patch("/appointments/{appointment_id}/status", response_model=Appointment)
async def change_status(appointment_id: str, status_update: StatusUpdate, request: Request):
    try:
        return update_status(
            get_store(request),
            appointment_id,
            status_update.status,
            doctor_id=status_update.doctor_system_id,
        )
    except BookingError as e:
        raise booking_http_error(e)
