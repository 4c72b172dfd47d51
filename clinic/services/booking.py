"""
Appointment booking service

Slot listing, patient bookings, doctor walk-ins, cancellations and status changes.
The store only rejects double bookings; everything else (slot grid, ownership,
allowed status labels) is checked here.
"""
from datetime import date as date_cls, datetime, timedelta
from typing import List, Optional, Set

from clinic.database.schemas import Appointment, Doctor, Patient
from clinic.database.store import (
    CANCELLED_BY_CLINIC,
    CANCELLED_BY_USER,
    RecordStore,
    is_cancelled_status,
)

DEFAULT_TIME_SLOTS = [
    "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
    "14:00", "14:30", "15:00", "15:30", "16:00", "16:30",
]

# Labels a doctor may assign from the schedule view
APPOINTMENT_STATUSES = ["Booked", "Confirmed", "Completed", "No Show", "Rescheduled"]

BOOKED = "Booked"
BOOKED_WALK_IN = "Booked (Walk-in)"

# Today's slots starting within this window are no longer offered
BOOKING_BUFFER = timedelta(minutes=5)

# Statuses (lowercased) left out of a patient's upcoming list
CLOSED_STATUSES = {CANCELLED_BY_USER.lower(), CANCELLED_BY_CLINIC.lower(), "completed"}


class BookingError(ValueError):
    pass


class RecordNotFoundError(BookingError):
    pass


class SlotUnavailableError(BookingError):
    pass


def _parse_date(value: str) -> date_cls:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise BookingError("date must be in YYYY-MM-DD format")


def _check_time(value: str) -> str:
    try:
        datetime.strptime(value, "%H:%M")
    except ValueError:
        raise BookingError("time must be in HH:MM format")
    return value


def _require_patient(store: RecordStore, patient_id: str) -> Patient:
    patient = store.get_patient_by_id(patient_id)
    if patient.is_empty():
        raise RecordNotFoundError(f"Patient {patient_id} not found")
    return patient


def _require_doctor(store: RecordStore, doctor_id: str) -> Doctor:
    doctor = store.get_doctor_by_id(doctor_id)
    if doctor.is_empty():
        raise RecordNotFoundError(f"Doctor {doctor_id} not found")
    return doctor


def _require_appointment(store: RecordStore, appointment_id: str) -> Appointment:
    appointment = store.get_appointment_by_id(appointment_id)
    if appointment.is_empty():
        raise RecordNotFoundError(f"Appointment {appointment_id} not found")
    return appointment


def _booked_times(store: RecordStore, doctor_id: str, date: str) -> Set[str]:
    """Times held by a non-cancelled appointment for a doctor on a date"""
    return {
        a.time for a in store.get_appointments_by_date(date, doctor_id)
        if not is_cancelled_status(a.status)
    }


def list_specializations(store: RecordStore) -> List[str]:
    """Distinct specializations in roster order"""
    seen: List[str] = []
    for doctor in store.get_all_doctors():
        if doctor.specialization and doctor.specialization not in seen:
            seen.append(doctor.specialization)
    return seen


def doctors_for_specialization(store: RecordStore, specialization: str) -> List[Doctor]:
    return [d for d in store.get_all_doctors() if d.specialization == specialization]


def available_slots(store: RecordStore, doctor_id: str, date: str, now: Optional[datetime] = None) -> List[str]:
    """
    Free slots for a doctor on a date

    Args:
        store: Record store
        doctor_id: Doctor system id
        date: Date (format: YYYY-MM-DD)
        now: Current time, defaults to datetime.now()

    Returns:
        Default slots not held by a non-cancelled appointment; on today's date,
        slots starting within the booking buffer are dropped as well
    """
    day = _parse_date(date)
    now = now or datetime.now()

    booked = _booked_times(store, doctor_id, date)

    slots = []
    for slot in DEFAULT_TIME_SLOTS:
        if slot in booked:
            continue
        if day == now.date():
            start = datetime.combine(day, datetime.strptime(slot, "%H:%M").time())
            if start <= now + BOOKING_BUFFER:
                continue
        slots.append(slot)
    return slots


def book_appointment(store: RecordStore, patient_id: str, doctor_id: str, date: str, time: str) -> Appointment:
    """
    Book a slot for a registered patient

    Raises:
        RecordNotFoundError: unknown patient or doctor
        SlotUnavailableError: the doctor already has an active appointment at that date and time
    """
    _parse_date(date)
    _check_time(time)
    _require_patient(store, patient_id)
    _require_doctor(store, doctor_id)

    appointment = Appointment(
        appointment_id=store.generate_new_appointment_id(),
        patient_system_id=patient_id,
        doctor_system_id=doctor_id,
        date=date,
        time=time,
        status=BOOKED,
        notes="Booked by patient.",
    )
    if not store.add_appointment(appointment):
        raise SlotUnavailableError("Could not book appointment, the slot might have just been taken")
    return appointment


def add_walk_in(
    store: RecordStore,
    doctor_id: str,
    date: str,
    time: str,
    patient_name: str,
    registered_id: str = "",
) -> Appointment:
    """
    Add a walk-in appointment from the doctor's schedule

    Uses the patient with the given registered ID if there is one, otherwise creates a
    temporary patient record without a password.
    """
    _parse_date(date)
    _check_time(time)
    _require_doctor(store, doctor_id)
    patient_name = patient_name.strip()
    registered_id = registered_id.strip()
    if not patient_name:
        raise BookingError("Patient name is required")
    if time in _booked_times(store, doctor_id, date):
        raise SlotUnavailableError("Could not add walk-in appointment, the slot is taken")

    patient = store.get_patient_by_registered_id(registered_id) if registered_id else Patient()
    if patient.is_empty():
        system_id = store.generate_new_patient_id()
        patient = Patient(
            system_id=system_id,
            registered_id_number=registered_id or f"WALKIN-{system_id}",
            name=patient_name,
            hashed_password="",
            medical_history="Walk-in appointment.",
        )
        if not store.add_patient(patient):
            raise BookingError("Could not create temporary patient record for walk-in")

    appointment = Appointment(
        appointment_id=store.generate_new_appointment_id(),
        patient_system_id=patient.system_id,
        doctor_system_id=doctor_id,
        date=date,
        time=time,
        status=BOOKED_WALK_IN,
        notes="Added by doctor as walk-in.",
    )
    if not store.add_appointment(appointment):
        raise SlotUnavailableError("Could not add walk-in appointment, the slot is taken")
    return appointment


def cancel_appointment(
    store: RecordStore,
    appointment_id: str,
    by_clinic: bool = False,
    reason: str = "",
    patient_id: Optional[str] = None,
) -> Appointment:
    """
    Cancel by setting a cancellation status; the record itself is kept

    Clinic cancellations append the reason (if any) to the notes.
    """
    appointment = _require_appointment(store, appointment_id)
    if patient_id is not None and appointment.patient_system_id != patient_id:
        raise RecordNotFoundError(f"Appointment {appointment_id} not found for patient {patient_id}")
    if is_cancelled_status(appointment.status):
        raise BookingError("Appointment is already cancelled")

    updated = appointment.model_copy()
    if by_clinic:
        updated.status = CANCELLED_BY_CLINIC
        reason = reason.strip()
        if reason:
            updated.notes = f"{appointment.notes} Reason: {reason}".strip()
    else:
        updated.status = CANCELLED_BY_USER

    if not store.update_appointment(updated):
        raise BookingError("Could not cancel the appointment")
    return updated


def update_status(store: RecordStore, appointment_id: str, status: str, doctor_id: Optional[str] = None) -> Appointment:
    if status not in APPOINTMENT_STATUSES:
        raise BookingError(f"Status must be one of: {', '.join(APPOINTMENT_STATUSES)}")
    appointment = _require_appointment(store, appointment_id)
    if doctor_id is not None and appointment.doctor_system_id != doctor_id:
        raise RecordNotFoundError(f"Appointment {appointment_id} not found for doctor {doctor_id}")
    if appointment.status == status:
        raise BookingError(f"Appointment is already {status}")

    updated = appointment.model_copy(update={"status": status})
    if not store.update_appointment(updated):
        raise BookingError("Could not update appointment status")
    return updated


def appointment_history(store: RecordStore, patient_id: str) -> List[Appointment]:
    """All of a patient's appointments, cancelled ones included, ordered by date and time"""
    return sorted(store.get_appointments_by_patient_id(patient_id), key=lambda a: (a.date, a.time))


def upcoming_for_patient(store: RecordStore, patient_id: str, today: Optional[date_cls] = None) -> List[Appointment]:
    """
    A patient's upcoming appointments ordered by date and time

    Args:
        store: Record store
        patient_id: Patient system id
        today: Current date, defaults to date.today()

    Returns:
        Appointments dated today or later that are neither cancelled nor completed
    """
    today = today or date_cls.today()
    return [
        a for a in appointment_history(store, patient_id)
        if a.date >= today.isoformat() and a.status.lower() not in CLOSED_STATUSES
    ]

