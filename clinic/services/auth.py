"""
Login and registration service

Password checks compare unsalted SHA-256 digests against the stored hash.
"""
from typing import Optional

from clinic.core.security import hash_password, verify_password
from clinic.database.schemas import Doctor, Patient
from clinic.database.store import RecordStore

MIN_PASSWORD_LENGTH = 8


class RegistrationError(ValueError):
    pass


def authenticate_patient(store: RecordStore, registered_id: str, password: str) -> Optional[Patient]:
    """
    Log a patient in by registered ID number

    Returns None for unknown IDs, walk-in records without a password, or a wrong password.
    """
    registered_id = registered_id.strip()
    if not registered_id or not password:
        return None
    patient = store.get_patient_by_registered_id(registered_id)
    if patient.is_empty() or not verify_password(password, patient.hashed_password):
        return None
    return patient


def authenticate_doctor(store: RecordStore, doctor_id: str, password: str) -> Optional[Doctor]:
    doctor_id = doctor_id.strip()
    if not doctor_id or not password:
        return None
    doctor = store.get_doctor_by_username(doctor_id)
    if doctor.is_empty() or not verify_password(password, doctor.hashed_password):
        return None
    return doctor


def register_patient(
    store: RecordStore,
    name: str,
    registered_id: str,
    password: str,
    confirm_password: str,
    medical_history: str = "",
) -> Patient:
    """
    Register a new patient account

    Args:
        store: Record store to write to
        name: Full name
        registered_id: Registered ID number, used as the login username
        password: Plaintext password (at least 8 characters)
        confirm_password: Must equal password
        medical_history: Optional free text

    Returns:
        The stored Patient with its generated system_id

    Raises:
        RegistrationError: if a field is missing, the passwords differ or are too short,
            or the registered ID is already taken
    """
    name = name.strip()
    registered_id = registered_id.strip()
    medical_history = medical_history.strip()

    if not name or not registered_id or not password or not confirm_password:
        raise RegistrationError("Full name, registered ID and password are required")
    if password != confirm_password:
        raise RegistrationError("Passwords do not match")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise RegistrationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not store.get_patient_by_registered_id(registered_id).is_empty():
        raise RegistrationError("A patient with this registered ID already exists")

    patient = Patient(
        system_id=store.generate_new_patient_id(),
        registered_id_number=registered_id,
        name=name,
        hashed_password=hash_password(password),
        medical_history=medical_history,
    )
    if not store.add_patient(patient):
        raise RegistrationError("Registration failed, the patient could not be saved")
    return patient
