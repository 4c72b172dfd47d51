"""
Clinic data models

- Entity models mirror the flat record files column by column (field order = column order)
- Every entity field is a plain string defaulting to "" so an all-empty instance is the "not found" sentinel
- Request/response models live alongside for the API layer
- Pydantic provides automatic validation at the API boundary
"""
from typing import ClassVar, List, Optional
from pydantic import BaseModel, Field, field_validator
from datetime import datetime


class Record(BaseModel):
    """
    Base for flat string records persisted one per line
    """
    identity_field: ClassVar[str] = ""

    @classmethod
    def field_names(cls) -> List[str]:
        return list(cls.model_fields.keys())

    @classmethod
    def from_fields(cls, fields: List[str]) -> "Record":
        return cls(**dict(zip(cls.field_names(), fields)))

    def to_fields(self) -> List[str]:
        return [getattr(self, name) for name in self.field_names()]

    def is_empty(self) -> bool:
        """True for the sentinel returned by lookups that found nothing"""
        return not getattr(self, self.identity_field)


class Patient(Record):
    """
    Patient record (patients.txt)

    Walk-in patients created by a doctor have an empty hashed_password and cannot log in.
    """
    identity_field: ClassVar[str] = "system_id"

    system_id: str            = Field("", description="Internal patient identifier (e.g. 'pat101')")
    registered_id_number: str = Field("", description="User-supplied registered ID (e.g. national ID)")
    name: str                 = Field("", description="Patient full name")
    hashed_password: str      = Field("", description="SHA-256 hex digest of the password, empty for walk-ins")
    medical_history: str      = Field("", description="Free-text medical history")


class Doctor(Record):
    """
    Doctor record (doctors.txt)

    The system_id doubles as the login username.
    """
    identity_field: ClassVar[str] = "system_id"

    system_id: str       = Field("", description="Doctor identifier and username (e.g. 'doc001')")
    name: str            = Field("", description="Doctor name")
    hashed_password: str = Field("", description="SHA-256 hex digest of the password")
    specialization: str  = Field("", description="Free-text specialization, grouped by equality")


class Appointment(Record):
    """
    Appointment record (appointments.txt)
    """
    identity_field: ClassVar[str] = "appointment_id"

    appointment_id: str    = Field("", description="Appointment identifier (e.g. 'app1001')")
    patient_system_id: str = Field("", description="Patient system_id this appointment belongs to")
    doctor_system_id: str  = Field("", description="Doctor system_id this appointment is booked with")
    date: str              = Field("", description="Calendar date (format: YYYY-MM-DD)")
    time: str              = Field("", description="Time of day (format: HH:MM, 24-hour)")
    status: str            = Field("", description="Free-text status label (e.g. 'Booked', 'Cancelled by User')")
    notes: str             = Field("", description="Free-text notes")


# ---------------------------------------------------------------------------
# API models
# ---------------------------------------------------------------------------

def _check_date(value: str) -> str:
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise ValueError("date must be in YYYY-MM-DD format")
    return value


def _check_time(value: str) -> str:
    try:
        datetime.strptime(value, "%H:%M")
    except ValueError:
        raise ValueError("time must be in HH:MM format")
    return value


class PatientPublic(BaseModel):
    """
    Patient API response model (never exposes the password hash)
    """
    system_id: str
    registered_id_number: str
    name: str
    medical_history: str

    @classmethod
    def from_record(cls, patient: Patient) -> "PatientPublic":
        return cls(**patient.model_dump(exclude={"hashed_password"}))


class DoctorPublic(BaseModel):
    """
    Doctor API response model (never exposes the password hash)
    """
    system_id: str
    name: str
    specialization: str

    @classmethod
    def from_record(cls, doctor: Doctor) -> "DoctorPublic":
        return cls(**doctor.model_dump(exclude={"hashed_password"}))


class PatientRegistration(BaseModel):
    name: str                  = Field(..., description="Patient full name")
    registered_id_number: str  = Field(..., description="Registered ID number used to log in")
    password: str              = Field(..., description="Plaintext password (min 8 characters)")
    confirm_password: str      = Field(..., description="Must match password")
    medical_history: str       = Field("", description="Optional medical history")


class PatientUpdate(BaseModel):
    """
    Patient update model (all fields optional)
    """
    name: Optional[str]            = Field(None, description="Patient full name")
    medical_history: Optional[str] = Field(None, description="Free-text medical history")


class LoginRequest(BaseModel):
    username: str = Field(..., description="Registered ID (patients) or system ID (doctors)")
    password: str = Field(..., description="Plaintext password")


class DoctorCreate(BaseModel):
    name: str           = Field(..., description="Doctor name")
    password: str       = Field(..., description="Plaintext password")
    specialization: str = Field(..., description="Specialization label")


class BookingRequest(BaseModel):
    patient_system_id: str = Field(..., description="Patient booking the appointment")
    doctor_system_id: str  = Field(..., description="Doctor to book with")
    date: str              = Field(..., description="Date (format: YYYY-MM-DD)")
    time: str              = Field(..., description="Time slot (format: HH:MM)")

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        return _check_date(value)

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return _check_time(value)


class WalkInRequest(BaseModel):
    doctor_system_id: str     = Field(..., description="Doctor adding the walk-in")
    date: str                 = Field(..., description="Date (format: YYYY-MM-DD)")
    time: str                 = Field(..., description="Time (format: HH:MM)")
    patient_name: str         = Field(..., description="Walk-in patient name")
    registered_id_number: str = Field("", description="Registered ID if known, blank for a temporary record")

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        return _check_date(value)

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return _check_time(value)


class CancelRequest(BaseModel):
    by_clinic: bool                   = Field(False, description="Cancelled by the clinic rather than the patient")
    reason: str                       = Field("", description="Optional reason (clinic cancellations)")
    patient_system_id: Optional[str]  = Field(None, description="When set, must own the appointment")


class StatusUpdate(BaseModel):
    status: str                      = Field(..., description="New status label")
    doctor_system_id: Optional[str]  = Field(None, description="When set, must own the appointment")


class Report(BaseModel):
    report_type: str
    content: str
