"""
Flat-file record store for patients, doctors and appointments

- Each collection is one delimited text file rewritten whole on every mutation
- Lookups that find nothing return an empty sentinel record, never raise
- Duplicate ids, slot conflicts and missing update targets return False
- Single-process use only: checks and writes are not isolated from other writers
"""
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Type, TypeVar

from clinic.core import config
from clinic.core.security import hash_password
from clinic.database.records import read_records, write_records
from clinic.database.schemas import Appointment, Doctor, Patient, Record

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)

# Statuses that free the slot, compared case-insensitively
CANCELLED_BY_USER = "Cancelled by User"
CANCELLED_BY_CLINIC = "Cancelled by Clinic"
CANCELLATION_STATUSES = (CANCELLED_BY_USER, CANCELLED_BY_CLINIC)

SEED_DOCTORS = [
    ("doc001", "Nancy", "General Medicine"),
    ("doc002", "Sarah", "Nutritionist"),
    ("doc003", "Mariam", "Nutritionist"),
    ("doc004", "Mohamed", "Heart Doctor"),
    ("doc005", "Magdy", "Heart Doctor"),
]

# (prefix, base, width): first generated id is prefix + (base + 1) zero-padded
PATIENT_ID_FORMAT = ("pat", 100, 3)
DOCTOR_ID_FORMAT = ("doc", 0, 3)
APPOINTMENT_ID_FORMAT = ("app", 1000, 4)


def is_cancelled_status(status: str) -> bool:
    return status.strip().lower() in {label.lower() for label in CANCELLATION_STATUSES}


def next_sequential_id(prefix: str, existing_ids: Iterable[str], base: int, width: int) -> str:
    """
    Next id after the highest numeric suffix seen for `prefix` (never below base + 1)
    """
    existing = set(existing_ids)
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
    highest = base
    for record_id in existing:
        match = pattern.match(record_id)
        if match:
            highest = max(highest, int(match.group(1)))

    number = highest + 1
    candidate = f"{prefix}{number:0{width}d}"
    while candidate in existing:
        number += 1
        candidate = f"{prefix}{number:0{width}d}"
    return candidate


class RecordStore:
    """
    CRUD access to the three clinic collections

    Construct once at startup and pass the instance to whatever needs it.
    """

    def __init__(
        self,
        data_dir: str = config.DATA_DIR,
        patients_file: str = config.PATIENTS_FILE,
        doctors_file: str = config.DOCTORS_FILE,
        appointments_file: str = config.APPOINTMENTS_FILE,
        default_doctor_password: str = config.DEFAULT_DOCTOR_PASSWORD,
    ):
        self.data_dir = Path(data_dir)
        self.patients_path = self.data_dir / patients_file
        self.doctors_path = self.data_dir / doctors_file
        self.appointments_path = self.data_dir / appointments_file

        # Rows dropped by the most recent load of each collection
        self.skipped_rows: Dict[str, int] = {"patients": 0, "doctors": 0, "appointments": 0}

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            for path in (self.patients_path, self.appointments_path):
                if not path.exists():
                    path.touch()
        except OSError as e:
            logger.warning(f"Could not prepare data directory {self.data_dir}: {e}")

        if not self.doctors_path.exists() or self.doctors_path.stat().st_size == 0:
            self._seed_doctors(default_doctor_password)

    def _seed_doctors(self, password: str):
        hashed = hash_password(password)
        doctors = [
            Doctor(system_id=system_id, name=name, hashed_password=hashed, specialization=specialization)
            for system_id, name, specialization in SEED_DOCTORS
        ]
        if self._save("doctors", self.doctors_path, doctors):
            logger.info(f"Seeded {len(doctors)} default doctors into {self.doctors_path}")

    # ------------------------------------------------------------------
    # Collection I/O
    # ------------------------------------------------------------------

    def _load(self, name: str, path: Path, model: Type[R]) -> List[R]:
        rows, skipped = read_records(str(path), len(model.field_names()))
        self.skipped_rows[name] = skipped
        return [model.from_fields(fields) for fields in rows]

    def _save(self, name: str, path: Path, records: List[Record]) -> bool:
        saved = write_records(str(path), [record.to_fields() for record in records])
        if not saved:
            logger.warning(f"Failed to persist {name} collection")
        return saved

    def _load_patients(self) -> List[Patient]:
        return self._load("patients", self.patients_path, Patient)

    def _load_doctors(self) -> List[Doctor]:
        return self._load("doctors", self.doctors_path, Doctor)

    def _load_appointments(self) -> List[Appointment]:
        return self._load("appointments", self.appointments_path, Appointment)

    # ------------------------------------------------------------------
    # Patients
    # ------------------------------------------------------------------

    def add_patient(self, patient: Patient) -> bool:
        patients = self._load_patients()
        for existing in patients:
            if (existing.system_id == patient.system_id
                    or existing.registered_id_number == patient.registered_id_number):
                logger.warning(
                    f"Patient with system id {patient.system_id} or registered id "
                    f"{patient.registered_id_number} already exists"
                )
                return False
        patients.append(patient)
        return self._save("patients", self.patients_path, patients)

    def get_patient_by_id(self, patient_id: str) -> Patient:
        for patient in self._load_patients():
            if patient.system_id == patient_id:
                return patient
        return Patient()

    def get_patient_by_registered_id(self, registered_id: str) -> Patient:
        for patient in self._load_patients():
            if patient.registered_id_number == registered_id:
                return patient
        return Patient()

    def get_all_patients(self) -> List[Patient]:
        return self._load_patients()

    def update_patient(self, patient: Patient) -> bool:
        patients = self._load_patients()
        for i, existing in enumerate(patients):
            if existing.system_id == patient.system_id:
                patients[i] = patient
                return self._save("patients", self.patients_path, patients)
        return False

    def generate_new_patient_id(self) -> str:
        prefix, base, width = PATIENT_ID_FORMAT
        return next_sequential_id(prefix, (p.system_id for p in self._load_patients()), base, width)

    # ------------------------------------------------------------------
    # Doctors
    # ------------------------------------------------------------------

    def get_doctor_by_id(self, doctor_id: str) -> Doctor:
        for doctor in self._load_doctors():
            if doctor.system_id == doctor_id:
                return doctor
        return Doctor()

    def get_doctor_by_username(self, username: str) -> Doctor:
        # Usernames are doctor system ids
        return self.get_doctor_by_id(username)

    def get_all_doctors(self) -> List[Doctor]:
        return self._load_doctors()

    def add_doctor(self, doctor: Doctor) -> bool:
        doctors = self._load_doctors()
        if any(existing.system_id == doctor.system_id for existing in doctors):
            logger.warning(f"Doctor with system id {doctor.system_id} already exists")
            return False
        doctors.append(doctor)
        return self._save("doctors", self.doctors_path, doctors)

    def generate_new_doctor_id(self) -> str:
        prefix, base, width = DOCTOR_ID_FORMAT
        return next_sequential_id(prefix, (d.system_id for d in self._load_doctors()), base, width)

    # ------------------------------------------------------------------
    # Appointments
    # ------------------------------------------------------------------

    def add_appointment(self, appointment: Appointment) -> bool:
        appointments = self._load_appointments()
        for existing in appointments:
            if existing.appointment_id == appointment.appointment_id:
                logger.warning(f"Appointment {appointment.appointment_id} already exists")
                return False
            if (existing.doctor_system_id == appointment.doctor_system_id
                    and existing.date == appointment.date
                    and existing.time == appointment.time
                    and not is_cancelled_status(existing.status)):
                logger.warning(
                    f"Duplicate appointment: doctor {appointment.doctor_system_id} already has "
                    f"an appointment at {appointment.date} {appointment.time}"
                )
                return False
        appointments.append(appointment)
        return self._save("appointments", self.appointments_path, appointments)

    def get_appointment_by_id(self, appointment_id: str) -> Appointment:
        for appointment in self._load_appointments():
            if appointment.appointment_id == appointment_id:
                return appointment
        return Appointment()

    def get_appointments_by_patient_id(self, patient_id: str) -> List[Appointment]:
        return [a for a in self._load_appointments() if a.patient_system_id == patient_id]

    def get_appointments_by_doctor_id(self, doctor_id: str) -> List[Appointment]:
        return [a for a in self._load_appointments() if a.doctor_system_id == doctor_id]

    def get_appointments_by_date(self, date: str, doctor_id: str = "") -> List[Appointment]:
        return [
            a for a in self._load_appointments()
            if a.date == date and (not doctor_id or a.doctor_system_id == doctor_id)
        ]

    def get_all_appointments(self) -> List[Appointment]:
        return self._load_appointments()

    def update_appointment(self, appointment: Appointment) -> bool:
        appointments = self._load_appointments()
        for i, existing in enumerate(appointments):
            if existing.appointment_id == appointment.appointment_id:
                appointments[i] = appointment
                return self._save("appointments", self.appointments_path, appointments)
        return False

    def generate_new_appointment_id(self) -> str:
        prefix, base, width = APPOINTMENT_ID_FORMAT
        return next_sequential_id(prefix, (a.appointment_id for a in self._load_appointments()), base, width)
