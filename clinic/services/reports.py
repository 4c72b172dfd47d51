"""
Doctor schedule reports (plain text)
"""
from datetime import date as date_cls, datetime
from typing import List, Optional

from clinic.database.schemas import Appointment, Doctor
from clinic.database.store import RecordStore

REPORT_TYPES = {
    "today": "Today's Booked Appointments",
    "date": "Appointments for Selected Date",
    "monthly": "Monthly Summary (Selected Month)",
}


def _appointment_lines(store: RecordStore, appointments: List[Appointment], with_date: bool = False) -> List[str]:
    lines = []
    for appointment in appointments:
        patient = store.get_patient_by_id(appointment.patient_system_id)
        when = f"{appointment.date} {appointment.time}" if with_date else appointment.time
        lines.append(
            f"- Time: {when}, Patient: {patient.name or 'N/A'} (ID: {appointment.patient_system_id}), "
            f"Status: {appointment.status}, Notes: {appointment.notes}"
        )
    return lines


def generate_report(
    store: RecordStore,
    doctor: Doctor,
    report_type: str,
    selected_date: date_cls,
    today: Optional[datetime] = None,
) -> str:
    """
    Build a plain-text report for a doctor

    Args:
        store: Record store
        doctor: Doctor the report is generated for
        report_type: 'today', 'date' or 'monthly'
        selected_date: Date picked in the schedule (used by 'date' and 'monthly')
        today: Generation timestamp, defaults to datetime.now()

    Returns:
        Report text

    Raises:
        ValueError: unknown report type
    """
    if report_type not in REPORT_TYPES:
        raise ValueError(f"report_type must be one of: {', '.join(REPORT_TYPES)}")
    today = today or datetime.now()

    lines = [
        f"Report Type: {REPORT_TYPES[report_type]}",
        f"Generated for: Dr. {doctor.name} (ID: {doctor.system_id})",
        f"Date Generated: {today.strftime('%Y-%m-%d %H:%M:%S')}",
        "",
    ]

    if report_type == "today":
        day = today.strftime("%Y-%m-%d")
        appointments = store.get_appointments_by_date(day, doctor.system_id)
        lines.append(f"Appointments for Today ({day}):")
    elif report_type == "date":
        day = selected_date.strftime("%Y-%m-%d")
        appointments = store.get_appointments_by_date(day, doctor.system_id)
        lines.append(f"Appointments for {day}:")
    else:
        month_prefix = selected_date.strftime("%Y-%m-")
        month_label = selected_date.strftime("%B %Y")
        appointments = [
            a for a in store.get_appointments_by_doctor_id(doctor.system_id)
            if a.date.startswith(month_prefix)
        ]
        lines.append(f"Summary for {month_label}:")
        lines.append(f"Total appointments in {month_label}: {len(appointments)}")

    if not appointments:
        lines.append("No appointments found for this selection.")
    else:
        lines.extend(_appointment_lines(store, appointments, with_date=report_type == "monthly"))

    return "\n".join(lines) + "\n"
