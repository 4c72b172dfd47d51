"""
Database module

Contains the record models (schemas), the delimited file codec and the record store.
"""

# Export schemas
from clinic.database.schemas import (
    Patient,
    Doctor,
    Appointment,
)

# Export the store and its helpers
from clinic.database.store import (
    RecordStore,
    CANCELLED_BY_USER,
    CANCELLED_BY_CLINIC,
    CANCELLATION_STATUSES,
    is_cancelled_status,
)

__all__ = [
    # Schemas
    "Patient",
    "Doctor",
    "Appointment",
    # Store
    "RecordStore",
    "CANCELLED_BY_USER",
    "CANCELLED_BY_CLINIC",
    "CANCELLATION_STATUSES",
    "is_cancelled_status",
]
