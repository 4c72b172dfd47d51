"""
Basic configuration

- Data directory and default doctor password for the record store
- CORS origins for development and production
- Supports environment variables for deployment overrides
"""
import os

# Directory holding patients.txt, doctors.txt and appointments.txt
DATA_DIR = os.getenv("CLINIC_DATA_DIR", "data")

PATIENTS_FILE = "patients.txt"
DOCTORS_FILE = "doctors.txt"
APPOINTMENTS_FILE = "appointments.txt"

# Shared password for the seeded doctor roster (stored hashed)
DEFAULT_DOCTOR_PASSWORD = os.getenv("CLINIC_DEFAULT_DOCTOR_PASSWORD", "doctorpass")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Default localhost origins for development
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8080",
]

# Get additional CORS origins from environment variable
ADDITIONAL_CORS_ORIGINS = os.getenv("CORS_ORIGINS", "").split(",") if os.getenv("CORS_ORIGINS") else []

# Filter out empty strings from split
ADDITIONAL_CORS_ORIGINS = [origin.strip() for origin in ADDITIONAL_CORS_ORIGINS if origin.strip()]

# Combine default and additional origins
CORS_ORIGINS = DEFAULT_CORS_ORIGINS + ADDITIONAL_CORS_ORIGINS
