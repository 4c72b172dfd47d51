"""
Utility functions for API endpoints
"""
from fastapi import HTTPException, Request

from clinic.database.store import RecordStore
from clinic.services.booking import BookingError, RecordNotFoundError, SlotUnavailableError


def get_store(request: Request) -> RecordStore:
    """
    Return the record store created at application startup
    """
    return request.app.state.store


def booking_http_error(exc: BookingError) -> HTTPException:
    """
    Map booking service errors to HTTP errors

    Unknown records -> 404, taken slots -> 409, anything else -> 400
    """
    if isinstance(exc, RecordNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, SlotUnavailableError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))
