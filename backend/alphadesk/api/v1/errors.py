"""
Service error -> HTTP status mapping shared by the endpoint modules.
"""

from fastapi import HTTPException

from alphadesk.services.base import (
    DataNotFoundError,
    ExternalAPIError,
    ServiceError,
    ValidationError,
)


def to_http_exception(error: ServiceError) -> HTTPException:
    """Translate a service error into the matching HTTP error."""
    if isinstance(error, DataNotFoundError):
        return HTTPException(status_code=404, detail=error.message)
    if isinstance(error, ValidationError):
        return HTTPException(status_code=400, detail=error.message)
    if isinstance(error, ExternalAPIError):
        return HTTPException(status_code=502, detail=error.message)
    return HTTPException(status_code=500, detail=error.message)
