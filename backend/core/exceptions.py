import logging

from rest_framework import status
from rest_framework.exceptions import ParseError, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .errors import (
    BookingCoreError,
    Conflict,
    IdentifierSpaceExhausted,
    NotFound,
    RandomSourceUnavailable,
    StorageError,
)

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = "1"

STATUS_CODES = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Conflict, status.HTTP_400_BAD_REQUEST),
    (IdentifierSpaceExhausted, status.HTTP_503_SERVICE_UNAVAILABLE),
    (RandomSourceUnavailable, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def _status_for(exc: BookingCoreError) -> int:
    for error_class, status_code in STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def booking_exception_handler(exc, context):
    """Render core errors and DRF errors as ``{"error": ..., "details": ...}``."""

    if isinstance(exc, (ValidationError, ParseError)):
        return Response(
            {"error": "Invalid request data", "details": exc.detail},
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, BookingCoreError):
        status_code = _status_for(exc)
        if status_code >= 500:
            logger.error("%s: %s (%s)", type(exc).__name__, exc.message, exc.details or "no details")
        payload = {"error": exc.message}
        if exc.details:
            payload["details"] = exc.details
        response = Response(payload, status=status_code)
        if isinstance(exc, IdentifierSpaceExhausted):
            response["Retry-After"] = RETRY_AFTER_SECONDS
        return response

    response = exception_handler(exc, context)
    if response is not None and isinstance(response.data, dict) and "detail" in response.data:
        response.data = {"error": response.data["detail"]}
    return response
