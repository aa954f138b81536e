"""Map domain errors to HTTP responses.

Registered as the REST framework EXCEPTION_HANDLER so views can let domain
errors propagate. Only the error code and user-safe message are exposed.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from studio.domain.errors import (
    ConflictError,
    DomainError,
    InvalidInputError,
    NoSessionsRemainingError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = [
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (NoSessionsRemainingError, status.HTTP_422_UNPROCESSABLE_ENTITY),
]


def status_for(error: DomainError) -> int:
    for error_type, http_status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def domain_exception_handler(exc, context):
    if isinstance(exc, DomainError):
        logger.info("Request rejected: %s", exc)
        return Response(
            {"error": exc.code.value, "message": exc.message},
            status=status_for(exc),
        )
    return exception_handler(exc, context)
