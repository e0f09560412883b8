"""Maps domain errors to HTTP responses.

Registered as the REST framework exception handler, so views can let
domain errors propagate.
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from events.domain.errors import DomainError, ErrorCode

ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REGISTRATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_REGISTRATION_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DATE_INVALID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CAPACITY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_PRICE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_DRAFT: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_STARTED: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_NOT_STARTED: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_CANCELLED: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_COMPLETED: status.HTTP_409_CONFLICT,
    ErrorCode.CAPACITY_TOO_LOW: status.HTTP_409_CONFLICT,
    ErrorCode.HAS_REGISTRATIONS: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_NOT_PUBLISHED: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_FULL: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_PAST: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_REGISTRATION: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_OWNER: status.HTTP_403_FORBIDDEN,
}


def domain_error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "message": error.message},
        status=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


def exception_handler(exc, context):
    if isinstance(exc, DomainError):
        return domain_error_response(exc)
    return drf_exception_handler(exc, context)
