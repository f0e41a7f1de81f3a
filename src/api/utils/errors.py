"""Mapping of service errors onto HTTP responses."""

from fastapi import HTTPException, status

from exceptions import (
    AccessDeniedError,
    DatabaseError,
    InvalidInputError,
    NotFoundError,
    ServiceError,
    UpstreamFailureError,
)

_STATUS_CODES = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    AccessDeniedError: status.HTTP_403_FORBIDDEN,
    UpstreamFailureError: status.HTTP_502_BAD_GATEWAY,
    DatabaseError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(error: ServiceError) -> HTTPException:
    """Convert a service error into an HTTPException with a ``{message, field}`` detail."""
    for error_type, status_code in _STATUS_CODES.items():
        if isinstance(error, error_type):
            break
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        return HTTPException(status_code=status_code, detail={"message": "Internal server error"})
    return HTTPException(status_code=status_code, detail=error.to_detail())


def internal_server_error() -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail={"message": "Internal server error"})
