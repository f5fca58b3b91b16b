"""Translation of domain errors to HTTP responses."""

from fastapi import HTTPException
from starlette import status

from learnhub.domain.common.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    EntityNotFoundError,
    TransientError,
)

# Most specific first
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (TransientError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def http_error_for(error: DomainError) -> HTTPException:
    """Build the HTTPException for a domain error; anything unlisted is a 400."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=error.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)
