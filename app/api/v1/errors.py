"""Map domain errors to HTTP responses."""

from fastapi import HTTPException, status

from app.services.errors import (
    NotFoundError,
    PaymentProcessorError,
    PaymentProcessorNotConfiguredError,
    PermissionDeniedError,
    PermitRenderError,
    PortalError,
    PreconditionError,
)


def to_http_exception(e: PortalError) -> HTTPException:
    """not found -> 404, permission -> 403, precondition -> 400, processor -> 503/502, else 500."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    if isinstance(e, PermissionDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    if isinstance(e, PreconditionError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    if isinstance(e, PaymentProcessorNotConfiguredError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)
    if isinstance(e, PaymentProcessorError):
        # A 4xx other than 401 is a refused request (e.g. card declined), not an outage.
        rejected = e.status_code is not None and 400 <= e.status_code < 500 and e.status_code != 401
        code = status.HTTP_400_BAD_REQUEST if rejected else status.HTTP_502_BAD_GATEWAY
        return HTTPException(status_code=code, detail=e.message)
    if isinstance(e, PermitRenderError):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
