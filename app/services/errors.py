"""Domain exceptions raised by services and translated to HTTP status codes by the API layer."""


class PortalError(Exception):
    """Base class for permit portal domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(PortalError):
    """Raised when an application, user or payment does not exist."""


class PermissionDeniedError(PortalError):
    """Raised when the caller's role or ownership does not allow the action."""


class PreconditionError(PortalError):
    """Raised when a required field is missing or invalid, or the record is in the wrong state."""


class InvalidTransitionError(PreconditionError):
    """Raised when an application status does not allow the requested action."""

    def __init__(self, message: str, current: str | None, action: str) -> None:
        self.current = current
        self.action = action
        super().__init__(message)


class PermitRenderError(PortalError):
    """Raised when the permit document cannot be rendered or stored."""


class PaymentProcessorNotConfiguredError(PortalError):
    """Raised when card payment is requested but the processor settings are missing."""


class PaymentProcessorError(PortalError):
    """Raised when the card payment processor rejects a request or is unreachable."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
