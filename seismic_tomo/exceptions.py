"""Exceptions raised by the Seismic swipe client."""

from typing import Optional


class SwipeClientError(Exception):
    """Base exception for all swipe client errors."""
    pass


class BackendError(SwipeClientError):
    """Raised when a Seismic backend endpoint does not answer with a 2xx."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[str] = None,
    ):
        self.endpoint = endpoint
        self.status_code = status_code
        self.context = context
        details = []
        if endpoint:
            details.append(f"endpoint={endpoint}")
        if status_code is not None:
            details.append(f"status={status_code}")
        if context:
            details.append(f"context={context}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)


class DataAvailabilityError(BackendError):
    """Raised when the backend refuses to attest to a swipe."""
    pass


class RegistrationError(SwipeClientError):
    """Raised when the on-chain swipe registration fails or returns nothing."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
