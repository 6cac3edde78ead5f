"""Operation status enumeration."""

from enum import Enum


class OperationStatus(Enum):
    """Outcome classes for provider calls and health checks.

    Attributes:
        SUCCESS: Call completed
        TRANSIENT_ERROR: Worth retrying later (network, timeout, rate limit, 5xx)
        PERMANENT_ERROR: Retrying will not help (bad request, rejected payload)
        UNAUTHORIZED: Provider rejected our credentials
        NOT_FOUND: Target no longer exists (expired push subscription)
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
