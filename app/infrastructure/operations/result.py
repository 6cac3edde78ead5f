"""Operation result dataclass.

Uniform result for provider calls (Twilio, web push, FCM, SMTP) and channel
health checks.
"""

from typing import Optional, Any, Dict
from dataclasses import dataclass

from infrastructure.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Uniform result returned from provider operations.

    Attributes:
        status: high-level outcome
        message: human-friendly message for logs and health output
        data: optional payload (provider response, message sid, ...)
        error_code: optional machine error code
        retry_after: seconds until retry when rate-limited
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        """Create an error result with an explicit status."""
        return cls(
            status=status,
            message=message,
            error_code=error_code,
            retry_after=retry_after,
            data=data,
        )

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        """Create a retryable error result (timeouts, rate limits, 5xx)."""
        return cls.error(
            OperationStatus.TRANSIENT_ERROR, message, error_code, retry_after
        )

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Create a non-retryable error result (bad input, rejected request)."""
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for health endpoints and structured log fields."""
        payload: Dict[str, Any] = {
            "status": self.status.value,
            "message": self.message,
        }
        if self.error_code:
            payload["error_code"] = self.error_code
        if self.retry_after is not None:
            payload["retry_after"] = self.retry_after
        return payload
