"""Error classifiers for delivery provider failures.

Converts HTTP-level failures from delivery providers (Twilio over httpx,
web push endpoints through pywebpush) into OperationResult objects so that
senders decide on a single shape: drop the subscription, count a failure,
or report a transient outage.

Usage:
    from infrastructure.operations.classifiers import classify_http_error

    try:
        response.raise_for_status()
    except httpx.HTTPError as exc:
        return classify_http_error(exc)
"""

from typing import Any, Optional

import httpx

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


def _status_code(exc: Exception) -> Optional[int]:
    """Extract an HTTP status code from an httpx or pywebpush error."""
    response: Any = getattr(exc, "response", None)
    if response is None:
        return None
    status_code = getattr(response, "status_code", None)
    return status_code if isinstance(status_code, int) else None


def _retry_after(exc: Exception, default: int = 60) -> int:
    response: Any = getattr(exc, "response", None)
    headers = getattr(response, "headers", None) or {}
    header_value = headers.get("retry-after") if hasattr(headers, "get") else None
    if header_value:
        try:
            return int(header_value)
        except (ValueError, TypeError):
            pass
    return default


def classify_http_error(exc: Exception, provider: str = "provider") -> OperationResult:
    """Classify an HTTP delivery failure into an OperationResult.

    Status Code Mapping:
    - 429: Rate limiting -> TRANSIENT_ERROR with retry_after
    - 401/403: Credentials rejected -> UNAUTHORIZED
    - 404/410: Target gone (expired push subscription) -> NOT_FOUND
    - 5xx: Server error -> TRANSIENT_ERROR
    - Other 4xx: Request rejected -> PERMANENT_ERROR
    - No response (connect/read timeout): TRANSIENT_ERROR

    Args:
        exc: httpx.HTTPError or pywebpush WebPushException
        provider: Name used in the result message (e.g. "twilio", "web_push")

    Returns:
        OperationResult with status, message, error_code and retry_after
    """
    status_code = _status_code(exc)

    if status_code is None:
        if isinstance(exc, httpx.TimeoutException):
            return OperationResult.transient_error(
                f"{provider} request timed out",
                error_code="TIMEOUT",
            )
        return OperationResult.transient_error(
            f"{provider} connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
        )

    if status_code == 429:
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            f"{provider} rate limited",
            error_code="RATE_LIMITED",
            retry_after=_retry_after(exc),
        )

    if status_code in (401, 403):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            f"{provider} rejected credentials ({status_code})",
            error_code="UNAUTHORIZED",
        )

    if status_code in (404, 410):
        return OperationResult.error(
            OperationStatus.NOT_FOUND,
            f"{provider} target gone ({status_code})",
            error_code="GONE",
        )

    if 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"{provider} server error ({status_code})",
            error_code="SERVER_ERROR",
        )

    return OperationResult.permanent_error(
        f"{provider} client error ({status_code}): {exc}",
        error_code="HTTP_ERROR",
    )
