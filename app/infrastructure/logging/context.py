"""Request-scoped logging context.

The HTTP middleware binds a correlation id and the acting user to
structlog's context vars, so every event logged while serving the request
carries them, including events from the notification fan-out it starts.

Usage:
    from infrastructure.logging import bind_request_context

    with bind_request_context(correlation_id="req-123", user_id="user-1"):
        logger.info("notification_send_requested")
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    user_id: Optional[str] = None,
    request_path: Optional[str] = None,
    request_method: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind request context for the duration of the block.

    Args:
        correlation_id: Caller-supplied request id; a UUID4 is generated if
            missing or empty.
        user_id: Acting user, when known.
        request_path: e.g. "/api/v1/notifications".
        request_method: e.g. "POST".
        **extra_context: Any further fields to bind.

    Yields:
        The correlation id in effect, so the caller can echo it back.
    """
    context = {
        "user_id": user_id,
        "request_path": request_path,
        "request_method": request_method,
        **extra_context,
    }
    context = {key: value for key, value in context.items() if value is not None}
    context["correlation_id"] = correlation_id or str(uuid.uuid4())

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["correlation_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context)


def get_correlation_id() -> Optional[str]:
    """Correlation id of the request being served, if any."""
    return structlog.contextvars.get_contextvars().get("correlation_id")
