"""Circuit breaker for delivery providers.

Keeps a failing provider (Twilio, an SMTP relay) from slowing down every
notification fan-out. While the circuit is open, sends fail immediately
and the dispatcher records them as FAILED.

    CLOSED --(failure_threshold consecutive failures)--> OPEN
    OPEN --(timeout_seconds elapsed)--> HALF_OPEN
    HALF_OPEN --(trial call succeeds)--> CLOSED
    HALF_OPEN --(trial call fails)--> OPEN

Breakers are used from the event loop only; blocking provider SDKs run
inside the guarded coroutine, not around it.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from infrastructure.logging import get_module_logger

logger = get_module_logger()


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerOpenError(Exception):
    """Raised instead of calling the provider while the circuit is open."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CircuitBreaker:
    """Consecutive-failure circuit breaker around an async provider call.

    Args:
        name: Provider name, e.g. "twilio_sms"
        failure_threshold: Consecutive failures that open the circuit
        timeout_seconds: How long the circuit stays open before a trial call
        half_open_max_calls: Concurrent trial calls allowed while HALF_OPEN
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        timeout_seconds: int = 60,
        half_open_max_calls: int = 1,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.timeout_seconds = timeout_seconds
        self.half_open_max_calls = half_open_max_calls

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._trial_calls = 0
        self._last_failure_time: Optional[datetime] = None

    @property
    def state(self) -> CircuitState:
        return self._state

    def _set_state(self, state: CircuitState) -> None:
        previous = self._state
        self._state = state
        self._trial_calls = 0
        if state != CircuitState.OPEN:
            self._failure_count = 0
            self._success_count = 0
        log = logger.error if state == CircuitState.OPEN else logger.info
        log(
            "circuit_breaker_state_changed",
            name=self.name,
            previous_state=previous.value,
            state=state.value,
        )

    def _retry_in_seconds(self) -> int:
        if self._last_failure_time is None:
            return 0
        reopen_at = self._last_failure_time + timedelta(seconds=self.timeout_seconds)
        return max(int((reopen_at - _now()).total_seconds()), 0)

    def _admit(self) -> None:
        if self._state == CircuitState.OPEN:
            remaining = self._retry_in_seconds()
            if remaining > 0:
                logger.warning(
                    "circuit_breaker_rejected_call",
                    name=self.name,
                    retry_in_seconds=remaining,
                )
                raise CircuitBreakerOpenError(
                    f"Circuit breaker '{self.name}' is OPEN. Retry in {remaining} seconds."
                )
            self._set_state(CircuitState.HALF_OPEN)

        if self._state == CircuitState.HALF_OPEN:
            if self._trial_calls >= self.half_open_max_calls:
                raise CircuitBreakerOpenError(
                    f"Circuit breaker '{self.name}' is HALF_OPEN (trial call in progress)."
                )
            self._trial_calls += 1

    async def call_async(
        self, func: Callable[..., Awaitable[Any]], *args, **kwargs
    ) -> Any:
        """Await ``func(*args, **kwargs)`` unless the circuit is open.

        Raises:
            CircuitBreakerOpenError: The provider was not called.
            Exception: Whatever ``func`` raised, after counting the failure.
        """
        self._admit()
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            self._record_failure(e)
            raise
        finally:
            # Frees the trial slot when a channel timeout cancels the call
            if self._state == CircuitState.HALF_OPEN and self._trial_calls > 0:
                self._trial_calls -= 1
        self._record_success()
        return result

    def _record_success(self) -> None:
        if self._state == CircuitState.HALF_OPEN:
            self._set_state(CircuitState.CLOSED)
            return
        self._success_count += 1
        self._failure_count = 0

    def _record_failure(self, error: Exception) -> None:
        self._failure_count += 1
        self._last_failure_time = _now()
        logger.warning(
            "circuit_breaker_failure",
            name=self.name,
            state=self._state.value,
            failure_count=self._failure_count,
            threshold=self.failure_threshold,
            error=str(error),
        )
        if (
            self._state == CircuitState.HALF_OPEN
            or self._failure_count >= self.failure_threshold
        ):
            self._set_state(CircuitState.OPEN)

    def reset(self) -> None:
        """Force the circuit closed."""
        self._set_state(CircuitState.CLOSED)

    def get_stats(self) -> dict:
        return {
            "name": self.name,
            "state": self._state.value,
            "failure_count": self._failure_count,
            "success_count": self._success_count,
            "last_failure_time": (
                self._last_failure_time.isoformat() if self._last_failure_time else None
            ),
            "retry_in_seconds": (
                self._retry_in_seconds() if self._state == CircuitState.OPEN else 0
            ),
        }


_circuit_breaker_registry: Dict[str, CircuitBreaker] = {}


def register_circuit_breaker(cb: CircuitBreaker) -> None:
    """Expose a breaker on the channel health endpoint."""
    _circuit_breaker_registry[cb.name] = cb


def get_circuit_breaker(name: str) -> Optional[CircuitBreaker]:
    return _circuit_breaker_registry.get(name)


def get_all_circuit_breaker_stats() -> dict:
    return {name: cb.get_stats() for name, cb in _circuit_breaker_registry.items()}
