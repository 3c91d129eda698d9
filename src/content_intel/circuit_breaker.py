"""Circuit breaker for the optional remote classifier."""

import logging
import time
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .observability import log as obs_log

logger = logging.getLogger(__name__)

# Provider error fragments meaning "out of calls for now", not "try again"
QUOTA_MARKERS = (
    "quota",
    "billing",
    "rate limit",
    "rate_limit",
    "ratelimit",
    "429",
    "too many requests",
)


def is_quota_error(error: Exception) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in QUOTA_MARKERS)


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """Decides whether the remote classifier is worth calling.

    ``failure_threshold`` consecutive failures, or a single quota error, open
    the circuit and every call goes to the local heuristics. Once
    ``recovery_timeout_seconds`` have passed the next call is a trial: success
    closes the circuit, failure opens it for another full timeout.
    """

    def __init__(
        self,
        failure_threshold: int = 3,
        recovery_timeout_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Create a closed breaker.

        Args:
            failure_threshold: Consecutive failures that open the circuit
            recovery_timeout_seconds: Time the circuit stays open before a trial
            clock: Monotonic time source, replaced in tests
        """
        if failure_threshold < 1:
            raise ValueError(f"failure_threshold must be at least 1, got {failure_threshold}")

        self.failure_threshold = failure_threshold
        self.recovery_timeout_seconds = recovery_timeout_seconds
        self._clock = clock

        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.last_error: Optional[str] = None
        self.opened_at: Optional[float] = None
        self._opened_wall: Optional[datetime] = None

    def check_can_proceed(self) -> bool:
        """True if the next call may go to the remote classifier."""
        if self.state is CircuitState.OPEN and self._recovery_due():
            self._transition(CircuitState.HALF_OPEN, "recovery_timeout")
        return self.state is not CircuitState.OPEN

    def record_failure(self, error: Exception) -> None:
        self.failure_count += 1
        self.last_error = str(error)

        if self.state is CircuitState.HALF_OPEN:
            self._trip("half_open_failure")
        elif self.state is CircuitState.CLOSED:
            if is_quota_error(error):
                self._trip("quota_exhausted")
            elif self.failure_count >= self.failure_threshold:
                self._trip("threshold_exceeded")

    def record_success(self) -> None:
        if self.state is not CircuitState.CLOSED:
            self._transition(CircuitState.CLOSED, "recovery_success")
        self.failure_count = 0
        self.opened_at = None
        self._opened_wall = None

    def get_status(self) -> Dict[str, Any]:
        """State summary for /health."""
        status: Dict[str, Any] = {
            "state": self.state.value,
            "failure_count": self.failure_count,
            "failure_threshold": self.failure_threshold,
            "last_error": self.last_error,
        }
        if self.opened_at is not None and self._opened_wall is not None:
            elapsed = self._clock() - self.opened_at
            status["opened_at"] = self._opened_wall.isoformat()
            status["recovery_in_seconds"] = int(
                max(0.0, self.recovery_timeout_seconds - elapsed)
            )
        return status

    def _recovery_due(self) -> bool:
        if self.opened_at is None:
            return True
        return self._clock() - self.opened_at >= self.recovery_timeout_seconds

    def _trip(self, reason: str) -> None:
        self.opened_at = self._clock()
        self._opened_wall = datetime.now()
        self._transition(CircuitState.OPEN, reason)
        logger.warning(
            f"Remote classifier circuit OPEN ({reason}) after "
            f"{self.failure_count} failures, using local heuristics: {self.last_error}"
        )

    def _transition(self, state: CircuitState, reason: str) -> None:
        previous, self.state = self.state, state
        obs_log(
            "circuit_breaker.state",
            state=state.value,
            previous=previous.value,
            reason=reason,
            failure_count=self.failure_count,
        )
        if state is not CircuitState.OPEN:
            logger.info(f"Remote classifier circuit {state.value.upper()} ({reason})")
