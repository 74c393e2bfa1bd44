"""
Quota Guard

Turns any failure raised by an external capability into a message the user
can read, and latches a session-wide circuit breaker when the failure says
the AI usage quota is exhausted.

- classify_error: pure classification of a thrown value
- QuotaCircuitBreaker: latched flag, cleared only by explicit dismissal
- ErrorNormalizer: the single boundary every caught failure passes through
"""

from dataclasses import dataclass
from enum import Enum

from common.config import GENERIC_ERROR_MESSAGE, QUOTA_ERROR_MARKERS, QUOTA_EXCEEDED_MESSAGE
from common.logging_config import get_logger
from common.metrics import errors_surfaced, quota_trips
from common.notifications import NotificationQueue

logger = get_logger("quota_guard")


class ErrorKind(str, Enum):
    QUOTA_EXCEEDED = "quota_exceeded"
    RECOVERABLE = "recoverable"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class NormalizedError:
    """Classification of a thrown value."""

    kind: ErrorKind
    message: str
    raw: object = None

    @property
    def is_quota(self) -> bool:
        return self.kind is ErrorKind.QUOTA_EXCEEDED


def is_quota_message(message: str) -> bool:
    """True if the message carries one of the quota markers (case-insensitive)."""
    lowered = message.lower()
    return any(marker in lowered for marker in QUOTA_ERROR_MARKERS)


def classify_error(value: object) -> NormalizedError:
    """
    Classify any thrown value.

    Exceptions contribute their message, strings are used as-is and
    anything else falls back to a generic message. A resolved message that
    mentions a quota marker is replaced by the fixed quota message.

    Args:
        value: Whatever was caught at a failure boundary

    Returns:
        NormalizedError with the kind and the message to display
    """
    if isinstance(value, BaseException):
        message = str(value) or type(value).__name__
        kind = ErrorKind.RECOVERABLE
    elif isinstance(value, str):
        message = value
        kind = ErrorKind.RECOVERABLE
    else:
        message = GENERIC_ERROR_MESSAGE
        kind = ErrorKind.UNRECOGNIZED

    if is_quota_message(message):
        return NormalizedError(ErrorKind.QUOTA_EXCEEDED, QUOTA_EXCEEDED_MESSAGE, value)
    return NormalizedError(kind, message, value)


class QuotaCircuitBreaker:
    """
    Latched flag gating quota-consuming actions.

    Trips on quota detection and stays tripped until the user dismisses the
    blocking notice. Later successful calls never reset it.
    """

    def __init__(self):
        self._tripped = False

    @property
    def tripped(self) -> bool:
        return self._tripped

    @property
    def allows_requests(self) -> bool:
        return not self._tripped

    def trip(self) -> None:
        if not self._tripped:
            logger.warning("Quota exhausted, circuit breaker tripped")
            quota_trips.add(1)
        self._tripped = True

    def dismiss(self) -> None:
        if self._tripped:
            logger.info("Quota notice dismissed, circuit breaker reset")
        self._tripped = False


class ErrorNormalizer:
    """Surfaces caught failures as toasts and trips the breaker on quota errors."""

    def __init__(self, breaker: QuotaCircuitBreaker, notifications: NotificationQueue):
        self.breaker = breaker
        self.notifications = notifications

    def handle(self, error: object) -> str:
        """
        Normalize a caught failure and surface it.

        Returns:
            The message shown to the user
        """
        normalized = classify_error(error)
        if normalized.is_quota:
            self.breaker.trip()

        logger.error(f"Surfacing {normalized.kind.value} error: {normalized.message}")
        errors_surfaced.add(1, attributes={"kind": normalized.kind.value})

        self.notifications.error(normalized.message)
        return normalized.message
