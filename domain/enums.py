"""Domain enums for the waitlist capacity engine."""

from enum import Enum


class WaitStatus(str, Enum):
    """Coarse wait signal set by restaurant staff."""

    AVAILABLE = "available"
    SHORT = "short"
    LONG = "long"
    VERY_LONG = "very_long"
    CLOSED = "closed"


class WaitlistStatus(str, Enum):
    """Waitlist entry status enumeration."""

    WAITING = "waiting"
    NOTIFIED = "notified"
    SEATED = "seated"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"

    @property
    def is_active(self) -> bool:
        """Waiting and notified parties still compete for tables."""
        return self in (WaitlistStatus.WAITING, WaitlistStatus.NOTIFIED)


class Confidence(str, Enum):
    """Reliability grade attached to a prediction or recommendation."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]


_CONFIDENCE_RANK = {
    Confidence.LOW: 0,
    Confidence.MEDIUM: 1,
    Confidence.HIGH: 2,
}


class MatchReason(str, Enum):
    """Why the matcher picked a table category."""

    PREFERRED_CATEGORY = "preferred_category"
    PERFECT_FIT = "perfect_fit"
    BEST_AVAILABLE = "best_available"
    EXCEEDS_CAPACITY = "exceeds_capacity"  # Party larger than every table
