"""Domain layer for the waitlist capacity engine."""

from .enums import (
    WaitStatus,
    WaitlistStatus,
    Confidence,
    MatchReason,
)
from .models import (
    EntityId,
    TableCategory,
    WaitlistEntry,
    RestaurantWaitSnapshot,
    HistoricalSample,
    CapacityEstimate,
    TableMatch,
    TurnoverRecommendation,
    TurnoverAnalysis,
    TurnoverSummary,
    PartyQuote,
)

__all__ = [
    # Enums
    "WaitStatus",
    "WaitlistStatus",
    "Confidence",
    "MatchReason",
    # Inputs
    "EntityId",
    "TableCategory",
    "WaitlistEntry",
    "RestaurantWaitSnapshot",
    "HistoricalSample",
    # Results
    "CapacityEstimate",
    "TableMatch",
    "TurnoverRecommendation",
    "TurnoverAnalysis",
    "TurnoverSummary",
    "PartyQuote",
]
