"""Domain models using Pydantic v2 for the waitlist capacity engine."""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, ConfigDict

from .enums import WaitStatus, WaitlistStatus, Confidence, MatchReason


EntityId = Union[int, str]


# ============================================================================
# Inputs (read-only snapshots owned by the host)
# ============================================================================

class TableCategory(BaseModel):
    """A named class of tables sharing capacity and turnover characteristics."""

    id: EntityId
    name: str = Field(..., min_length=1, max_length=100)
    capacity: int = Field(..., ge=1, description="Seats per table")
    count: int = Field(default=1, ge=0, description="Physical tables of this category")
    estimated_turnover_minutes: Optional[int] = Field(
        None, gt=0, description="Configured minutes a party occupies a table"
    )
    is_active: bool = True

    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )

    @property
    def seat_capacity(self) -> int:
        """Total seats across every table of this category."""
        return self.count * self.capacity


class WaitlistEntry(BaseModel):
    """A party on the waitlist, live or historical."""

    id: EntityId
    party_size: int = Field(..., ge=1)
    status: WaitlistStatus = WaitlistStatus.WAITING
    table_category_id: Optional[EntityId] = Field(
        None, description="Soft reference to a TableCategory id; may dangle"
    )
    seated_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @property
    def is_active(self) -> bool:
        """Whether this party still puts pressure on the queue."""
        return self.status.is_active


class RestaurantWaitSnapshot(BaseModel):
    """Staff-set wait status plus optional override duration."""

    status: Optional[WaitStatus] = None
    override_minutes: Optional[int] = Field(None, description="Operator override; ignored unless positive")

    model_config = ConfigDict(frozen=True, from_attributes=True)


class HistoricalSample(BaseModel):
    """Observed wait statistics for one (day of week, hour) bucket."""

    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday")
    hour: int = Field(..., ge=0, le=23)
    average_wait_minutes: float = Field(..., ge=0)
    average_party_size: float = Field(default=0, ge=0)
    total_customers: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True, from_attributes=True)


# ============================================================================
# Results
# ============================================================================

class CapacityEstimate(BaseModel):
    """Wait-time prediction for a party."""

    estimated_wait_minutes: int
    confidence: Confidence
    available_tables: int
    busy_level: int = Field(..., ge=0, le=100, description="Queue load percentage")
    next_available_time: datetime
    recommended_arrival_time: Optional[datetime] = None
    baseline_minutes: int = 0
    pressure_multiplier: float = 1.0

    model_config = ConfigDict(frozen=True)

    @property
    def can_seat_party(self) -> bool:
        """False when no active table category is large enough."""
        return self.available_tables > 0


class TableMatch(BaseModel):
    """Table category selected for a party."""

    table_category_id: EntityId
    table_name: str
    estimated_wait_minutes: int
    is_optimal_match: bool
    reason: MatchReason
    reason_message: str
    seat_wastage: int = 0
    efficiency: int = Field(default=100, ge=0, le=100)

    model_config = ConfigDict(frozen=True)


class TurnoverRecommendation(BaseModel):
    """Suggested replacement for a stale configured turnover estimate."""

    suggested_time: int
    percent_difference: float

    model_config = ConfigDict(frozen=True)


class TurnoverAnalysis(BaseModel):
    """Observed turnover for one table category."""

    table_category_id: EntityId
    table_name: str
    configured_turnover_minutes: int
    actual_turnover_minutes: int
    sample_size: int
    confidence: Confidence
    percent_difference: float
    recommendation: Optional[TurnoverRecommendation] = None

    model_config = ConfigDict(frozen=True)

    @property
    def needs_adjustment(self) -> bool:
        return self.recommendation is not None


class TurnoverSummary(BaseModel):
    """Dashboard roll-up of per-category turnover analyses."""

    total_tables_analyzed: int
    tables_needing_adjustment: int
    average_turnover_minutes: int
    confidence: Confidence

    model_config = ConfigDict(frozen=True)


class PartyQuote(BaseModel):
    """Matcher and estimator output combined for one queue-join request."""

    party_size: int
    match: Optional[TableMatch] = None
    estimate: CapacityEstimate
    headline: str

    model_config = ConfigDict(frozen=True)
