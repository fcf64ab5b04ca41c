"""
Engine configuration for wait estimation, table matching and turnover auditing.
Business rules are plain dataclasses so hosts can build per-restaurant variants.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

import pytz

from core.exceptions import EngineConfigError
from core.settings import settings
from domain.enums import WaitStatus


def _default_status_baselines() -> Dict[WaitStatus, int]:
    return {
        WaitStatus.AVAILABLE: 0,
        WaitStatus.SHORT: 15,
        WaitStatus.LONG: 30,
        WaitStatus.VERY_LONG: 60,
        WaitStatus.CLOSED: 0,
    }


@dataclass
class EstimatorRules:
    """Rules for the wait-time estimator."""
    # Baseline minutes per coarse wait status
    status_baselines: Dict[WaitStatus, int] = field(default_factory=_default_status_baselines)
    unknown_status_baseline_minutes: int = 15

    # Party cannot be seated at any active table
    no_capacity_wait_minutes: int = 120
    no_capacity_busy_level: int = 100

    # Queue pressure
    similar_party_size_band: int = 2  # Parties within this many seats compete for the same tables
    min_pressure_multiplier: float = 1.0
    max_pressure_multiplier: float = 2.0
    default_turnover_minutes: int = 30  # Used only when averaging over no categories

    # Diner guidance
    arrival_lead_minutes: int = 15  # Recommended arrival is this long before the table frees up

    # Confidence
    medium_confidence_queue_threshold: int = 10  # More active parties than this drops to medium

    def get_base_wait_time(self, status: Optional[WaitStatus]) -> int:
        """Baseline minutes for a wait status; unknown or unset status gets the default."""
        if status is None:
            return self.unknown_status_baseline_minutes
        try:
            status = WaitStatus(status)
        except ValueError:
            return self.unknown_status_baseline_minutes
        return self.status_baselines.get(status, self.unknown_status_baseline_minutes)


@dataclass
class MatcherRules:
    """Rules for the table matcher."""
    optimal_max_wasted_seats: int = 2  # A fit with this many or fewer empty seats is optimal
    default_turnover_minutes: int = 45
    efficiency_penalty_per_wasted_seat: int = 20


@dataclass
class TurnoverRules:
    """Rules for the turnover analyzer."""
    # Gaps between consecutive seatings outside (min, max) are noise or overnight breaks
    min_turnover_gap_minutes: float = 10
    max_turnover_gap_minutes: float = 300

    # Sample-size confidence thresholds
    medium_confidence_samples: int = 15
    high_confidence_samples: int = 50

    # Recommend a new estimate when actual differs by more than this percentage
    adjustment_threshold_percent: float = 15.0
    default_turnover_minutes: int = 45  # Configured value assumed for categories without one


@dataclass
class EngineConfig:
    """Complete engine configuration."""

    timezone: str = field(default_factory=lambda: settings.restaurant_timezone)
    estimator: EstimatorRules = field(default_factory=EstimatorRules)
    matcher: MatcherRules = field(default_factory=MatcherRules)
    turnover: TurnoverRules = field(default_factory=TurnoverRules)

    def __post_init__(self):
        self.validate()

    @property
    def tz(self) -> pytz.BaseTzInfo:
        """Get the timezone object."""
        return pytz.timezone(self.timezone)

    def validate(self) -> None:
        """
        Check the rules are internally consistent.

        Raises:
            EngineConfigError: If any rule contradicts another
        """
        if self.timezone not in pytz.all_timezones_set:
            raise EngineConfigError(f"Unknown timezone: {self.timezone}")

        est = self.estimator
        if est.min_pressure_multiplier > est.max_pressure_multiplier:
            raise EngineConfigError(
                "min_pressure_multiplier must not exceed max_pressure_multiplier"
            )
        if est.similar_party_size_band < 0:
            raise EngineConfigError("similar_party_size_band must be non-negative")
        if not 0 <= est.no_capacity_busy_level <= 100:
            raise EngineConfigError("no_capacity_busy_level must be between 0 and 100")

        if self.matcher.default_turnover_minutes <= 0:
            raise EngineConfigError("Matcher default_turnover_minutes must be positive")

        rules = self.turnover
        if rules.min_turnover_gap_minutes >= rules.max_turnover_gap_minutes:
            raise EngineConfigError(
                "min_turnover_gap_minutes must be below max_turnover_gap_minutes"
            )
        if rules.medium_confidence_samples > rules.high_confidence_samples:
            raise EngineConfigError(
                "medium_confidence_samples must not exceed high_confidence_samples"
            )
        if rules.default_turnover_minutes <= 0:
            raise EngineConfigError("Turnover default_turnover_minutes must be positive")


def get_default_engine_config() -> EngineConfig:
    """Get the default engine configuration."""
    return EngineConfig(
        timezone=settings.restaurant_timezone,
        estimator=EstimatorRules(),
        matcher=MatcherRules(),
        turnover=TurnoverRules(),
    )


# Singleton instance
_engine_config_instance: Optional[EngineConfig] = None


def get_engine_config() -> EngineConfig:
    """Get the engine configuration singleton."""
    global _engine_config_instance
    if _engine_config_instance is None:
        _engine_config_instance = get_default_engine_config()
    return _engine_config_instance
