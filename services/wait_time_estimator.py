"""
Wait-time estimation for parties joining the waitlist.
Combines the staff-set wait status, competing demand in the live queue
and optional historical samples into a single explainable prediction.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from core.engine_config import EngineConfig, EstimatorRules, get_engine_config
from core.utils_datetime import day_hour_bucket, resolve_now, round_half_up
from domain.enums import Confidence, WaitStatus
from domain.models import CapacityEstimate, HistoricalSample, TableCategory, WaitlistEntry


logger = logging.getLogger(__name__)


def estimate_wait_time(
    status: Optional[WaitStatus],
    override_minutes: Optional[int],
    party_size: int,
    categories: Sequence[TableCategory],
    live_queue: Sequence[WaitlistEntry],
    historical_samples: Optional[Sequence[HistoricalSample]] = None,
    now: Optional[datetime] = None,
    config: Optional[EngineConfig] = None,
) -> CapacityEstimate:
    """
    Estimate how long a party must wait for a table.

    Args:
        status: Staff-set coarse wait status
        override_minutes: Operator override for the baseline; used only when positive
        party_size: Number of people in the party
        categories: Table category inventory
        live_queue: Current waitlist entries (terminal statuses are ignored)
        historical_samples: Optional per (day, hour) wait history
        now: Timestamp to treat as the present (wall clock if omitted)
        config: Engine configuration (uses default if not provided)

    Returns:
        CapacityEstimate with wait minutes, confidence and queue load
    """
    config = config or get_engine_config()
    rules = config.estimator
    now = resolve_now(now)

    baseline = get_base_wait_time(status, rules)
    if override_minutes and override_minutes > 0:
        baseline = override_minutes

    suitable = [
        category for category in categories
        if category.is_active and category.capacity >= party_size
    ]

    if not suitable:
        logger.debug(f"No active table seats a party of {party_size}; using fallback wait")
        return CapacityEstimate(
            estimated_wait_minutes=rules.no_capacity_wait_minutes,
            confidence=Confidence.HIGH,
            available_tables=0,
            busy_level=rules.no_capacity_busy_level,
            next_available_time=now + timedelta(minutes=rules.no_capacity_wait_minutes),
            baseline_minutes=baseline,
            pressure_multiplier=rules.max_pressure_multiplier,
        )

    available_tables = sum(category.count for category in suitable)
    active_queue = get_active_queue(live_queue)

    estimated = baseline

    # Parties of similar size compete for the same tables
    similar_parties = [
        entry for entry in active_queue
        if abs(entry.party_size - party_size) <= rules.similar_party_size_band
    ]
    if similar_parties:
        estimated += len(similar_parties) * get_average_table_turnover_time(suitable, rules)

    multiplier = calculate_waitlist_pressure(active_queue, suitable, rules)
    estimated = round_half_up(estimated * multiplier)

    if historical_samples:
        sample = find_historical_sample(historical_samples, now, config)
        if sample is not None and baseline > 0:
            estimated = round_half_up(estimated * (sample.average_wait_minutes / baseline))
            logger.debug(
                f"Scaled estimate by history for day={sample.day_of_week} hour={sample.hour}"
            )

    next_available_time = now + timedelta(minutes=estimated)
    recommended_arrival_time = next_available_time - timedelta(minutes=rules.arrival_lead_minutes)

    busy_level = round_half_up(len(active_queue) / max(available_tables, 1) * 100)
    busy_level = max(0, min(100, busy_level))

    confidence = determine_confidence_level(
        historical_samples is not None,
        len(suitable),
        len(active_queue),
        rules,
    )

    logger.debug(
        f"Estimated {estimated} min for party of {party_size} "
        f"(baseline={baseline}, multiplier={multiplier:.2f}, active={len(active_queue)})"
    )

    return CapacityEstimate(
        estimated_wait_minutes=estimated,
        confidence=confidence,
        available_tables=available_tables,
        busy_level=busy_level,
        next_available_time=next_available_time,
        recommended_arrival_time=recommended_arrival_time,
        baseline_minutes=baseline,
        pressure_multiplier=multiplier,
    )


def get_base_wait_time(status: Optional[WaitStatus], rules: Optional[EstimatorRules] = None) -> int:
    """Get the baseline wait in minutes for a wait status."""
    rules = rules or get_engine_config().estimator
    return rules.get_base_wait_time(status)


def get_average_table_turnover_time(
    categories: Sequence[TableCategory],
    rules: Optional[EstimatorRules] = None,
) -> int:
    """
    Average configured turnover across table categories.

    Categories without a configured turnover count at the default.
    """
    rules = rules or get_engine_config().estimator
    if not categories:
        return rules.default_turnover_minutes

    total = sum(
        category.estimated_turnover_minutes or rules.default_turnover_minutes
        for category in categories
    )
    return round_half_up(total / len(categories))


def calculate_waitlist_pressure(
    active_queue: Sequence[WaitlistEntry],
    categories: Sequence[TableCategory],
    rules: Optional[EstimatorRules] = None,
) -> float:
    """
    Calculate the queue pressure multiplier.

    Ratio of people waiting to seats available, shifted by one and clamped,
    so an empty queue gives the minimum and a queue at or above full seat
    capacity gives the maximum.

    Args:
        active_queue: Waiting and notified parties
        categories: Table categories that can seat the party

    Returns:
        Multiplier between the configured minimum and maximum (1.0 to 2.0 by default)
    """
    rules = rules or get_engine_config().estimator
    if not active_queue:
        return rules.min_pressure_multiplier
    if not categories:
        return rules.max_pressure_multiplier

    total_seats = sum(category.seat_capacity for category in categories)
    people_waiting = sum(entry.party_size for entry in active_queue)

    ratio = people_waiting / (total_seats or 1)
    return max(rules.min_pressure_multiplier, min(rules.max_pressure_multiplier, 1 + ratio))


def find_historical_sample(
    samples: Sequence[HistoricalSample],
    now: datetime,
    config: Optional[EngineConfig] = None,
) -> Optional[HistoricalSample]:
    """Find the sample for the restaurant-local day of week and hour of ``now``."""
    config = config or get_engine_config()
    day_of_week, hour = day_hour_bucket(now, config.tz)
    for sample in samples:
        if sample.day_of_week == day_of_week and sample.hour == hour:
            return sample
    return None


def determine_confidence_level(
    has_historical_data: bool,
    suitable_category_count: int,
    active_queue_count: int,
    rules: Optional[EstimatorRules] = None,
) -> Confidence:
    """Determine the confidence grade of a wait prediction."""
    rules = rules or get_engine_config().estimator
    if has_historical_data and suitable_category_count > 0:
        return Confidence.HIGH
    if suitable_category_count > 0:
        if active_queue_count > rules.medium_confidence_queue_threshold:
            return Confidence.MEDIUM
        return Confidence.HIGH
    return Confidence.LOW


def format_wait_time(minutes: int) -> str:
    """
    Format a wait for display.

    Returns:
        "No Wait", "25 min", "1 hr" or "1 hr 30 min"
    """
    if minutes <= 0:
        return "No Wait"
    if minutes < 60:
        return f"{minutes} min"

    hours, remaining = divmod(minutes, 60)
    if remaining == 0:
        return f"{hours} hr"
    return f"{hours} hr {remaining} min"


def get_active_queue(live_queue: Sequence[WaitlistEntry]) -> List[WaitlistEntry]:
    """Parties still waiting or notified, in queue order."""
    return [entry for entry in live_queue if entry.is_active]
