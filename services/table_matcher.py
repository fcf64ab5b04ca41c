"""
Table matching for waitlisted parties.
Picks the table category that seats a party with the fewest empty seats and
reports that category's own wait.
"""
import logging
import math
from typing import Optional, Sequence

from core.engine_config import EngineConfig, MatcherRules, get_engine_config
from core.utils_datetime import round_half_up
from domain.enums import MatchReason
from domain.models import TableCategory, TableMatch, WaitlistEntry
from services.wait_time_estimator import get_active_queue


logger = logging.getLogger(__name__)


REASON_MESSAGES = {
    MatchReason.PREFERRED_CATEGORY: "Matching preferred table category",
    MatchReason.PERFECT_FIT: "Perfect size match",
    MatchReason.BEST_AVAILABLE: "Best available table for your party size of {party_size}",
    MatchReason.EXCEEDS_CAPACITY: (
        "Party size exceeds our largest table capacity, may require combining tables"
    ),
}


def find_best_table_match(
    categories: Sequence[TableCategory],
    party_size: int,
    live_queue: Optional[Sequence[WaitlistEntry]] = None,
    preferred_category_name: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> Optional[TableMatch]:
    """
    Match a party with the most appropriate table category.

    Args:
        categories: Table category inventory
        party_size: Number of people in the party
        live_queue: Current waitlist entries, used for per-category waits
        preferred_category_name: Category the diner asked for (case-insensitive)
        config: Engine configuration (uses default if not provided)

    Returns:
        TableMatch, or None when no active table category is configured
    """
    config = config or get_engine_config()
    rules = config.matcher

    active = [category for category in (categories or []) if category.is_active]
    if not active:
        logger.debug("No active table categories configured")
        return None

    if preferred_category_name:
        wanted = preferred_category_name.strip().lower()
        for category in active:
            if category.name.lower() == wanted and category.capacity >= party_size:
                return _build_match(
                    category, party_size, live_queue, rules,
                    is_optimal=True,
                    reason=MatchReason.PREFERRED_CATEGORY,
                )
        logger.debug(f"Preferred category '{preferred_category_name}' cannot seat {party_size}")

    suitable = [category for category in active if category.capacity >= party_size]

    if not suitable:
        # max() keeps the first category among equally large ones
        largest = max(active, key=lambda category: category.capacity)
        return _build_match(
            largest, party_size, live_queue, rules,
            is_optimal=False,
            reason=MatchReason.EXCEEDS_CAPACITY,
        )

    # Stable sort: fewest wasted seats, then shortest category wait, then inventory order
    ranked = sorted(
        suitable,
        key=lambda category: (
            category.capacity - party_size,
            calculate_category_wait_time(category, live_queue, rules),
        ),
    )
    best = ranked[0]
    wasted = best.capacity - party_size

    return _build_match(
        best, party_size, live_queue, rules,
        is_optimal=wasted <= rules.optimal_max_wasted_seats,
        reason=MatchReason.PERFECT_FIT if wasted == 0 else MatchReason.BEST_AVAILABLE,
    )


def calculate_category_wait_time(
    category: TableCategory,
    live_queue: Optional[Sequence[WaitlistEntry]] = None,
    rules: Optional[MatcherRules] = None,
) -> int:
    """
    Estimate the wait for one table category.

    A queued party competes for the category when it asked for it explicitly,
    or asked for nothing and fits at the table.

    Returns:
        Wait in minutes; 0 when fewer parties compete than there are tables
    """
    rules = rules or get_engine_config().matcher
    if not live_queue:
        return 0

    competing = sum(
        1 for entry in get_active_queue(live_queue)
        if entry.table_category_id == category.id
        or (entry.table_category_id is None and entry.party_size <= category.capacity)
    )

    tables = category.count or 1
    turnover = category.estimated_turnover_minutes or rules.default_turnover_minutes

    if competing < tables:
        return 0

    rounds = math.ceil(competing / tables)
    return rounds * turnover


def calculate_seat_efficiency(
    category: TableCategory,
    party_size: int,
    rules: Optional[MatcherRules] = None,
) -> int:
    """Efficiency score 0-100, reduced for every empty seat at the table."""
    rules = rules or get_engine_config().matcher
    wasted = max(0, category.capacity - party_size)
    return max(0, 100 - wasted * rules.efficiency_penalty_per_wasted_seat)


def format_wait_time_description(wait_minutes: int) -> str:
    """Plain language description of a wait for diners."""
    if wait_minutes <= 0:
        return "No wait, immediate seating"
    if wait_minutes <= 15:
        return "Very short wait (under 15 minutes)"
    if wait_minutes <= 30:
        return "Short wait (15-30 minutes)"
    if wait_minutes <= 60:
        return "Moderate wait (30-60 minutes)"
    if wait_minutes <= 90:
        return "Long wait (60-90 minutes)"
    return f"Very long wait ({round_half_up(wait_minutes / 60)} hours or more)"


def _build_match(
    category: TableCategory,
    party_size: int,
    live_queue: Optional[Sequence[WaitlistEntry]],
    rules: MatcherRules,
    is_optimal: bool,
    reason: MatchReason,
) -> TableMatch:
    match = TableMatch(
        table_category_id=category.id,
        table_name=category.name,
        estimated_wait_minutes=calculate_category_wait_time(category, live_queue, rules),
        is_optimal_match=is_optimal,
        reason=reason,
        reason_message=REASON_MESSAGES[reason].format(party_size=party_size),
        seat_wastage=max(0, category.capacity - party_size),
        efficiency=calculate_seat_efficiency(category, party_size, rules),
    )
    logger.debug(
        f"Matched party of {party_size} to '{category.name}' ({reason.value}, "
        f"wait={match.estimated_wait_minutes})"
    )
    return match
