"""
Turnover analysis over historical seatings.

Measures how long tables of each category actually turn over and flags
categories whose configured estimate has drifted from what the floor sees.

Turnover is measured as the gap between consecutive seatings of the same
category. Entries only reference a category, not a physical table, so when
several tables of one category turn at once the gaps are shorter than a true
turn. This approximation is accepted; treat multi-table categories as noisier.
"""
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from core.engine_config import EngineConfig, TurnoverRules, get_engine_config
from core.utils_datetime import minutes_between, round_half_up, round_half_up_places
from domain.enums import Confidence, WaitlistStatus
from domain.models import (
    EntityId,
    TableCategory,
    TurnoverAnalysis,
    TurnoverRecommendation,
    TurnoverSummary,
    WaitlistEntry,
)


logger = logging.getLogger(__name__)


def analyze_turnover_times(
    categories: Sequence[TableCategory],
    historical_entries: Sequence[WaitlistEntry],
    config: Optional[EngineConfig] = None,
) -> List[TurnoverAnalysis]:
    """
    Analyze actual turnover times per table category.

    Args:
        categories: Table categories to analyze, in display order
        historical_entries: Past waitlist entries; only seated ones with a
            seated_at timestamp and a category reference are used

    Returns:
        One analysis per category with at least one usable turnover gap
    """
    config = config or get_engine_config()
    rules = config.turnover

    entries_by_category = group_seatings_by_category(historical_entries)
    results: List[TurnoverAnalysis] = []

    for category in categories:
        seatings = entries_by_category.get(category.id)
        if not seatings:
            continue

        turnover_times = calculate_turnover_gaps(seatings, rules)
        if not turnover_times:
            logger.debug(f"No usable turnover gaps for '{category.name}'")
            continue

        average = sum(turnover_times) / len(turnover_times)
        configured = category.estimated_turnover_minutes or rules.default_turnover_minutes
        confidence = determine_sample_confidence(len(turnover_times), rules)
        raw_difference = (average - configured) / configured * 100
        percent_difference = round_half_up_places(raw_difference, 1)

        recommendation = None
        if abs(raw_difference) > rules.adjustment_threshold_percent and confidence != Confidence.LOW:
            recommendation = TurnoverRecommendation(
                suggested_time=round_half_up(average),
                percent_difference=percent_difference,
            )

        results.append(TurnoverAnalysis(
            table_category_id=category.id,
            table_name=category.name,
            configured_turnover_minutes=configured,
            actual_turnover_minutes=round_half_up(average),
            sample_size=len(turnover_times),
            confidence=confidence,
            percent_difference=percent_difference,
            recommendation=recommendation,
        ))

    logger.debug(f"Analyzed turnover for {len(results)} of {len(categories)} categories")
    return results


def group_seatings_by_category(
    historical_entries: Sequence[WaitlistEntry],
) -> Dict[EntityId, List[WaitlistEntry]]:
    """
    Group seated entries by category, each group sorted by seating time.

    Entries without a category reference cannot be attributed and are dropped.
    """
    groups: Dict[EntityId, List[WaitlistEntry]] = defaultdict(list)
    for entry in historical_entries:
        if entry.status != WaitlistStatus.SEATED or entry.seated_at is None:
            continue
        if entry.table_category_id is None:
            continue
        groups[entry.table_category_id].append(entry)

    for seatings in groups.values():
        seatings.sort(key=lambda entry: entry.seated_at)
    return dict(groups)


def calculate_turnover_gaps(
    seatings: Sequence[WaitlistEntry],
    rules: Optional[TurnoverRules] = None,
) -> List[float]:
    """
    Minutes between consecutive seatings, keeping only plausible turns.

    Gaps at or below the minimum are duplicates or noise; gaps at or above the
    maximum span a closed period.
    """
    rules = rules or get_engine_config().turnover
    gaps = []
    for current, following in zip(seatings, seatings[1:]):
        minutes = minutes_between(current.seated_at, following.seated_at)
        if rules.min_turnover_gap_minutes < minutes < rules.max_turnover_gap_minutes:
            gaps.append(minutes)
    return gaps


def determine_sample_confidence(sample_size: int, rules: Optional[TurnoverRules] = None) -> Confidence:
    """Confidence grade for a turnover measurement of the given sample size."""
    rules = rules or get_engine_config().turnover
    if sample_size >= rules.high_confidence_samples:
        return Confidence.HIGH
    if sample_size >= rules.medium_confidence_samples:
        return Confidence.MEDIUM
    return Confidence.LOW


def generate_turnover_summary(analyses: Sequence[TurnoverAnalysis]) -> Optional[TurnoverSummary]:
    """
    Aggregate per-category analyses for the restaurant dashboard.

    Returns:
        TurnoverSummary, or None when nothing was analyzed
    """
    if not analyses:
        return None

    average = sum(analysis.actual_turnover_minutes for analysis in analyses) / len(analyses)

    return TurnoverSummary(
        total_tables_analyzed=len(analyses),
        tables_needing_adjustment=sum(1 for analysis in analyses if analysis.needs_adjustment),
        average_turnover_minutes=round_half_up(average),
        confidence=max((analysis.confidence for analysis in analyses), key=lambda c: c.rank),
    )


def describe_turnover_analysis(analysis: TurnoverAnalysis) -> str:
    """Staff-facing explanation of one category's turnover analysis."""
    description = (
        f"{analysis.table_name}: Based on {analysis.sample_size} table seatings, "
        f"the actual average turnover time is approximately "
        f"{analysis.actual_turnover_minutes} minutes"
    )

    recommendation = analysis.recommendation
    if recommendation:
        direction = "longer" if recommendation.percent_difference > 0 else "shorter"
        description += (
            f". This is {round_half_up(abs(recommendation.percent_difference))}% {direction} "
            f"than your estimate. We recommend updating to {recommendation.suggested_time} "
            f"minutes for more accurate wait times."
        )
    else:
        description += ". This appears to match your current estimate."

    if analysis.confidence == Confidence.LOW:
        description += (
            " (Note: This analysis is based on limited data and may not be fully representative.)"
        )

    return description
