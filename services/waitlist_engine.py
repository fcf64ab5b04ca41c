"""
Service-layer entry point for the waitlist engine.
Binds an engine configuration and a clock, and combines the matcher and
estimator for queue-join requests.
"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence

import pytz

from core.engine_config import EngineConfig, get_engine_config
from core.logging import LogContext
from core.utils_datetime import Clock, format_clock_time, get_current_datetime, localize, resolve_now
from domain.enums import MatchReason
from domain.models import (
    CapacityEstimate,
    HistoricalSample,
    PartyQuote,
    RestaurantWaitSnapshot,
    TableCategory,
    TableMatch,
    TurnoverAnalysis,
    TurnoverSummary,
    WaitlistEntry,
)
from services.table_matcher import find_best_table_match
from services.turnover_analyzer import analyze_turnover_times, generate_turnover_summary
from services.wait_time_estimator import estimate_wait_time, format_wait_time


logger = logging.getLogger(__name__)


class WaitlistEngine:
    """
    Stateless facade over the estimator, matcher and turnover analyzer.

    The engine keeps no data between calls. Every method works on the
    snapshots passed in and returns a new result value.
    """

    def __init__(self, config: Optional[EngineConfig] = None, clock: Optional[Clock] = None):
        """
        Initialize the engine.

        Args:
            config: Engine configuration (uses default if not provided)
            clock: Source of "now" when a call does not pass one (wall clock by default)
        """
        self.config = config or get_engine_config()
        self.clock = clock or get_current_datetime

    def now(self) -> datetime:
        return self.clock()

    def estimate(
        self,
        wait_status: RestaurantWaitSnapshot,
        party_size: int,
        categories: Sequence[TableCategory],
        live_queue: Sequence[WaitlistEntry],
        historical_samples: Optional[Sequence[HistoricalSample]] = None,
        now: Optional[datetime] = None,
    ) -> CapacityEstimate:
        """Estimate the wait for a party against the restaurant's current state."""
        return estimate_wait_time(
            wait_status.status,
            wait_status.override_minutes,
            party_size,
            categories,
            live_queue,
            historical_samples,
            now=resolve_now(now, self.clock),
            config=self.config,
        )

    def match(
        self,
        categories: Sequence[TableCategory],
        party_size: int,
        live_queue: Optional[Sequence[WaitlistEntry]] = None,
        preferred_category_name: Optional[str] = None,
    ) -> Optional[TableMatch]:
        """Pick the table category for a party."""
        return find_best_table_match(
            categories,
            party_size,
            live_queue,
            preferred_category_name,
            config=self.config,
        )

    def analyze(
        self,
        categories: Sequence[TableCategory],
        historical_entries: Sequence[WaitlistEntry],
    ) -> List[TurnoverAnalysis]:
        """Measure actual turnover per table category."""
        analyses = analyze_turnover_times(categories, historical_entries, config=self.config)
        stale = [analysis.table_name for analysis in analyses if analysis.needs_adjustment]
        if stale:
            logger.info(f"Turnover estimates need adjustment for: {', '.join(stale)}")
        return analyses

    def summarize(self, analyses: Sequence[TurnoverAnalysis]) -> Optional[TurnoverSummary]:
        """Dashboard summary of turnover analyses."""
        return generate_turnover_summary(analyses)

    def quote_party(
        self,
        wait_status: RestaurantWaitSnapshot,
        party_size: int,
        categories: Sequence[TableCategory],
        live_queue: Sequence[WaitlistEntry],
        preferred_category_name: Optional[str] = None,
        historical_samples: Optional[Sequence[HistoricalSample]] = None,
        now: Optional[datetime] = None,
    ) -> PartyQuote:
        """
        Match a party to a table category and estimate its headline wait.

        Args:
            wait_status: Staff-set wait status and override
            party_size: Number of people in the party
            categories: Table category inventory
            live_queue: Current waitlist entries
            preferred_category_name: Category the diner asked for
            historical_samples: Optional per (day, hour) wait history
            now: Timestamp to treat as the present

        Returns:
            PartyQuote with the match (None when no inventory is configured),
            the estimate and a diner-facing headline
        """
        now = resolve_now(now, self.clock)

        with LogContext(logger, party_size=party_size, preferred_category=preferred_category_name) as ctx:
            table_match = self.match(categories, party_size, live_queue, preferred_category_name)
            estimate = self.estimate(
                wait_status,
                party_size,
                categories,
                live_queue,
                historical_samples,
                now=now,
            )

            headline = build_headline(table_match, estimate, self.config.tz)
            ctx.log(
                "info",
                f"Quoted party of {party_size}: {estimate.estimated_wait_minutes} min "
                f"({estimate.confidence.value} confidence)",
                wait_minutes=estimate.estimated_wait_minutes,
                table_name=table_match.table_name if table_match else None,
            )

        return PartyQuote(
            party_size=party_size,
            match=table_match,
            estimate=estimate,
            headline=headline,
        )


def build_headline(
    table_match: Optional[TableMatch],
    estimate: CapacityEstimate,
    tz: Optional[pytz.BaseTzInfo] = None,
) -> str:
    """
    Diner-facing one-liner for a quote.

    No inventory and oversized parties get their own wording so hosts never
    show a raw empty result. The arrival time is shown in restaurant-local time.
    """
    if table_match is None:
        return "Tables are not set up for waitlist seating yet. Please check with the host."

    if table_match.reason == MatchReason.EXCEEDS_CAPACITY:
        return (
            f"{table_match.reason_message}. "
            f"Estimated wait: {format_wait_time(estimate.estimated_wait_minutes)}."
        )

    headline = f"Estimated wait: {format_wait_time(estimate.estimated_wait_minutes)}"
    if estimate.recommended_arrival_time and estimate.estimated_wait_minutes > 0:
        arrival = localize(estimate.recommended_arrival_time, tz)
        headline += f". Please arrive by {format_clock_time(arrival)}"
    return headline + "."


# Singleton instance
_waitlist_engine_instance: Optional[WaitlistEngine] = None


def get_waitlist_engine() -> WaitlistEngine:
    """Get or create the waitlist engine singleton."""
    global _waitlist_engine_instance
    if _waitlist_engine_instance is None:
        _waitlist_engine_instance = WaitlistEngine()
    return _waitlist_engine_instance
