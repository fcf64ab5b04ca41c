"""
Tests for the waitlist engine facade.
Covers party quotes, headlines, clock injection and turnover logging.
"""

import logging
from datetime import timedelta

import pytest
import pytz

from domain.enums import Confidence, MatchReason, WaitStatus
from domain.models import RestaurantWaitSnapshot
from services.waitlist_engine import WaitlistEngine, build_headline, get_waitlist_engine


# ============================================================================
# Quote Tests
# ============================================================================

@pytest.mark.integration
class TestQuoteParty:
    """Tests for matching and estimating in one call."""

    def test_quote_with_arrival_time(self, engine, standard_inventory):
        """Test a short wait for a party of four with an empty queue."""
        quote = engine.quote_party(
            RestaurantWaitSnapshot(status=WaitStatus.SHORT),
            4,
            standard_inventory,
            [],
        )

        assert quote.party_size == 4
        assert quote.match.table_name == "Four-top"
        assert quote.match.reason == MatchReason.PERFECT_FIT
        assert quote.estimate.estimated_wait_minutes == 15
        assert quote.estimate.available_tables == 4
        assert quote.estimate.confidence == Confidence.HIGH
        assert quote.headline == "Estimated wait: 15 min. Please arrive by 7:00 PM."

    def test_quote_without_inventory(self, engine):
        """Test the host-facing message when no tables are configured."""
        quote = engine.quote_party(RestaurantWaitSnapshot(status=WaitStatus.SHORT), 2, [], [])

        assert quote.match is None
        assert quote.estimate.estimated_wait_minutes == 120
        assert quote.headline == (
            "Tables are not set up for waitlist seating yet. Please check with the host."
        )

    def test_quote_oversized_party(self, engine, standard_inventory):
        """Test the combine-tables wording for a party larger than every table."""
        quote = engine.quote_party(RestaurantWaitSnapshot(status=WaitStatus.SHORT), 10, standard_inventory, [])

        assert quote.match.table_name == "Patio"
        assert quote.match.reason == MatchReason.EXCEEDS_CAPACITY
        assert quote.estimate.can_seat_party is False
        assert quote.headline == (
            "Party size exceeds our largest table capacity, may require combining tables. "
            "Estimated wait: 2 hr."
        )

    def test_quote_no_wait(self, engine, standard_inventory):
        """Test that a zero wait omits the arrival time."""
        quote = engine.quote_party(RestaurantWaitSnapshot(status=WaitStatus.AVAILABLE), 2, standard_inventory, [])

        assert quote.estimate.estimated_wait_minutes == 0
        assert quote.headline == "Estimated wait: No Wait."

    def test_quote_uses_override(self, engine, standard_inventory):
        """Test that a positive operator override replaces the status baseline."""
        quote = engine.quote_party(
            RestaurantWaitSnapshot(status=WaitStatus.LONG, override_minutes=20),
            2,
            standard_inventory,
            [],
        )
        assert quote.estimate.estimated_wait_minutes == 20
        assert quote.estimate.baseline_minutes == 20

    def test_quote_honours_preference(self, engine, standard_inventory):
        """Test that the diner's preferred category is passed to the matcher."""
        quote = engine.quote_party(
            RestaurantWaitSnapshot(status=WaitStatus.SHORT),
            2,
            standard_inventory,
            [],
            preferred_category_name="patio",
        )
        assert quote.match.reason == MatchReason.PREFERRED_CATEGORY

    def test_fitting_category_without_tables_keeps_arrival(self, engine, make_category):
        """Test that a zero-count fitting category is quoted as a normal wait."""
        categories = [make_category(id=1, name="Four-top", capacity=4, count=0, turnover=30)]

        quote = engine.quote_party(RestaurantWaitSnapshot(status=WaitStatus.SHORT), 4, categories, [])

        assert quote.match.reason == MatchReason.PERFECT_FIT
        assert quote.estimate.available_tables == 0
        assert quote.headline == "Estimated wait: 15 min. Please arrive by 7:00 PM."

    def test_quote_logs_request_context(self, engine, standard_inventory, caplog):
        """Test that quote logs carry the party and chosen table."""
        with caplog.at_level(logging.INFO, logger="services.waitlist_engine"):
            engine.quote_party(RestaurantWaitSnapshot(status=WaitStatus.SHORT), 4, standard_inventory, [])

        [record] = [r for r in caplog.records if r.getMessage().startswith("Quoted party")]
        assert record.party_size == 4
        assert record.table_name == "Four-top"
        assert record.wait_minutes == 15


# ============================================================================
# Clock Tests
# ============================================================================

class TestClock:
    """Tests for the injectable clock."""

    def test_clock_used_when_now_omitted(self, engine, standard_inventory, base_time):
        """Test that the engine clock anchors output timestamps."""
        estimate = engine.estimate(RestaurantWaitSnapshot(status=WaitStatus.SHORT), 2, standard_inventory, [])

        assert engine.now() == base_time
        assert estimate.next_available_time == base_time + timedelta(minutes=15)
        assert estimate.recommended_arrival_time == base_time

    def test_explicit_now_wins(self, engine, standard_inventory, base_time):
        """Test that a passed timestamp overrides the clock."""
        later = base_time + timedelta(hours=2)
        estimate = engine.estimate(
            RestaurantWaitSnapshot(status=WaitStatus.SHORT), 2, standard_inventory, [], now=later
        )
        assert estimate.next_available_time == later + timedelta(minutes=15)

    def test_utc_now_shows_restaurant_local_arrival(self, engine, standard_inventory, base_time):
        """Test that a UTC timestamp still quotes the arrival in restaurant time."""
        snapshot = RestaurantWaitSnapshot(status=WaitStatus.SHORT)

        local_quote = engine.quote_party(snapshot, 4, standard_inventory, [], now=base_time)
        utc_quote = engine.quote_party(
            snapshot, 4, standard_inventory, [], now=base_time.astimezone(pytz.utc)
        )

        assert utc_quote.headline == "Estimated wait: 15 min. Please arrive by 7:00 PM."
        assert utc_quote.headline == local_quote.headline

    def test_repeated_quotes_are_equal(self, engine, standard_inventory, make_entry):
        """Test that a fixed clock makes quotes reproducible."""
        queue = [make_entry(party_size=size) for size in (2, 3, 4)]
        snapshot = RestaurantWaitSnapshot(status=WaitStatus.LONG)

        first = engine.quote_party(snapshot, 3, standard_inventory, queue)
        second = engine.quote_party(snapshot, 3, standard_inventory, queue)

        assert first == second


# ============================================================================
# Turnover Tests
# ============================================================================

class TestTurnover:
    """Tests for the turnover pass-throughs."""

    def test_analyze_logs_stale_categories(self, engine, make_category, make_seatings, base_time, caplog):
        """Test that categories needing adjustment are logged."""
        categories = [make_category(id=3, name="Patio", capacity=6, turnover=40)]
        history = make_seatings(3, base_time, 61, 55)

        with caplog.at_level(logging.INFO, logger="services.waitlist_engine"):
            analyses = engine.analyze(categories, history)

        assert analyses[0].needs_adjustment is True
        assert "Patio" in caplog.text

    def test_summarize(self, engine, make_category, make_seatings, base_time):
        """Test the dashboard summary through the engine."""
        categories = [
            make_category(id=1, name="Two-top", turnover=30),
            make_category(id=2, name="Four-top", turnover=45),
        ]
        history = make_seatings(1, base_time, 5, 30) + make_seatings(2, base_time, 5, 50)

        summary = engine.summarize(engine.analyze(categories, history))

        assert summary.total_tables_analyzed == 2
        assert summary.tables_needing_adjustment == 0
        assert summary.average_turnover_minutes == 40
        assert summary.confidence == Confidence.LOW

    def test_summarize_nothing(self, engine):
        """Test that an empty analysis has no summary."""
        assert engine.summarize([]) is None


# ============================================================================
# Misc Tests
# ============================================================================

class TestEngineWiring:
    """Tests for defaults and the singleton."""

    def test_singleton(self):
        """Test that the engine getter returns one instance."""
        assert get_waitlist_engine() is get_waitlist_engine()

    def test_default_config(self):
        """Test that an engine without arguments uses the shared config."""
        engine = WaitlistEngine()
        assert engine.config.matcher.default_turnover_minutes == 45

    def test_headline_without_match(self, engine, standard_inventory):
        """Test the headline helper directly."""
        estimate = engine.estimate(RestaurantWaitSnapshot(), 2, standard_inventory, [])
        assert build_headline(None, estimate).startswith("Tables are not set up")
