"""
Example usage of the waitlist capacity engine.

This demonstrates quoting parties against a live queue and auditing
configured turnover times against seating history.
"""

from datetime import timedelta

from core.logging import setup_logging
from core.utils_datetime import get_current_datetime
from domain import (
    HistoricalSample,
    RestaurantWaitSnapshot,
    TableCategory,
    WaitlistEntry,
    WaitlistStatus,
    WaitStatus,
)
from services import WaitlistEngine, describe_turnover_analysis


def build_dining_room() -> list[TableCategory]:
    """A small dining room with three table categories."""
    return [
        TableCategory(id=1, name="Two-top", capacity=2, count=4, estimated_turnover_minutes=30),
        TableCategory(id=2, name="Four-top", capacity=4, count=3, estimated_turnover_minutes=45),
        TableCategory(id=3, name="Patio", capacity=6, count=1, estimated_turnover_minutes=40),
    ]


def run_quote_examples(engine: WaitlistEngine, categories: list[TableCategory]):
    """Quote a few parties against a busy Friday queue."""
    now = engine.now()
    queue = [
        WaitlistEntry(id=101, party_size=2),
        WaitlistEntry(id=102, party_size=4),
        WaitlistEntry(id=103, party_size=3, status=WaitlistStatus.NOTIFIED),
        WaitlistEntry(id=104, party_size=5, table_category_id=3),
    ]
    history = [
        HistoricalSample(day_of_week=day, hour=now.hour, average_wait_minutes=25)
        for day in range(7)
    ]
    snapshot = RestaurantWaitSnapshot(status=WaitStatus.LONG)

    print("=" * 60)
    print("Quoting parties...")
    print("=" * 60)

    for party_size, preference in [(2, None), (4, "patio"), (9, None)]:
        quote = engine.quote_party(
            snapshot,
            party_size,
            categories,
            queue,
            preferred_category_name=preference,
            historical_samples=history,
        )
        table = quote.match.table_name if quote.match else "-"
        print(f"\nParty of {party_size} -> {table}")
        print(f"  {quote.headline}")
        print(
            f"  confidence={quote.estimate.confidence.value} "
            f"busy={quote.estimate.busy_level}%"
        )


def run_turnover_example(engine: WaitlistEngine, categories: list[TableCategory]):
    """Audit turnover on a patio that turns slower than configured."""
    start = get_current_datetime() - timedelta(days=7)
    seatings = [
        WaitlistEntry(
            id=1000 + i,
            party_size=6,
            status=WaitlistStatus.SEATED,
            table_category_id=3,
            seated_at=start + timedelta(minutes=55 * i),
        )
        for i in range(61)
    ]

    print("\n" + "=" * 60)
    print("Turnover audit...")
    print("=" * 60)

    analyses = engine.analyze(categories, seatings)
    for analysis in analyses:
        print(f"\n{describe_turnover_analysis(analysis)}")

    summary = engine.summarize(analyses)
    if summary:
        print(
            f"\n{summary.tables_needing_adjustment} of {summary.total_tables_analyzed} "
            f"categories need adjustment"
        )


if __name__ == "__main__":
    setup_logging()

    engine = WaitlistEngine()
    categories = build_dining_room()

    run_quote_examples(engine, categories)
    run_turnover_example(engine, categories)
