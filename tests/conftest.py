"""Pytest configuration and fixtures for waitlist engine tests."""
import pytest
from datetime import datetime, timedelta
import pytz

from core.engine_config import EngineConfig, EstimatorRules, MatcherRules, TurnoverRules
from domain.enums import WaitlistStatus
from domain.models import TableCategory, WaitlistEntry
from services.waitlist_engine import WaitlistEngine


TEST_TIMEZONE = "America/New_York"


@pytest.fixture(scope="function")
def engine_config():
    """Default business rules pinned to a known timezone."""
    return EngineConfig(
        timezone=TEST_TIMEZONE,
        estimator=EstimatorRules(),
        matcher=MatcherRules(),
        turnover=TurnoverRules(),
    )


@pytest.fixture(scope="function")
def base_time():
    """Friday, March 15, 2024 at 7:00 PM restaurant time."""
    return pytz.timezone(TEST_TIMEZONE).localize(datetime(2024, 3, 15, 19, 0))


@pytest.fixture(scope="function")
def make_category():
    """Factory fixture for table categories."""
    def _make(id=1, name="Two-top", capacity=2, count=1, turnover=30, is_active=True):
        return TableCategory(
            id=id,
            name=name,
            capacity=capacity,
            count=count,
            estimated_turnover_minutes=turnover,
            is_active=is_active,
        )
    return _make


@pytest.fixture(scope="function")
def make_entry():
    """Factory fixture for waitlist entries."""
    counter = {"next_id": 1}

    def _make(party_size=2, status=WaitlistStatus.WAITING, table_category_id=None, seated_at=None):
        entry = WaitlistEntry(
            id=counter["next_id"],
            party_size=party_size,
            status=status,
            table_category_id=table_category_id,
            seated_at=seated_at,
        )
        counter["next_id"] += 1
        return entry
    return _make


@pytest.fixture(scope="function")
def make_seatings(make_entry):
    """Factory fixture for a run of seated entries spaced a fixed gap apart."""
    def _make(category_id, start, count, gap_minutes):
        return [
            make_entry(
                party_size=2,
                status=WaitlistStatus.SEATED,
                table_category_id=category_id,
                seated_at=start + timedelta(minutes=gap_minutes * i),
            )
            for i in range(count)
        ]
    return _make


@pytest.fixture(scope="function")
def standard_inventory(make_category):
    """A small dining room: two-tops, four-tops and a six-top patio."""
    return [
        make_category(id=1, name="Two-top", capacity=2, count=4, turnover=30),
        make_category(id=2, name="Four-top", capacity=4, count=3, turnover=45),
        make_category(id=3, name="Patio", capacity=6, count=1, turnover=60),
    ]


@pytest.fixture(scope="function")
def engine(engine_config, base_time):
    """Waitlist engine with a frozen clock."""
    return WaitlistEngine(config=engine_config, clock=lambda: base_time)
