"""Waitlist capacity and table-matching services."""

from .wait_time_estimator import estimate_wait_time, format_wait_time
from .table_matcher import find_best_table_match, format_wait_time_description
from .turnover_analyzer import (
    analyze_turnover_times,
    generate_turnover_summary,
    describe_turnover_analysis,
)
from .waitlist_engine import WaitlistEngine, get_waitlist_engine

__all__ = [
    "estimate_wait_time",
    "format_wait_time",
    "find_best_table_match",
    "format_wait_time_description",
    "analyze_turnover_times",
    "generate_turnover_summary",
    "describe_turnover_analysis",
    "WaitlistEngine",
    "get_waitlist_engine",
]
