"""
Analytics package for spending insights.

Pure, synchronous building blocks: window resolution, bucket construction,
aggregation, trend and budget analysis. Nothing here touches the database.
"""

from .periods import Window, resolve_window, resolve_trend_window, apply_date_range, ensure_bucket_limit
from .buckets import TimeBucket, build_buckets, find_bucket_index
from .aggregation import TransactionRecord, PeriodSummary, summarize, round_money
from .trends import TrendDirection, TrendResult, analyze_trend
from .budget import BudgetStatus, BudgetAnalysis, analyze_budget, budget_status

__all__ = [
    "Window",
    "resolve_window",
    "resolve_trend_window",
    "apply_date_range",
    "ensure_bucket_limit",
    "TimeBucket",
    "build_buckets",
    "find_bucket_index",
    "TransactionRecord",
    "PeriodSummary",
    "summarize",
    "round_money",
    "TrendDirection",
    "TrendResult",
    "analyze_trend",
    "BudgetStatus",
    "BudgetAnalysis",
    "analyze_budget",
    "budget_status",
]
