from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta

from spending_insights.core.config import settings
from spending_insights.core.errors import InvalidDateRange, InvalidPeriod
from spending_insights.models import now_local_naive

from .buckets import add_months, day_end, day_start, estimate_bucket_count

SUMMARY_PERIODS = ("daily", "weekly", "biweekly", "monthly", "yearly")
TREND_PERIODS = ("daily", "weekly", "monthly")

PERIOD_GRANULARITY: dict[str, str] = {
    "daily": "day",
    "weekly": "week",
    "biweekly": "biweek",
    "monthly": "month",
    "yearly": "year",
}


@dataclass(frozen=True)
class Window:
    period: str
    start: datetime
    end: datetime
    granularity: str


def ensure_bucket_limit(window: Window, max_buckets: int | None = None) -> Window:
    """Reject windows that would split into more than ``max_buckets`` buckets."""
    limit = max_buckets if max_buckets is not None else settings.MAX_BUCKETS
    if estimate_bucket_count(window.start, window.end, window.granularity) > limit:
        raise InvalidDateRange(f"Date range is too long for {window.period} buckets (limit {limit})")
    return window


def normalize_period(period: str | None, supported: tuple[str, ...] = SUMMARY_PERIODS) -> str:
    token = (period or "").strip().lower()
    if token not in supported:
        raise InvalidPeriod(period, supported)
    return token


def resolve_window(period: str | None, anchor_year: int | None = None, today: date | None = None) -> Window:
    """Map a period token to its reporting window and bucket granularity.

    Without an anchor year the window runs from Jan 1 of last year to Dec 31 of
    the current year, whatever the granularity. An anchor year only moves the
    start (to Jan 1 of ``anchor_year - 1``); the end always stays at the close
    of the current year.
    """
    token = normalize_period(period, SUMMARY_PERIODS)
    today = today or now_local_naive().date()
    if anchor_year is not None and not (2 <= anchor_year <= 9999):
        raise InvalidDateRange("startYear is out of range")

    start_year = (anchor_year or today.year) - 1
    start = datetime(start_year, 1, 1)
    end = datetime.combine(date(today.year, 12, 31), time.max)
    if start > end:
        raise InvalidDateRange("startYear must not be after the current year")
    return Window(period=token, start=start, end=end, granularity=PERIOD_GRANULARITY[token])


def apply_date_range(window: Window, start_date: date | None = None, end_date: date | None = None) -> Window:
    """Override the window bounds with explicit calendar dates, keeping the granularity."""
    if start_date is None and end_date is None:
        return window
    start = day_start(start_date) if start_date is not None else window.start
    end = day_end(end_date) if end_date is not None else window.end
    if start > end:
        raise InvalidDateRange("startDate must be on or before endDate")
    return replace(window, start=start, end=end)


def resolve_trend_window(period: str | None, periods: int, now: datetime | None = None) -> Window:
    """Trailing window covering ``periods`` units of ``period`` up to the end of today."""
    token = normalize_period(period, TREND_PERIODS)
    if periods < 1:
        raise InvalidDateRange("periods must be a positive integer")
    today = (now or now_local_naive()).date()
    if token == "daily":
        first = today - timedelta(days=periods)
    elif token == "weekly":
        first = today - timedelta(weeks=periods)
    else:
        first = add_months(today, -periods)
    return ensure_bucket_limit(
        Window(period=token, start=day_start(first), end=day_end(today), granularity=PERIOD_GRANULARITY[token])
    )
