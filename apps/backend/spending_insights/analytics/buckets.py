from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Sequence

GRANULARITIES = ("day", "week", "biweek", "month", "year")

# Smallest step between the end of one bucket and the start of the next.
TICK = timedelta(microseconds=1)


@dataclass(frozen=True)
class TimeBucket:
    """Closed interval ``[start, end]``; exposed as ``from`` / ``to`` in API payloads."""

    start: datetime
    end: datetime
    label: str

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def day_start(value: date | datetime) -> datetime:
    return datetime.combine(_as_date(value), time.min)


def day_end(value: date | datetime) -> datetime:
    return datetime.combine(_as_date(value), time.max)


def _plus_days(moment: datetime, days: int) -> datetime:
    """``moment + days``, pinned to the last representable day instead of overflowing."""
    try:
        return moment + timedelta(days=days)
    except OverflowError:
        return datetime.combine(date.max, time.min)


def week_start(value: date | datetime) -> datetime:
    """Monday 00:00 of the week containing ``value``."""
    start = day_start(value)
    return start - timedelta(days=start.weekday())


def month_start(value: date | datetime) -> datetime:
    return datetime(value.year, value.month, 1)


def month_end(value: date | datetime) -> datetime:
    last_day = calendar.monthrange(value.year, value.month)[1]
    return datetime.combine(date(value.year, value.month, last_day), time.max)


def add_months(base: date, delta: int) -> date:
    """Shift ``base`` by ``delta`` months, clamping the day to the target month."""
    year = base.year + (base.month - 1 + delta) // 12
    month = (base.month - 1 + delta) % 12 + 1
    day = min(base.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _calendar_unit(cursor: datetime, granularity: str) -> tuple[datetime, datetime, str]:
    """Return the unclamped span and label of the unit that starts at or contains ``cursor``."""
    if granularity == "day":
        return day_start(cursor), day_end(cursor), cursor.date().isoformat()
    if granularity == "week":
        start = week_start(cursor)
        return start, day_end(_plus_days(start, 6)), f"Week {start.date().isoformat()}"
    if granularity == "biweek":
        # Fixed 14-day spans anchored at the cursor, not at a calendar boundary.
        end = day_end(_plus_days(cursor, 13))
        return cursor, end, f"{cursor.date().isoformat()} - {end.date().isoformat()}"
    if granularity == "month":
        return month_start(cursor), month_end(cursor), f"{cursor.year:04d}-{cursor.month:02d}"
    if granularity == "year":
        return datetime(cursor.year, 1, 1), datetime.combine(date(cursor.year, 12, 31), time.max), str(cursor.year)
    raise ValueError(f"Unknown bucket granularity: {granularity!r}")


def build_buckets(start: datetime, end: datetime, granularity: str) -> tuple[list[TimeBucket], list[str]]:
    """Split ``[start, end]`` into ordered, gap-free, non-overlapping buckets.

    Every bucket follows the calendar definition of ``granularity`` (weeks run
    Monday to Sunday, months and years follow calendar boundaries), except that
    the first bucket never starts before ``start`` and the last never ends after
    ``end``. Consecutive buckets are separated by exactly one microsecond.

    Returns the buckets and their labels as parallel lists.
    """
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unknown bucket granularity: {granularity!r}")

    buckets: list[TimeBucket] = []
    labels: list[str] = []
    cursor = start
    while cursor <= end:
        unit_start, unit_end, label = _calendar_unit(cursor, granularity)
        bucket = TimeBucket(start=max(unit_start, cursor), end=min(unit_end, end), label=label)
        buckets.append(bucket)
        labels.append(label)
        if unit_end >= end:
            break
        cursor = unit_end + TICK
    return buckets, labels


def find_bucket_index(buckets: Sequence[TimeBucket], moment: datetime) -> int | None:
    """Index of the first bucket containing ``moment``, or None when outside all buckets."""
    for idx, bucket in enumerate(buckets):
        if bucket.contains(moment):
            return idx
    return None


def estimate_bucket_count(start: datetime, end: datetime, granularity: str) -> int:
    """Upper bound on ``len(build_buckets(start, end, granularity)[0])`` without building them."""
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unknown bucket granularity: {granularity!r}")
    if start > end:
        return 0
    days = (end.date() - start.date()).days + 1
    if granularity == "day":
        return days
    if granularity == "week":
        return days // 7 + 2
    if granularity == "biweek":
        return (days + 13) // 14
    if granularity == "month":
        return (end.year - start.year) * 12 + end.month - start.month + 1
    return end.year - start.year + 1
