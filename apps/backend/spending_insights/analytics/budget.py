from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable

from spending_insights.core.errors import InvalidBudget, InvalidDateRange
from spending_insights.models import now_local_naive

from .aggregation import TransactionRecord, round_money
from .buckets import month_end, month_start


class BudgetStatus(str, Enum):
    ON_TRACK = "on_track"
    WARNING = "warning"
    CRITICAL = "critical"
    OVER_BUDGET = "over_budget"


@dataclass(frozen=True)
class BudgetAnalysis:
    year: int
    month: int
    budget: float
    spent: float
    remaining: float
    percentage_used: float
    transaction_count: int
    daily_average: float
    projected_spending: float
    status: BudgetStatus
    is_over_budget: bool


def budget_status(percentage_used: float) -> BudgetStatus:
    if percentage_used <= 50:
        return BudgetStatus.ON_TRACK
    if percentage_used <= 80:
        return BudgetStatus.WARNING
    if percentage_used <= 100:
        return BudgetStatus.CRITICAL
    return BudgetStatus.OVER_BUDGET


def validate_budget(value: Any) -> float:
    """Return ``value`` as a float when it is a finite positive number."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidBudget()
    number = float(value)
    if not math.isfinite(number) or number <= 0:
        raise InvalidBudget()
    return number


def parse_budget(raw: str | None) -> float:
    """Parse a query-string budget; missing and non-numeric values are rejected."""
    if raw is None or not str(raw).strip():
        raise InvalidBudget("Monthly budget is required")
    try:
        number = float(str(raw).strip())
    except ValueError:
        raise InvalidBudget() from None
    return validate_budget(number)


def parse_month(raw: str | None) -> date | None:
    """Accept ``YYYY-MM`` or ``YYYY-MM-DD``; returns the first day of that month."""
    if raw is None or not raw.strip():
        return None
    text = raw.strip()
    for fmt in ("%Y-%m", "%Y-%m-%d"):
        try:
            parsed = datetime.strptime(text, fmt).date()
        except ValueError:
            continue
        return parsed.replace(day=1)
    raise InvalidDateRange("month must be formatted as YYYY-MM or YYYY-MM-DD")


def month_bounds(month: date) -> tuple[datetime, datetime]:
    return month_start(month), month_end(month)


def analyze_budget(
    monthly_budget: Any,
    records: Iterable[TransactionRecord],
    month: date | None = None,
    today: date | None = None,
) -> BudgetAnalysis:
    """Compare a month's spending against ``monthly_budget``.

    The daily average divides by today's day of month even when ``month`` is
    a past month, and the projection scales that average to the length of
    ``month``.
    """
    budget = validate_budget(monthly_budget)
    today = today or now_local_naive().date()
    month = month or today
    start, end = month_bounds(month)

    spent = 0.0
    count = 0
    for record in records:
        if start <= record.occurred_at <= end:
            spent += float(record.amount)
            count += 1

    percentage_used = (spent / budget) * 100 if spent else 0.0
    days_in_month = calendar.monthrange(month.year, month.month)[1]
    daily_average = spent / today.day
    projected = daily_average * days_in_month

    return BudgetAnalysis(
        year=month.year,
        month=month.month,
        budget=round_money(budget),
        spent=round_money(spent),
        remaining=round_money(budget - spent),
        percentage_used=percentage_used,
        transaction_count=count,
        daily_average=round_money(daily_average),
        projected_spending=round_money(projected),
        status=budget_status(percentage_used),
        is_over_budget=spent > budget,
    )
