from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

DEFAULT_DIRECTION_THRESHOLD = 5.0
DEFAULT_SIGNIFICANCE_THRESHOLD = 10.0


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass(frozen=True)
class TrendResult:
    direction: TrendDirection
    percentage_change: float
    is_significant: bool


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def analyze_trend(
    values: Sequence[float],
    direction_threshold: float = DEFAULT_DIRECTION_THRESHOLD,
    significance_threshold: float = DEFAULT_SIGNIFICANCE_THRESHOLD,
) -> TrendResult:
    """Compare the average of the second half of ``values`` against the first.

    Odd-length sequences give the middle element to the second half. A zero
    first-half average yields a zero change. ``direction_threshold`` and
    ``significance_threshold`` are percentages applied to the absolute change.
    """
    if len(values) < 2:
        return TrendResult(direction=TrendDirection.STABLE, percentage_change=0.0, is_significant=False)

    mid = len(values) // 2
    first_avg = _mean(values[:mid])
    second_avg = _mean(values[mid:])
    change = ((second_avg - first_avg) / first_avg) * 100 if first_avg > 0 else 0.0

    if change > direction_threshold:
        direction = TrendDirection.INCREASING
    elif change < -direction_threshold:
        direction = TrendDirection.DECREASING
    else:
        direction = TrendDirection.STABLE

    return TrendResult(
        direction=direction,
        percentage_change=change,
        is_significant=abs(change) > significance_threshold,
    )
