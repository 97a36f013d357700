from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Iterable, Sequence

from spending_insights.categories import OTHERS, get_all_categories

from .buckets import TimeBucket, find_bucket_index

_CENT = Decimal("0.01")


def round_money(value: float | Decimal | int) -> float:
    """Round half-up to cents. Only applied to values leaving the engine."""
    amount = Decimal(str(value))
    with localcontext() as ctx:
        # room for every integer digit plus the two cents digits
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return float(amount.quantize(_CENT, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class TransactionRecord:
    """Read-only view of a stored transaction."""

    id: int
    user_id: int
    occurred_at: datetime
    amount: float
    category: str
    merchant: str
    merchant_category: str | None = None

    @classmethod
    def from_model(cls, txn: Any) -> "TransactionRecord":
        return cls(
            id=txn.id,
            user_id=txn.user_id,
            occurred_at=txn.occurred_at,
            amount=float(txn.amount),
            category=txn.category,
            merchant=txn.merchant,
            merchant_category=txn.merchant_category,
        )


@dataclass
class PeriodSummary:
    total_spent: float
    merchant_category_breakdown: dict[str, float]
    transaction_category_breakdown: dict[str, float]
    trend: list[float]
    trend_labels: list[str]
    bucket_counts: list[int] = field(default_factory=list)
    transaction_count: int = 0


def summarize(
    records: Iterable[TransactionRecord],
    buckets: Sequence[TimeBucket],
    labels: Sequence[str] | None = None,
    vocabulary: Iterable[str] | None = None,
) -> PeriodSummary:
    """Fold transactions into totals by merchant category, category and bucket.

    Records dated outside the bucket span are ignored, so every counted amount
    lands in exactly one bucket. Merchant categories outside ``vocabulary`` are
    folded into ``Others``; transaction categories are kept verbatim. Amounts
    are accumulated unrounded and rounded once when the summary is built.
    """
    vocab = list(vocabulary) if vocabulary is not None else get_all_categories()
    known = set(vocab)
    merchant_totals: dict[str, float] = {name: 0.0 for name in vocab}
    merchant_totals.setdefault(OTHERS, 0.0)
    category_totals: dict[str, float] = {}
    trend = [0.0] * len(buckets)
    counts = [0] * len(buckets)
    total = 0.0
    count = 0

    bucket_list = list(buckets)
    window_start = bucket_list[0].start if bucket_list else None
    window_end = bucket_list[-1].end if bucket_list else None

    for record in records:
        if window_start is not None and not (window_start <= record.occurred_at <= window_end):
            continue
        amount = float(record.amount)
        total += amount
        count += 1

        merchant_category = record.merchant_category or OTHERS
        if merchant_category not in known:
            merchant_category = OTHERS
        merchant_totals[merchant_category] += amount

        category = record.category or OTHERS
        category_totals[category] = category_totals.get(category, 0.0) + amount

        idx = find_bucket_index(bucket_list, record.occurred_at)
        if idx is not None:
            trend[idx] += amount
            counts[idx] += 1

    return PeriodSummary(
        total_spent=round_money(total),
        merchant_category_breakdown={k: round_money(v) for k, v in merchant_totals.items()},
        transaction_category_breakdown={k: round_money(v) for k, v in category_totals.items()},
        trend=[round_money(v) for v in trend],
        trend_labels=list(labels) if labels is not None else [b.label for b in bucket_list],
        bucket_counts=counts,
        transaction_count=count,
    )
