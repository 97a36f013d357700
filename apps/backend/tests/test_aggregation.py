from datetime import date, datetime, time

import pytest

from spending_insights.analytics.aggregation import TransactionRecord, round_money, summarize
from spending_insights.analytics.buckets import build_buckets, day_end
from spending_insights.categories import OTHERS, get_all_categories


def _rec(idx: int, when: datetime, amount: float, category: str = "Others", merchant_category: str | None = None):
    return TransactionRecord(
        id=idx,
        user_id=1,
        occurred_at=when,
        amount=amount,
        category=category,
        merchant=f"merchant-{idx}",
        merchant_category=merchant_category,
    )


@pytest.fixture()
def year_2024_monthly():
    return build_buckets(datetime(2024, 1, 1), datetime.combine(date(2024, 12, 31), time.max), "month")


def test_monthly_scenario(year_2024_monthly):
    buckets, labels = year_2024_monthly
    records = [
        _rec(1, datetime(2024, 1, 5, 9, 0), 10.00, "Food & Dining", "Food & Dining"),
        _rec(2, datetime(2024, 1, 20, 18, 30), 5.50, "Food & Dining", "Food & Dining"),
        _rec(3, datetime(2024, 3, 3, 12, 0), 100.00, "Shopping", "Shopping"),
    ]
    summary = summarize(records, buckets, labels, get_all_categories())

    assert summary.total_spent == 115.50
    assert summary.trend_labels[0] == "2024-01"
    assert summary.trend[0] == 15.50
    assert summary.trend[1] == 0.0
    assert summary.trend[2] == 100.00
    assert summary.bucket_counts[:3] == [2, 0, 1]
    assert summary.transaction_count == 3
    assert summary.merchant_category_breakdown["Food & Dining"] == 15.50
    assert summary.merchant_category_breakdown["Shopping"] == 100.00
    assert summary.transaction_category_breakdown == {"Food & Dining": 15.50, "Shopping": 100.00}


def test_totals_agree(year_2024_monthly):
    buckets, labels = year_2024_monthly
    records = [_rec(i, datetime(2024, (i % 12) + 1, 10), 1.1 * i, "Travel", "Travel") for i in range(1, 40)]
    summary = summarize(records, buckets, labels)

    assert sum(summary.trend) == pytest.approx(summary.total_spent, abs=0.01 * len(buckets))
    assert sum(summary.merchant_category_breakdown.values()) == pytest.approx(summary.total_spent, abs=0.05)
    assert sum(summary.transaction_category_breakdown.values()) == pytest.approx(summary.total_spent, abs=0.05)
    assert sum(summary.bucket_counts) == summary.transaction_count == 39


def test_unknown_or_missing_merchant_category_goes_to_others(year_2024_monthly):
    buckets, labels = year_2024_monthly
    records = [
        _rec(1, datetime(2024, 2, 1), 20.0, "Crypto", "Crypto Exchange"),
        _rec(2, datetime(2024, 2, 2), 5.0, "Snacks", None),
    ]
    summary = summarize(records, buckets, labels, get_all_categories())

    assert summary.merchant_category_breakdown[OTHERS] == 25.0
    assert "Crypto Exchange" not in summary.merchant_category_breakdown
    # transaction categories are kept as recorded
    assert summary.transaction_category_breakdown == {"Crypto": 20.0, "Snacks": 5.0}


def test_empty_input_yields_zeroed_summary(year_2024_monthly):
    buckets, labels = year_2024_monthly
    summary = summarize([], buckets, labels, get_all_categories())

    assert summary.total_spent == 0.0
    assert summary.trend == [0.0] * 12
    assert summary.trend_labels == labels
    assert summary.transaction_count == 0
    assert set(summary.merchant_category_breakdown) == set(get_all_categories())
    assert all(v == 0.0 for v in summary.merchant_category_breakdown.values())
    assert summary.transaction_category_breakdown == {}


def test_records_outside_buckets_are_ignored():
    buckets, labels = build_buckets(datetime(2024, 5, 1), day_end(date(2024, 5, 31)), "week")
    records = [
        _rec(1, datetime(2024, 4, 30, 23, 59), 50.0),
        _rec(2, datetime(2024, 5, 15), 12.0),
        _rec(3, datetime(2024, 6, 1), 70.0),
    ]
    summary = summarize(records, buckets, labels)
    assert summary.total_spent == 12.0
    assert summary.transaction_count == 1
    assert sum(summary.trend) == 12.0


def test_labels_default_to_bucket_labels(year_2024_monthly):
    buckets, labels = year_2024_monthly
    assert summarize([], buckets).trend_labels == labels


def test_accumulation_is_rounded_once(year_2024_monthly):
    buckets, labels = year_2024_monthly
    records = [_rec(1, datetime(2024, 1, 1), 0.1), _rec(2, datetime(2024, 1, 2), 0.2)]
    summary = summarize(records, buckets, labels)
    assert summary.total_spent == 0.3
    assert summary.trend[0] == 0.3


@pytest.mark.parametrize(
    "value,expected",
    [
        (0.125, 0.13),
        (2.675, 2.68),
        (10, 10.0),
        (-1.005, -1.01),
        (3.14159, 3.14),
        (1e30, 1e30),
        (1.7976931348623157e308, 1.7976931348623157e308),
    ],
)
def test_round_money_half_up(value, expected):
    assert round_money(value) == expected
