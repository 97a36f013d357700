from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from typing import Any, Callable

from sqlalchemy.orm import Session

from spending_insights.analytics.aggregation import round_money, summarize
from spending_insights.analytics.budget import analyze_budget, month_bounds, validate_budget
from spending_insights.analytics.buckets import build_buckets, day_end, day_start
from spending_insights.analytics.periods import (
    apply_date_range,
    ensure_bucket_limit,
    resolve_trend_window,
    resolve_window,
)
from spending_insights.analytics.trends import analyze_trend
from spending_insights.categories import find_merchant_category, get_all_categories
from spending_insights.core.config import settings
from spending_insights.core.database import worker_session
from spending_insights.core.errors import InvalidChartType, InvalidDateRange
from spending_insights.models import now_local_naive
from spending_insights.schemas import (
    BudgetAnalysisOut,
    BudgetMonthOut,
    CategoriesOut,
    CategoryAnalysisItem,
    CategoryAnalysisOut,
    CategoryUsageOut,
    ChartDataOut,
    ChartOut,
    DashboardOut,
    MerchantOut,
    MerchantsOut,
    SpendingSummaryOut,
    TrendPeriodOut,
    TrendsOut,
)

from .transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)

CHART_TYPES = ("spending", "category", "merchant")
CHART_MERCHANT_LIMIT = 10
DASHBOARD_TOP_CATEGORIES = 5
DASHBOARD_TREND_PERIODS = 6


class InsightsService:
    """Spending insights for a single user key.

    Validation (period tokens, budgets, date ranges) always runs before the
    transaction store is read. ``now`` pins the clock for the resolver, the
    trend window and the budget projection.
    """

    def __init__(self, db: Session, *, repository: TransactionRepository | None = None, now: datetime | None = None) -> None:
        self.db = db
        self.repository = repository or TransactionRepository(db)
        self._now = now

    def now(self) -> datetime:
        return self._now or now_local_naive()

    # ----- summary -----
    def spending_summary(
        self,
        user_id: int,
        *,
        period: str | None = None,
        category: str | None = None,
        start_year: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> SpendingSummaryOut:
        window = resolve_window(period or settings.DEFAULT_SUMMARY_PERIOD, start_year, today=self.now().date())
        window = apply_date_range(window, start_date, end_date)
        ensure_bucket_limit(window)
        buckets, labels = build_buckets(window.start, window.end, window.granularity)

        records = self.repository.find_transactions(user_id, window.start, window.end, category)
        summary = summarize(records, buckets, labels, get_all_categories())
        logger.debug(
            "summary user=%s period=%s buckets=%d transactions=%d",
            user_id,
            window.period,
            len(buckets),
            summary.transaction_count,
        )

        return SpendingSummaryOut(
            period=window.period,
            category=category or "all",
            start_date=window.start.date(),
            end_date=window.end.date(),
            total_spent=summary.total_spent,
            merchant_category_breakdown=summary.merchant_category_breakdown,
            transaction_category_breakdown=summary.transaction_category_breakdown,
            trend=summary.trend,
            trend_labels=summary.trend_labels,
            transaction_count=summary.transaction_count,
        )

    # ----- vocabulary -----
    def categories(self) -> CategoriesOut:
        observed = self.repository.observed_categories()
        return CategoriesOut(
            predefined_categories=get_all_categories(),
            available_from_transactions=[
                CategoryUsageOut(category=category, merchant_category=merchant_category, count=count)
                for category, merchant_category, count in observed
            ],
        )

    # ----- merchants -----
    def top_merchants(
        self,
        user_id: int,
        *,
        period: str | None = "monthly",
        limit: int | None = None,
        start_year: int | None = None,
        category: str | None = None,
    ) -> MerchantsOut:
        window = resolve_window(period or "monthly", start_year, today=self.now().date())
        limit = limit or settings.DEFAULT_MERCHANT_LIMIT
        rows = self.repository.top_merchants(user_id, window.start, window.end, limit=limit, category=category)
        return MerchantsOut(
            period=window.period,
            start_date=window.start.date(),
            end_date=window.end.date(),
            top_merchants=[
                MerchantOut(
                    merchant=row.merchant,
                    merchant_category=row.merchant_category or find_merchant_category(row.merchant),
                    total_spent=round_money(row.total),
                    transaction_count=row.count,
                )
                for row in rows
            ],
        )

    def category_analysis(
        self,
        user_id: int,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 10,
    ) -> CategoryAnalysisOut:
        start = day_start(start_date) if start_date is not None else None
        end = day_end(end_date) if end_date is not None else None
        if start is not None and end is not None and start > end:
            raise InvalidDateRange("startDate must be on or before endDate")
        total, rows = self.repository.category_totals(user_id, start=start, end=end, limit=limit)
        return CategoryAnalysisOut(
            total_amount=round_money(total),
            categories=[
                CategoryAnalysisItem(
                    category=row.category,
                    total_amount=round_money(row.total),
                    transaction_count=row.count,
                    average_amount=round_money(row.average),
                    percentage=(row.total / total) * 100 if total > 0 else 0.0,
                )
                for row in rows
            ],
        )

    # ----- trends -----
    def spending_trends(
        self,
        user_id: int,
        *,
        period: str | None = "monthly",
        periods: int | None = None,
        category: str | None = None,
    ) -> TrendsOut:
        periods = periods or settings.DEFAULT_TREND_PERIODS
        window = resolve_trend_window(period or "monthly", periods, now=self.now())
        buckets, labels = build_buckets(window.start, window.end, window.granularity)

        records = self.repository.find_transactions(user_id, window.start, window.end, category)
        summary = summarize(records, buckets, labels, get_all_categories())
        trend = analyze_trend(
            summary.trend,
            direction_threshold=settings.TREND_DIRECTION_THRESHOLD,
            significance_threshold=settings.TREND_SIGNIFICANCE_THRESHOLD,
        )

        return TrendsOut(
            period=window.period,
            periods=periods,
            start_date=window.start.date(),
            end_date=window.end.date(),
            direction=trend.direction,
            percentage_change=trend.percentage_change,
            is_significant=trend.is_significant,
            period_data=[
                TrendPeriodOut(
                    label=bucket.label,
                    from_=bucket.start,
                    to=bucket.end,
                    total_amount=amount,
                    transaction_count=count,
                )
                for bucket, amount, count in zip(buckets, summary.trend, summary.bucket_counts)
            ],
        )

    # ----- budget -----
    def budget_analysis(self, user_id: int, monthly_budget: Any, *, month: date | None = None) -> BudgetAnalysisOut:
        budget = validate_budget(monthly_budget)
        today = self.now().date()
        month = month or today
        start, end = month_bounds(month)

        records = self.repository.find_transactions(user_id, start, end)
        analysis = analyze_budget(budget, records, month=month, today=today)
        return BudgetAnalysisOut(
            month=BudgetMonthOut(year=analysis.year, month=analysis.month),
            budget=analysis.budget,
            spent=analysis.spent,
            remaining=analysis.remaining,
            percentage_used=analysis.percentage_used,
            transaction_count=analysis.transaction_count,
            daily_average=analysis.daily_average,
            projected_spending=analysis.projected_spending,
            status=analysis.status,
            is_over_budget=analysis.is_over_budget,
        )

    # ----- dashboard -----
    def dashboard(self, user_id: int, monthly_budget: Any = None) -> DashboardOut:
        """Run the dashboard sub-requests concurrently, one session each."""
        budget = validate_budget(monthly_budget) if monthly_budget is not None else None
        now = self.now()

        def _run(task: Callable[["InsightsService"], Any]) -> Any:
            with worker_session(self.db) as session:
                return task(InsightsService(session, now=now))

        tasks: dict[str, Callable[[InsightsService], Any]] = {
            "summary": lambda svc: svc.spending_summary(user_id, period="monthly"),
            "categories": lambda svc: svc.category_analysis(user_id, limit=DASHBOARD_TOP_CATEGORIES),
            "trends": lambda svc: svc.spending_trends(user_id, period="monthly", periods=DASHBOARD_TREND_PERIODS),
        }
        if budget is not None:
            tasks["budget"] = lambda svc: svc.budget_analysis(user_id, budget)

        with ThreadPoolExecutor(max_workers=max(1, settings.DASHBOARD_WORKERS)) as pool:
            futures = {name: pool.submit(_run, task) for name, task in tasks.items()}
            results = {name: future.result() for name, future in futures.items()}

        return DashboardOut(
            summary=results["summary"],
            top_categories=results["categories"].categories,
            trends=results["trends"],
            budget=results.get("budget"),
        )

    # ----- charts -----
    def chart_data(
        self,
        user_id: int,
        *,
        period: str | None = None,
        category: str | None = None,
        start_year: int | None = None,
        chart_type: str = "spending",
    ) -> ChartDataOut:
        if chart_type not in CHART_TYPES:
            raise InvalidChartType(chart_type, CHART_TYPES)
        window = ensure_bucket_limit(
            resolve_window(period or settings.DEFAULT_SUMMARY_PERIOD, start_year, today=self.now().date())
        )
        buckets, labels = build_buckets(window.start, window.end, window.granularity)
        records = self.repository.find_transactions(user_id, window.start, window.end, category)

        if chart_type == "merchant":
            merchants = self.repository.top_merchants(
                user_id, window.start, window.end, limit=CHART_MERCHANT_LIMIT, category=category
            )
            chart = ChartOut(
                type="bar",
                title=f"Top {CHART_MERCHANT_LIMIT} Merchants",
                labels=[m.merchant for m in merchants],
                data=[round_money(m.total) for m in merchants],
                total_spent=round_money(sum(m.total for m in merchants)),
            )
        else:
            summary = summarize(records, buckets, labels, get_all_categories())
            if chart_type == "spending":
                chart = ChartOut(
                    type="line",
                    title=f"Spending Trend - {window.period.capitalize()}",
                    labels=summary.trend_labels,
                    data=summary.trend,
                    total_spent=summary.total_spent,
                )
            else:
                ranked = sorted(
                    ((name, value) for name, value in summary.transaction_category_breakdown.items() if value > 0),
                    key=lambda item: item[1],
                    reverse=True,
                )
                chart = ChartOut(
                    type="doughnut",
                    title="Spending by Category",
                    labels=[name for name, _ in ranked],
                    data=[value for _, value in ranked],
                    total_spent=summary.total_spent,
                )

        return ChartDataOut(
            period=window.period,
            start_date=window.start.date(),
            end_date=window.end.date(),
            chart_type=chart_type,
            category=category or "all",
            transaction_count=len(records),
            chart_data=chart,
        )

