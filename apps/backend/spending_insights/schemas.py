from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .analytics.budget import BudgetStatus
from .analytics.trends import TrendDirection


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SpendingSummaryOut(CamelModel):
    period: str
    category: str
    start_date: date
    end_date: date
    total_spent: float
    merchant_category_breakdown: dict[str, float]
    transaction_category_breakdown: dict[str, float]
    trend: list[float]
    trend_labels: list[str]
    transaction_count: int


class CategoryUsageOut(CamelModel):
    category: str
    merchant_category: Optional[str] = None
    count: int


class CategoriesOut(CamelModel):
    predefined_categories: list[str]
    available_from_transactions: list[CategoryUsageOut]


class MerchantOut(CamelModel):
    merchant: str
    merchant_category: str
    total_spent: float
    transaction_count: int


class MerchantsOut(CamelModel):
    period: str
    start_date: date
    end_date: date
    top_merchants: list[MerchantOut]


class CategoryAnalysisItem(CamelModel):
    category: str
    total_amount: float
    transaction_count: int
    average_amount: float
    percentage: float


class CategoryAnalysisOut(CamelModel):
    total_amount: float
    categories: list[CategoryAnalysisItem]


class TrendPeriodOut(CamelModel):
    label: str
    from_: datetime = Field(alias="from")
    to: datetime
    total_amount: float
    transaction_count: int


class TrendsOut(CamelModel):
    period: str
    periods: int
    start_date: date
    end_date: date
    direction: TrendDirection
    percentage_change: float
    is_significant: bool
    period_data: list[TrendPeriodOut]


class BudgetMonthOut(CamelModel):
    year: int
    month: int


class BudgetAnalysisOut(CamelModel):
    month: BudgetMonthOut
    budget: float
    spent: float
    remaining: float
    percentage_used: float
    transaction_count: int
    daily_average: float
    projected_spending: float
    status: BudgetStatus
    is_over_budget: bool


class DashboardOut(CamelModel):
    summary: SpendingSummaryOut
    top_categories: list[CategoryAnalysisItem]
    trends: TrendsOut
    budget: Optional[BudgetAnalysisOut] = None


ChartType = Literal["spending", "category", "merchant"]


class ChartOut(CamelModel):
    type: Literal["line", "doughnut", "bar"]
    title: str
    labels: list[str]
    data: list[float]
    total_spent: float


class ChartDataOut(CamelModel):
    period: str
    start_date: date
    end_date: date
    chart_type: ChartType
    category: str
    transaction_count: int
    chart_data: ChartOut
