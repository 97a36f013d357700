from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from spending_insights.analytics.budget import parse_budget, parse_month
from spending_insights.core.config import settings
from spending_insights.core.database import get_db
from spending_insights.core.deps import get_current_user
from spending_insights.schemas import (
    BudgetAnalysisOut,
    CategoriesOut,
    CategoryAnalysisOut,
    ChartDataOut,
    DashboardOut,
    MerchantsOut,
    SpendingSummaryOut,
    TrendsOut,
)
from spending_insights.services.insights_service import InsightsService
from spending_insights import models


router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("/summary", response_model=SpendingSummaryOut)
def spending_summary(
    period: Optional[str] = Query(None, description="daily | weekly | biweekly | monthly | yearly"),
    category: Optional[str] = Query(None, description="Substring matched against category or merchant category"),
    start_year: Optional[int] = Query(None, alias="startYear"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    return InsightsService(db).spending_summary(
        current_user.id,
        period=period,
        category=category,
        start_year=start_year,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/categories", response_model=CategoriesOut)
def list_categories(db: Session = Depends(get_db)):
    # vocabulary and usage counts are global, no user scoping
    return InsightsService(db).categories()


@router.get("/merchants", response_model=MerchantsOut)
def top_merchants(
    period: str = Query("monthly"),
    limit: int = Query(settings.DEFAULT_MERCHANT_LIMIT, ge=1, le=settings.MAX_MERCHANT_LIMIT),
    start_year: Optional[int] = Query(None, alias="startYear"),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    return InsightsService(db).top_merchants(
        current_user.id,
        period=period,
        limit=limit,
        start_year=start_year,
        category=category,
    )


@router.get("/category-analysis", response_model=CategoryAnalysisOut)
def category_analysis(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    return InsightsService(db).category_analysis(
        current_user.id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )


@router.get("/trends", response_model=TrendsOut)
def spending_trends(
    period: str = Query("monthly", description="daily | weekly | monthly"),
    periods: int = Query(settings.DEFAULT_TREND_PERIODS, ge=1, le=366),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    return InsightsService(db).spending_trends(
        current_user.id,
        period=period,
        periods=periods,
        category=category,
    )


@router.get("/budget", response_model=BudgetAnalysisOut)
def budget_analysis(
    monthly_budget: Optional[str] = Query(None, alias="monthlyBudget"),
    month: Optional[str] = Query(None, description="YYYY-MM or YYYY-MM-DD; defaults to the current month"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    budget = parse_budget(monthly_budget)
    target_month = parse_month(month)
    return InsightsService(db).budget_analysis(current_user.id, budget, month=target_month)


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(
    monthly_budget: Optional[str] = Query(None, alias="monthlyBudget"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    budget = parse_budget(monthly_budget) if monthly_budget not in (None, "") else None
    return InsightsService(db).dashboard(current_user.id, budget)


@router.get("/chart-data", response_model=ChartDataOut)
def chart_data(
    period: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    start_year: Optional[int] = Query(None, alias="startYear"),
    chart_type: str = Query("spending", alias="chartType", description="spending | category | merchant"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    return InsightsService(db).chart_data(
        current_user.id,
        period=period,
        category=category,
        start_year=start_year,
        chart_type=chart_type,
    )
