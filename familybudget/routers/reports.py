from datetime import date

from fastapi import APIRouter, Depends, Path, Query

from familybudget import models
from familybudget.core.deps import get_tenant
from familybudget.schemas import (
    AnnualReportOut,
    CategoryBreakdownItem,
    MonthlySummaryOut,
    QuickStatsOut,
    TransactionOut,
)
from familybudget.services import ReportService, TenantScope

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/dashboard-overview", response_model=MonthlySummaryOut)
def dashboard_overview(scope: TenantScope = Depends(get_tenant)):
    return ReportService(scope).dashboard_overview()


@router.get("/recent-activity", response_model=list[TransactionOut])
def recent_activity(
    limit: int = Query(10, ge=1, le=50),
    scope: TenantScope = Depends(get_tenant),
):
    return ReportService(scope).recent_activity(limit)


@router.get("/category-breakdown", response_model=list[CategoryBreakdownItem])
def category_breakdown(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    type: models.CategoryType | None = Query(None),
    scope: TenantScope = Depends(get_tenant),
):
    return ReportService(scope).category_breakdown(start_date, end_date, type)


@router.get("/quick-stats", response_model=QuickStatsOut)
def quick_stats(scope: TenantScope = Depends(get_tenant)):
    return ReportService(scope).quick_stats()


@router.get("/monthly/{year}/{month}", response_model=MonthlySummaryOut)
def monthly_summary(
    year: int = Path(..., ge=1900, le=9999),
    month: int = Path(..., ge=1, le=12),
    scope: TenantScope = Depends(get_tenant),
):
    return ReportService(scope).monthly_summary(year, month)


@router.get("/annual/{year}", response_model=AnnualReportOut)
def annual_report(
    year: int = Path(..., ge=1900, le=9999),
    scope: TenantScope = Depends(get_tenant),
):
    return ReportService(scope).annual_report(year)
