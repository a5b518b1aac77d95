"""Income/expense aggregation over a family's transactions.

Income is the sum of amounts booked on income categories; expenses are the sum
of absolute amounts booked on expense categories. Every figure is computed by
the database (SUM/COUNT/GROUP BY) and rounded to cents on the way out.
"""

from __future__ import annotations

import calendar
import uuid
from datetime import date

from sqlalchemy import case, extract, func
from sqlalchemy.orm import joinedload

from familybudget import models
from familybudget.errors import ValidationError
from familybudget.schemas import (
    AnnualMonthItem,
    AnnualReportOut,
    CategoryBreakdownItem,
    MonthlySummaryOut,
    QuickStatsOut,
)

from .tenant import TenantScope


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    if not 1 <= year <= 9999:
        raise ValidationError("year is out of range")
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def year_bounds(year: int) -> tuple[date, date]:
    if not 1 <= year <= 9999:
        raise ValidationError("year is out of range")
    return date(year, 1, 1), date(year, 12, 31)


def savings_percentage(income: float, savings: float) -> float:
    if income <= 0:
        return 0.0
    return round(savings / income * 100, 2)


def build_summary(income: float, expenses: float) -> MonthlySummaryOut:
    income = round(float(income or 0), 2)
    expenses = round(float(expenses or 0), 2)
    savings = round(income - expenses, 2)
    return MonthlySummaryOut(
        total_income=income,
        total_expenses=expenses,
        total_savings=savings,
        savings_percentage=savings_percentage(income, savings),
    )


_INCOME_SUM = func.coalesce(
    func.sum(
        case((models.Category.type == models.CategoryType.INCOME, models.Transaction.amount), else_=0)
    ),
    0,
)
_EXPENSE_SUM = func.coalesce(
    func.sum(
        case((models.Category.type == models.CategoryType.EXPENSE, func.abs(models.Transaction.amount)), else_=0)
    ),
    0,
)


class ReportService:
    def __init__(self, scope: TenantScope) -> None:
        self.scope = scope

    def _transactions_with_category(self, *columns):
        return (
            self.scope.query_columns(models.Transaction, *columns)
            .join(models.Category, models.Transaction.category_id == models.Category.id)
        )

    def period_totals(self, start: date | None, end: date | None) -> tuple[float, float]:
        """Return ``(income, expenses)`` for the inclusive date range."""
        q = self._transactions_with_category(_INCOME_SUM, _EXPENSE_SUM)
        if start is not None:
            q = q.filter(models.Transaction.transaction_date >= start)
        if end is not None:
            q = q.filter(models.Transaction.transaction_date <= end)
        income, expenses = q.one()
        return float(income or 0), float(expenses or 0)

    def monthly_summary(self, year: int, month: int) -> MonthlySummaryOut:
        start, end = month_bounds(year, month)
        return build_summary(*self.period_totals(start, end))

    def dashboard_overview(self, today: date | None = None) -> MonthlySummaryOut:
        today = today or models.today_local()
        return self.monthly_summary(today.year, today.month)

    def annual_report(self, year: int) -> AnnualReportOut:
        start, end = year_bounds(year)
        month_expr = extract("month", models.Transaction.transaction_date)
        rows = (
            self._transactions_with_category(month_expr, _INCOME_SUM, _EXPENSE_SUM)
            .filter(
                models.Transaction.transaction_date >= start,
                models.Transaction.transaction_date <= end,
            )
            .group_by(month_expr)
            .all()
        )
        by_month: dict[int, tuple[float, float]] = {}
        for month, income, expenses in rows:
            by_month[int(month)] = (float(income or 0), float(expenses or 0))

        monthly_data: list[AnnualMonthItem] = []
        for month in range(1, 13):
            income, expenses = by_month.get(month, (0.0, 0.0))
            income, expenses = round(income, 2), round(expenses, 2)
            monthly_data.append(
                AnnualMonthItem(
                    month=month,
                    monthly_income=income,
                    monthly_expenses=expenses,
                    monthly_savings=round(income - expenses, 2),
                )
            )
        total_income = round(sum(m.monthly_income for m in monthly_data), 2)
        total_expenses = round(sum(m.monthly_expenses for m in monthly_data), 2)
        return AnnualReportOut(
            year=year,
            monthly_data=monthly_data,
            total_annual_income=total_income,
            total_annual_expenses=total_expenses,
            total_annual_savings=round(total_income - total_expenses, 2),
        )

    def category_breakdown(
        self,
        start: date | None = None,
        end: date | None = None,
        category_type: models.CategoryType | None = None,
    ) -> list[CategoryBreakdownItem]:
        if start and end and start > end:
            raise ValidationError("start_date must be on or before end_date")
        total_expr = func.coalesce(func.sum(func.abs(models.Transaction.amount)), 0)
        count_expr = func.count(models.Transaction.id)
        q = self._transactions_with_category(
            models.Category.id,
            models.Category.name,
            models.Category.type,
            models.Category.color_code,
            total_expr.label("total_amount"),
            count_expr.label("transaction_count"),
        )
        if start is not None:
            q = q.filter(models.Transaction.transaction_date >= start)
        if end is not None:
            q = q.filter(models.Transaction.transaction_date <= end)
        if category_type is not None:
            q = q.filter(models.Category.type == category_type)
        rows = (
            q.group_by(
                models.Category.id,
                models.Category.name,
                models.Category.type,
                models.Category.color_code,
            )
            .order_by(total_expr.desc(), models.Category.name.asc())
            .all()
        )
        return [
            CategoryBreakdownItem(
                category_id=cid,
                category_name=name,
                category_type=ctype,
                color_code=color,
                total_amount=round(float(total or 0), 2),
                transaction_count=int(count or 0),
            )
            for cid, name, ctype, color, total, count in rows
        ]

    def category_totals(self, start: date | None, end: date | None) -> dict[uuid.UUID, float]:
        """Absolute amount booked per category within the range."""
        q = self.scope.query_columns(
            models.Transaction,
            models.Transaction.category_id,
            func.coalesce(func.sum(func.abs(models.Transaction.amount)), 0),
        )
        if start is not None:
            q = q.filter(models.Transaction.transaction_date >= start)
        if end is not None:
            q = q.filter(models.Transaction.transaction_date <= end)
        rows = q.group_by(models.Transaction.category_id).all()
        return {cid: round(float(total or 0), 2) for cid, total in rows}

    def recent_activity(self, limit: int = 10) -> list[models.Transaction]:
        return (
            self.scope.query(models.Transaction)
            .options(joinedload(models.Transaction.category), joinedload(models.Transaction.user))
            .order_by(models.Transaction.transaction_date.desc(), models.Transaction.created_at.desc())
            .limit(limit)
            .all()
        )

    def quick_stats(self) -> QuickStatsOut:
        total_transactions = self.scope.query(models.Transaction).count()
        active_categories = (
            self.scope.query(models.Category).filter(models.Category.is_active.is_(True)).count()
        )
        budget_limits = self.scope.query(models.BudgetLimit).count()
        return QuickStatsOut(
            total_transactions=total_transactions,
            active_categories=active_categories,
            budget_limits_set=budget_limits,
        )
