from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from familybudget import models
from familybudget.errors import ValidationError
from familybudget.schemas import BudgetLimitOut, BudgetLimitSet

from .report_service import ReportService, month_bounds, year_bounds
from .tenant import TenantScope

logger = logging.getLogger(__name__)

DEFAULT_WARNING_THRESHOLD = 80.0


@dataclass(frozen=True)
class BudgetUtilization:
    effective_limit: float
    percentage: float
    display_percentage: float
    is_over_limit: bool
    is_near_limit: bool


def evaluate_limit(
    current_spending: float,
    *,
    limit_amount: float | None = None,
    limit_percentage: float | None = None,
    period_income: float = 0.0,
    warning_threshold: float = DEFAULT_WARNING_THRESHOLD,
) -> BudgetUtilization:
    """Compare spending against a fixed or income-relative ceiling.

    A fixed limit is used as-is; a percentage limit becomes
    ``period_income * limit_percentage / 100``. ``percentage`` is not capped,
    ``display_percentage`` is capped at 100 for progress bars. The flags are
    decided on the exact ratio; only the returned figures are rounded.
    """
    if (limit_amount is None) == (limit_percentage is None):
        raise ValueError("exactly one of limit_amount or limit_percentage must be set")
    spending = abs(float(current_spending or 0))
    if limit_amount is not None:
        effective = float(limit_amount)
    else:
        effective = float(period_income or 0) * float(limit_percentage) / 100

    if effective > 0:
        ratio = spending * 100 / effective
        is_over = spending >= effective
    else:
        # a zero ceiling is breached by any spending
        ratio = 100.0 if spending > 0 else 0.0
        is_over = spending > 0

    return BudgetUtilization(
        effective_limit=round(effective, 2),
        percentage=round(ratio, 2),
        display_percentage=round(min(ratio, 100.0), 2),
        is_over_limit=is_over,
        is_near_limit=not is_over and ratio >= warning_threshold,
    )


def period_window(limit: models.BudgetLimit, reference: date) -> tuple[date, date]:
    if limit.period_type == models.BudgetPeriod.CUSTOM and limit.start_date and limit.end_date:
        return limit.start_date, limit.end_date
    if limit.period_type == models.BudgetPeriod.YEARLY:
        return year_bounds(reference.year)
    return month_bounds(reference.year, reference.month)


class BudgetService:
    def __init__(self, scope: TenantScope) -> None:
        self.scope = scope
        self.db = scope.db
        self.reports = ReportService(scope)

    def list_limits(
        self,
        reference: date | None = None,
        warning_threshold: float = DEFAULT_WARNING_THRESHOLD,
    ) -> list[BudgetLimitOut]:
        reference = reference or models.today_local()
        limits = (
            self.scope.query(models.BudgetLimit)
            .options(joinedload(models.BudgetLimit.category))
            .join(models.Category, models.BudgetLimit.category_id == models.Category.id)
            .order_by(models.Category.name.asc())
            .all()
        )
        window_cache: dict[tuple[date, date], tuple[dict[uuid.UUID, float], float]] = {}
        return [self.evaluate(limit, reference, warning_threshold, window_cache) for limit in limits]

    def evaluate(
        self,
        limit: models.BudgetLimit,
        reference: date | None = None,
        warning_threshold: float = DEFAULT_WARNING_THRESHOLD,
        window_cache: dict | None = None,
    ) -> BudgetLimitOut:
        reference = reference or models.today_local()
        # one aggregation per distinct window
        cache = window_cache if window_cache is not None else {}
        start, end = period_window(limit, reference)
        if (start, end) not in cache:
            totals = self.reports.category_totals(start, end)
            income, _ = self.reports.period_totals(start, end)
            cache[(start, end)] = (totals, income)
        totals, income = cache[(start, end)]
        spending = totals.get(limit.category_id, 0.0)
        util = evaluate_limit(
            spending,
            limit_amount=limit.limit_amount,
            limit_percentage=limit.limit_percentage,
            period_income=income,
            warning_threshold=warning_threshold,
        )
        return BudgetLimitOut(
            id=limit.id,
            category_id=limit.category_id,
            category_name=limit.category.name,
            category_type=limit.category.type,
            color_code=limit.category.color_code,
            limit_amount=limit.limit_amount,
            limit_percentage=limit.limit_percentage,
            period_type=limit.period_type,
            start_date=limit.start_date,
            end_date=limit.end_date,
            period_start=start,
            period_end=end,
            current_spending=spending,
            period_income=round(income, 2),
            effective_limit=util.effective_limit,
            percentage=util.percentage,
            display_percentage=util.display_percentage,
            is_over_limit=util.is_over_limit,
            is_near_limit=util.is_near_limit,
        )

    def set_limit(self, payload: BudgetLimitSet) -> tuple[models.BudgetLimit, bool]:
        """Insert or update the family's limit for a category.

        Returns ``(row, created)``.
        """
        category = self.scope.get_or_404(models.Category, payload.category_id, "Category")
        if category.type != models.CategoryType.EXPENSE:
            raise ValidationError("Budget limits can only be set on expense categories")

        values = {
            "limit_amount": payload.limit_amount,
            "limit_percentage": payload.limit_percentage,
            "period_type": payload.period_type,
            "start_date": payload.start_date,
            "end_date": payload.end_date,
        }
        existing = self._find(payload.category_id)
        if existing is not None:
            return self._apply(existing, values), False

        row = models.BudgetLimit(category_id=payload.category_id, **values)
        self.scope.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            # lost an insert race on uq_budget_family_category; update the winner
            self.db.rollback()
            existing = self._find(payload.category_id)
            if existing is None:
                raise
            return self._apply(existing, values), False
        self.db.refresh(row)
        logger.info("Created budget limit %s for category %s", row.id, row.category_id)
        return row, True

    def delete_limit(self, budget_id: uuid.UUID) -> None:
        row = self.scope.get_or_404(models.BudgetLimit, budget_id, "Budget limit")
        self.db.delete(row)
        self.db.commit()
        logger.info("Deleted budget limit %s", budget_id)

    def _find(self, category_id: uuid.UUID) -> models.BudgetLimit | None:
        return self.scope.query(models.BudgetLimit).filter(models.BudgetLimit.category_id == category_id).first()

    def _apply(self, row: models.BudgetLimit, values: dict) -> models.BudgetLimit:
        for key, value in values.items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        logger.info("Updated budget limit %s for category %s", row.id, row.category_id)
        return row
