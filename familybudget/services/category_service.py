from __future__ import annotations

import logging
import uuid
from datetime import date

from sqlalchemy import func

from familybudget import models
from familybudget.errors import ConflictError, ValidationError
from familybudget.schemas import CategoryCreate, CategoryTotalOut, CategoryUpdate

from .report_service import ReportService, month_bounds
from .tenant import TenantScope

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, scope: TenantScope) -> None:
        self.scope = scope
        self.db = scope.db

    def list_categories(
        self,
        *,
        category_type: models.CategoryType | None = None,
        include_inactive: bool = True,
    ) -> list[models.Category]:
        q = self.scope.query(models.Category)
        if category_type is not None:
            q = q.filter(models.Category.type == category_type)
        if not include_inactive:
            q = q.filter(models.Category.is_active.is_(True))
        return q.order_by(models.Category.is_default.desc(), models.Category.name.asc()).all()

    def with_month_totals(self, today: date | None = None) -> list[CategoryTotalOut]:
        """Active categories with the current month's booked amount, largest first."""
        today = today or models.today_local()
        start, end = month_bounds(today.year, today.month)
        totals = ReportService(self.scope).category_totals(start, end)
        rows = [
            CategoryTotalOut(
                id=c.id,
                name=c.name,
                type=c.type,
                color_code=c.color_code,
                icon=c.icon,
                total_amount=totals.get(c.id, 0.0),
            )
            for c in self.list_categories(include_inactive=False)
        ]
        rows.sort(key=lambda r: (-r.total_amount, r.name.lower()))
        return rows

    def get(self, category_id: uuid.UUID) -> models.Category:
        return self.scope.get_or_404(models.Category, category_id, "Category")

    def create(self, payload: CategoryCreate, *, created_by: uuid.UUID) -> models.Category:
        name = payload.name.strip()
        self._ensure_unique_name(name)
        row = models.Category(
            name=name,
            type=payload.type,
            color_code=payload.color_code,
            icon=payload.icon,
            description=payload.description,
            is_default=False,
            is_active=True,
            created_by_user_id=created_by,
        )
        self.scope.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info("Created category %s (%s)", row.id, row.name)
        return row

    def update(self, category_id: uuid.UUID, payload: CategoryUpdate) -> models.Category:
        row = self.get(category_id)
        if row.is_default:
            raise ValidationError("Cannot modify default categories")
        patch = payload.model_dump(exclude_unset=True)
        if "name" in patch and patch["name"] is not None:
            patch["name"] = patch["name"].strip()
            if patch["name"].lower() != row.name.lower():
                self._ensure_unique_name(patch["name"])
        if patch.get("type") is not None and patch["type"] != row.type:
            if self._usage_count(row.id):
                raise ConflictError("Cannot change the type of a category with existing transactions")
            if self._has_budget_limit(row.id):
                raise ConflictError("Cannot change the type of a category with a budget limit")
        for key, value in patch.items():
            if value is None and key in ("name", "type", "color_code", "is_active"):
                continue
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, category_id: uuid.UUID) -> None:
        row = self.get(category_id)
        if row.is_default:
            raise ValidationError("Cannot delete default categories")
        if self._usage_count(row.id):
            raise ConflictError("Cannot delete category with existing transactions. Deactivate instead.")
        self.scope.query(models.BudgetLimit).filter(models.BudgetLimit.category_id == row.id).delete(
            synchronize_session=False
        )
        self.db.delete(row)
        self.db.commit()
        logger.info("Deleted category %s", category_id)

    def _usage_count(self, category_id: uuid.UUID) -> int:
        return (
            self.scope.query(models.Transaction)
            .filter(models.Transaction.category_id == category_id)
            .count()
        )

    def _has_budget_limit(self, category_id: uuid.UUID) -> bool:
        return (
            self.scope.query(models.BudgetLimit)
            .filter(models.BudgetLimit.category_id == category_id)
            .first()
            is not None
        )

    def _ensure_unique_name(self, name: str) -> None:
        exists = (
            self.scope.query(models.Category)
            .filter(func.lower(models.Category.name) == name.lower())
            .first()
        )
        if exists:
            raise ConflictError("Category with this name already exists")
