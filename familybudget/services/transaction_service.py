from __future__ import annotations

import logging
import uuid
from datetime import date

from sqlalchemy import or_
from sqlalchemy.orm import joinedload

from familybudget import models
from familybudget.errors import ValidationError
from familybudget.schemas import TransactionCreate, TransactionUpdate

from .tenant import TenantScope

logger = logging.getLogger(__name__)


def signed_amount(amount: float, category_type: models.CategoryType) -> float:
    """Normalize a client amount to the stored sign: income +, expense -."""
    magnitude = round(abs(float(amount)), 2)
    return magnitude if category_type == models.CategoryType.INCOME else -magnitude


class TransactionService:
    def __init__(self, scope: TenantScope) -> None:
        self.scope = scope
        self.db = scope.db

    def _base_query(self):
        return self.scope.query(models.Transaction).options(
            joinedload(models.Transaction.category),
            joinedload(models.Transaction.user),
        )

    def list_transactions(
        self,
        *,
        start: date | None = None,
        end: date | None = None,
        category_id: uuid.UUID | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 50,
    ) -> tuple[list[models.Transaction], int]:
        if start and end and start > end:
            raise ValidationError("start_date must be on or before end_date")
        q = self._base_query().join(models.Category, models.Transaction.category_id == models.Category.id)
        if start:
            q = q.filter(models.Transaction.transaction_date >= start)
        if end:
            q = q.filter(models.Transaction.transaction_date <= end)
        if category_id:
            q = q.filter(models.Transaction.category_id == category_id)
        if search:
            pattern = f"%{search.strip()}%"
            q = q.filter(or_(models.Transaction.description.ilike(pattern), models.Category.name.ilike(pattern)))
        total = q.count()
        rows = (
            q.order_by(
                models.Transaction.transaction_date.desc(),
                models.Transaction.created_at.desc(),
                models.Transaction.id.desc(),
            )
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return rows, total

    def recent(self, limit: int = 10) -> list[models.Transaction]:
        return (
            self._base_query()
            .order_by(models.Transaction.transaction_date.desc(), models.Transaction.created_at.desc())
            .limit(limit)
            .all()
        )

    def get(self, txn_id: uuid.UUID) -> models.Transaction:
        return self.scope.get_or_404(models.Transaction, txn_id, "Transaction")

    def create(self, payload: TransactionCreate, *, user_id: uuid.UUID) -> models.Transaction:
        category = self._category(payload.category_id)
        row = models.Transaction(
            user_id=user_id,
            category_id=category.id,
            amount=signed_amount(payload.amount, category.type),
            description=payload.description.strip(),
            transaction_date=payload.transaction_date,
            is_recurring=payload.is_recurring,
            recurrence_pattern=payload.recurrence_pattern,
        )
        self.scope.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info("Created transaction %s (%s on %s)", row.id, row.amount, row.transaction_date)
        return row

    def update(self, txn_id: uuid.UUID, payload: TransactionUpdate) -> models.Transaction:
        row = self.get(txn_id)
        patch = payload.model_dump(exclude_unset=True)

        category = row.category
        if patch.get("category_id") is not None:
            category = self._category(patch["category_id"])
            row.category_id = category.id
        amount = patch["amount"] if patch.get("amount") is not None else row.amount
        row.amount = signed_amount(amount, category.type)
        if patch.get("description") is not None:
            row.description = patch["description"].strip()
        if patch.get("transaction_date") is not None:
            row.transaction_date = patch["transaction_date"]

        is_recurring = patch["is_recurring"] if patch.get("is_recurring") is not None else row.is_recurring
        pattern = patch["recurrence_pattern"] if "recurrence_pattern" in patch else row.recurrence_pattern
        if is_recurring and pattern is None:
            raise ValidationError("recurrence_pattern is required for recurring transactions")
        row.is_recurring = is_recurring
        row.recurrence_pattern = pattern if is_recurring else None

        self.db.commit()
        self.db.refresh(row)
        logger.info("Updated transaction %s", row.id)
        return row

    def delete(self, txn_id: uuid.UUID) -> None:
        row = self.get(txn_id)
        self.db.delete(row)
        self.db.commit()
        logger.info("Deleted transaction %s", txn_id)

    def _category(self, category_id: uuid.UUID) -> models.Category:
        category = self.scope.get_or_404(models.Category, category_id, "Category")
        if not category.is_active:
            raise ValidationError("Category is inactive")
        return category
