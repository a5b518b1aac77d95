from __future__ import annotations

import uuid
from typing import Any, TypeVar

from sqlalchemy.orm import Query, Session

from familybudget.errors import NotFoundError

T = TypeVar("T")


class TenantScope:
    """Data access bound to one family account.

    Every query built here carries the ``family_account_id`` filter, and every
    row added through :meth:`add` is stamped with it, so callers never filter
    by tenant themselves.
    """

    def __init__(self, db: Session, family_account_id: uuid.UUID) -> None:
        self.db = db
        self.family_account_id = family_account_id

    def query(self, model: type[T]) -> Query:
        return self.db.query(model).filter(model.family_account_id == self.family_account_id)  # type: ignore[attr-defined]

    def query_columns(self, model: type, *columns: Any) -> Query:
        """Column/aggregate query rooted at ``model`` and scoped to the tenant."""
        return (
            self.db.query(*columns)
            .select_from(model)
            .filter(model.family_account_id == self.family_account_id)  # type: ignore[attr-defined]
        )

    def get(self, model: type[T], obj_id: uuid.UUID) -> T | None:
        return self.query(model).filter(model.id == obj_id).first()  # type: ignore[attr-defined]

    def get_or_404(self, model: type[T], obj_id: uuid.UUID, label: str | None = None) -> T:
        row = self.get(model, obj_id)
        if row is None:
            raise NotFoundError(f"{label or model.__name__} not found")
        return row

    def add(self, row: T) -> T:
        row.family_account_id = self.family_account_id  # type: ignore[attr-defined]
        self.db.add(row)
        return row
