from __future__ import annotations

import uuid

from sqlalchemy.orm import Session

from .models import Category, CategoryType


# (name, type, color, icon)
DEFAULT_CATEGORIES: tuple[tuple[str, CategoryType, str, str], ...] = (
    ("Salary", CategoryType.INCOME, "#4CAF50", "💰"),
    ("Other Income", CategoryType.INCOME, "#8BC34A", "💵"),
    ("Food", CategoryType.EXPENSE, "#FF9800", "🍔"),
    ("Monthly Bills & EMIs", CategoryType.EXPENSE, "#F44336", "💳"),
    ("Entertainment", CategoryType.EXPENSE, "#E91E63", "🎬"),
    ("Investments", CategoryType.EXPENSE, "#3F51B5", "📈"),
    ("Long Term", CategoryType.EXPENSE, "#009688", "🏠"),
    ("Other", CategoryType.EXPENSE, "#9E9E9E", "📦"),
)


def seed_default_categories(db: Session, family_account_id: uuid.UUID) -> list[Category]:
    """Add the default category set for a family; existing names are skipped."""
    existing = {
        name.lower()
        for (name,) in db.query(Category.name).filter(Category.family_account_id == family_account_id).all()
    }
    created: list[Category] = []
    for name, ctype, color, icon in DEFAULT_CATEGORIES:
        if name.lower() in existing:
            continue
        row = Category(
            family_account_id=family_account_id,
            name=name,
            type=ctype,
            color_code=color,
            icon=icon,
            is_default=True,
            is_active=True,
        )
        db.add(row)
        created.append(row)
    db.flush()
    return created
