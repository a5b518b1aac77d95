from __future__ import annotations

import uuid
from datetime import date, datetime
from zoneinfo import ZoneInfo
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Boolean,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .core.config import settings
from .core.database import Base


try:
    LOCAL_ZONE = ZoneInfo(getattr(settings, "TIMEZONE", "UTC"))
except Exception:
    LOCAL_ZONE = ZoneInfo("UTC")


def now_local_naive() -> datetime:
    """Return naive datetime normalized to configured local timezone."""
    return datetime.now(LOCAL_ZONE).replace(tzinfo=None)


def today_local() -> date:
    return now_local_naive().date()


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_local_naive, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now_local_naive, onupdate=now_local_naive, nullable=False)


class CategoryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class RecurrencePattern(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class BudgetPeriod(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


class FamilyAccount(Base, TimestampMixin):
    """Tenant boundary: every other row hangs off a family account."""

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    # Back-filled once the first user exists; kept FK-free to avoid a user<->family cycle
    created_by_user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)

    members: Mapped[list["User"]] = relationship(back_populates="family_account")


class User(Base, TimestampMixin):
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    family_account_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("familyaccount.id"), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    profile_picture: Mapped[str | None] = mapped_column(String(500))
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime)

    family_account: Mapped[FamilyAccount] = relationship(back_populates="members")

    @property
    def family_account_name(self) -> str | None:
        return self.family_account.name if self.family_account else None


class Category(Base, TimestampMixin):
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    family_account_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("familyaccount.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[CategoryType] = mapped_column(SAEnum(CategoryType, name="category_type"), nullable=False)
    color_code: Mapped[str] = mapped_column(String(7), default="#CCCCCC", nullable=False)
    icon: Mapped[str | None] = mapped_column(String(16))
    description: Mapped[str | None] = mapped_column(Text)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_by_user_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("user.id", ondelete="SET NULL"))

    __table_args__ = (
        UniqueConstraint("family_account_id", "name", name="uq_category_family_name"),
    )


class Transaction(Base, TimestampMixin):
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    family_account_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("familyaccount.id"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("user.id"), nullable=False)
    category_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("category.id"), nullable=False)
    # Signed: income positive, expense negative
    amount: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    recurrence_pattern: Mapped[RecurrencePattern | None] = mapped_column(
        SAEnum(RecurrencePattern, name="recurrence_pattern"),
    )

    category: Mapped[Category] = relationship()
    user: Mapped[User] = relationship()

    __table_args__ = (
        Index("ix_transaction_family_date", "family_account_id", "transaction_date"),
        Index("ix_transaction_category", "category_id"),
    )

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category else None

    @property
    def category_type(self) -> CategoryType | None:
        return self.category.type if self.category else None

    @property
    def color_code(self) -> str | None:
        return self.category.color_code if self.category else None

    @property
    def added_by_user_name(self) -> str | None:
        return self.user.full_name if self.user else None


class BudgetLimit(Base, TimestampMixin):
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    family_account_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("familyaccount.id"), nullable=False)
    category_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("category.id", ondelete="CASCADE"), nullable=False)
    limit_amount: Mapped[float | None] = mapped_column(Numeric(14, 2, asdecimal=False))
    limit_percentage: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False))
    period_type: Mapped[BudgetPeriod] = mapped_column(
        SAEnum(BudgetPeriod, name="budget_period"),
        nullable=False,
        default=BudgetPeriod.MONTHLY,
    )
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)

    category: Mapped[Category] = relationship()

    __table_args__ = (
        UniqueConstraint("family_account_id", "category_id", name="uq_budget_family_category"),
        CheckConstraint(
            "(limit_amount IS NULL) <> (limit_percentage IS NULL)",
            name="ck_budget_single_limit_kind",
        ),
    )
