from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from .models import BudgetPeriod, CategoryType, RecurrencePattern


COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class MessageOut(BaseModel):
    message: str


# ===== Auth / users =====

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    confirm_password: str
    full_name: str = Field(min_length=1, max_length=100)
    account_name: str = Field(min_length=1, max_length=100)
    is_joining_family: bool = False

    @field_validator("full_name", "account_name")
    def strip_names(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(BaseModel):
    id: uuid.UUID
    email: str
    full_name: str
    family_account_id: uuid.UUID
    family_account_name: Optional[str] = None
    profile_picture: Optional[str] = None
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthOut(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: UserOut


class MemberCreate(BaseModel):
    email: EmailStr
    full_name: str = Field(min_length=1, max_length=100)
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    profile_picture: Optional[str] = Field(default=None, max_length=500)


# ===== Categories =====

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    type: CategoryType
    color_code: str = Field(default="#CCCCCC", pattern=COLOR_PATTERN)
    icon: Optional[str] = Field(default="💰", max_length=16)
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    type: Optional[CategoryType] = None
    color_code: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    icon: Optional[str] = Field(default=None, max_length=16)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class CategoryOut(BaseModel):
    id: uuid.UUID
    name: str
    type: CategoryType
    color_code: str
    icon: Optional[str] = None
    description: Optional[str] = None
    is_default: bool
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CategoryTotalOut(BaseModel):
    id: uuid.UUID
    name: str
    type: CategoryType
    color_code: str
    icon: Optional[str] = None
    total_amount: float


# ===== Transactions =====

class TransactionCreate(BaseModel):
    amount: float
    category_id: uuid.UUID
    description: str = Field(default="", max_length=500)
    transaction_date: date
    is_recurring: bool = False
    recurrence_pattern: Optional[RecurrencePattern] = None

    @field_validator("amount")
    def non_zero(cls, v: float):
        if v == 0:
            raise ValueError("amount must be non-zero")
        return v

    @model_validator(mode="after")
    def recurrence_consistency(self):
        if self.is_recurring and self.recurrence_pattern is None:
            raise ValueError("recurrence_pattern is required for recurring transactions")
        if not self.is_recurring:
            self.recurrence_pattern = None
        return self


class TransactionUpdate(BaseModel):
    amount: Optional[float] = None
    category_id: Optional[uuid.UUID] = None
    description: Optional[str] = Field(default=None, max_length=500)
    transaction_date: Optional[date] = None
    is_recurring: Optional[bool] = None
    recurrence_pattern: Optional[RecurrencePattern] = None

    @field_validator("amount")
    def non_zero(cls, v: Optional[float]):
        if v is not None and v == 0:
            raise ValueError("amount must be non-zero")
        return v


class TransactionOut(BaseModel):
    id: uuid.UUID
    amount: float
    description: str
    transaction_date: date
    is_recurring: bool
    recurrence_pattern: Optional[RecurrencePattern] = None
    category_id: uuid.UUID
    category_name: Optional[str] = None
    category_type: Optional[CategoryType] = None
    color_code: Optional[str] = None
    user_id: uuid.UUID
    added_by_user_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ===== Budgets =====

class BudgetLimitSet(BaseModel):
    category_id: uuid.UUID
    limit_amount: Optional[float] = Field(default=None, gt=0)
    limit_percentage: Optional[float] = Field(default=None, gt=0, le=100)
    period_type: BudgetPeriod = BudgetPeriod.MONTHLY
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def exactly_one_limit(self):
        has_amount = self.limit_amount is not None
        has_pct = self.limit_percentage is not None
        if not has_amount and not has_pct:
            raise ValueError("Either limit_amount or limit_percentage is required")
        if has_amount and has_pct:
            raise ValueError("Provide only one of limit_amount or limit_percentage")
        if self.period_type == BudgetPeriod.CUSTOM and (self.start_date is None or self.end_date is None):
            raise ValueError("custom periods require start_date and end_date")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        return self


class BudgetLimitOut(BaseModel):
    id: uuid.UUID
    category_id: uuid.UUID
    category_name: str
    category_type: CategoryType
    color_code: str
    limit_amount: Optional[float] = None
    limit_percentage: Optional[float] = None
    period_type: BudgetPeriod
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    period_start: date
    period_end: date
    current_spending: float
    period_income: float
    effective_limit: float
    percentage: float
    display_percentage: float
    is_over_limit: bool
    is_near_limit: bool


# ===== Reports =====

class MonthlySummaryOut(BaseModel):
    total_income: float
    total_expenses: float
    total_savings: float
    savings_percentage: float


class AnnualMonthItem(BaseModel):
    month: int
    monthly_income: float
    monthly_expenses: float
    monthly_savings: float


class AnnualReportOut(BaseModel):
    year: int
    monthly_data: list[AnnualMonthItem]
    total_annual_income: float
    total_annual_expenses: float
    total_annual_savings: float


class CategoryBreakdownItem(BaseModel):
    category_id: uuid.UUID
    category_name: str
    category_type: CategoryType
    color_code: str
    total_amount: float
    transaction_count: int


class QuickStatsOut(BaseModel):
    total_transactions: int
    active_categories: int
    budget_limits_set: int
