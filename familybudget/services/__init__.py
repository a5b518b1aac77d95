"""
Services package

Business logic services; each one works through a ``TenantScope`` so every
query is bound to the caller's family account.
"""

from .tenant import TenantScope
from .auth_service import AuthService
from .member_service import MemberService
from .category_service import CategoryService
from .transaction_service import TransactionService
from .report_service import ReportService
from .budget_service import BudgetService, BudgetUtilization, evaluate_limit

__all__ = [
    "TenantScope",
    "AuthService",
    "MemberService",
    "CategoryService",
    "TransactionService",
    "ReportService",
    "BudgetService",
    "BudgetUtilization",
    "evaluate_limit",
]
