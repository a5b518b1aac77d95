import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, Response

from familybudget import models
from familybudget.core.deps import get_tenant
from familybudget.schemas import BudgetLimitOut, BudgetLimitSet
from familybudget.services import BudgetService, TenantScope
from familybudget.services.budget_service import DEFAULT_WARNING_THRESHOLD

router = APIRouter(prefix="/budgets", tags=["budgets"])


def _reference_date(year: int | None, month: int | None) -> date:
    today = models.today_local()
    return date(year or today.year, month or (today.month if year is None else 1), 1)


@router.get("", response_model=list[BudgetLimitOut])
def list_budget_limits(
    year: int | None = Query(None, ge=1900, le=9999),
    month: int | None = Query(None, ge=1, le=12),
    warning_threshold: float = Query(DEFAULT_WARNING_THRESHOLD, gt=0, le=100),
    scope: TenantScope = Depends(get_tenant),
):
    """Evaluate every limit of the family against a reference month.

    The reference month defaults to the current one. When only ``year`` is
    given the reference is January of that year: monthly limits cover
    January, yearly limits cover the whole year. Custom limits always use
    their own dates.
    """
    return BudgetService(scope).list_limits(_reference_date(year, month), warning_threshold)


@router.post("", response_model=BudgetLimitOut, status_code=201)
def set_budget_limit(
    payload: BudgetLimitSet,
    response: Response,
    scope: TenantScope = Depends(get_tenant),
):
    svc = BudgetService(scope)
    row, created = svc.set_limit(payload)
    if not created:
        response.status_code = 200
    return svc.evaluate(row)


@router.delete("/{budget_id}", status_code=204)
def delete_budget_limit(budget_id: uuid.UUID, scope: TenantScope = Depends(get_tenant)):
    BudgetService(scope).delete_limit(budget_id)
    return None
