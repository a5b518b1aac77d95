"""Transaction endpoints, all scoped to the caller's family account."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, Response

from familybudget import models
from familybudget.core.deps import get_current_user, get_tenant
from familybudget.schemas import TransactionCreate, TransactionOut, TransactionUpdate
from familybudget.services import TenantScope, TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=list[TransactionOut])
def list_transactions(
    response: Response,
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    category_id: uuid.UUID | None = Query(None),
    search: str | None = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
    scope: TenantScope = Depends(get_tenant),
):
    rows, total = TransactionService(scope).list_transactions(
        start=start_date,
        end=end_date,
        category_id=category_id,
        search=search,
        page=page,
        page_size=page_size,
    )
    response.headers["X-Total-Count"] = str(total)
    return rows


@router.get("/recent", response_model=list[TransactionOut])
def recent_transactions(
    limit: int = Query(10, ge=1, le=50),
    scope: TenantScope = Depends(get_tenant),
):
    return TransactionService(scope).recent(limit)


@router.get("/{txn_id}", response_model=TransactionOut)
def get_transaction(txn_id: uuid.UUID, scope: TenantScope = Depends(get_tenant)):
    return TransactionService(scope).get(txn_id)


@router.post("", response_model=TransactionOut, status_code=201)
def create_transaction(
    payload: TransactionCreate,
    scope: TenantScope = Depends(get_tenant),
    current_user: models.User = Depends(get_current_user),
):
    return TransactionService(scope).create(payload, user_id=current_user.id)


@router.put("/{txn_id}", response_model=TransactionOut)
def update_transaction(
    txn_id: uuid.UUID,
    payload: TransactionUpdate,
    scope: TenantScope = Depends(get_tenant),
):
    return TransactionService(scope).update(txn_id, payload)


@router.delete("/{txn_id}", status_code=204)
def delete_transaction(txn_id: uuid.UUID, scope: TenantScope = Depends(get_tenant)):
    TransactionService(scope).delete(txn_id)
    return None
