import uuid

from fastapi import APIRouter, Depends, Query

from familybudget import models
from familybudget.core.deps import get_current_user, get_tenant
from familybudget.schemas import CategoryCreate, CategoryOut, CategoryTotalOut, CategoryUpdate
from familybudget.services import CategoryService, TenantScope

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryOut])
def list_categories(
    type: models.CategoryType | None = Query(None),
    include_inactive: bool = Query(True),
    scope: TenantScope = Depends(get_tenant),
):
    return CategoryService(scope).list_categories(category_type=type, include_inactive=include_inactive)


# declared before "/{category_id}" so the literal path wins
@router.get("/default", response_model=list[CategoryTotalOut])
def categories_with_month_totals(scope: TenantScope = Depends(get_tenant)):
    return CategoryService(scope).with_month_totals()


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: uuid.UUID, scope: TenantScope = Depends(get_tenant)):
    return CategoryService(scope).get(category_id)


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryCreate,
    scope: TenantScope = Depends(get_tenant),
    current_user: models.User = Depends(get_current_user),
):
    return CategoryService(scope).create(payload, created_by=current_user.id)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(category_id: uuid.UUID, payload: CategoryUpdate, scope: TenantScope = Depends(get_tenant)):
    return CategoryService(scope).update(category_id, payload)


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: uuid.UUID, scope: TenantScope = Depends(get_tenant)):
    CategoryService(scope).delete(category_id)
    return None
