import uuid

from fastapi import APIRouter, Depends

from familybudget import models
from familybudget.core.deps import get_current_user, get_tenant
from familybudget.schemas import MemberCreate, MessageOut, ProfileUpdate, UserOut
from familybudget.services import MemberService, TenantScope

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/family-members", response_model=list[UserOut])
def list_family_members(scope: TenantScope = Depends(get_tenant)):
    return MemberService(scope).list_members()


@router.post("/family-members", response_model=UserOut, status_code=201)
def add_family_member(payload: MemberCreate, scope: TenantScope = Depends(get_tenant)):
    return MemberService(scope).add_member(payload)


@router.delete("/family-members/{user_id}", response_model=MessageOut)
def remove_family_member(
    user_id: uuid.UUID,
    scope: TenantScope = Depends(get_tenant),
    current_user: models.User = Depends(get_current_user),
):
    MemberService(scope).remove_member(user_id, acting_user_id=current_user.id)
    return MessageOut(message="Family member removed successfully")


@router.put("/profile", response_model=UserOut)
def update_profile(
    payload: ProfileUpdate,
    scope: TenantScope = Depends(get_tenant),
    current_user: models.User = Depends(get_current_user),
):
    return MemberService(scope).update_profile(current_user, payload)
