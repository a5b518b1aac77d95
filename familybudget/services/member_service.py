from __future__ import annotations

import logging
import uuid

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from familybudget import models
from familybudget.core.security import hash_password
from familybudget.errors import ConflictError, ValidationError
from familybudget.schemas import MemberCreate, ProfileUpdate

from .tenant import TenantScope

logger = logging.getLogger(__name__)


class MemberService:
    def __init__(self, scope: TenantScope) -> None:
        self.scope = scope
        self.db = scope.db

    def list_members(self) -> list[models.User]:
        return (
            self.scope.query(models.User)
            .filter(models.User.is_active.is_(True))
            .order_by(models.User.created_at.asc())
            .all()
        )

    def add_member(self, payload: MemberCreate) -> models.User:
        email = payload.email.lower()
        if self._email_taken(email):
            raise ConflictError("User with this email already exists")
        user = models.User(
            email=email,
            full_name=payload.full_name.strip(),
            password_hash=hash_password(payload.password) if payload.password else None,
            is_active=True,
        )
        self.scope.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError("User with this email already exists") from exc
        self.db.refresh(user)
        logger.info("Added member %s to family %s", user.id, self.scope.family_account_id)
        return user

    def remove_member(self, member_id: uuid.UUID, *, acting_user_id: uuid.UUID) -> None:
        if member_id == acting_user_id:
            raise ValidationError("Cannot remove yourself from family account")
        member = self.scope.get_or_404(models.User, member_id, "Family member")
        member.is_active = False
        self.db.commit()
        logger.info("Deactivated member %s of family %s", member_id, self.scope.family_account_id)

    def update_profile(self, user: models.User, payload: ProfileUpdate) -> models.User:
        patch = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "full_name" in patch:
            patch["full_name"] = patch["full_name"].strip()
            if not patch["full_name"]:
                raise ValidationError("full_name must not be blank")
        for key, value in patch.items():
            setattr(user, key, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def _email_taken(self, email: str) -> bool:
        return self.db.query(models.User).filter(func.lower(models.User.email) == email).first() is not None
