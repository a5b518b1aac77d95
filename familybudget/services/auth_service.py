from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from familybudget import models
from familybudget.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from familybudget.errors import AuthError, ConflictError, NotFoundError
from familybudget.schemas import LoginRequest, RegisterRequest
from familybudget.seed import seed_default_categories

logger = logging.getLogger(__name__)


class AuthService:
    """Registration, login and token-to-user resolution."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def register(self, payload: RegisterRequest) -> tuple[models.User, str]:
        email = payload.email.lower()
        if self._find_by_email(email) is not None:
            raise ConflictError("User already exists with this email")

        family = (
            self.db.query(models.FamilyAccount)
            .filter(func.lower(models.FamilyAccount.name) == payload.account_name.lower())
            .first()
        )
        if payload.is_joining_family:
            if family is None:
                raise NotFoundError("Family account not found")
        elif family is not None:
            raise ConflictError("Family account name already taken")

        try:
            if family is None:
                family = models.FamilyAccount(name=payload.account_name)
                self.db.add(family)
                self.db.flush()
                seed_default_categories(self.db, family.id)

            user = models.User(
                family_account_id=family.id,
                email=email,
                password_hash=hash_password(payload.password),
                full_name=payload.full_name,
                is_active=True,
                last_login_at=models.now_local_naive(),
            )
            self.db.add(user)
            self.db.flush()
            if family.created_by_user_id is None:
                family.created_by_user_id = user.id
            self.db.commit()
        except IntegrityError as exc:
            # a concurrent registration claimed the email or family name first
            self.db.rollback()
            logger.warning("Registration for %s lost a uniqueness race", email)
            raise ConflictError("User or family account already exists") from exc
        self.db.refresh(user)
        logger.info("Registered user %s in family %s", user.id, family.id)
        return user, create_access_token(user.id, family.id, user.email)

    def login(self, payload: LoginRequest) -> tuple[models.User, str]:
        user = self._find_by_email(payload.email.lower())
        if user is None or not user.is_active or not verify_password(payload.password, user.password_hash):
            logger.warning("Failed login attempt for %s", payload.email)
            raise AuthError("Invalid credentials")
        user.last_login_at = models.now_local_naive()
        self.db.commit()
        self.db.refresh(user)
        logger.info("User %s logged in", user.id)
        return user, create_access_token(user.id, user.family_account_id, user.email)

    def resolve_token(self, token: str) -> models.User:
        claims = decode_access_token(token)
        user = self.db.query(models.User).filter(models.User.id == claims["sub"]).first()
        if user is None or not user.is_active:
            raise AuthError("User not found or inactive")
        if user.family_account_id != claims["fam"]:
            raise AuthError("Token does not match the user's family account")
        return user

    def _find_by_email(self, email: str) -> models.User | None:
        return self.db.query(models.User).filter(func.lower(models.User.email) == email).first()
