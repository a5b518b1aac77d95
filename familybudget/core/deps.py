from __future__ import annotations

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from familybudget.core.database import get_db
from familybudget.errors import AuthError
from familybudget.services import AuthService, TenantScope
from familybudget import models

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> models.User:
    """Resolve the bearer token into an active user.

    Tests may override this dependency to simulate different users.
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("Access token required")
    try:
        return AuthService(db).resolve_token(credentials.credentials)
    except AuthError as exc:
        logger.warning("Rejected token: %s", exc.message)
        raise


def get_tenant(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TenantScope:
    return TenantScope(db, current_user.family_account_id)
