from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from familybudget.errors import AuthError

from .config import settings


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(user_id: uuid.UUID, family_account_id: uuid.UUID, email: str) -> str:
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "fam": str(family_account_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.JWT_EXPIRES_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry, returning the claims.

    Raises ``AuthError`` (403) for expired or tampered tokens.
    """
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "fam", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthError("Token expired", status_code=403) from exc
    except jwt.InvalidTokenError as exc:
        raise AuthError("Invalid token", status_code=403) from exc
    try:
        claims["sub"] = uuid.UUID(str(claims["sub"]))
        claims["fam"] = uuid.UUID(str(claims["fam"]))
    except ValueError as exc:
        raise AuthError("Invalid token", status_code=403) from exc
    return claims
