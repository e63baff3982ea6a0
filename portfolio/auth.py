"""
Admin sessions: password check, bearer tokens and the `require_admin` dependency.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Header, HTTPException
from jose import JWTError, jwt
from passlib.context import CryptContext

from portfolio.config import Settings, get_settings

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@dataclass(frozen=True)
class AdminSession:
    """Authenticated admin identity passed explicitly to admin routes."""

    email: str
    role: str
    expires_at: datetime


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def authenticate(email: str, password: str, settings: Settings) -> bool:
    if not settings.admin_password_hash:
        logger.warning("Admin login attempted but no admin password hash is configured")
        return False
    if email.strip().lower() != settings.admin_email.lower():
        return False
    return verify_password(password, settings.admin_password_hash)


def _signing_secret(settings: Settings) -> str:
    if not settings.jwt_secret:
        logger.error("Admin session requested but no JWT secret is configured")
        raise HTTPException(status_code=503, detail="Admin sessions are not configured")
    return settings.jwt_secret


def create_access_token(
    email: str, settings: Settings, expires_delta: Optional[timedelta] = None
) -> str:
    secret = _signing_secret(settings)
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {"sub": email, "role": ADMIN_ROLE, "exp": expire}
    return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def decode_session(token: str, settings: Settings) -> AdminSession:
    secret = _signing_secret(settings)
    try:
        payload = jwt.decode(
            token, secret, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    email = payload.get("sub")
    role = payload.get("role")
    if email != settings.admin_email or role != ADMIN_ROLE:
        raise HTTPException(status_code=403, detail="Forbidden")
    return AdminSession(
        email=email,
        role=role,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


def require_admin(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> AdminSession:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    return decode_session(token, settings)
