"""Authentication helpers: password hashing, JWT issuing and the current-actor dependency."""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

# Suppress specific deprecation warnings that come from third-party libs we depend on.
warnings.filterwarnings("ignore", category=DeprecationWarning, message=r".*argon2.*")
warnings.filterwarnings("ignore", category=DeprecationWarning, message=r".*datetime\.datetime\.utcnow.*")

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from helpdesk import models
from helpdesk.config import settings
from helpdesk.errors import InvalidCredentials, Unauthenticated

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")
# auto_error=False so a missing header goes through the same error envelope as a bad token
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/users/login", auto_error=False)


@dataclass(frozen=True)
class Actor:
    """The authenticated identity making a request, as carried by the token."""

    id: str
    email: str
    role: models.UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is models.UserRole.ADMIN


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(user: models.UserModel, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    payload = {
        "sub": user.id,
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def authenticate(db: Session, email: str, password: str) -> str:
    """Check an email/password pair and return a signed bearer token.

    Unknown emails and wrong passwords raise the same `InvalidCredentials`
    so callers cannot probe which accounts exist.
    """
    user = db.query(models.UserModel).filter(models.UserModel.email == email).first()
    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    return create_access_token(user)


def decode_actor(token: str) -> Actor:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        logger.debug("JWT decode error: %s", exc)
        raise Unauthenticated("Invalid or expired token")

    user_id = payload.get("id")
    try:
        role = models.UserRole(payload.get("role"))
    except ValueError:
        raise Unauthenticated("Invalid token payload")
    if not user_id:
        raise Unauthenticated("Invalid token payload")
    return Actor(id=str(user_id), email=payload.get("email") or "", role=role)


def get_current_actor(token: Optional[str] = Depends(oauth2_scheme)) -> Actor:
    """Dependency that returns the authenticated actor or raises 401."""
    if not token:
        raise Unauthenticated("Token not provided")
    return decode_actor(token)


__all__ = [
    "Actor",
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "authenticate",
    "decode_actor",
    "get_current_actor",
    "oauth2_scheme",
]
