# app/core/security.py

"""
Security utilities and authorization dependencies.

- Password hashing and verification (passlib bcrypt).
- JWT access token creation and verification (python-jose).
- Bearer credential extraction and role-based authorization. Every admin-gated
  route, including account creation, goes through get_current_admin_user.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.database import get_session
from app.core.exceptions import Forbidden, Unauthenticated
from app.domains.usr import models as usr_models

from app import API_PREFIX

logger = logging.getLogger(__name__)

# --- Password hashing ---
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


# --- OAuth2 scheme ---
# auto_error=False so a missing header is reported through our own Unauthenticated error
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{API_PREFIX}/usr/auth/token", auto_error=False)


# --- JWT ---
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Creates a signed access token. data must carry the account uid as "sub".
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> str:
    """
    Returns the uid carried by a valid token, raising Unauthenticated otherwise.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("Rejected bearer token: %s", e)
        raise Unauthenticated("Invalid token")
    uid = payload.get("sub")
    if not uid:
        raise Unauthenticated("Invalid token")
    return uid


async def get_token_subject(token: Optional[str] = Depends(oauth2_scheme)) -> str:
    """
    Verifies the bearer credential of the request. No session or token cache:
    the check runs on every request.
    """
    if not token:
        raise Unauthenticated("Unauthorized: Missing token")
    return decode_access_token(token)


async def get_current_user_from_token(
    uid: str = Depends(get_token_subject),
    db: AsyncSession = Depends(get_session),
) -> usr_models.User:
    """
    Resolves the account behind a valid token.
    """
    user = await db.get(usr_models.User, uid)
    if user is None:
        raise Unauthenticated()
    return user


# --- Role-based authorization ---

def get_current_active_user(
    current_user: usr_models.User = Depends(get_current_user_from_token),
) -> usr_models.User:
    """
    Any signed-in, active account (admin or staff).
    """
    if not current_user.is_active:
        raise Forbidden("Inactive user")
    return current_user


async def get_current_admin_user(
    uid: str = Depends(get_token_subject),
    db: AsyncSession = Depends(get_session),
) -> usr_models.User:
    """
    Admin gate. The token is checked first (401); then a missing account,
    an inactive account or a non-admin role all yield 403.
    """
    user = await db.get(usr_models.User, uid)
    if user is None or not user.is_active or user.role != usr_models.UserRole.ADMIN:
        logger.warning("Admin access denied for uid=%s", uid)
        raise Forbidden("Admin access required")
    return user
