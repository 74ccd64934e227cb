# app/domains/usr/schemas.py

"""
API data transfer objects of the 'usr' domain.
"""

import re
from typing import Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from . import models as usr_models

# at least one letter, digit or allowed symbol
PASSWORD_CHARSET = re.compile(r"[A-Za-z0-9!@#$%^&*]")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# =============================================================================
# 1. User schemas
# =============================================================================
class UserCreate(CamelModel):
    """Payload of the admin-only account creation endpoint."""
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: usr_models.UserRole

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("password")
    @classmethod
    def check_password_charset(cls, value: str) -> str:
        if not PASSWORD_CHARSET.search(value):
            raise ValueError("Password must include letters, numbers, or special characters")
        return value


class UserCreated(CamelModel):
    uid: str
    message: str = "User created successfully"


class UserRead(CamelModel):
    """Account as returned by the API; the password hash is never exposed."""
    uid: str
    email: str
    role: usr_models.UserRole
    is_active: bool
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None


# =============================================================================
# 2. Token schemas
# =============================================================================
class Token(BaseModel):
    """JWT token response (OAuth2 field names, not camelCase)."""
    access_token: str
    token_type: str
