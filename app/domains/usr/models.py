# app/domains/usr/models.py

"""
ORM models of the 'usr' domain (staff and admin accounts).

The users table is both the identity store (password hash, active flag) and
the profile that carries the role used for authorization.
"""

from typing import Optional
from datetime import datetime, UTC
from enum import Enum
import uuid

from sqlmodel import Field, SQLModel, Column
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


def new_uid() -> str:
    return uuid.uuid4().hex


class UserRole(str, Enum):
    """
    Account roles. Admin is required for every mutating inventory operation.
    """
    ADMIN = "admin"
    STAFF = "staff"


class UserBase(SQLModel):
    email: str = Field(max_length=255, unique=True, index=True, description="Login email (unique)")
    role: UserRole = Field(default=UserRole.STAFF, description="Account role")
    is_active: bool = Field(default=True, description="Whether the account may sign in")


class User(UserBase, table=True):
    """
    Maps to the users table.
    """
    __tablename__ = "users"

    uid: str = Field(default_factory=new_uid, primary_key=True, max_length=32, description="Stable account identifier")
    password_hash: str = Field(max_length=255, description="bcrypt hash of the password")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="Record creation time"
    )
    created_by: Optional[str] = Field(default=None, max_length=32, description="uid of the admin who created the account")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
