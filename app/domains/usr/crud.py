# app/domains/usr/crud.py

"""
CRUD operations of the 'usr' domain: account registration, lookup,
authentication and removal.
"""

from typing import List, Optional
import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.core.exceptions import Conflict, InvalidInput, NotFound
from app.core.security import get_password_hash, verify_password
from . import models as usr_models
from . import schemas as usr_schemas

logger = logging.getLogger(__name__)


class CRUDUser(CRUDBase[usr_models.User, usr_schemas.UserCreate, usr_schemas.UserCreate]):
    conflict_message = "Email already exists"

    def __init__(self):
        super().__init__(model=usr_models.User)

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[usr_models.User]:
        """Exact lookup over the whole users table (no page bound)."""
        return await self.get_by_attribute(db, attribute="email", value=email.strip().lower())

    async def list_by_email(self, db: AsyncSession, *, skip: int = 0, limit: int = 100) -> List[usr_models.User]:
        return await self.get_multi(db, skip=skip, limit=limit, order_by="email")

    async def create(
        self, db: AsyncSession, *, obj_in: usr_schemas.UserCreate, created_by: Optional[str] = None
    ) -> usr_models.User:
        """
        Registers an account: rejects a taken email, hashes the password and
        records which admin created it. The UNIQUE index on email turns a
        concurrent duplicate into the same Conflict.
        """
        if await self.get_by_email(db, email=obj_in.email):
            logger.warning("Account creation rejected: email %s already exists", obj_in.email)
            raise Conflict("Email already exists")

        db_user = usr_models.User(
            email=obj_in.email,
            role=obj_in.role,
            password_hash=get_password_hash(obj_in.password),
            created_by=created_by,
        )
        db.add(db_user)
        await self.commit_or_conflict(db)
        await db.refresh(db_user)
        logger.info("Created %s account uid=%s email=%s", db_user.role.value, db_user.uid, db_user.email)
        return db_user

    async def authenticate(self, db: AsyncSession, *, email: str, password: str) -> Optional[usr_models.User]:
        """Returns the account when email and password match, else None."""
        user = await self.get_by_email(db, email=email)
        if not user:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    async def remove(self, db: AsyncSession, *, uid: str, requested_by: str) -> usr_models.User:
        """
        Deletes an account. An admin cannot delete their own account.
        """
        user_to_delete = await self.get(db, uid)
        if not user_to_delete:
            raise NotFound("User not found")
        if user_to_delete.uid == requested_by:
            raise InvalidInput("Cannot delete your own account")

        await super().delete(db, id=uid)
        logger.info("Deleted account uid=%s", uid)
        return user_to_delete


user = CRUDUser()
