# app/core/crud_base.py

"""
Base class for the common CRUD (Create, Read, Update, Delete) operations.
All methods are async and take the request's AsyncSession explicitly.
"""

from typing import Generic, List, Optional, Type, TypeVar, Any, Dict, Union
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

from app.core.exceptions import Conflict, InvalidInput

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE of foreign_key_violation
FOREIGN_KEY_VIOLATION = "23503"


def is_foreign_key_violation(error: IntegrityError) -> bool:
    """True when the driver reports a FOREIGN KEY failure (asyncpg or SQLite)."""
    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == FOREIGN_KEY_VIOLATION:
        return True
    return "foreign key" in str(orig).lower()


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Generic CRUD operations for one table model.

    conflict_message is the message raised when a commit violates one of the
    table's UNIQUE constraints; reference_message, when set, is raised as
    InvalidInput when a commit violates a FOREIGN KEY constraint instead.
    """
    conflict_message: str = "Record already exists"
    reference_message: Optional[str] = None

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """Fetch one record by primary key."""
        return await db.get(self.model, id)

    async def get_multi(
        self,
        db: AsyncSession,
        *,
        skip: int = 0,
        limit: int = 100,
        order_by: Optional[str] = None,
        order_desc: bool = False,
        **filters: Any,
    ) -> List[ModelType]:
        """
        Fetch several records. Keyword arguments matching model attributes are
        applied as equality filters; None values are ignored.
        """
        query = select(self.model)

        for field, value in filters.items():
            if value is not None and hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)

        if order_by and hasattr(self.model, order_by):
            column = getattr(self.model, order_by)
            query = query.order_by(column.desc() if order_desc else column)

        query = query.offset(skip).limit(limit)
        result = await db.exec(query)
        return list(result.all())

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        """First record whose attribute equals value, or None."""
        statement = select(self.model).where(getattr(self.model, attribute) == value).limit(1)
        response = await db.exec(statement)
        return response.first()

    async def exists(self, db: AsyncSession, *, attribute: str, value: Any) -> bool:
        return await self.get_by_attribute(db, attribute=attribute, value=value) is not None

    async def commit_or_conflict(self, db: AsyncSession, message: Optional[str] = None) -> None:
        """
        Commits the session. A UNIQUE constraint violation rolls back and
        becomes a Conflict, so a racing duplicate is reported like a detected one;
        a FOREIGN KEY violation becomes InvalidInput when reference_message is set.
        """
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("%s commit rejected by constraint: %s", self.model.__name__, e.orig)
            if self.reference_message and is_foreign_key_violation(e):
                raise InvalidInput(self.reference_message) from e
            raise Conflict(message or self.conflict_message) from e

    async def create(self, db: AsyncSession, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """Create a new record."""
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**data)
        db.add(db_obj)
        await self.commit_or_conflict(db)
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """Update an existing record with the fields that were explicitly set."""
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            if hasattr(db_obj, key):
                setattr(db_obj, key, value)

        db.add(db_obj)
        await self.commit_or_conflict(db)
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, *, id: Any) -> Optional[ModelType]:
        """Delete a record by primary key; returns the deleted record or None."""
        db_obj = await db.get(self.model, id)
        if db_obj:
            await db.delete(db_obj)
            await db.commit()
        return db_obj
