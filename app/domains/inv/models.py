# app/domains/inv/models.py

"""
ORM models of the 'inv' domain: containers (shipment batches) and the
products received in them.

Store-level invariants:
- containers.container_code is UNIQUE.
- products.sku is UNIQUE.
- products.container_id references containers.id (RESTRICT on delete).
"""

from typing import Optional
from datetime import datetime, UTC
import uuid

from sqlmodel import Field, SQLModel, Column
from sqlalchemy import ForeignKey, String
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

DEFAULT_CONTAINER_STATUS = "Created"


def new_id() -> str:
    return uuid.uuid4().hex


# =============================================================================
# 1. containers
# =============================================================================
class ContainerBase(SQLModel):
    supplier: str = Field(max_length=200, description="Supplier name")
    status: str = Field(default=DEFAULT_CONTAINER_STATUS, max_length=50, description="Free-form logistics status")
    location: Optional[str] = Field(default=None, max_length=200, description="Current location")
    arrival_date: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=True),
        description="Arrival time, unset until the container arrives"
    )


class Container(ContainerBase, table=True):
    """
    Maps to the containers table.
    """
    __tablename__ = "containers"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    container_code: str = Field(max_length=64, unique=True, index=True, description="Generated human-readable code")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="Record creation time"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="Record last update time"
    )
    created_by: Optional[str] = Field(default=None, max_length=32, description="uid of the creating admin")


# =============================================================================
# 2. products
# =============================================================================
class ProductBase(SQLModel):
    sku: str = Field(max_length=100, unique=True, index=True, description="Stock keeping unit (unique)")
    name: str = Field(max_length=200, index=True, description="Display name")
    nomenclature: str = Field(max_length=200)
    quantity: float = Field(default=0, description="Units in stock")
    actual_price: float = Field(default=0)
    negotiable_price: float = Field(default=0)
    selling_price: float = Field(default=0, description="Never above negotiable_price")
    image_url: Optional[str] = Field(default=None, max_length=1000)
    container_quantity: float = Field(default=0, description="Units received in the container")


class Product(ProductBase, table=True):
    """
    Maps to the products table.
    """
    __tablename__ = "products"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    container_id: str = Field(
        sa_column=Column(
            String(32),
            ForeignKey("containers.id", onupdate="CASCADE", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        description="Container the product arrived in (FK)"
    )
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="Record creation time"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="Record last update time"
    )
    created_by: Optional[str] = Field(default=None, max_length=32, description="uid of the creating admin")
