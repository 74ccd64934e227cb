# app/domains/inv/schemas.py

"""
Request and response models of the 'inv' domain.

JSON uses camelCase (containerCode, sellingPrice, ...); the Python attributes
stay snake_case. Either spelling is accepted on input.
"""

from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True, allow_inf_nan=False)


def _required_text(value: Optional[str], message: str) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError(message)
    return value


# =============================================================================
# 1. Container schemas
# =============================================================================
class ContainerCreate(CamelModel):
    supplier: str = Field(..., max_length=200)
    location: Optional[str] = Field(None, max_length=200)

    @field_validator("supplier")
    @classmethod
    def supplier_required(cls, value: str) -> str:
        return _required_text(value, "Supplier name is required")

    @field_validator("location")
    @classmethod
    def blank_location_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class ContainerUpdate(CamelModel):
    """Editable fields; containerCode never changes after creation."""
    supplier: Optional[str] = Field(None, max_length=200)
    status: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=200)
    arrival_date: Optional[datetime] = None

    @field_validator("supplier")
    @classmethod
    def supplier_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _required_text(value, "Supplier name is required")

    @field_validator("status")
    @classmethod
    def status_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _required_text(value, "Status must not be empty")


class ContainerCreated(CamelModel):
    id: str
    container_code: str


class ContainerRead(CamelModel):
    id: str
    supplier: str
    container_code: str
    status: str
    location: Optional[str] = None
    arrival_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None


# =============================================================================
# 2. Product schemas
# =============================================================================
class ProductCreate(CamelModel):
    """
    Single product creation. Every field rule is reported at once; the price
    ordering rule is reported on sellingPrice once negotiablePrice is valid.
    """
    sku: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., max_length=200)
    nomenclature: str = Field(..., max_length=200)
    quantity: float = Field(..., ge=0)
    actual_price: float = Field(..., ge=0)
    negotiable_price: float = Field(..., ge=0)
    selling_price: float = Field(..., ge=0)
    container_id: str = Field(..., min_length=1)
    image_url: Optional[HttpUrl] = None
    container_quantity: float = Field(..., ge=0)

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        return _required_text(value, "Name is required")

    @field_validator("nomenclature")
    @classmethod
    def nomenclature_required(cls, value: str) -> str:
        return _required_text(value, "Nomenclature is required")

    @field_validator("selling_price")
    @classmethod
    def selling_within_negotiable(cls, value: float, info: ValidationInfo) -> float:
        negotiable_price = info.data.get("negotiable_price")
        if negotiable_price is not None and value > negotiable_price:
            raise ValueError("sellingPrice must not exceed negotiablePrice")
        return value


class ProductCreated(CamelModel):
    id: str


class ProductRead(CamelModel):
    id: str
    sku: str
    name: str
    nomenclature: str
    quantity: float
    actual_price: float
    negotiable_price: float
    selling_price: float
    container_id: str
    image_url: Optional[str] = None
    container_quantity: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None


# =============================================================================
# 3. Bulk import schemas
# =============================================================================
class BulkProductItem(CamelModel):
    """One spreadsheet row; prices, name and nomenclature are derived server-side."""
    sku: str = Field(..., min_length=1, max_length=100)
    image_url: Optional[HttpUrl] = None
    quantity: float = Field(..., ge=0)
    container_quantity: float = Field(..., ge=0)
    selling_price: float = Field(..., ge=0)
    container_id: str = Field(..., min_length=1)


class BulkProductCreate(CamelModel):
    products: List[BulkProductItem] = Field(..., min_length=1)


class BulkProductCreated(CamelModel):
    created_count: int
    products: List[ProductRead]


# =============================================================================
# 4. Misc
# =============================================================================
class SkuSuggestion(CamelModel):
    sku: str


class InventoryStats(CamelModel):
    container_count: int
    product_count: int
    total_quantity: float
    inventory_value: float
    low_stock_count: int
    low_stock_threshold: float
