# app/domains/inv/crud.py

"""
CRUD operations of the 'inv' domain.

CRUDContainer and CRUDProduct enforce the inventory consistency rules before
writing: unique container codes and SKUs, products only referencing existing
containers, containers only deletable while empty, and all-or-nothing bulk
imports. The UNIQUE constraints on the tables back up every existence check,
so a concurrent duplicate still ends as a Conflict.
"""

import logging
from collections import Counter
from datetime import datetime, UTC
from typing import Iterable, List, Optional, Set

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.crud_base import CRUDBase
from app.core.exceptions import (
    Conflict,
    DependentRecordsExist,
    InvalidInput,
    NameGenerationExhausted,
    NotFound,
)
from app.utils import codes
from app.domains.inv import models as inv_models
from app.domains.inv import schemas as inv_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. containers
# =============================================================================
class CRUDContainer(CRUDBase[inv_models.Container, inv_schemas.ContainerCreate, inv_schemas.ContainerUpdate]):
    conflict_message = "Container code already exists"

    def __init__(self):
        super().__init__(model=inv_models.Container)

    async def get_by_code(self, db: AsyncSession, *, container_code: str) -> Optional[inv_models.Container]:
        return await self.get_by_attribute(db, attribute="container_code", value=container_code)

    async def get_or_404(self, db: AsyncSession, id: str) -> inv_models.Container:
        db_container = await self.get(db, id)
        if db_container is None:
            raise NotFound("Container not found")
        return db_container

    async def list_recent(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 50, status: Optional[str] = None
    ) -> List[inv_models.Container]:
        return await self.get_multi(db, skip=skip, limit=limit, order_by="created_at", order_desc=True, status=status)

    async def create(
        self, db: AsyncSession, *, obj_in: inv_schemas.ContainerCreate, created_by: str
    ) -> inv_models.Container:
        """
        Registers a container under a freshly generated code. A code collision
        is reported as a Conflict; it is not retried.
        """
        container_code = codes.generate_container_code()
        if await self.get_by_code(db, container_code=container_code):
            logger.warning("Generated container code %s already exists", container_code)
            raise Conflict("Container code already exists")

        now = datetime.now(UTC)
        db_container = inv_models.Container(
            supplier=obj_in.supplier,
            location=obj_in.location,
            container_code=container_code,
            status=inv_models.DEFAULT_CONTAINER_STATUS,
            arrival_date=None,
            created_at=now,
            updated_at=now,
            created_by=created_by,
        )
        db.add(db_container)
        await self.commit_or_conflict(db)
        await db.refresh(db_container)
        logger.info("Created container %s (%s) for supplier %r", db_container.id, container_code, db_container.supplier)
        return db_container

    async def update(
        self, db: AsyncSession, *, db_obj: inv_models.Container, obj_in: inv_schemas.ContainerUpdate
    ) -> inv_models.Container:
        update_data = obj_in.model_dump(exclude_unset=True)
        if "supplier" in update_data and update_data["supplier"] is None:
            raise InvalidInput("Supplier name is required")
        if "status" in update_data and update_data["status"] is None:
            raise InvalidInput("Status must not be empty")
        update_data["updated_at"] = datetime.now(UTC)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def has_products(self, db: AsyncSession, *, id: str) -> bool:
        statement = select(inv_models.Product.id).where(inv_models.Product.container_id == id).limit(1)
        result = await db.exec(statement)
        return result.first() is not None

    async def remove(self, db: AsyncSession, *, id: str) -> inv_models.Container:
        """
        Deletes a container. Refused while any product still references it.
        """
        db_container = await self.get_or_404(db, id)
        if await self.has_products(db, id=id):
            logger.warning("Refused to delete container %s: products still reference it", id)
            raise DependentRecordsExist("Cannot delete container with associated products")

        await super().delete(db, id=id)
        logger.info("Deleted container %s (%s)", id, db_container.container_code)
        return db_container


container = CRUDContainer()


# =============================================================================
# 2. products
# =============================================================================
class CRUDProduct(CRUDBase[inv_models.Product, inv_schemas.ProductCreate, inv_schemas.ProductCreate]):
    conflict_message = "SKU already exists"
    reference_message = "Invalid container ID"

    def __init__(self):
        super().__init__(model=inv_models.Product)

    async def get_by_sku(self, db: AsyncSession, *, sku: str) -> Optional[inv_models.Product]:
        return await self.get_by_attribute(db, attribute="sku", value=sku)

    async def get_or_404(self, db: AsyncSession, id: str) -> inv_models.Product:
        db_product = await self.get(db, id)
        if db_product is None:
            raise NotFound("Product not found")
        return db_product

    async def list_recent(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 50, container_id: Optional[str] = None
    ) -> List[inv_models.Product]:
        return await self.get_multi(
            db, skip=skip, limit=limit, order_by="created_at", order_desc=True, container_id=container_id
        )

    async def list_low_stock(
        self, db: AsyncSession, *, threshold: float, skip: int = 0, limit: int = 100
    ) -> List[inv_models.Product]:
        statement = (
            select(inv_models.Product)
            .where(inv_models.Product.quantity < threshold)
            .order_by(inv_models.Product.quantity, inv_models.Product.sku)
            .offset(skip)
            .limit(limit)
        )
        result = await db.exec(statement)
        return list(result.all())

    async def existing_skus(self, db: AsyncSession, *, skus: Iterable[str]) -> Set[str]:
        """The subset of skus already present in the store."""
        sku_list = list(skus)
        if not sku_list:
            return set()
        statement = select(inv_models.Product.sku).where(inv_models.Product.sku.in_(sku_list))
        result = await db.exec(statement)
        return set(result.all())

    async def create(
        self, db: AsyncSession, *, obj_in: inv_schemas.ProductCreate, created_by: str
    ) -> inv_models.Product:
        """
        Creates one product after checking that its container exists and its
        SKU is free.
        """
        if await db.get(inv_models.Container, obj_in.container_id) is None:
            logger.warning("Product %s rejected: unknown container %s", obj_in.sku, obj_in.container_id)
            raise InvalidInput("Invalid container ID")
        if await self.get_by_sku(db, sku=obj_in.sku):
            logger.warning("Product rejected: SKU %s already exists", obj_in.sku)
            raise Conflict("SKU already exists")

        now = datetime.now(UTC)
        product_data = obj_in.model_dump()
        product_data["image_url"] = str(obj_in.image_url) if obj_in.image_url else None
        db_product = inv_models.Product(**product_data, created_at=now, updated_at=now, created_by=created_by)
        db.add(db_product)
        await self.commit_or_conflict(db)
        await db.refresh(db_product)
        logger.info("Created product %s (sku=%s) in container %s", db_product.id, db_product.sku, db_product.container_id)
        return db_product

    async def remove(self, db: AsyncSession, *, id: str) -> inv_models.Product:
        db_product = await self.get_or_404(db, id)
        await super().delete(db, id=id)
        logger.info("Deleted product %s (sku=%s)", id, db_product.sku)
        return db_product

    async def generate_unique_name(
        self, db: AsyncSession, *, reserved: Set[str], max_attempts: int
    ) -> str:
        """
        Draws "<dddd>-3" names until one is neither stored nor already handed
        out in this batch. Raises NameGenerationExhausted after max_attempts.
        """
        for _ in range(max_attempts):
            name = codes.generate_product_name()
            if name in reserved:
                continue
            if await self.exists(db, attribute="name", value=name):
                continue
            reserved.add(name)
            return name
        logger.error("No free product name found after %d attempts", max_attempts)
        raise NameGenerationExhausted(max_attempts)

    async def create_many(
        self,
        db: AsyncSession,
        *,
        items: List[inv_schemas.BulkProductItem],
        created_by: str,
        max_name_attempts: Optional[int] = None,
    ) -> List[inv_models.Product]:
        """
        Creates a whole import batch or nothing.

        Checks, in order: every referenced container exists (first missing one
        is reported), no SKU repeats inside the batch, no SKU exists already
        (all collisions are reported). Prices are derived from the selling
        price, nomenclature from the SKU, and each product gets a generated
        display name. All rows are committed in one transaction.
        """
        if not items:
            raise InvalidInput("At least one product is required")
        if max_name_attempts is None:
            max_name_attempts = settings.PRODUCT_NAME_MAX_ATTEMPTS

        # 1. referenced containers, first-seen order
        for container_id in dict.fromkeys(item.container_id for item in items):
            if await db.get(inv_models.Container, container_id) is None:
                logger.warning("Bulk import rejected: unknown container %s", container_id)
                raise InvalidInput(f"Invalid container ID: {container_id}")

        # 2. SKUs repeated inside the batch
        sku_counts = Counter(item.sku for item in items)
        repeated = [sku for sku in dict.fromkeys(item.sku for item in items) if sku_counts[sku] > 1]
        if repeated:
            logger.warning("Bulk import rejected: repeated SKUs %s", repeated)
            raise Conflict(f"Duplicate SKUs in batch: {', '.join(repeated)}")

        # 3. SKUs already stored
        existing = await self.existing_skus(db, skus=sku_counts.keys())
        if existing:
            colliding = [item.sku for item in items if item.sku in existing]
            logger.warning("Bulk import rejected: existing SKUs %s", colliding)
            raise Conflict(f"Duplicate SKUs found: {', '.join(colliding)}")

        # 4. build every row before writing anything
        now = datetime.now(UTC)
        reserved_names: Set[str] = set()
        db_products: List[inv_models.Product] = []
        for item in items:
            name = await self.generate_unique_name(db, reserved=reserved_names, max_attempts=max_name_attempts)
            db_products.append(
                inv_models.Product(
                    sku=item.sku,
                    name=name,
                    nomenclature=item.sku,
                    quantity=item.quantity,
                    actual_price=item.selling_price,
                    negotiable_price=item.selling_price * 1.2,
                    selling_price=item.selling_price,
                    container_id=item.container_id,
                    image_url=str(item.image_url) if item.image_url else None,
                    container_quantity=item.container_quantity,
                    created_at=now,
                    updated_at=now,
                    created_by=created_by,
                )
            )

        # 5. one transaction for the whole batch
        db.add_all(db_products)
        await self.commit_or_conflict(db, "Duplicate SKUs found")
        logger.info("Bulk import created %d products", len(db_products))
        return db_products

    async def stats(self, db: AsyncSession, *, low_stock_threshold: float) -> inv_schemas.InventoryStats:
        """Dashboard figures computed in the database."""
        container_count = (await db.exec(select(func.count()).select_from(inv_models.Container))).one()
        product_totals = (
            await db.exec(
                select(
                    func.count(inv_models.Product.id),
                    func.coalesce(func.sum(inv_models.Product.quantity), 0),
                    func.coalesce(func.sum(inv_models.Product.quantity * inv_models.Product.selling_price), 0),
                )
            )
        ).one()
        low_stock_count = (
            await db.exec(
                select(func.count(inv_models.Product.id)).where(inv_models.Product.quantity < low_stock_threshold)
            )
        ).one()
        return inv_schemas.InventoryStats(
            container_count=container_count,
            product_count=product_totals[0],
            total_quantity=float(product_totals[1]),
            inventory_value=float(product_totals[2]),
            low_stock_count=low_stock_count,
            low_stock_threshold=low_stock_threshold,
        )


product = CRUDProduct()
