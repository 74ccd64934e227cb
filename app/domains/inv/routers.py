# app/domains/inv/routers.py

"""
API endpoints of the 'inv' domain: containers, products, bulk import and
dashboard figures. Every mutating endpoint requires an admin.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.config import settings
from app.core.database import get_session
from app.domains.inv import crud as inv_crud, schemas as inv_schemas
from app.domains.usr.models import User as UsrUser
from app.utils import codes

router = APIRouter(
    tags=["Inventory"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. containers
# =============================================================================
@router.post(
    "/containers",
    response_model=inv_schemas.ContainerCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_container(
    container_in: inv_schemas.ContainerCreate,
    db: AsyncSession = Depends(get_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """Registers a new container with a generated code. Admin only."""
    db_container = await inv_crud.container.create(db, obj_in=container_in, created_by=current_user.uid)
    return inv_schemas.ContainerCreated(id=db_container.id, container_code=db_container.container_code)


@router.get("/containers", response_model=List[inv_schemas.ContainerRead])
async def read_containers(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    container_status: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """Containers, newest first."""
    return await inv_crud.container.list_recent(db, skip=skip, limit=limit, status=container_status)


@router.get("/containers/{container_id}", response_model=inv_schemas.ContainerRead)
async def read_container(
    container_id: str,
    db: AsyncSession = Depends(get_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await inv_crud.container.get_or_404(db, container_id)


@router.patch("/containers/{container_id}", response_model=inv_schemas.ContainerRead)
async def update_container(
    container_id: str,
    container_in: inv_schemas.ContainerUpdate,
    db: AsyncSession = Depends(get_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """Edits supplier, status, location or arrival date. Admin only."""
    db_container = await inv_crud.container.get_or_404(db, container_id)
    return await inv_crud.container.update(db, db_obj=db_container, obj_in=container_in)


@router.delete("/containers/{container_id}")
async def delete_container(
    container_id: str,
    db: AsyncSession = Depends(get_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """Deletes an empty container. Admin only."""
    await inv_crud.container.remove(db, id=container_id)
    return {"message": "Container deleted successfully"}


@router.get("/containers/{container_id}/products", response_model=List[inv_schemas.ProductRead])
async def read_container_products(
    container_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    await inv_crud.container.get_or_404(db, container_id)
    return await inv_crud.product.list_recent(db, skip=skip, limit=limit, container_id=container_id)


# =============================================================================
# 2. products
# =============================================================================
@router.post(
    "/products",
    response_model=inv_schemas.ProductCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    product_in: inv_schemas.ProductCreate,
    db: AsyncSession = Depends(get_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """Creates one product in an existing container. Admin only."""
    db_product = await inv_crud.product.create(db, obj_in=product_in, created_by=current_user.uid)
    return inv_schemas.ProductCreated(id=db_product.id)


@router.post(
    "/products/bulk",
    response_model=inv_schemas.BulkProductCreated,
    status_code=status.HTTP_201_CREATED,
)
async def bulk_create_products(
    bulk_in: inv_schemas.BulkProductCreate,
    db: AsyncSession = Depends(get_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """Imports a batch of products (spreadsheet rows) atomically. Admin only."""
    db_products = await inv_crud.product.create_many(db, items=bulk_in.products, created_by=current_user.uid)
    return inv_schemas.BulkProductCreated(
        created_count=len(db_products),
        products=[inv_schemas.ProductRead.model_validate(p) for p in db_products],
    )


@router.get("/products", response_model=List[inv_schemas.ProductRead])
async def read_products(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    container_id: Optional[str] = Query(None, alias="containerId"),
    db: AsyncSession = Depends(get_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """Products, newest first, optionally limited to one container."""
    return await inv_crud.product.list_recent(db, skip=skip, limit=limit, container_id=container_id)


@router.get("/products/low-stock", response_model=List[inv_schemas.ProductRead])
async def read_low_stock_products(
    threshold: Optional[float] = Query(None, ge=0),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """Products whose quantity is below the threshold (LOW_STOCK_THRESHOLD by default)."""
    if threshold is None:
        threshold = settings.LOW_STOCK_THRESHOLD
    return await inv_crud.product.list_low_stock(db, threshold=threshold, skip=skip, limit=limit)


@router.get("/products/{product_id}", response_model=inv_schemas.ProductRead)
async def read_product(
    product_id: str,
    db: AsyncSession = Depends(get_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    return await inv_crud.product.get_or_404(db, product_id)


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: str,
    db: AsyncSession = Depends(get_session),
    current_user: UsrUser = Depends(deps.get_current_admin_user),
):
    """Deletes one product. Admin only."""
    await inv_crud.product.remove(db, id=product_id)
    return {"message": "Product deleted successfully"}


# =============================================================================
# 3. helpers
# =============================================================================
@router.get("/skus/new", response_model=inv_schemas.SkuSuggestion)
async def suggest_sku(current_user: UsrUser = Depends(deps.get_current_active_user)):
    """A fresh SKU to prefill the product form. Not reserved."""
    return inv_schemas.SkuSuggestion(sku=codes.generate_sku())


@router.get("/stats", response_model=inv_schemas.InventoryStats)
async def read_inventory_stats(
    threshold: Optional[float] = Query(None, ge=0),
    db: AsyncSession = Depends(get_session),
    current_user: UsrUser = Depends(deps.get_current_active_user),
):
    """Dashboard figures: counts, stock totals and the low-stock count."""
    if threshold is None:
        threshold = settings.LOW_STOCK_THRESHOLD
    return await inv_crud.product.stats(db, low_stock_threshold=threshold)
