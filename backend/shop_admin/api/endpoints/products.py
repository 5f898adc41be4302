# backend/shop_admin/api/endpoints/products.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Optional
import uuid

from shop_admin import crud, models, schemas
from shop_admin.api import deps
from shop_admin.core.exceptions import NotFoundError
from shop_admin.db.session import get_db
from shop_admin.services.product_images import ProductImageLifecycleManager

router = APIRouter()

@router.get("/getAll", response_model=schemas.ProductPage)
async def read_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[str] = Query(None, description="Case-insensitive category match"),
    featured: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Matches name, category, brand, description or SKU"),
    db: AsyncSession = Depends(get_db),
) -> Any:
    products, total = await crud.product.get_products(
        db, page=page, limit=limit, category=category, featured=featured, search=search
    )
    return schemas.ProductPage(
        data=[schemas.Product.model_validate(p) for p in products],
        pagination=schemas.Pagination.build(page=page, limit=limit, total=total),
    )

@router.get("/{product_id}", response_model=schemas.Product)
async def read_product_by_id(
    product_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Any:
    product = await crud.product.get_product(db, product_id=product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product

@router.post("/create", response_model=schemas.Product, status_code=status.HTTP_201_CREATED)
async def create_new_product(
    product_in: schemas.ProductCreate,
    db: AsyncSession = Depends(get_db),
    product_images: ProductImageLifecycleManager = Depends(deps.get_product_images),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    return await product_images.create(db, product_in)

@router.put("/update/{product_id}", response_model=schemas.ProductMutationResult)
async def update_existing_product(
    product_id: uuid.UUID,
    product_in: schemas.ProductUpdate,
    db: AsyncSession = Depends(get_db),
    product_images: ProductImageLifecycleManager = Depends(deps.get_product_images),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    """
    Partial update. When ``images`` is present it replaces the stored list and
    images no longer referenced are removed from the asset store; removal
    failures are reported under ``cleanup`` without failing the update.
    """
    product, cleanup = await product_images.update(db, product_id, product_in)
    return schemas.ProductMutationResult(
        message="Product updated successfully",
        data=schemas.Product.model_validate(product),
        cleanup=cleanup,
    )

@router.delete("/delete/{product_id}", response_model=schemas.ProductDeleteResult)
async def delete_existing_product(
    product_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    product_images: ProductImageLifecycleManager = Depends(deps.get_product_images),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    cleanup = await product_images.delete(db, product_id)
    return schemas.ProductDeleteResult(message="Product deleted successfully", id=product_id, cleanup=cleanup)
