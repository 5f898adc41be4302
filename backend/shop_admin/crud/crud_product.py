# backend/shop_admin/crud/crud_product.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, or_
import logging
import re
import uuid
from typing import Any, Dict, List, Optional, Tuple

from shop_admin.models.product import Product as ProductModel

logger = logging.getLogger(__name__)

DEFAULT_BRAND = "Royal Thread"


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9 -]", "", name.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def generate_sku(category: str) -> str:
    prefix = re.sub(r"[^A-Z]", "", category.upper())[:3] or "GEN"
    return f"RT-{prefix}-{uuid.uuid4().hex[:6].upper()}"


def _clean_list(values: Optional[List[Any]]) -> List[str]:
    return [str(v).strip() for v in values or [] if str(v).strip()]


async def get_product(db: AsyncSession, product_id: uuid.UUID) -> Optional[ProductModel]:
    result = await db.execute(select(ProductModel).filter(ProductModel.id == product_id))
    return result.scalars().first()


async def get_products(
    db: AsyncSession,
    *,
    page: int = 1,
    limit: int = 10,
    category: Optional[str] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
) -> Tuple[List[ProductModel], int]:
    """
    Newest-first page of products plus the total matching count.
    """
    filters = []
    if category:
        filters.append(ProductModel.category.ilike(f"%{category}%"))
    if featured:
        filters.append(ProductModel.is_featured.is_(True))
    if search:
        pattern = f"%{search}%"
        filters.append(or_(
            ProductModel.name.ilike(pattern),
            ProductModel.category.ilike(pattern),
            ProductModel.brand.ilike(pattern),
            ProductModel.description.ilike(pattern),
            ProductModel.sku.ilike(pattern),
        ))

    total_result = await db.execute(select(func.count(ProductModel.id)).filter(*filters))
    total = total_result.scalar_one()

    result = await db.execute(
        select(ProductModel)
        .filter(*filters)
        .order_by(ProductModel.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def get_latest_products(db: AsyncSession, *, limit: int = 5) -> List[ProductModel]:
    result = await db.execute(select(ProductModel).order_by(ProductModel.created_at.desc()).limit(limit))
    return list(result.scalars().all())


async def count_products(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(ProductModel.id)))
    return result.scalar_one()


async def create_product(db: AsyncSession, *, data: Dict[str, Any]) -> ProductModel:
    """
    Create a product. ``data["images"]`` is already the normalized image document list.
    """
    data = dict(data)
    data["colors"] = _clean_list(data.get("colors"))
    data["sizes"] = _clean_list(data.get("sizes"))
    data["brand"] = (data.get("brand") or "").strip() or DEFAULT_BRAND
    data["special_feature"] = (data.get("special_feature") or "").strip()
    if data.get("mrp") is None:
        data["mrp"] = data["price"]
    data["slug"] = slugify(data["name"])
    data["sku"] = generate_sku(data["category"])

    db_obj = ProductModel(**data)
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    logger.info("Product created: %s (%d images)", db_obj.id, len(db_obj.images or []))
    return db_obj


async def update_product(
    db: AsyncSession, *, db_obj: ProductModel, update_data: Dict[str, Any]
) -> ProductModel:
    """
    Apply a partial update. A present ``images`` key replaces the whole list.
    """
    # Explicit nulls from the client mean "unchanged", as with missing keys
    update_data = {k: v for k, v in update_data.items() if v is not None}
    if "colors" in update_data:
        update_data["colors"] = _clean_list(update_data["colors"])
    if "sizes" in update_data:
        update_data["sizes"] = _clean_list(update_data["sizes"])
    if "special_feature" in update_data:
        update_data["special_feature"] = (update_data["special_feature"] or "").strip()
    if update_data.get("name"):
        update_data["slug"] = slugify(update_data["name"])

    for field, value in update_data.items():
        setattr(db_obj, field, value)

    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj


async def delete_product(db: AsyncSession, *, db_obj: ProductModel) -> ProductModel:
    await db.delete(db_obj)
    await db.commit()
    logger.info("Product deleted: %s", db_obj.id)
    return db_obj
