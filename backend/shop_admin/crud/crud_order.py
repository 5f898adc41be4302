# backend/shop_admin/crud/crud_order.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, or_
import uuid
from typing import List, Optional, Tuple

from shop_admin.models.order import Order as OrderModel
from shop_admin.schemas.order import OrderStatusEnum, OrderStatusUpdate


async def get_order(db: AsyncSession, order_id: uuid.UUID) -> Optional[OrderModel]:
    result = await db.execute(select(OrderModel).filter(OrderModel.id == order_id))
    return result.scalars().first()

async def get_orders(
    db: AsyncSession,
    *,
    page: int = 1,
    limit: int = 10,
    status: Optional[OrderStatusEnum] = None,
    search: Optional[str] = None,
) -> Tuple[List[OrderModel], int]:
    """
    Newest-first page of orders, optionally filtered by status and a search term
    over the order number and customer name / email.
    """
    filters = []
    if status:
        filters.append(OrderModel.status == status)
    if search:
        pattern = f"%{search}%"
        filters.append(or_(
            OrderModel.order_id.ilike(pattern),
            OrderModel.customer_name.ilike(pattern),
            OrderModel.customer_email.ilike(pattern),
        ))
    total_result = await db.execute(select(func.count(OrderModel.id)).filter(*filters))
    total = total_result.scalar_one()
    result = await db.execute(
        select(OrderModel)
        .filter(*filters)
        .order_by(OrderModel.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total

async def get_recent_orders(db: AsyncSession, *, limit: int = 5) -> List[OrderModel]:
    result = await db.execute(select(OrderModel).order_by(OrderModel.created_at.desc()).limit(limit))
    return list(result.scalars().all())

async def count_orders(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(OrderModel.id)))
    return result.scalar_one()

async def total_revenue(db: AsyncSession) -> float:
    result = await db.execute(select(func.sum(OrderModel.total_amount)))
    return float(result.scalar_one_or_none() or 0.0)

async def update_order_status(
    db: AsyncSession, *, db_obj: OrderModel, obj_in: OrderStatusUpdate
) -> OrderModel:
    """
    Only the provided fields are changed.
    """
    update_data = obj_in.model_dump(exclude_unset=True)
    if update_data.get("status") is None:
        update_data.pop("status", None)
    for field, value in update_data.items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj

async def delete_order(db: AsyncSession, *, db_obj: OrderModel) -> OrderModel:
    await db.delete(db_obj)
    await db.commit()
    return db_obj
