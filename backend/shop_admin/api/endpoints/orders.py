# backend/shop_admin/api/endpoints/orders.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Optional
import uuid

from shop_admin import crud, models, schemas
from shop_admin.api import deps
from shop_admin.core.exceptions import NotFoundError
from shop_admin.db.session import get_db

router = APIRouter()

@router.get("/getAll", response_model=schemas.OrderPage)
async def read_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = Query(None, description="Order status or 'all'"),
    search: Optional[str] = Query(None, description="Matches order number, customer name or email"),
    db: AsyncSession = Depends(get_db),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    status_filter = deps.parse_enum_filter(status, schemas.OrderStatusEnum, "status")
    orders, total = await crud.order.get_orders(db, page=page, limit=limit, status=status_filter, search=search)
    return schemas.OrderPage(
        data=[schemas.Order.model_validate(o) for o in orders],
        pagination=schemas.Pagination.build(page=page, limit=limit, total=total),
    )

@router.get("/{order_id}", response_model=schemas.Order)
async def read_order_by_id(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    order = await crud.order.get_order(db, order_id=order_id)
    if not order:
        raise NotFoundError("Order not found")
    return order

@router.put("/{order_id}/status", response_model=schemas.Order)
async def update_order_status(
    order_id: uuid.UUID,
    status_in: schemas.OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    order = await crud.order.get_order(db, order_id=order_id)
    if not order:
        raise NotFoundError("Order not found")
    return await crud.order.update_order_status(db, db_obj=order, obj_in=status_in)

@router.delete("/{order_id}", response_model=schemas.Message)
async def delete_order(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    order = await crud.order.get_order(db, order_id=order_id)
    if not order:
        raise NotFoundError("Order not found")
    await crud.order.delete_order(db, db_obj=order)
    return schemas.Message(message="Order deleted successfully")
