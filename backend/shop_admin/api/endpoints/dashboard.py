# backend/shop_admin/api/endpoints/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any

from shop_admin import crud, models, schemas
from shop_admin.api import deps
from shop_admin.db.session import get_db

router = APIRouter()

@router.get("/", response_model=schemas.DashboardStats)
async def read_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    """
    Headline counts, total revenue (sum of order totals), the five most recent
    orders and the five newest products.
    """
    recent_orders = await crud.order.get_recent_orders(db, limit=5)
    latest_products = await crud.product.get_latest_products(db, limit=5)
    return schemas.DashboardStats(
        total_products=await crud.product.count_products(db),
        total_users=await crud.user.count_users(db),
        total_orders=await crud.order.count_orders(db),
        total_payments=await crud.payment.count_payments(db),
        total_revenue=await crud.order.total_revenue(db),
        recent_orders=[schemas.Order.model_validate(o) for o in recent_orders],
        top_products=[schemas.Product.model_validate(p) for p in latest_products],
    )
