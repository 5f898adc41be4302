from typing import List

from shop_admin.schemas.image import CamelModel
from shop_admin.schemas.order import Order
from shop_admin.schemas.product import Product


class DashboardStats(CamelModel):
    total_products: int
    total_users: int # Storefront users only, admins excluded
    total_orders: int
    total_payments: int
    total_revenue: float
    recent_orders: List[Order] = []
    top_products: List[Product] = []
