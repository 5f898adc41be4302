# backend/shop_admin/models/__init__.py
from .admin import Admin
from .user import User
from .product import Product
from .order import Order
from .payment import Payment
