from fastapi import APIRouter

# Import endpoint modules
from shop_admin.api.endpoints import upload
from shop_admin.api.endpoints import products
from shop_admin.api.endpoints import auth
from shop_admin.api.endpoints import admin
from shop_admin.api.endpoints import orders
from shop_admin.api.endpoints import payments
from shop_admin.api.endpoints import dashboard
api_router = APIRouter()

api_router.include_router(upload.router, prefix="/upload", tags=["Upload"])
api_router.include_router(products.router, prefix="/products", tags=["Products"])
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(orders.router, prefix="/orders", tags=["Orders"])
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
