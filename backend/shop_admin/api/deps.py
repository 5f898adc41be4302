from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from shop_admin.core.exceptions import AuthenticationError, ForbiddenError, ValidationError
from shop_admin.core.security import decode_token
from shop_admin.db.session import get_db
from shop_admin import crud, models, schemas
from shop_admin.services.admin_auth import AdminAuthService
from shop_admin.services.asset_store import AssetStore
from shop_admin.services.email_service import EmailService
from shop_admin.services.image_upload import ImageUploadService
from shop_admin.services.product_images import ProductImageLifecycleManager

# Clients send "Authorization: Bearer <token>" obtained from /api/auth/admin/login
reusable_bearer = HTTPBearer(auto_error=False)

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(reusable_bearer),
) -> schemas.CurrentUser:
    """
    Dependency to get the caller identity (account id + role) from a JWT token.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Unauthorized")
    token_data = decode_token(credentials.credentials)
    if not token_data or not token_data.sub: # token_data.sub is expected to be the account id
        raise AuthenticationError("Invalid token")
    try:
        account_id = uuid.UUID(token_data.sub)
    except ValueError:
        raise AuthenticationError("Invalid token")
    return schemas.CurrentUser(id=account_id, role=token_data.role or "user")

async def get_current_admin(
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> models.Admin:
    """
    Dependency for admin-only routes.
    Rejects non-admin roles before touching the database, then checks the account still exists.
    """
    if current_user.role != "admin":
        raise ForbiddenError()
    admin = await crud.admin.get_admin(db, admin_id=current_user.id)
    if not admin:
        raise AuthenticationError("Unauthorized")
    if not admin.is_active:
        raise ForbiddenError("Account is disabled")
    return admin

# --- Services built in the application lifespan ---
def get_asset_store(request: Request) -> AssetStore:
    return request.app.state.asset_store

def get_upload_service(request: Request) -> ImageUploadService:
    return request.app.state.upload_service

def get_product_images(request: Request) -> ProductImageLifecycleManager:
    return request.app.state.product_images

def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service

def get_admin_auth(request: Request) -> AdminAuthService:
    return request.app.state.admin_auth

# --- Query helpers ---
def parse_enum_filter(value: Optional[str], enum_cls, field: str):
    """Admin list filters send "all" (or nothing) to mean unfiltered."""
    if not value or value.lower() == "all":
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value}", field=field)
