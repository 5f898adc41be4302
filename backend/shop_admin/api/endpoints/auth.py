# backend/shop_admin/api/endpoints/auth.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any

from shop_admin import crud, schemas
from shop_admin.api import deps
from shop_admin.core.exceptions import ConflictError
from shop_admin.db.session import get_db
from shop_admin.services.admin_auth import AdminAuthService

router = APIRouter()

@router.post("/create-admin", response_model=schemas.AdminOut, status_code=status.HTTP_201_CREATED)
async def create_first_admin(
    admin_in: schemas.AdminCreate,
    db: AsyncSession = Depends(get_db),
    admin_auth: AdminAuthService = Depends(deps.get_admin_auth),
) -> Any:
    """
    Bootstrap the first admin account. No auth required; refused once an admin exists.
    """
    return await admin_auth.create_first_admin(db, admin_in)

@router.post("/admin/login", response_model=schemas.LoginResponse)
async def admin_login(
    credentials: schemas.AdminLogin,
    db: AsyncSession = Depends(get_db),
    admin_auth: AdminAuthService = Depends(deps.get_admin_auth),
) -> Any:
    admin, token = await admin_auth.login(db, email=str(credentials.email), password=credentials.password)
    return schemas.LoginResponse(admin=schemas.AdminOut.model_validate(admin), token=token)

@router.post("/register", response_model=schemas.UserOut, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_in: schemas.UserRegister,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Create a storefront user (used for seeding and testing the admin panel).
    """
    existing_user = await crud.user.get_user_by_email(db, email=str(user_in.email))
    if existing_user:
        raise ConflictError("User already exists with this email")
    return await crud.user.create_user(db, user_in=user_in)
