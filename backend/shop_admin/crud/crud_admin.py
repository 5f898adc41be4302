# backend/shop_admin/crud/crud_admin.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, update
import uuid
from typing import Optional

from shop_admin.models.admin import Admin as AdminModel
from shop_admin.core.security import get_password_hash


async def get_admin(db: AsyncSession, admin_id: uuid.UUID) -> Optional[AdminModel]:
    """
    Get an admin by their ID.
    """
    result = await db.execute(select(AdminModel).filter(AdminModel.id == admin_id))
    return result.scalars().first()

async def get_admin_by_email(db: AsyncSession, email: str) -> Optional[AdminModel]:
    """
    Get an admin by email address (case-insensitive, emails are stored lower-cased).
    """
    result = await db.execute(select(AdminModel).filter(AdminModel.email == email.strip().lower()))
    return result.scalars().first()

async def get_admin_by_reset_token(db: AsyncSession, token: str) -> Optional[AdminModel]:
    result = await db.execute(select(AdminModel).filter(AdminModel.reset_password_token == token))
    return result.scalars().first()

async def get_first_admin(db: AsyncSession) -> Optional[AdminModel]:
    result = await db.execute(select(AdminModel).filter(AdminModel.role == "admin").limit(1))
    return result.scalars().first()

async def count_admins(db: AsyncSession, *, active_only: bool = False) -> int:
    query = select(func.count(AdminModel.id))
    if active_only:
        query = query.filter(AdminModel.is_active.is_(True))
    result = await db.execute(query)
    return result.scalar_one()

async def create_admin(
    db: AsyncSession, *, name: str, email: str, password: str, mobile: Optional[str] = None
) -> AdminModel:
    """
    Create a new admin account. Only the bcrypt hash of the password is stored.
    """
    db_obj = AdminModel(
        name=name,
        email=email.strip().lower(),
        hashed_password=get_password_hash(password),
        mobile=mobile,
        role="admin",
        is_active=True,
        otp_attempts=0,
    )
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj

async def save_admin(db: AsyncSession, *, db_obj: AdminModel) -> AdminModel:
    """
    Persist attribute changes made on an admin instance.
    """
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj

async def increment_otp_attempts(db: AsyncSession, admin_id: uuid.UUID) -> int:
    """
    Count one failed OTP attempt in a single UPDATE and return the new total.
    """
    result = await db.execute(
        update(AdminModel)
        .where(AdminModel.id == admin_id)
        .values(otp_attempts=func.coalesce(AdminModel.otp_attempts, 0) + 1)
        .returning(AdminModel.otp_attempts)
    )
    await db.commit()
    return result.scalar_one()
