from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, or_
import uuid
from typing import List, Optional, Tuple
from shop_admin.models.user import User as UserModel # Alias to avoid name clash
from shop_admin.schemas.user import UserRegister
from shop_admin.core.security import get_password_hash


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> UserModel | None:
    """
    Get a user by their ID.
    """
    result = await db.execute(select(UserModel).filter(UserModel.id == user_id))
    return result.scalars().first()

async def get_user_by_email(db: AsyncSession, email: str) -> UserModel | None:
    """
    Get a user by their email address.
    """
    result = await db.execute(select(UserModel).filter(UserModel.email == email.strip().lower()))
    return result.scalars().first()

async def get_users(
    db: AsyncSession, *, page: int = 1, limit: int = 10, search: Optional[str] = None
) -> Tuple[List[UserModel], int]:
    """
    Newest-first page of storefront users (admin role excluded) plus the total count.
    """
    filters = [UserModel.role != "admin"]
    if search:
        pattern = f"%{search}%"
        filters.append(or_(
            UserModel.name.ilike(pattern),
            UserModel.email.ilike(pattern),
            UserModel.mobile.ilike(pattern),
        ))
    total_result = await db.execute(select(func.count(UserModel.id)).filter(*filters))
    total = total_result.scalar_one()
    result = await db.execute(
        select(UserModel)
        .filter(*filters)
        .order_by(UserModel.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total

async def count_users(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(UserModel.id)).filter(UserModel.role != "admin"))
    return result.scalar_one()

async def create_user(db: AsyncSession, *, user_in: UserRegister) -> UserModel:
    """
    Create a new storefront user.
    """
    db_obj = UserModel(
        name=user_in.name or "User",
        email=str(user_in.email).lower(),
        hashed_password=get_password_hash(user_in.password),
        mobile=user_in.mobile or "",
        role="user",
        is_active=True,
    )
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj

async def toggle_user_active(db: AsyncSession, *, db_obj: UserModel) -> UserModel:
    """
    Block an active user or unblock a blocked one.
    """
    db_obj.is_active = not db_obj.is_active
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj
