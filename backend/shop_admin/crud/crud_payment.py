# backend/shop_admin/crud/crud_payment.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, or_
from datetime import datetime, timezone
import uuid
from typing import List, Optional, Tuple

from shop_admin.models.payment import Payment as PaymentModel
from shop_admin.schemas.payment import PaymentMethodEnum, PaymentStatusEnum


async def get_payment(db: AsyncSession, payment_id: uuid.UUID) -> Optional[PaymentModel]:
    result = await db.execute(select(PaymentModel).filter(PaymentModel.id == payment_id))
    return result.scalars().first()

async def get_payments(
    db: AsyncSession,
    *,
    page: int = 1,
    limit: int = 10,
    status: Optional[PaymentStatusEnum] = None,
    method: Optional[PaymentMethodEnum] = None,
    search: Optional[str] = None,
) -> Tuple[List[PaymentModel], int]:
    filters = []
    if status:
        filters.append(PaymentModel.status == status)
    if method:
        filters.append(PaymentModel.payment_method == method)
    if search:
        pattern = f"%{search}%"
        filters.append(or_(
            PaymentModel.payment_id.ilike(pattern),
            PaymentModel.transaction_id.ilike(pattern),
        ))
    total_result = await db.execute(select(func.count(PaymentModel.id)).filter(*filters))
    total = total_result.scalar_one()
    result = await db.execute(
        select(PaymentModel)
        .filter(*filters)
        .order_by(PaymentModel.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total

async def count_payments(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(PaymentModel.id)))
    return result.scalar_one()

async def update_payment_status(
    db: AsyncSession, *, db_obj: PaymentModel, status: PaymentStatusEnum
) -> PaymentModel:
    """
    Set the status, stamping processed_at / refunded_at on the matching transitions.
    """
    db_obj.status = status
    now = datetime.now(timezone.utc)
    if status == PaymentStatusEnum.COMPLETED:
        db_obj.processed_at = now
    elif status == PaymentStatusEnum.REFUNDED:
        db_obj.refunded_at = now
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj

async def refund_payment(
    db: AsyncSession, *, db_obj: PaymentModel, refund_amount: Optional[float] = None, reason: Optional[str] = None
) -> PaymentModel:
    """
    Mark a completed payment refunded. Callers check the Completed precondition.
    """
    db_obj.status = PaymentStatusEnum.REFUNDED
    db_obj.refunded_at = datetime.now(timezone.utc)
    db_obj.refund_amount = refund_amount or db_obj.amount
    db_obj.notes = reason or "Payment refunded"
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj
