# backend/shop_admin/api/endpoints/payments.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Optional
import uuid

from shop_admin import crud, models, schemas
from shop_admin.api import deps
from shop_admin.core.exceptions import NotFoundError, ValidationError
from shop_admin.db.session import get_db

router = APIRouter()

@router.get("/getAll", response_model=schemas.PaymentPage)
async def read_payments(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = Query(None, description="Payment status or 'all'"),
    method: Optional[str] = Query(None, description="Payment method or 'all'"),
    search: Optional[str] = Query(None, description="Matches payment or transaction id"),
    db: AsyncSession = Depends(get_db),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    payments, total = await crud.payment.get_payments(
        db,
        page=page,
        limit=limit,
        status=deps.parse_enum_filter(status, schemas.PaymentStatusEnum, "status"),
        method=deps.parse_enum_filter(method, schemas.PaymentMethodEnum, "method"),
        search=search,
    )
    return schemas.PaymentPage(
        data=[schemas.Payment.model_validate(p) for p in payments],
        pagination=schemas.Pagination.build(page=page, limit=limit, total=total),
    )

@router.get("/{payment_id}", response_model=schemas.Payment)
async def read_payment_by_id(
    payment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    payment = await crud.payment.get_payment(db, payment_id=payment_id)
    if not payment:
        raise NotFoundError("Payment not found")
    return payment

@router.put("/{payment_id}/status", response_model=schemas.Payment)
async def update_payment_status(
    payment_id: uuid.UUID,
    status_in: schemas.PaymentStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    payment = await crud.payment.get_payment(db, payment_id=payment_id)
    if not payment:
        raise NotFoundError("Payment not found")
    return await crud.payment.update_payment_status(db, db_obj=payment, status=status_in.status)

@router.post("/{payment_id}/refund", response_model=schemas.Payment)
async def refund_payment(
    payment_id: uuid.UUID,
    refund_in: schemas.PaymentRefund,
    db: AsyncSession = Depends(get_db),
    current_admin: models.Admin = Depends(deps.get_current_admin),
) -> Any:
    payment = await crud.payment.get_payment(db, payment_id=payment_id)
    if not payment:
        raise NotFoundError("Payment not found")
    if payment.status != schemas.PaymentStatusEnum.COMPLETED:
        raise ValidationError("Only completed payments can be refunded")
    if refund_in.refund_amount is not None and refund_in.refund_amount > payment.amount:
        raise ValidationError("Refund amount cannot exceed the payment amount", field="refundAmount")
    return await crud.payment.refund_payment(
        db, db_obj=payment, refund_amount=refund_in.refund_amount, reason=refund_in.reason
    )
