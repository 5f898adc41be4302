from pydantic import Field
from typing import Any, List, Optional
from datetime import datetime
from enum import Enum
import uuid

from shop_admin.schemas.common import ORMModel, Pagination
from shop_admin.schemas.image import CamelModel


class PaymentMethodEnum(str, Enum):
    CREDIT_CARD = "Credit Card"
    PAYPAL = "PayPal"
    BANK_TRANSFER = "Bank Transfer"
    CASH_ON_DELIVERY = "Cash on Delivery"
    UPI = "UPI"
    WALLET = "Wallet"

class PaymentStatusEnum(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"
    REFUNDED = "Refunded"
    CANCELLED = "Cancelled"

class PaymentGatewayEnum(str, Enum):
    STRIPE = "Stripe"
    PAYPAL = "PayPal"
    RAZORPAY = "Razorpay"
    PAYU = "PayU"
    COD = "COD"
    UPI = "UPI"


class Payment(ORMModel):
    id: uuid.UUID
    payment_id: str
    order_id: uuid.UUID
    user_id: uuid.UUID
    amount: float
    payment_method: PaymentMethodEnum
    status: PaymentStatusEnum
    transaction_id: Optional[str] = None
    gateway: PaymentGatewayEnum
    fees: float = 0.0
    processed_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None
    refund_amount: Optional[float] = None
    gateway_response: Optional[Any] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaymentStatusUpdate(CamelModel):
    status: PaymentStatusEnum


class PaymentRefund(CamelModel):
    refund_amount: Optional[float] = Field(default=None, gt=0) # Defaults to the full amount
    reason: Optional[str] = None


class PaymentPage(CamelModel):
    data: List[Payment]
    pagination: Pagination
