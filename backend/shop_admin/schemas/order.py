from pydantic import Field
from typing import Any, Dict, List, Optional
from datetime import datetime
from enum import Enum
import uuid

from shop_admin.schemas.common import ORMModel, Pagination
from shop_admin.schemas.image import CamelModel


class OrderStatusEnum(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class OrderItem(CamelModel):
    product_id: Optional[uuid.UUID] = None
    name: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    price: float = Field(default=0, ge=0)
    size: Optional[str] = None
    color: Optional[str] = None


class Order(ORMModel):
    id: uuid.UUID
    order_id: str
    user_id: Optional[uuid.UUID] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    items: List[Dict[str, Any]] = []
    total_amount: float = 0.0
    status: OrderStatusEnum
    notes: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderStatusUpdate(CamelModel):
    status: Optional[OrderStatusEnum] = None
    notes: Optional[str] = None
    estimated_delivery: Optional[datetime] = None


class OrderPage(CamelModel):
    data: List[Order]
    pagination: Pagination
