import uuid
from sqlalchemy import Column, String, Text, ForeignKey, Float, DateTime, JSON, Enum as DBEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from shop_admin.db.base_class import Base
from shop_admin.schemas.order import OrderStatusEnum

class Order(Base):
    # __tablename__ will be 'orders'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    order_id = Column(String(32), unique=True, nullable=False, index=True) # ORD0001
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True)
    customer_name = Column(String(255), nullable=True)
    customer_email = Column(String(255), nullable=True)
    items = Column(JSON, nullable=False, default=list) # [{productId, name, quantity, price, size, color}]
    total_amount = Column(Float, nullable=False, default=0.0)
    status = Column(DBEnum(OrderStatusEnum, name="order_status_enum"),
                    nullable=False, default=OrderStatusEnum.PENDING, index=True)
    notes = Column(Text, nullable=True)
    estimated_delivery = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", lazy="selectin")

    def __repr__(self):
        return f"<Order(id={self.id}, order_id='{self.order_id}')>"
