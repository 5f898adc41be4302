import uuid
from sqlalchemy import Column, String, Text, ForeignKey, Float, DateTime, JSON, Enum as DBEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from shop_admin.db.base_class import Base
from shop_admin.schemas.payment import PaymentMethodEnum, PaymentStatusEnum, PaymentGatewayEnum

class Payment(Base):
    # __tablename__ will be 'payments'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    payment_id = Column(String(32), unique=True, nullable=False, index=True) # PAY0001
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    payment_method = Column(DBEnum(PaymentMethodEnum, name="payment_method_enum"), nullable=False)
    status = Column(DBEnum(PaymentStatusEnum, name="payment_status_enum"),
                    nullable=False, default=PaymentStatusEnum.PENDING, index=True)
    transaction_id = Column(String(255), nullable=True)
    gateway = Column(DBEnum(PaymentGatewayEnum, name="payment_gateway_enum"), nullable=False)
    fees = Column(Float, nullable=False, default=0.0)
    processed_at = Column(DateTime(timezone=True), nullable=True)
    refunded_at = Column(DateTime(timezone=True), nullable=True)
    refund_amount = Column(Float, nullable=True)
    gateway_response = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    order = relationship("Order", lazy="selectin")
    user = relationship("User", lazy="selectin")

    def __repr__(self):
        return f"<Payment(id={self.id}, payment_id='{self.payment_id}')>"
