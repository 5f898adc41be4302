import uuid
from sqlalchemy import Column, String, Boolean, Integer, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from shop_admin.db.base_class import Base

class Admin(Base):
    # __tablename__ will be 'admins'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False) # Stored lower-cased
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default="admin")
    mobile = Column(String(50), nullable=True)
    is_active = Column(Boolean(), default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    # Password reset link
    reset_password_token = Column(String(128), nullable=True, index=True)
    reset_password_expiry = Column(DateTime(timezone=True), nullable=True)

    # One-time code flow
    otp_code = Column(String(12), nullable=True)
    otp_expiry = Column(DateTime(timezone=True), nullable=True)
    otp_attempts = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Admin(id={self.id}, email='{self.email}')>"
