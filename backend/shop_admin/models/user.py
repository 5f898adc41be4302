import uuid
from sqlalchemy import Column, String, Boolean, DateTime, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from shop_admin.db.base_class import Base

class User(Base):
      # __tablename__ will be 'users'
      # Storefront customers; admins live in the 'admins' table

      id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
      name = Column(String(255), index=True, nullable=False)
      email = Column(String(255), unique=True, index=True, nullable=False)
      hashed_password = Column(String(255), nullable=False)
      role = Column(String(50), nullable=False, default="user")
      mobile = Column(String(50), nullable=True)
      is_active = Column(Boolean(), default=True)
      last_login = Column(DateTime(timezone=True), nullable=True)
      address = Column(JSON, nullable=True) # street, city, state, zipCode, country
      preferences = Column(JSON, nullable=False, default=lambda: {"newsletter": False, "notifications": True})

      created_at = Column(DateTime(timezone=True), server_default=func.now())
      updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

      def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}')>"
