import uuid
from sqlalchemy import Column, String, Text, Float, Integer, Boolean, DateTime, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from shop_admin.db.base_class import Base

class Product(Base):
    # __tablename__ will be 'products'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), nullable=True, index=True)
    sku = Column(String(64), nullable=True, unique=True)
    description = Column(Text, nullable=False)
    category = Column(String(255), nullable=False, index=True)
    brand = Column(String(255), nullable=True, default="Royal Thread")
    material = Column(String(255), nullable=False)
    colors = Column(JSON, nullable=False, default=list)
    sizes = Column(JSON, nullable=False, default=list)
    price = Column(Float, nullable=False)
    mrp = Column(Float, nullable=True)
    stock = Column(Integer, nullable=False, default=0)

    # Embedded list of ImageRecord dicts ({url, alt, thumbnail?, isPrimary}).
    # Replaced wholesale on update, never patched element by element.
    images = Column(JSON, nullable=False, default=list)

    special_feature = Column(Text, nullable=True)
    meta_title = Column(String(255), nullable=True)
    meta_description = Column(Text, nullable=True)
    keywords = Column(JSON, nullable=False, default=list)
    variants = Column(JSON, nullable=False, default=list)
    popularity = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean(), default=True)
    is_featured = Column(Boolean(), default=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}')>"
