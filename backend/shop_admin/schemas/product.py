# backend/shop_admin/schemas/product.py
from pydantic import AliasChoices, Field, constr, field_validator
from typing import Any, List, Optional
from datetime import datetime
import uuid

from shop_admin.schemas.common import ORMModel, Pagination
from shop_admin.schemas.image import CamelModel, DeleteBatchResult, ImageRecord, RawImage

NonEmptyStr = constr(strip_whitespace=True, min_length=1)


class ProductCreate(CamelModel):
    name: NonEmptyStr
    description: NonEmptyStr
    category: NonEmptyStr
    # "meterial" is the field name older admin frontends send
    material: NonEmptyStr = Field(..., validation_alias=AliasChoices("material", "meterial"))
    brand: Optional[str] = None
    colors: List[str] = []
    sizes: List[str] = []
    price: float = Field(..., ge=0)
    mrp: Optional[float] = Field(default=None, ge=0) # Defaults to price
    stock: int = Field(..., ge=0)
    images: List[RawImage] = []
    special_feature: Optional[str] = None
    is_active: bool = True
    is_featured: bool = False


class ProductUpdate(CamelModel):
    name: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    category: Optional[NonEmptyStr] = None
    material: Optional[NonEmptyStr] = Field(default=None, validation_alias=AliasChoices("material", "meterial"))
    brand: Optional[NonEmptyStr] = None
    colors: Optional[List[str]] = None
    sizes: Optional[List[str]] = None
    price: Optional[float] = Field(default=None, ge=0)
    mrp: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)
    # None means "leave images alone"; a list (even empty) replaces them wholesale
    images: Optional[List[RawImage]] = None
    special_feature: Optional[str] = None
    meta_title: Optional[NonEmptyStr] = None
    meta_description: Optional[NonEmptyStr] = None
    keywords: Optional[List[str]] = None
    variants: Optional[List[Any]] = None
    popularity: Optional[int] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None


class Product(ORMModel): # Full Product response schema
    id: uuid.UUID
    name: str
    slug: Optional[str] = None
    sku: Optional[str] = None
    description: str
    category: str
    brand: Optional[str] = None
    material: str
    colors: List[str] = []
    sizes: List[str] = []
    price: float
    mrp: Optional[float] = None
    stock: int
    images: List[ImageRecord] = []
    special_feature: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    keywords: List[str] = []
    variants: List[Any] = []
    popularity: int = 0
    is_active: bool = True
    is_featured: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("colors", "sizes", "images", "keywords", "variants", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class ProductPage(CamelModel):
    data: List[Product]
    pagination: Pagination


class ProductMutationResult(CamelModel):
    message: str
    data: Product
    # Best-effort remote cleanup outcome; failures here never fail the request
    cleanup: DeleteBatchResult = DeleteBatchResult()


class ProductDeleteResult(CamelModel):
    message: str
    id: uuid.UUID
    cleanup: DeleteBatchResult = DeleteBatchResult()
