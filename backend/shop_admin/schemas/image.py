# backend/shop_admin/schemas/image.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Union


class CamelModel(BaseModel):
    # Python attributes stay snake_case, JSON uses camelCase (isPrimary, storageKey, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Client supplied images ---
class ImageObject(CamelModel):
    url: Optional[str] = None
    alt: Optional[str] = None
    thumbnail: Optional[str] = None
    is_primary: Optional[bool] = None

# A raw image is either a plain URL string or a structured object
RawImage = Union[str, ImageObject]


# --- Canonical stored image (built only by services.image_normalizer) ---
class ImageRecord(CamelModel):
    url: str
    alt: str
    thumbnail: Optional[str] = None
    is_primary: bool = False


# --- Asset store ---
class UploadTransform(BaseModel):
    max_width: int = 800
    max_height: int = 800
    crop: str = "limit"
    quality: str = "auto"


class AssetMetadata(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    storage_key: str
    url: str
    format: Optional[str] = None
    size_bytes: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None


class UploadResult(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    url: str
    storage_key: str
    content_hash: str
    format: Optional[str] = None
    size_bytes: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    is_duplicate: bool = False
    from_cache: bool = False

    @classmethod
    def from_asset(cls, asset: AssetMetadata, content_hash: str, is_duplicate: bool = False) -> "UploadResult":
        return cls(
            url=asset.url,
            storage_key=asset.storage_key,
            content_hash=content_hash,
            format=asset.format,
            size_bytes=asset.size_bytes,
            width=asset.width,
            height=asset.height,
            is_duplicate=is_duplicate,
        )


class Base64ImageUpload(CamelModel):
    image_data: str = Field(..., description="data:image/<type>;base64,<payload>")
    filename: Optional[str] = None


class DestroyResult(CamelModel):
    storage_key: str
    deleted: bool
    result: str


# --- Batch deletion report (cleanup never raises) ---
class DeletedAsset(CamelModel):
    url: str
    storage_key: str
    result: str = "ok"


class FailedDeletion(CamelModel):
    url: str
    storage_key: Optional[str] = None
    reason: str


class DeleteBatchResult(CamelModel):
    deleted: List[DeletedAsset] = []
    failed: List[FailedDeletion] = []

    @property
    def partial_failure(self) -> bool:
        return bool(self.failed)
