from __future__ import annotations

import base64
import io
import re
import uuid
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import pytest
from PIL import Image

from shop_admin.core.exceptions import UploadError
from shop_admin.schemas.image import AssetMetadata, DestroyResult, UploadTransform
from shop_admin.services.asset_store import AssetStore
from shop_admin.services.email_service import EmailService
from shop_admin.services.image_hash import ImageInput, decode_image_input
from shop_admin.services.image_upload import ImageUploadService
from shop_admin.services.product_images import ProductImageLifecycleManager
from shop_admin.services.upload_cache import DuplicateUploadCache


def make_png(color: str = "red", size=(16, 16)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def to_data_uri(raw: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(raw).decode()}"


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryAssetStore(AssetStore):
    """Asset store double. URLs look like ``https://store/v1/<storage_key>.png``."""

    URL_PATTERN = re.compile(r"^/v\d+/(?P<key>[^.]+)\.[A-Za-z0-9]+$")

    def __init__(self, namespace: str = "admin-panel/products"):
        super().__init__(namespace=namespace)
        self.assets: Dict[str, AssetMetadata] = {}
        self.exists_calls: List[str] = []
        self.upload_calls: List[str] = []
        self.destroy_calls: List[str] = []
        self.fail_destroy: set = set()
        self.fail_upload = False

    def url_for(self, storage_key: str) -> str:
        return f"https://store/v1/{storage_key}.png"

    def seed(self, storage_key: str) -> str:
        self.assets[storage_key] = AssetMetadata(storage_key=storage_key, url=self.url_for(storage_key))
        return self.url_for(storage_key)

    async def exists(self, storage_key: str) -> Optional[AssetMetadata]:
        self.exists_calls.append(storage_key)
        return self.assets.get(storage_key)

    async def upload(
        self, image_data: ImageInput, storage_key: str, transform: Optional[UploadTransform] = None
    ) -> AssetMetadata:
        self.upload_calls.append(storage_key)
        if self.fail_upload:
            raise UploadError("remote store unavailable")
        asset = AssetMetadata(
            storage_key=storage_key,
            url=self.url_for(storage_key),
            format="png",
            size_bytes=len(decode_image_input(image_data)),
            width=16,
            height=16,
        )
        self.assets[storage_key] = asset
        return asset

    async def destroy(self, storage_key: str) -> DestroyResult:
        self.destroy_calls.append(storage_key)
        if storage_key in self.fail_destroy:
            raise RuntimeError("remote store timeout")
        if self.assets.pop(storage_key, None) is None:
            return DestroyResult(storage_key=storage_key, deleted=False, result="not found")
        return DestroyResult(storage_key=storage_key, deleted=True, result="ok")

    def extract_storage_key(self, url: str) -> Optional[str]:
        if not url or not isinstance(url, str):
            return None
        parsed = urlparse(url)
        if parsed.hostname != "store":
            return None
        match = self.URL_PATTERN.match(parsed.path)
        return match.group("key") if match else None


class InMemoryProductRepository:
    """Stands in for shop_admin.crud.crud_product."""

    def __init__(self):
        self.products: Dict[uuid.UUID, SimpleNamespace] = {}
        self.created: List[Dict[str, Any]] = []
        self.updates: List[Dict[str, Any]] = []
        self.deleted: List[uuid.UUID] = []

    def add(self, **fields) -> SimpleNamespace:
        product = SimpleNamespace(
            id=fields.pop("id", uuid.uuid4()),
            name="Silk Kurta",
            slug="silk-kurta",
            sku="RT-KUR-ABC123",
            description="Hand-woven silk kurta",
            category="Kurta",
            brand="Royal Thread",
            material="Silk",
            colors=["Red"],
            sizes=["M"],
            price=1999.0,
            mrp=2499.0,
            stock=5,
            images=[],
            special_feature="",
            meta_title=None,
            meta_description=None,
            keywords=[],
            variants=[],
            popularity=0,
            is_active=True,
            is_featured=False,
            created_at=None,
            updated_at=None,
        )
        for key, value in fields.items():
            setattr(product, key, value)
        self.products[product.id] = product
        return product

    async def get_product(self, db, product_id):
        return self.products.get(product_id)

    async def create_product(self, db, *, data):
        self.created.append(data)
        return self.add(**data)

    async def update_product(self, db, *, db_obj, update_data):
        self.updates.append(update_data)
        for key, value in update_data.items():
            if value is not None:
                setattr(db_obj, key, value)
        return db_obj

    async def delete_product(self, db, *, db_obj):
        self.deleted.append(db_obj.id)
        self.products.pop(db_obj.id, None)
        return db_obj


class RecordingEmailService(EmailService):
    def __init__(self, ok: bool = True):
        super().__init__(api_key="re_test", sender="Shop <no-reply@example.com>", frontend_url="http://admin.local")
        self.ok = ok
        self.sent: List[Dict[str, str]] = []

    async def send(self, to, subject, text):
        self.sent.append({"to": to, "subject": subject, "text": text})
        return (True, None) if self.ok else (False, "provider rejected the message")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def asset_store() -> InMemoryAssetStore:
    return InMemoryAssetStore()


@pytest.fixture
def upload_cache(clock) -> DuplicateUploadCache:
    return DuplicateUploadCache(ttl_seconds=30.0, clock=clock)


@pytest.fixture
def upload_service(asset_store, upload_cache) -> ImageUploadService:
    return ImageUploadService(asset_store, upload_cache)


@pytest.fixture
def product_repo() -> InMemoryProductRepository:
    return InMemoryProductRepository()


@pytest.fixture
def product_images(asset_store, upload_service, product_repo) -> ProductImageLifecycleManager:
    return ProductImageLifecycleManager(asset_store, upload_service, repository=product_repo)
