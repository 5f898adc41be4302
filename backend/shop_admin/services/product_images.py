"""
Product image lifecycle: what gets uploaded, kept or reclaimed when a product
is created, updated or deleted.

Upload errors on the way in abort the request. Remote deletions on the way
out are best-effort: the product row is written either way and failures are
reported in a DeleteBatchResult.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from shop_admin.core.exceptions import NotFoundError
from shop_admin.crud import crud_product
from shop_admin.models.product import Product as ProductModel
from shop_admin.schemas.image import DeleteBatchResult, ImageRecord, RawImage
from shop_admin.schemas.product import ProductCreate, ProductUpdate
from shop_admin.services.asset_store import AssetStore
from shop_admin.services.image_hash import is_data_uri
from shop_admin.services.image_normalizer import (
    normalize_images,
    raw_image_url,
    select_usable_images,
    with_url,
)
from shop_admin.services.image_upload import ImageUploadService

logger = logging.getLogger(__name__)


def stored_image_urls(images: Optional[Sequence[Any]]) -> List[str]:
    """URLs of the image dicts persisted on a product row, in order."""
    urls = []
    for image in images or []:
        url = image.get("url") if isinstance(image, dict) else image
        if isinstance(url, str) and url.strip():
            urls.append(url.strip())
    return urls


def removed_image_urls(old_urls: Sequence[str], new_records: Sequence[ImageRecord]) -> List[str]:
    """``old - new`` by URL, keeping the old order and dropping repeats."""
    keep = {record.url for record in new_records}
    removed: List[str] = []
    for url in old_urls:
        if url not in keep and url not in removed:
            removed.append(url)
    return removed


def to_document(records: Sequence[ImageRecord]) -> List[Dict[str, Any]]:
    return [record.model_dump(by_alias=True, exclude_none=True) for record in records]


class ProductImageLifecycleManager:
    def __init__(
        self,
        asset_store: AssetStore,
        upload_service: ImageUploadService,
        repository: Any = crud_product,
    ):
        self.asset_store = asset_store
        self.upload_service = upload_service
        # Anything exposing get_product / create_product / update_product / delete_product
        self.repository = repository

    async def materialize(self, raw_images: Sequence[RawImage]) -> List[RawImage]:
        """Upload inline data-URI images and swap in the stored URL."""
        materialized: List[RawImage] = []
        for raw in select_usable_images(raw_images):
            url = raw_image_url(raw)
            if is_data_uri(url):
                result = await self.upload_service.upload(url)
                raw = with_url(raw, result.url)
            materialized.append(raw)
        return materialized

    async def prepare_images(self, raw_images: Sequence[RawImage]) -> List[ImageRecord]:
        return normalize_images(await self.materialize(raw_images))

    async def _cleanup(self, urls: Sequence[str], product_id: Any) -> DeleteBatchResult:
        if not urls:
            return DeleteBatchResult()
        report = await self.asset_store.delete_batch(urls)
        if report.failed:
            logger.warning(
                "Image cleanup for product %s left %d orphaned asset(s): %s",
                product_id, len(report.failed), [failure.url for failure in report.failed],
            )
        return report

    async def create(self, db: AsyncSession, product_in: ProductCreate) -> ProductModel:
        images = await self.prepare_images(product_in.images)
        data = product_in.model_dump(exclude={"images"})
        data["images"] = to_document(images)
        return await self.repository.create_product(db, data=data)

    async def update(
        self, db: AsyncSession, product_id: uuid.UUID, product_in: ProductUpdate
    ) -> Tuple[ProductModel, DeleteBatchResult]:
        product = await self.repository.get_product(db, product_id=product_id)
        if not product:
            raise NotFoundError("Product not found")

        update_data = product_in.model_dump(exclude_unset=True, exclude={"images"})
        report = DeleteBatchResult()
        if product_in.images is not None:
            new_images = await self.prepare_images(product_in.images)
            to_delete = removed_image_urls(stored_image_urls(product.images), new_images)
            report = await self._cleanup(to_delete, product_id)
            # Wholesale replacement, never a merge
            update_data["images"] = to_document(new_images)

        product = await self.repository.update_product(db, db_obj=product, update_data=update_data)
        return product, report

    async def delete(self, db: AsyncSession, product_id: uuid.UUID) -> DeleteBatchResult:
        product = await self.repository.get_product(db, product_id=product_id)
        if not product:
            raise NotFoundError("Product not found")
        report = await self._cleanup(stored_image_urls(product.images), product_id)
        await self.repository.delete_product(db, db_obj=product)
        return report
