import logging
from typing import Optional

from shop_admin.schemas.image import UploadResult, UploadTransform
from shop_admin.services.asset_store import AssetStore
from shop_admin.services.image_hash import ImageInput, compute_image_hash
from shop_admin.services.upload_cache import DuplicateUploadCache

logger = logging.getLogger(__name__)


class ImageUploadService:
    """
    hash -> recent-upload cache -> store existence check -> upload.

    Identical bytes always map to the same storage key, so the worst case for
    a cache miss is one redundant existence check.
    """

    def __init__(
        self,
        asset_store: AssetStore,
        cache: DuplicateUploadCache,
        transform: Optional[UploadTransform] = None,
    ):
        self.asset_store = asset_store
        self.cache = cache
        self.transform = transform or UploadTransform()

    async def upload(self, image_data: ImageInput) -> UploadResult:
        content_hash = compute_image_hash(image_data)

        cached = await self.cache.get(content_hash)
        if cached is not None:
            logger.info("Duplicate upload prevented by cache: %s", content_hash)
            return cached.model_copy(update={"is_duplicate": True, "from_cache": True})

        storage_key = self.asset_store.storage_key_for(content_hash)
        existing = await self.asset_store.exists(storage_key)
        if existing is not None:
            logger.info("Image already exists in asset store, returning existing URL: %s", storage_key)
            return UploadResult.from_asset(existing, content_hash, is_duplicate=True)

        # UploadError propagates: the caller must know the image was not stored
        asset = await self.asset_store.upload(image_data, storage_key, self.transform)
        result = UploadResult.from_asset(asset, content_hash)
        await self.cache.put(content_hash, result)
        logger.info(
            "Uploaded image %s (%s, %s bytes, %sx%s)",
            result.storage_key, result.format, result.size_bytes, result.width, result.height,
        )
        return result
