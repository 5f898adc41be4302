"""
Content-addressed image storage.

Every asset lives under ``"{namespace}/{content_hash}"`` so uploading the same
bytes twice resolves to the same remote object. Two backends are provided:
Cloudinary for deployments and the local filesystem (served from
``/static/uploads``) for development.
"""
import asyncio
import io
import logging
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional
from urllib.parse import urlparse

import cloudinary
import cloudinary.api
import cloudinary.exceptions
import cloudinary.uploader
from PIL import Image, UnidentifiedImageError

from shop_admin.core.exceptions import UploadError, ValidationError
from shop_admin.schemas.image import (
    AssetMetadata,
    DeleteBatchResult,
    DeletedAsset,
    DestroyResult,
    FailedDeletion,
    UploadTransform,
)
from shop_admin.services.image_hash import ImageInput, decode_image_input

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "admin-panel/products"
STORAGE_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+(?:/[A-Za-z0-9_\-]+)*$")


class AssetStore(ABC):
    """Create / check / destroy assets addressed by storage key."""

    def __init__(self, namespace: str = DEFAULT_NAMESPACE):
        self.namespace = namespace.strip("/")

    def storage_key_for(self, content_hash: str) -> str:
        return f"{self.namespace}/{content_hash}"

    @abstractmethod
    async def exists(self, storage_key: str) -> Optional[AssetMetadata]:
        ...

    @abstractmethod
    async def upload(
        self, image_data: ImageInput, storage_key: str, transform: Optional[UploadTransform] = None
    ) -> AssetMetadata:
        ...

    @abstractmethod
    async def destroy(self, storage_key: str) -> DestroyResult:
        ...

    @abstractmethod
    def extract_storage_key(self, url: str) -> Optional[str]:
        """Map a URL this store handed out back to its storage key, or None."""

    async def delete_batch(self, urls: Iterable[str]) -> DeleteBatchResult:
        """
        Destroy the assets behind ``urls`` one at a time.

        Never raises: URLs that cannot be parsed or whose deletion fails are
        reported in ``failed`` and the remaining URLs are still processed.
        """
        report = DeleteBatchResult()
        for url in urls:
            storage_key = self.extract_storage_key(url)
            if not storage_key:
                logger.warning("Could not extract storage key from URL: %s", url)
                report.failed.append(
                    FailedDeletion(url=url, reason="Could not extract storage key from URL")
                )
                continue
            try:
                outcome = await self.destroy(storage_key)
            except Exception as exc:
                logger.error("Error deleting image %s: %s", storage_key, exc)
                report.failed.append(FailedDeletion(url=url, storage_key=storage_key, reason=str(exc)))
                continue
            if outcome.deleted:
                logger.info("Deleted image from asset store: %s", storage_key)
            else:
                logger.info("Image not found or already deleted: %s", storage_key)
            report.deleted.append(DeletedAsset(url=url, storage_key=storage_key, result=outcome.result))
        return report


class CloudinaryAssetStore(AssetStore):
    """
    Cloudinary backend. The SDK is blocking, so each call runs in a worker thread.

    Delivery URLs look like
    ``https://res.cloudinary.com/<cloud>/image/upload/[<transforms>/]v<version>/<public_id>.<ext>``
    and the public id is the storage key.
    """

    URL_KEY_PATTERN = re.compile(r"/upload/(?:[^/]+/)*?v\d+/(?P<key>[^.?#]+)")

    def __init__(self, cloudinary_url: Optional[str] = None, namespace: str = DEFAULT_NAMESPACE):
        super().__init__(namespace=namespace)
        if cloudinary_url:
            parsed = urlparse(cloudinary_url)
            cloudinary.config(
                cloud_name=parsed.hostname,
                api_key=parsed.username,
                api_secret=parsed.password,
                secure=True,
            )

    @staticmethod
    def _to_metadata(resource: dict) -> AssetMetadata:
        return AssetMetadata(
            storage_key=resource["public_id"],
            url=resource.get("secure_url") or resource.get("url"),
            format=resource.get("format"),
            size_bytes=resource.get("bytes"),
            width=resource.get("width"),
            height=resource.get("height"),
        )

    async def exists(self, storage_key: str) -> Optional[AssetMetadata]:
        try:
            resource = await asyncio.to_thread(cloudinary.api.resource, storage_key)
        except cloudinary.exceptions.NotFound:
            return None
        except cloudinary.exceptions.Error as exc:
            # An inconclusive lookup falls through to an (idempotent, overwriting) upload
            logger.warning("Existence check failed for %s: %s", storage_key, exc)
            return None
        return self._to_metadata(resource)

    async def upload(
        self, image_data: ImageInput, storage_key: str, transform: Optional[UploadTransform] = None
    ) -> AssetMetadata:
        transform = transform or UploadTransform()
        if isinstance(image_data, (bytearray, memoryview)):
            image_data = bytes(image_data)
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                image_data,
                public_id=storage_key,
                overwrite=True,
                resource_type="auto",
                transformation=[
                    {"width": transform.max_width, "height": transform.max_height, "crop": transform.crop},
                    {"quality": transform.quality},
                ],
            )
        except Exception as exc:
            logger.error("Cloudinary upload error for %s: %s", storage_key, exc)
            raise UploadError(str(exc))
        return self._to_metadata(result)

    async def destroy(self, storage_key: str) -> DestroyResult:
        result = await asyncio.to_thread(cloudinary.uploader.destroy, storage_key, invalidate=True)
        outcome = (result or {}).get("result", "unknown")
        if outcome not in ("ok", "not found"):
            raise RuntimeError(f"Unexpected destroy result for {storage_key}: {outcome}")
        return DestroyResult(storage_key=storage_key, deleted=outcome == "ok", result=outcome)

    def extract_storage_key(self, url: str) -> Optional[str]:
        if not url or not isinstance(url, str):
            return None
        parsed = urlparse(url.strip())
        if not (parsed.hostname or "").endswith("cloudinary.com"):
            return None
        match = self.URL_KEY_PATTERN.search(parsed.path)
        return match.group("key") if match else None


class LocalAssetStore(AssetStore):
    """
    Filesystem backend: ``<root>/<storage_key>.<ext>``, served by the static
    mount as ``<base_url>/<storage_key>.<ext>?v=<version>``.
    """

    SAVE_FORMATS = {"JPEG": "jpg", "PNG": "png", "GIF": "gif", "WEBP": "webp"}

    def __init__(self, root: Path, base_url: str = "/static/uploads", namespace: str = DEFAULT_NAMESPACE):
        super().__init__(namespace=namespace)
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self._url_pattern = re.compile(
            r"^" + re.escape(self.base_url) + r"/(?P<key>[A-Za-z0-9_\-/]+)\.[A-Za-z0-9]+$"
        )

    def _validate_key(self, storage_key: str) -> str:
        if not storage_key or ".." in storage_key or not STORAGE_KEY_PATTERN.match(storage_key):
            raise ValidationError("Invalid storage key", field="storageKey")
        return storage_key

    def _find(self, storage_key: str) -> Optional[Path]:
        self._validate_key(storage_key)
        stem = self.root / storage_key
        if not stem.parent.is_dir():
            return None
        for candidate in sorted(stem.parent.glob(f"{stem.name}.*")):
            if candidate.suffix != ".tmp" and candidate.is_file():
                return candidate
        return None

    def _metadata_for(self, storage_key: str, path: Path) -> AssetMetadata:
        with Image.open(path) as img:
            width, height = img.size
            image_format = (img.format or path.suffix.lstrip(".")).lower()
        version = int(path.stat().st_mtime)
        return AssetMetadata(
            storage_key=storage_key,
            url=f"{self.base_url}/{storage_key}{path.suffix}?v={version}",
            format=image_format,
            size_bytes=path.stat().st_size,
            width=width,
            height=height,
        )

    def _exists_sync(self, storage_key: str) -> Optional[AssetMetadata]:
        path = self._find(storage_key)
        return self._metadata_for(storage_key, path) if path else None

    def _upload_sync(self, raw: bytes, storage_key: str, transform: UploadTransform) -> AssetMetadata:
        self._validate_key(storage_key)
        try:
            with Image.open(io.BytesIO(raw)) as img:
                source_format = img.format or "PNG"
                if transform.crop == "limit":
                    # Shrink to fit, never enlarge
                    img.thumbnail((transform.max_width, transform.max_height))
                save_format = source_format if source_format in self.SAVE_FORMATS else "PNG"
                if save_format == "JPEG" and img.mode not in ("RGB", "L"):
                    img = img.convert("RGB")
                buffer = io.BytesIO()
                save_options = {"quality": 85, "optimize": True} if save_format in ("JPEG", "WEBP") else {}
                img.save(buffer, format=save_format, **save_options)
        except (UnidentifiedImageError, OSError) as exc:
            raise UploadError(f"Not a readable image: {exc}")

        target = self.root / f"{storage_key}.{self.SAVE_FORMATS[save_format]}"
        existing = self._find(storage_key)
        if existing and existing != target:
            existing.unlink(missing_ok=True)
        target.parent.mkdir(parents=True, exist_ok=True)
        # One temp file per call so concurrent uploads of a key never share it
        with tempfile.NamedTemporaryFile(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp", delete=False) as tmp:
            tmp.write(buffer.getvalue())
        tmp_path = Path(tmp.name)
        try:
            tmp_path.replace(target)
        finally:
            tmp_path.unlink(missing_ok=True)
        return self._metadata_for(storage_key, target)

    def _destroy_sync(self, storage_key: str) -> DestroyResult:
        path = self._find(storage_key)
        if path is None:
            return DestroyResult(storage_key=storage_key, deleted=False, result="not found")
        path.unlink()
        return DestroyResult(storage_key=storage_key, deleted=True, result="ok")

    async def exists(self, storage_key: str) -> Optional[AssetMetadata]:
        return await asyncio.to_thread(self._exists_sync, storage_key)

    async def upload(
        self, image_data: ImageInput, storage_key: str, transform: Optional[UploadTransform] = None
    ) -> AssetMetadata:
        raw = decode_image_input(image_data)
        try:
            return await asyncio.to_thread(self._upload_sync, raw, storage_key, transform or UploadTransform())
        except OSError as exc:
            logger.error("Local upload error for %s: %s", storage_key, exc)
            raise UploadError(str(exc))

    async def destroy(self, storage_key: str) -> DestroyResult:
        return await asyncio.to_thread(self._destroy_sync, storage_key)

    def extract_storage_key(self, url: str) -> Optional[str]:
        if not url or not isinstance(url, str):
            return None
        match = self._url_pattern.match(urlparse(url.strip()).path)
        if not match or ".." in match.group("key"):
            return None
        return match.group("key")


def build_asset_store(settings, static_dir: Path) -> AssetStore:
    """Pick the backend named by ``ASSET_STORE_BACKEND``."""
    backend = settings.ASSET_STORE_BACKEND.lower()
    if backend == "cloudinary":
        return CloudinaryAssetStore(cloudinary_url=settings.CLOUDINARY_URL, namespace=settings.ASSET_NAMESPACE)
    if backend == "local":
        return LocalAssetStore(root=static_dir / "uploads", namespace=settings.ASSET_NAMESPACE)
    raise ValueError(f"Unknown ASSET_STORE_BACKEND: {settings.ASSET_STORE_BACKEND}")
