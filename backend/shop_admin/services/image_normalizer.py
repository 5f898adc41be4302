"""
Turns whatever the admin frontend sends as ``images`` into the canonical
ImageRecord list stored on a product.
"""
from typing import List, Optional, Sequence

from shop_admin.schemas.image import ImageObject, ImageRecord, RawImage

MAX_PRODUCT_IMAGES = 10


def raw_image_url(raw: RawImage) -> Optional[str]:
    """Trimmed URL of a raw image, or None when it has no usable URL."""
    url = raw if isinstance(raw, str) else raw.url
    if not url or not url.strip():
        return None
    return url.strip()


def select_usable_images(raw_images: Sequence[RawImage], limit: int = MAX_PRODUCT_IMAGES) -> List[RawImage]:
    """Drop entries without a URL and keep the first ``limit`` of the rest."""
    return [raw for raw in raw_images if raw_image_url(raw) is not None][:limit]


def _default_alt(index: int) -> str:
    return f"Product image {index + 1}"


def _to_record(raw: RawImage, index: int) -> ImageRecord:
    url = raw_image_url(raw)
    if isinstance(raw, str):
        return ImageRecord(url=url, alt=_default_alt(index), is_primary=index == 0)
    alt = (raw.alt or "").strip() or _default_alt(index)
    thumbnail = (raw.thumbnail or "").strip() or None
    return ImageRecord(url=url, alt=alt, thumbnail=thumbnail, is_primary=bool(raw.is_primary))


def enforce_single_primary(records: List[ImageRecord]) -> List[ImageRecord]:
    """
    Exactly one primary: the first record flagged primary, else the first record.

    Always applied, since clients routinely send zero or several primaries.
    """
    if not records:
        return records
    chosen = next((idx for idx, record in enumerate(records) if record.is_primary), 0)
    return [
        record.model_copy(update={"is_primary": idx == chosen})
        for idx, record in enumerate(records)
    ]


def normalize_images(raw_images: Optional[Sequence[RawImage]]) -> List[ImageRecord]:
    if not raw_images:
        return []
    usable = select_usable_images(raw_images)
    return enforce_single_primary([_to_record(raw, idx) for idx, raw in enumerate(usable)])


def with_url(raw: RawImage, url: str) -> RawImage:
    """Same raw image pointing at ``url`` (keeps alt / thumbnail / primary flag)."""
    if isinstance(raw, str):
        return url
    return ImageObject(url=url, alt=raw.alt, thumbnail=raw.thumbnail, is_primary=raw.is_primary)
