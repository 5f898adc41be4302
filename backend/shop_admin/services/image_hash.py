"""
Content hashing for uploaded images.

The digest is taken over the decoded image bytes, so a multipart upload and a
base64 data URI carrying the same picture produce the same hash and therefore
the same storage key.
"""
import base64
import binascii
import hashlib
import re
from typing import Union

from shop_admin.core.exceptions import UnsupportedInputKind

DATA_URI_PATTERN = re.compile(r"^data:image/[a-zA-Z0-9.+-]+;base64,(?P<payload>.*)$", re.DOTALL)

ImageInput = Union[bytes, bytearray, memoryview, str]


def is_data_uri(value: object) -> bool:
    return isinstance(value, str) and value.startswith("data:image/")


def decode_image_input(image_data: ImageInput) -> bytes:
    """
    Strip the transport envelope and return raw image bytes.

    Raises:
        UnsupportedInputKind: for anything that is neither bytes nor a base64 image data URI.
    """
    if isinstance(image_data, (bytes, bytearray, memoryview)):
        return bytes(image_data)
    if isinstance(image_data, str):
        match = DATA_URI_PATTERN.match(image_data.strip())
        if not match:
            raise UnsupportedInputKind("Invalid image format. Please provide base64 image data.")
        try:
            # MIME-style line wrapping is allowed inside the payload
            payload = "".join(match.group("payload").split())
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            raise UnsupportedInputKind("Image data URI does not contain valid base64.")
    raise UnsupportedInputKind()


def compute_image_hash(image_data: ImageInput) -> str:
    """MD5 hex digest of the decoded image bytes."""
    raw = decode_image_input(image_data)
    if not raw:
        raise UnsupportedInputKind("Image data is empty.")
    return hashlib.md5(raw).hexdigest()
