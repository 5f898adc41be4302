import hashlib

import pytest

from shop_admin.core.exceptions import UnsupportedInputKind, ValidationError
from shop_admin.services.image_hash import compute_image_hash, decode_image_input, is_data_uri

from conftest import make_png, to_data_uri


def test_raw_bytes_and_data_uri_hash_the_same():
    raw = make_png("blue")
    assert compute_image_hash(raw) == compute_image_hash(to_data_uri(raw))
    assert compute_image_hash(raw) == hashlib.md5(raw).hexdigest()


def test_bytearray_and_memoryview_are_accepted():
    raw = make_png("green")
    digest = compute_image_hash(raw)
    assert compute_image_hash(bytearray(raw)) == digest
    assert compute_image_hash(memoryview(raw)) == digest


def test_different_images_hash_differently():
    assert compute_image_hash(make_png("red")) != compute_image_hash(make_png("white"))


def test_data_uri_mime_type_does_not_change_the_digest():
    raw = make_png("red")
    assert compute_image_hash(to_data_uri(raw, "image/png")) == compute_image_hash(to_data_uri(raw, "image/jpeg"))


@pytest.mark.parametrize(
    "value",
    [
        "https://store/v1/admin-panel/products/abc.png",
        "data:text/plain;base64,aGVsbG8=",
        "data:image/png;base64,@@not-base64@@",
        12345,
        None,
    ],
)
def test_unsupported_inputs_raise(value):
    with pytest.raises(UnsupportedInputKind):
        compute_image_hash(value)


def test_empty_bytes_are_rejected():
    with pytest.raises(UnsupportedInputKind):
        compute_image_hash(b"")


def test_unsupported_input_is_a_validation_error():
    assert issubclass(UnsupportedInputKind, ValidationError)
    assert UnsupportedInputKind.status_code == 400


def test_decode_strips_the_envelope():
    raw = make_png("black")
    assert decode_image_input(to_data_uri(raw)) == raw
    assert is_data_uri(to_data_uri(raw))
    assert not is_data_uri("https://store/v1/x.png")
    assert not is_data_uri(raw)


def test_line_wrapped_base64_hashes_like_the_raw_bytes():
    raw = make_png("green", size=(40, 40))
    encoded = to_data_uri(raw).split(",", 1)[1]
    wrapped = "\r\n".join(encoded[i:i + 76] for i in range(0, len(encoded), 76))
    assert compute_image_hash(f"data:image/png;base64,{wrapped}") == hashlib.md5(raw).hexdigest()
