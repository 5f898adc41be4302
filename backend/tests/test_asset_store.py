import asyncio

import cloudinary.uploader
import pytest
from PIL import Image

from shop_admin.core.exceptions import UploadError, ValidationError
from shop_admin.schemas.image import UploadTransform
from shop_admin.services.asset_store import CloudinaryAssetStore, LocalAssetStore

from conftest import make_png, to_data_uri


# --- delete_batch ---
async def test_delete_batch_partitions_valid_and_unparsable_urls(asset_store):
    valid = asset_store.seed("admin-panel/products/abc")
    report = await asset_store.delete_batch([valid, "not-a-store-url"])

    assert [d.url for d in report.deleted] == [valid]
    assert report.deleted[0].storage_key == "admin-panel/products/abc"
    assert [f.url for f in report.failed] == ["not-a-store-url"]
    assert report.failed[0].storage_key is None
    assert asset_store.extract_storage_key("not-a-store-url") is None
    assert report.partial_failure is True


async def test_delete_batch_isolates_remote_failures(asset_store):
    first = asset_store.seed("admin-panel/products/one")
    broken = asset_store.seed("admin-panel/products/two")
    third = asset_store.seed("admin-panel/products/three")
    asset_store.fail_destroy.add("admin-panel/products/two")

    report = await asset_store.delete_batch([first, broken, third])

    assert [d.url for d in report.deleted] == [first, third]
    assert len(report.failed) == 1
    assert report.failed[0].url == broken
    assert report.failed[0].reason == "remote store timeout"
    assert asset_store.destroy_calls == [
        "admin-panel/products/one",
        "admin-panel/products/two",
        "admin-panel/products/three",
    ]


async def test_delete_batch_counts_missing_assets_as_deleted(asset_store):
    url = asset_store.url_for("admin-panel/products/gone")
    report = await asset_store.delete_batch([url])
    assert report.deleted[0].result == "not found"
    assert report.failed == []
    assert report.partial_failure is False


async def test_delete_batch_with_no_urls(asset_store):
    report = await asset_store.delete_batch([])
    assert report.deleted == [] and report.failed == []


# --- Cloudinary ---
@pytest.mark.parametrize(
    "url, expected",
    [
        (
            "https://res.cloudinary.com/demo/image/upload/v1712345678/admin-panel/products/5d41402abc4b2a76.jpg",
            "admin-panel/products/5d41402abc4b2a76",
        ),
        (
            "https://res.cloudinary.com/demo/image/upload/c_limit,w_800/q_auto/v17/admin-panel/products/abc.webp",
            "admin-panel/products/abc",
        ),
        ("http://res.cloudinary.com/demo/image/upload/v1/abc.png?x=1", "abc"),
        ("https://res.cloudinary.com/demo/image/upload/admin-panel/products/abc.jpg", None),
        ("https://example.com/image/upload/v1/admin-panel/products/abc.jpg", None),
        ("not-a-store-url", None),
        ("", None),
    ],
)
def test_cloudinary_extract_storage_key(url, expected):
    assert CloudinaryAssetStore().extract_storage_key(url) == expected


def test_cloudinary_storage_key_is_namespaced():
    store = CloudinaryAssetStore(namespace="/admin-panel/products/")
    assert store.storage_key_for("abc") == "admin-panel/products/abc"


async def test_cloudinary_destroy_maps_results(monkeypatch):
    outcomes = {"admin-panel/products/a": "ok", "admin-panel/products/b": "not found"}
    monkeypatch.setattr(cloudinary.uploader, "destroy", lambda key, **kwargs: {"result": outcomes[key]})
    store = CloudinaryAssetStore()

    deleted = await store.destroy("admin-panel/products/a")
    missing = await store.destroy("admin-panel/products/b")

    assert deleted.deleted is True and deleted.result == "ok"
    assert missing.deleted is False and missing.result == "not found"


async def test_cloudinary_destroy_unexpected_result_fails_batch_entry(monkeypatch):
    monkeypatch.setattr(cloudinary.uploader, "destroy", lambda key, **kwargs: {"result": "error"})
    store = CloudinaryAssetStore()
    url = "https://res.cloudinary.com/demo/image/upload/v1/admin-panel/products/abc.jpg"
    report = await store.delete_batch([url])
    assert report.deleted == []
    assert report.failed[0].storage_key == "admin-panel/products/abc"


async def test_cloudinary_upload_error_becomes_upload_error(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(cloudinary.uploader, "upload", boom)
    with pytest.raises(UploadError) as exc_info:
        await CloudinaryAssetStore().upload(make_png(), "admin-panel/products/abc")
    assert exc_info.value.reason == "connection reset"


async def test_cloudinary_upload_passes_key_and_transform(monkeypatch):
    captured = {}

    def fake_upload(file, **kwargs):
        captured["file"] = file
        captured.update(kwargs)
        return {
            "public_id": kwargs["public_id"],
            "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/admin-panel/products/abc.png",
            "format": "png",
            "bytes": 123,
            "width": 16,
            "height": 16,
        }

    monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)
    data_uri = to_data_uri(make_png())
    asset = await CloudinaryAssetStore().upload(data_uri, "admin-panel/products/abc", UploadTransform(max_width=640))

    assert captured["file"] == data_uri
    assert captured["public_id"] == "admin-panel/products/abc"
    assert captured["overwrite"] is True
    assert captured["transformation"][0] == {"width": 640, "height": 800, "crop": "limit"}
    assert asset.url.endswith("/admin-panel/products/abc.png")
    assert asset.size_bytes == 123


# --- Local filesystem ---
async def test_local_store_round_trip(tmp_path):
    store = LocalAssetStore(root=tmp_path)
    key = store.storage_key_for("abc123")

    asset = await store.upload(make_png("red", size=(1600, 400)), key)

    assert asset.storage_key == key
    assert asset.width == 800 and asset.height == 200
    assert asset.url.startswith("/static/uploads/admin-panel/products/abc123.png?v=")
    assert (tmp_path / "admin-panel" / "products" / "abc123.png").is_file()
    assert store.extract_storage_key(asset.url) == key

    found = await store.exists(key)
    assert found is not None and found.url == asset.url

    removed = await store.destroy(key)
    assert removed.deleted is True
    assert await store.exists(key) is None
    again = await store.destroy(key)
    assert again.result == "not found"


async def test_local_store_never_enlarges(tmp_path):
    store = LocalAssetStore(root=tmp_path)
    asset = await store.upload(to_data_uri(make_png(size=(40, 20))), store.storage_key_for("small"))
    assert (asset.width, asset.height) == (40, 20)
    with Image.open(tmp_path / "admin-panel" / "products" / "small.png") as img:
        assert img.size == (40, 20)


async def test_local_store_rejects_non_images(tmp_path):
    store = LocalAssetStore(root=tmp_path)
    with pytest.raises(UploadError):
        await store.upload(b"definitely not an image", store.storage_key_for("junk"))


async def test_local_store_rejects_path_traversal(tmp_path):
    store = LocalAssetStore(root=tmp_path)
    with pytest.raises(ValidationError):
        await store.destroy("../outside")
    assert store.extract_storage_key("/static/uploads/../secrets.png") is None
    assert store.extract_storage_key("https://res.cloudinary.com/demo/image/upload/v1/abc.png") is None


async def test_local_store_concurrent_identical_uploads(tmp_path):
    store = LocalAssetStore(root=tmp_path)
    key = store.storage_key_for("twice")
    png = make_png("blue", size=(64, 64))

    assets = await asyncio.gather(*(store.upload(png, key) for _ in range(16)))

    assert {asset.storage_key for asset in assets} == {key}
    folder = tmp_path / "admin-panel" / "products"
    assert sorted(p.name for p in folder.iterdir()) == ["twice.png"]


async def test_local_store_ignores_partial_temp_files(tmp_path):
    store = LocalAssetStore(root=tmp_path)
    folder = tmp_path / "admin-panel" / "products"
    folder.mkdir(parents=True)
    (folder / "pending.png.tmp").write_bytes(b"half written")

    assert await store.exists(store.storage_key_for("pending")) is None
