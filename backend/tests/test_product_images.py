import uuid

import pytest

from shop_admin.core.exceptions import NotFoundError, UploadError
from shop_admin.schemas.image import ImageObject, ImageRecord
from shop_admin.schemas.product import ProductCreate, ProductUpdate
from shop_admin.services.image_hash import compute_image_hash
from shop_admin.services.product_images import removed_image_urls, stored_image_urls

from conftest import make_png, to_data_uri


def _stored(url, alt, primary=False):
    return {"url": url, "alt": alt, "isPrimary": primary}


def _create_payload(**overrides):
    payload = {
        "name": "Silk Kurta",
        "description": "Hand-woven silk kurta",
        "category": "Kurta",
        "meterial": "Silk",
        "price": 1999,
        "stock": 5,
    }
    payload.update(overrides)
    return ProductCreate.model_validate(payload)


async def test_update_replaces_images_and_deletes_only_removed(product_images, product_repo, asset_store):
    url_a = asset_store.seed("admin-panel/products/aaa")
    url_b = asset_store.seed("admin-panel/products/bbb")
    url_c = asset_store.seed("admin-panel/products/ccc")
    product = product_repo.add(images=[_stored(url_a, "A", primary=True), _stored(url_b, "B")])

    updated, report = await product_images.update(
        None, product.id, ProductUpdate(images=[ImageObject(url=url_b, alt="B"), ImageObject(url=url_c, alt="C")])
    )

    assert asset_store.destroy_calls == ["admin-panel/products/aaa"]
    assert [d.url for d in report.deleted] == [url_a]
    assert report.failed == []
    assert updated.images == [
        {"url": url_b, "alt": "B", "isPrimary": True},
        {"url": url_c, "alt": "C", "isPrimary": False},
    ]


async def test_update_without_images_leaves_them_alone(product_images, product_repo, asset_store):
    url_a = asset_store.seed("admin-panel/products/aaa")
    product = product_repo.add(images=[_stored(url_a, "A", primary=True)])

    updated, report = await product_images.update(None, product.id, ProductUpdate(price=999))

    assert updated.price == 999
    assert updated.images == [_stored(url_a, "A", primary=True)]
    assert asset_store.destroy_calls == []
    assert "images" not in product_repo.updates[0]
    assert report.deleted == [] and report.failed == []


async def test_update_with_empty_list_clears_and_reclaims_everything(product_images, product_repo, asset_store):
    url_a = asset_store.seed("admin-panel/products/aaa")
    url_b = asset_store.seed("admin-panel/products/bbb")
    product = product_repo.add(images=[_stored(url_a, "A", primary=True), _stored(url_b, "B")])

    updated, report = await product_images.update(None, product.id, ProductUpdate(images=[]))

    assert updated.images == []
    assert sorted(d.storage_key for d in report.deleted) == ["admin-panel/products/aaa", "admin-panel/products/bbb"]


async def test_update_uploads_inline_images(product_images, product_repo, asset_store):
    url_a = asset_store.seed("admin-panel/products/aaa")
    product = product_repo.add(images=[_stored(url_a, "A", primary=True)])
    raw = make_png("purple")

    updated, _ = await product_images.update(
        None, product.id, ProductUpdate(images=[url_a, ImageObject(url=to_data_uri(raw), alt="New")])
    )

    new_key = f"admin-panel/products/{compute_image_hash(raw)}"
    assert asset_store.upload_calls == [new_key]
    assert [img["url"] for img in updated.images] == [url_a, asset_store.url_for(new_key)]
    assert updated.images[1]["alt"] == "New"
    assert asset_store.destroy_calls == []


async def test_update_persists_even_when_cleanup_fails(product_images, product_repo, asset_store):
    url_a = asset_store.seed("admin-panel/products/aaa")
    url_b = asset_store.seed("admin-panel/products/bbb")
    asset_store.fail_destroy.add("admin-panel/products/aaa")
    product = product_repo.add(images=[_stored(url_a, "A", primary=True), _stored("legacy.jpg", "Old")])

    updated, report = await product_images.update(None, product.id, ProductUpdate(images=[url_b]))

    assert [img["url"] for img in updated.images] == [url_b]
    assert {f.url for f in report.failed} == {"legacy.jpg", url_a}
    assert report.partial_failure is True


async def test_update_missing_product(product_images):
    with pytest.raises(NotFoundError):
        await product_images.update(None, uuid.uuid4(), ProductUpdate(images=[]))


async def test_delete_reclaims_images_and_tolerates_failures(product_images, product_repo, asset_store):
    url_a = asset_store.seed("admin-panel/products/aaa")
    url_b = asset_store.seed("admin-panel/products/bbb")
    asset_store.fail_destroy.add("admin-panel/products/bbb")
    product = product_repo.add(
        images=[_stored(url_a, "A", primary=True), _stored(url_b, "B"), _stored("not-a-store-url", "C")]
    )

    report = await product_images.delete(None, product.id)

    assert product_repo.deleted == [product.id]
    assert [d.url for d in report.deleted] == [url_a]
    assert {f.url for f in report.failed} == {"not-a-store-url", url_b}


async def test_delete_missing_product(product_images, product_repo):
    with pytest.raises(NotFoundError):
        await product_images.delete(None, uuid.uuid4())
    assert product_repo.deleted == []


async def test_create_normalizes_and_uploads(product_images, product_repo, asset_store):
    raw = make_png("orange")
    product = await product_images.create(
        None,
        _create_payload(images=[
            to_data_uri(raw),
            {"url": "https://store/v1/admin-panel/products/ext.png", "isPrimary": True},
            "",
        ]),
    )

    assert product_repo.created[0]["material"] == "Silk"
    assert product.images == [
        {
            "url": asset_store.url_for(f"admin-panel/products/{compute_image_hash(raw)}"),
            "alt": "Product image 1",
            "isPrimary": True,
        },
        {"url": "https://store/v1/admin-panel/products/ext.png", "alt": "Product image 2", "isPrimary": False},
    ]


async def test_create_aborts_on_upload_failure(product_images, product_repo, asset_store):
    asset_store.fail_upload = True
    with pytest.raises(UploadError):
        await product_images.create(None, _create_payload(images=[to_data_uri(make_png())]))
    assert product_repo.created == []


def test_removed_image_urls_keeps_order_and_drops_repeats():
    keep = [ImageRecord(url="b", alt="b")]
    assert removed_image_urls(["a", "b", "c", "a"], keep) == ["a", "c"]


def test_stored_image_urls_reads_dicts_and_strings():
    assert stored_image_urls([{"url": " x "}, "y", {"alt": "no url"}, None]) == ["x", "y"]
    assert stored_image_urls(None) == []
