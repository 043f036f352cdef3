"""Tests for the S3 object store wrapper."""

from unittest.mock import MagicMock

from minio import Minio
from minio.credentials import ChainedProvider

from product_service import storage
from product_service.storage import ObjectStore


def test_put_streams_body_with_length_and_content_type():
    client = MagicMock()
    client.put_object.return_value.etag = "abc123"
    store = ObjectStore(client, bucket="images", public_url="https://images.s3.amazonaws.com")

    ack = store.put("images", "products/1/x-photo.png", b"12345", "image/png")

    assert ack == "abc123"
    kwargs = client.put_object.call_args.kwargs
    assert kwargs["bucket_name"] == "images"
    assert kwargs["object_name"] == "products/1/x-photo.png"
    assert kwargs["length"] == 5
    assert kwargs["data"].read() == b"12345"
    assert kwargs["content_type"] == "image/png"


def test_url_for_joins_base_and_key():
    store = ObjectStore(MagicMock(), bucket="images", public_url="https://cdn.example.com/")

    assert store.url_for("products/1/a.png") == "https://cdn.example.com/products/1/a.png"


def test_build_object_store_uses_settings(monkeypatch):
    monkeypatch.setattr(storage.settings, "S3_BUCKET", "catalog-images")
    monkeypatch.setattr(storage.settings, "S3_TIMEOUT", None)
    monkeypatch.delenv("S3_PUBLIC_URL", raising=False)

    store = storage.build_object_store()

    assert isinstance(store.client, Minio)
    assert store.bucket == "catalog-images"
    assert store.url_for("k") == "https://catalog-images.s3.amazonaws.com/k"


def test_timeout_builds_dedicated_http_client():
    assert storage._http_client(None) is None
    assert storage._http_client(5.0) is not None


def test_explicit_keys_use_static_credentials():
    assert storage._credentials("AKIA", "secret") is None


def test_missing_keys_fall_back_to_aws_chain():
    provider = storage._credentials(None, None)

    assert isinstance(provider, ChainedProvider)
