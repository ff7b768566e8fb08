import io
from types import SimpleNamespace

import pytest

from storefront.core import config
from storefront.services import storage


@pytest.fixture(autouse=True)
def _storage_config(monkeypatch):
    monkeypatch.setattr(config, "STORAGE_PUBLIC_BASE_URL", "https://cdn.example.com")
    monkeypatch.setattr(config, "STORAGE_BUCKET", "project-images")
    monkeypatch.setattr(config, "STORAGE_ACCESS_KEY_ID", "")
    monkeypatch.setattr(config, "STORAGE_SECRET_ACCESS_KEY", "")


class _FakeS3Client:
    def __init__(self):
        self.calls = []

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        self.calls.append((operation, Params, ExpiresIn))
        return f"https://signed.example.com/{Params['Bucket']}/{Params['Key']}?X-Amz-Signature=abc"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, None),
        ("   ", None),
        ("https://images.example.org/a.png", "https://images.example.org/a.png"),
        ("//images.example.org/a.png", "//images.example.org/a.png"),
        (
            "/storage/v1/object/public/project-images/logo.png",
            "https://cdn.example.com/storage/v1/object/public/project-images/logo.png",
        ),
        ("products/scarf.jpg", "https://cdn.example.com/storage/v1/object/public/project-images/products/scarf.jpg"),
        ("/products/scarf.jpg", "https://cdn.example.com/storage/v1/object/public/project-images/products/scarf.jpg"),
    ],
)
def test_resolve_public_url(value, expected):
    assert storage.resolve_public_url(value) == expected


def test_resolve_public_url_uses_given_bucket():
    assert storage.resolve_public_url("a.png", "logos") == (
        "https://cdn.example.com/storage/v1/object/public/logos/a.png"
    )


def test_object_key_from_public_url_and_bare_path():
    public = "https://cdn.example.com/storage/v1/object/public/project-images/products/scarf.jpg"

    assert storage.object_key_from_value(public) == "products/scarf.jpg"
    assert storage.object_key_from_value("/products/scarf.jpg") == "products/scarf.jpg"
    assert storage.object_key_from_value("https://elsewhere.example.org/x.png") is None


def test_signed_url_passes_external_urls_through():
    assert storage.get_signed_url("https://elsewhere.example.org/x.png") == "https://elsewhere.example.org/x.png"


def test_signed_url_is_none_without_credentials():
    assert storage.get_signed_url("products/scarf.jpg") is None


def test_signed_url_from_storage_client(monkeypatch):
    client = _FakeS3Client()
    monkeypatch.setattr(storage, "_get_storage_client", lambda: client)
    monkeypatch.setattr(config, "SIGNED_URL_TTL_SECONDS", 60)

    url = storage.get_signed_url("https://cdn.example.com/storage/v1/object/public/project-images/products/scarf.jpg")

    assert url.startswith("https://signed.example.com/project-images/products/scarf.jpg")
    assert client.calls == [("get_object", {"Bucket": "project-images", "Key": "products/scarf.jpg"}, 60)]


def test_upload_file_returns_public_url(monkeypatch):
    uploads = []

    class _UploadClient:
        def upload_fileobj(self, fileobj, bucket, key, ExtraArgs):
            uploads.append((bucket, key, ExtraArgs, fileobj.read()))

    monkeypatch.setattr(storage, "_get_storage_client", lambda: _UploadClient())

    upload = SimpleNamespace(filename="logo.png", content_type="image/png", file=io.BytesIO(b"png-bytes"))
    url = storage.upload_file(upload, folder="logos")

    bucket, key, extra_args, body = uploads[0]
    assert bucket == "project-images"
    assert key.startswith("logos/") and key.endswith(".png")
    assert extra_args == {"ContentType": "image/png"}
    assert body == b"png-bytes"
    assert url == f"https://cdn.example.com/storage/v1/object/public/project-images/{key}"
