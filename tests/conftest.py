"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from botocore.exceptions import ClientError
from PIL import Image

from ghost_r2_storage.core.config import Settings
from ghost_r2_storage.storage import R2ObjectStore, R2StorageAdapter, UploadRequest

REQUIRED_ENV = {
    "GHOST_STORAGE_ADAPTER_R2_DOMAIN": "https://cdn.example.com",
    "GHOST_STORAGE_ADAPTER_R2_BUCKET": "b",
    "GHOST_STORAGE_ADAPTER_R2_ACCOUNT_ID": "acc",
    "GHOST_STORAGE_ADAPTER_R2_ACCESS_KEY_ID": "test_key",
    "GHOST_STORAGE_ADAPTER_R2_SECRET_ACCESS_KEY": "test_secret",
}


def client_error(status: int, code: str, operation: str = "HeadObject") -> ClientError:
    """Build a botocore ClientError like the S3 client raises."""
    return ClientError(
        {
            "Error": {"Code": code, "Message": f"{code} error"},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


class FakeS3Client:
    """In-memory stand-in for an aioboto3 S3 client."""

    def __init__(self) -> None:
        self.objects: dict[str, dict[str, Any]] = {}
        self.head_calls: list[str] = []
        self.put_calls: list[str] = []
        self.head_error: ClientError | None = None
        self.head_status = 200
        self.fail_put: Callable[[str], bool] | None = None

    async def __aenter__(self) -> FakeS3Client:
        return self

    async def __aexit__(self, *exc_info: object) -> bool:
        return False

    async def head_object(self, *, Bucket: str, Key: str) -> dict[str, Any]:  # noqa: N803
        self.head_calls.append(Key)
        if self.head_error is not None:
            raise self.head_error
        if Key not in self.objects:
            raise client_error(404, "404")
        return {
            "ResponseMetadata": {"HTTPStatusCode": self.head_status},
            "ContentLength": len(self.objects[Key]["Body"]),
        }

    async def put_object(
        self, *, Bucket: str, Key: str, **kwargs: Any  # noqa: N803
    ) -> dict[str, Any]:
        self.put_calls.append(Key)
        if self.fail_put is not None and self.fail_put(Key):
            raise client_error(500, "InternalError", "PutObject")
        self.objects[Key] = {"Bucket": Bucket, **kwargs}
        return {"ResponseMetadata": {"HTTPStatusCode": 200}}


def make_settings(**overrides: Any) -> Settings:
    """Create settings without reading the environment file."""
    values: dict[str, Any] = {
        "domain": "https://cdn.example.com",
        "bucket": "b",
        "account_id": "acc",
        "access_key_id": "test_key",
        "secret_access_key": "test_secret",
        "responsive_images": False,
        "uuid_name": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def jpeg_bytes(width: int = 1200, height: int = 800) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 80, 40)).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def settings() -> Settings:
    """Provide test settings."""
    return make_settings()


@pytest.fixture
def fake_s3() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def make_store(
    fake_s3: FakeS3Client,
    monkeypatch: pytest.MonkeyPatch,
) -> Callable[[Settings], R2ObjectStore]:
    """Create object stores backed by the fake client."""

    def _make(store_settings: Settings) -> R2ObjectStore:
        store = R2ObjectStore(store_settings)
        monkeypatch.setattr(store, "_get_client", lambda: fake_s3)
        return store

    return _make


@pytest.fixture
def store(settings: Settings, make_store: Callable[[Settings], R2ObjectStore]) -> R2ObjectStore:
    return make_store(settings)


@pytest.fixture
def make_adapter(
    make_store: Callable[[Settings], R2ObjectStore],
) -> Callable[..., R2StorageAdapter]:
    """Create adapters with injected settings and the fake store."""

    def _make(config: dict[str, Any] | None = None, **overrides: Any) -> R2StorageAdapter:
        adapter_settings = make_settings(**overrides)
        return R2StorageAdapter(
            config,
            settings=adapter_settings,
            store=make_store(adapter_settings),
        )

    return _make


@pytest.fixture
def upload(tmp_path: Path) -> UploadRequest:
    """A plain (unprocessed) JPEG upload."""
    path = tmp_path / "f.jpg"
    path.write_bytes(jpeg_bytes())
    return UploadRequest(path=str(path), name="cat.jpg", ext=".jpg", type="image/jpeg")


@pytest.fixture
def processed_upload(tmp_path: Path) -> UploadRequest:
    """A JPEG upload that went through the host's image pipeline."""
    path = tmp_path / "f.jpg_processed"
    path.write_bytes(jpeg_bytes())
    return UploadRequest(path=str(path), name="cat.jpg", ext=".jpg", type="image/jpeg")
