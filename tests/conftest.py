from __future__ import annotations

import pytest

from bucket_export.common.config import Settings, get_settings
from tests.services.mock_storage import MockStorageClient

ENV_KEYS = (
    "MINIO_HOST",
    "MINIO_PORT",
    "MINIO_ACCESS_KEY",
    "MINIO_SECRET_KEY",
    "MINIO_REGION",
    "EXPORT_WORKERS",
    "EXPORT_ISOLATE_FAILURES",
    "EXPORT_METRICS_FILE",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep the host environment and any stray .env out of Settings."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(
        "bucket_export.common.config.ENV_FILE", tmp_path / "missing.env"
    )
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        MINIO_HOST="localhost",
        MINIO_PORT="9000",
        MINIO_ACCESS_KEY="test-key",
        MINIO_SECRET_KEY="test-secret",
    )


@pytest.fixture()
def mock_storage() -> MockStorageClient:
    return MockStorageClient()
