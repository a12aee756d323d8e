from __future__ import annotations

from bucket_export.infra.storage.client import StorageClient


class BaseService:
    """Provides the storage handle shared by application services."""

    def __init__(self, storage: StorageClient):
        self._storage = storage

    @property
    def storage(self) -> StorageClient:
        return self._storage
