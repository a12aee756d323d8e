"""Object storage abstraction layer.

This module provides a protocol-based abstraction for object storage backends,
with an implementation for MinIO and other S3-compatible services.
"""

from .client import (
    BucketRecord,
    ObjectHead,
    ObjectRecord,
    StorageClient,
    StorageConstructionError,
    StorageError,
    StorageIOError,
    StorageNotFoundError,
    StorageTransportError,
)

__all__ = [
    "BucketRecord",
    "ObjectHead",
    "ObjectRecord",
    "StorageClient",
    "StorageConstructionError",
    "StorageError",
    "StorageIOError",
    "StorageNotFoundError",
    "StorageTransportError",
]
