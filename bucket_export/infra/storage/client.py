"""Storage client protocol and data types.

This module defines the abstract interface for object storage operations used
by the exporter: bucket management, object listing, reads, writes and deletes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class StorageError(RuntimeError):
    """Raised when object storage operations fail."""


class StorageConstructionError(StorageError):
    """Raised when a client cannot be built, e.g. for a malformed endpoint."""


class StorageTransportError(StorageError):
    """Raised when a request fails on the wire or is rejected by the service."""


class StorageNotFoundError(StorageError):
    """Raised when the requested bucket or object does not exist."""


class StorageIOError(StorageError):
    """Raised when a local file involved in a storage operation is unreadable."""


@dataclass(frozen=True, slots=True)
class BucketRecord:
    """A bucket as reported by a listing."""

    bucket_name: str


@dataclass(frozen=True, slots=True)
class ObjectRecord:
    """An object key as reported by a listing."""

    object_name: str


@dataclass(frozen=True, slots=True)
class ObjectHead:
    """Metadata from a HEAD object request."""

    size_bytes: int
    etag: str | None
    content_type: str | None


class StorageClient(Protocol):
    """Protocol defining the interface for object storage backends.

    Every method is a blocking request/response round trip. Failures are
    reported as ``StorageError`` subclasses with the underlying cause chained.
    """

    def create_bucket(self, *, bucket: str) -> None:
        """Create a bucket.

        Raises:
            StorageError: If the bucket exists or the name is invalid.
        """
        ...

    def delete_bucket(self, *, bucket: str) -> None:
        """Delete an empty bucket.

        Raises:
            StorageNotFoundError: If the bucket does not exist.
            StorageTransportError: If the bucket is not empty.
        """
        ...

    def list_buckets(self) -> list[BucketRecord]:
        """List all buckets in the order the service returns them."""
        ...

    def list_objects(self, *, bucket: str) -> list[ObjectRecord]:
        """List every object key in a bucket.

        Returns:
            Object records, empty when the bucket holds no objects.

        Raises:
            StorageNotFoundError: If the bucket does not exist.
        """
        ...

    def put_object(self, *, bucket: str, object_key: str, data: bytes) -> None:
        """Store ``data`` under ``object_key``, replacing any existing object."""
        ...

    def get_object(self, *, bucket: str, object_key: str) -> bytes:
        """Fetch the full payload of an object into memory.

        Raises:
            StorageNotFoundError: If the bucket or object does not exist.
        """
        ...

    def get_object_hex(self, *, bucket: str, object_key: str) -> str:
        """Fetch an object and return its payload as lowercase hex."""
        ...

    def head_object(self, *, bucket: str, object_key: str) -> ObjectHead:
        """Get object metadata without downloading the content."""
        ...

    def delete_object(self, *, bucket: str, object_key: str) -> None:
        """Delete an object.

        Raises:
            StorageNotFoundError: If the object does not exist.
        """
        ...

    def upload_file(self, *, bucket: str, object_key: str, file_path: str) -> None:
        """Upload the contents of a local file.

        Raises:
            StorageIOError: If the local file cannot be read.
        """
        ...
