"""S3-compatible storage client implementation.

This module provides an S3-compatible storage client that works with
MinIO, AWS S3 and other S3-compatible object storage services reachable
over plain HTTP.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from bucket_export.infra.storage.client import (
    BucketRecord,
    ObjectHead,
    ObjectRecord,
    StorageConstructionError,
    StorageError,
    StorageIOError,
    StorageNotFoundError,
    StorageTransportError,
)

if TYPE_CHECKING:
    from bucket_export.common.config import Settings

# botocore ClientError codes that mean the bucket or key is absent
NOT_FOUND_CODES = frozenset({"NoSuchBucket", "NoSuchKey", "NotFound", "404"})


def _resolve_endpoint_url(settings: "Settings") -> str:
    """Return ``http://<host>:<port>`` or raise if it cannot be parsed."""
    endpoint_url = settings.endpoint_url
    try:
        parsed = urlsplit(endpoint_url)
        port = parsed.port
    except ValueError as exc:
        raise StorageConstructionError(
            f"Malformed storage endpoint {endpoint_url!r}: {exc}"
        ) from exc
    if not parsed.hostname or port is None:
        raise StorageConstructionError(
            f"Malformed storage endpoint {endpoint_url!r}: host and port are required"
        )
    return endpoint_url


def _translate_error(message: str, exc: Exception) -> StorageError:
    response = getattr(exc, "response", None)
    if isinstance(response, dict):
        code = str(response.get("Error", {}).get("Code", ""))
        if code in NOT_FOUND_CODES:
            return StorageNotFoundError(f"{message}: {exc}")
    return StorageTransportError(f"{message}: {exc}")


class S3StorageClient:
    """S3-compatible object storage client.

    Bound to a single plain-HTTP endpoint, a fixed region and a static
    access/secret key pair. Uses boto3 for all storage operations; the
    instance holds no mutable state after construction and may be shared
    across threads.
    """

    def __init__(self, *, settings: "Settings") -> None:
        """Initialize the S3 client with configuration from settings.

        Args:
            settings: Application settings containing the endpoint and credentials.

        Raises:
            StorageConstructionError: If the endpoint is malformed or boto3 is
                not installed.
        """
        self._settings = settings
        self._endpoint_url = _resolve_endpoint_url(settings)
        self._client = self._build_client(settings, self._endpoint_url)

    @property
    def endpoint_url(self) -> str:
        return self._endpoint_url

    @staticmethod
    def _build_client(settings: "Settings", endpoint_url: str) -> Any:
        """Create a boto3 S3 client from settings."""
        try:
            import boto3
            from botocore.config import Config
        except ImportError as exc:
            raise StorageConstructionError(
                "boto3 and botocore are required for the S3 storage backend. "
                "Install with: pip install boto3"
            ) from exc

        config = Config(s3={"addressing_style": "path"})

        try:
            return boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                region_name=settings.MINIO_REGION,
                aws_access_key_id=settings.MINIO_ACCESS_KEY,
                aws_secret_access_key=settings.MINIO_SECRET_KEY,
                use_ssl=False,
                config=config,
            )
        except ValueError as exc:
            raise StorageConstructionError(
                f"Malformed storage endpoint {endpoint_url!r}: {exc}"
            ) from exc

    def create_bucket(self, *, bucket: str) -> None:
        """Create a bucket."""
        try:
            self._client.create_bucket(Bucket=bucket)
        except Exception as exc:
            raise _translate_error(f"Failed to create bucket {bucket}", exc) from exc

    def delete_bucket(self, *, bucket: str) -> None:
        """Delete an empty bucket."""
        try:
            self._client.delete_bucket(Bucket=bucket)
        except Exception as exc:
            raise _translate_error(f"Failed to delete bucket {bucket}", exc) from exc

    def list_buckets(self) -> list[BucketRecord]:
        """List all buckets in service order."""
        try:
            response = self._client.list_buckets()
        except Exception as exc:
            raise _translate_error("Failed to list buckets", exc) from exc

        return [
            BucketRecord(bucket_name=str(item["Name"]))
            for item in response.get("Buckets") or []
        ]

    def list_objects(self, *, bucket: str) -> list[ObjectRecord]:
        """List every object key in a bucket, following continuation pages."""
        records: list[ObjectRecord] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=bucket):
                for item in page.get("Contents") or []:
                    records.append(ObjectRecord(object_name=str(item["Key"])))
        except Exception as exc:
            raise _translate_error(
                f"Failed to list objects in bucket {bucket}", exc
            ) from exc
        return records

    def put_object(self, *, bucket: str, object_key: str, data: bytes) -> None:
        """Store bytes under a key, overwriting any existing object."""
        try:
            self._client.put_object(Bucket=bucket, Key=object_key, Body=bytes(data))
        except Exception as exc:
            raise _translate_error(
                f"Failed to put object {bucket}/{object_key}", exc
            ) from exc

    def get_object(self, *, bucket: str, object_key: str) -> bytes:
        """Fetch the whole object payload into memory."""
        try:
            response = self._client.get_object(Bucket=bucket, Key=object_key)
            body = response["Body"]
            try:
                return body.read()
            finally:
                body.close()
        except Exception as exc:
            raise _translate_error(
                f"Failed to get object {bucket}/{object_key}", exc
            ) from exc

    def get_object_hex(self, *, bucket: str, object_key: str) -> str:
        """Fetch an object and hex-encode its payload."""
        return self.get_object(bucket=bucket, object_key=object_key).hex()

    def head_object(self, *, bucket: str, object_key: str) -> ObjectHead:
        """Get object metadata without downloading the content."""
        try:
            response = self._client.head_object(Bucket=bucket, Key=object_key)
        except Exception as exc:
            raise _translate_error(
                f"Failed to get object metadata {bucket}/{object_key}", exc
            ) from exc

        size = response.get("ContentLength")
        return ObjectHead(
            size_bytes=int(size) if size is not None else 0,
            etag=response.get("ETag"),
            content_type=response.get("ContentType"),
        )

    def delete_object(self, *, bucket: str, object_key: str) -> None:
        """Delete an object, failing if it does not exist."""
        # S3 reports success for deletes of absent keys
        self.head_object(bucket=bucket, object_key=object_key)
        try:
            self._client.delete_object(Bucket=bucket, Key=object_key)
        except Exception as exc:
            raise _translate_error(
                f"Failed to delete object {bucket}/{object_key}", exc
            ) from exc

    def upload_file(self, *, bucket: str, object_key: str, file_path: str) -> None:
        """Upload a local file as the object body."""
        try:
            fp = open(file_path, "rb")
        except OSError as exc:
            raise StorageIOError(f"Failed to read {file_path}: {exc}") from exc

        with fp:
            try:
                self._client.put_object(Bucket=bucket, Key=object_key, Body=fp)
            except Exception as exc:
                raise _translate_error(
                    f"Failed to upload {file_path} to {bucket}/{object_key}", exc
                ) from exc
