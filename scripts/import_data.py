#!/usr/bin/env python3
"""Upload a directory tree produced by bucket-export back into the object store.

Usage:
  .venv/bin/python scripts/import_data.py --path /srv/minio-export

Every first-level directory under --path is treated as a bucket (created when
missing); every file beneath it becomes an object whose key is the file's path
relative to the bucket directory, using "/" separators.
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from bucket_export.common.config import get_settings
from bucket_export.common.logging import setup_logging
from bucket_export.infra.storage.client import StorageClient
from bucket_export.infra.storage.s3_client import S3StorageClient

logger = logging.getLogger("bucket_export.import")


def import_tree(storage: StorageClient, root: Path) -> int:
    existing = {bucket.bucket_name for bucket in storage.list_buckets()}
    uploaded = 0
    for bucket_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        bucket = bucket_dir.name
        if bucket not in existing:
            storage.create_bucket(bucket=bucket)
            existing.add(bucket)
            logger.info("import_bucket_created bucket=%s", bucket)
        for dirpath, _dirnames, filenames in os.walk(bucket_dir):
            for filename in sorted(filenames):
                file_path = Path(dirpath) / filename
                object_key = file_path.relative_to(bucket_dir).as_posix()
                storage.upload_file(
                    bucket=bucket, object_key=object_key, file_path=str(file_path)
                )
                uploaded += 1
                logger.info(
                    "import_object bucket=%s object=%s path=%s",
                    bucket,
                    object_key,
                    file_path,
                )
    return uploaded


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Upload an exported directory tree into the object store."
    )
    parser.add_argument(
        "-p",
        "--path",
        type=Path,
        required=True,
        help="Directory whose subdirectories are buckets",
    )
    args = parser.parse_args()
    setup_logging()
    storage = S3StorageClient(settings=get_settings())
    count = import_tree(storage, args.path.resolve())
    print(f"Uploaded {count} objects from {args.path}")


if __name__ == "__main__":
    main()
