"""Command line entry point: export every bucket to a local directory.

Usage:
  bucket-export -p /srv/minio-export
  python -m bucket_export.main --path /srv/minio-export --workers 4
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from bucket_export.app.services.export_service import ExportService
from bucket_export.common.config import Settings, get_settings
from bucket_export.common.logging import setup_logging
from bucket_export.infra.observability.metrics import ExportMetrics
from bucket_export.infra.storage.client import StorageClient, StorageError
from bucket_export.infra.storage.s3_client import S3StorageClient


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Export all buckets of an S3-compatible store to a directory."
    )
    parser.add_argument(
        "-p",
        "--path",
        required=True,
        help="Path to the export location",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=settings.EXPORT_WORKERS,
        help="Objects fetched in parallel within a bucket (default: %(default)s)",
    )
    parser.add_argument(
        "--isolate-failures",
        action="store_true",
        default=settings.EXPORT_ISOLATE_FAILURES,
        help="Skip buckets/objects whose listing or fetch fails instead of aborting",
    )
    return parser


def build_storage_client(settings: Settings) -> StorageClient:
    return S3StorageClient(settings=settings)


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)
    setup_logging()
    startup_logger = logging.getLogger("bucket_export.startup")
    logger = logging.getLogger("bucket_export.export")

    if args.workers < 1:
        startup_logger.error("--workers must be at least 1, got %s", args.workers)
        return 2

    startup_logger.info(
        "Exporting data to %s from %s", args.path, settings.endpoint_url
    )
    metrics = ExportMetrics()
    try:
        storage = build_storage_client(settings)
        service = ExportService(
            storage,
            workers=args.workers,
            isolate_failures=args.isolate_failures,
            metrics=metrics,
        )
        service.export_all(args.path)
    except (StorageError, OSError) as exc:
        logger.exception(
            "export_aborted root=%s error=%s",
            args.path,
            exc,
            extra={"extra": {"root": args.path, "error": str(exc)}},
        )
        return 1
    finally:
        if settings.EXPORT_METRICS_FILE:
            metrics.write(settings.EXPORT_METRICS_FILE)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
