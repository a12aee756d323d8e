"""Export service mirroring every bucket of an object store onto local disk.

Each object ``key`` in bucket ``bucket`` is written to
``<root><sep><bucket><sep><key>``. Separators inside the key become nested
directories; nothing is normalized or escaped.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from bucket_export.app.services.base import BaseService
from bucket_export.infra.observability.metrics import ExportMetrics
from bucket_export.infra.storage.client import StorageClient, StorageError

logger = logging.getLogger("bucket_export.export")

OUTCOME_EXPORTED = "exported"
OUTCOME_FAILED = "failed"
OUTCOME_SKIPPED = "skipped"


def bucket_directory(root: str, bucket_name: str) -> str:
    return f"{root}{os.sep}{bucket_name}"


def build_export_path(root: str, bucket_name: str, object_name: str) -> str:
    """Join root, bucket and key with the platform separator, verbatim."""
    return f"{bucket_directory(root, bucket_name)}{os.sep}{object_name}"


@dataclass
class ExportSummary:
    """Tally of one export run."""

    buckets: int = 0
    skipped_buckets: int = 0
    exported: int = 0
    failed: int = 0
    skipped: int = 0
    bytes_written: int = 0

    def add(self, outcome: str, size: int = 0) -> None:
        if outcome == OUTCOME_EXPORTED:
            self.exported += 1
            self.bytes_written += size
        elif outcome == OUTCOME_FAILED:
            self.failed += 1
        elif outcome == OUTCOME_SKIPPED:
            self.skipped += 1
        else:
            raise ValueError(f"unknown export outcome: {outcome}")


class ExportService(BaseService):
    """Walks buckets then objects and writes each object under a root directory.

    By default the walk is strictly sequential and any listing or fetch
    failure aborts the run; only local write failures are logged and
    skipped. ``isolate_failures`` turns listing and fetch failures into
    per-bucket / per-object skips. ``workers`` > 1 fans the objects of one
    bucket out over a thread pool, each task still doing its own
    mkdir, fetch and write in that order.
    """

    def __init__(
        self,
        storage: StorageClient,
        *,
        workers: int = 1,
        isolate_failures: bool = False,
        metrics: ExportMetrics | None = None,
    ) -> None:
        super().__init__(storage)
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self._workers = workers
        self._isolate_failures = isolate_failures
        self._metrics = metrics or ExportMetrics()

    @property
    def metrics(self) -> ExportMetrics:
        return self._metrics

    def export_all(self, root: str) -> ExportSummary:
        """Export every object of every bucket under ``root``.

        Raises:
            StorageError: If listing buckets fails, or listing objects or
                fetching an object fails while failures are not isolated.
            OSError: If a destination directory cannot be created.
        """
        logger.info(
            "export_started root=%s workers=%s isolate_failures=%s",
            root,
            self._workers,
            self._isolate_failures,
            extra={
                "extra": {
                    "root": root,
                    "workers": self._workers,
                    "isolate_failures": self._isolate_failures,
                }
            },
        )
        summary = ExportSummary()
        for bucket in self._storage.list_buckets():
            summary.buckets += 1
            self.export_bucket(root, bucket.bucket_name, summary=summary)

        logger.info(
            "export_finished root=%s buckets=%s exported=%s failed=%s skipped=%s "
            "skipped_buckets=%s bytes_written=%s",
            root,
            summary.buckets,
            summary.exported,
            summary.failed,
            summary.skipped,
            summary.skipped_buckets,
            summary.bytes_written,
            extra={"extra": {"root": root, **vars(summary)}},
        )
        return summary

    def export_bucket(
        self,
        root: str,
        bucket_name: str,
        *,
        summary: ExportSummary | None = None,
    ) -> ExportSummary:
        """Export all objects of a single bucket under ``root``."""
        if summary is None:
            summary = ExportSummary()
        directory = bucket_directory(root, bucket_name)
        logger.info(
            "export_bucket bucket=%s path=%s",
            bucket_name,
            directory,
            extra={"extra": {"bucket": bucket_name, "path": directory}},
        )

        try:
            objects = self._storage.list_objects(bucket=bucket_name)
        except StorageError as exc:
            if not self._isolate_failures:
                raise
            logger.error(
                "export_bucket_skipped bucket=%s error=%s",
                bucket_name,
                exc,
                extra={"extra": {"bucket": bucket_name, "error": str(exc)}},
            )
            summary.skipped_buckets += 1
            return summary

        if self._workers == 1:
            for item in objects:
                outcome, size = self._export_object(
                    directory, bucket_name, item.object_name
                )
                summary.add(outcome, size)
            return summary

        with ThreadPoolExecutor(
            max_workers=self._workers, thread_name_prefix="export"
        ) as executor:
            futures = [
                executor.submit(
                    self._export_object, directory, bucket_name, item.object_name
                )
                for item in objects
            ]
            try:
                for future in as_completed(futures):
                    summary.add(*future.result())
            except BaseException:
                for future in futures:
                    future.cancel()
                raise
        return summary

    def _export_object(
        self, directory: str, bucket_name: str, object_name: str
    ) -> tuple[str, int]:
        path = f"{directory}{os.sep}{object_name}"
        os.makedirs(os.path.dirname(path), exist_ok=True)
        context = {"bucket": bucket_name, "object": object_name, "path": path}
        logger.info(
            "export_object bucket=%s object=%s path=%s",
            bucket_name,
            object_name,
            path,
            extra={"extra": context},
        )

        try:
            data = self._storage.get_object(bucket=bucket_name, object_key=object_name)
        except StorageError as exc:
            if not self._isolate_failures:
                raise
            logger.error(
                "export_object_skipped bucket=%s object=%s path=%s error=%s",
                bucket_name,
                object_name,
                path,
                exc,
                extra={"extra": {**context, "error": str(exc)}},
            )
            self._metrics.record_skipped(bucket_name)
            return OUTCOME_SKIPPED, 0

        try:
            with open(path, "wb") as fp:
                fp.write(data)
        except OSError as exc:
            logger.error(
                "export_object_failed bucket=%s object=%s path=%s error=%s",
                bucket_name,
                object_name,
                path,
                exc,
                extra={"extra": {**context, "error": str(exc)}},
            )
            self._metrics.record_failed(bucket_name)
            return OUTCOME_FAILED, 0

        logger.info(
            "export_object_succeeded bucket=%s object=%s path=%s size=%s",
            bucket_name,
            object_name,
            path,
            len(data),
            extra={"extra": {**context, "size": len(data)}},
        )
        self._metrics.record_exported(bucket_name, len(data))
        return OUTCOME_EXPORTED, len(data)
