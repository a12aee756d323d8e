from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, write_to_textfile


class ExportMetrics:
    """Per-run export counters kept in their own registry.

    A CLI run is short-lived, so the registry is dumped to a node-exporter
    textfile at the end instead of being scraped.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        # labelled by bucket only; object keys would explode cardinality
        self.objects = Counter(
            "bucket_export_objects_total",
            "Objects processed by the exporter",
            ["bucket", "outcome"],
            registry=self.registry,
        )
        self.bytes_written = Counter(
            "bucket_export_bytes_written_total",
            "Bytes written to the export destination",
            ["bucket"],
            registry=self.registry,
        )

    def record_exported(self, bucket: str, size: int) -> None:
        self.objects.labels(bucket=bucket, outcome="exported").inc()
        self.bytes_written.labels(bucket=bucket).inc(size)

    def record_failed(self, bucket: str) -> None:
        self.objects.labels(bucket=bucket, outcome="failed").inc()

    def record_skipped(self, bucket: str) -> None:
        self.objects.labels(bucket=bucket, outcome="skipped").inc()

    def write(self, path: str) -> None:
        write_to_textfile(path, self.registry)
