from .base import BaseService
from .export_service import (
    ExportService,
    ExportSummary,
    build_export_path,
    bucket_directory,
)

__all__ = [
    "BaseService",
    "ExportService",
    "ExportSummary",
    "build_export_path",
    "bucket_directory",
]
