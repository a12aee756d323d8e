from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ENV_FILE = Path(".env")


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


def _as_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    MINIO_HOST: str = "localhost"
    MINIO_PORT: str = "9000"
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_REGION: str = "us-east-1"
    EXPORT_WORKERS: int = 1
    EXPORT_ISOLATE_FAILURES: bool = False
    EXPORT_METRICS_FILE: str | None = None

    def __post_init__(self) -> None:
        if self.EXPORT_WORKERS < 1:
            raise ValueError("EXPORT_WORKERS must be at least 1.")

    @property
    def endpoint_url(self) -> str:
        return f"http://{self.MINIO_HOST}:{self.MINIO_PORT}"

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file()
        return cls(
            MINIO_HOST=os.environ.get("MINIO_HOST", cls.MINIO_HOST),
            MINIO_PORT=os.environ.get("MINIO_PORT", cls.MINIO_PORT),
            MINIO_ACCESS_KEY=os.environ.get("MINIO_ACCESS_KEY", cls.MINIO_ACCESS_KEY),
            MINIO_SECRET_KEY=os.environ.get("MINIO_SECRET_KEY", cls.MINIO_SECRET_KEY),
            MINIO_REGION=os.environ.get("MINIO_REGION", cls.MINIO_REGION),
            EXPORT_WORKERS=int(os.environ.get("EXPORT_WORKERS", cls.EXPORT_WORKERS)),
            EXPORT_ISOLATE_FAILURES=_as_bool(
                os.environ.get("EXPORT_ISOLATE_FAILURES"), cls.EXPORT_ISOLATE_FAILURES
            ),
            EXPORT_METRICS_FILE=_as_optional(os.environ.get("EXPORT_METRICS_FILE")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
