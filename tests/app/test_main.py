"""Tests for the bucket-export command line entry point."""

from __future__ import annotations

import pytest

from bucket_export import main as cli
from bucket_export.infra.storage.client import StorageConstructionError


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda: None)


@pytest.fixture()
def patched_storage(monkeypatch, mock_storage):
    monkeypatch.setattr(cli, "build_storage_client", lambda settings: mock_storage)
    return mock_storage


class TestMain:
    def test_requires_path(self, capsys):
        with pytest.raises(SystemExit) as info:
            cli.main([])
        assert info.value.code == 2
        assert "--path" in capsys.readouterr().err

    def test_exports_and_returns_zero(self, patched_storage, tmp_path):
        patched_storage.add_object("photos", "img1.jpg", b"\xff\xd8")
        patched_storage.buckets["empty-bucket"] = {}

        assert cli.main(["-p", str(tmp_path)]) == 0
        assert (tmp_path / "photos" / "img1.jpg").read_bytes() == b"\xff\xd8"
        assert not (tmp_path / "empty-bucket").exists()

    def test_long_path_flag(self, patched_storage, tmp_path):
        patched_storage.add_object("photos", "img1.jpg", b"x")

        assert cli.main(["--path", str(tmp_path)]) == 0
        assert (tmp_path / "photos" / "img1.jpg").exists()

    def test_write_failures_still_return_zero(self, patched_storage, tmp_path):
        patched_storage.add_object("bkt", "folder/", b"")

        assert cli.main(["-p", str(tmp_path)]) == 0

    def test_fetch_failure_returns_one(self, patched_storage, tmp_path):
        patched_storage.add_object("bkt", "corrupt.bin", b"x")
        patched_storage.failing_gets.add(("bkt", "corrupt.bin"))

        assert cli.main(["-p", str(tmp_path)]) == 1

    def test_isolate_failures_flag(self, patched_storage, tmp_path):
        patched_storage.add_object("bkt", "corrupt.bin", b"x")
        patched_storage.add_object("bkt", "fine.bin", b"y")
        patched_storage.failing_gets.add(("bkt", "corrupt.bin"))

        assert cli.main(["-p", str(tmp_path), "--isolate-failures"]) == 0
        assert (tmp_path / "bkt" / "fine.bin").read_bytes() == b"y"

    def test_isolate_failures_from_environment(self, patched_storage, tmp_path, monkeypatch):
        monkeypatch.setenv("EXPORT_ISOLATE_FAILURES", "true")
        patched_storage.add_object("bkt", "corrupt.bin", b"x")
        patched_storage.failing_gets.add(("bkt", "corrupt.bin"))

        assert cli.main(["-p", str(tmp_path)]) == 0

    def test_construction_failure_returns_one(self, monkeypatch, tmp_path):
        def broken(settings):
            raise StorageConstructionError("Malformed storage endpoint 'http://:9000'")

        monkeypatch.setattr(cli, "build_storage_client", broken)

        assert cli.main(["-p", str(tmp_path)]) == 1

    def test_malformed_endpoint_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MINIO_PORT", "not-a-port")

        assert cli.main(["-p", str(tmp_path)]) == 1

    def test_rejects_zero_workers(self, patched_storage, tmp_path):
        assert cli.main(["-p", str(tmp_path), "--workers", "0"]) == 2

    def test_writes_metrics_textfile(self, patched_storage, tmp_path, monkeypatch):
        metrics_file = tmp_path / "export.prom"
        monkeypatch.setenv("EXPORT_METRICS_FILE", str(metrics_file))
        patched_storage.add_object("photos", "img1.jpg", b"\xff\xd8")

        assert cli.main(["-p", str(tmp_path / "out")]) == 0

        text = metrics_file.read_text()
        assert 'bucket_export_objects_total{bucket="photos",outcome="exported"} 1.0' in text

    def test_writes_metrics_after_fatal_error(self, patched_storage, tmp_path, monkeypatch):
        metrics_file = tmp_path / "export.prom"
        monkeypatch.setenv("EXPORT_METRICS_FILE", str(metrics_file))
        patched_storage.failing_lists.add("bkt")
        patched_storage.buckets["bkt"] = {}

        assert cli.main(["-p", str(tmp_path / "out")]) == 1
        assert metrics_file.exists()


def test_default_storage_client_is_s3(settings):
    from unittest.mock import MagicMock, patch

    from bucket_export.infra.storage.s3_client import S3StorageClient

    with patch.object(S3StorageClient, "_build_client", return_value=MagicMock()):
        client = cli.build_storage_client(settings)

    assert isinstance(client, S3StorageClient)
    assert client.endpoint_url == "http://localhost:9000"
