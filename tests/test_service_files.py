"""Tests for ftprelay.services.files module."""

from __future__ import annotations

import ftplib
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from ftprelay.core.exceptions import RemoteOperationError, ValidationError
from ftprelay.core.session import TransferSession
from ftprelay.services.files import RemoteFileService

if TYPE_CHECKING:
    from conftest import FakeFTPServer


@pytest.fixture
def service(session: TransferSession) -> RemoteFileService:
    return RemoteFileService(session, base_path="/uploads")


# =============================================================================
# List / Download / Delete
# =============================================================================


class TestList:
    """Tests for RemoteFileService.list."""

    def test_sorted_by_name(self, service: RemoteFileService, ftp_server: FakeFTPServer):
        ftp_server.add_file("/uploads/b.txt", b"bb")
        ftp_server.add_file("/uploads/a.txt", b"a")
        ftp_server.add_dir("/uploads/c")

        entries = service.list("/uploads")

        assert [e.name for e in entries] == ["a.txt", "b.txt", "c"]

    def test_missing_directory(self, service: RemoteFileService):
        with pytest.raises(RemoteOperationError) as exc_info:
            service.list("/nope")

        assert exc_info.value.operation == "list"
        assert exc_info.value.path == "/nope"


class TestDownload:
    """Tests for RemoteFileService.download."""

    def test_writes_file(
        self, service: RemoteFileService, ftp_server: FakeFTPServer, temp_dir: Path
    ):
        ftp_server.add_file("/uploads/a.txt", b"hello")
        target = temp_dir / "nested" / "a.txt"

        written = service.download("/uploads/a.txt", target)

        assert written == 5
        assert target.read_bytes() == b"hello"

    def test_missing_remote_file(self, service: RemoteFileService, temp_dir: Path):
        with pytest.raises(RemoteOperationError):
            service.download("/uploads/none.txt", temp_dir / "none.txt")


class TestDelete:
    """Tests for RemoteFileService.delete."""

    def test_deletes(self, service: RemoteFileService, ftp_server: FakeFTPServer):
        ftp_server.add_file("/uploads/a.txt", b"x")

        service.delete("/uploads/a.txt")

        assert "/uploads/a.txt" not in ftp_server.files

    def test_missing(self, service: RemoteFileService):
        with pytest.raises(RemoteOperationError, match="Remote delete failed"):
            service.delete("/uploads/a.txt")

    def test_line_break_in_path(self, service: RemoteFileService, ftp_server: FakeFTPServer):
        ftp_server.add_file("/uploads/a.txt", b"x")

        with pytest.raises(RemoteOperationError):
            service.delete("/uploads/a.txt\r\nDELE /uploads/b.txt")

        assert "/uploads/a.txt" in ftp_server.files


# =============================================================================
# Prune
# =============================================================================


@pytest.fixture
def day_tree(ftp_server: FakeFTPServer) -> FakeFTPServer:
    """One upload day holding one kept and two empty submissions."""
    ftp_server.add_file("/uploads/2024-05-01/u1/s1/a.txt", b"a")
    ftp_server.add_dir("/uploads/2024-05-01/u1/s2")
    ftp_server.add_dir("/uploads/2024-05-01/u2/s3")
    ftp_server.add_file("/uploads/2024-05-01/stray.txt", b"x")
    return ftp_server


class TestPruneEmptyDirs:
    """Tests for RemoteFileService.prune_empty_dirs."""

    def test_removes_empty_submissions(self, service: RemoteFileService, day_tree: FakeFTPServer):
        summary = service.prune_empty_dirs("2024-05-01")

        assert summary.empty_found == 2
        assert summary.removed == [
            "/uploads/2024-05-01/u1/s2",
            "/uploads/2024-05-01/u2/s3",
        ]
        assert summary.failed == []
        assert "/uploads/2024-05-01/u1/s1" in day_tree.dirs
        assert "/uploads/2024-05-01/u1/s2" not in day_tree.dirs

    def test_dry_run(self, service: RemoteFileService, day_tree: FakeFTPServer):
        summary = service.prune_empty_dirs("2024-05-01", dry_run=True)

        assert summary.dry_run
        assert summary.empty_found == 2
        assert summary.removed_count == 0
        assert "/uploads/2024-05-01/u2/s3" in day_tree.dirs

    def test_failed_removal_is_recorded(
        self, service: RemoteFileService, day_tree: FakeFTPServer
    ):
        day_tree.rmd_errors["/uploads/2024-05-01/u1/s2"] = ftplib.error_perm("550 Denied")

        summary = service.prune_empty_dirs("2024-05-01")

        assert summary.failed == ["/uploads/2024-05-01/u1/s2"]
        assert summary.removed == ["/uploads/2024-05-01/u2/s3"]

    def test_defaults_to_today(
        self,
        service: RemoteFileService,
        ftp_server: FakeFTPServer,
        monkeypatch: pytest.MonkeyPatch,
    ):
        monkeypatch.setattr("ftprelay.services.files.utc_today", lambda: date(2024, 5, 1))
        ftp_server.add_dir("/uploads/2024-05-01/u1/s1")

        summary = service.prune_empty_dirs()

        assert summary.day == "2024-05-01"
        assert summary.removed_count == 1

    def test_invalid_day(self, service: RemoteFileService):
        with pytest.raises(ValidationError):
            service.prune_empty_dirs("May 1st")

    def test_to_dict(self, service: RemoteFileService, day_tree: FakeFTPServer):
        data = service.prune_empty_dirs("2024-05-01", dry_run=True).to_dict()
        assert data == {
            "day": "2024-05-01",
            "empty_found": 2,
            "removed": [],
            "failed": [],
            "dry_run": True,
        }


def test_base_path_is_used(session: TransferSession, ftp_server: FakeFTPServer):
    ftp_server.add_dir("/incoming/2024-05-01/u1/s1")
    service = RemoteFileService(session, base_path="/incoming/")

    assert service.prune_empty_dirs("2024-05-01").removed == ["/incoming/2024-05-01/u1/s1"]
