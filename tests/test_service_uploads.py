"""Tests for ftprelay.services.uploads module."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from ftprelay.core.exceptions import ConnectError, InvalidIdentifierError
from ftprelay.core.session import TransferSession
from ftprelay.services.uploads import StagedFile, UploadService

if TYPE_CHECKING:
    from conftest import FakeFTPServer

DAY = date(2024, 5, 1)


@pytest.fixture
def service(session: TransferSession) -> UploadService:
    return UploadService(session, base_path="/uploads")


class TestStagedFile:
    """Tests for StagedFile."""

    def test_display_name_prefers_original(self):
        staged = StagedFile("/tmp/upload_1234", original_name="invoice.pdf")
        assert staged.display_name == "invoice.pdf"

    def test_display_name_falls_back_to_local_name(self):
        assert StagedFile("/tmp/upload_1234").display_name == "upload_1234"


class TestUploadSubmission:
    """Tests for UploadService.upload_submission."""

    def test_derives_remote_paths(
        self, service: UploadService, ftp_server: FakeFTPServer, make_file
    ):
        staged = [
            StagedFile(make_file("tmp1", b"pdf"), original_name="my invoice.pdf"),
            StagedFile(make_file("tmp2", b"jpg"), original_name="photo.jpg"),
        ]

        result = service.upload_submission("u42", "s1", staged, today=DAY)

        assert result.success
        assert result.owner_id == "u42"
        assert result.submission_id == "s1"
        assert ftp_server.files == {
            "/uploads/2024-05-01/u42/s1/my_invoice.pdf": b"pdf",
            "/uploads/2024-05-01/u42/s1/photo.jpg": b"jpg",
        }

    def test_cleans_up_staged_files(self, service: UploadService, make_file):
        paths = [make_file("a.txt"), make_file("b.txt")]

        service.upload_submission("u42", "s1", paths, today=DAY)

        assert not any(p.exists() for p in paths)

    def test_keep_local_files(self, service: UploadService, make_file):
        path = make_file("a.txt")

        service.upload_submission("u42", "s1", [path], cleanup=False, today=DAY)

        assert path.exists()

    def test_cleans_up_after_partial_failure(
        self, service: UploadService, ftp_server: FakeFTPServer, make_file
    ):
        ftp_server.size_overrides["/uploads/2024-05-01/u42/s1/b.txt"] = 1
        paths = [make_file("a.txt"), make_file("b.txt")]

        result = service.upload_submission("u42", "s1", paths, today=DAY)

        assert not result.success
        assert result.batch.failed[0].kind == "verification"
        assert not any(p.exists() for p in paths)

    def test_cleans_up_when_connection_fails(
        self, service: UploadService, ftp_server: FakeFTPServer, make_file
    ):
        ftp_server.connect_failures = 2
        path = make_file("a.txt")

        with pytest.raises(ConnectError):
            service.upload_submission("u42", "s1", [path], today=DAY)

        assert not path.exists()

    def test_generates_submission_id(self, service: UploadService, make_file):
        result = service.upload_submission("u42", None, [make_file("a.txt")], today=DAY)

        assert result.submission_id.startswith("temp_")
        assert result.batch.successful[0].remote_path.startswith(
            f"/uploads/2024-05-01/u42/{result.submission_id}/"
        )

    def test_invalid_owner(self, service: UploadService, ftp_server: FakeFTPServer, make_file):
        path = make_file("a.txt")

        with pytest.raises(InvalidIdentifierError):
            service.upload_submission("../etc", "s1", [path], today=DAY)

        assert ftp_server.connections == []
        assert not path.exists()

    def test_line_break_in_owner(
        self, service: UploadService, ftp_server: FakeFTPServer, make_file
    ):
        path = make_file("a.txt")

        with pytest.raises(InvalidIdentifierError):
            service.upload_submission("owner\r\n42", "s1", [path], today=DAY)

        assert ftp_server.connections == []
        assert ftp_server.dirs == {"/"}
        assert not path.exists()

    def test_progress_callback(self, service: UploadService, make_file):
        seen: list[int] = []

        service.upload_submission(
            "u42",
            "s1",
            [make_file("a.txt"), make_file("b.txt")],
            today=DAY,
            progress_callback=lambda p: seen.append(p.current),
        )

        assert seen == [1, 2]

    def test_audit_record(
        self, service: UploadService, make_file, caplog: pytest.LogCaptureFixture
    ):
        with caplog.at_level(logging.INFO, logger="ftprelay.audit"):
            service.upload_submission("u42", "s1", [make_file("a.txt")], today=DAY)

        records = [r for r in caplog.records if r.name == "ftprelay.audit"]
        assert len(records) == 1
        assert records[0].levelno == logging.INFO
        assert "'owner': 'u42'" in records[0].getMessage()

    def test_audit_failure_is_warning(
        self,
        service: UploadService,
        temp_dir: Path,
        caplog: pytest.LogCaptureFixture,
    ):
        with caplog.at_level(logging.INFO, logger="ftprelay.audit"):
            service.upload_submission("u42", "s1", [temp_dir / "missing.txt"], today=DAY)

        records = [r for r in caplog.records if r.name == "ftprelay.audit"]
        assert records[0].levelno == logging.WARNING

    def test_to_dict(self, service: UploadService, make_file):
        result = service.upload_submission("u42", "s1", [make_file("a.txt")], today=DAY)
        data = result.to_dict()

        assert data["owner_id"] == "u42"
        assert data["submission_id"] == "s1"
        assert data["success_count"] == 1
        assert data["failed"] == []


def test_check_connection(service: UploadService, ftp_server: FakeFTPServer):
    assert service.check_connection() is True
    ftp_server.list_error = EOFError()
    assert service.check_connection() is False
