"""Upload service for submission files."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Optional, Union

from ftprelay.core.exceptions import ConnectError
from ftprelay.core.logging import get_audit_logger
from ftprelay.core.validation import validate_identifier
from ftprelay.models.transfer import BatchResult, UploadProgress
from ftprelay.uploaders.common import (
    cleanup_local_files,
    derive_remote_path,
    generate_submission_id,
)
from ftprelay.uploaders.ftp_store import upload_multiple_files

from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StagedFile:
    """A file received from a client and staged on local disk."""

    local_path: Union[str, Path]
    original_name: str = ""

    @property
    def display_name(self) -> str:
        """Name used for the remote file: the original name or the staged one."""
        return self.original_name or Path(self.local_path).name


@dataclass
class SubmissionUpload:
    """Result of uploading the files of one submission."""

    owner_id: str
    submission_id: str
    batch: BatchResult

    @property
    def success(self) -> bool:
        return self.batch.success

    def to_dict(self) -> dict[str, Any]:
        return {
            "owner_id": self.owner_id,
            "submission_id": self.submission_id,
            **self.batch.to_dict(),
        }


class UploadService(BaseService):
    """Relay staged submission files to the remote store."""

    def upload_submission(
        self,
        owner_id: str,
        submission_id: Optional[str],
        files: Sequence[Union[StagedFile, str, Path]],
        *,
        cleanup: bool = True,
        today: Optional[date] = None,
        progress_callback: Optional[Callable[[UploadProgress], None]] = None,
    ) -> SubmissionUpload:
        """Upload the staged files of one submission.

        Remote paths are derived from the owner, the submission and each
        file's original name. When ``cleanup`` is set, every staged file is
        deleted afterwards, whatever the outcome.

        Args:
            owner_id: Identity of the uploading user.
            submission_id: Submission identifier; generated when None.
            files: Staged files (StagedFile or plain local paths).
            cleanup: Delete local staged files after the attempt.
            today: Day used in remote paths (default: current UTC day).
            progress_callback: Optional callback invoked after each file.

        Returns:
            SubmissionUpload wrapping the batch result.

        Raises:
            ValidationError: If the owner or submission id is unusable.
            ConnectError: If no connection could be made at all.
        """
        staged = [f if isinstance(f, StagedFile) else StagedFile(f) for f in files]
        audit = get_audit_logger()

        try:
            owner_id = validate_identifier("owner", owner_id)
            submission_id = validate_identifier(
                "submission", submission_id or generate_submission_id()
            )

            pairs = [
                (
                    f.local_path,
                    derive_remote_path(
                        owner_id,
                        submission_id,
                        f.display_name,
                        base_path=self.base_path,
                        today=today,
                    ),
                )
                for f in staged
            ]

            try:
                batch = upload_multiple_files(
                    self.session, pairs, progress_callback=progress_callback
                )
            except ConnectError as e:
                audit.log_operation(
                    "upload",
                    owner=owner_id,
                    submission=submission_id,
                    success=False,
                    details={"files": len(pairs), "error": str(e)},
                )
                raise
        finally:
            if cleanup:
                cleanup_local_files(f.local_path for f in staged)

        audit.log_operation(
            "upload",
            owner=owner_id,
            submission=submission_id,
            success=batch.success,
            details={
                "files": batch.total_files,
                "succeeded": batch.success_count,
                "failed": batch.failure_count,
            },
        )
        return SubmissionUpload(owner_id=owner_id, submission_id=submission_id, batch=batch)

    def check_connection(self) -> bool:
        """Check that the remote store answers."""
        return self.session.check_connection()
