"""Remote file housekeeping: list, download, delete, prune."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ftprelay.core.exceptions import RemoteOperationError
from ftprelay.core.session import COMMAND_ERRORS, TRANSPORT_ERRORS
from ftprelay.core.validation import validate_day
from ftprelay.models.entry import RemoteEntry
from ftprelay.uploaders.common import utc_today

from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass
class PruneSummary:
    """Summary of an empty-directory prune for one upload day."""

    day: str
    empty_found: int = 0
    removed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def removed_count(self) -> int:
        return len(self.removed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "empty_found": self.empty_found,
            "removed": self.removed,
            "failed": self.failed,
            "dry_run": self.dry_run,
        }


class RemoteFileService(BaseService):
    """Operations on files already in the remote store."""

    def _run(self, operation: str, path: str, fn: Any, *args: Any) -> Any:
        """Connect, run one remote primitive, and wrap protocol errors."""
        self.session.connect()
        try:
            return fn(*args)
        except COMMAND_ERRORS as e:
            if isinstance(e, TRANSPORT_ERRORS):
                self.session.reset()
            logger.error("Remote %s failed for %s: %s", operation, path, e)
            raise RemoteOperationError(operation, path, e) from e

    def list(self, remote_path: str = "/") -> list[RemoteEntry]:
        """List a remote directory.

        Args:
            remote_path: Directory to list.

        Returns:
            Entries sorted by name.
        """
        entries = self._run("list", remote_path, self.session.list_dir, remote_path)
        logger.info("Listed %d entries in %s", len(entries), remote_path)
        return sorted(entries, key=lambda e: e.name)

    def download(self, remote_path: str, local_path: str | Path) -> int:
        """Download a remote file.

        Args:
            remote_path: Source path on the remote store.
            local_path: Destination file; parent directories are created.

        Returns:
            Number of bytes written.
        """
        local = Path(local_path)
        local.parent.mkdir(parents=True, exist_ok=True)
        written = self._run("download", remote_path, self.session.retrieve, remote_path, local)
        logger.info("File downloaded: %s -> %s (%d bytes)", remote_path, local, written)
        return written

    def delete(self, remote_path: str) -> None:
        """Delete a remote file."""
        self._run("delete", remote_path, self.session.delete, remote_path)
        logger.info("File deleted: %s", remote_path)

    def prune_empty_dirs(
        self,
        day: Optional[str] = None,
        *,
        dry_run: bool = False,
    ) -> PruneSummary:
        """Remove submission directories without files for one upload day.

        Walks ``<base>/<day>/<owner>/<submission>``. A submission directory
        counts as empty when it holds no files. Failed removals are recorded
        and the walk continues.

        Args:
            day: Upload day (``YYYY-MM-DD``); defaults to today (UTC).
            dry_run: Report empty directories without removing them.

        Returns:
            PruneSummary with found/removed/failed directories.
        """
        day = validate_day(day) if day else utc_today().isoformat()
        summary = PruneSummary(day=day, dry_run=dry_run)
        day_path = self._build_path(day)

        for owner in self.list(day_path):
            if not owner.is_dir:
                continue
            owner_path = f"{day_path}/{owner.name}"
            for submission in self.list(owner_path):
                if not submission.is_dir:
                    continue
                submission_path = f"{owner_path}/{submission.name}"
                if any(e.is_file for e in self.list(submission_path)):
                    continue

                summary.empty_found += 1
                if dry_run:
                    logger.info("Empty submission directory: %s", submission_path)
                    continue
                try:
                    self._run("rmdir", submission_path, self.session.remove_dir, submission_path)
                    summary.removed.append(submission_path)
                    logger.info("Removed empty directory: %s", submission_path)
                except RemoteOperationError:
                    summary.failed.append(submission_path)

        return summary
