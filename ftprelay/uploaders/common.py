"""Common utilities for uploader modules.

Remote path derivation and cleanup of locally staged files.
"""

from __future__ import annotations

import logging
import posixpath
import re
import time
from collections.abc import Iterable
from datetime import date, datetime, timezone
from pathlib import Path

from ftprelay.uploaders.constants import (
    DEFAULT_BASE_PATH,
    FILENAME_REPLACEMENT,
    SAFE_FILENAME_PATTERN,
    TEMP_SUBMISSION_PREFIX,
)

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(SAFE_FILENAME_PATTERN)


def sanitize_file_name(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9.-]`` with ``_``.

    Example:
        >>> sanitize_file_name("a b/c*.pdf")
        'a_b_c_.pdf'
    """
    return _UNSAFE_CHARS.sub(FILENAME_REPLACEMENT, name)


def utc_today() -> date:
    """Current calendar day in UTC."""
    return datetime.now(timezone.utc).date()


def derive_remote_path(
    owner_id: str,
    submission_id: str,
    original_file_name: str,
    *,
    base_path: str = DEFAULT_BASE_PATH,
    today: date | None = None,
) -> str:
    """Build the remote storage path for one uploaded file.

    Layout: ``<base>/<YYYY-MM-DD>/<owner_id>/<submission_id>/<sanitized name>``,
    where the date is the UTC day of generation. No validation happens here:
    a name that sanitizes to nothing still yields a path.

    Args:
        owner_id: Identity of the user the file belongs to.
        submission_id: Identifier grouping the files of one submission.
        original_file_name: File name as supplied by the client.
        base_path: Remote base directory.
        today: Day to use instead of the current UTC day.

    Returns:
        Remote file path.
    """
    day = (today or utc_today()).isoformat()
    base = base_path.rstrip("/")
    return f"{base}/{day}/{owner_id}/{submission_id}/{sanitize_file_name(original_file_name)}"


def remote_parent(remote_path: str) -> str:
    """Return the POSIX parent directory of a remote path.

    Backslashes are treated as separators.
    """
    return posixpath.dirname(remote_path.replace("\\", "/"))


def generate_submission_id() -> str:
    """Create a placeholder submission id (``temp_<epoch millis>``)."""
    return f"{TEMP_SUBMISSION_PREFIX}{int(time.time() * 1000)}"


def cleanup_local_files(paths: Iterable[str | Path]) -> None:
    """Delete staged local files, best effort.

    Missing files are skipped. A failed deletion is logged and the remaining
    paths are still processed. Never raises.

    Args:
        paths: Local file paths to remove.
    """
    for path in paths:
        file_path = Path(path)
        try:
            if file_path.exists():
                file_path.unlink()
                logger.info("Cleaned up local file: %s", file_path)
        except OSError as e:
            logger.error("Failed to clean up local file %s: %s", file_path, e)
