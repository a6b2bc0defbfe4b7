"""FTP uploader: single-file transfer with verification, and batches.

This is an internal implementation detail. Use `UploadService` from
`ftprelay.services.uploads` as the public API.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from ftprelay.core.exceptions import (
    DirectoryCreateError,
    LocalFileMissingError,
    TransferError,
    UploadError,
    VerificationError,
)
from ftprelay.core.logging import LogContext
from ftprelay.core.session import COMMAND_ERRORS, TRANSPORT_ERRORS, TransferSession
from ftprelay.models.transfer import BatchResult, UploadFailure, UploadProgress, UploadSuccess
from ftprelay.uploaders.common import remote_parent

logger = logging.getLogger(__name__)

FilePair = tuple[str | Path, str]


# =============================================================================
# Single File
# =============================================================================


def upload_file(
    session: TransferSession,
    local_path: str | Path,
    remote_path: str,
) -> UploadSuccess:
    """Upload one local file and verify its remote size.

    Stages, in order:
    1. Connect the session if needed
    2. Check the local file and read its size
    3. Ensure the remote parent directory exists
    4. Transfer the file
    5. Compare remote and local size (skipped with a warning if the server
       cannot report a size)

    Args:
        session: Transfer session to use.
        local_path: Staged local file.
        remote_path: Destination path on the remote store.

    Returns:
        UploadSuccess with the local size.

    Raises:
        ConnectError: If the session cannot connect.
        LocalFileMissingError: If ``local_path`` does not exist.
        DirectoryCreateError: If the remote directory cannot be created.
        UploadError: If the transfer fails.
        VerificationError: If the remote size differs from the local size.
    """
    local = str(local_path)

    with LogContext("upload", logger, local=local, remote=remote_path) as ctx:
        session.connect()

        path = Path(local_path)
        try:
            if not path.is_file():
                raise LocalFileMissingError(local, remote_path)
            local_size = path.stat().st_size
        except OSError as e:
            raise LocalFileMissingError(local, remote_path) from e
        ctx.debug("Local file size: %d bytes", local_size)

        remote_dir = remote_parent(remote_path)
        if remote_dir:
            try:
                session.ensure_dir(remote_dir)
            except COMMAND_ERRORS as e:
                _drop_if_dead(session, e)
                raise DirectoryCreateError(
                    remote_dir, local_path=local, remote_path=remote_path, cause=e
                ) from e

        try:
            session.store(path, remote_path)
        except COMMAND_ERRORS as e:
            _drop_if_dead(session, e)
            raise UploadError(local_path=local, remote_path=remote_path, cause=e) from e

        _verify_size(session, ctx, local, remote_path, local_size)

    return UploadSuccess(local_path=local, remote_path=remote_path, byte_size=local_size)


def _verify_size(
    session: TransferSession,
    ctx: LogContext,
    local: str,
    remote_path: str,
    local_size: int,
) -> None:
    """Compare remote and local sizes.

    A size query that fails only produces a warning. A size that is reported
    but differs is a hard failure.
    """
    try:
        remote_size = session.size(remote_path)
    except COMMAND_ERRORS as e:
        _drop_if_dead(session, e)
        ctx.warning("Could not verify file size: %s", e)
        return

    if remote_size is None:
        ctx.warning("Could not verify file size: server returned no size")
        return

    if remote_size != local_size:
        raise VerificationError(
            local_path=local,
            remote_path=remote_path,
            local_size=local_size,
            remote_size=remote_size,
        )
    ctx.debug("Remote file size verified: %d bytes", remote_size)


def _drop_if_dead(session: TransferSession, error: BaseException) -> None:
    """Reset the session after a transport failure so the next file reconnects."""
    if isinstance(error, TRANSPORT_ERRORS):
        session.reset()


# =============================================================================
# Batch
# =============================================================================


def upload_multiple_files(
    session: TransferSession,
    files: Sequence[FilePair],
    *,
    progress_callback: Callable[[UploadProgress], None] | None = None,
) -> BatchResult:
    """Upload files one after another over a shared session.

    Failures of individual files are recorded and do not stop the batch;
    every pair is attempted and reported in input order.

    Args:
        session: Transfer session shared by all files.
        files: Sequence of (local path, remote path) pairs.
        progress_callback: Optional callback invoked after each file.

    Returns:
        BatchResult with one entry per input pair.

    Raises:
        ConnectError: If the session cannot connect before the first file.
    """
    result = BatchResult()
    if not files:
        return result

    # Nothing can proceed without a connection
    session.connect()

    total = len(files)
    for index, (local_path, remote_path) in enumerate(files, start=1):
        local = str(local_path)
        try:
            result.successful.append(upload_file(session, local_path, remote_path))
            message = "uploaded"
            ok = True
        except TransferError as e:
            result.failed.append(UploadFailure.from_error(local, remote_path, e))
            message = e.message
            ok = False

        if progress_callback:
            progress_callback(
                UploadProgress(
                    current=index,
                    total=total,
                    local_path=local,
                    remote_path=remote_path,
                    success=ok,
                    message=message,
                )
            )

    logger.info(
        "Batch upload finished: %d succeeded, %d failed",
        result.success_count,
        result.failure_count,
    )
    return result
