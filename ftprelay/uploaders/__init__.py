"""FTP upload transport for ftprelay.

- Remote path derivation and local staged-file cleanup
- Single-file upload with size verification
- Sequential batch upload with per-file failure accounting

These are internal implementation details. Use `UploadService` from
`ftprelay.services.uploads` as the public API.
"""

from ftprelay.uploaders.common import (
    cleanup_local_files,
    derive_remote_path,
    generate_submission_id,
    remote_parent,
    sanitize_file_name,
)
from ftprelay.uploaders.constants import DEFAULT_BASE_PATH
from ftprelay.uploaders.ftp_store import upload_file, upload_multiple_files

__all__ = [
    # Constants
    "DEFAULT_BASE_PATH",
    # Common utilities
    "cleanup_local_files",
    "derive_remote_path",
    "generate_submission_id",
    "remote_parent",
    "sanitize_file_name",
    # FTP uploader
    "upload_file",
    "upload_multiple_files",
]
