"""Exception hierarchy for ftprelay.

Provides typed exceptions for each failure mode of the upload pipeline so
callers branch on the class (or its ``kind`` tag) instead of message text.
"""

from __future__ import annotations

from typing import Any


class FtpRelayError(Exception):
    """Base exception for all ftprelay errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(FtpRelayError):
    """Error in configuration (missing, invalid, or malformed)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ProfileNotFoundError(ConfigurationError):
    """Requested profile does not exist."""

    def __init__(self, profile: str):
        super().__init__(f"Profile not found: {profile}", field="profile", value=profile)
        self.profile = profile


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(FtpRelayError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidPortError(ValidationError):
    """Invalid port number."""

    def __init__(self, port: Any):
        super().__init__(
            f"Invalid port: {port} (must be 1-65535)",
            field="port",
            value=port,
        )
        self.port = port


class InvalidIdentifierError(ValidationError):
    """Invalid owner or submission identifier."""

    def __init__(self, identifier_type: str, value: str, reason: str = ""):
        msg = f"Invalid {identifier_type}: {value!r}"
        if reason:
            msg = f"{msg} - {reason}"
        super().__init__(msg, field=identifier_type)
        self.identifier_type = identifier_type
        self.reason = reason


# =============================================================================
# Transfer Errors
# =============================================================================


class TransferError(FtpRelayError):
    """A single file transfer failed.

    Subclasses set ``kind`` to a stable tag that ends up in
    :class:`~ftprelay.models.transfer.UploadFailure` records.
    """

    kind = "transfer"

    def __init__(
        self,
        message: str,
        *,
        local_path: str | None = None,
        remote_path: str | None = None,
        cause: BaseException | None = None,
    ):
        details: dict[str, Any] = {}
        if local_path:
            details["local"] = local_path
        if remote_path:
            details["remote"] = remote_path
        super().__init__(message, details)
        self.local_path = local_path
        self.remote_path = remote_path
        self.cause = cause


class ConnectError(TransferError):
    """Could not connect to the remote store, even after the reconnect attempt."""

    kind = "connect"

    def __init__(self, host: str, port: int, cause: BaseException | None = None):
        msg = f"FTP connection to {host}:{port} failed"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg, cause=cause)
        self.host = host
        self.port = port


class LocalFileMissingError(TransferError):
    """Staged local file does not exist."""

    kind = "local_file_missing"

    def __init__(self, local_path: str, remote_path: str | None = None):
        super().__init__(
            f"Local file does not exist: {local_path}",
            local_path=local_path,
            remote_path=remote_path,
        )


class DirectoryCreateError(TransferError):
    """Remote parent directory could not be created."""

    kind = "directory_create"

    def __init__(
        self,
        remote_dir: str,
        *,
        local_path: str | None = None,
        remote_path: str | None = None,
        cause: BaseException | None = None,
    ):
        msg = f"Failed to create directory {remote_dir}"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg, local_path=local_path, remote_path=remote_path, cause=cause)
        self.remote_dir = remote_dir


class UploadError(TransferError):
    """File content could not be transferred."""

    kind = "upload"

    def __init__(
        self,
        *,
        local_path: str,
        remote_path: str,
        cause: BaseException | None = None,
    ):
        msg = "Upload failed"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg, local_path=local_path, remote_path=remote_path, cause=cause)


class VerificationError(TransferError):
    """Remote size does not match local size after transfer."""

    kind = "verification"

    def __init__(
        self,
        *,
        local_path: str,
        remote_path: str,
        local_size: int,
        remote_size: int,
    ):
        super().__init__(
            f"Upload verification failed: local size {local_size}, remote size {remote_size}",
            local_path=local_path,
            remote_path=remote_path,
        )
        self.local_size = local_size
        self.remote_size = remote_size


# =============================================================================
# Remote Operation Errors
# =============================================================================


class RemoteOperationError(FtpRelayError):
    """Error during a remote housekeeping operation (list, download, delete)."""

    def __init__(
        self,
        operation: str,
        path: str,
        cause: BaseException | None = None,
    ):
        msg = f"Remote {operation} failed for {path}"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg, {"operation": operation})
        self.operation = operation
        self.path = path
        self.cause = cause
