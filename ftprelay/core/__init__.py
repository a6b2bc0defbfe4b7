"""Core modules for ftprelay."""

from ftprelay.core.config import CONFIG_DIR, CONFIG_FILE, Config, Profile
from ftprelay.core.exceptions import (
    ConfigurationError,
    ConnectError,
    DirectoryCreateError,
    FtpRelayError,
    LocalFileMissingError,
    ProfileNotFoundError,
    RemoteOperationError,
    TransferError,
    UploadError,
    ValidationError,
    VerificationError,
)
from ftprelay.core.logging import LogContext, get_audit_logger, get_logger, setup_logging
from ftprelay.core.session import TransferSession
from ftprelay.core.validation import (
    validate_day,
    validate_host,
    validate_identifier,
    validate_port,
    validate_timeout,
)

__all__ = [
    # Exceptions
    "FtpRelayError",
    "ConfigurationError",
    "ProfileNotFoundError",
    "ValidationError",
    "TransferError",
    "ConnectError",
    "LocalFileMissingError",
    "DirectoryCreateError",
    "UploadError",
    "VerificationError",
    "RemoteOperationError",
    # Validation
    "validate_day",
    "validate_host",
    "validate_identifier",
    "validate_port",
    "validate_timeout",
    # Config
    "Config",
    "Profile",
    "CONFIG_DIR",
    "CONFIG_FILE",
    # Session
    "TransferSession",
    # Logging
    "get_logger",
    "get_audit_logger",
    "setup_logging",
    "LogContext",
]
