"""ftprelay - relay staged uploads to a remote FTP store.

This package moves files received by an application into an FTP store:
- Derive a dated, per-owner, per-submission remote path for each file
- Upload over one reusable connection with a single reconnect attempt
- Verify each transfer by comparing remote and local sizes
- Report batch results with per-file failures instead of aborting
- Clean up locally staged files afterwards
"""

__version__ = "0.1.0"

from ftprelay.core.config import Config, Profile
from ftprelay.core.exceptions import (
    ConfigurationError,
    ConnectError,
    DirectoryCreateError,
    FtpRelayError,
    LocalFileMissingError,
    TransferError,
    UploadError,
    ValidationError,
    VerificationError,
)
from ftprelay.core.session import TransferSession
from ftprelay.models.transfer import BatchResult, UploadFailure, UploadSuccess

__all__ = [
    "__version__",
    "Config",
    "Profile",
    "TransferSession",
    "BatchResult",
    "UploadFailure",
    "UploadSuccess",
    "FtpRelayError",
    "ConfigurationError",
    "ValidationError",
    "TransferError",
    "ConnectError",
    "LocalFileMissingError",
    "DirectoryCreateError",
    "UploadError",
    "VerificationError",
]
