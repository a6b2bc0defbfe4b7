"""Result models for file transfers.

``UploadSuccess`` and ``UploadFailure`` are produced once per file and never
mutated. ``BatchResult`` collects them for one batch; its counts are always
derived from the two lists.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from ftprelay.core.exceptions import TransferError


@dataclass(frozen=True)
class UploadSuccess:
    """A file that reached the remote store."""

    local_path: str
    remote_path: str
    byte_size: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class UploadFailure:
    """A file that did not reach the remote store (or failed verification)."""

    local_path: str
    remote_path: Optional[str]
    reason: str
    kind: str = TransferError.kind

    @classmethod
    def from_error(
        cls,
        local_path: str,
        remote_path: Optional[str],
        error: TransferError,
    ) -> "UploadFailure":
        """Build a failure record from a raised transfer error."""
        return cls(
            local_path=local_path,
            remote_path=remote_path,
            reason=error.message,
            kind=error.kind,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class BatchResult:
    """Outcome of a batch of uploads."""

    successful: list[UploadSuccess] = field(default_factory=list)
    failed: list[UploadFailure] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.successful)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @property
    def total_files(self) -> int:
        return self.success_count + self.failure_count

    @property
    def success(self) -> bool:
        """True when no file failed."""
        return not self.failed

    @property
    def total_bytes(self) -> int:
        return sum(s.byte_size for s in self.successful)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary suitable for JSON output."""
        return {
            "success": self.success,
            "total_files": self.total_files,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "successful": [s.to_dict() for s in self.successful],
            "failed": [f.to_dict() for f in self.failed],
        }


@dataclass
class UploadProgress:
    """Progress information passed to upload callbacks after each file."""

    current: int
    total: int
    local_path: str
    remote_path: str
    success: bool = True
    message: str = ""

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 0.0
        return (self.current / self.total) * 100
