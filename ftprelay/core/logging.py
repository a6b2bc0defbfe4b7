"""Logging utilities for ftprelay.

Provides stage-level logging around transfers and an audit trail for
submission uploads.
"""

from __future__ import annotations

import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any, Optional

# =============================================================================
# Constants
# =============================================================================

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
AUDIT_LOGGER_NAME = "ftprelay.audit"


# =============================================================================
# Logger Setup
# =============================================================================


def setup_logging(
    level: int = logging.WARNING,
    *,
    quiet: bool = False,
    verbose: bool = False,
) -> None:
    """Configure logging for ftprelay.

    Args:
        level: Base logging level.
        quiet: If True, only show errors.
        verbose: If True, show debug messages.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance (typically for ``__name__``)."""
    return logging.getLogger(name)


# =============================================================================
# Log Context
# =============================================================================


class LogContext:
    """Context manager that logs the start, end and failure of one operation.

    Context fields are appended to every line so each message carries the
    paths involved, e.g.::

        with LogContext("upload", logger, local=src, remote=dst) as ctx:
            ctx.info("Local file size: %d bytes", size)
    """

    def __init__(
        self,
        operation: str,
        logger: Optional[logging.Logger] = None,
        **context: Any,
    ):
        self.operation = operation
        self.logger = logger or get_logger(__name__)
        self.context = context
        self._started: Optional[float] = None

    @property
    def _ctx_str(self) -> str:
        return ", ".join(f"{k}={v}" for k, v in self.context.items())

    def __enter__(self) -> "LogContext":
        self._started = time.monotonic()
        self.logger.info("Starting %s (%s)", self.operation, self._ctx_str)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        duration = time.monotonic() - self._started if self._started is not None else 0.0

        if exc_type:
            self.logger.error(
                "%s failed after %.2fs (%s): %s",
                self.operation,
                duration,
                self._ctx_str,
                exc_val,
            )
        else:
            self.logger.info("%s completed in %.2fs (%s)", self.operation, duration, self._ctx_str)

    def log(self, level: int, message: str, *args: Any) -> None:
        """Log a message tagged with the operation name and context."""
        self.logger.log(level, f"[{self.operation}] {message} ({self._ctx_str})", *args)

    def info(self, message: str, *args: Any) -> None:
        self.log(logging.INFO, message, *args)

    def warning(self, message: str, *args: Any) -> None:
        self.log(logging.WARNING, message, *args)

    def error(self, message: str, *args: Any) -> None:
        self.log(logging.ERROR, message, *args)

    def debug(self, message: str, *args: Any) -> None:
        self.log(logging.DEBUG, message, *args)


# =============================================================================
# Audit Logger
# =============================================================================


class AuditLogger:
    """Logger for the audit trail of submission uploads."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(AUDIT_LOGGER_NAME)

    def log_operation(
        self,
        operation: str,
        *,
        owner: Optional[str] = None,
        submission: Optional[str] = None,
        success: bool = True,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """Log an auditable operation.

        Args:
            operation: Name of the operation.
            owner: Owner identity the files belong to.
            submission: Submission identifier.
            success: Whether the operation fully succeeded.
            details: Additional details (counts, paths).
        """
        record: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "operation": operation,
            "success": success,
        }
        if owner:
            record["owner"] = owner
        if submission:
            record["submission"] = submission
        if details:
            record["details"] = details

        level = logging.INFO if success else logging.WARNING
        self.logger.log(level, "AUDIT: %s", record)


def get_audit_logger() -> AuditLogger:
    """Get the audit logger instance."""
    return AuditLogger()
