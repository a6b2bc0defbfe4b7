"""Input validation helpers for ftprelay."""

from __future__ import annotations

import re
from datetime import date
from typing import Any

from ftprelay.core.exceptions import (
    InvalidIdentifierError,
    InvalidPortError,
    ValidationError,
)

# Identifiers become path segments of FTP commands: no separators, NUL, CR or LF
_FORBIDDEN_IDENTIFIER_CHARS = re.compile(r"[/\\\x00\r\n]")


def validate_port(port: Any) -> int:
    """Validate a TCP port number.

    Args:
        port: Port as int or numeric string.

    Returns:
        Port as int.

    Raises:
        InvalidPortError: If the port is not an integer in 1-65535.
    """
    try:
        value = int(port)
    except (TypeError, ValueError):
        raise InvalidPortError(port)
    if not 1 <= value <= 65535:
        raise InvalidPortError(port)
    return value


def validate_host(host: str | None) -> str:
    """Validate and normalize an FTP host name.

    Accepts a bare host or an ``ftp://host`` URL and returns the bare host.
    """
    if not host or not host.strip():
        raise ValidationError("FTP host is required", field="host")
    host = host.strip()
    if host.lower().startswith("ftp://"):
        host = host[len("ftp://"):]
    host = host.rstrip("/")
    if not host or "/" in host:
        raise ValidationError(f"Invalid FTP host: {host!r}", field="host", value=host)
    return host


def validate_identifier(identifier_type: str, value: str | None) -> str:
    """Validate an owner or submission identifier used as a path segment."""
    if value is None or not str(value).strip():
        raise InvalidIdentifierError(identifier_type, str(value or ""), "must not be empty")
    value = str(value).strip()
    if _FORBIDDEN_IDENTIFIER_CHARS.search(value) or value in (".", ".."):
        raise InvalidIdentifierError(identifier_type, value, "must be a single path segment")
    return value


def validate_timeout(timeout: Any) -> int:
    """Validate a timeout in seconds."""
    try:
        value = int(timeout)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid timeout: {timeout}", field="timeout", value=timeout)
    if value <= 0:
        raise ValidationError(
            f"Invalid timeout: {timeout} (must be positive)", field="timeout", value=timeout
        )
    return value


def validate_day(day: str) -> str:
    """Validate an upload day in ``YYYY-MM-DD`` form."""
    try:
        return date.fromisoformat(day).isoformat()
    except ValueError:
        raise ValidationError(f"Invalid date: {day} (expected YYYY-MM-DD)", field="date", value=day)
