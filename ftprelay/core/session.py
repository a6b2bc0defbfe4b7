"""FTP transfer session.

Owns the single control connection to the remote store: connect with one
reconnect attempt, disconnect, liveness check, and the remote primitives the
upload pipeline is built from.

A session is not safe for concurrent use. Commands from two in-flight
operations would interleave on the one control connection, so callers run
operations against a session strictly one after another and give each
parallel worker its own session.
"""

from __future__ import annotations

import ftplib
import logging
import posixpath
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ftprelay.core.config import Profile, get_credentials
from ftprelay.core.exceptions import ConnectError, FtpRelayError
from ftprelay.core.timeouts import DEFAULT_FTP_PORT, DEFAULT_FTP_TIMEOUT_SECONDS
from ftprelay.models.entry import RemoteEntry

logger = logging.getLogger(__name__)

# Errors that mean the control connection itself is gone
TRANSPORT_ERRORS = (EOFError, ConnectionError, TimeoutError)

# ftplib rejects CR or LF inside a command with ValueError before sending it
COMMAND_ERRORS = (*ftplib.all_errors, ValueError)

# Anything a liveness check may hit
CHECK_ERRORS = (FtpRelayError, *COMMAND_ERRORS)

ConnectionFactory = Callable[..., ftplib.FTP]


# =============================================================================
# TransferSession
# =============================================================================


@dataclass
class TransferSession:
    """One FTP control connection, opened on demand."""

    host: str
    port: int = DEFAULT_FTP_PORT
    username: str | None = None
    password: str | None = None
    timeout: int = DEFAULT_FTP_TIMEOUT_SECONDS
    secure: bool = False
    passive: bool = True
    connection_factory: ConnectionFactory | None = field(default=None, repr=False)
    _ftp: ftplib.FTP | None = field(init=False, default=None, repr=False)

    @classmethod
    def from_profile(cls, profile: Profile, **overrides: Any) -> "TransferSession":
        """Build a session from a :class:`~ftprelay.core.config.Profile`."""
        username, password = get_credentials(profile)
        kwargs: dict[str, Any] = {
            "host": profile.host,
            "port": profile.port,
            "username": username,
            "password": password,
            "timeout": profile.timeout,
            "secure": profile.secure,
            "passive": profile.passive,
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    # =========================================================================
    # Connection Management
    # =========================================================================

    @property
    def is_connected(self) -> bool:
        """True while a control connection is held."""
        return self._ftp is not None

    def _new_connection(self) -> ftplib.FTP:
        """Open and log in a fresh connection object."""
        if self.connection_factory is not None:
            ftp = self.connection_factory(timeout=self.timeout)
        elif self.secure:
            ftp = ftplib.FTP_TLS(timeout=self.timeout)
        else:
            ftp = ftplib.FTP(timeout=self.timeout)

        try:
            ftp.connect(self.host, self.port, timeout=self.timeout)
            ftp.login(self.username or "anonymous", self.password or "")
            if self.secure and isinstance(ftp, ftplib.FTP_TLS):
                ftp.prot_p()
            ftp.set_pasv(self.passive)
        except COMMAND_ERRORS:
            _close_quietly(ftp)
            raise
        return ftp

    def connect(self) -> None:
        """Connect to the remote store unless already connected.

        A failed attempt is followed by exactly one more attempt on a fresh
        connection object.

        Raises:
            ConnectError: If the reconnect attempt also fails. The error
                wraps the reconnect's cause.
        """
        if self._ftp is not None:
            return

        try:
            ftp = self._new_connection()
        except COMMAND_ERRORS as first_error:
            logger.error("FTP connection to %s:%d failed: %s", self.host, self.port, first_error)
            logger.info("Attempting to reconnect to %s:%d", self.host, self.port)
            try:
                ftp = self._new_connection()
            except COMMAND_ERRORS as e:
                logger.error("FTP reconnection to %s:%d failed: %s", self.host, self.port, e)
                raise ConnectError(self.host, self.port, cause=e) from e
            logger.info("Reconnected to FTP server %s:%d", self.host, self.port)

        self._ftp = ftp

        try:
            ftp.voidcmd("TYPE I")
            logger.debug("Set binary transfer mode")
        except ftplib.all_errors as e:
            logger.warning("Could not set binary transfer mode: %s", e)

        logger.info("Connected to FTP server %s:%d", self.host, self.port)

    def disconnect(self) -> None:
        """Close the connection if open. Safe to call repeatedly."""
        ftp = self._ftp
        if ftp is None:
            return
        self._ftp = None
        try:
            ftp.quit()
        except ftplib.all_errors as e:
            logger.debug("QUIT failed, closing socket: %s", e)
            _close_quietly(ftp)
        logger.info("Disconnected from FTP server %s:%d", self.host, self.port)

    def reset(self) -> None:
        """Forget a dead connection so the next operation reconnects."""
        if self._ftp is not None:
            logger.warning("Dropping FTP connection to %s:%d", self.host, self.port)
            _close_quietly(self._ftp)
            self._ftp = None

    def check_connection(self) -> bool:
        """Connect if needed and check the server by listing ``/``.

        Returns:
            True if the server answered, False on any failure.
        """
        try:
            self.connect()
            self._require().dir("/", lambda _line: None)
            return True
        except CHECK_ERRORS as e:
            logger.error("FTP connection check failed: %s", e)
            if isinstance(e, TRANSPORT_ERRORS):
                self.reset()
            return False

    def __enter__(self) -> "TransferSession":
        return self

    def __exit__(self, *args: Any) -> None:
        self.disconnect()

    # =========================================================================
    # Remote Primitives
    # =========================================================================

    def _require(self) -> ftplib.FTP:
        if self._ftp is None:
            raise ConnectError(self.host, self.port, cause=RuntimeError("not connected"))
        return self._ftp

    def ensure_dir(self, remote_dir: str) -> None:
        """Create ``remote_dir`` and any missing parents.

        Relative paths resolve against the current working directory, which
        is restored afterwards.
        """
        ftp = self._require()
        start = ftp.pwd()
        target = posixpath.normpath(posixpath.join(start, remote_dir))

        current = "/"
        try:
            for part in [p for p in target.split("/") if p]:
                current = posixpath.join(current, part)
                try:
                    ftp.cwd(current)
                except ftplib.error_perm:
                    ftp.mkd(current)
        finally:
            ftp.cwd(start)
        logger.debug("Directory ensured: %s", target)

    def store(self, local_path: str | Path, remote_path: str) -> None:
        """Upload a local file in binary mode."""
        ftp = self._require()
        with open(local_path, "rb") as fh:
            ftp.storbinary(f"STOR {remote_path}", fh)

    def size(self, remote_path: str) -> int | None:
        """Return the remote file size, or None if the server gave none."""
        return self._require().size(remote_path)

    def retrieve(self, remote_path: str, local_path: str | Path) -> int:
        """Download a remote file; returns bytes written."""
        ftp = self._require()
        written = 0

        with open(local_path, "wb") as fh:

            def _write(chunk: bytes) -> None:
                nonlocal written
                fh.write(chunk)
                written += len(chunk)

            ftp.retrbinary(f"RETR {remote_path}", _write)
        return written

    def delete(self, remote_path: str) -> None:
        self._require().delete(remote_path)

    def remove_dir(self, remote_path: str) -> None:
        self._require().rmd(remote_path)

    def list_dir(self, remote_path: str = "/") -> list[RemoteEntry]:
        """List a remote directory.

        Uses ``MLSD`` and falls back to parsing Unix-style ``LIST`` output for
        servers that do not implement it.
        """
        ftp = self._require()
        try:
            return [
                _entry_from_facts(name, facts)
                for name, facts in ftp.mlsd(remote_path, facts=["type", "size", "modify"])
                if name not in (".", "..") and facts.get("type") not in ("cdir", "pdir")
            ]
        except ftplib.error_perm as e:
            if not str(e).startswith("500") and not str(e).startswith("502"):
                raise
            logger.debug("MLSD unsupported, falling back to LIST: %s", e)

        lines: list[str] = []
        ftp.dir(remote_path, lines.append)
        entries = [_entry_from_list_line(line) for line in lines]
        return [e for e in entries if e is not None and e.name not in (".", "..")]


# =============================================================================
# Helpers
# =============================================================================


def _close_quietly(ftp: ftplib.FTP) -> None:
    try:
        ftp.close()
    except ftplib.all_errors as e:
        logger.debug("Error closing FTP socket: %s", e)


def _entry_from_facts(name: str, facts: dict[str, str]) -> RemoteEntry:
    kind = facts.get("type", "")
    if kind == "file":
        entry_type = "file"
    elif kind == "dir":
        entry_type = "directory"
    else:
        entry_type = "unknown"

    size = facts.get("size")
    modified = facts.get("modify")
    modified_at = None
    if modified:
        try:
            modified_at = datetime.strptime(modified[:14], "%Y%m%d%H%M%S").replace(
                tzinfo=timezone.utc
            )
        except ValueError:
            modified_at = None

    return RemoteEntry(
        name=name,
        type=entry_type,
        size=int(size) if size and size.isdigit() else None,
        modified_at=modified_at,
    )


def _entry_from_list_line(line: str) -> RemoteEntry | None:
    """Parse one line of Unix-style ``LIST`` output.

    Example: ``drwxr-xr-x 2 ftp ftp 4096 Jan 01 12:00 name``
    """
    parts = line.split(None, 8)
    if len(parts) < 9:
        return None

    mode, size, name = parts[0], parts[4], parts[8]
    if mode.startswith("d"):
        entry_type = "directory"
    elif mode.startswith("-"):
        entry_type = "file"
    elif mode.startswith("l"):
        entry_type = "unknown"
        name = name.split(" -> ", 1)[0]
    else:
        return None

    return RemoteEntry(
        name=name,
        type=entry_type,
        size=int(size) if size.isdigit() else None,
    )
