"""Pytest configuration and fixtures for ftprelay tests."""

from __future__ import annotations

import ftplib
import posixpath
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator, Optional

import pytest

from ftprelay.core.session import TransferSession

ENV_VARS = (
    "FTP_HOST",
    "FTP_USER",
    "FTP_PASSWORD",
    "FTP_PORT",
    "FTP_TIMEOUT",
    "FTP_SECURE",
    "UPLOAD_PATH",
    "FTPRELAY_PROFILE",
)


# =============================================================================
# In-memory FTP server
# =============================================================================


class FakeFTPServer:
    """Shared state of an in-memory FTP server.

    Each connection made through :meth:`factory` sees the same files and
    directories. Attributes prefixed with the failure they cause let tests
    inject errors at a given stage.
    """

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.dirs: set[str] = {"/"}
        self.connections: list[FakeFTP] = []
        self.commands: list[str] = []
        self.connect_attempts = 0

        self.connect_failures = 0
        self.connect_limit: Optional[int] = None
        self.fail_binary_mode = False
        self.deny_mkd: set[str] = set()
        self.store_errors: dict[str, Exception] = {}
        self.size_overrides: dict[str, Optional[int]] = {}
        self.size_error: Optional[Exception] = None
        self.mlsd_supported = True
        self.list_error: Optional[Exception] = None
        self.rmd_errors: dict[str, Exception] = {}

    def factory(self, timeout: Optional[int] = None) -> "FakeFTP":
        conn = FakeFTP(self, timeout=timeout)
        self.connections.append(conn)
        return conn

    def add_file(self, path: str, content: bytes = b"") -> None:
        """Place a file, creating its parent directories."""
        self.add_dir(posixpath.dirname(path))
        self.files[path] = content

    def add_dir(self, path: str) -> None:
        """Create a directory and its parents."""
        current = "/"
        for part in [p for p in path.split("/") if p]:
            current = posixpath.join(current, part)
            self.dirs.add(current)

    def children(self, path: str) -> list[tuple[str, bool, int]]:
        """Return ``(name, is_dir, size)`` for entries directly under ``path``."""
        entries = [
            (posixpath.basename(d), True, 0)
            for d in self.dirs
            if d != "/" and posixpath.dirname(d) == path
        ]
        entries += [
            (posixpath.basename(f), False, len(data))
            for f, data in self.files.items()
            if posixpath.dirname(f) == path
        ]
        return sorted(entries)


class FakeFTP:
    """Connection object with the subset of the ``ftplib.FTP`` API in use."""

    def __init__(self, server: FakeFTPServer, timeout: Optional[int] = None) -> None:
        self.server = server
        self.timeout = timeout
        self.cwd_path = "/"
        self.user: Optional[str] = None
        self.passive: Optional[bool] = None
        self.closed = False

    def _abs(self, path: str) -> str:
        if "\r" in path or "\n" in path:
            raise ValueError("an illegal newline character should not be contained")
        return posixpath.normpath(posixpath.join(self.cwd_path, path))

    def connect(self, host: str, port: int, timeout: Optional[int] = None) -> str:
        self.server.connect_attempts += 1
        attempt = self.server.connect_attempts
        limit = self.server.connect_limit
        if attempt <= self.server.connect_failures or (limit is not None and attempt > limit):
            raise ConnectionRefusedError(f"connection refused (attempt {attempt})")
        return "220 ready"

    def login(self, user: str = "", passwd: str = "") -> str:
        self.user = user
        return "230 Login successful"

    def set_pasv(self, val: bool) -> None:
        self.passive = val

    def voidcmd(self, cmd: str) -> str:
        self.server.commands.append(cmd)
        if cmd == "TYPE I" and self.server.fail_binary_mode:
            raise ftplib.error_perm("504 Command not implemented for that parameter")
        return "200 OK"

    def quit(self) -> str:
        self.closed = True
        return "221 Goodbye"

    def close(self) -> None:
        self.closed = True

    def pwd(self) -> str:
        return self.cwd_path

    def cwd(self, path: str) -> str:
        target = self._abs(path)
        if target not in self.server.dirs:
            raise ftplib.error_perm(f"550 {path}: No such file or directory")
        self.cwd_path = target
        return "250 OK"

    def mkd(self, path: str) -> str:
        target = self._abs(path)
        if target in self.server.deny_mkd:
            raise ftplib.error_perm("550 Permission denied")
        if posixpath.dirname(target) not in self.server.dirs:
            raise ftplib.error_perm(f"550 {path}: No such file or directory")
        self.server.dirs.add(target)
        return target

    def storbinary(self, cmd: str, fp: Any, blocksize: int = 8192, callback: Any = None) -> str:
        target = self._abs(cmd.split(" ", 1)[1])
        if target in self.server.store_errors:
            raise self.server.store_errors[target]
        if posixpath.dirname(target) not in self.server.dirs:
            raise ftplib.error_perm("553 Could not create file")
        self.server.files[target] = fp.read()
        return "226 Transfer complete"

    def retrbinary(self, cmd: str, callback: Callable[[bytes], Any], blocksize: int = 8192) -> str:
        target = self._abs(cmd.split(" ", 1)[1])
        if target not in self.server.files:
            raise ftplib.error_perm(f"550 {target}: No such file or directory")
        callback(self.server.files[target])
        return "226 Transfer complete"

    def size(self, path: str) -> Optional[int]:
        if self.server.size_error is not None:
            raise self.server.size_error
        target = self._abs(path)
        if target in self.server.size_overrides:
            return self.server.size_overrides[target]
        if target not in self.server.files:
            raise ftplib.error_perm(f"550 {path}: No such file or directory")
        return len(self.server.files[target])

    def delete(self, path: str) -> str:
        target = self._abs(path)
        if target not in self.server.files:
            raise ftplib.error_perm(f"550 {path}: No such file or directory")
        del self.server.files[target]
        return "250 Deleted"

    def rmd(self, path: str) -> str:
        target = self._abs(path)
        if target in self.server.rmd_errors:
            raise self.server.rmd_errors[target]
        if target not in self.server.dirs:
            raise ftplib.error_perm(f"550 {path}: No such file or directory")
        if self.server.children(target):
            raise ftplib.error_perm("550 Directory not empty")
        self.server.dirs.discard(target)
        return "250 Removed"

    def dir(self, *args: Any) -> None:
        *paths, callback = args
        if self.server.list_error is not None:
            raise self.server.list_error
        target = self._abs(paths[0] if paths else ".")
        if target not in self.server.dirs:
            raise ftplib.error_perm(f"550 {target}: No such file or directory")
        for name, is_dir, size in self.server.children(target):
            mode = "drwxr-xr-x" if is_dir else "-rw-r--r--"
            callback(f"{mode} 1 ftp ftp {size} May 01 12:00 {name}")

    def mlsd(self, path: str = "", facts: Any = ()) -> Any:
        if not self.server.mlsd_supported:
            raise ftplib.error_perm("500 Unknown command MLSD")
        target = self._abs(path or ".")
        if target not in self.server.dirs:
            raise ftplib.error_perm(f"550 {target}: No such file or directory")
        yield ".", {"type": "cdir"}
        yield "..", {"type": "pdir"}
        for name, is_dir, size in self.server.children(target):
            yield name, {
                "type": "dir" if is_dir else "file",
                "size": str(size),
                "modify": "20240501120000",
            }


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep FTP_* variables from the caller's shell out of every test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def ftp_server() -> FakeFTPServer:
    """Empty in-memory FTP server."""
    return FakeFTPServer()


@pytest.fixture
def session(ftp_server: FakeFTPServer) -> Generator[TransferSession, None, None]:
    """Transfer session wired to the in-memory server."""
    sess = TransferSession(
        host="ftp.test",
        username="uploader",
        password="secret",
        connection_factory=ftp_server.factory,
    )
    yield sess
    sess.disconnect()


@pytest.fixture
def make_file(temp_dir: Path) -> Callable[..., Path]:
    """Factory writing a local file under ``temp_dir``."""

    def _make(name: str, content: bytes = b"hello") -> Path:
        path = temp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    return _make


@pytest.fixture
def sample_config_yaml() -> str:
    """Sample config YAML content."""
    return """
default_profile: staging
output_format: table

profiles:
  staging:
    host: ftp-staging.example.org
    port: 2121
    username: uploader
    timeout: 10
    upload_path: /incoming

  production:
    host: ftp.example.org
    secure: true
"""
