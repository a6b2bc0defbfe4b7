"""Configuration management for ftprelay.

Supports YAML profiles and environment variable overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ftprelay.core.exceptions import ConfigurationError, ProfileNotFoundError
from ftprelay.core.timeouts import DEFAULT_FTP_PORT, DEFAULT_FTP_TIMEOUT_SECONDS

# =============================================================================
# Constants
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "ftprelay"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_UPLOAD_PATH = "/uploads"

# Environment variable names
ENV_HOST = "FTP_HOST"
ENV_USER = "FTP_USER"
ENV_PASS = "FTP_PASSWORD"
ENV_PORT = "FTP_PORT"
ENV_TIMEOUT = "FTP_TIMEOUT"
ENV_SECURE = "FTP_SECURE"
ENV_UPLOAD_PATH = "UPLOAD_PATH"
ENV_PROFILE = "FTPRELAY_PROFILE"

_TRUTHY = ("true", "1", "yes")


def _as_bool(value: Any, default: bool) -> bool:
    """Read a YAML flag that may have been written as a quoted string."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


# =============================================================================
# Profile
# =============================================================================


@dataclass
class Profile:
    """Connection profile for one remote FTP store."""

    host: str
    port: int = DEFAULT_FTP_PORT
    username: Optional[str] = None
    password: Optional[str] = None
    timeout: int = DEFAULT_FTP_TIMEOUT_SECONDS
    secure: bool = False
    passive: bool = True
    upload_path: str = DEFAULT_UPLOAD_PATH

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization.

        The password is never written out; it belongs in ``FTP_PASSWORD``.
        """
        data: dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "timeout": self.timeout,
            "secure": self.secure,
            "passive": self.passive,
            "upload_path": self.upload_path,
        }
        if self.username:
            data["username"] = self.username
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        """Create from dictionary."""
        return cls(
            host=data.get("host", ""),
            port=int(data.get("port", DEFAULT_FTP_PORT)),
            username=data.get("username"),
            password=data.get("password"),
            timeout=int(data.get("timeout", DEFAULT_FTP_TIMEOUT_SECONDS)),
            secure=_as_bool(data.get("secure"), False),
            passive=_as_bool(data.get("passive"), True),
            upload_path=data.get("upload_path", DEFAULT_UPLOAD_PATH),
        )


# =============================================================================
# Config
# =============================================================================


@dataclass
class Config:
    """Application configuration."""

    default_profile: str = "default"
    output_format: str = "table"
    profiles: dict[str, Profile] = field(default_factory=dict)

    @classmethod
    def load(cls, config_path: Optional[Path] = None, *, apply_env: bool = True) -> "Config":
        """Load config from file with environment variable overrides.

        Priority (highest to lowest):
        1. Environment variables
        2. Config file
        3. Defaults

        Args:
            config_path: Optional path to config file.
            apply_env: Overlay FTP_* environment variables. Disable when the
                result will be saved back to the file.

        Returns:
            Loaded configuration.

        Raises:
            ConfigurationError: If the file exists but cannot be parsed.
        """
        path = config_path or CONFIG_FILE
        config = cls()

        if path.exists():
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

                config.default_profile = data.get("default_profile", "default")
                config.output_format = data.get("output_format", "table")

                for name, pdata in (data.get("profiles") or {}).items():
                    config.profiles[name] = Profile.from_dict(pdata or {})
            except (OSError, yaml.YAMLError, TypeError, ValueError, AttributeError) as e:
                raise ConfigurationError(f"Failed to load config: {e}")

        if apply_env:
            config._apply_env_overrides()
        return config

    def _apply_env_overrides(self) -> None:
        """Overlay FTP_* environment variables onto the profiles."""
        if host := os.getenv(ENV_HOST):
            base = self.profiles.get("default")
            profile = Profile(host=host) if base is None else base
            profile.host = host
            self.profiles["default"] = profile

        if profile_name := os.getenv(ENV_PROFILE):
            self.default_profile = profile_name

        target = self.profiles.get(self.default_profile)
        if target is None:
            return

        port = os.getenv(ENV_PORT)
        if port:
            try:
                target.port = int(port)
            except ValueError:
                raise ConfigurationError("Invalid FTP port", field=ENV_PORT, value=port)

        timeout = os.getenv(ENV_TIMEOUT)
        if timeout:
            try:
                target.timeout = int(timeout)
            except ValueError:
                raise ConfigurationError("Invalid FTP timeout", field=ENV_TIMEOUT, value=timeout)

        if secure := os.getenv(ENV_SECURE):
            target.secure = secure.lower() in _TRUTHY

        if upload_path := os.getenv(ENV_UPLOAD_PATH):
            target.upload_path = upload_path

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save config to file (excludes passwords).

        Args:
            config_path: Optional path to config file.
        """
        path = config_path or CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "default_profile": self.default_profile,
            "output_format": self.output_format,
            "profiles": {name: p.to_dict() for name, p in self.profiles.items()},
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def get_profile(self, name: Optional[str] = None) -> Profile:
        """Get profile by name or default.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        name = name or self.default_profile
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        return self.profiles[name]

    def has_profile(self, name: str) -> bool:
        """Check if profile exists."""
        return name in self.profiles

    def add_profile(
        self,
        name: str,
        host: str,
        port: int = DEFAULT_FTP_PORT,
        username: Optional[str] = None,
        timeout: int = DEFAULT_FTP_TIMEOUT_SECONDS,
        secure: bool = False,
        upload_path: str = DEFAULT_UPLOAD_PATH,
    ) -> Profile:
        """Add or update a profile.

        Args:
            name: Profile name.
            host: FTP server host.
            port: FTP control port.
            username: Login user (password comes from the environment).
            timeout: Connect/command timeout in seconds.
            secure: Use explicit FTPS.
            upload_path: Base directory for uploaded files.

        Returns:
            Created profile.
        """
        profile = Profile(
            host=host,
            port=port,
            username=username,
            timeout=timeout,
            secure=secure,
            upload_path=upload_path,
        )
        self.profiles[name] = profile
        return profile

    def remove_profile(self, name: str) -> bool:
        """Remove a profile.

        Returns:
            True if removed, False if it didn't exist.
        """
        if name in self.profiles:
            del self.profiles[name]
            return True
        return False

    def set_default_profile(self, name: str) -> None:
        """Set the default profile.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        self.default_profile = name


def get_credentials(profile: Optional[Profile] = None) -> tuple[Optional[str], Optional[str]]:
    """Resolve login credentials.

    Environment variables win over values stored in the profile.

    Args:
        profile: Optional profile to fall back on.

    Returns:
        Tuple of (username, password).
    """
    username = os.getenv(ENV_USER) or (profile.username if profile else None)
    password = os.getenv(ENV_PASS) or (profile.password if profile else None)
    return username, password
