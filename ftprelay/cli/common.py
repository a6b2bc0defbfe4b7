"""Common CLI utilities, decorators, and helpers."""

from __future__ import annotations

import sys
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

import click

from ftprelay.core.config import Config
from ftprelay.core.exceptions import (
    ConfigurationError,
    ConnectError,
    FtpRelayError,
    ProfileNotFoundError,
)
from ftprelay.core.logging import setup_logging
from ftprelay.core.output import OutputFormat, print_error
from ftprelay.core.session import TransferSession

F = TypeVar("F", bound=Callable[..., Any])


# =============================================================================
# Exit Codes
# =============================================================================


class ExitCode:
    """Standard exit codes."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    CONNECTION_ERROR = 3
    PARTIAL_FAILURE = 6


# =============================================================================
# Context Object
# =============================================================================


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[Config] = None
        self.session: Optional[TransferSession] = None
        self.profile_name: Optional[str] = None
        self.output_format: OutputFormat = OutputFormat.TABLE
        self.quiet: bool = False
        self.verbose: bool = False

    @property
    def upload_path(self) -> str:
        """Remote base directory of the active profile."""
        return self.get_profile().upload_path

    def get_profile(self):
        """Return the active profile.

        Raises:
            ConfigurationError: If no profile is configured.
        """
        if self.config is None:
            self.config = Config.load()
        try:
            return self.config.get_profile(self.profile_name)
        except ProfileNotFoundError:
            raise ConfigurationError(
                f"Profile '{self.profile_name or self.config.default_profile}' not found. "
                "Run 'ftprelay config init' or set FTP_HOST."
            )

    def get_session(self) -> TransferSession:
        """Get or create the transfer session for the active profile."""
        if self.session is None:
            self.session = TransferSession.from_profile(self.get_profile())
        return self.session

    def close(self) -> None:
        """Disconnect the session, if one was opened."""
        if self.session is not None:
            self.session.disconnect()


pass_context = click.make_pass_decorator(Context, ensure=True)


# =============================================================================
# Global Options
# =============================================================================


def global_options(f: F) -> F:
    """Add global options to a command."""

    @click.option(
        "--profile",
        "-p",
        envvar="FTPRELAY_PROFILE",
        help="Config profile to use",
    )
    @click.option(
        "--output",
        "-o",
        "output_format",
        type=click.Choice(["json", "table"]),
        default="table",
        help="Output format",
    )
    @click.option("--quiet", "-q", is_flag=True, help="Minimal output")
    @click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
    @pass_context
    @wraps(f)
    def wrapper(
        ctx: Context,
        profile: Optional[str],
        output_format: str,
        quiet: bool,
        verbose: bool,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """Populate context from global options and invoke the command."""
        ctx.profile_name = profile
        ctx.output_format = OutputFormat.from_string(output_format)
        ctx.quiet = quiet
        ctx.verbose = verbose

        setup_logging(quiet=quiet, verbose=verbose)

        if ctx.config is None:
            ctx.config = Config.load()

        try:
            return f(ctx, *args, **kwargs)
        finally:
            ctx.close()

    return wrapper  # type: ignore


# =============================================================================
# Destructive Operation Decorators
# =============================================================================


def confirm_destructive(message: str) -> Callable[[F], F]:
    """Require confirmation (or --dry-run) for destructive operations."""

    def decorator(f: F) -> F:
        @click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
        @click.option("--dry-run", is_flag=True, help="Preview without making changes")
        @wraps(f)
        def wrapper(*args: Any, yes: bool, dry_run: bool, **kwargs: Any) -> Any:
            """Handle yes/dry-run flags and invoke the command."""
            if dry_run:
                click.echo("[DRY-RUN] Preview mode - no changes will be made", err=True)
            elif not yes:
                click.confirm(message, abort=True)
            kwargs["dry_run"] = dry_run
            return f(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


# =============================================================================
# Error Handling
# =============================================================================


def handle_errors(f: F) -> F:
    """Print library errors and exit with a matching code."""

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except ConnectError as e:
            print_error(str(e))
            sys.exit(ExitCode.CONNECTION_ERROR)
        except FtpRelayError as e:
            print_error(str(e))
            sys.exit(ExitCode.GENERAL_ERROR)
        except click.ClickException:
            raise
        except OSError as e:
            print_error(f"Unexpected error: {e}")
            sys.exit(ExitCode.GENERAL_ERROR)

    return wrapper  # type: ignore
