"""Config commands for ftprelay."""

from __future__ import annotations

from typing import Optional

import click

from ftprelay.core.config import CONFIG_FILE, DEFAULT_UPLOAD_PATH, Config
from ftprelay.core.exceptions import FtpRelayError
from ftprelay.core.output import (
    OutputFormat,
    print_error,
    print_key_value,
    print_output,
    print_success,
)
from ftprelay.core.timeouts import DEFAULT_FTP_PORT, DEFAULT_FTP_TIMEOUT_SECONDS
from ftprelay.core.validation import validate_host, validate_port, validate_timeout


@click.group()
def config() -> None:
    """Manage ftprelay configuration."""
    pass


@config.command("init")
@click.option("--host", prompt="FTP host", help="FTP server host")
@click.option("--port", default=DEFAULT_FTP_PORT, show_default=True, help="FTP port")
@click.option("--username", default=None, help="FTP user (password goes in FTP_PASSWORD)")
@click.option("--timeout", default=DEFAULT_FTP_TIMEOUT_SECONDS, show_default=True, help="Seconds")
@click.option("--secure", is_flag=True, help="Use explicit FTPS")
@click.option("--upload-path", default=DEFAULT_UPLOAD_PATH, show_default=True,
              help="Remote base directory")
@click.option("--profile", default="default", help="Profile name")
@click.option("--force", is_flag=True, help="Overwrite an existing profile")
def config_init(
    host: str,
    port: int,
    username: Optional[str],
    timeout: int,
    secure: bool,
    upload_path: str,
    profile: str,
    force: bool,
) -> None:
    """Create or update a connection profile.

    Example:
        ftprelay config init --host ftp.example.org --username uploader
    """
    try:
        host = validate_host(host)
        port = validate_port(port)
        timeout = validate_timeout(timeout)
        cfg = Config.load(apply_env=False) if CONFIG_FILE.exists() else Config()
    except FtpRelayError as e:
        print_error(str(e))
        raise SystemExit(1)

    if cfg.has_profile(profile) and not force:
        print_error(f"Profile '{profile}' already exists. Use --force to overwrite.")
        raise SystemExit(1)

    cfg.add_profile(
        name=profile,
        host=host,
        port=port,
        username=username,
        timeout=timeout,
        secure=secure,
        upload_path=upload_path,
    )
    if len(cfg.profiles) == 1:
        cfg.default_profile = profile

    cfg.save()

    print_success(f"Configuration saved to {CONFIG_FILE}")
    print_key_value({"profile": profile, "host": host, "port": port, "upload_path": upload_path})


@config.command("show")
@click.option("--output", "-o", type=click.Choice(["json", "table"]), default="table")
def config_show(output: str) -> None:
    """Show current configuration (passwords are never shown)."""
    try:
        cfg = Config.load()
    except FtpRelayError as e:
        print_error(str(e))
        raise SystemExit(1)

    if not cfg.profiles:
        print_error("No configuration found. Run 'ftprelay config init' first.")
        raise SystemExit(1)

    if output == "json":
        print_output(
            {
                "config_file": str(CONFIG_FILE),
                "default_profile": cfg.default_profile,
                "profiles": {name: p.to_dict() for name, p in cfg.profiles.items()},
            },
            format=OutputFormat.JSON,
        )
        return

    print_key_value(
        {"config_file": str(CONFIG_FILE), "default_profile": cfg.default_profile},
        title="Configuration",
    )
    for name, p in cfg.profiles.items():
        marker = " (default)" if name == cfg.default_profile else ""
        click.echo()
        click.echo(f"Profile: {name}{marker}")
        print_key_value(
            {
                "host": p.host,
                "port": p.port,
                "username": p.username or "-",
                "timeout": f"{p.timeout}s",
                "secure": p.secure,
                "upload_path": p.upload_path,
            }
        )


@config.command("use-profile")
@click.argument("profile")
def config_use_profile(profile: str) -> None:
    """Set the default profile."""
    try:
        cfg = Config.load(apply_env=False)
        cfg.set_default_profile(profile)
        cfg.save()
    except FtpRelayError as e:
        print_error(str(e))
        raise SystemExit(1)
    print_success(f"Default profile set to '{profile}'")
