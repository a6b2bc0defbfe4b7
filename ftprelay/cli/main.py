"""Main CLI entry point for ftprelay."""

from __future__ import annotations

import click

from ftprelay import __version__
from ftprelay.cli.config_cmd import config
from ftprelay.cli.files import get, ls, prune, rm
from ftprelay.cli.upload import check, path_cmd, upload


# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="ftprelay")
def cli() -> None:
    """ftprelay - relay uploaded files to a remote FTP store.

    Get started:

      ftprelay config init            # Create a connection profile

      ftprelay check                  # Verify the server answers

      ftprelay upload --owner u1 a.pdf

    Credentials come from FTP_USER / FTP_PASSWORD. Use --help on any
    command for more information.
    """
    pass


# =============================================================================
# Register Commands
# =============================================================================

cli.add_command(config)
cli.add_command(upload)
cli.add_command(check)
cli.add_command(path_cmd)
cli.add_command(ls)
cli.add_command(get)
cli.add_command(rm)
cli.add_command(prune)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
