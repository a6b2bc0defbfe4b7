"""Remote file commands for ftprelay."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from ftprelay.cli.common import Context, confirm_destructive, global_options, handle_errors
from ftprelay.core.output import OutputFormat, print_output, print_success
from ftprelay.services.files import RemoteFileService


def _service(ctx: Context) -> RemoteFileService:
    return RemoteFileService(ctx.get_session(), base_path=ctx.upload_path)


@click.command("ls")
@click.argument("remote_path", default="/")
@global_options
@handle_errors
def ls(ctx: Context, remote_path: str) -> None:
    """List a remote directory.

    Example:
        ftprelay ls /uploads/2024-05-01
    """
    entries = _service(ctx).list(remote_path)
    print_output(
        [e.to_dict() for e in entries],
        format=ctx.output_format,
        columns=["name", "type", "size", "modified_at"],
        column_labels={"modified_at": "Modified"},
        quiet=ctx.quiet,
        id_field="name",
    )


@click.command("get")
@click.argument("remote_path")
@click.argument("local_path", type=click.Path(dir_okay=False, path_type=Path), required=False)
@global_options
@handle_errors
def get(ctx: Context, remote_path: str, local_path: Optional[Path]) -> None:
    """Download REMOTE_PATH to LOCAL_PATH (default: its name in the current directory)."""
    target = local_path or Path(remote_path.rstrip("/").rsplit("/", 1)[-1])
    written = _service(ctx).download(remote_path, target)

    if ctx.output_format == OutputFormat.JSON:
        print_output(
            {"remote_path": remote_path, "local_path": str(target), "bytes": written},
            format=OutputFormat.JSON,
        )
    elif not ctx.quiet:
        print_success(f"Downloaded {remote_path} -> {target} ({written} bytes)")


@click.command("rm")
@click.argument("remote_path")
@confirm_destructive("Delete this remote file?")
@global_options
@handle_errors
def rm(ctx: Context, remote_path: str, dry_run: bool) -> None:
    """Delete a remote file."""
    if dry_run:
        click.echo(f"Would delete {remote_path}")
        return
    _service(ctx).delete(remote_path)
    if not ctx.quiet:
        print_success(f"Deleted {remote_path}")


@click.command("prune")
@click.option("--date", "day", default=None, help="Upload day YYYY-MM-DD (default: today, UTC)")
@confirm_destructive("Remove empty submission directories?")
@global_options
@handle_errors
def prune(ctx: Context, day: Optional[str], dry_run: bool) -> None:
    """Remove empty submission directories for one upload day."""
    summary = _service(ctx).prune_empty_dirs(day, dry_run=dry_run)

    if ctx.output_format == OutputFormat.JSON:
        print_output(summary.to_dict(), format=OutputFormat.JSON)
        return

    print_output(
        {
            "day": summary.day,
            "empty_found": summary.empty_found,
            "removed": summary.removed_count,
            "failed": len(summary.failed),
        },
        title="Prune summary" + (" (dry run)" if dry_run else ""),
    )
    if summary.failed:
        raise click.ClickException(f"Could not remove: {', '.join(summary.failed)}")
