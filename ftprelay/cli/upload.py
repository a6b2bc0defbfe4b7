"""Upload commands for ftprelay."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import Optional

import click

from ftprelay.cli.common import Context, ExitCode, global_options, handle_errors
from ftprelay.core.config import DEFAULT_UPLOAD_PATH, Config
from ftprelay.core.output import (
    OutputFormat,
    create_progress,
    print_error,
    print_json,
    print_success,
    print_table,
    print_warning,
)
from ftprelay.core.validation import validate_day
from ftprelay.models.transfer import UploadProgress
from ftprelay.services.uploads import StagedFile, UploadService
from ftprelay.uploaders.common import derive_remote_path


@click.command("upload")
@click.argument("files", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--owner", required=True, help="Owner (user) id the files belong to")
@click.option("--submission", default=None, help="Submission id (generated if omitted)")
@click.option(
    "--name",
    "names",
    multiple=True,
    help="Original file name for each FILE, in order (defaults to the local name)",
)
@click.option(
    "--cleanup/--keep-local",
    default=False,
    help="Delete the local files after the upload attempt",
)
@global_options
@handle_errors
def upload(
    ctx: Context,
    files: tuple[Path, ...],
    owner: str,
    submission: Optional[str],
    names: tuple[str, ...],
    cleanup: bool,
) -> None:
    """Upload FILES for one submission to the remote store.

    Exits with code 6 when some files failed and 3 when no connection
    could be made.

    Example:
        ftprelay upload --owner u42 --submission s1 invoice.pdf photo.jpg
    """
    if names and len(names) != len(files):
        raise click.BadParameter("--name must be given once per file", param_hint="--name")

    staged = [
        StagedFile(local_path=file_path, original_name=names[i] if names else file_path.name)
        for i, file_path in enumerate(files)
    ]
    service = UploadService(ctx.get_session(), base_path=ctx.upload_path)

    show_progress = ctx.output_format == OutputFormat.TABLE and not ctx.quiet
    if show_progress:
        with create_progress() as progress:
            task = progress.add_task("Uploading", total=len(staged))

            def on_progress(update: UploadProgress) -> None:
                progress.update(task, completed=update.current)

            result = service.upload_submission(
                owner, submission, staged, cleanup=cleanup, progress_callback=on_progress
            )
    else:
        result = service.upload_submission(owner, submission, staged, cleanup=cleanup)

    batch = result.batch
    if ctx.output_format == OutputFormat.JSON:
        print_json(result.to_dict())
    elif ctx.quiet:
        for item in batch.successful:
            click.echo(item.remote_path)
    else:
        print_table(
            [s.to_dict() for s in batch.successful],
            ["local_path", "remote_path", "byte_size"],
            title=f"Submission {result.submission_id}",
            column_labels={"local_path": "Local", "remote_path": "Remote", "byte_size": "Bytes"},
        )
        if batch.failed:
            print_table(
                [f.to_dict() for f in batch.failed],
                ["local_path", "kind", "reason"],
                title="Failed",
                column_labels={"local_path": "Local", "kind": "Kind", "reason": "Reason"},
            )

    if batch.failed:
        print_warning(f"{batch.failure_count} of {batch.total_files} files failed to upload")
        sys.exit(ExitCode.PARTIAL_FAILURE)

    if not ctx.quiet and ctx.output_format == OutputFormat.TABLE:
        print_success(f"Uploaded {batch.success_count} files ({batch.total_bytes} bytes)")


@click.command("check")
@global_options
@handle_errors
def check(ctx: Context) -> None:
    """Check that the remote store is reachable."""
    session = ctx.get_session()
    ok = session.check_connection()

    if ctx.output_format == OutputFormat.JSON:
        print_json({"host": session.host, "port": session.port, "connected": ok})
    elif ok:
        print_success(f"FTP connection successful: {session.host}:{session.port}")
    else:
        print_error(f"FTP connection failed: {session.host}:{session.port}")

    if not ok:
        sys.exit(ExitCode.CONNECTION_ERROR)


@click.command("path")
@click.argument("owner")
@click.argument("submission")
@click.argument("file_name")
@click.option("--base", default=None, help="Remote base directory (default: profile upload_path)")
@click.option("--date", "day", default=None, help="Upload day YYYY-MM-DD (default: today, UTC)")
@handle_errors
def path_cmd(
    owner: str,
    submission: str,
    file_name: str,
    base: Optional[str],
    day: Optional[str],
) -> None:
    """Print the remote path a file would be stored under.

    Example:
        ftprelay path u42 s1 "my invoice.pdf"
    """
    if base is None:
        cfg = Config.load()
        base = (
            cfg.get_profile().upload_path
            if cfg.has_profile(cfg.default_profile)
            else DEFAULT_UPLOAD_PATH
        )

    today = date.fromisoformat(validate_day(day)) if day else None
    click.echo(derive_remote_path(owner, submission, file_name, base_path=base, today=today))
