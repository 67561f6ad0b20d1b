"""Upload command for sshput."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, TaskID

from sshput.cli.common import Context, ExitCode, global_options, handle_errors
from sshput.cli.config_cmd import prompt_configuration
from sshput.core.output import (
    OutputFormat,
    console,
    create_progress,
    print_error,
    print_key_value,
    print_output,
    print_rule,
    print_success,
    print_table,
    print_warning,
)
from sshput.models.progress import RunOutcome, UploadReport
from sshput.models.transfer import ProgressEvent, TransferStatus
from sshput.services.uploads import UploadService
from sshput.uploaders.common import WorkspaceFileSource

RESULT_COLUMNS = ["status", "local_path", "remote_path", "message"]


# =============================================================================
# Progress Sink
# =============================================================================


class ConsoleProgressSink:
    """Render per-file progress events to the console.

    Prints one line per file and its outcome, and advances an optional
    Rich progress bar.
    """

    def __init__(
        self,
        out: Console = console,
        progress: Optional[Progress] = None,
        task_id: Optional[TaskID] = None,
    ) -> None:
        self.out = progress.console if progress is not None else out
        self.progress = progress
        self.task_id = task_id

    def report(self, event: ProgressEvent) -> None:
        position = f"[{event.index}/{event.total}]"
        name = escape(event.relative_path)

        if event.outcome is None:
            self.out.print(f"{position} Uploading: {name}")
            if self.progress is not None and self.task_id is not None:
                self.progress.update(
                    self.task_id,
                    total=event.total,
                    description=f"{position} {escape(Path(event.relative_path).name)}",
                )
            return

        if event.outcome == TransferStatus.OK:
            self.out.print("  [green]✓ Done[/green]")
        elif event.outcome == TransferStatus.SKIPPED:
            self.out.print(f"  [yellow]- Skipped[/yellow] {escape(event.message or '')}")
        else:
            self.out.print(f"  [red]✗ Error:[/red] {escape(event.message or 'unknown error')}")

        if self.progress is not None and self.task_id is not None:
            self.progress.advance(self.task_id)


# =============================================================================
# Reporting
# =============================================================================


def print_summary(report: UploadReport) -> None:
    """Print the totals table for a completed run."""
    print_rule("Upload Summary")
    print_key_value(
        {
            "total_files": report.total,
            "uploaded": report.succeeded,
            "failed": report.failed,
            "skipped": report.skipped,
            "duration": f"{report.duration:.2f}s",
        }
    )
    print_rule()


def _print_results(report: UploadReport) -> None:
    failed = [r.to_dict() for r in report.results if r.status != TransferStatus.OK]
    if failed:
        print_table(failed, RESULT_COLUMNS, title="Files not uploaded")


# =============================================================================
# Put Command
# =============================================================================


@click.command("put")
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Workspace root; remote paths mirror paths relative to it",
)
@click.option(
    "--no-recursive",
    is_flag=True,
    help="Skip directories instead of uploading their contents",
)
@click.option(
    "--no-prompt",
    is_flag=True,
    help="Fail instead of offering to configure when settings are incomplete",
)
@global_options
@handle_errors
def put(
    ctx: Context,
    paths: tuple[str, ...],
    root: Path,
    no_recursive: bool,
    no_prompt: bool,
) -> None:
    """Upload files to the configured SSH server over SFTP.

    Each file is written to <remote base path>/<path relative to --root>,
    creating remote directories as needed and keeping times and permissions.
    A failing file does not stop the others.

    Example:
        sshput put src/index.php src/lib
        sshput put --root ~/site public/app.js -o json
    """
    store = ctx.get_store()
    profile = store.profile
    show_details = ctx.output_format == OutputFormat.TABLE and not ctx.quiet

    missing = profile.missing_fields()
    if missing and not no_prompt:
        print_warning("SSH configuration is incomplete. Please configure SSH settings.")
        if click.confirm("Configure now?", default=True):
            prompt_configuration(store)

    if show_details and profile.is_complete:
        print_rule("SSH Put - Upload Files")
        print_key_value(
            {
                "server": profile.server,
                "remote_base_path": profile.path,
                "user": profile.user,
            }
        )
        print_rule()

    source = WorkspaceFileSource(root, paths, recursive=not no_recursive)
    service = UploadService()

    if show_details:
        with create_progress() as progress:
            task_id = progress.add_task("Connecting...", total=None)
            sink = ConsoleProgressSink(progress=progress, task_id=task_id)
            report = service.put(
                store,
                source,
                progress=sink,
                port=profile.port,
                connect_timeout=profile.timeout,
            )
    else:
        report = service.put(
            store,
            source,
            port=profile.port,
            connect_timeout=profile.timeout,
        )

    _finish(ctx, report)


def _finish(ctx: Context, report: UploadReport) -> None:
    """Print the outcome of a run and exit with the matching code."""
    if ctx.output_format == OutputFormat.JSON:
        print_output(report.to_dict(), format=OutputFormat.JSON)

    if report.outcome == RunOutcome.NOT_CONFIGURED:
        print_error(f"{report.error}. Run 'sshput configure' first.")
        raise SystemExit(ExitCode.NOT_CONFIGURED)

    if report.outcome == RunOutcome.ABORTED:
        print_error(f"SSH upload failed: {report.error}")
        raise SystemExit(ExitCode.CONNECTION_ERROR)

    if ctx.output_format == OutputFormat.TABLE and ctx.quiet:
        print_output(
            [r.to_dict() for r in report.results if r.status == TransferStatus.OK],
            quiet=True,
        )
    elif ctx.output_format == OutputFormat.TABLE:
        if report.total == 0:
            print_warning("No workspace files to upload")
            return
        print_summary(report)
        _print_results(report)

    if report.failed:
        if ctx.output_format == OutputFormat.TABLE and not ctx.quiet:
            print_warning(
                f"Upload completed with errors: {report.succeeded} succeeded, "
                f"{report.failed} failed"
            )
        raise SystemExit(ExitCode.GENERAL_ERROR)

    if ctx.output_format == OutputFormat.TABLE and not ctx.quiet:
        print_success(f"Successfully uploaded {report.succeeded} file(s)")
