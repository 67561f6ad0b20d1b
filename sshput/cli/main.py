"""Main CLI entry point for sshput."""

from __future__ import annotations

import click

from sshput import __author__, __version__
from sshput.cli.common import Context, global_options, handle_errors
from sshput.cli.config_cmd import config, configure
from sshput.cli.put import put

# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="sshput")
def cli() -> None:
    """sshput - Upload workspace files to a remote host over SFTP.

    Mirrors files under a local workspace root onto a remote base path,
    creating directories and keeping timestamps and permissions.

    Get started:

      sshput configure           # Set server, path, user, password

      sshput ping                # Check the connection

      sshput put src/app.py      # Upload files

    Use --help on any command for more information.
    """
    pass


# =============================================================================
# Register Commands
# =============================================================================

cli.add_command(config)
cli.add_command(configure)
cli.add_command(put)


# =============================================================================
# Top-Level Commands
# =============================================================================


@cli.command()
@global_options
@handle_errors
def ping(ctx: Context) -> None:
    """Check that the configured server accepts an SFTP session."""
    from sshput.core.output import OutputFormat, print_output, print_success
    from sshput.services.uploads import UploadService, credentials_from_store

    profile = ctx.get_profile()
    credentials = credentials_from_store(
        ctx.get_store(),
        port=profile.port,
        connect_timeout=profile.timeout,
    )
    result = UploadService().ping(credentials)

    if ctx.output_format == OutputFormat.JSON:
        print_output(result, format=OutputFormat.JSON)
        return

    print_success(f"Server reachable: {result['server']}:{result['port']}")
    print_output(
        {
            "status": result["status"],
            "user": result["user"],
            "latency": f"{result['latency_ms']}ms",
        },
        format=OutputFormat.TABLE,
    )


@cli.command()
def about() -> None:
    """Show program name, version and author."""
    click.echo(f"SSH Put {__version__} - developed by {__author__}")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
