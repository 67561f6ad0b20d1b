"""Shared plumbing for sshput commands: context, global options, exit codes."""

from __future__ import annotations

import sys
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

import click

from sshput.core.config import Config, Profile, ProfileStore
from sshput.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    SSHPutError,
)
from sshput.core.logging import setup_logging
from sshput.core.output import OutputFormat, print_error

F = TypeVar("F", bound=Callable[..., Any])


# =============================================================================
# Exit Codes
# =============================================================================


class ExitCode:
    """Process exit codes shared by all commands."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    NOT_CONFIGURED = 2
    CONNECTION_ERROR = 3
    AUTH_ERROR = 4


# Most specific first; the first isinstance match wins
ERROR_EXIT_CODES: tuple[tuple[type[SSHPutError], int], ...] = (
    (AuthenticationError, ExitCode.AUTH_ERROR),
    (ConnectionError, ExitCode.CONNECTION_ERROR),
    (ConfigurationError, ExitCode.NOT_CONFIGURED),
    (SSHPutError, ExitCode.GENERAL_ERROR),
)


def exit_code_for(error: SSHPutError) -> int:
    """Return the exit code for an sshput error."""
    for exc_type, code in ERROR_EXIT_CODES:
        if isinstance(error, exc_type):
            return code
    return ExitCode.GENERAL_ERROR


# =============================================================================
# Context Object
# =============================================================================


class Context:
    """Per-invocation state: loaded config, chosen profile, output mode."""

    def __init__(self) -> None:
        self.config: Optional[Config] = None
        self.profile_name: Optional[str] = None
        self.output_format: OutputFormat = OutputFormat.TABLE
        self.quiet: bool = False
        self.verbose: bool = False

    def get_config(self) -> Config:
        if self.config is None:
            self.config = Config.load()
        return self.config

    def get_profile(self) -> Profile:
        """Return the active profile, or an empty one if it is not defined."""
        config = self.get_config()
        return config.profiles.get(self.profile_name or config.default_profile) or Profile()

    def get_store(self) -> ProfileStore:
        """Return the ConfigStore for the active profile."""
        return ProfileStore(self.get_config(), self.profile_name)


pass_context = click.make_pass_decorator(Context, ensure=True)


# =============================================================================
# Global Options
# =============================================================================


def global_options(f: F) -> F:
    """Add --profile, --output, --quiet and --verbose, then pass a Context."""

    @click.option(
        "--profile",
        "-p",
        envvar="SSHPUT_PROFILE",
        help="Connection profile (default: the config's default_profile)",
    )
    @click.option(
        "--output",
        "-o",
        "output_format",
        type=click.Choice(["json", "table"]),
        default="table",
        help="Output format",
    )
    @click.option("--quiet", "-q", is_flag=True, help="Print uploaded remote paths only")
    @click.option("--verbose", "-v", is_flag=True, help="Log debug detail to stderr")
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
        setup_logging(quiet=quiet, verbose=verbose)

        ctx.profile_name = profile
        ctx.output_format = OutputFormat.from_string(output_format)
        ctx.quiet = quiet
        ctx.verbose = verbose
        ctx.config = Config.load()

        return f(ctx, *args, **kwargs)

    return wrapper  # type: ignore


# =============================================================================
# Error Handling
# =============================================================================


def handle_errors(f: F) -> F:
    """Print sshput errors and exit with the matching ExitCode.

    Click's own exceptions pass through so usage errors keep exit code 2.
    """

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except SSHPutError as e:
            print_error(str(e))
            sys.exit(exit_code_for(e))
        except (click.ClickException, click.Abort):
            raise
        except Exception as e:
            print_error(f"Unexpected error: {e}")
            sys.exit(ExitCode.GENERAL_ERROR)

    return wrapper  # type: ignore
