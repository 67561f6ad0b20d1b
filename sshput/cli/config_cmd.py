"""Config commands for sshput."""

from __future__ import annotations

import click

from sshput.cli.common import Context, ExitCode, global_options, handle_errors
from sshput.core.config import CONFIG_FILE, Config, ProfileStore
from sshput.core.constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_SSH_PORT
from sshput.core.exceptions import ValidationError
from sshput.core.output import (
    MASKED,
    OutputFormat,
    print_error,
    print_key_value,
    print_output,
    print_success,
)
from sshput.core.validation import (
    validate_host,
    validate_port,
    validate_remote_path,
    validate_timeout,
)


def _mask(secret: str) -> str:
    return MASKED if secret else "-"


# =============================================================================
# Interactive Configuration
# =============================================================================


def prompt_configuration(store: ProfileStore) -> bool:
    """Prompt for server, remote path, user and password, then save them.

    Current values are offered as defaults; the password is masked.

    Returns:
        True if the settings were saved, False if a value was invalid.
    """
    server = click.prompt(
        "SSH server hostname or IP address",
        default=store.get("server") or None,
    )
    path = click.prompt(
        "Remote base path",
        default=store.get("path") or None,
    )
    user = click.prompt(
        "SSH username",
        default=store.get("user") or None,
    )
    password = click.prompt(
        "SSH password",
        default=store.get("pass") or None,
        hide_input=True,
        show_default=False,
    )

    try:
        server = validate_host(server)
        path = validate_remote_path(path)
    except ValidationError as e:
        print_error(str(e))
        return False

    store.update({"server": server, "path": path, "user": user, "pass": password})
    return True


@click.command("configure")
@global_options
@handle_errors
def configure(ctx: Context) -> None:
    """Interactively set server, remote path, user and password.

    Example:
        sshput configure
        sshput configure --profile staging
    """
    store = ctx.get_store()

    if not prompt_configuration(store):
        raise SystemExit(ExitCode.GENERAL_ERROR)

    print_success(f"SSH configuration saved to {CONFIG_FILE}")


# =============================================================================
# Config Group
# =============================================================================


@click.group()
def config() -> None:
    """Manage sshput configuration."""
    pass


@config.command("show")
@click.option("--output", "-o", type=click.Choice(["json", "table"]), default="table")
def config_show(output: str) -> None:
    """Show current configuration (passwords masked)."""
    try:
        cfg = Config.load()
    except Exception as e:
        print_error(f"Failed to load config: {e}")
        raise SystemExit(1)

    if not cfg.profiles:
        print_error("No configuration found. Run 'sshput configure' first.")
        raise SystemExit(1)

    data = {
        "config_file": str(CONFIG_FILE),
        "default_profile": cfg.default_profile,
        "output_format": cfg.output_format,
        "profiles": list(cfg.profiles.keys()),
    }

    if output == "json":
        data["profile_details"] = {
            name: {**p.to_dict(), "pass": _mask(p.password)} for name, p in cfg.profiles.items()
        }
        print_output(data, format=OutputFormat.JSON)
        return

    print_key_value(data, title="Configuration")

    click.echo()
    for name, profile in cfg.profiles.items():
        marker = " (default)" if name == cfg.default_profile else ""
        click.echo(f"Profile: {name}{marker}")
        print_key_value(
            {
                "server": profile.server or "-",
                "port": profile.port,
                "path": profile.path or "-",
                "user": profile.user or "-",
                "password": _mask(profile.password),
                "timeout": f"{profile.timeout}s",
                "complete": profile.is_complete,
            },
        )
        click.echo()


@config.command("use-context")
@click.argument("profile")
def config_use_context(profile: str) -> None:
    """Switch the active profile.

    Example:
        sshput config use-context production
    """
    try:
        cfg = Config.load()
    except Exception as e:
        print_error(f"Failed to load config: {e}")
        raise SystemExit(1)

    if not cfg.has_profile(profile):
        print_error(f"Profile '{profile}' not found.")
        click.echo(f"Available profiles: {', '.join(cfg.profiles.keys())}")
        raise SystemExit(1)

    cfg.set_default_profile(profile)
    cfg.save()

    print_success(f"Switched to profile '{profile}'")


@config.command("current-context")
def config_current_context() -> None:
    """Show the current active profile."""
    try:
        cfg = Config.load()
    except Exception as e:
        print_error(f"Failed to load config: {e}")
        raise SystemExit(1)

    if not cfg.profiles:
        print_error("No configuration found.")
        raise SystemExit(1)

    click.echo(cfg.default_profile)


@config.command("add-profile")
@click.argument("name")
@click.option("--server", required=True, help="SSH server hostname or IP address")
@click.option("--path", "remote_path", required=True, help="Remote base path")
@click.option("--user", default="", help="SSH username")
@click.option("--password", default="", help="SSH password (prompted by 'configure' if omitted)")
@click.option("--port", default=DEFAULT_SSH_PORT, show_default=True, help="SSH port")
@click.option(
    "--timeout",
    default=DEFAULT_CONNECT_TIMEOUT,
    show_default=True,
    help="Connect timeout in seconds",
)
def config_add_profile(
    name: str,
    server: str,
    remote_path: str,
    user: str,
    password: str,
    port: int,
    timeout: int,
) -> None:
    """Add a new profile.

    Example:
        sshput config add-profile staging --server staging.example.com --path /var/www/app
    """
    try:
        server = validate_host(server)
        remote_path = validate_remote_path(remote_path)
        port = validate_port(port)
        timeout = validate_timeout(timeout)
    except ValidationError as e:
        print_error(str(e))
        raise SystemExit(1)

    cfg = Config.load()

    if cfg.has_profile(name):
        print_error(f"Profile '{name}' already exists.")
        raise SystemExit(1)

    cfg.add_profile(
        name=name,
        server=server,
        path=remote_path,
        user=user,
        password=password,
        port=port,
        timeout=timeout,
    )

    if len(cfg.profiles) == 1:
        cfg.set_default_profile(name)

    cfg.save()

    print_success(f"Profile '{name}' added")


@config.command("remove-profile")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def config_remove_profile(name: str, yes: bool) -> None:
    """Remove a profile.

    Example:
        sshput config remove-profile staging
    """
    cfg = Config.load()

    if not cfg.has_profile(name):
        print_error(f"Profile '{name}' not found.")
        raise SystemExit(1)

    if name == cfg.default_profile:
        print_error("Cannot remove the default profile. Switch to another profile first.")
        raise SystemExit(1)

    if not yes:
        click.confirm(f"Remove profile '{name}'?", abort=True)

    cfg.remove_profile(name)
    cfg.save()

    print_success(f"Profile '{name}' removed")

