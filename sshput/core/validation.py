"""Input validation for sshput.

Each validator returns the normalized value or raises a ValidationError subclass.
"""

from __future__ import annotations

import ipaddress
import re
from pathlib import Path
from typing import Any

from sshput.core.exceptions import (
    InvalidHostError,
    InvalidPortError,
    PathValidationError,
    ValidationError,
)

# RFC 1123 hostname label
_HOST_LABEL = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")


def validate_host(host: str) -> str:
    """Validate an SSH server hostname or IP address.

    Args:
        host: Hostname, IPv4 or IPv6 address.

    Returns:
        Stripped host.

    Raises:
        InvalidHostError: If host is empty or malformed.
    """
    host = (host or "").strip()
    if not host:
        raise InvalidHostError(host, "host cannot be empty")

    try:
        ipaddress.ip_address(host.strip("[]"))
        return host
    except ValueError:
        pass

    if len(host) > 253:
        raise InvalidHostError(host, "hostname too long")

    labels = host.rstrip(".").split(".")
    if not all(_HOST_LABEL.match(label) for label in labels):
        raise InvalidHostError(host, "not a valid hostname or IP address")

    return host


def validate_port(port: Any) -> int:
    """Validate a TCP port number.

    Raises:
        InvalidPortError: If port is not an integer in 1-65535.
    """
    try:
        value = int(port)
    except (TypeError, ValueError):
        raise InvalidPortError(port)
    if not 1 <= value <= 65535:
        raise InvalidPortError(port)
    return value


def validate_remote_path(path: str) -> str:
    """Validate a remote base path.

    Backslashes are normalized to forward slashes and a trailing slash is
    removed (except for the root).

    Raises:
        PathValidationError: If path is empty, relative, or contains NUL.
    """
    path = (path or "").strip().replace("\\", "/")
    if not path:
        raise PathValidationError(path, "remote path cannot be empty")
    if "\x00" in path:
        raise PathValidationError(path, "contains NUL byte")
    if not path.startswith("/"):
        raise PathValidationError(path, "remote path must be absolute")
    if len(path) > 1:
        path = path.rstrip("/")
    return path


def validate_timeout(timeout: Any) -> int:
    """Validate a timeout in seconds.

    Raises:
        ValidationError: If timeout is not a positive integer.
    """
    try:
        value = int(timeout)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid timeout: {timeout}", field="timeout", value=timeout)
    if value <= 0:
        raise ValidationError(
            f"Invalid timeout: {timeout} (must be positive)", field="timeout", value=timeout
        )
    return value


def validate_path_exists(path: str | Path, *, must_be_dir: bool = False) -> Path:
    """Validate that a local path exists.

    Raises:
        PathValidationError: If missing, or not a directory when required.
    """
    p = Path(path).expanduser()
    if not p.exists():
        raise PathValidationError(str(path), "does not exist")
    if must_be_dir and not p.is_dir():
        raise PathValidationError(str(path), "not a directory")
    return p
