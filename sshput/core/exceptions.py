"""Exception hierarchy for sshput.

Provides typed exceptions for different failure modes with clear error messages.
"""

from __future__ import annotations

from typing import Any


class SSHPutError(Exception):
    """Base exception for all sshput errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SSHPutError):
    """Error in configuration (missing, invalid, or malformed)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ProfileNotFoundError(ConfigurationError):
    """Requested profile does not exist."""

    def __init__(self, profile: str):
        super().__init__(f"Profile not found: {profile}", field="profile", value=profile)
        self.profile = profile


class IncompleteConfigurationError(ConfigurationError):
    """One or more required connection settings are empty."""

    def __init__(self, missing: list[str]):
        super().__init__(f"SSH configuration is incomplete, missing: {', '.join(missing)}")
        self.missing = missing


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(SSHPutError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidHostError(ValidationError):
    """Invalid hostname or IP address."""

    def __init__(self, host: str, reason: str = ""):
        msg = f"Invalid host: {host}"
        if reason:
            msg = f"{msg} - {reason}"
        super().__init__(msg, field="host", value=host)
        self.host = host
        self.reason = reason


class InvalidPortError(ValidationError):
    """Invalid port number."""

    def __init__(self, port: Any):
        super().__init__(
            f"Invalid port: {port} (must be 1-65535)",
            field="port",
            value=port,
        )
        self.port = port


class PathValidationError(ValidationError):
    """Path validation failed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path: {path} - {reason}", field="path", value=path)
        self.path = path
        self.reason = reason


# =============================================================================
# Connection Errors
# =============================================================================


class ConnectionError(SSHPutError):
    """Base class for connection-related errors.

    Fatal to an upload run: no file is attempted once connecting fails.
    """

    def __init__(self, message: str, host: str | None = None):
        details = {"host": host} if host else {}
        super().__init__(message, details)
        self.host = host


class AuthenticationError(ConnectionError):
    """SSH authentication was rejected."""

    def __init__(self, host: str | None = None, reason: str = ""):
        msg = "Authentication failed"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, host)
        self.reason = reason


class NetworkError(ConnectionError):
    """Transport-level error (DNS, TCP, SSH handshake, timeout)."""

    def __init__(self, host: str, cause: str | None = None):
        msg = f"SSH connection error to {host}"
        if cause:
            msg = f"{msg}: {cause}"
        super().__init__(msg, host)
        self.cause = cause


class ChannelError(ConnectionError):
    """The SFTP sub-channel could not be negotiated."""

    def __init__(self, host: str, cause: str | None = None):
        msg = "Failed to start SFTP"
        if cause:
            msg = f"{msg}: {cause}"
        super().__init__(msg, host)
        self.cause = cause


# =============================================================================
# Operation Errors
# =============================================================================


class OperationError(SSHPutError):
    """Error during an operation."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        full_details = {"operation": operation}
        if details:
            full_details.update(details)
        super().__init__(message, full_details)
        self.operation = operation


class DirectoryError(OperationError):
    """A remote directory could not be prepared."""

    def __init__(self, remote_path: str, cause: str | None = None):
        msg = f"Cannot prepare remote directory {remote_path}"
        if cause:
            msg = f"{msg}: {cause}"
        super().__init__("mkdir", msg, {"remote": remote_path})
        self.remote_path = remote_path
        self.cause = cause


class TransferError(OperationError):
    """Copying one file to the remote host failed.

    Isolated to that file: the batch continues with the next task.
    """

    def __init__(
        self,
        local_path: str,
        remote_path: str,
        cause: str,
    ):
        super().__init__("upload", cause, {"file": local_path})
        self.local_path = local_path
        self.remote_path = remote_path
        self.cause = cause
