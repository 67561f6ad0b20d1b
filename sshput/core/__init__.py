"""Core modules for sshput."""

from sshput.core.config import CONFIG_DIR, CONFIG_FILE, Config, Profile, ProfileStore
from sshput.core.exceptions import (
    AuthenticationError,
    ChannelError,
    ConfigurationError,
    ConnectionError,
    DirectoryError,
    IncompleteConfigurationError,
    NetworkError,
    OperationError,
    SSHPutError,
    TransferError,
    ValidationError,
)
from sshput.core.logging import LogContext, get_audit_logger, get_logger, setup_logging
from sshput.core.output import (
    OutputFormat,
    console,
    print_error,
    print_json,
    print_output,
    print_success,
    print_table,
    print_warning,
)
from sshput.core.session import SFTPSession, connect
from sshput.core.validation import (
    validate_host,
    validate_path_exists,
    validate_port,
    validate_remote_path,
    validate_timeout,
)

__all__ = [
    # Exceptions
    "SSHPutError",
    "ConfigurationError",
    "IncompleteConfigurationError",
    "ValidationError",
    "ConnectionError",
    "AuthenticationError",
    "NetworkError",
    "ChannelError",
    "OperationError",
    "DirectoryError",
    "TransferError",
    # Validation
    "validate_host",
    "validate_port",
    "validate_remote_path",
    "validate_timeout",
    "validate_path_exists",
    # Config
    "Config",
    "Profile",
    "ProfileStore",
    "CONFIG_DIR",
    "CONFIG_FILE",
    # Session
    "SFTPSession",
    "connect",
    # Output
    "OutputFormat",
    "print_output",
    "print_table",
    "print_json",
    "print_error",
    "print_warning",
    "print_success",
    "console",
    # Logging
    "get_logger",
    "get_audit_logger",
    "setup_logging",
    "LogContext",
]
