"""Logging utilities for sshput.

Console logging setup, timed operation contexts, and the upload audit trail.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Generator, Optional

# =============================================================================
# Constants
# =============================================================================

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
AUDIT_LOGGER_NAME = "sshput.audit"

# Third-party loggers that are chatty below WARNING
NOISY_LOGGERS = ("paramiko", "paramiko.transport", "paramiko.sftp")


# =============================================================================
# Logger Setup
# =============================================================================


def setup_logging(
    level: int = logging.WARNING,
    *,
    quiet: bool = False,
    verbose: bool = False,
) -> None:
    """Configure stderr logging for the CLI.

    Args:
        level: Base logging level.
        quiet: Only show errors.
        verbose: Show debug messages from sshput (paramiko stays at WARNING).
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module name."""
    return logging.getLogger(name)


# =============================================================================
# Log Context
# =============================================================================


class LogContext:
    """Time one operation and log its start and end.

    Example:
        >>> with LogContext("ping", server="deploy@www.example.com:/srv") as ctx:
        ...     do_work()
        ...     ctx.elapsed
    """

    def __init__(
        self,
        operation: str,
        logger: Optional[logging.Logger] = None,
        **context: Any,
    ):
        self.operation = operation
        self.logger = logger or get_logger(__name__)
        self.context = context
        self.start_time: Optional[datetime] = None

    @property
    def elapsed(self) -> float:
        """Seconds since the context was entered."""
        if self.start_time is None:
            return 0.0
        return (datetime.now() - self.start_time).total_seconds()

    def _describe(self) -> str:
        return ", ".join(f"{k}={v}" for k, v in self.context.items())

    def __enter__(self) -> "LogContext":
        self.start_time = datetime.now()
        self.logger.info("Starting %s (%s)", self.operation, self._describe())
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type:
            self.logger.error("%s failed after %.2fs: %s", self.operation, self.elapsed, exc_val)
        else:
            self.logger.info("%s completed in %.2fs", self.operation, self.elapsed)


@contextmanager
def log_context(
    operation: str,
    logger: Optional[logging.Logger] = None,
    **context: Any,
) -> Generator[LogContext, None, None]:
    """Functional form of LogContext."""
    with LogContext(operation, logger, **context) as ctx:
        yield ctx


# =============================================================================
# Audit Logger
# =============================================================================


class AuditLogger:
    """Writes one audit record per upload run to the ``sshput.audit`` logger.

    Records never contain the password.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(AUDIT_LOGGER_NAME)

    def log_operation(
        self,
        operation: str,
        *,
        server: Optional[str] = None,
        user: Optional[str] = None,
        remote_path: Optional[str] = None,
        success: bool = True,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """Record an operation against a server.

        Args:
            operation: Operation name, e.g. ``upload``.
            server: SSH server that was targeted.
            user: SSH username.
            remote_path: Remote base path.
            success: Whether the run completed without errors.
            details: Counts and outcome.
        """
        record: dict[str, Any] = {
            "timestamp": datetime.now().isoformat(),
            "operation": operation,
            "success": success,
        }
        target = {"server": server, "user": user, "remote_path": remote_path}
        record.update({k: v for k, v in target.items() if v})
        if details:
            record["details"] = details

        self.logger.log(logging.INFO if success else logging.WARNING, "AUDIT: %s", record)


def get_audit_logger() -> AuditLogger:
    """Return a new audit logger on the default audit channel."""
    return AuditLogger()
