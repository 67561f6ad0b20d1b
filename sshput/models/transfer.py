"""Transfer models: credentials, tasks, per-file results and progress events."""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from sshput.core.constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_SSH_PORT

from .base import BaseModel


class TransferStatus(str, Enum):
    """Outcome of one file transfer."""

    OK = "ok"
    ERROR = "error"
    SKIPPED = "skipped"


class Credentials(BaseModel):
    """Connection settings for one upload run.

    Treated as an opaque value; never persisted by the upload engine.
    """

    host: str = Field(..., min_length=1, description="SSH server hostname or IP")
    username: str = Field(..., min_length=1, description="SSH username")
    secret: str = Field(..., min_length=1, repr=False, description="SSH password")
    remote_base_path: str = Field(..., min_length=1, description="Remote base path")
    port: int = Field(DEFAULT_SSH_PORT, ge=1, le=65535)
    connect_timeout: float = Field(DEFAULT_CONNECT_TIMEOUT, gt=0)

    @property
    def target(self) -> str:
        """Return ``user@host:path`` for display."""
        return f"{self.username}@{self.host}:{self.remote_base_path}"


class TransferTask(BaseModel):
    """One local file and the remote path it is written to."""

    local_path: str
    remote_path: str
    relative_path: str = ""

    @property
    def display_path(self) -> str:
        """Path shown in progress output."""
        return self.relative_path or self.local_path


class TransferResult(BaseModel):
    """Outcome of one attempted TransferTask."""

    local_path: str
    remote_path: str
    status: TransferStatus
    message: str | None = None

    @classmethod
    def ok(cls, task: TransferTask) -> TransferResult:
        return cls(local_path=task.local_path, remote_path=task.remote_path, status=TransferStatus.OK)

    @classmethod
    def error(cls, task: TransferTask, message: str) -> TransferResult:
        return cls(
            local_path=task.local_path,
            remote_path=task.remote_path,
            status=TransferStatus.ERROR,
            message=message,
        )

    @classmethod
    def skipped(cls, task: TransferTask, message: str | None = None) -> TransferResult:
        return cls(
            local_path=task.local_path,
            remote_path=task.remote_path,
            status=TransferStatus.SKIPPED,
            message=message,
        )


class ProgressEvent(BaseModel):
    """Per-file progress notification.

    ``outcome`` is None when the file is about to be transferred.
    """

    index: int
    total: int
    relative_path: str
    outcome: TransferStatus | None = None
    message: str | None = None
