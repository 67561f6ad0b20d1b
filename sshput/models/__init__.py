"""Data models for sshput.

Provides Pydantic models for transfer tasks and results, and dataclasses for
run progress tracking.
"""

from __future__ import annotations

from .base import BaseModel
from .progress import RunOutcome, RunPhase, UploadReport
from .transfer import (
    Credentials,
    ProgressEvent,
    TransferResult,
    TransferStatus,
    TransferTask,
)

__all__ = [
    # Base
    "BaseModel",
    # Transfer
    "Credentials",
    "TransferTask",
    "TransferResult",
    "TransferStatus",
    "ProgressEvent",
    # Progress
    "RunPhase",
    "RunOutcome",
    "UploadReport",
]
