"""Progress models for tracking upload runs.

Provides the run state machine phases and the aggregated run report.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from .transfer import TransferResult, TransferStatus


class RunPhase(Enum):
    """Phases of one upload run.

    IDLE -> CONNECTING -> UPLOADING -> CLOSING -> DONE, or
    CONNECTING -> FAILED when the connection cannot be established.
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    UPLOADING = "uploading"
    CLOSING = "closing"
    DONE = "done"
    FAILED = "failed"


class RunOutcome(Enum):
    """How an upload run ended."""

    COMPLETED = "completed"
    ABORTED = "aborted"
    NOT_CONFIGURED = "not_configured"


@dataclass
class UploadReport:
    """Ordered per-file results of one run plus how the run ended."""

    outcome: RunOutcome
    results: List[TransferResult] = field(default_factory=list)
    error: Optional[str] = None
    duration: float = 0.0

    def _count(self, status: TransferStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return self._count(TransferStatus.OK)

    @property
    def failed(self) -> int:
        return self._count(TransferStatus.ERROR)

    @property
    def skipped(self) -> int:
        return self._count(TransferStatus.SKIPPED)

    @property
    def aborted(self) -> bool:
        """Check if the run stopped before any file was attempted."""
        return self.outcome == RunOutcome.ABORTED

    @property
    def success(self) -> bool:
        """Check if the run completed without per-file errors."""
        return self.outcome == RunOutcome.COMPLETED and self.failed == 0

    @property
    def errors(self) -> List[str]:
        """Return ``path: message`` for every failed file."""
        return [
            f"{r.local_path}: {r.message}" for r in self.results if r.status == TransferStatus.ERROR
        ]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "outcome": self.outcome.value,
            "success": self.success,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "duration": round(self.duration, 3),
            "error": self.error,
            "results": [r.to_dict() for r in self.results],
        }
