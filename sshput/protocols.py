"""Interfaces between the upload engine and its host environment.

The engine only depends on these narrow contracts; the CLI supplies the
concrete implementations (YAML profiles, a workspace file list, and a Rich
console renderer).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, Sequence

from sshput.models.transfer import ProgressEvent

if TYPE_CHECKING:
    from sshput.uploaders.common import WorkspaceFile


class ConfigStore(Protocol):
    """Reads and writes the connection settings ``server``, ``path``, ``user``, ``pass``."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class OpenFileSource(Protocol):
    """Enumerates the files to upload, in upload order."""

    def list(self) -> Sequence["WorkspaceFile"]:
        ...


class ProgressSink(Protocol):
    """Receives one event before and one after each file transfer."""

    def report(self, event: ProgressEvent) -> None:
        ...
