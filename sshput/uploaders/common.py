"""Common utilities for uploader modules.

Remote path arithmetic and local file enumeration.
"""

from __future__ import annotations

import logging
import os
import posixpath
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from sshput.core.validation import validate_path_exists
from sshput.models.transfer import TransferTask
from sshput.uploaders.constants import REMOTE_SEPARATOR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkspaceFile:
    """A local file and its path relative to the workspace root."""

    local_path: str
    relative_path: str


# =============================================================================
# Remote Paths
# =============================================================================


def to_remote_separators(path: str) -> str:
    """Replace backslashes with the remote separator."""
    return path.replace("\\", REMOTE_SEPARATOR)


def build_remote_path(remote_base_path: str, relative_path: str) -> str:
    """Join a relative workspace path onto the remote base path.

    Args:
        remote_base_path: Remote root, e.g. ``/var/www/app``.
        relative_path: Path relative to the workspace root, either separator.

    Returns:
        Remote absolute path using forward slashes.
    """
    base = to_remote_separators(remote_base_path)
    relative = to_remote_separators(relative_path).lstrip(REMOTE_SEPARATOR)
    return posixpath.normpath(posixpath.join(base, relative))


def remote_parent(remote_path: str) -> str:
    """Return the parent directory of a remote path."""
    return posixpath.dirname(to_remote_separators(remote_path))


def split_segments(remote_dir: str) -> list[str]:
    """Split a remote directory into its non-empty path segments."""
    return [part for part in to_remote_separators(remote_dir).split(REMOTE_SEPARATOR) if part]


def build_tasks(remote_base_path: str, files: Iterable[WorkspaceFile]) -> list[TransferTask]:
    """Build one TransferTask per workspace file, preserving order."""
    return [
        TransferTask(
            local_path=f.local_path,
            remote_path=build_remote_path(remote_base_path, f.relative_path),
            relative_path=to_remote_separators(f.relative_path),
        )
        for f in files
    ]


# =============================================================================
# Local Files
# =============================================================================


def collect_workspace_files(
    root: Path,
    paths: Sequence[str | Path],
    *,
    recursive: bool = True,
) -> list[WorkspaceFile]:
    """Resolve paths into workspace files relative to root.

    Directories are expanded (sorted, hidden entries skipped) when
    ``recursive`` is set. Duplicates, missing paths and anything outside the
    workspace root are skipped. Input order is preserved.

    Args:
        root: Workspace root directory.
        paths: Files or directories, absolute or relative to root.
        recursive: Expand directories into the files they contain.

    Returns:
        Ordered list of workspace files.

    Raises:
        PathValidationError: If root is not an existing directory.
    """
    root = validate_path_exists(root, must_be_dir=True).resolve()
    seen: set[Path] = set()
    files: list[WorkspaceFile] = []

    for raw in paths:
        candidate = Path(raw).expanduser()
        if not candidate.is_absolute():
            candidate = root / candidate

        if candidate.is_dir():
            if not recursive:
                logger.debug("Skipping directory %s", candidate)
                continue
            expanded = sorted(
                p for p in candidate.rglob("*") if p.is_file() and not _is_hidden(p, candidate)
            )
        else:
            expanded = [candidate]

        for path in expanded:
            resolved = path.resolve()
            if resolved in seen:
                continue
            if not resolved.is_file():
                logger.warning("Skipping %s: not a file", path)
                continue
            try:
                relative = resolved.relative_to(root)
            except ValueError:
                logger.warning("Skipping %s: outside workspace %s", path, root)
                continue

            seen.add(resolved)
            files.append(WorkspaceFile(local_path=str(resolved), relative_path=relative.as_posix()))

    return files


def _is_hidden(path: Path, base: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(base).parts)


class WorkspaceFileSource:
    """OpenFileSource over an explicit list of paths under a workspace root."""

    def __init__(self, root: Path, paths: Sequence[str | Path], *, recursive: bool = True) -> None:
        self.root = root
        self.paths = list(paths)
        self.recursive = recursive

    def list(self) -> list[WorkspaceFile]:
        return collect_workspace_files(self.root, self.paths, recursive=self.recursive)

    def __repr__(self) -> str:
        return f"WorkspaceFileSource(root={os.fspath(self.root)!r}, paths={len(self.paths)})"
