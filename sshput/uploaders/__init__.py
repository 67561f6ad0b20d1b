"""SFTP upload building blocks for sshput.

This module provides the per-file pieces of an upload run:
- Remote path arithmetic and workspace file enumeration
- Remote directory materialization
- Single file transfer with timestamp and permission preservation

These are internal implementation details. Use `UploadService` from
`sshput.services.uploads` as the public API.
"""

from sshput.uploaders.common import (
    WorkspaceFile,
    WorkspaceFileSource,
    build_remote_path,
    build_tasks,
    collect_workspace_files,
    remote_parent,
    split_segments,
)
from sshput.uploaders.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_SSH_PORT,
    PERMISSION_MASK,
)
from sshput.uploaders.sftp import ensure_directory, preserve_metadata, upload_file

__all__ = [
    # Constants
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_SSH_PORT",
    "PERMISSION_MASK",
    # Common utilities
    "WorkspaceFile",
    "WorkspaceFileSource",
    "build_remote_path",
    "build_tasks",
    "collect_workspace_files",
    "remote_parent",
    "split_segments",
    # SFTP
    "ensure_directory",
    "preserve_metadata",
    "upload_file",
]
