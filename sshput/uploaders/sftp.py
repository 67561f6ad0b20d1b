"""SFTP file transfer for sshput.

Provides the two per-file building blocks of an upload run:

- ``ensure_directory``: create every segment of a remote directory, best effort
- ``upload_file``: copy one file, then stamp its times and permission bits

These are internal implementation details. Use ``UploadService`` from
``sshput.services.uploads`` as the public API.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import paramiko

from sshput.core.exceptions import DirectoryError, TransferError
from sshput.uploaders.common import remote_parent, split_segments, to_remote_separators
from sshput.uploaders.constants import PERMISSION_MASK, REMOTE_SEPARATOR

if TYPE_CHECKING:
    from sshput.core.session import SFTPSession

logger = logging.getLogger(__name__)

# Errors raised by SFTPClient calls
SFTP_ERRORS = (OSError, paramiko.SSHException)


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


# =============================================================================
# Remote Path Materializer
# =============================================================================


def ensure_directory(session: "SFTPSession", remote_dir: str) -> None:
    """Make sure every segment of remote_dir exists as a directory.

    Each prefix is stat'ed and, if that fails, created. A failing mkdir is
    ignored: the directory may already exist or have been created
    concurrently, and a real permission problem surfaces when the file
    itself is written. Calling this twice with the same path is harmless.

    Args:
        session: Open SFTP session.
        remote_dir: Remote directory path. Always treated as absolute.

    Raises:
        DirectoryError: If the session is already closed.
    """
    if session.closed:
        raise DirectoryError(remote_dir, "session is closed")

    sftp = session.sftp
    current = ""
    for segment in split_segments(remote_dir):
        current = f"{current}{REMOTE_SEPARATOR}{segment}"
        try:
            sftp.stat(current)
            continue
        except SFTP_ERRORS:
            pass

        try:
            sftp.mkdir(current)
            logger.debug("Created remote directory %s", current)
        except SFTP_ERRORS as e:
            logger.debug("mkdir %s failed (ignored): %s", current, _describe(e))


# =============================================================================
# File Transfer Unit
# =============================================================================


def upload_file(session: "SFTPSession", local_path: str, remote_path: str) -> None:
    """Upload one file and preserve its timestamps and permission bits.

    Only the byte copy decides success. Failing to apply times or mode is
    logged as a warning.

    Args:
        session: Open SFTP session.
        local_path: Local file to read.
        remote_path: Remote destination path.

    Raises:
        TransferError: If the parent directory cannot be prepared or the copy
            fails.
    """
    remote_path = to_remote_separators(remote_path)

    try:
        ensure_directory(session, remote_parent(remote_path))
    except DirectoryError as e:
        raise TransferError(local_path, remote_path, e.message) from e

    try:
        session.sftp.put(local_path, remote_path)
    except SFTP_ERRORS as e:
        raise TransferError(local_path, remote_path, _describe(e)) from e

    preserve_metadata(session, local_path, remote_path)


def preserve_metadata(session: "SFTPSession", local_path: str, remote_path: str) -> None:
    """Copy access/modification times and rwx bits from local to remote.

    Never raises for SFTP or local stat failures.
    """
    try:
        st = os.stat(local_path)
    except OSError as e:
        logger.warning("Post-upload preservation failed for %s: %s", remote_path, _describe(e))
        return

    # SFTP v3 carries whole seconds
    times = (int(st.st_atime), int(st.st_mtime))
    try:
        session.sftp.utime(remote_path, times)
    except SFTP_ERRORS as e:
        logger.warning("Failed to preserve times for %s: %s", remote_path, _describe(e))

    mode = st.st_mode & PERMISSION_MASK
    try:
        session.sftp.chmod(remote_path, mode)
    except SFTP_ERRORS as e:
        logger.warning("Failed to set permissions for %s: %s", remote_path, _describe(e))
