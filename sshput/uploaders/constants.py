"""Shared constants for uploader modules."""

from sshput.core.constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_SSH_PORT

# =============================================================================
# Remote Path Conventions
# =============================================================================

# SFTP paths always use forward slashes
REMOTE_SEPARATOR = "/"

# =============================================================================
# Metadata Preservation
# =============================================================================

# Owner/group/other rwx bits copied to the remote file
PERMISSION_MASK = 0o777

__all__ = [
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_SSH_PORT",
    "PERMISSION_MASK",
    "REMOTE_SEPARATOR",
]
