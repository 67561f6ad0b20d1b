"""sshput - Upload workspace files to a remote host over SFTP.

This package mirrors a set of local files onto an SSH server:
- Recreate the remote directory structure on demand
- Preserve modification/access times and permission bits
- Keep going when individual files fail, and report each outcome
"""

__version__ = "0.1.0"
__author__ = "Alejandro Flamerich"

from sshput.core.config import Config, Profile
from sshput.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    NetworkError,
    SSHPutError,
    TransferError,
    ValidationError,
)
from sshput.services.uploads import UploadService

__all__ = [
    "__version__",
    "UploadService",
    "Config",
    "Profile",
    "SSHPutError",
    "AuthenticationError",
    "ConfigurationError",
    "ConnectionError",
    "NetworkError",
    "TransferError",
    "ValidationError",
]
