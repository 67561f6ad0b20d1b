"""Service layer for sshput.

Provides the upload orchestration service.
"""

from __future__ import annotations

from .uploads import UploadService, credentials_from_store

__all__ = [
    "UploadService",
    "credentials_from_store",
]
