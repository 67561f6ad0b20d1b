"""Pytest configuration and fixtures for sshput tests."""

from __future__ import annotations

import posixpath
import tempfile
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Generator
from unittest.mock import MagicMock

import pytest

from sshput.core.session import SFTPSession
from sshput.models.transfer import Credentials

ENV_VARS = (
    "SSHPUT_SERVER",
    "SSHPUT_PATH",
    "SSHPUT_USER",
    "SSHPUT_PASS",
    "SSHPUT_PORT",
    "SSHPUT_TIMEOUT",
    "SSHPUT_PROFILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's SSHPUT_* variables out of every test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_yaml() -> str:
    """Sample config YAML content."""
    return """
default_profile: test
output_format: table

profiles:
  test:
    server: h
    path: /var/www/app
    user: u
    pass: p

  production:
    server: www.example.com
    path: /srv/site
    user: deploy
    pass: secret
    port: 2222
    timeout: 30
"""


@pytest.fixture
def credentials() -> Credentials:
    """Credentials for scenario-style tests."""
    return Credentials(host="h", username="u", secret="p", remote_base_path="/var/www/app")


# =============================================================================
# SFTP Doubles
# =============================================================================


class FakeSFTP:
    """In-memory stand-in for paramiko.SFTPClient.

    Tracks directories, file contents, times and modes, and records every
    call. Failures are injected per path.
    """

    def __init__(self) -> None:
        self.dirs: set[str] = {"/"}
        self.files: dict[str, bytes] = {}
        self.times: dict[str, tuple[int, int]] = {}
        self.modes: dict[str, int] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_stat: set[str] = set()
        self.fail_mkdir: set[str] = set()
        self.fail_put: dict[str, Exception] = {}
        self.fail_utime: Exception | None = None
        self.fail_chmod: Exception | None = None
        self.closed = False

    def stat(self, path: str) -> Any:
        self.calls.append(("stat", path))
        if path in self.fail_stat:
            raise OSError("Failure")
        if path in self.dirs or path in self.files:
            return SimpleNamespace(st_mode=0o40755 if path in self.dirs else 0o100644)
        raise FileNotFoundError(2, "No such file", path)

    def mkdir(self, path: str, mode: int = 0o777) -> None:
        self.calls.append(("mkdir", path))
        if path in self.fail_mkdir:
            raise PermissionError(13, "Permission denied", path)
        if path in self.dirs:
            raise OSError("Failure")
        self.dirs.add(path)

    def put(self, localpath: str, remotepath: str) -> Any:
        self.calls.append(("put", remotepath))
        if remotepath in self.fail_put:
            raise self.fail_put[remotepath]
        if posixpath.dirname(remotepath) not in self.dirs:
            raise FileNotFoundError(2, "No such file", remotepath)
        with open(localpath, "rb") as f:
            self.files[remotepath] = f.read()
        return SimpleNamespace(st_size=len(self.files[remotepath]))

    def utime(self, path: str, times: tuple[int, int]) -> None:
        self.calls.append(("utime", path))
        if self.fail_utime is not None:
            raise self.fail_utime
        self.times[path] = times

    def chmod(self, path: str, mode: int) -> None:
        self.calls.append(("chmod", path))
        if self.fail_chmod is not None:
            raise self.fail_chmod
        self.modes[path] = mode

    def close(self) -> None:
        self.closed = True

    def ops(self, name: str) -> list[str]:
        """Paths passed to every call of one operation, in order."""
        return [path for op, path in self.calls if op == name]


@pytest.fixture
def fake_sftp() -> FakeSFTP:
    """Empty in-memory SFTP server."""
    return FakeSFTP()


@pytest.fixture
def session(fake_sftp: FakeSFTP) -> SFTPSession:
    """Open SFTPSession over the fake SFTP server and a mock SSH client."""
    return SFTPSession(MagicMock(name="SSHClient"), fake_sftp, "h")
