"""SSH session management for sshput.

Opens one authenticated SSH connection, negotiates the SFTP sub-channel over
it and owns both until closed. Sessions are never pooled or reused across
upload runs.
"""

from __future__ import annotations

import logging
from contextlib import suppress
from typing import Any, Callable

import paramiko

from sshput.core.exceptions import AuthenticationError, ChannelError, NetworkError
from sshput.models.transfer import Credentials

logger = logging.getLogger(__name__)


# =============================================================================
# SFTPSession
# =============================================================================


class SFTPSession:
    """One SSH connection plus its SFTP sub-channel.

    Example:
        >>> with connect(credentials) as session:
        ...     session.sftp.stat("/var/www")
    """

    def __init__(
        self,
        client: paramiko.SSHClient,
        sftp: paramiko.SFTPClient,
        host: str,
    ) -> None:
        self.client = client
        self.sftp = sftp
        self.host = host
        self._closed = False

    @property
    def closed(self) -> bool:
        """Check if close() has already run."""
        return self._closed

    def close(self) -> None:
        """Close the SFTP channel and the SSH connection.

        Safe to call more than once; later calls do nothing.
        """
        if self._closed:
            return
        self._closed = True

        try:
            self.sftp.close()
        except Exception as e:
            logger.debug("Ignoring error closing SFTP channel to %s: %s", self.host, e)
        finally:
            self.client.close()
        logger.info("SSH connection to %s closed", self.host)

    def __enter__(self) -> SFTPSession:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"SFTPSession(host={self.host!r}, {state})"


# =============================================================================
# Connect
# =============================================================================


def connect(
    credentials: Credentials,
    *,
    client_factory: Callable[[], paramiko.SSHClient] = paramiko.SSHClient,
) -> SFTPSession:
    """Open an SSH connection and start SFTP over it.

    Authentication is username/password only. Connection attempts are never
    retried here.

    Args:
        credentials: Host, user, password and port to connect with.
        client_factory: Builds the SSH client (overridable in tests).

    Returns:
        Open SFTPSession.

    Raises:
        AuthenticationError: If the server rejects the credentials.
        NetworkError: If the host is unreachable, times out, or the SSH
            handshake fails.
        ChannelError: If the SFTP subsystem cannot be started. The SSH
            connection is closed before this is raised.
    """
    host = credentials.host
    client = client_factory()

    # System known_hosts may not exist
    with suppress(OSError):
        client.load_system_host_keys()
    client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

    logger.debug(
        "Connecting to %s:%d as %s (timeout %ss)",
        host,
        credentials.port,
        credentials.username,
        credentials.connect_timeout,
    )

    try:
        client.connect(
            hostname=host,
            port=credentials.port,
            username=credentials.username,
            password=credentials.secret,
            timeout=credentials.connect_timeout,
            banner_timeout=credentials.connect_timeout,
            auth_timeout=credentials.connect_timeout,
            allow_agent=False,
            look_for_keys=False,
        )
    except paramiko.AuthenticationException as e:
        client.close()
        raise AuthenticationError(host, str(e) or "credentials rejected") from e
    except (paramiko.SSHException, OSError) as e:
        client.close()
        raise NetworkError(host, str(e) or type(e).__name__) from e

    logger.info("SSH connection established to %s", host)

    try:
        sftp = client.open_sftp()
    except (paramiko.SSHException, OSError) as e:
        client.close()
        raise ChannelError(host, str(e) or type(e).__name__) from e

    logger.info("SFTP session started on %s", host)
    return SFTPSession(client, sftp, host)
