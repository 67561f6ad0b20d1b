"""Shared connection defaults for sshput."""

# Standard secure-shell port
DEFAULT_SSH_PORT = 22

# Seconds allowed for TCP connect, SSH banner and authentication
DEFAULT_CONNECT_TIMEOUT = 10
