"""Configuration management for sshput.

Supports YAML profiles and environment variable overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from sshput.core.constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_SSH_PORT
from sshput.core.exceptions import ConfigurationError, ProfileNotFoundError

# =============================================================================
# Constants
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "sshput"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Environment variable names
ENV_SERVER = "SSHPUT_SERVER"
ENV_PATH = "SSHPUT_PATH"
ENV_USER = "SSHPUT_USER"
ENV_PASS = "SSHPUT_PASS"
ENV_PORT = "SSHPUT_PORT"
ENV_TIMEOUT = "SSHPUT_TIMEOUT"
ENV_PROFILE = "SSHPUT_PROFILE"

# Keys understood by ConfigStore.get/set, in prompt order
CONFIG_KEYS = ("server", "path", "user", "pass")


# =============================================================================
# Profile
# =============================================================================


@dataclass
class Profile:
    """Connection profile for one SSH server."""

    server: str = ""
    path: str = ""
    user: str = ""
    password: str = ""
    port: int = DEFAULT_SSH_PORT
    timeout: int = DEFAULT_CONNECT_TIMEOUT

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "server": self.server,
            "path": self.path,
            "user": self.user,
            "pass": self.password,
            "port": self.port,
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        """Create from dictionary."""
        return cls(
            server=data.get("server") or "",
            path=data.get("path") or "",
            user=data.get("user") or "",
            password=str(data.get("pass") or ""),
            port=int(data.get("port", DEFAULT_SSH_PORT)),
            timeout=int(data.get("timeout", DEFAULT_CONNECT_TIMEOUT)),
        )

    def missing_fields(self) -> list[str]:
        """Return the required settings that are empty."""
        values = {
            "server": self.server,
            "path": self.path,
            "user": self.user,
            "pass": self.password,
        }
        return [key for key in CONFIG_KEYS if not values[key]]

    @property
    def is_complete(self) -> bool:
        """Check that server, path, user and password are all set."""
        return not self.missing_fields()


# =============================================================================
# Config
# =============================================================================


@dataclass
class Config:
    """Application configuration.

    Environment overrides are applied in memory only. ``save()`` writes the
    file-loaded values back for every override that was not explicitly
    changed afterwards.
    """

    default_profile: str = "default"
    output_format: str = "table"
    profiles: dict[str, Profile] = field(default_factory=dict)

    # Env overlay: target profile, {attr: (file value, env value)}, whether
    # the profile exists only because of env, and the file's default profile
    _env_profile: Optional[str] = field(default=None, init=False, repr=False, compare=False)
    _env_values: dict[str, tuple[Any, Any]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _env_created: bool = field(default=False, init=False, repr=False, compare=False)
    _file_default_profile: Optional[str] = field(
        default=None, init=False, repr=False, compare=False
    )

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load config from file with environment variable overrides.

        Priority (highest to lowest):
        1. Environment variables
        2. Config file
        3. Defaults

        Args:
            config_path: Optional path to config file.

        Returns:
            Loaded configuration.
        """
        path = config_path or CONFIG_FILE
        config = cls()

        if path.exists():
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

                config.default_profile = data.get("default_profile", "default")
                config.output_format = data.get("output_format", "table")

                for name, pdata in (data.get("profiles") or {}).items():
                    config.profiles[name] = Profile.from_dict(pdata or {})
            except Exception as e:
                raise ConfigurationError(f"Failed to load config: {e}")

        if profile := os.getenv(ENV_PROFILE):
            config._file_default_profile = config.default_profile
            config.default_profile = profile

        config._apply_env_overrides()
        return config

    def _apply_env_overrides(self) -> None:
        """Overlay SSHPUT_* variables onto the active profile."""
        overrides = {
            "server": os.getenv(ENV_SERVER),
            "path": os.getenv(ENV_PATH),
            "user": os.getenv(ENV_USER),
            "password": os.getenv(ENV_PASS),
        }
        port = os.getenv(ENV_PORT)
        timeout = os.getenv(ENV_TIMEOUT)

        values: dict[str, Any] = {attr: v for attr, v in overrides.items() if v}
        try:
            if port:
                values["port"] = int(port)
            if timeout:
                values["timeout"] = int(timeout)
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric environment override: {e}")

        if not values:
            return

        self._env_profile = self.default_profile
        self._env_created = self.default_profile not in self.profiles
        profile = self.profiles.setdefault(self.default_profile, Profile())
        for attr, value in values.items():
            self._env_values[attr] = (getattr(profile, attr), value)
            setattr(profile, attr, value)

    def _stored_profile(self, name: str, profile: Profile) -> Optional[Profile]:
        """Return the profile as it belongs on disk, or None to omit it."""
        if name != self._env_profile or not self._env_values:
            return profile

        restored = replace(
            profile,
            **{
                attr: file_value
                for attr, (file_value, env_value) in self._env_values.items()
                if getattr(profile, attr) == env_value
            },
        )
        if self._env_created and restored == Profile():
            return None
        return restored

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save config to file.

        The password is stored in plain text, readable only by the owner.
        SSHPUT_* overrides are not written.

        Args:
            config_path: Optional path to config file.
        """
        path = config_path or CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)

        profiles = {}
        for name, profile in self.profiles.items():
            stored = self._stored_profile(name, profile)
            if stored is not None:
                profiles[name] = stored.to_dict()

        data = {
            "default_profile": self._file_default_profile or self.default_profile,
            "output_format": self.output_format,
            "profiles": profiles,
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        os.chmod(path, 0o600)

    def get_profile(self, name: Optional[str] = None) -> Profile:
        """Get profile by name or default.

        Args:
            name: Profile name. If None, uses default_profile.

        Returns:
            Profile configuration.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        name = name or self.default_profile
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        return self.profiles[name]

    def has_profile(self, name: str) -> bool:
        """Check if profile exists."""
        return name in self.profiles

    def add_profile(
        self,
        name: str,
        server: str,
        path: str,
        user: str = "",
        password: str = "",
        port: int = DEFAULT_SSH_PORT,
        timeout: int = DEFAULT_CONNECT_TIMEOUT,
    ) -> Profile:
        """Add or update a profile.

        Args:
            name: Profile name.
            server: SSH server hostname or IP address.
            path: Remote base path.
            user: SSH username.
            password: SSH password.
            port: SSH port.
            timeout: Connect timeout in seconds.

        Returns:
            Created profile.
        """
        profile = Profile(
            server=server,
            path=path,
            user=user,
            password=password,
            port=port,
            timeout=timeout,
        )
        self.profiles[name] = profile
        self._drop_env_overlay(name)
        return profile

    def update_profile(self, name: str, **values: Any) -> Profile:
        """Set attributes on a profile, creating it if needed.

        Explicitly set values are saved even where an env override applied.

        Args:
            name: Profile name.
            **values: Profile attributes to set.

        Returns:
            Updated profile.
        """
        profile = self.profiles.setdefault(name, Profile())
        for attr, value in values.items():
            setattr(profile, attr, value)
        if name == self._env_profile:
            for attr in values:
                self._env_values.pop(attr, None)
            self._env_created = False
        return profile

    def _drop_env_overlay(self, name: str) -> None:
        if name == self._env_profile:
            self._env_profile = None
            self._env_values.clear()
            self._env_created = False

    def remove_profile(self, name: str) -> bool:
        """Remove a profile.

        Args:
            name: Profile name.

        Returns:
            True if removed, False if didn't exist.
        """
        if name in self.profiles:
            del self.profiles[name]
            self._drop_env_overlay(name)
            return True
        return False

    def set_default_profile(self, name: str) -> None:
        """Set the default profile.

        Args:
            name: Profile name to set as default.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        self.default_profile = name
        self._file_default_profile = None


# =============================================================================
# ConfigStore
# =============================================================================


class ProfileStore:
    """Key/value view of one profile, persisted through Config.save().

    Keys are ``server``, ``path``, ``user`` and ``pass``.
    """

    _ATTRS = {"server": "server", "path": "path", "user": "user", "pass": "password"}

    def __init__(
        self,
        config: Config,
        profile_name: Optional[str] = None,
        config_path: Optional[Path] = None,
    ) -> None:
        self.config = config
        self.profile_name = profile_name or config.default_profile
        self.config_path = config_path

    @property
    def profile(self) -> Profile:
        """The backing profile, created empty on first access."""
        return self.config.profiles.setdefault(self.profile_name, Profile())

    def get(self, key: str) -> Optional[str]:
        """Return the value for key, or None when unset."""
        value = getattr(self.profile, self._attr(key))
        return value or None

    def set(self, key: str, value: str) -> None:
        """Update key and write the config file."""
        self.update({key: value})

    def update(self, values: dict[str, str]) -> None:
        """Update several keys, then write the config file once."""
        attrs = {self._attr(key): value for key, value in values.items()}
        self.config.update_profile(self.profile_name, **attrs)
        self.config.save(self.config_path)

    def _attr(self, key: str) -> str:
        try:
            return self._ATTRS[key]
        except KeyError:
            raise ConfigurationError(f"Unknown configuration key: {key}", field=key)

