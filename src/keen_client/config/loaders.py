"""Config – load ProjectSettings from KEEN_* variables or a .env file."""
from __future__ import annotations

import abc
import os
from collections.abc import Mapping
from typing import Any

from dotenv import dotenv_values

from keen_client.config.settings import ProjectSettings
from keen_client.errors import ConfigurationError

_KEY_SUFFIXES = ("MASTER_KEY", "WRITE_KEY", "READ_KEY")


class SettingsLoader(abc.ABC):
    """Port: load project settings from an external source."""

    @abc.abstractmethod
    def load(self) -> ProjectSettings: ...


class EnvSettingsLoader(SettingsLoader):
    """Build :class:`ProjectSettings` from ``KEEN_*`` variables.

    ``KEEN_PROJECT_ID`` is required. Blank values count as unset, so an
    exported-but-empty key does not shadow the defaults. ``KEEN_TIMEOUT``
    is seconds as a number.
    """

    def __init__(self, prefix: str = ProjectSettings._prefix, environ: Mapping[str, str] | None = None) -> None:
        self._prefix = prefix.upper()
        self._environ = environ

    def load(self) -> ProjectSettings:
        env = os.environ if self._environ is None else self._environ

        def read(suffix: str) -> str | None:
            value = env.get(f"{self._prefix}_{suffix}", "").strip()
            return value or None

        project_id = read("PROJECT_ID")
        if project_id is None:
            raise ConfigurationError(f"Required setting '{self._prefix}_PROJECT_ID' is missing")

        keys = {suffix.lower(): value for suffix in _KEY_SUFFIXES if (value := read(suffix)) is not None}
        if not keys.keys() & {"master_key", "write_key"}:
            raise ConfigurationError(
                f"One of '{self._prefix}_MASTER_KEY' or '{self._prefix}_WRITE_KEY' must be set"
            )

        location: dict[str, Any] = {}
        if (server_url := read("SERVER_URL")) is not None:
            location["server_url"] = server_url
        if (api_version := read("API_VERSION")) is not None:
            location["api_version"] = api_version

        timeout = read("TIMEOUT")
        if timeout is not None:
            try:
                location["timeout"] = float(timeout)
            except ValueError as exc:
                raise ConfigurationError(
                    f"Setting '{self._prefix}_TIMEOUT' has invalid value {timeout!r}: expected seconds",
                    cause=exc,
                ) from exc

        return ProjectSettings(project_id=project_id, **keys, **location)


class DotenvSettingsLoader(SettingsLoader):
    """Layer a ``.env`` file under the process environment.

    Variables already exported win unless *override* is set. The process
    environment itself is left untouched.
    """

    def __init__(self, env_file: str = ".env", override: bool = False, prefix: str = ProjectSettings._prefix) -> None:
        self._env_file = env_file
        self._override = override
        self._prefix = prefix

    def load(self) -> ProjectSettings:
        from_file = {k: v for k, v in dotenv_values(self._env_file).items() if v is not None}
        merged = {**os.environ, **from_file} if self._override else {**from_file, **os.environ}
        return EnvSettingsLoader(self._prefix, environ=merged).load()


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader"]
