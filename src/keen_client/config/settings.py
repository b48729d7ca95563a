"""Config – ProjectSettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from keen_client.errors import ConfigurationError

DEFAULT_SERVER_URL = "https://api.keen.io"
DEFAULT_API_VERSION = "3.0"


@dataclasses.dataclass(frozen=True)
class ProjectSettings:
    """Project id, API keys and service location for one client."""

    _prefix: ClassVar[str] = "KEEN"

    project_id: str
    master_key: str = ""
    write_key: str = ""
    read_key: str = ""
    server_url: str = DEFAULT_SERVER_URL
    api_version: str = DEFAULT_API_VERSION
    timeout: float = 10.0

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        if not self.project_id or not self.project_id.strip():
            raise ConfigurationError("A Project ID is required.")
        if not self.master_key.strip() and not self.write_key.strip():
            raise ConfigurationError("A Master or Write API key is required.")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout!r}")

    @property
    def project_url(self) -> str:
        return f"{self.server_url.rstrip('/')}/{self.api_version}/projects/{self.project_id}"

    def require_master_key(self, operation: str) -> str:
        if not self.master_key.strip():
            raise ConfigurationError(f"Master API key is required for {operation}")
        return self.master_key

    def require_write_key(self, operation: str) -> str:
        if not self.write_key.strip():
            raise ConfigurationError(f"Write API key is required for {operation}")
        return self.write_key

    def require_read_key(self, operation: str) -> str:
        """Read key, falling back to the master key which also grants reads."""
        key = self.read_key.strip() or self.master_key.strip()
        if not key:
            raise ConfigurationError(f"Read or Master API key is required for {operation}")
        return key

    def __repr__(self) -> str:
        return (
            f"ProjectSettings(project_id={self.project_id!r}, server_url={self.server_url!r}, "
            f"api_version={self.api_version!r})"
        )


__all__ = ["DEFAULT_API_VERSION", "DEFAULT_SERVER_URL", "ProjectSettings"]
