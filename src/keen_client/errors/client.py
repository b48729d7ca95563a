"""Client-side errors raised before any network activity."""

from __future__ import annotations

from typing import Any

from keen_client.errors.base import KeenError


class ConfigurationError(KeenError):
    """Missing or invalid credentials, settings or collaborators."""

    default_code = "configuration_error"


class NotConfiguredError(ConfigurationError):
    """An optional collaborator (such as the event cache) is not attached."""

    default_code = "not_configured"

    def __init__(self, component: str, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"{component} is not configured", **kwargs)
        self.component = component


class ValidationError(ConfigurationError):
    """A collection or property name does not meet the service's naming rules."""

    default_code = "validation_error"

    def __init__(self, message: str, *, name: Any = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.name = name

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["name"] = self.name
        return base


class PropertyError(KeenError):
    """A global property value is null, or its dynamic provider failed."""

    default_code = "property_error"

    def __init__(self, message: str, *, property_name: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.property_name = property_name

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["property_name"] = self.property_name
        return base


__all__ = ["ConfigurationError", "NotConfiguredError", "PropertyError", "ValidationError"]
