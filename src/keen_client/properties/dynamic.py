"""Dynamic global property values computed on demand."""
from __future__ import annotations

from typing import Any, Callable

from keen_client.errors import PropertyError

DynamicProvider = Callable[[], Any]
"""Zero-argument callable producing a fresh, non-null property value."""


def is_dynamic(value: Any) -> bool:
    """Property values are plain JSON data; anything callable is a provider."""
    return callable(value)


def resolve_dynamic(name: str, provider: DynamicProvider) -> Any:
    """Invoke *provider* once and return its value.

    Raises:
        PropertyError: the provider raised, or returned ``None``.
    """
    try:
        result = provider()
    except Exception as exc:
        raise PropertyError(
            f'Dynamic property "{name}" execution failure',
            property_name=name,
            cause=exc,
        ) from exc
    if result is None:
        raise PropertyError(f'Dynamic property "{name}" execution returned null', property_name=name)
    return result


__all__ = ["DynamicProvider", "is_dynamic", "resolve_dynamic"]
