"""Global and dynamic event properties."""
from keen_client.properties.dynamic import DynamicProvider, is_dynamic, resolve_dynamic
from keen_client.properties.registry import GlobalPropertyRegistry

__all__ = ["DynamicProvider", "GlobalPropertyRegistry", "is_dynamic", "resolve_dynamic"]
