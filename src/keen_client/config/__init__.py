"""Config – project settings and 12-factor loaders."""
from keen_client.config.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from keen_client.config.settings import DEFAULT_API_VERSION, DEFAULT_SERVER_URL, ProjectSettings

__all__ = [
    "DEFAULT_API_VERSION",
    "DEFAULT_SERVER_URL",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "ProjectSettings",
    "SettingsLoader",
]
