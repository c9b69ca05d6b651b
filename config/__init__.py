"""Process settings and the scoped configuration provider."""

from config.provider import ConfigProvider, EnvironmentConfigProvider
from config.settings import AppSettings, load_settings

__all__ = ["AppSettings", "ConfigProvider", "EnvironmentConfigProvider", "load_settings"]
