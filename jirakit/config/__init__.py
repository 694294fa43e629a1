"""Configuration management for jirakit.

This package provides:
- Settings: Dataclass holding all configuration values
- ConfigManager: Cascading loader (defaults, global file, environment)
"""

from jirakit.config.manager import ConfigManager
from jirakit.config.settings import CONFIG_FILE, CREDENTIAL_SOURCES, Settings

__all__ = [
    "CONFIG_FILE",
    "CREDENTIAL_SOURCES",
    "ConfigManager",
    "Settings",
]
