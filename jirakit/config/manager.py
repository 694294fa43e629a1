"""Configuration manager for jirakit.

This module provides the ConfigManager class for loading configuration
values with a cascading hierarchy:

    1. Environment Variables (highest priority)
    2. Global Config (~/.jirakit-config)
    3. Built-in Defaults (lowest priority)

Values may reference other environment variables as ``${VAR}``. Credential
keys are expanded strictly, so a missing variable fails at load time rather
than sending a literal ``${VAR}`` to the server.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from jirakit.config.settings import CONFIG_FILE, CREDENTIAL_SOURCES, Settings
from jirakit.utils.env_utils import expand_env_vars, is_sensitive_key
from jirakit.utils.errors import ConfigurationError
from jirakit.utils.logging import log_message

logger = logging.getLogger(__name__)

# Keys whose ${VAR} references must resolve
STRICT_EXPANSION_KEYS: frozenset[str] = frozenset({"JIRA_USERNAME", "JIRA_PASSWORD"})

_LINE_PATTERN = re.compile(r"^([a-zA-Z_][a-zA-Z0-9_]*)=(.*)$")


class ConfigManager:
    """Loads configuration with cascading precedence.

    Configuration Precedence (highest to lowest):
    1. Environment Variables - CI/CD, temporary overrides
    2. Global Config (~/.jirakit-config) - User defaults
    3. Built-in Defaults - Fallback values

    Security features:
    - Safe line-by-line parsing (no eval/exec)
    - Key name validation
    - Sensitive values are masked in show()

    Attributes:
        settings: Current settings instance
        global_config_path: Path to the global config file
    """

    GLOBAL_CONFIG_NAME = ".jirakit-config"

    def __init__(self, global_config_path: Path | None = None) -> None:
        """Initialize the configuration manager.

        Args:
            global_config_path: Optional custom path to global config file.
                                Defaults to ~/.jirakit-config.
        """
        self.global_config_path = global_config_path or CONFIG_FILE
        self.settings = Settings()
        self._raw_values: dict[str, str] = {}
        self._config_sources: dict[str, str] = {}

    def load(self) -> Settings:
        """Load configuration from all sources with cascading precedence.

        Each call starts from clean defaults, so repeated loads do not keep
        stale values.

        Returns:
            Settings instance with loaded values

        Raises:
            ConfigurationError: If a value cannot be converted or the
                credential source is unknown
        """
        self.settings = Settings()
        self._raw_values = {}
        self._config_sources = {}

        if self.global_config_path.exists():
            log_message(f"Loading global configuration from {self.global_config_path}")
            self._load_file(self.global_config_path, source="global")

        self._load_environment()

        for key, value in self._raw_values.items():
            expanded = expand_env_vars(value, strict=key in STRICT_EXPANSION_KEYS, context=key)
            self._apply_value_to_settings(key, expanded)

        self._validate()
        log_message(f"Configuration loaded successfully ({len(self._raw_values)} keys)")
        return self.settings

    def _load_file(self, path: Path, source: str = "file") -> None:
        """Load key=value pairs from a config file.

        Args:
            path: Path to the config file
            source: Source identifier for debugging
        """
        with path.open() as f:
            for line in f:
                line = line.strip()

                # Skip empty lines and comments
                if not line or line.startswith("#"):
                    continue

                match = _LINE_PATTERN.match(line)
                if match is None:
                    logger.debug("Ignoring malformed line in %s", path)
                    continue

                key, value = match.groups()
                if value.startswith('"') and value.endswith('"') and len(value) >= 2:
                    value = self._unescape_value(value[1:-1])
                elif value.startswith("'") and value.endswith("'") and len(value) >= 2:
                    # Single quotes: no escaping, just remove quotes
                    value = value[1:-1]

                self._raw_values[key] = value
                self._config_sources[key] = source

    def _load_environment(self) -> None:
        """Override config with environment variables.

        Only known config keys are read, so unrelated variables never leak
        into the configuration.
        """
        for key in Settings.get_config_keys():
            env_value = os.environ.get(key)
            if env_value is not None:
                self._raw_values[key] = env_value
                self._config_sources[key] = "environment"

    def _apply_value_to_settings(self, key: str, value: str) -> None:
        """Apply a raw config value to the settings object.

        Raises:
            ConfigurationError: If a numeric value cannot be parsed
        """
        attr = self.settings.get_attribute_for_key(key)
        if attr is None:
            return

        current_value = getattr(self.settings, attr)

        if isinstance(current_value, float):
            try:
                parsed = float(value)
            except ValueError:
                raise ConfigurationError(f"{key} must be a number, got {value!r}") from None
            if parsed < 0:
                raise ConfigurationError(f"{key} must not be negative, got {value!r}")
            setattr(self.settings, attr, parsed)
        else:
            setattr(self.settings, attr, value.strip() if attr == "base_url" else value)

    def _validate(self) -> None:
        source = self.settings.credential_source.strip().lower()
        if source not in CREDENTIAL_SOURCES:
            valid = ", ".join(sorted(CREDENTIAL_SOURCES))
            raise ConfigurationError(
                f"Unknown JIRA_CREDENTIAL_SOURCE '{self.settings.credential_source}'. "
                f"Valid options: {valid}"
            )
        self.settings.credential_source = source

    @staticmethod
    def _unescape_value(value: str) -> str:
        """Unescape a double-quoted value read from the config file."""
        result = value.replace("\\\\", "\\")
        result = result.replace('\\"', '"')
        return result

    def get(self, key: str, default: str = "") -> str:
        """Get a raw configuration value.

        Args:
            key: Configuration key to retrieve
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return self._raw_values.get(key, default)

    def source_of(self, key: str) -> str:
        """Where ``key`` was loaded from: global, environment or default."""
        return self._config_sources.get(key, "default")

    def describe(self) -> list[tuple[str, str, str]]:
        """Return ``(key, display value, source)`` rows with secrets masked."""
        rows: list[tuple[str, str, str]] = []
        for key in Settings.get_config_keys():
            attr = self.settings.get_attribute_for_key(key)
            if attr is None:
                continue
            value = getattr(self.settings, attr)
            if is_sensitive_key(key) and value:
                display = "<REDACTED>"
            elif value == "":
                display = "(not set)"
            else:
                display = str(value)
            rows.append((key, display, self.source_of(key)))
        return rows

    def show(self) -> None:
        """Display current configuration using Rich formatting."""
        from rich.table import Table

        from jirakit.utils.console import console, print_header, print_info

        print_header("Current Configuration")
        print_info(f"Global config: {self.global_config_path}")
        console.print()

        table = Table(show_header=True, header_style="bold")
        table.add_column("Key")
        table.add_column("Value")
        table.add_column("Source", style="dim")
        for key, display, source in self.describe():
            table.add_row(key, display, source)
        console.print(table)


__all__ = [
    "ConfigManager",
    "STRICT_EXPANSION_KEYS",
]
