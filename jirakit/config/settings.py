"""Settings dataclass for jirakit configuration.

This module defines the Settings dataclass that holds every value needed
to build a JiraClient: where the server is, how to authenticate, and how
patient to be with it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

# Accepted values for credential_source
CREDENTIAL_SOURCES: frozenset[str] = frozenset({"keychain", "env", "basic"})


@dataclass
class Settings:
    """Configuration settings for jirakit.

    All settings have defaults and can be loaded from the configuration
    file (~/.jirakit-config) or from ``JIRA_*`` environment variables.

    Attributes:
        base_url: Jira base URL (e.g., https://jira.example.com)
        credential_source: Where credentials come from: keychain, env or basic
        token_env_var: Environment variable holding the bearer token (env source)
        username_env_var: Environment variable holding the username; when set,
            the env source sends Basic auth with the token as password
        username: Username for the basic source, or keychain account for basic
            keychain lookups
        password: Password for the basic source
        keychain_scope: Keychain account name holding the bearer token
        timeout_seconds: Per-request timeout
        retry_delay_seconds: Base delay for exponential retry backoff
    """

    # Server settings
    base_url: str = ""

    # Credential settings
    credential_source: str = "keychain"
    token_env_var: str = "JIRA_ACCESS_TOKEN"
    username_env_var: str = ""
    username: str = ""
    password: str = ""
    keychain_scope: str = "access_token"

    # Transport settings
    timeout_seconds: float = 30.0
    retry_delay_seconds: float = 1.0

    # Config key to attribute mapping
    _key_mapping: dict[str, str] = field(
        default_factory=lambda: {
            "JIRA_BASE_URL": "base_url",
            "JIRA_CREDENTIAL_SOURCE": "credential_source",
            "JIRA_TOKEN_ENV_VAR": "token_env_var",
            "JIRA_USERNAME_ENV_VAR": "username_env_var",
            "JIRA_USERNAME": "username",
            "JIRA_PASSWORD": "password",
            "JIRA_KEYCHAIN_SCOPE": "keychain_scope",
            # Transport settings
            "JIRA_TIMEOUT_SECONDS": "timeout_seconds",
            "JIRA_RETRY_DELAY_SECONDS": "retry_delay_seconds",
        },
        repr=False,
    )

    def get_attribute_for_key(self, key: str) -> str | None:
        """Get the attribute name for a config key."""
        return self._key_mapping.get(key)

    def get_key_for_attribute(self, attr: str) -> str | None:
        """Get the config key for an attribute name."""
        for key, value in self._key_mapping.items():
            if value == attr:
                return key
        return None

    @classmethod
    def get_config_keys(cls) -> list[str]:
        """Get list of all valid configuration keys."""
        temp = cls()
        return list(temp._key_mapping.keys())


# Default configuration file path
CONFIG_FILE = Path.home() / ".jirakit-config"


__all__ = ["CONFIG_FILE", "CREDENTIAL_SOURCES", "Settings"]
