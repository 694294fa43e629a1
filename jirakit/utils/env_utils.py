"""Environment variable utilities for jirakit.

Configuration values may reference environment variables as ``${VAR}``.
Keys that look like secrets are never echoed into log or error messages.
"""

from __future__ import annotations

import logging
import os
import re

from jirakit.utils.errors import ConfigurationError

# Keys containing these substrings are considered sensitive and should not be logged
SENSITIVE_KEY_PATTERNS = ("TOKEN", "KEY", "SECRET", "PASSWORD", "CREDENTIAL")

_ENV_REFERENCE = re.compile(r"\$\{([^}]+)\}")

logger = logging.getLogger(__name__)


class EnvVarExpansionError(ConfigurationError):
    """Raised when environment variable expansion fails in strict mode."""


def is_sensitive_key(key: str) -> bool:
    """Check if a configuration key contains sensitive data."""
    key_upper = key.upper()
    return any(pattern in key_upper for pattern in SENSITIVE_KEY_PATTERNS)


def expand_env_vars(value: str, strict: bool = False, context: str = "") -> str:
    """Expand ``${VAR}`` references in a configuration value.

    Args:
        value: The raw configuration value
        strict: If True, raises EnvVarExpansionError for missing env vars.
                If False, preserves the ``${VAR}`` pattern for debugging.
        context: Key name used in messages. Omitted when it looks sensitive.

    Returns:
        The value with ``${VAR}`` references replaced with environment values

    Raises:
        EnvVarExpansionError: If strict=True and an env var is not set
    """
    missing_vars: list[str] = []
    safe_context = context if context and not is_sensitive_key(context) else ""

    def replace(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            missing_vars.append(var_name)
            if not strict:
                if safe_context:
                    logger.warning("Environment variable '%s' not set in %s", var_name, safe_context)
                else:
                    logger.warning("Environment variable '%s' not set", var_name)
            return match.group(0)
        return env_value

    result = _ENV_REFERENCE.sub(replace, value)

    if strict and missing_vars:
        message = f"Missing environment variable(s): {', '.join(missing_vars)}"
        if safe_context:
            message += f" in {safe_context}"
        raise EnvVarExpansionError(message)

    return result


__all__ = [
    "EnvVarExpansionError",
    "SENSITIVE_KEY_PATTERNS",
    "expand_env_vars",
    "is_sensitive_key",
]
