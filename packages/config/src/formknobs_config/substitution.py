"""Environment variable substitution for configuration values.

Supported patterns:

- ``${VAR}`` - replaced with environment variable VAR, error if not set
- ``${VAR:default}`` - VAR, or ``default`` if VAR is not set
- ``${VAR:-default}`` - same as above (bash-style)

When a string consists of exactly one reference, the substituted text is
converted to ``bool``/``int``/``float`` where it parses as one, so that
``characters: ${NAME_MAX_LENGTH:255}`` yields an integer constraint.
"""

import os
import re
from typing import Any

from .exceptions import ConfigError

VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::(-)?([^}]*))?\}")


def substitute_env_vars(data: Any) -> Any:
    """Recursively substitute environment variables in configuration data.

    Keys are left untouched; only values are processed.

    Args:
        data: Configuration data (dict, list, string, or primitive)

    Returns:
        Data with environment variables substituted

    Raises:
        ConfigError: If a referenced variable is unset and has no default
    """
    if isinstance(data, dict):
        return {key: substitute_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [substitute_env_vars(item) for item in data]
    elif isinstance(data, str):
        return _substitute_string(data)
    return data


def has_variables(data: Any) -> bool:
    """Check whether data contains any ``${...}`` references."""
    if isinstance(data, str):
        return bool(VAR_PATTERN.search(data))
    elif isinstance(data, dict):
        return any(has_variables(value) for value in data.values())
    elif isinstance(data, list):
        return any(has_variables(item) for item in data)
    return False


def _resolve(match: re.Match[str]) -> str:
    var_name = match.group(1)
    has_default = match.group(2) is not None or match.group(3) is not None

    if var_name in os.environ:
        return os.environ[var_name]
    elif has_default:
        return match.group(3) or ""
    raise ConfigError(
        f"Environment variable '{var_name}' not found",
        context={"variable": var_name},
    )


def _substitute_string(text: str) -> Any:
    whole = VAR_PATTERN.fullmatch(text)
    if whole:
        return _convert_type(_resolve(whole))
    return VAR_PATTERN.sub(_resolve, text)


def _convert_type(value: str) -> Any:
    lowered = value.lower()
    if lowered in ("true", "yes"):
        return True
    elif lowered in ("false", "no"):
        return False

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value
