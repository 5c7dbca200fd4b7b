"""Custom exceptions for the config package.

Built on the common exception framework from formknobs_common.
"""

from formknobs_common import (
    ConfigurationError as BaseConfigurationError,
    NotFoundError,
    SerializationError,
)

# Configuration errors are the common ConfigurationError
ConfigError = BaseConfigurationError


class ConfigNotFoundError(NotFoundError):
    """Raised when a configuration file does not exist."""

    pass


class ConfigFormatError(SerializationError):
    """Raised when a configuration file has an unsupported format or cannot be parsed."""

    pass
