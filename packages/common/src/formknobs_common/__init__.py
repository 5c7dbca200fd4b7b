"""Common utilities and base classes for formknobs packages.

- **Exceptions**: Unified exception hierarchy with context support
- **Registry**: Thread-safe registry of named collaborators

Example:
    ```python
    from formknobs_common import ConfigurationError, Registry

    hooks = Registry[Callable]("hooks")
    hooks.register("check_credentials", check_credentials)
    ```
"""

from formknobs_common.exceptions import (
    ConfigurationError,
    FormknobsError,
    NotFoundError,
    OperationError,
    SerializationError,
    ValidationError,
)
from formknobs_common.registry import Registry

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Exceptions
    "FormknobsError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "OperationError",
    "SerializationError",
    # Registry
    "Registry",
]
