"""Formknobs Config Package

Loading of YAML/JSON configuration with environment substitution, and the
factory contract used to build objects from it.
"""

from .builders import FactoryBase
from .exceptions import ConfigError, ConfigFormatError, ConfigNotFoundError
from .loader import load_config
from .substitution import has_variables, substitute_env_vars

__version__ = "0.1.0"
__all__ = [
    "ConfigError",
    "ConfigFormatError",
    "ConfigNotFoundError",
    "FactoryBase",
    "has_variables",
    "load_config",
    "substitute_env_vars",
]
