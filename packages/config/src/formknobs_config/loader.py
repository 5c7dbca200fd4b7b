"""Loading of YAML/JSON configuration sources."""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigError, ConfigFormatError, ConfigNotFoundError
from .substitution import substitute_env_vars

logger = logging.getLogger(__name__)

ConfigSource = Union[str, Path, Dict[str, Any]]


def load_config(source: ConfigSource, use_env: bool = True) -> Dict[str, Any]:
    """Load a configuration dictionary from a file or a dictionary.

    Args:
        source: Path to a ``.yaml``/``.yml``/``.json`` file, or a dictionary
        use_env: Whether to apply ``${VAR}`` environment substitution

    Returns:
        The configuration dictionary (a deep copy when a dict is passed)

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigFormatError: If the file extension is unsupported or parsing fails
        ConfigError: If the source is of an unsupported type or the document
            is not a mapping
    """
    if isinstance(source, dict):
        data = copy.deepcopy(source)
    elif isinstance(source, (str, Path)):
        data = _load_file(Path(source))
    else:
        raise ConfigError(
            f"Invalid config source type: {type(source).__name__}",
            context={"source_type": type(source).__name__},
        )

    if use_env:
        data = substitute_env_vars(data)
    return data


def _load_file(path: Path) -> Dict[str, Any]:
    path = path.expanduser().resolve()
    if not path.exists():
        raise ConfigNotFoundError(
            f"Configuration file not found: {path}", context={"path": str(path)}
        )

    suffix = path.suffix.lower()
    logger.debug(f"Loading configuration from {path}")
    with open(path, encoding="utf-8") as f:
        try:
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigFormatError(
                    f"Unsupported file format: {suffix}", context={"path": str(path)}
                )
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigFormatError(
                f"Could not parse {path.name}: {e}", context={"path": str(path)}
            ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration root must be a mapping, got {type(data).__name__}",
            context={"path": str(path)},
        )
    return data
