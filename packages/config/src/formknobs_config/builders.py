"""Factory base class for building objects from configuration."""

from typing import Any, Dict, List

from .exceptions import ConfigError


class FactoryBase:
    """Base class for factory objects.

    Factories that inherit from this should implement the create method.
    """

    def create(self, **config: Any) -> Any:
        """Create an object from configuration.

        Args:
            **config: Configuration parameters

        Returns:
            Created object
        """
        raise NotImplementedError("Subclasses must implement create method")

    def create_all(self, configs: List[Dict[str, Any]]) -> List[Any]:
        """Create one object per configuration dictionary.

        Raises:
            ConfigError: If an entry is not a mapping
        """
        created = []
        for idx, config in enumerate(configs):
            if not isinstance(config, dict):
                raise ConfigError(
                    f"Configuration entry {idx} must be a mapping, got {type(config).__name__}",
                    context={"index": idx},
                )
            created.append(self.create(**config))
        return created
