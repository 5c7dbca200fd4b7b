"""Generic registry for managing named items.

Fieldset declarations refer to collaborators by name: lookup predicates for
uniqueness checks and final (cross-field) validation hooks. Those
collaborators are supplied by the application through a registry so the
validation engine never imports them directly.

Example:
    ```python
    from formknobs_common.registry import Registry

    lookups = Registry[Callable[[str], bool]]("lookups")
    lookups.register("username_taken", user_store.exists)

    check = lookups.get("username_taken")
    ```
"""

import threading
from typing import Dict, Generic, Iterator, List, Mapping, TypeVar

from formknobs_common.exceptions import NotFoundError, OperationError

T = TypeVar("T")


class Registry(Generic[T]):
    """Thread-safe collection of items keyed by unique names.

    Args:
        name: Name for this registry instance (used in error context)

    Example:
        ```python
        registry = Registry[str]("my_registry")
        registry.register("key1", "value1")
        registry.get("key1")
        # 'value1'
        ```
    """

    def __init__(self, name: str):
        self._name = name
        self._items: Dict[str, T] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_mapping(cls, name: str, items: Mapping[str, T]) -> "Registry[T]":
        """Create a registry pre-populated from a mapping.

        Args:
            name: Registry name
            items: Initial key to item mapping

        Returns:
            New registry holding the items
        """
        registry = cls(name)
        for key, item in items.items():
            registry.register(key, item)
        return registry

    @property
    def name(self) -> str:
        """Get registry name."""
        return self._name

    def register(self, key: str, item: T, allow_overwrite: bool = False) -> None:
        """Register an item by key.

        Args:
            key: Unique identifier for the item
            item: Item to register
            allow_overwrite: Whether to allow replacing an existing item

        Raises:
            OperationError: If the key exists and allow_overwrite is False
        """
        with self._lock:
            if not allow_overwrite and key in self._items:
                raise OperationError(
                    f"Item '{key}' already registered in {self._name}",
                    context={"key": key, "registry": self._name},
                )
            self._items[key] = item

    def get(self, key: str) -> T:
        """Get an item by key.

        Raises:
            NotFoundError: If item not found
        """
        with self._lock:
            if key not in self._items:
                raise NotFoundError(
                    f"Item not found: {key}",
                    context={
                        "key": key,
                        "registry": self._name,
                        "available_keys": list(self._items.keys()),
                    },
                )
            return self._items[key]

    def get_optional(self, key: str) -> T | None:
        """Get an item by key, returning None if not found."""
        with self._lock:
            return self._items.get(key)

    def list_keys(self) -> List[str]:
        """List all registered keys in registration order."""
        with self._lock:
            return list(self._items.keys())

    def count(self) -> int:
        """Get count of registered items."""
        with self._lock:
            return len(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[str]:
        return iter(self.list_keys())

    def __repr__(self) -> str:
        return f"Registry(name={self._name!r}, items={self.count()})"
