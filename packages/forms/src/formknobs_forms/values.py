"""The tagged-union value model that crosses the validation engine boundary.

Raw submitted data (decoded form fields, JSON bodies, query strings) is
normalized into :class:`Value` instances before any field sees it. Every
field defines how each :class:`ValueKind` coerces to its target type, so the
engine never relies on implicit dynamic conversion.

Example:
    ```python
    from formknobs_forms import Value

    Value.from_python({"name": "Peter Pan", "age": 33})
    # Value.object({'name': Value.string('Peter Pan'), 'age': Value.integer(33)})

    Value.unsigned(33).to_python()
    # 33
    ```
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1


class ValueKind(Enum):
    """Enumeration of the variants of :class:`Value`."""

    NULL = "null"
    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    DOUBLE = "double"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


@dataclass(frozen=True)
class Value:
    """An immutable, structurally compared datum.

    Use the named constructors rather than instantiating directly; they check
    that the payload matches the kind. Arrays hold a tuple of values and
    objects hold a read-only mapping of names to values.

    Attributes:
        kind: The variant of this value
        payload: The Python payload for the variant
    """

    kind: ValueKind
    payload: Any = None

    @classmethod
    def null(cls) -> Value:
        return cls(ValueKind.NULL, None)

    @classmethod
    def boolean(cls, value: bool) -> Value:
        if not isinstance(value, bool):
            raise TypeError(f"Expected bool, got {type(value).__name__}")
        return cls(ValueKind.BOOL, value)

    @classmethod
    def integer(cls, value: int) -> Value:
        """Create a signed 64-bit integer value.

        Raises:
            TypeError: If value is not an int
            ValueError: If value is outside the signed 64-bit range
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Expected int, got {type(value).__name__}")
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError(f"Integer {value} is outside the signed 64-bit range")
        return cls(ValueKind.INT, value)

    @classmethod
    def unsigned(cls, value: int) -> Value:
        """Create an unsigned 64-bit integer value.

        Raises:
            TypeError: If value is not an int
            ValueError: If value is negative or above the unsigned 64-bit range
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Expected int, got {type(value).__name__}")
        if not 0 <= value <= UINT64_MAX:
            raise ValueError(f"Integer {value} is outside the unsigned 64-bit range")
        return cls(ValueKind.UINT, value)

    @classmethod
    def double(cls, value: float) -> Value:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"Expected float, got {type(value).__name__}")
        return cls(ValueKind.DOUBLE, float(value))

    @classmethod
    def string(cls, value: str) -> Value:
        if not isinstance(value, str):
            raise TypeError(f"Expected str, got {type(value).__name__}")
        return cls(ValueKind.STRING, value)

    @classmethod
    def array(cls, items: Iterable[Any]) -> Value:
        return cls(ValueKind.ARRAY, tuple(_as_value(item) for item in items))

    @classmethod
    def object(cls, members: Mapping[str, Any]) -> Value:
        converted = {}
        for key, member in members.items():
            if not isinstance(key, str):
                raise TypeError(f"Object keys must be str, got {type(key).__name__}")
            converted[key] = _as_value(member)
        return cls(ValueKind.OBJECT, MappingProxyType(converted))

    @classmethod
    def from_python(cls, obj: Any) -> Value:
        """Normalize a Python native into a Value.

        ``bool`` is checked before ``int``. Non-negative integers that do not
        fit the signed range become ``UINT``.

        Raises:
            TypeError: If the object has no Value representation
            ValueError: If an integer does not fit 64 bits
        """
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return cls.null()
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            if obj > INT64_MAX:
                return cls.unsigned(obj)
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.double(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, (list, tuple)):
            return cls.array(obj)
        if isinstance(obj, Mapping):
            return cls.object(obj)
        raise TypeError(f"Cannot represent {type(obj).__name__} as a Value")

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    @property
    def is_number(self) -> bool:
        return self.kind in (ValueKind.INT, ValueKind.UINT, ValueKind.DOUBLE)

    def to_python(self) -> Any:
        """Convert back to the equivalent Python native."""
        if self.kind is ValueKind.ARRAY:
            return [item.to_python() for item in self.payload]
        if self.kind is ValueKind.OBJECT:
            return {key: member.to_python() for key, member in self.payload.items()}
        return self.payload

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self.kind is not other.kind:
            return False
        if self.kind is ValueKind.OBJECT:
            return dict(self.payload) == dict(other.payload)
        return bool(self.payload == other.payload)

    def __hash__(self) -> int:
        if self.kind is ValueKind.OBJECT:
            return hash((self.kind, frozenset(self.payload.items())))
        return hash((self.kind, self.payload))

    def __repr__(self) -> str:
        if self.kind is ValueKind.NULL:
            return "Value.null()"
        if self.kind is ValueKind.OBJECT:
            return f"Value.object({dict(self.payload)!r})"
        if self.kind is ValueKind.ARRAY:
            return f"Value.array({list(self.payload)!r})"
        constructor = {
            ValueKind.BOOL: "boolean",
            ValueKind.INT: "integer",
            ValueKind.UINT: "unsigned",
            ValueKind.DOUBLE: "double",
            ValueKind.STRING: "string",
        }[self.kind]
        return f"Value.{constructor}({self.payload!r})"


def _as_value(obj: Any) -> Value:
    return obj if isinstance(obj, Value) else Value.from_python(obj)
