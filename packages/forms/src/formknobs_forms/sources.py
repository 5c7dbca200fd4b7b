"""Input interface: key lookup over already-decoded submitted data.

The engine does not care whether the data came from form encoding, JSON,
multipart or a query string. It only needs ``get(name)`` returning the raw
value for a name, or ``None`` when the key was not submitted.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from .values import Value


@runtime_checkable
class InputSource(Protocol):
    """Anything that can look up a submitted value by name."""

    def get(self, name: str) -> Value | Any | None:
        """Return the raw value for ``name``, or None if it was not submitted."""
        ...


class MappingSource:
    """Input source over a plain mapping of names to values.

    Values may be :class:`Value` instances or Python natives and are
    returned as stored. The fieldset normalizes natives before validation;
    one without a Value representation is reported as ``IncorrectType`` and
    left out of the echo.

    Note that an explicit ``None`` in the mapping is a submitted null, which
    is different from an absent key.
    """

    def __init__(self, data: Mapping[str, Any]):
        self._data = data

    def get(self, name: str) -> Value | Any | None:
        if name not in self._data:
            return None
        raw = self._data[name]
        return Value.null() if raw is None else raw

    def __contains__(self, name: object) -> bool:
        return name in self._data


def as_source(data: InputSource | Mapping[str, Any] | None) -> InputSource:
    """Adapt a mapping (or None for empty input) to an :class:`InputSource`."""
    if data is None:
        return MappingSource({})
    if isinstance(data, Mapping):
        return MappingSource(data)
    if isinstance(data, InputSource):
        return data
    raise TypeError(f"Cannot read submitted data from {type(data).__name__}")
