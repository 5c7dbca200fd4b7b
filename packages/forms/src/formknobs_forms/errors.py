"""Field error vocabulary and the field-keyed error collection."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """The kinds of problems a field can report."""

    INCORRECT_TYPE = "incorrect_type"
    VALIDATION_FAILED = "validation_failed"
    REQUIRED_MISSING = "required_missing"
    INVALID_VALIDATED_DATA = "invalid_validated_data"


_DESCRIPTIONS = {
    ErrorKind.INCORRECT_TYPE: "This field's value is of incorrect type.",
    ErrorKind.REQUIRED_MISSING: "This field is required.",
    ErrorKind.INVALID_VALIDATED_DATA: "Invalid validated data.",
}


@dataclass(frozen=True)
class FieldError:
    """A single error attached to a field.

    Only ``VALIDATION_FAILED`` errors carry a message; it is meant to be
    shown to the person who filled in the form. Errors never carry the raw
    submitted value.
    """

    kind: ErrorKind
    message: str | None = None

    @classmethod
    def incorrect_type(cls) -> FieldError:
        return cls(ErrorKind.INCORRECT_TYPE)

    @classmethod
    def validation_failed(cls, message: str) -> FieldError:
        return cls(ErrorKind.VALIDATION_FAILED, message)

    @classmethod
    def required_missing(cls) -> FieldError:
        return cls(ErrorKind.REQUIRED_MISSING)

    @classmethod
    def invalid_validated_data(cls) -> FieldError:
        return cls(ErrorKind.INVALID_VALIDATED_DATA)

    @property
    def description(self) -> str:
        """Human-readable text for this error."""
        if self.kind is ErrorKind.VALIDATION_FAILED:
            return self.message or ""
        return _DESCRIPTIONS[self.kind]

    def __str__(self) -> str:
        return self.description


class ErrorCollection:
    """Ordered multi-map from field name to the errors raised for that field.

    Subscripting never raises: a name without errors reads as an empty list,
    and that list is live, so ``errors["age"].append(error)`` creates the
    entry on first use. Names whose list is empty are ignored by iteration,
    length, equality and :meth:`to_dict`.

    Example:
        ```python
        errors = ErrorCollection()
        errors["email"].append(FieldError.required_missing())
        errors.to_dict()
        # {'email': ['This field is required.']}
        ```
    """

    def __init__(
        self,
        entries: Mapping[str, Iterable[FieldError]]
        | Iterable[tuple[str, Iterable[FieldError]]]
        | None = None,
    ):
        self._contents: dict[str, list[FieldError]] = {}
        if entries is None:
            return
        pairs = entries.items() if isinstance(entries, Mapping) else entries
        for name, errors in pairs:
            self.extend(name, errors)

    def __getitem__(self, name: str) -> list[FieldError]:
        return self._contents.setdefault(name, [])

    def __setitem__(self, name: str, errors: Iterable[FieldError]) -> None:
        self._contents[name] = list(errors)

    def __delitem__(self, name: str) -> None:
        self._contents.pop(name, None)

    def add(self, name: str, error: FieldError) -> None:
        self[name].append(error)

    def extend(self, name: str, errors: Iterable[FieldError]) -> None:
        self[name].extend(errors)

    def get(self, name: str) -> list[FieldError]:
        """Return a copy of the errors for ``name`` without creating an entry."""
        return list(self._contents.get(name, ()))

    def names(self) -> list[str]:
        """Names of fields that have at least one error, in insertion order."""
        return [name for name, errors in self._contents.items() if errors]

    def items(self) -> list[tuple[str, list[FieldError]]]:
        return [(name, list(errors)) for name, errors in self._contents.items() if errors]

    @property
    def is_empty(self) -> bool:
        return not any(self._contents.values())

    def copy(self) -> ErrorCollection:
        return ErrorCollection(self.items())

    def to_dict(self) -> dict[str, list[str]]:
        """Convert to ``{field_name: [message, ...]}`` for API responses."""
        return {
            name: [error.description for error in errors] for name, errors in self.items()
        }

    def __contains__(self, name: object) -> bool:
        return bool(self._contents.get(name)) if isinstance(name, str) else False

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self.names())

    def __bool__(self) -> bool:
        return not self.is_empty

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorCollection):
            return NotImplemented
        return dict(self.items()) == dict(other.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ErrorCollection({dict(self.items())!r})"
