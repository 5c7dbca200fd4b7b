"""Result types returned by validators, fields, fieldsets and forms.

Validation problems are always returned as values. Each result is truthy
when it represents success, so ``if result:`` reads naturally.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .errors import ErrorCollection, FieldError
from .values import Value

if TYPE_CHECKING:
    from .form import InvalidForm


@dataclass(frozen=True)
class FieldResult:
    """Outcome of validating one value with a field or a validator.

    Attributes:
        valid: Whether validation succeeded
        value: The coerced, typed value on success; None on failure
        errors: Errors reported, empty on success
    """

    valid: bool
    value: Any = None
    errors: tuple[FieldError, ...] = ()

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def success(cls, value: Any) -> FieldResult:
        return cls(valid=True, value=value)

    @classmethod
    def failure(cls, errors: Iterable[FieldError]) -> FieldResult:
        errors = tuple(errors)
        if not errors:
            raise ValueError("A failed FieldResult needs at least one error")
        return cls(valid=False, errors=errors)

    @classmethod
    def failed(cls, message: str) -> FieldResult:
        """Shortcut for a failure with one ``VALIDATION_FAILED`` error."""
        return cls.failure([FieldError.validation_failed(message)])

    def merge(self, other: FieldResult) -> FieldResult:
        """Combine two results; the merged result fails if either failed.

        Args:
            other: Another result for the same value

        Returns:
            New FieldResult with concatenated errors
        """
        if self.valid and other.valid:
            return self
        return FieldResult(valid=False, errors=self.errors + other.errors)


@dataclass
class FieldsetResult:
    """Outcome of validating a whole record with a fieldset.

    On success ``validated`` holds the coerced value of every field that
    produced one. On failure ``errors`` is non-empty and ``echo`` holds the
    raw values that were submitted for declared fields, for re-rendering.

    Attributes:
        valid: Whether the record passed validation
        validated: Coerced values by field name (success only)
        errors: Errors by field name (failure only)
        echo: Raw submitted values by field name
    """

    valid: bool
    validated: dict[str, Value] = field(default_factory=dict)
    errors: ErrorCollection = field(default_factory=ErrorCollection)
    echo: dict[str, Value] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def success(cls, validated: dict[str, Value], echo: dict[str, Value] | None = None) -> FieldsetResult:
        return cls(valid=True, validated=validated, echo=echo or {})

    @classmethod
    def failure(cls, errors: ErrorCollection, echo: dict[str, Value]) -> FieldsetResult:
        return cls(valid=False, errors=errors, echo=echo)

    @property
    def data(self) -> dict[str, Any]:
        """The validated values as Python natives."""
        return {name: value.to_python() for name, value in self.validated.items()}


@dataclass
class FormResult:
    """Outcome of binding submitted data to a form.

    Attributes:
        valid: Whether a form instance was built
        form: The constructed form instance on success
        invalid: Snapshot of the failed fieldset run on failure
    """

    valid: bool
    form: Any = None
    invalid: InvalidForm | None = None

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def success(cls, form: Any) -> FormResult:
        return cls(valid=True, form=form)

    @classmethod
    def failure(cls, invalid: InvalidForm) -> FormResult:
        return cls(valid=False, invalid=invalid)
