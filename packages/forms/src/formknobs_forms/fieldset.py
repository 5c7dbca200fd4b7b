"""Fieldsets: named collections of fields validated as a whole record.

A :class:`Fieldset` is declared once and reused for every submission. Each
call to :meth:`Fieldset.validate` allocates its own state, so a declaration
can be shared between threads and concurrent requests.

Validation happens in two phases. First every declared field is coerced and
validated and *all* errors are collected. Then, only if no field failed, the
optional final validation hook runs with the clean, typed values so it can
check fields against each other (or against a credential store) and add
errors of its own.

Example:
    ```python
    from formknobs_forms import Fieldset, Minimum, StringField, UnsignedIntegerField

    fieldset = Fieldset(
        {
            "name": StringField(label="Your name"),
            "age": UnsignedIntegerField(Minimum(18), label="Your age"),
        },
        requiring=["name", "age"],
    )

    result = fieldset.validate({"name": "Peter Pan", "age": 11})
    result.errors.to_dict()
    # {'age': ['Value must be at least 18.']}
    result.echo["name"]
    # Value.string('Peter Pan')
    ```
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from formknobs_common import ConfigurationError

from .errors import ErrorCollection, FieldError
from .fields import Field
from .rendering import RenderedFieldset, render_fieldset
from .result import FieldResult, FieldsetResult
from .sources import InputSource, as_source
from .values import Value

logger = logging.getLogger(__name__)


@dataclass
class ValidationState:
    """Mutable state of one validation run, handed to the final hook.

    The hook may read the validated and submitted values and append errors.
    The state is discarded once the run completes.

    Attributes:
        validated: Coerced values by field name
        values: Raw submitted values by field name (the echo)
        errors: Errors collected so far (empty when the hook is called)
    """

    validated: dict[str, Value] = field(default_factory=dict)
    values: dict[str, Value] = field(default_factory=dict)
    errors: ErrorCollection = field(default_factory=ErrorCollection)

    def value(self, name: str, default: Any = None) -> Any:
        """Python value of a validated field, or ``default`` if it has none."""
        validated = self.validated.get(name)
        return default if validated is None else validated.to_python()

    def add_error(self, name: str, message: str) -> None:
        """Record a validation failure for ``name``."""
        self.errors[name].append(FieldError.validation_failed(message))


FinalValidation = Callable[[ValidationState], Any]


class Fieldset:
    """Immutable declaration of fields, required names and a final hook.

    Args:
        fields: Field definitions by input name; iteration order is kept
        requiring: Names that must be present in submitted data
        final_validation: Optional hook called with a :class:`ValidationState`
            after every field validated cleanly. May be a coroutine function
            when used with :meth:`validate_async`.
        name: Optional name used in logs and configuration

    Raises:
        ConfigurationError: If a required name is not a declared field
    """

    def __init__(
        self,
        fields: Mapping[str, Field],
        requiring: Iterable[str] = (),
        final_validation: FinalValidation | None = None,
        name: str | None = None,
    ):
        for field_name, field_def in fields.items():
            if not isinstance(field_def, Field):
                raise ConfigurationError(
                    f"Field '{field_name}' must be a Field, got {type(field_def).__name__}",
                    context={"field": field_name, "fieldset": name},
                )
        required = frozenset(requiring)
        undeclared = sorted(required - set(fields))
        if undeclared:
            raise ConfigurationError(
                f"Required fields are not declared: {', '.join(undeclared)}",
                context={"fields": undeclared, "fieldset": name},
            )

        self._fields = MappingProxyType(dict(fields))
        self._required = required
        self._final_validation = final_validation
        self.name = name

    @property
    def fields(self) -> Mapping[str, Field]:
        """Read-only mapping of field names to definitions."""
        return self._fields

    @property
    def required(self) -> frozenset[str]:
        return self._required

    @property
    def final_validation(self) -> FinalValidation | None:
        return self._final_validation

    @property
    def is_async(self) -> bool:
        """Whether validation needs :meth:`validate_async`."""
        return any(f.is_async for f in self._fields.values()) or inspect.iscoroutinefunction(
            self._final_validation
        )

    def validate(self, data: InputSource | Mapping[str, Any] | None) -> FieldsetResult:
        """Validate submitted data against every declared field.

        Args:
            data: An input source or a mapping of names to raw values

        Returns:
            Success with the coerced values, or failure with every error and
            the echo of submitted values
        """
        state = ValidationState()
        for name, field_def, raw in self._submitted(data, state):
            self._fold(state, name, field_def, field_def.validate(raw))

        if state.errors.is_empty and self._final_validation is not None:
            outcome = self._final_validation(state)
            if inspect.isawaitable(outcome):
                if inspect.iscoroutine(outcome):
                    outcome.close()
                raise TypeError(
                    "final_validation is a coroutine function; use validate_async()"
                )

        return self._finish(state)

    async def validate_async(
        self, data: InputSource | Mapping[str, Any] | None
    ) -> FieldsetResult:
        """Awaitable form of :meth:`validate`.

        Async validators are awaited before their result is folded into the
        field's errors; the final hook is awaited when it is a coroutine
        function.
        """
        state = ValidationState()
        for name, field_def, raw in self._submitted(data, state):
            self._fold(state, name, field_def, await field_def.validate_async(raw))

        if state.errors.is_empty and self._final_validation is not None:
            outcome = self._final_validation(state)
            if inspect.isawaitable(outcome):
                await outcome

        return self._finish(state)

    def render(self, result: FieldsetResult | None = None) -> RenderedFieldset:
        """Render labels, plus submitted values and errors of a result if given."""
        if result is None:
            return render_fieldset(self)
        return render_fieldset(self, result.echo, result.errors)

    def _submitted(self, data: InputSource | Mapping[str, Any] | None, state: ValidationState):
        """Yield ``(name, field, raw value)`` for fields that need validating.

        Absent fields are resolved here: a missing-value default is yielded
        without being echoed, a missing required field records
        ``RequiredMissing``, and any other absent field is skipped.
        """
        source = as_source(data)
        for name, field_def in self._fields.items():
            raw = source.get(name)
            if raw is None:
                default = field_def.missing_value()
                if default is not None:
                    yield name, field_def, default
                elif name in self._required:
                    state.errors[name].append(FieldError.required_missing())
                continue

            if not isinstance(raw, Value):
                try:
                    raw = Value.from_python(raw)
                except (TypeError, ValueError):
                    state.errors[name].append(FieldError.incorrect_type())
                    continue
            state.values[name] = raw
            yield name, field_def, raw

    @staticmethod
    def _fold(
        state: ValidationState, name: str, field_def: Field, result: FieldResult
    ) -> None:
        if result.valid:
            state.validated[name] = field_def.to_value(result.value)
        else:
            state.errors[name].extend(result.errors)

    def _finish(self, state: ValidationState) -> FieldsetResult:
        if state.errors.is_empty:
            logger.debug(
                f"Fieldset {self.name or '<anonymous>'} validated {len(state.validated)} fields"
            )
            return FieldsetResult.success(state.validated, state.values)
        logger.debug(
            f"Fieldset {self.name or '<anonymous>'} failed with errors on "
            f"{', '.join(state.errors.names())}"
        )
        return FieldsetResult.failure(state.errors, state.values)

    def __repr__(self) -> str:
        return (
            f"Fieldset(name={self.name!r}, fields={list(self._fields)!r}, "
            f"required={sorted(self._required)!r})"
        )
