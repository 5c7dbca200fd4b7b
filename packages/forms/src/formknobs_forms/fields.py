"""Typed fields: coercion from :class:`Value` plus an ordered validator chain.

A field turns one raw submitted value into a typed Python value, then runs
every attached validator against it. All validators run even after one has
failed, so the caller gets every problem at once. On success the *coerced*
value is returned: an :class:`IntegerField` given the string ``"42"``
produces the integer ``42``.

Coercion rules per field:

- ``StringField``: strings only, no conversion from numbers or booleans.
- ``IntegerField``: signed integers and whole-number strings. Doubles are
  rejected even when they have no fractional part, and so are strings with a
  decimal point, so no precision is silently lost.
- ``UnsignedIntegerField``: as ``IntegerField``, and negative numbers fail.
- ``DoubleField``: doubles, integers and numeric strings.
- ``BoolField``: booleans, ``1``/``0`` and the usual string tokens. Anything
  else, including a missing key, reads as ``False`` (checkbox semantics).
"""

from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from .errors import FieldError
from .result import FieldResult
from .validators import Validator
from .values import INT64_MAX, INT64_MIN, UINT64_MAX, Value, ValueKind

WHOLE_NUMBER = re.compile(r"[+-]?[0-9]+")
DECIMAL_NUMBER = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

TRUE_TOKENS = frozenset({"true", "t", "1", "yes", "y", "on"})


class Field(ABC):
    """Base class for all fields.

    Args:
        *validators: Validators run, in order, against the coerced value
        label: Human-readable label used when rendering the field
    """

    type_name: ClassVar[str] = "field"

    def __init__(self, *validators: Validator, label: str | None = None):
        for validator in validators:
            if not isinstance(validator, Validator):
                raise TypeError(
                    f"{type(self).__name__} expects Validator instances, "
                    f"got {type(validator).__name__}"
                )
        self.validators: tuple[Validator, ...] = tuple(validators)
        self.label = label

    @property
    def is_async(self) -> bool:
        """Whether any validator needs to be awaited."""
        return any(validator.is_async for validator in self.validators)

    @abstractmethod
    def coerce(self, value: Value) -> FieldResult:
        """Convert a raw value to this field's Python type.

        Args:
            value: Normalized raw value

        Returns:
            FieldResult with the typed value, or the coercion failure
        """
        pass

    @abstractmethod
    def to_value(self, typed: Any) -> Value:
        """Wrap a typed value back into this field's Value kind."""
        pass

    def missing_value(self) -> Value | None:
        """Value to validate when the key is absent, or None to treat it as missing."""
        return None

    def validate(self, raw: Value | Any) -> FieldResult:
        """Coerce a raw value and run every validator against it.

        Args:
            raw: A Value, or a Python native convertible to one

        Returns:
            FieldResult with the coerced value on success, or all errors
        """
        coerced = self._coerce_raw(raw)
        if not coerced.valid:
            return coerced
        return self._collect(coerced.value, [v.validate(coerced.value) for v in self.validators])

    async def validate_async(self, raw: Value | Any) -> FieldResult:
        """Awaitable form of :meth:`validate` for fields with async validators."""
        coerced = self._coerce_raw(raw)
        if not coerced.valid:
            return coerced
        results = []
        for validator in self.validators:
            results.append(await validator.validate_async(coerced.value))
        return self._collect(coerced.value, results)

    def _coerce_raw(self, raw: Value | Any) -> FieldResult:
        if not isinstance(raw, Value):
            try:
                raw = Value.from_python(raw)
            except (TypeError, ValueError):
                return FieldResult.failure([FieldError.incorrect_type()])
        return self.coerce(raw)

    def _collect(self, typed: Any, results: list[FieldResult]) -> FieldResult:
        errors = [error for result in results for error in result.errors]
        if errors:
            return FieldResult.failure(errors)
        return FieldResult.success(typed)

    def __repr__(self) -> str:
        args = ", ".join(repr(v) for v in self.validators)
        if self.label is not None:
            args = f"{args}, label={self.label!r}" if args else f"label={self.label!r}"
        return f"{type(self).__name__}({args})"


class StringField(Field):
    """Accepts text only."""

    type_name = "string"

    def coerce(self, value: Value) -> FieldResult:
        if value.kind is ValueKind.STRING:
            return FieldResult.success(value.payload)
        return FieldResult.failed("Please enter valid text.")

    def to_value(self, typed: str) -> Value:
        return Value.string(typed)


class IntegerField(Field):
    """Accepts whole numbers in the signed 64-bit range."""

    type_name = "integer"
    failure_message = "Please enter a whole number."
    minimum = INT64_MIN
    maximum = INT64_MAX

    def coerce(self, value: Value) -> FieldResult:
        if value.kind in (ValueKind.INT, ValueKind.UINT):
            number = value.payload
        elif value.kind is ValueKind.STRING:
            text = value.payload.strip()
            if not WHOLE_NUMBER.fullmatch(text):
                return FieldResult.failed(self.failure_message)
            try:
                number = int(text)
            except ValueError:
                # Beyond the interpreter's integer string conversion limit
                return FieldResult.failed(self.failure_message)
        else:
            # Doubles are rejected even when whole, to avoid silent precision loss
            return FieldResult.failed(self.failure_message)

        if not self.minimum <= number <= self.maximum:
            return FieldResult.failed(self.failure_message)
        return FieldResult.success(number)

    def to_value(self, typed: int) -> Value:
        return Value.integer(typed)


class UnsignedIntegerField(IntegerField):
    """Accepts whole numbers from zero to the unsigned 64-bit maximum."""

    type_name = "unsigned"
    failure_message = "Please enter a positive whole number."
    minimum = 0
    maximum = UINT64_MAX

    def to_value(self, typed: int) -> Value:
        return Value.unsigned(typed)


class DoubleField(Field):
    """Accepts any finite number, or a string spelling one."""

    type_name = "double"

    def coerce(self, value: Value) -> FieldResult:
        if value.kind in (ValueKind.DOUBLE, ValueKind.INT, ValueKind.UINT):
            number = float(value.payload)
        elif value.kind is ValueKind.STRING and DECIMAL_NUMBER.fullmatch(value.payload.strip()):
            number = float(value.payload.strip())
        else:
            return FieldResult.failed("Please enter a number.")

        if not math.isfinite(number):
            return FieldResult.failed("Please enter a number.")
        return FieldResult.success(number)

    def to_value(self, typed: float) -> Value:
        return Value.double(typed)


class BoolField(Field):
    """Accepts booleans; an absent key reads as ``False``."""

    type_name = "bool"

    def coerce(self, value: Value) -> FieldResult:
        if value.kind is ValueKind.BOOL:
            return FieldResult.success(value.payload)
        if value.kind in (ValueKind.INT, ValueKind.UINT):
            return FieldResult.success(value.payload == 1)
        if value.kind is ValueKind.STRING:
            return FieldResult.success(value.payload.strip().lower() in TRUE_TOKENS)
        return FieldResult.success(False)

    def to_value(self, typed: bool) -> Value:
        return Value.boolean(typed)

    def missing_value(self) -> Value | None:
        return Value.boolean(False)


FIELD_TYPES: dict[str, type[Field]] = {
    cls.type_name: cls
    for cls in (StringField, IntegerField, UnsignedIntegerField, DoubleField, BoolField)
}
