"""Form binding: turning a validated fieldset result into a typed record.

Binding runs a fieldset against submitted data. When the data is invalid the
caller receives an :class:`InvalidForm` snapshot (errors plus the submitted
values) to re-render, never a partially built record. When it is valid the
caller's constructor builds the record from a :class:`ValidatedData`.

A constructor that cannot find the values it expects indicates that the form
and its fieldset disagree. That is a programming mistake, so it is raised as
:class:`InvalidValidatedDataError` instead of being reported as bad input.

Example:
    ```python
    from dataclasses import dataclass

    @dataclass
    class SignupForm(Form):
        name: str
        age: int

        fieldset = Fieldset(
            {"name": StringField(), "age": UnsignedIntegerField(Minimum(18))},
            requiring=["name", "age"],
        )

        @classmethod
        def from_validated(cls, validated):
            return cls(name=validated.require("name"), age=validated.require("age"))

    result = SignupForm.validating({"name": "Peter Pan", "age": 33})
    result.form
    # SignupForm(name='Peter Pan', age=33)
    ```
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeVar

from formknobs_common import ConfigurationError

from .errors import ErrorCollection
from .exceptions import FormValidationError, InvalidValidatedDataError
from .fieldset import Fieldset
from .rendering import RenderedFieldset, render_fieldset
from .result import FieldsetResult, FormResult
from .sources import InputSource
from .values import Value

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ValidatedData(Mapping[str, Value]):
    """Read-only view of the values of a successful fieldset run."""

    def __init__(self, validated: Mapping[str, Value]):
        self._validated = dict(validated)

    def __getitem__(self, name: str) -> Value:
        return self._validated[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._validated)

    def __len__(self) -> int:
        return len(self._validated)

    def require(self, name: str) -> Any:
        """Python value of a field that the form cannot do without.

        Raises:
            InvalidValidatedDataError: If the field has no validated value
        """
        if name not in self._validated:
            raise InvalidValidatedDataError("missing from validated data", field_name=name)
        return self._validated[name].to_python()

    def optional(self, name: str, default: Any = None) -> Any:
        """Python value of a field, or ``default`` when it was not submitted."""
        value = self._validated.get(name)
        return default if value is None else value.to_python()

    def __repr__(self) -> str:
        return f"ValidatedData({self._validated!r})"


@dataclass(frozen=True)
class InvalidForm:
    """Snapshot of a failed validation run, ready for re-rendering.

    Attributes:
        fieldset: The fieldset that was validated against
        errors: Errors by field name
        values: The raw submitted values, to pre-fill the form
    """

    fieldset: Fieldset
    errors: ErrorCollection
    values: dict[str, Value] = field(default_factory=dict)

    @classmethod
    def from_result(cls, fieldset: Fieldset, result: FieldsetResult) -> InvalidForm:
        return cls(fieldset=fieldset, errors=result.errors.copy(), values=dict(result.echo))

    def render(self) -> RenderedFieldset:
        return render_fieldset(self.fieldset, self.values, self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "errors": self.errors.to_dict(),
            "values": {name: value.to_python() for name, value in self.values.items()},
        }


FormConstructor = Callable[[ValidatedData], T]


def bind(
    constructor: FormConstructor,
    fieldset: Fieldset,
    data: InputSource | Mapping[str, Any] | None,
) -> FormResult:
    """Validate data with a fieldset and build a record from the result.

    Args:
        constructor: Builds the record from :class:`ValidatedData`
        fieldset: Fieldset to validate against
        data: Submitted data

    Returns:
        FormResult with the record, or with an :class:`InvalidForm`

    Raises:
        InvalidValidatedDataError: If the constructor does not match the fieldset
    """
    result = fieldset.validate(data)
    if not result.valid:
        return FormResult.failure(InvalidForm.from_result(fieldset, result))
    return FormResult.success(_construct(constructor, fieldset, result))


async def bind_async(
    constructor: FormConstructor,
    fieldset: Fieldset,
    data: InputSource | Mapping[str, Any] | None,
) -> FormResult:
    """Awaitable form of :func:`bind`."""
    result = await fieldset.validate_async(data)
    if not result.valid:
        return FormResult.failure(InvalidForm.from_result(fieldset, result))
    return FormResult.success(_construct(constructor, fieldset, result))


def _construct(constructor: FormConstructor, fieldset: Fieldset, result: FieldsetResult) -> Any:
    try:
        return constructor(ValidatedData(result.validated))
    except InvalidValidatedDataError as e:
        logger.error(f"Form does not match fieldset {fieldset.name or '<anonymous>'}: {e}")
        raise
    except KeyError as e:
        name = str(e.args[0]) if e.args else None
        logger.error(f"Form does not match fieldset {fieldset.name or '<anonymous>'}: {name}")
        raise InvalidValidatedDataError("missing from validated data", field_name=name) from e


class Form(ABC):
    """Base class for statically-typed, reusable forms.

    Subclasses set the class attribute ``fieldset`` and implement
    :meth:`from_validated`. Every binding method also accepts an explicit
    ``fieldset=`` that takes precedence over the class attribute.
    """

    fieldset: ClassVar[Fieldset | None] = None

    @classmethod
    @abstractmethod
    def from_validated(cls, validated: ValidatedData) -> Any:
        """Build the form from values that passed validation.

        Raises:
            InvalidValidatedDataError: If an expected value is missing
        """
        pass

    @classmethod
    def _fieldset_for(cls, fieldset: Fieldset | None) -> Fieldset:
        resolved = fieldset if fieldset is not None else cls.fieldset
        if resolved is None:
            raise ConfigurationError(
                f"{cls.__name__} has no fieldset", context={"form": cls.__name__}
            )
        return resolved

    @classmethod
    def validating(
        cls,
        data: InputSource | Mapping[str, Any] | None,
        fieldset: Fieldset | None = None,
    ) -> FormResult:
        """Validate submitted data and build the form on success."""
        return bind(cls.from_validated, cls._fieldset_for(fieldset), data)

    @classmethod
    async def validating_async(
        cls,
        data: InputSource | Mapping[str, Any] | None,
        fieldset: Fieldset | None = None,
    ) -> FormResult:
        return await bind_async(cls.from_validated, cls._fieldset_for(fieldset), data)

    @classmethod
    def from_data(
        cls,
        data: InputSource | Mapping[str, Any] | None,
        fieldset: Fieldset | None = None,
    ) -> Any:
        """Build the form or raise.

        Raises:
            FormValidationError: If the data is invalid; carries the InvalidForm
            InvalidValidatedDataError: If the form does not match its fieldset
        """
        result = cls.validating(data, fieldset)
        if not result.valid:
            raise FormValidationError(result.invalid)
        return result.form

    @classmethod
    async def from_data_async(
        cls,
        data: InputSource | Mapping[str, Any] | None,
        fieldset: Fieldset | None = None,
    ) -> Any:
        result = await cls.validating_async(data, fieldset)
        if not result.valid:
            raise FormValidationError(result.invalid)
        return result.form
