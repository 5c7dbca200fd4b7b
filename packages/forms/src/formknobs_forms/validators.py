"""Validators: single business-rule checks against an already-coerced value.

A validator sees one typed value and its own configuration, nothing else.
It returns a :class:`FieldResult`: success carrying the value, or failure
carrying exactly one ``VALIDATION_FAILED`` error whose message can be shown
to the user. Every validator accepts ``message=`` to override its default
text.

Example:
    ```python
    from formknobs_forms.validators import Email, MaximumLength

    Email().validate("peter@neverland.net").valid
    # True
    MaximumLength(6, message="Too long").validate("maxi string").errors[0].message
    # 'Too long'
    ```
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import re
from abc import ABC, abstractmethod
from re import Pattern as RegexPattern
from typing import TYPE_CHECKING, Any

from formknobs_common import ConfigurationError

from .result import FieldResult

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

DEFAULT_LOOKUP_TIMEOUT = 5.0

EMAIL_PATTERN = re.compile(
    r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?\.)+[A-Za-z]{2,}"
)


class Validator(ABC):
    """Base class for all validators."""

    is_async = False

    def __init__(self, message: str | None = None):
        """Initialize the validator.

        Args:
            message: Optional message replacing the default failure text
        """
        self.message = message

    @abstractmethod
    def validate(self, value: Any) -> FieldResult:
        """Validate a single coerced value.

        Args:
            value: Typed value produced by a field's coercion

        Returns:
            FieldResult with the value on success
        """
        pass

    async def validate_async(self, value: Any) -> FieldResult:
        """Awaitable form of :meth:`validate`."""
        return self.validate(value)

    def _fail(self, default: str) -> FieldResult:
        return FieldResult.failed(self.message or default)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class _ConstraintValidator(Validator):
    """Compares the value against a single numeric constraint."""

    def __init__(self, constraint: int | float, message: str | None = None):
        if isinstance(constraint, bool) or not isinstance(constraint, (int, float)):
            raise TypeError(f"Constraint must be a number, got {type(constraint).__name__}")
        super().__init__(message)
        self.constraint = constraint

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.constraint!r})"


class Minimum(_ConstraintValidator):
    """Value must be greater than or equal to the constraint."""

    def validate(self, value: Any) -> FieldResult:
        if value < self.constraint:
            return self._fail(f"Value must be at least {self.constraint}.")
        return FieldResult.success(value)


class Maximum(_ConstraintValidator):
    """Value must be less than or equal to the constraint."""

    def validate(self, value: Any) -> FieldResult:
        if value > self.constraint:
            return self._fail(f"Value must be at most {self.constraint}.")
        return FieldResult.success(value)


class Exact(_ConstraintValidator):
    """Value must equal the constraint."""

    def validate(self, value: Any) -> FieldResult:
        if value != self.constraint:
            return self._fail(f"Value must be exactly {self.constraint}.")
        return FieldResult.success(value)


class _LengthValidator(Validator):
    """Compares the character count of a string against a constraint."""

    def __init__(self, characters: int, message: str | None = None):
        if isinstance(characters, bool) or not isinstance(characters, int):
            raise TypeError(f"characters must be an int, got {type(characters).__name__}")
        if characters < 0:
            raise ValueError(f"characters cannot be negative: {characters}")
        super().__init__(message)
        self.characters = characters

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.characters!r})"


class MinimumLength(_LengthValidator):
    """String must have at least ``characters`` characters."""

    def validate(self, value: str) -> FieldResult:
        if len(value) < self.characters:
            return self._fail(f"String must be at least {self.characters} characters long.")
        return FieldResult.success(value)


class MaximumLength(_LengthValidator):
    """String must have at most ``characters`` characters."""

    def validate(self, value: str) -> FieldResult:
        if len(value) > self.characters:
            return self._fail(f"String must be at most {self.characters} characters long.")
        return FieldResult.success(value)


class ExactLength(_LengthValidator):
    """String must have exactly ``characters`` characters."""

    def validate(self, value: str) -> FieldResult:
        if len(value) != self.characters:
            return self._fail(f"String must be exactly {self.characters} characters long.")
        return FieldResult.success(value)


class Email(Validator):
    """String must be formatted as an email address.

    Only the format is checked, not whether the address exists.
    """

    def validate(self, value: str) -> FieldResult:
        if not EMAIL_PATTERN.fullmatch(value):
            return self._fail("Enter a valid email address.")
        return FieldResult.success(value)


class Pattern(Validator):
    """String must match a regular expression in full."""

    def __init__(self, pattern: str | RegexPattern[str], message: str | None = None):
        super().__init__(message)
        self.regex = re.compile(pattern) if isinstance(pattern, str) else pattern

    def validate(self, value: str) -> FieldResult:
        if not self.regex.fullmatch(value):
            return self._fail("Value does not match the required format.")
        return FieldResult.success(value)

    def __repr__(self) -> str:
        return f"Pattern({self.regex.pattern!r})"


class Lookup(Validator):
    """Delegates to an injected predicate, e.g. a check against storage.

    The predicate returns a truthy value when the value is acceptable. Any
    exception it raises is logged and reported as a validation failure; it
    never propagates out of the validator. Retrying is the predicate's
    responsibility.

    The predicate must be synchronous; coroutine functions belong in
    :class:`AsyncLookup`.

    Raises:
        ConfigurationError: If ``check`` is a coroutine function
    """

    default_message = "This value is not allowed."

    def __init__(self, check: Callable[[Any], Any], message: str | None = None):
        """Initialize the lookup validator.

        Args:
            check: Predicate called with the coerced value
            message: Optional failure message
        """
        if not self.is_async and inspect.iscoroutinefunction(check):
            raise ConfigurationError(
                f"{type(self).__name__} needs a synchronous predicate; "
                "use AsyncLookup or AsyncUnique for coroutine functions",
                context={"validator": type(self).__name__},
            )
        super().__init__(message)
        self.check = check

    def _accepts(self, outcome: Any) -> bool:
        return bool(outcome)

    def _failure_message(self) -> str:
        return self.default_message

    def validate(self, value: Any) -> FieldResult:
        try:
            outcome = self.check(value)
        except Exception as e:
            logger.warning(f"{type(self).__name__} check failed for value: {e!s}")
            return self._fail(self._failure_message())
        if inspect.isawaitable(outcome):
            if inspect.iscoroutine(outcome):
                outcome.close()
            logger.warning(
                f"{type(self).__name__} check returned an awaitable; use the async variant"
            )
            return self._fail(self._failure_message())
        if not self._accepts(outcome):
            return self._fail(self._failure_message())
        return FieldResult.success(value)


class Unique(Lookup):
    """Fails when an injected ``exists`` predicate reports the value as taken."""

    def __init__(
        self,
        exists: Callable[[Any], Any],
        name: str = "value",
        message: str | None = None,
    ):
        """Initialize the uniqueness validator.

        Args:
            exists: Predicate returning truthy when the value already exists
            name: Name used in the default message (e.g. a column name)
            message: Optional failure message
        """
        super().__init__(exists, message)
        self.name = name

    def _accepts(self, outcome: Any) -> bool:
        return not outcome

    def _failure_message(self) -> str:
        return f"{self.name} is not unique"


class AsyncLookup(Lookup):
    """Lookup whose predicate is awaited, bounded by a timeout.

    A timeout is reported like any other lookup fault: as a validation
    failure. Inside a running event loop use :meth:`validate_async`; the
    synchronous :meth:`validate` drives its own loop and refuses to run
    inside an existing one.
    """

    is_async = True

    def __init__(
        self,
        check: Callable[[Any], Awaitable[Any] | Any],
        message: str | None = None,
        timeout: float | None = DEFAULT_LOOKUP_TIMEOUT,
    ):
        super().__init__(check, message)
        self.timeout = timeout

    async def validate_async(self, value: Any) -> FieldResult:
        try:
            outcome = self.check(value)
            if inspect.isawaitable(outcome):
                outcome = await asyncio.wait_for(outcome, self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{type(self).__name__} check timed out after {self.timeout}s")
            return self._fail(self._failure_message())
        except Exception as e:
            logger.warning(f"{type(self).__name__} check failed for value: {e!s}")
            return self._fail(self._failure_message())
        if not self._accepts(outcome):
            return self._fail(self._failure_message())
        return FieldResult.success(value)

    def validate(self, value: Any) -> FieldResult:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.validate_async(value))
        raise RuntimeError(
            f"{type(self).__name__}.validate() called inside a running event loop; "
            "use validate_async() instead"
        )


class AsyncUnique(AsyncLookup):
    """Awaited counterpart of :class:`Unique`."""

    def __init__(
        self,
        exists: Callable[[Any], Awaitable[Any] | Any],
        name: str = "value",
        message: str | None = None,
        timeout: float | None = DEFAULT_LOOKUP_TIMEOUT,
    ):
        super().__init__(exists, message, timeout)
        self.name = name

    def _accepts(self, outcome: Any) -> bool:
        return not outcome

    def _failure_message(self) -> str:
        return f"{self.name} is not unique"
