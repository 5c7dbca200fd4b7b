"""Custom exceptions for the formknobs_forms package.

Built on the common exception framework from formknobs_common.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from formknobs_common import ConfigurationError, ValidationError

if TYPE_CHECKING:
    from .form import InvalidForm


class FormValidationError(ValidationError):
    """Raised by the raising flavour of form binding when submitted data is invalid.

    The failed run is available as ``invalid`` so the caller can re-render
    the form pre-filled with the submitted values and annotated with errors.
    """

    def __init__(self, invalid: InvalidForm):
        self.invalid = invalid
        names = invalid.errors.names()
        super().__init__(
            f"Form validation failed for: {', '.join(names)}",
            context={"fields": names},
        )


class InvalidValidatedDataError(ConfigurationError):
    """Raised when a form constructor cannot build itself from validated data.

    This points at a mismatch between a form and its fieldset (a programming
    mistake), never at bad user input.
    """

    def __init__(self, message: str, field_name: str | None = None):
        self.field_name = field_name
        if field_name:
            message = f"Field '{field_name}': {message}"
        super().__init__(message, context={"field_name": field_name} if field_name else None)
