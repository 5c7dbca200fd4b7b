"""Common exception hierarchy for all formknobs packages.

Every formknobs package extends these exceptions so that callers can catch a
single base class. Exceptions carry an optional context dictionary with
structured details about the failure (field names, config keys, ...).

Note that field-level validation problems are *not* raised: fields and
validators return them as values. The exceptions here are for programming
and configuration mistakes, and for the raising flavour of form binding.

Example:
    ```python
    from formknobs_common.exceptions import ConfigurationError, FormknobsError

    raise ConfigurationError(
        "Required field is not declared",
        context={"field": "email", "fieldset": "signup"}
    )

    try:
        build_fieldsets()
    except FormknobsError as e:
        logger.error(f"Error: {e}")
        if e.context:
            logger.error(f"Context: {e.context}")
    ```
"""

from typing import Any, Dict


class FormknobsError(Exception):
    """Base exception for all formknobs packages.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context
        details: Alternative to context (both are supported)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        # Details takes precedence if both are provided
        self.context = details or context or {}
        self.details = self.context


class ValidationError(FormknobsError):
    """Raised when submitted data fails validation and the caller asked for an exception.

    Example:
        ```python
        raise ValidationError(
            "Form did not validate",
            context={"fields": ["age"]}
        )
        ```
    """

    pass


class ConfigurationError(FormknobsError):
    """Raised when a declaration or configuration is invalid or inconsistent.

    Common scenarios include:
    - A required field name that is not declared on the fieldset
    - Unknown field or validator types in a configuration file
    - A form constructor that does not match its fieldset
    """

    pass


class NotFoundError(FormknobsError):
    """Raised when a requested item is not found (registry keys, config files)."""

    pass


class OperationError(FormknobsError):
    """Raised when an operation fails, e.g. registering a duplicate key."""

    pass


class SerializationError(FormknobsError):
    """Raised when configuration data cannot be decoded."""

    pass


__all__ = [
    "FormknobsError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "OperationError",
    "SerializationError",
]
