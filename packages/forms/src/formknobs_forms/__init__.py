"""Validation engine for loosely-typed submitted data.

Declare a :class:`Fieldset` once, validate submitted data against it, and get
back either typed values or every error keyed by field name, ready to render.
"""

from .errors import ErrorCollection, ErrorKind, FieldError
from .exceptions import FormValidationError, InvalidValidatedDataError
from .factory import FieldsetFactory, fieldset_factory, load_fieldsets
from .fields import (
    FIELD_TYPES,
    BoolField,
    DoubleField,
    Field,
    IntegerField,
    StringField,
    UnsignedIntegerField,
)
from .fieldset import Fieldset, ValidationState
from .form import Form, InvalidForm, ValidatedData, bind, bind_async
from .rendering import (
    errors_for_field,
    field_has_errors,
    label_for_field,
    loop_errors_for_field,
    render_fieldset,
    template_helpers,
    value_for_field,
)
from .result import FieldResult, FieldsetResult, FormResult
from .sources import InputSource, MappingSource, as_source
from .validators import (
    AsyncLookup,
    AsyncUnique,
    Email,
    Exact,
    ExactLength,
    Lookup,
    Maximum,
    MaximumLength,
    Minimum,
    MinimumLength,
    Pattern,
    Unique,
    Validator,
)
from .values import Value, ValueKind

__version__ = "0.1.0"

__all__ = [
    # Values
    "Value",
    "ValueKind",
    # Errors
    "ErrorCollection",
    "ErrorKind",
    "FieldError",
    "FormValidationError",
    "InvalidValidatedDataError",
    # Results
    "FieldResult",
    "FieldsetResult",
    "FormResult",
    # Validators
    "Validator",
    "Minimum",
    "Maximum",
    "Exact",
    "MinimumLength",
    "MaximumLength",
    "ExactLength",
    "Email",
    "Pattern",
    "Lookup",
    "Unique",
    "AsyncLookup",
    "AsyncUnique",
    # Fields
    "FIELD_TYPES",
    "Field",
    "StringField",
    "IntegerField",
    "UnsignedIntegerField",
    "DoubleField",
    "BoolField",
    # Input
    "InputSource",
    "MappingSource",
    "as_source",
    # Fieldsets and forms
    "Fieldset",
    "ValidationState",
    "Form",
    "InvalidForm",
    "ValidatedData",
    "bind",
    "bind_async",
    # Rendering
    "render_fieldset",
    "label_for_field",
    "value_for_field",
    "errors_for_field",
    "field_has_errors",
    "loop_errors_for_field",
    "template_helpers",
    # Factories
    "FieldsetFactory",
    "fieldset_factory",
    "load_fieldsets",
]
