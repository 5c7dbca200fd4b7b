"""Render binding: the structure handed to an external template layer.

For each declared field the rendered structure holds a record::

    {
        "name": {
            "label": "Your name",
            "value": "bob",
            "errors": ["Name should be longer than 3 characters."],
        },
    }

``value`` is omitted when nothing was submitted for the field and
``errors`` is omitted when the field has no errors. Values are emitted as
Python natives, which map one to one onto the Value variants.

The helper functions mirror the template tags a view layer typically
registers; :func:`template_helpers` returns them by name.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from .errors import ErrorCollection
from .values import Value

if TYPE_CHECKING:
    from .fieldset import Fieldset

RenderedFieldset = dict[str, dict[str, Any]]


def render_fieldset(
    fieldset: Fieldset,
    values: Mapping[str, Value] | None = None,
    errors: ErrorCollection | None = None,
) -> RenderedFieldset:
    """Build the label/value/errors record for every declared field.

    Args:
        fieldset: The fieldset declaration
        values: Submitted (echo) values by field name
        errors: Errors by field name

    Returns:
        Ordered mapping of field name to its render record
    """
    values = values or {}
    rendered: RenderedFieldset = {}
    for name, field_def in fieldset.fields.items():
        record: dict[str, Any] = {"label": field_def.label or name}
        if name in values:
            value = values[name]
            record["value"] = value.to_python() if isinstance(value, Value) else value
        if errors is not None and name in errors:
            record["errors"] = [error.description for error in errors[name]]
        rendered[name] = record
    return rendered


def label_for_field(rendered: Mapping[str, Any], name: str) -> str | None:
    record = rendered.get(name)
    return record.get("label") if record else None


def value_for_field(rendered: Mapping[str, Any], name: str) -> Any:
    record = rendered.get(name)
    return record.get("value") if record else None


def errors_for_field(rendered: Mapping[str, Any], name: str) -> list[str]:
    record = rendered.get(name)
    return list(record.get("errors", ())) if record else []


def field_has_errors(rendered: Mapping[str, Any], name: str) -> bool:
    return bool(errors_for_field(rendered, name))


def loop_errors_for_field(
    rendered: Mapping[str, Any], name: str, constant: str
) -> list[dict[str, str]]:
    """Errors for a field wrapped as loop items, e.g. ``[{"message": "..."}]``."""
    return [{constant: message} for message in errors_for_field(rendered, name)]


def template_helpers() -> dict[str, Callable[..., Any]]:
    """Helpers keyed by the name a template layer should expose them under."""
    return {
        "labelForField": label_for_field,
        "valueForField": value_for_field,
        "errorsForField": errors_for_field,
        "ifFieldHasErrors": field_has_errors,
        "loopErrorsForField": loop_errors_for_field,
    }
