"""Factories for building fieldsets from configuration."""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from formknobs_common import ConfigurationError, Registry
from formknobs_config import FactoryBase, load_config

from .fields import FIELD_TYPES, Field
from .fieldset import Fieldset
from .validators import (
    DEFAULT_LOOKUP_TIMEOUT,
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

logger = logging.getLogger(__name__)

Collaborators = Registry[Callable[..., Any]] | Mapping[str, Callable[..., Any]]

_CONSTRAINT_VALIDATORS: dict[str, type[Validator]] = {
    "minimum": Minimum,
    "maximum": Maximum,
    "exact": Exact,
}

_LENGTH_VALIDATORS: dict[str, type[Validator]] = {
    "min_length": MinimumLength,
    "max_length": MaximumLength,
    "exact_length": ExactLength,
}


class FieldsetFactory(FactoryBase):
    """Factory for creating fieldsets from configuration.

    Lookup predicates and final validation hooks cannot be written in a
    configuration file, so they are referred to by name and resolved
    against the ``lookups`` and ``hooks`` collaborators supplied by the
    application.

    Configuration Options:
        name (str): Fieldset name
        required (list): Names of required fields
        final_validation (str): Name of a hook in ``hooks``
        fields (list): List of field definitions

    Field Definition Options:
        name (str): Field name, matching the submitted key
        type (str): string, integer, unsigned, double or bool
        label (str): Display label
        validators (list): List of validator definitions

    Example Configuration:
        fieldsets:
          - name: signup
            required: [username, age]
            fields:
              - name: username
                type: string
                label: Username
                validators:
                  - type: max_length
                    characters: 32
                  - type: unique
                    check: username_taken
                    name: username
              - name: age
                type: unsigned
                validators:
                  - type: minimum
                    value: 18
                    message: You must be 18+.
    """

    def __init__(
        self,
        lookups: Collaborators | None = None,
        hooks: Collaborators | None = None,
    ):
        """Initialize the factory.

        Args:
            lookups: Named predicates for ``lookup``/``unique`` validators
            hooks: Named final validation hooks
        """
        self.lookups = lookups if lookups is not None else {}
        self.hooks = hooks if hooks is not None else {}

    def create(self, **config: Any) -> Fieldset:
        """Create a Fieldset from configuration.

        Raises:
            ConfigurationError: On unknown types or unresolved names
        """
        name = config.get("name", "unnamed_fieldset")
        logger.info(f"Creating fieldset: {name}")

        fields: dict[str, Field] = {}
        for field_config in config.get("fields", []):
            field_name = field_config.get("name")
            if not field_name:
                raise ConfigurationError(
                    "Field configuration missing 'name'", context={"fieldset": name}
                )
            if field_name in fields:
                raise ConfigurationError(
                    f"Field '{field_name}' declared twice",
                    context={"fieldset": name, "field": field_name},
                )
            fields[field_name] = self._build_field(name, field_config)

        hook = None
        hook_name = config.get("final_validation")
        if hook_name:
            hook = self._resolve(self.hooks, hook_name, "hook", name)

        return Fieldset(
            fields,
            requiring=config.get("required", []),
            final_validation=hook,
            name=name,
        )

    def _build_field(self, fieldset_name: str, field_config: dict[str, Any]) -> Field:
        field_type = str(field_config.get("type", "string")).lower()
        field_cls = FIELD_TYPES.get(field_type)
        if field_cls is None:
            raise ConfigurationError(
                f"Unknown field type: {field_type}",
                context={
                    "fieldset": fieldset_name,
                    "field": field_config.get("name"),
                    "available": sorted(FIELD_TYPES),
                },
            )
        validators = [
            self._build_validator(fieldset_name, v) for v in field_config.get("validators", [])
        ]
        return field_cls(*validators, label=field_config.get("label"))

    def _build_validator(self, fieldset_name: str, config: dict[str, Any]) -> Validator:
        validator_type = str(config.get("type", "")).lower()
        message = config.get("message")

        try:
            if validator_type in _CONSTRAINT_VALIDATORS:
                return _CONSTRAINT_VALIDATORS[validator_type](config["value"], message=message)
            if validator_type in _LENGTH_VALIDATORS:
                return _LENGTH_VALIDATORS[validator_type](config["characters"], message=message)
            if validator_type == "email":
                return Email(message=message)
            if validator_type == "pattern":
                return Pattern(config["pattern"], message=message)
        except KeyError as e:
            raise ConfigurationError(
                f"Validator '{validator_type}' is missing option {e.args[0]!r}",
                context={"fieldset": fieldset_name, "validator": validator_type},
            ) from e
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid options for validator '{validator_type}': {e}",
                context={"fieldset": fieldset_name, "validator": validator_type},
            ) from e

        if validator_type in ("lookup", "unique"):
            return self._build_lookup(fieldset_name, validator_type, config, message)

        raise ConfigurationError(
            f"Unknown validator type: {validator_type}",
            context={"fieldset": fieldset_name, "validator": validator_type},
        )

    def _build_lookup(
        self,
        fieldset_name: str,
        validator_type: str,
        config: dict[str, Any],
        message: str | None,
    ) -> Validator:
        check_name = config.get("check")
        if not check_name:
            raise ConfigurationError(
                f"Validator '{validator_type}' needs a 'check' name",
                context={"fieldset": fieldset_name, "validator": validator_type},
            )
        check = self._resolve(self.lookups, check_name, "lookup", fieldset_name)

        if config.get("async", False):
            timeout = config.get("timeout", DEFAULT_LOOKUP_TIMEOUT)
            if validator_type == "unique":
                return AsyncUnique(
                    check, name=config.get("name", "value"), message=message, timeout=timeout
                )
            return AsyncLookup(check, message=message, timeout=timeout)

        if validator_type == "unique":
            return Unique(check, name=config.get("name", "value"), message=message)
        return Lookup(check, message=message)

    @staticmethod
    def _resolve(collaborators: Collaborators, key: str, kind: str, fieldset_name: str) -> Any:
        if isinstance(collaborators, Registry):
            found = collaborators.get_optional(key)
        else:
            found = collaborators.get(key)
        if found is None:
            raise ConfigurationError(
                f"Unknown {kind}: {key}",
                context={"fieldset": fieldset_name, kind: key},
            )
        return found


def load_fieldsets(
    source: str | Path | dict[str, Any],
    lookups: Collaborators | None = None,
    hooks: Collaborators | None = None,
) -> dict[str, Fieldset]:
    """Load every fieldset declared under ``fieldsets`` in a config source.

    Args:
        source: YAML/JSON file path, or a configuration dictionary
        lookups: Named predicates for lookup validators
        hooks: Named final validation hooks

    Returns:
        Fieldsets by name
    """
    config = load_config(source)
    entries = config.get("fieldsets", [])
    if isinstance(entries, dict):
        entries = [entries]

    factory = FieldsetFactory(lookups=lookups, hooks=hooks)
    fieldsets: dict[str, Fieldset] = {}
    for fieldset in factory.create_all(entries):
        if fieldset.name in fieldsets:
            raise ConfigurationError(
                f"Fieldset '{fieldset.name}' declared twice",
                context={"fieldset": fieldset.name},
            )
        fieldsets[fieldset.name] = fieldset
    logger.info(f"Loaded {len(fieldsets)} fieldsets")
    return fieldsets


# Singleton without collaborators, for configurations that need none
fieldset_factory = FieldsetFactory()
