"""Tests for binding validated data onto forms."""

import logging
from dataclasses import dataclass

import pytest

from formknobs_common import ConfigurationError, FormknobsError, ValidationError
from formknobs_forms import (
    FieldError,
    Fieldset,
    Form,
    FormValidationError,
    IntegerField,
    InvalidForm,
    InvalidValidatedDataError,
    StringField,
    ValidatedData,
    Value,
    bind,
)


class TestValidatedData:
    """Test the read-only view handed to constructors."""

    def test_mapping_interface(self):
        """Test that it behaves as a read-only mapping."""
        data = ValidatedData({"name": Value.string("Wendy")})

        assert data["name"] == Value.string("Wendy")
        assert list(data) == ["name"]
        assert len(data) == 1
        with pytest.raises(TypeError):
            data["name"] = Value.string("x")

    def test_require(self):
        """Test that require() returns natives or raises."""
        data = ValidatedData({"age": Value.unsigned(33)})

        assert data.require("age") == 33
        with pytest.raises(InvalidValidatedDataError) as exc_info:
            data.require("name")
        assert exc_info.value.field_name == "name"
        assert "missing from validated data" in str(exc_info.value)

    def test_optional(self):
        """Test defaults for absent values."""
        data = ValidatedData({})
        assert data.optional("nickname") is None
        assert data.optional("nickname", "none") == "none"


class TestBind:
    """Test bind() with an explicit constructor and fieldset."""

    def test_success(self, person_fieldset):
        """Test that the constructor receives the validated values."""
        result = bind(dict, person_fieldset, {"name": "Peter Pan", "age": "33"})

        assert result.valid
        assert result.form == {"name": Value.string("Peter Pan"), "age": Value.unsigned(33)}
        assert result.invalid is None

    def test_failure_snapshot(self, person_fieldset):
        """Test that invalid data yields an InvalidForm and no record."""
        calls = []
        result = bind(calls.append, person_fieldset, {"name": "Peter Pan", "age": 11})

        assert not result.valid
        assert calls == []
        assert isinstance(result.invalid, InvalidForm)
        assert result.invalid.to_dict() == {
            "errors": {"age": ["Value must be at least 18."]},
            "values": {"name": "Peter Pan", "age": 11},
        }

    def test_key_error_is_developer_error(self, caplog):
        """Test that a constructor reading an absent key fails loudly."""
        fieldset = Fieldset({"name": StringField(), "nickname": StringField()})

        def build(validated):
            return (validated["name"], validated["nickname"])

        with caplog.at_level(logging.ERROR, logger="formknobs_forms.form"):
            with pytest.raises(InvalidValidatedDataError) as exc_info:
                bind(build, fieldset, {"name": "Peter"})

        assert exc_info.value.field_name == "nickname"
        assert isinstance(exc_info.value, ConfigurationError)
        assert "nickname" in caplog.text


class TestForm:
    """Test the Form base class."""

    def test_validating_success(self, person_form):
        """Test that a valid submission builds the form."""
        result = person_form.validating({"name": "Peter Pan", "age": 33})

        assert result.valid
        assert result.form == person_form(name="Peter Pan", age=33)

    def test_validating_failure(self, person_form):
        """Test that an invalid submission returns the snapshot."""
        result = person_form.validating({"name": "Peter Pan", "age": 11})

        assert not result.valid
        assert result.form is None
        assert result.invalid.values["name"] == Value.string("Peter Pan")
        assert result.invalid.errors.names() == ["age"]

    def test_from_data_raises(self, person_form):
        """Test that the raising flavour carries the snapshot."""
        with pytest.raises(FormValidationError) as exc_info:
            person_form.from_data({"name": "Peter Pan"})

        error = exc_info.value
        assert isinstance(error, ValidationError)
        assert isinstance(error, FormknobsError)
        assert error.invalid.errors.to_dict() == {"age": ["This field is required."]}
        assert error.context["fields"] == ["age"]

    def test_from_data_success(self, person_form):
        """Test that the raising flavour returns the form."""
        form = person_form.from_data({"name": "Wendy", "age": "18"})
        assert form.name == "Wendy"
        assert form.age == 18

    def test_explicit_fieldset_overrides(self, person_form):
        """Test that a fieldset passed in takes precedence."""
        lenient = Fieldset({"name": StringField(), "age": IntegerField()})
        form = person_form.from_data({"name": "Michael", "age": 6}, fieldset=lenient)
        assert form.age == 6

    def test_mismatched_fieldset(self, person_form):
        """Test that a fieldset without the form's fields is a developer error."""
        names_only = Fieldset({"name": StringField()})
        with pytest.raises(InvalidValidatedDataError) as exc_info:
            person_form.validating({"name": "John"}, fieldset=names_only)
        assert exc_info.value.field_name == "age"

    def test_form_without_fieldset(self):
        """Test that a form needs a fieldset from somewhere."""

        @dataclass
        class Orphan(Form):
            name: str

            @classmethod
            def from_validated(cls, validated):
                return cls(name=validated.require("name"))

        with pytest.raises(ConfigurationError):
            Orphan.validating({"name": "x"})

        fieldset = Fieldset({"name": StringField()}, requiring=["name"])
        assert Orphan.from_data({"name": "x"}, fieldset=fieldset) == Orphan(name="x")


class TestInvalidForm:
    """Test the failed-run snapshot."""

    def test_render(self, person_form):
        """Test that the snapshot renders with values and errors."""
        invalid = person_form.validating({"name": "Peter Pan", "age": 11}).invalid

        assert invalid.render() == {
            "name": {"label": "name", "value": "Peter Pan"},
            "age": {"label": "age", "value": 11, "errors": ["Value must be at least 18."]},
        }

    def test_snapshot_is_detached(self, person_fieldset):
        """Test that the snapshot does not share errors with the result."""
        result = person_fieldset.validate({"name": "Peter Pan", "age": 11})
        invalid = InvalidForm.from_result(person_fieldset, result)

        result.errors["name"].append(FieldError.required_missing())
        assert "name" not in invalid.errors
