"""Pytest configuration and fixtures for forms package tests."""

from dataclasses import dataclass

import pytest

from formknobs_forms import (
    BoolField,
    Fieldset,
    Form,
    Minimum,
    MinimumLength,
    StringField,
    UnsignedIntegerField,
)


@pytest.fixture
def person_fieldset():
    """Name and age, both required; age must be 18 or more."""
    return Fieldset(
        {
            "name": StringField(label="Your name"),
            "age": UnsignedIntegerField(Minimum(18), label="Your age"),
        },
        requiring=["name", "age"],
        name="person",
    )


@pytest.fixture
def signup_fieldset():
    """Signup fieldset with an optional newsletter checkbox."""
    return Fieldset(
        {
            "username": StringField(MinimumLength(4), label="Username"),
            "age": UnsignedIntegerField(Minimum(18)),
            "newsletter": BoolField(label="Send me news"),
        },
        requiring=["username"],
        name="signup",
    )


@dataclass
class Person(Form):
    """Form bound to a name/age fieldset through the class attribute."""

    name: str
    age: int

    fieldset = Fieldset(
        {
            "name": StringField(),
            "age": UnsignedIntegerField(Minimum(18)),
        },
        requiring=["name", "age"],
        name="person_form",
    )

    @classmethod
    def from_validated(cls, validated):
        return cls(name=validated.require("name"), age=validated.require("age"))


@pytest.fixture
def person_form():
    """The Person form class."""
    return Person
