"""Tests for the synchronous validators."""

import logging

import pytest

from formknobs_common import ConfigurationError
from formknobs_forms.errors import ErrorKind
from formknobs_forms.validators import (
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
)


def messages(result):
    return [error.message for error in result.errors]


class TestNumericValidators:
    """Test Minimum, Maximum and Exact."""

    def test_minimum(self):
        """Test that values below the constraint fail."""
        assert Minimum(42).validate(44).value == 44
        assert Minimum(42).validate(42).valid
        result = Minimum(42).validate(4)
        assert not result.valid
        assert messages(result) == ["Value must be at least 42."]

    def test_minimum_float_precision(self):
        """Test that close floats are still compared exactly."""
        assert not Minimum(4.0000002).validate(4.0000001).valid
        assert Minimum(4.0000001).validate(4.0000002).valid

    def test_maximum(self):
        """Test that values above the constraint fail."""
        assert Maximum(10).validate(10).valid
        assert messages(Maximum(10).validate(11)) == ["Value must be at most 10."]

    def test_exact(self):
        """Test that only the exact value passes."""
        assert Exact(7).validate(7).valid
        assert messages(Exact(7).validate(8)) == ["Value must be exactly 7."]

    def test_custom_message(self):
        """Test that message= replaces the default text."""
        result = Minimum(18, message="You must be 18+.").validate(11)
        assert messages(result) == ["You must be 18+."]

    def test_constraint_must_be_number(self):
        """Test that non-numeric constraints are rejected."""
        with pytest.raises(TypeError):
            Minimum("18")
        with pytest.raises(TypeError):
            Maximum(True)


class TestLengthValidators:
    """Test the string length validators."""

    def test_minimum_length(self):
        """Test MinimumLength."""
        result = MinimumLength(12).validate("string")
        assert not result.valid
        assert messages(result) == ["String must be at least 12 characters long."]
        assert MinimumLength(6).validate("string").valid

    def test_maximum_length(self):
        """Test MaximumLength."""
        result = MaximumLength(6).validate("maxi string")
        assert messages(result) == ["String must be at most 6 characters long."]
        assert MaximumLength(6).validate("string").valid

    def test_exact_length(self):
        """Test ExactLength."""
        result = ExactLength(6).validate("wrong size")
        assert messages(result) == ["String must be exactly 6 characters long."]
        assert ExactLength(6).validate("string").valid

    def test_length_counts_characters(self):
        """Test that length counts code points, not bytes."""
        assert ExactLength(4).validate("café").valid

    def test_invalid_characters(self):
        """Test that the character count is checked."""
        with pytest.raises(ValueError):
            MinimumLength(-1)
        with pytest.raises(TypeError):
            MaximumLength("6")


class TestFormatValidators:
    """Test Email and Pattern."""

    @pytest.mark.parametrize(
        "address",
        ["email@email.com", "peter.pan@neverland.co.uk", "first+tag@example.org"],
    )
    def test_valid_emails(self, address):
        """Test addresses that pass."""
        assert Email().validate(address).valid

    @pytest.mark.parametrize(
        "address",
        ["not-an-email", "a@b", "@example.com", "user@", "two@@example.com", "sp ace@example.com"],
    )
    def test_invalid_emails(self, address):
        """Test addresses that fail."""
        result = Email().validate(address)
        assert messages(result) == ["Enter a valid email address."]

    def test_pattern_full_match(self):
        """Test that patterns must match the whole string."""
        validator = Pattern(r"[a-z]+")
        assert validator.validate("abc").valid
        assert messages(validator.validate("abc1")) == [
            "Value does not match the required format."
        ]

    def test_pattern_custom_message(self):
        """Test a pattern with its own message."""
        validator = Pattern(r"\d{5}", message="Enter a 5 digit postcode.")
        assert messages(validator.validate("1234")) == ["Enter a 5 digit postcode."]


class TestLookupValidators:
    """Test Lookup and Unique with injected predicates."""

    def test_lookup(self):
        """Test that the predicate decides."""
        allowed = {"red", "green"}
        validator = Lookup(lambda value: value in allowed)

        assert validator.validate("red").valid
        assert messages(validator.validate("blue")) == ["This value is not allowed."]

    def test_unique(self):
        """Test that existing values fail."""
        taken = {"admin"}
        validator = Unique(lambda value: value in taken, name="username")

        assert validator.validate("peter").valid
        assert messages(validator.validate("admin")) == ["username is not unique"]

    def test_unique_custom_message(self):
        """Test Unique with its own message."""
        validator = Unique(lambda value: True, message="Already registered.")
        assert messages(validator.validate("x")) == ["Already registered."]

    def test_predicate_fault_becomes_failure(self, caplog):
        """Test that an exception in the predicate is logged, not raised."""

        def broken(value):
            raise ConnectionError("database unavailable")

        with caplog.at_level(logging.WARNING, logger="formknobs_forms.validators"):
            result = Unique(broken, name="email").validate("a@b.com")

        assert not result.valid
        assert messages(result) == ["email is not unique"]
        assert "database unavailable" in caplog.text

    @pytest.mark.parametrize("validator_cls", [Lookup, Unique])
    def test_coroutine_predicate_rejected(self, validator_cls):
        """Test that a coroutine function cannot back a synchronous lookup."""

        async def exists(value):
            return False

        with pytest.raises(ConfigurationError, match="AsyncLookup or AsyncUnique"):
            validator_cls(exists)

    @pytest.mark.parametrize("validator_cls", [Lookup, Unique])
    def test_awaitable_outcome_fails(self, validator_cls, recwarn):
        """Test that a predicate returning an awaitable fails without passing silently."""

        async def exists(value):
            return False

        validator = validator_cls(lambda value: exists(value))
        result = validator.validate("fresh")

        assert not result.valid
        assert not [w for w in recwarn if "never awaited" in str(w.message)]

    def test_failures_are_validation_failed(self):
        """Test that every validator reports exactly one VALIDATION_FAILED."""
        for validator, value in [
            (Minimum(1), 0),
            (MaximumLength(1), "ab"),
            (Email(), "x"),
            (Lookup(lambda v: False), "x"),
        ]:
            result = validator.validate(value)
            assert len(result.errors) == 1
            assert result.errors[0].kind is ErrorKind.VALIDATION_FAILED

    @pytest.mark.asyncio
    async def test_sync_validators_await(self):
        """Test that synchronous validators also work through validate_async."""
        result = await MinimumLength(3).validate_async("ab")
        assert not result.valid
