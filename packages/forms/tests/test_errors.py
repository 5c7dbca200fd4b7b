"""Tests for FieldError and ErrorCollection."""

from formknobs_forms.errors import ErrorCollection, ErrorKind, FieldError


class TestFieldError:
    """Test error kinds and descriptions."""

    def test_descriptions(self):
        """Test the human-readable text of each kind."""
        assert FieldError.incorrect_type().description == "This field's value is of incorrect type."
        assert FieldError.required_missing().description == "This field is required."
        assert FieldError.invalid_validated_data().description == "Invalid validated data."
        assert FieldError.validation_failed("Too short").description == "Too short"

    def test_only_validation_failed_carries_message(self):
        """Test that fixed-text kinds have no message."""
        assert FieldError.required_missing().message is None
        assert FieldError.validation_failed("x").kind is ErrorKind.VALIDATION_FAILED

    def test_str(self):
        """Test that str() gives the description."""
        assert str(FieldError.validation_failed("Bad")) == "Bad"

    def test_equality(self):
        """Test that errors compare by value."""
        assert FieldError.validation_failed("a") == FieldError.validation_failed("a")
        assert FieldError.validation_failed("a") != FieldError.validation_failed("b")


class TestErrorCollection:
    """Test the field-keyed error multi-map."""

    def test_missing_key_reads_empty(self):
        """Test that subscripting an unknown name never raises."""
        errors = ErrorCollection()
        assert errors["nope"] == []
        assert errors.is_empty

    def test_append_creates_key(self):
        """Test that appending to a missing key creates it."""
        errors = ErrorCollection()
        errors["age"].append(FieldError.required_missing())

        assert "age" in errors
        assert errors["age"] == [FieldError.required_missing()]
        assert len(errors) == 1

    def test_empty_lists_are_ignored(self):
        """Test that names with empty lists do not count."""
        errors = ErrorCollection()
        errors["a"]
        errors["b"] = []

        assert errors.is_empty
        assert not errors
        assert len(errors) == 0
        assert "a" not in errors
        assert errors == ErrorCollection()

    def test_construct_from_pairs_concatenates(self):
        """Test that repeated names are concatenated."""
        errors = ErrorCollection(
            [
                ("name", [FieldError.validation_failed("one")]),
                ("name", [FieldError.validation_failed("two")]),
            ]
        )
        assert [e.message for e in errors["name"]] == ["one", "two"]

    def test_construct_from_mapping(self):
        """Test construction from a mapping."""
        errors = ErrorCollection({"email": [FieldError.required_missing()]})
        assert errors.names() == ["email"]

    def test_insertion_order(self):
        """Test that names iterate in insertion order."""
        errors = ErrorCollection()
        errors.add("z", FieldError.required_missing())
        errors.add("a", FieldError.required_missing())
        assert list(errors) == ["z", "a"]

    def test_get_does_not_create(self):
        """Test that get() returns a copy and adds nothing."""
        errors = ErrorCollection()
        copy = errors.get("name")
        copy.append(FieldError.required_missing())
        assert errors.get("name") == []
        assert errors.is_empty

    def test_extend_and_delete(self):
        """Test extending and deleting entries."""
        errors = ErrorCollection()
        errors.extend("name", [FieldError.incorrect_type(), FieldError.required_missing()])
        assert len(errors["name"]) == 2

        del errors["name"]
        del errors["never_there"]
        assert errors.is_empty

    def test_copy_is_independent(self):
        """Test that copies do not share lists."""
        errors = ErrorCollection({"a": [FieldError.required_missing()]})
        copied = errors.copy()
        copied["a"].append(FieldError.incorrect_type())

        assert len(errors["a"]) == 1
        assert copied != errors

    def test_to_dict(self):
        """Test conversion to messages for API responses."""
        errors = ErrorCollection()
        errors["email"].append(FieldError.required_missing())
        errors["age"].append(FieldError.validation_failed("Value must be at least 18."))
        errors["unused"]

        assert errors.to_dict() == {
            "email": ["This field is required."],
            "age": ["Value must be at least 18."],
        }
