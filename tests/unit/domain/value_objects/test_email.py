"""Unit tests for the Email value object."""

import copy

import pytest

from task_tracker.domain.value_objects import Email


@pytest.mark.unit
class TestEmailCreation:
    def test_normalizes_case_and_whitespace(self):
        result = Email.create("  John.Doe@Example.COM ")

        assert result.is_success
        assert result.value.value == "john.doe@example.com"
        assert result.value.domain == "example.com"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_rejects_empty(self, raw):
        result = Email.create(raw)

        assert result.is_failure
        assert result.error_message == "Email cannot be empty"

    def test_rejects_too_long(self):
        raw = "a" * 250 + "@example.com"

        result = Email.create(raw)

        assert result.error_message == "Email cannot exceed 256 characters"

    @pytest.mark.parametrize(
        "raw",
        ["plainaddress", "@example.com", "user@", "user@.com", "user@example.", "user@example"],
    )
    def test_rejects_malformed(self, raw):
        result = Email.create(raw)

        assert result.is_failure
        assert result.error_message == "Invalid email format"


@pytest.mark.unit
class TestEmailBehaviour:
    def test_equality_and_hash_follow_normalized_value(self):
        a = Email.create("USER@example.com").value
        b = Email.create("user@example.com").value

        assert a == b
        assert hash(a) == hash(b)
        assert a != "user@example.com"

    def test_is_immutable(self):
        email = Email.create("user@example.com").value

        with pytest.raises(AttributeError):
            email._value = "other@example.com"

    def test_deepcopy_returns_same_instance(self):
        email = Email.create("user@example.com").value

        assert copy.deepcopy(email) is email
