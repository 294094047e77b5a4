"""Unit tests for the Slug value object."""

import pytest

from task_tracker.domain.value_objects import Slug


@pytest.mark.unit
class TestSlug:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("My Project", "my-project"),
            ("  Hello,   World!  ", "hello-world"),
            ("already-a-slug", "already-a-slug"),
            ("--Trim--Me--", "trim-me"),
            ("Q3 2024 / Roadmap", "q3-2024-roadmap"),
        ],
    )
    def test_normalizes(self, raw, expected):
        result = Slug.create(raw)

        assert result.is_success
        assert result.value.value == expected
        assert str(result.value) == expected

    @pytest.mark.parametrize("raw", [None, "", "  "])
    def test_rejects_empty(self, raw):
        assert Slug.create(raw).error_message == "Slug cannot be empty"

    @pytest.mark.parametrize("raw", ["a", "a!!!"])
    def test_rejects_too_short(self, raw):
        assert Slug.create(raw).error_message == "Slug must be at least 2 characters long"

    def test_rejects_too_long(self):
        result = Slug.create("x" * 51)

        assert result.error_message == "Slug cannot exceed 50 characters"

    def test_accepts_boundary_lengths(self):
        assert Slug.create("ab").is_success
        assert Slug.create("x" * 50).is_success

    def test_equality(self):
        assert Slug.create("My Project").value == Slug.create("my-project").value
