"""Unit tests for the FriendlyId value object."""

import pytest

from task_tracker.domain.value_objects import FriendlyId


@pytest.mark.unit
class TestFriendlyIdCreate:
    def test_uppercases_prefix(self):
        friendly_id = FriendlyId.create("eng", 42).value

        assert friendly_id.value == "ENG-42"
        assert friendly_id.project_prefix == "ENG"
        assert friendly_id.sequence_number == 42

    @pytest.mark.parametrize("number", [0, -1])
    def test_rejects_non_positive_sequence(self, number):
        assert FriendlyId.create("ENG", number).error_message == "Sequence number must be positive"

    def test_rejects_bool_sequence(self):
        assert FriendlyId.create("ENG", True).is_failure

    @pytest.mark.parametrize(
        ("prefix", "message"),
        [
            ("", "Project prefix cannot be empty"),
            ("ABCDEFGHIJK", "Project prefix cannot exceed 10 characters"),
            ("EN-G", "Project prefix can only contain letters and digits"),
        ],
    )
    def test_rejects_invalid_prefix(self, prefix, message):
        assert FriendlyId.create(prefix, 1).error_message == message


@pytest.mark.unit
class TestFriendlyIdParse:
    def test_parses_canonical_form(self):
        friendly_id = FriendlyId.parse("ENG-7").value

        assert friendly_id == FriendlyId.create("ENG", 7).value

    def test_parses_lowercase_prefix(self):
        assert FriendlyId.parse("eng-7").value.value == "ENG-7"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_rejects_empty(self, raw):
        assert FriendlyId.parse(raw).error_message == "Friendly ID cannot be empty"

    @pytest.mark.parametrize("raw", ["ENG", "ENG-1-2", "ENG7", "123"])
    def test_rejects_wrong_shape(self, raw):
        assert (
            FriendlyId.parse(raw).error_message
            == "Invalid friendly ID format. Expected format: PREFIX-NUMBER"
        )

    @pytest.mark.parametrize("raw", ["ENG-", "ENG-abc", "ENG-+1"])
    def test_rejects_bad_number(self, raw):
        assert FriendlyId.parse(raw).error_message == "Invalid sequence number in friendly ID"

    def test_rejects_empty_prefix(self):
        assert FriendlyId.parse("-5").error_message == "Project prefix cannot be empty"


@pytest.mark.unit
class TestFriendlyIdOrdering:
    def test_orders_numerically_within_prefix(self):
        ids = [FriendlyId.create("ENG", n).value for n in (10, 2, 1)]

        assert [f.value for f in sorted(ids)] == ["ENG-1", "ENG-2", "ENG-10"]

    def test_orders_by_prefix_first(self):
        assert FriendlyId.create("API", 99).value < FriendlyId.create("ENG", 1).value

    def test_hash_matches_equality(self):
        assert len({FriendlyId.create("ENG", 1).value, FriendlyId.parse("eng-1").value}) == 1

    def test_supports_all_comparisons(self):
        eng_1 = FriendlyId.create("ENG", 1).value
        eng_2 = FriendlyId.create("ENG", 2).value

        assert eng_1 <= eng_2
        assert eng_1 <= FriendlyId.parse("eng-1").value
        assert eng_2 > eng_1
        assert eng_2 >= eng_1
        assert not eng_1 >= eng_2
        assert max([eng_2, eng_1]) is eng_2
