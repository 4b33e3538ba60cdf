"""Tests for index models."""

import pytest

from snipe.index.models import (
    CompiledLocation,
    ScriptedLocation,
    TestIndex,
    TestKind,
    TestRecord,
)


class TestTestKind:
    """Tests for the kind enum."""

    @pytest.mark.parametrize(
        ("kind", "short"),
        [(TestKind.COMPILED, "cc"), (TestKind.SCRIPTED, "py")],
    )
    def test_short_name_round_trips(self, kind: TestKind, short: str) -> None:
        assert kind.short_name == short
        assert TestKind.from_short_name(short) is kind

    def test_unknown_short_name_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown test kind"):
            TestKind.from_short_name("rs")

    def test_values_are_persisted_tags(self) -> None:
        assert str(TestKind.COMPILED) == "compiled"
        assert str(TestKind.SCRIPTED) == "scripted"


class TestTestRecord:
    """Tests for TestRecord."""

    def test_given_compiled_location_when_kind_then_compiled(self) -> None:
        record = TestRecord("test_a", CompiledLocation("a_rpunit", "src/a.cc"))

        assert record.kind is TestKind.COMPILED

    def test_given_scripted_location_when_kind_then_scripted(self) -> None:
        record = TestRecord("test_a", ScriptedLocation("tests/a_test.py", "ATest"))

        assert record.kind is TestKind.SCRIPTED

    def test_given_empty_name_when_created_then_raises(self) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            TestRecord("", CompiledLocation("a_rpunit", "src/a.cc"))

    def test_records_with_same_fields_are_equal_and_hashable(self) -> None:
        a = TestRecord("test_a", CompiledLocation("a_rpunit", "src/a.cc"))
        b = TestRecord("test_a", CompiledLocation("a_rpunit", "src/a.cc"))

        assert a == b
        assert len({a, b}) == 1

    def test_str_shows_location(self) -> None:
        record = TestRecord("test_a", ScriptedLocation("tests/a_test.py", "ATest"))

        assert str(record) == "test_a in tests/a_test.py::ATest"


class TestTestIndex:
    """Tests for TestIndex."""

    def test_given_no_records_when_checked_then_empty(self) -> None:
        assert TestIndex(kind=TestKind.COMPILED).is_empty

    def test_matching_is_exact_and_ordered(self) -> None:
        first = TestRecord("test_dup", CompiledLocation("a_rpunit", "a.cc"))
        other = TestRecord("test_dup_more", CompiledLocation("a_rpunit", "a.cc"))
        second = TestRecord("test_dup", CompiledLocation("b_rpunit", "b.cc"))
        index = TestIndex(kind=TestKind.COMPILED, records=[first, other, second])

        assert index.matching("test_dup") == [first, second]
        assert index.matching("test_du") == []
        assert index.matching("TEST_DUP") == []
