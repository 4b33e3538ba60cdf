"""Tests for interactive disambiguation."""

from unittest.mock import MagicMock, patch

from snipe.cli.select import _QUIT, select_record
from snipe.index.models import Ambiguous, CompiledLocation, TestRecord

A = TestRecord("test_dup", CompiledLocation("a_rpunit", "src/v/a/tests/t.cc"))
B = TestRecord("test_dup", CompiledLocation("b_rpunit", "src/v/b/tests/t.cc"))


def _prompt(answer: object) -> MagicMock:
    prompt = MagicMock()
    prompt.ask.return_value = answer
    return prompt


class TestSelectRecord:
    """select_record() tests."""

    def test_choices_follow_candidate_order_with_quit_last(self) -> None:
        with (
            patch("snipe.cli.select.get_console"),
            patch("snipe.cli.select.questionary.select", return_value=_prompt(B)) as select,
        ):
            chosen = select_record(Ambiguous("test_dup", (A, B)))

        assert chosen is B
        choices = select.call_args.kwargs["choices"]
        assert [c.value for c in choices] == [A, B, _QUIT]
        assert choices[0].title == "[1] a_rpunit (src/v/a/tests/t.cc)"

    def test_given_quit_then_none(self) -> None:
        with (
            patch("snipe.cli.select.get_console"),
            patch("snipe.cli.select.questionary.select", return_value=_prompt(_QUIT)),
        ):
            assert select_record(Ambiguous("test_dup", (A, B))) is None

    def test_given_interrupt_then_none(self) -> None:
        with (
            patch("snipe.cli.select.get_console"),
            patch("snipe.cli.select.questionary.select", return_value=_prompt(None)),
        ):
            assert select_record(Ambiguous("test_dup", (A, B))) is None

    def test_candidates_are_listed(self) -> None:
        with (
            patch("snipe.cli.select.get_console") as get_console,
            patch("snipe.cli.select.questionary.select", return_value=_prompt(A)),
        ):
            select_record(Ambiguous("test_dup", (A, B)))

        printed = [c.args[0] for c in get_console.return_value.print.call_args_list if c.args]
        assert any("Multiple matches found for test_dup" in p for p in printed)
        assert any("b_rpunit (src/v/b/tests/t.cc)" in p for p in printed)
