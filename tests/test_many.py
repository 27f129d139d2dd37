"""Tests for the separator-aware repetition."""

from __future__ import annotations

from pipeparse import (
    Ok,
    Success,
    integer_number,
    is_digit,
    many,
    run,
    spaces,
    string,
    take_while,
)


def integers():
    """Helper: comma separated integers."""
    return many(integer_number, string(","))


class TestMany:
    def test_separated(self):
        assert integers().parse("1,2,3") == Success([1, 2, 3], "")

    def test_run(self):
        assert run("1,2,3", integers()) == Ok([1, 2, 3])

    def test_no_matches(self):
        assert integers().parse("abc") == Success([], "abc")

    def test_empty_input(self):
        assert integers().parse("") == Success([], "")

    def test_single(self):
        assert integers().parse("7") == Success([7], "")

    def test_trailing_separator(self):
        assert integers().parse("1,2,") == Success([1, 2], "")

    def test_stops_before_unparsable(self):
        assert integers().parse("1,2x") == Success([1, 2], "x")

    def test_double_separator(self):
        assert integers().parse("1,,2") == Success([1], ",2")

    def test_separator_with_spaces(self):
        separator = string(",").drop(spaces)
        assert many(integer_number, separator).parse("1, 2, 3 rest") == Success([1, 2, 3], " rest")

    def test_no_progress_stops(self):
        assert many(take_while(is_digit), spaces).parse("abc") == Success([""], "abc")

    def test_long_input(self):
        assert len(run("1," * 50_000, integers()).data) == 50_000
