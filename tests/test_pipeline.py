"""Tests for the succeed/keep/drop pipeline."""

from __future__ import annotations

import operator

from pipeparse import (
    Expected,
    Ok,
    Success,
    UnexpectedInput,
    drop,
    eof,
    integer_number,
    keep,
    run,
    spaces,
    string,
    succeed,
    succeed2,
    succeed3,
    succeed4,
)


def addition():
    """Helper: `<int> + <int>`."""
    return (
        succeed2(operator.add)
        .keep(integer_number)
        .drop(spaces)
        .drop(string("+"))
        .drop(spaces)
        .keep(integer_number)
    )


class TestSucceed:
    def test_consumes_nothing(self):
        assert succeed(5).parse("abc") == Success(5, "abc")

    def test_empty_input(self):
        assert run("", succeed("x")) == Ok("x")


class TestKeepDrop:
    def test_keep(self):
        assert keep(succeed(str.upper), string("a")).parse("ab") == Success("A", "b")

    def test_drop(self):
        assert drop(string("a"), string("b")).parse("abc") == Success("a", "c")

    def test_drop_failure(self):
        assert drop(string("a"), string("b")).parse("ac") == Expected("starts with 'b'", "c")

    def test_keep_failure(self):
        assert keep(succeed(str.upper), string("a")).parse("b") == Expected("starts with 'a'", "b")


class TestPipelines:
    def test_addition(self):
        assert run("1 + 2", addition()) == Ok(3)

    def test_addition_without_spaces(self):
        assert run("40+2", addition()) == Ok(42)

    def test_addition_missing_operand(self):
        assert run("1 + x", addition()) == UnexpectedInput("x")

    def test_addition_missing_operator(self):
        assert run("1 2", addition()) == Expected("starts with '+'", "2")

    def test_three_arguments(self):
        date = (
            succeed3(lambda year, month, day: (year, month, day))
            .keep(integer_number)
            .drop(string("-"))
            .keep(integer_number)
            .drop(string("-"))
            .keep(integer_number)
            .drop(eof)
        )
        assert run("2024-01-15", date) == Ok((2024, 1, 15))

    def test_four_arguments(self):
        address = (
            succeed4(lambda a, b, c, d: (a, b, c, d))
            .keep(integer_number)
            .drop(string("."))
            .keep(integer_number)
            .drop(string("."))
            .keep(integer_number)
            .drop(string("."))
            .keep(integer_number)
        )
        assert run("10.0.0.1", address) == Ok((10, 0, 0, 1))

    def test_partial_application_is_fresh(self):
        parser = addition()
        assert run("1+1", parser) == Ok(2)
        assert run("2+2", parser) == Ok(4)
