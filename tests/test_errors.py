"""Tests for the failure values and ParseError."""

from __future__ import annotations

import logging

import pytest

from pipeparse import (
    EOF,
    BadParser,
    Custom,
    Expected,
    Ok,
    ParseError,
    ParseFailure,
    Success,
    UnexpectedInput,
    eof,
    one_of,
    run,
    run_or_raise,
    string,
)


def notes(exc: BaseException) -> list[str]:
    return getattr(exc, "__notes__", [])


class TestFailureValues:
    def test_failures_are_falsy(self):
        for failure in [BadParser("x"), Custom("x"), EOF(), Expected("x", "y"), UnexpectedInput("x")]:
            assert not failure
            assert isinstance(failure, ParseFailure)

    def test_successes_are_truthy(self):
        assert Ok(None)
        assert Success(None, "")

    def test_equality_by_tag_and_payload(self):
        assert Custom("a") == Custom("a")
        assert Custom("a") != BadParser("a")
        assert Expected("x", "y") != Expected("x", "z")

    def test_pattern_matching(self):
        match run("c", string("b")):
            case Expected(what, got):
                assert (what, got) == ("starts with 'b'", "c")
            case _:
                pytest.fail("expected an Expected failure")

    def test_describe(self):
        assert Expected("end of file", " world").describe() == "Expected end of file, got ' world'."
        assert Expected("end of file", "").describe() == "Expected end of file, got the end of input."
        assert EOF().describe() == "Unexpected end of input."
        assert Custom("Too large.").describe() == "Too large."
        assert BadParser("empty").describe() == "Misconfigured parser: empty"

    def test_describe_shortens_long_input(self):
        assert Expected("x", "a" * 30).describe() == "Expected x, got '" + "a" * 20 + "...'."

    def test_position(self):
        assert Expected("end of file", " world").position("Hello world") == 5
        assert UnexpectedInput("c").position("abc") == 2
        assert EOF().position("abc") == 3
        assert Custom("x").position("abc") is None


class TestParseError:
    def test_success_returns_value(self):
        assert run_or_raise("Hello", string("Hello")) == "Hello"

    def test_raises_with_position(self):
        with pytest.raises(ParseError) as info:
            run_or_raise("Hello world", string("Hello").drop(eof))
        assert str(info.value) == "Expected end of file, got ' world'."
        assert info.value.failure == Expected("end of file", " world")
        assert notes(info.value)[0] == "At position 5 (line 1, column 6)\nHello world\n     ^"

    def test_position_on_later_line(self):
        with pytest.raises(ParseError) as info:
            run_or_raise("ab\ncd", string("ab\nc").drop(eof))
        assert notes(info.value)[0].startswith("At position 4 (line 2, column 2)")

    def test_long_line_excerpt(self):
        src = "x" * 30 + "!" + "y" * 30
        with pytest.raises(ParseError) as info:
            run_or_raise(src, string("x" * 30).drop(eof))
        assert notes(info.value)[0] == (
            "At position 30 (line 1, column 31)\n"
            + "x" * 20 + "!" + "y" * 19 + "\n"
            + " " * 20 + "^"
        )

    def test_crlf_line_ending(self):
        with pytest.raises(ParseError) as info:
            run_or_raise("ab\r\ncd", string("ab").drop(eof))
        assert notes(info.value)[0] == "At position 2 (line 1, column 3)\nab\n  ^"

    def test_no_position_for_bad_parser(self):
        with pytest.raises(ParseError) as info:
            run_or_raise("abc", one_of([]))
        assert isinstance(info.value.failure, BadParser)
        assert notes(info.value) == []

    def test_error_from_failure(self):
        error = Custom("nope").error("abc")
        assert isinstance(error, ParseError)
        assert error.src == "abc"


class TestLogging:
    def test_run_logs_outcome(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="pipeparse.main"):
            run("ab", string("a"))
            run("b", string("a"))
        assert "Parse succeeded with 1 characters left over" in caplog.text
        assert "Parse failed: Expected starts with 'a', got 'b'." in caplog.text
