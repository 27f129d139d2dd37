from __future__ import annotations
from typing import TypeVar

from collections.abc import Mapping

from pipeparse import *

_T = TypeVar("_T")
_NumberT = TypeVar("_NumberT", int, float)


def identity(value: _T) -> _T:
    return value

def token(parser: Parser[_T]) -> Parser[_T]:
    """`parser` with any whitespace around it skipped."""
    return succeed(identity).drop(whitespace).keep(parser).drop(whitespace)

def symbol(lit: str) -> Parser[str]:
    """`string(lit)` with any whitespace around it skipped."""
    return token(string(lit))

def signed(parser: Parser[_NumberT]) -> Parser[_NumberT]:
    """`parser` with an optional leading `-`."""
    return (
        succeed2(lambda sign, number: -number if sign is not None else number)
        .keep(optional(string("-")))
        .keep(parser)
    )

def is_hexadecimal(char: str) -> bool:
    return char in const.HEXADECIMAL

def is_identifier_start(char: str) -> bool:
    return char in const.ALPHABETIC or char == "_"

def is_identifier_char(char: str) -> bool:
    return char in const.ALNUM or char == "_"

identifier: Parser[str] = map2(take_if(is_identifier_start), take_while(is_identifier_char), lambda a, b: a + b)
"""A letter or `_`, followed by letters, digits and `_`s."""

# quoted string

_hex_digit = take_if(is_hexadecimal)

unicode_escape: Parser[str] = (
    succeed4(lambda a, b, c, d: chr(int(a + b + c + d, base=16)))
    .drop(string("u"))
    .keep(_hex_digit)
    .keep(_hex_digit)
    .keep(_hex_digit)
    .keep(_hex_digit)
)
"""`u` followed by 4 hexadecimal digits. The part after the escape character."""

def escape_sequence(escapes: Mapping[str, str] = const.JSON_ESCAPES, escape: str = "\\") -> Parser[str]:
    """The escape character followed by one of the keys of `escapes`, or by a unicode escape."""
    simple = [string(sequence).map(lambda _, result=result: result) for sequence, result in escapes.items()]
    return succeed(identity).drop(string(escape)).keep(one_of([*simple, unicode_escape]))

def quoted_string(
    quote: str = '"',
    *,
    escape: str = "\\",
    escapes: Mapping[str, str] = const.JSON_ESCAPES,
) -> Parser[str]:
    """
    A string between `quote`s, with escape sequences replaced.

    Fails with `Expected` at the offending spot if the closing quote or a valid escape sequence is missing.
    """
    plain = take_if_and_while(lambda char: char != quote and char != escape)
    content = many(one_of([escape_sequence(escapes, escape), plain]), succeed(None))
    return (
        succeed("".join)
        .drop(string(quote))
        .keep(content)
        .drop(string(quote))
    )
