"""
A JSON decoder.

```
decode('{ "foo": [1, 2.5, null] }')     # Ok({"foo": [1, 2.5, None]})
```

Objects become `dict`s, arrays become `list`s, numbers become `int`s or `float`s depending on whether they have a fraction or an exponent.
"""

from __future__ import annotations
from typing import Any

from decimal import Decimal
import functools
import logging

from pipeparse import *
from pipeparse.general import identity, token, quoted_string

logger = logging.getLogger(__name__)

JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None


def _literal(text: str, value: JsonValue) -> Parser[JsonValue]:
    return string(text).map(lambda _: value)

def _make_number(sign: str | None, mantissa: int | float, exponent: int | None) -> int | float:
    if sign is not None:
        mantissa = -mantissa
    if exponent is None:
        return mantissa
    return float(Decimal(repr(mantissa)).scaleb(exponent))

def number() -> Parser[int | float]:
    """An optional `-`, digits, an optional fraction and an optional exponent."""
    exponent = (
        succeed2(lambda sign, digits: -digits if sign == "-" else digits)
        .drop(one_of([string("e"), string("E")]))
        .keep(optional(one_of([string("+"), string("-")])))
        .keep(integer_number)
    )
    return (
        succeed3(_make_number)
        .keep(optional(string("-")))
        .keep(one_of([float_number, integer_number]))
        .keep(optional(exponent))
    )

def array() -> Parser[list[Any]]:
    return (
        succeed(identity)
        .drop(string("["))
        .keep(many(token(lazy(json_value)), string(",")))
        .drop(whitespace)
        .drop(string("]"))
    )

def obj() -> Parser[dict[str, Any]]:
    member = (
        succeed2(lambda key, value: (key, value))
        .drop(whitespace)
        .keep(quoted_string())
        .drop(whitespace)
        .drop(string(":"))
        .keep(token(lazy(json_value)))
    )
    return (
        succeed(dict)
        .drop(string("{"))
        .keep(many(member, string(",")))
        .drop(whitespace)
        .drop(string("}"))
    )

@functools.cache
def json_value() -> Parser[JsonValue]:
    """Any JSON value, without surrounding whitespace. Nested values are created lazily."""
    return one_of([
        obj(),
        array(),
        quoted_string(),
        number(),
        _literal("true", True),
        _literal("false", False),
        _literal("null", None),
    ])

@functools.cache
def document() -> Parser[JsonValue]:
    """A single JSON value that spans the whole input, surrounding whitespace allowed."""
    return token(json_value()).drop(eof)

def decode(text: str) -> Ok[JsonValue] | ParseFailure:
    logger.debug("Decoding %d characters of JSON", len(text))
    return run(text, document())

def loads(text: str) -> JsonValue:
    """Like `decode()`, but raises a `ParseError` instead of returning the failure."""
    return run_or_raise(text, document())
