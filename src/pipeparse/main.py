"""
The implementations of the parser type, the failures and the combinators.
"""

from __future__ import annotations
from typing import Any, Literal, Self, TypeVar, Generic, Final, Callable

from collections.abc import Iterable
from dataclasses import dataclass
import logging
import operator

import pipeparse.const as const

logger = logging.getLogger(__name__)


_T = TypeVar("_T")
_U = TypeVar("_U")
_V = TypeVar("_V")
_W = TypeVar("_W")
_R = TypeVar("_R")



@dataclass(frozen=True)
class ParseFailure:
    """
    When returned from a parser, indicates that it has failed. Can be converted into a `ParseError`.

    Never instantiated directly, one of the subclasses is returned instead:
    `BadParser`, `Custom`, `EOF`, `Expected` or `UnexpectedInput`.

    ```
    r = run(src, parser)
    if r:
        ... # `r` is an `Ok` object
    else:
        match r:
            case Expected(what, got): ...
            case EOF(): ...
    ```
    """

    def __bool__(self) -> Literal[False]:
        return False

    def describe(self) -> str:
        """A human readable reason for the failure."""
        raise NotImplementedError

    def remaining(self) -> str | None:
        """The unconsumed input at the failure point, if the failure knows it."""
        return None

    def position(self, src: str) -> int | None:
        """
        The offset of the failure within `src`.

        `src` must be the string originally given to `run`, since the remaining input is always a suffix of it.
        """
        remaining = self.remaining()
        if remaining is None or not src.endswith(remaining):
            return None
        return len(src) - len(remaining)

    def error(self, src: str) -> ParseError:
        """Converts this to a ParseError."""
        return ParseError(src, self)

@dataclass(frozen=True)
class BadParser(ParseFailure):
    """A combinator was used in a way that can never succeed. (E.g. `one_of([])`)"""
    message: str

    def describe(self) -> str:
        return f"Misconfigured parser: {self.message}"

@dataclass(frozen=True)
class Custom(ParseFailure):
    """A failure reason supplied by the grammar itself."""
    message: str

    def describe(self) -> str:
        return self.message

@dataclass(frozen=True)
class EOF(ParseFailure):
    """The input ran out while at least one more character was required."""

    def describe(self) -> str:
        return "Unexpected end of input."

    def remaining(self) -> str | None:
        return ""

@dataclass(frozen=True)
class Expected(ParseFailure):
    """A specific token was required. `got` is the unconsumed input at the failure point."""
    what: str
    got: str

    def describe(self) -> str:
        if not self.got:
            return f"Expected {self.what}, got the end of input."
        return f"Expected {self.what}, got {_excerpt(self.got)!r}."

    def remaining(self) -> str | None:
        return self.got

@dataclass(frozen=True)
class UnexpectedInput(ParseFailure):
    """A character predicate rejected the input. `context` is the unconsumed input at the failure point."""
    context: str

    def describe(self) -> str:
        return f"Unexpected input {_excerpt(self.context)!r}."

    def remaining(self) -> str | None:
        return self.context

def _excerpt(text: str) -> str:
    if len(text) <= const.EXCERPT_LENGTH:
        return text
    return text[:const.EXCERPT_LENGTH] + "..."


class ParseError(Exception):
    """
    The exception that's raised by `run_or_raise()` when the parser fails.

    The original `ParseFailure` is kept in `failure`.
    """

    def __init__(self, src: str, failure: ParseFailure) -> None:
        """
        `src`: The string that was being parsed.
        `failure`: The failure returned by the parser.
        """
        super().__init__(failure.describe())
        self.src: str = src
        self.failure: ParseFailure = failure
        pos = failure.position(src)
        if pos is not None:
            self.add_position_note(pos)

    def add_position_note(self, pos: int) -> Self:
        """
        Adds a note with the line and column of `pos`, and the surrounding part of its line with a `^` under it.

        At most `const.EXCERPT_LENGTH` characters are shown on each side of `pos`.
        """
        line_start = self.src.rfind("\n", 0, pos) + 1
        line_end = self.src.find("\n", pos)
        if line_end == -1:
            line_end = len(self.src)
        line = self.src.count("\n", 0, pos) + 1
        column = pos - line_start + 1

        before = self.src[max(line_start, pos - const.EXCERPT_LENGTH):pos]
        after = _excerpt(self.src[pos:line_end].rstrip("\r")).removesuffix("...")
        self.add_note(
            f"At position {pos} (line {line}, column {column})\n"
            f"{before}{after}\n"
            f"{' ' * len(before)}^"
        )
        return self



@dataclass(frozen=True)
class Success(Generic[_T]):
    """
    The outcome of a single successful parsing step.

    `data` is the parsed value, `rest` is the unconsumed suffix of the input.
    """
    data: _T
    rest: str

    def __bool__(self) -> Literal[True]:
        return True

@dataclass(frozen=True)
class Ok(Generic[_T]):
    """
    Returned from `run()` when the parser succeeded.

    ```
    r = run(src, parser)
    if r:
        output = r.data
    ```
    """
    data: _T

    def __bool__(self) -> Literal[True]:
        return True


StepFunction = Callable[[str], Success[_T] | ParseFailure]


class Parser(Generic[_T]):
    """
    A parsing function wrapped in an immutable object.

    Create parsers with the primitives (`string`, `take_if`, ...) and combine them with the combinators (`map`, `then`, `one_of`, `many`, ...).
    Nothing is parsed until the parser is given to `run()`.

    The combinators are also available as methods, so a pipeline can be written left to right:
    ```
    sum_parser = (
        succeed2(operator.add)
        .keep(integer_number)
        .drop(spaces)
        .drop(string("+"))
        .drop(spaces)
        .keep(integer_number)
    )
    ```
    """

    __slots__ = ("_step", "name")

    def __init__(self, step: StepFunction[_T], name: str | None = None) -> None:
        """
        `step`: Takes the remaining input. Returns a `Success` whose `rest` is a suffix of the input, or a `ParseFailure`.
        `name`: Only used for `repr()` and logging.
        """
        self._step: Final[StepFunction[_T]] = step
        self.name: Final[str | None] = name

    def parse(self, src: str) -> Success[_T] | ParseFailure:
        """Runs a single step. Unlike `run()`, the remaining input is kept in the returned `Success`."""
        return self._step(src)

    def __repr__(self) -> str:
        return "<Parser>" if self.name is None else f"<Parser {self.name}>"

    def map(self, f: Callable[[_T], _U]) -> Parser[_U]:
        """Same as `map(self, f)`."""
        return map(self, f)

    def then(self, f: Callable[[_T], Parser[_U]]) -> Parser[_U]:
        """Same as `then(self, f)`."""
        return then(self, f)

    def keep(self: Parser[Callable[[_U], _V]], arg: Parser[_U]) -> Parser[_V]:
        """Same as `keep(self, arg)`."""
        return keep(self, arg)

    def drop(self, ignored: Parser[Any]) -> Parser[_T]:
        """Same as `drop(self, ignored)`."""
        return drop(self, ignored)

    def optional(self) -> Parser[_T | None]:
        """Same as `optional(self)`."""
        return optional(self)


def run(src: str, parser: Parser[_T]) -> Ok[_T] | ParseFailure:
    """
    Applies the parser to the whole input.

    Input left over by the parser is discarded. Compose with `eof` to require full consumption:
    ```
    run("Hello world", string("Hello").drop(eof))   # Expected("end of file", got=" world")
    ```
    """
    logger.debug("Running %r on %d characters", parser, len(src))
    r = parser.parse(src)
    if not r:
        logger.debug("Parse failed: %s", r.describe())
        return r
    logger.debug("Parse succeeded with %d characters left over", len(r.rest))
    return Ok(r.data)

def run_or_raise(src: str, parser: Parser[_T]) -> _T:
    """Like `run()`, but returns the value directly and raises a `ParseError` on failure."""
    r = run(src, parser)
    if not r:
        raise r.error(src)
    return r.data


def _check_parser(value: object, where: str) -> Parser[Any]:
    if not isinstance(value, Parser):
        raise TypeError(f"{where} must produce a Parser, got {type(value).__name__}.")
    return value

def _check_callable(value: object, where: str) -> None:
    if not callable(value):
        raise TypeError(f"{where} must be callable, got {type(value).__name__}.")



# combinator algebra

def map(parser: Parser[_T], f: Callable[[_T], _U]) -> Parser[_U]:
    """Transforms the parsed value with `f`. Failures are returned unchanged."""
    _check_callable(f, "map()")
    def inner(src: str) -> Success[_U] | ParseFailure:
        r = parser.parse(src)
        if not r:
            return r
        return Success(f(r.data), r.rest)
    return Parser(inner, "map")

def then(parser: Parser[_T], f: Callable[[_T], Parser[_U]]) -> Parser[_U]:
    """
    Monadic bind.

    Runs `parser`, passes its value to `f` and runs the returned parser on the remaining input.
    `f` isn't called if `parser` fails.

    Use with `from_result()` to validate a value:
    ```
    byte = integer_number.then(lambda n: from_result(Ok(n) if n < 256 else Custom("Too large.")))
    ```
    """
    _check_callable(f, "then()")
    def inner(src: str) -> Success[_U] | ParseFailure:
        r = parser.parse(src)
        if not r:
            return r
        return _check_parser(f(r.data), "The then() callback").parse(r.rest)
    return Parser(inner, "then")

def map2(first: Parser[_T], second: Parser[_U], f: Callable[[_T, _U], _V]) -> Parser[_V]:
    """Runs both parsers in sequence and combines their values with `f`. Stops at the first failure."""
    _check_callable(f, "map2()")
    def inner(src: str) -> Success[_V] | ParseFailure:
        a = first.parse(src)
        if not a:
            return a
        b = second.parse(a.rest)
        if not b:
            return b
        return Success(f(a.data, b.data), b.rest)
    return Parser(inner, "map2")

def lazy(thunk: Callable[[], Parser[_T]]) -> Parser[_T]:
    """
    Defers creating the parser until it's run.

    Required for recursive grammars:
    ```
    def value() -> Parser[Any]:
        return one_of([integer_number, array()])

    def array() -> Parser[list]:
        return succeed(lambda xs: xs).drop(string("[")).keep(many(lazy(value), string(","))).drop(string("]"))
    ```
    """
    _check_callable(thunk, "lazy()")
    def inner(src: str) -> Success[_T] | ParseFailure:
        return _check_parser(thunk(), "The lazy() thunk").parse(src)
    return Parser(inner, "lazy")

def one_of(parsers: Iterable[Parser[_T]]) -> Parser[_T]:
    """
    Tries the parsers in order, each one from the same starting input, and returns the first success.

    If all of them fail, returns the failure of the last one. If there are no parsers, returns `BadParser`.

    Put the most specific alternatives first.
    """
    alternatives = tuple(parsers)
    for alternative in alternatives:
        _check_parser(alternative, "one_of() alternatives")
    def inner(src: str) -> Success[_T] | ParseFailure:
        if not alternatives:
            return BadParser("one_of() needs at least one parser.")
        for alternative in alternatives:
            r = alternative.parse(src)
            if r:
                return r
        return r
    return Parser(inner, f"one_of({len(alternatives)})")

def optional(parser: Parser[_T]) -> Parser[_T | None]:
    """Never fails. If `parser` fails, succeeds with `None` without consuming anything."""
    def inner(src: str) -> Success[_T | None] | ParseFailure:
        r = parser.parse(src)
        if not r:
            return Success(None, src)
        return r
    return Parser(inner, "optional")

def from_option(value: _T | None, error: ParseFailure = Custom("Missing value.")) -> Parser[_T]:
    """A parser that consumes nothing. Succeeds with `value`, or fails with `error` if `value` is `None`."""
    if value is None:
        return Parser(lambda src: error, "from_option")
    return Parser(lambda src: Success(value, src), "from_option")

def from_result(result: Ok[_T] | ParseFailure) -> Parser[_T]:
    """A parser that consumes nothing. Succeeds with the data of an `Ok`, or returns the `ParseFailure`."""
    if isinstance(result, ParseFailure):
        return Parser(lambda src: result, "from_result")
    return Parser(lambda src: Success(result.data, src), "from_result")



# pipeline

def succeed(value: _T) -> Parser[_T]:
    """Always succeeds with `value` without consuming anything. The start of most pipelines."""
    return Parser(lambda src: Success(value, src), "succeed")

def succeed2(f: Callable[[_T, _U], _R]) -> Parser[Callable[[_T], Callable[[_U], _R]]]:
    """`succeed()` with a curried two argument function, to be fed by two `keep()`s."""
    return succeed(lambda a: lambda b: f(a, b))

def succeed3(f: Callable[[_T, _U, _V], _R]) -> Parser[Callable[[_T], Callable[[_U], Callable[[_V], _R]]]]:
    """`succeed()` with a curried three argument function, to be fed by three `keep()`s."""
    return succeed(lambda a: lambda b: lambda c: f(a, b, c))

def succeed4(f: Callable[[_T, _U, _V, _W], _R]) -> Parser[Callable[[_T], Callable[[_U], Callable[[_V], Callable[[_W], _R]]]]]:
    """`succeed()` with a curried four argument function, to be fed by four `keep()`s."""
    return succeed(lambda a: lambda b: lambda c: lambda d: f(a, b, c, d))

def keep(function: Parser[Callable[[_T], _U]], arg: Parser[_T]) -> Parser[_U]:
    """Runs both parsers in sequence and calls the function parsed by the first with the value parsed by the second."""
    return map2(function, arg, lambda f, a: f(a))

def drop(keeper: Parser[_T], ignorer: Parser[Any]) -> Parser[_T]:
    """Runs both parsers in sequence and only keeps the value of the first. For punctuation and such."""
    return map2(keeper, ignorer, lambda k, _: k)



# repetition

def many(parser: Parser[_T], separator: Parser[Any]) -> Parser[list[_T]]:
    """
    Zero or more `parser`s separated by `separator`s. Never fails.

    A trailing element without a separator is included. Input consumed by a failed attempt is given back.
    Stops if an element and its separator consume nothing, since it would otherwise loop forever.
    """
    element_then_separator = drop(parser, separator)
    def inner(src: str) -> Success[list[_T]] | ParseFailure:
        values: list[_T] = []
        rest = src
        while True:
            r = element_then_separator.parse(rest)
            if not r:
                last = parser.parse(rest)
                if last:
                    values.append(last.data)
                    rest = last.rest
                return Success(values, rest)
            values.append(r.data)
            if len(r.rest) == len(rest):
                return Success(values, rest)
            rest = r.rest
    return Parser(inner, "many")



# primitives

def is_digit(char: str) -> bool:
    return char in const.DECIMAL

def is_space(char: str) -> bool:
    return char in const.SPACES

def is_whitespace(char: str) -> bool:
    return char in const.WHITESPACES

def _any_char(src: str) -> Success[str] | ParseFailure:
    if not src:
        return EOF()
    return Success(src[0], src[1:])

def _eof(src: str) -> Success[None] | ParseFailure:
    if src:
        return Expected("end of file", src)
    return Success(None, src)

any_char: Final[Parser[str]] = Parser(_any_char, "any_char")
"""Consumes one character. Fails with `EOF` on empty input."""

eof: Final[Parser[None]] = Parser(_eof, "eof")
"""Succeeds with `None` only at the end of the input."""

def string(lit: str) -> Parser[str]:
    """Matches `lit` exactly. Case sensitive."""
    def inner(src: str) -> Success[str] | ParseFailure:
        if src.startswith(lit):
            return Success(lit, src[len(lit):])
        return Expected(f"starts with '{lit}'", src)
    return Parser(inner, f"string({lit!r})")

def take_if(pred: Callable[[str], bool]) -> Parser[str]:
    """Consumes one character if `pred` accepts it."""
    _check_callable(pred, "take_if()")
    def inner(src: str) -> Success[str] | ParseFailure:
        if not src:
            return EOF()
        if not pred(src[0]):
            return UnexpectedInput(src)
        return Success(src[0], src[1:])
    return Parser(inner, "take_if")

def take_while(pred: Callable[[str], bool]) -> Parser[str]:
    """Consumes characters while `pred` accepts them. Never fails, the result may be empty."""
    _check_callable(pred, "take_while()")
    def inner(src: str) -> Success[str] | ParseFailure:
        i = 0
        while i < len(src) and pred(src[i]):
            i += 1
        return Success(src[:i], src[i:])
    return Parser(inner, "take_while")

def take_if_and_while(pred: Callable[[str], bool]) -> Parser[str]:
    """One or more characters accepted by `pred`."""
    return Parser(map2(take_if(pred), take_while(pred), operator.add).parse, "take_if_and_while")

spaces: Final[Parser[None]] = Parser(take_while(is_space).map(lambda _: None).parse, "spaces")
"""Zero or more space characters. Never fails."""

whitespace: Final[Parser[None]] = Parser(take_while(is_whitespace).map(lambda _: None).parse, "whitespace")
"""Zero or more spaces, tabs and newlines. Never fails."""

def _convert(convert: Callable[[str], _T], text: str) -> Ok[_T] | ParseFailure:
    try:
        return Ok(convert(text))
    except ValueError:
        return UnexpectedInput(text)

_digits = take_if_and_while(is_digit)

integer_number: Final[Parser[int]] = Parser(
    _digits.then(lambda digits: from_result(_convert(int, digits))).parse,
    "integer_number",
)
"""One or more decimal digits, as an `int`."""

float_number: Final[Parser[float]] = Parser(
    succeed2(lambda whole, fraction: f"{whole}.{fraction}")
    .keep(_digits)
    .drop(string("."))
    .keep(_digits)
    .then(lambda text: from_result(_convert(float, text)))
    .parse,
    "float_number",
)
"""Digits, a `.`, then digits, as a `float`. Both digit runs are required."""
