"""
A parser for lists of money amounts.

```
parse_wallet("12.50 USD, $3, 7 EUR")
# Ok(Wallet([Money(Decimal("12.50"), "USD"), Money(Decimal("3"), "USD"), Money(Decimal("7"), "EUR")]))
```

An amount is either followed by a 3 letter currency code, or preceded by a currency symbol (see `const.CURRENCY_SYMBOLS`).
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
import logging

from pipeparse import *
from pipeparse.general import identity, token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

@dataclass
class Wallet:
    entries: list[Money] = field(default_factory=list)

    def totals(self) -> dict[str, Decimal]:
        """The sum of the amounts for each currency, in order of first appearance."""
        sums: defaultdict[str, Decimal] = defaultdict(Decimal)
        for money in self.entries:
            sums[money.currency] += money.amount
        return dict(sums)


def _make_amount(whole: str, fraction: str | None) -> Decimal:
    if fraction is None:
        return Decimal(whole)
    return Decimal(f"{whole}.{fraction}")

def _check_currency(code: str) -> Parser[str]:
    if code not in const.CURRENCY_CODES:
        return from_result(Custom(f"Unknown currency code '{code}'."))
    return succeed(code)

def _is_uppercase(char: str) -> bool:
    return char in const.UPPERCASE

amount: Parser[Decimal] = (
    succeed2(_make_amount)
    .keep(take_if_and_while(is_digit))
    .keep(optional(succeed(identity).drop(string(".")).keep(take_if_and_while(is_digit))))
)
"""Digits with an optional fraction, as a `Decimal`. Kept as written, so `12.50` keeps its trailing zero."""

currency_code: Parser[str] = take_if_and_while(_is_uppercase).then(_check_currency)
"""One of `const.CURRENCY_CODES`. Fails with `Custom` for unknown codes."""

currency_symbol: Parser[str] = one_of([
    string(symbol).map(lambda _, code=code: code)
    for symbol, code in const.CURRENCY_SYMBOLS.items()
])
"""One of the keys of `const.CURRENCY_SYMBOLS`, as the matching currency code."""

money: Parser[Money] = one_of([
    succeed2(lambda code, value: Money(value, code)).keep(currency_symbol).drop(spaces).keep(amount),
    succeed2(Money).keep(amount).drop(spaces).keep(currency_code),
])

def _check_leftover(leftover: str) -> Ok[None] | ParseFailure:
    """
    Explains why `leftover` wasn't taken as an entry.

    An entry that doesn't parse reports its own failure. One that does parse is missing the comma before it.
    """
    if not leftover:
        return Ok(None)
    entry = run(leftover, token(money))
    if not entry:
        return entry
    return Expected("',' or end of file", leftover)

_end_of_entries: Parser[None] = take_while(lambda _: True).then(lambda leftover: from_result(_check_leftover(leftover)))

wallet: Parser[Wallet] = (
    succeed(Wallet)
    .keep(many(token(money), string(",")))
    .drop(whitespace)
    .drop(_end_of_entries)
)
"""Comma separated `money`, spanning the whole input. Empty input is an empty wallet."""


def parse_money(text: str) -> Ok[Money] | ParseFailure:
    return run(text, token(money).drop(eof))

def parse_wallet(text: str) -> Ok[Wallet] | ParseFailure:
    logger.debug("Parsing wallet from %r", text)
    return run(text, wallet)
