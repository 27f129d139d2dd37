"""
General use constants.
"""

from __future__ import annotations
from typing import Final

SPACES: Final[frozenset[str]] = frozenset({" "})
WHITESPACES: Final[frozenset[str]] = frozenset({" ", "\t", "\n"})
DECIMAL: Final[frozenset[str]] = frozenset({"0", "1", "2", "3", "4", "5", "6", "7", "8", "9"})
HEXADECIMAL: Final[frozenset[str]] = DECIMAL | {"a", "b", "c", "d", "e", "f", "A", "B", "C", "D", "E", "F"}
ALPHABETIC: Final[frozenset[str]] = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
UPPERCASE: Final[frozenset[str]] = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
ALNUM: Final[frozenset[str]] = ALPHABETIC | DECIMAL

EXCERPT_LENGTH: Final[int] = 20
"""How much of the remaining input failure messages show."""

JSON_ESCAPES: Final[dict[str, str]] = {
    '"': '"',
    '\\': '\\',
    '/': '/',
    'b': '\b',
    'f': '\f',
    'n': '\n',
    'r': '\r',
    't': '\t',
}

CURRENCY_SYMBOLS: Final[dict[str, str]] = {
    "$": "USD",
    "€": "EUR",
    "£": "GBP",
    "¥": "JPY",
}

CURRENCY_CODES: Final[frozenset[str]] = frozenset({"USD", "EUR", "GBP", "JPY", "CHF", "CAD", "AUD", "SEK", "NOK", "DKK"})
