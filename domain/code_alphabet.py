"""
Domain: code alphabets and the month token.

A CodeAlphabet is the ordered set of characters codes may contain once visually
ambiguous characters are removed. The MonthTokenCodec writes a month index as two
positional digits whose base is exactly the alphabet size, so every index in
[0, base**2 - 1] has a token and every token decodes back to its index.
"""

from __future__ import annotations

import string
from dataclasses import dataclass

DEFAULT_CHARSET: str = string.ascii_uppercase + string.digits
DEFAULT_AMBIGUOUS_CHARACTERS: str = "0O1lI"

TOKEN_WIDTH: int = 2


@dataclass(frozen=True, slots=True)
class CodeAlphabet:
    """
    Characters usable in generated codes.

    `symbols` keeps the charset order with ambiguous characters filtered out.
    """

    symbols: str
    ambiguous: frozenset[str]

    def __post_init__(self) -> None:
        if len(set(self.symbols)) != len(self.symbols):
            raise ValueError("alphabet symbols must be unique")
        if len(self.symbols) < 2:
            raise ValueError("alphabet needs at least two symbols")
        clash = self.ambiguous.intersection(self.symbols)
        if clash:
            raise ValueError(f"alphabet contains ambiguous characters: {''.join(sorted(clash))}")

    @classmethod
    def build(
        cls,
        charset: str = DEFAULT_CHARSET,
        ambiguous: str = DEFAULT_AMBIGUOUS_CHARACTERS,
    ) -> "CodeAlphabet":
        excluded = frozenset(ambiguous)
        seen: list[str] = []
        for char in charset:
            if char in excluded or char in seen or char.isspace():
                continue
            seen.append(char)
        return cls(symbols="".join(seen), ambiguous=excluded)

    @property
    def size(self) -> int:
        return len(self.symbols)

    def __contains__(self, char: object) -> bool:
        return isinstance(char, str) and len(char) == 1 and char in self.symbols


@dataclass(frozen=True, slots=True)
class MonthTokenCodec:
    """Two-character positional encoding of a bounded month index."""

    alphabet: CodeAlphabet

    @property
    def base(self) -> int:
        return self.alphabet.size

    @property
    def max_index(self) -> int:
        return self.base**TOKEN_WIDTH - 1

    def encode(self, month_index: int) -> str:
        if month_index < 0 or month_index > self.max_index:
            raise ValueError(f"month_index must be within [0, {self.max_index}]")
        high, low = divmod(month_index, self.base)
        return self.alphabet.symbols[high] + self.alphabet.symbols[low]

    def decode(self, token: str) -> int:
        if len(token) != TOKEN_WIDTH or any(char not in self.alphabet for char in token):
            raise ValueError(f"not a month token: {token!r}")
        high = self.alphabet.symbols.index(token[0])
        low = self.alphabet.symbols.index(token[1])
        return high * self.base + low
