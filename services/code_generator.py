"""
Coupon code generation.

A code is the two-character month token followed by a keyed-hash segment:

    code = encode(month_index) + segment(HMAC-SHA256(salt, "<customer>:<month_index>"))

- Same customer, month and salt always yield the same code, so regenerating a
  code after a failure converges on the code already stored.
- Different customers in the same month collide with probability about
  1 / alphabet_size ** code_length.
- Characters come only from the CodeAlphabet, so ambiguous ones never appear.
"""

from __future__ import annotations

import hashlib
import hmac
from datetime import date, datetime

from domain.code_alphabet import TOKEN_WIDTH, CodeAlphabet, MonthTokenCodec
from domain.errors import ConfigurationError
from domain.month_window import months_between

_DIGEST_BITS = hashlib.sha256().digest_size * 8


class CodeGenerator:
    """Derives deterministic per-customer, per-month codes."""

    def __init__(
        self,
        *,
        salt: str,
        epoch: date,
        alphabet: CodeAlphabet,
        code_length: int = 6,
    ) -> None:
        if not salt:
            raise ConfigurationError("SALT must be a non-empty secret")
        if code_length < 1:
            raise ConfigurationError("code_length must be positive")
        if alphabet.size**code_length > 2**_DIGEST_BITS:
            raise ConfigurationError("code_length is too long for the hash output")

        self._key = salt.encode("utf-8")
        self._epoch = epoch
        self._alphabet = alphabet
        self._codec = MonthTokenCodec(alphabet)
        self._code_length = code_length

    def __repr__(self) -> str:
        return (
            f"CodeGenerator(epoch={self._epoch.isoformat()}, "
            f"alphabet_size={self._alphabet.size}, code_length={self._code_length})"
        )

    @property
    def alphabet(self) -> CodeAlphabet:
        return self._alphabet

    @property
    def code_size(self) -> int:
        return TOKEN_WIDTH + self._code_length

    def month_index(self, reference_date: date) -> int:
        if isinstance(reference_date, datetime):
            reference_date = reference_date.date()
        if reference_date < self._epoch:
            raise ValueError(
                f"reference_date {reference_date.isoformat()} precedes epoch {self._epoch.isoformat()}"
            )
        return months_between(self._epoch, reference_date)

    def generate(self, customer_identity: str, reference_date: date) -> str:
        """
        Derive the code for a customer in the month of `reference_date`.

        Args:
            customer_identity: Stable, opaque customer id (never an email address)
            reference_date: Date (or datetime) within the month being issued

        Raises:
            ValueError: Empty or email-like identity, date before the epoch, or a
                month index beyond what the two-character token can hold
        """

        identity = str(customer_identity).strip()
        if not identity:
            raise ValueError("customer_identity must not be empty")
        if "@" in identity:
            raise ValueError("customer_identity must be an opaque id, not an email address")

        month_index = self.month_index(reference_date)
        token = self._codec.encode(month_index)
        return token + self._segment(identity, month_index)

    def decode_month_index(self, code: str) -> int:
        """Month index embedded in a code (for debugging issued codes)."""

        if len(code) != self.code_size:
            raise ValueError(f"code must be {self.code_size} characters long")
        return self._codec.decode(code[:TOKEN_WIDTH])

    def _segment(self, identity: str, month_index: int) -> str:
        message = f"{identity}:{month_index}".encode("utf-8")
        value = int.from_bytes(hmac.new(self._key, message, hashlib.sha256).digest(), "big")

        symbols = self._alphabet.symbols
        base = self._alphabet.size
        chars = []
        for _ in range(self._code_length):
            value, index = divmod(value, base)
            chars.append(symbols[index])
        return "".join(chars)


__all__ = ["CodeGenerator"]
