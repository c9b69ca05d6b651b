"""
Process-wide settings.

Loaded once at startup from the environment (and a `.env` file at the project
root). The HMAC salt is read here and handed to the code generator explicitly;
nothing re-reads it per call.

Environment variables:
- SALT: secret key for code derivation (required)
- COUPON_EPOCH: month-index epoch, first day of a month (default 2024-12-01)
- COUPON_CODE_LENGTH: random segment length (default 6)
- COUPON_CODE_CHARSET: candidate characters (default A-Z and 0-9)
- COUPON_AMBIGUOUS_CHARACTERS: characters removed from the charset (default "0O1lI")
- COUPON_RULE_NAME_PREFIX: prefix of owned rule names (default "Employee discount")
- COUPON_DEFAULT_WEBSITE_ID: website scope of created rules (default 1)
- COUPON_TIMEZONE: IANA zone deciding the calendar month (default UTC)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from domain.code_alphabet import DEFAULT_AMBIGUOUS_CHARACTERS, DEFAULT_CHARSET, CodeAlphabet
from domain.errors import ConfigurationError

ENV_PATH = Path(__file__).parent.parent / ".env"

DEFAULT_EPOCH: date = date(2024, 12, 1)
DEFAULT_CODE_LENGTH: int = 6
DEFAULT_RULE_NAME_PREFIX: str = "Employee discount"
DEFAULT_WEBSITE_ID: int = 1

MIN_CODE_LENGTH: int = 4
MAX_CODE_LENGTH: int = 16


@dataclass(frozen=True, slots=True)
class AppSettings:
    salt: str = field(repr=False)
    epoch: date = DEFAULT_EPOCH
    code_length: int = DEFAULT_CODE_LENGTH
    charset: str = DEFAULT_CHARSET
    ambiguous_characters: str = DEFAULT_AMBIGUOUS_CHARACTERS
    rule_name_prefix: str = DEFAULT_RULE_NAME_PREFIX
    default_website_id: int = DEFAULT_WEBSITE_ID
    timezone_name: str = "UTC"

    def __post_init__(self) -> None:
        if not self.salt:
            raise ConfigurationError("SALT must be set to a non-empty secret")
        if self.epoch.day != 1:
            raise ConfigurationError("COUPON_EPOCH must be the first day of a month")
        if not MIN_CODE_LENGTH <= self.code_length <= MAX_CODE_LENGTH:
            raise ConfigurationError(
                f"COUPON_CODE_LENGTH must be between {MIN_CODE_LENGTH} and {MAX_CODE_LENGTH}"
            )
        if not self.rule_name_prefix.strip():
            raise ConfigurationError("COUPON_RULE_NAME_PREFIX must not be empty")
        self.alphabet()
        self.timezone()

    def alphabet(self) -> CodeAlphabet:
        try:
            return CodeAlphabet.build(self.charset, self.ambiguous_characters)
        except ValueError as e:
            raise ConfigurationError(f"Invalid code alphabet: {e}") from e

    def timezone(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone_name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown COUPON_TIMEZONE: {self.timezone_name!r}") from e


def _read_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _read_date(env: Mapping[str, str], name: str, default: date) -> date:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an ISO date (YYYY-MM-DD), got {raw!r}") from e


def load_settings(env: Optional[Mapping[str, str]] = None) -> AppSettings:
    """
    Build AppSettings from the environment.

    Args:
        env: Mapping to read instead of os.environ (no .env loading when given)

    Raises:
        ConfigurationError: If SALT is missing or any value is invalid
    """

    if env is None:
        load_dotenv(dotenv_path=ENV_PATH)
        env = os.environ

    return AppSettings(
        salt=env.get("SALT", ""),
        epoch=_read_date(env, "COUPON_EPOCH", DEFAULT_EPOCH),
        code_length=_read_int(env, "COUPON_CODE_LENGTH", DEFAULT_CODE_LENGTH),
        charset=env.get("COUPON_CODE_CHARSET") or DEFAULT_CHARSET,
        ambiguous_characters=env.get("COUPON_AMBIGUOUS_CHARACTERS", DEFAULT_AMBIGUOUS_CHARACTERS),
        rule_name_prefix=env.get("COUPON_RULE_NAME_PREFIX") or DEFAULT_RULE_NAME_PREFIX,
        default_website_id=_read_int(env, "COUPON_DEFAULT_WEBSITE_ID", DEFAULT_WEBSITE_ID),
        timezone_name=env.get("COUPON_TIMEZONE") or "UTC",
    )


__all__ = ["AppSettings", "load_settings"]
