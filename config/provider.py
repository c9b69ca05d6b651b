"""
Scoped configuration provider.

Answers the three questions the engine asks its host configuration store:
whether the module is enabled, which customer groups are eligible, and the
discount percentage. Values are read on every call so a change in the store
takes effect without a restart.

Environment variables (website-scoped override: `<NAME>__WEBSITE_<id>`):
- COUPON_ENABLED: "1", "true", "yes" or "on" enables the module
- COUPON_CUSTOMER_GROUPS: comma-separated customer group ids
- COUPON_DISCOUNT_AMOUNT: percentage in (0, 100]
"""

from __future__ import annotations

import os
from typing import FrozenSet, Mapping, Optional, Protocol

from domain.errors import ConfigurationError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


class ConfigProvider(Protocol):
    def is_enabled(self, scope: Optional[int] = None) -> bool: ...

    def get_eligible_group_ids(self, scope: Optional[int] = None) -> FrozenSet[int]: ...

    def get_discount_amount(self, scope: Optional[int] = None) -> float: ...


class EnvironmentConfigProvider:
    """ConfigProvider backed by environment variables."""

    def __init__(self, env: Optional[Mapping[str, str]] = None) -> None:
        self._env = env if env is not None else os.environ

    def _value(self, name: str, scope: Optional[int]) -> Optional[str]:
        if scope is not None:
            scoped = self._env.get(f"{name}__WEBSITE_{scope}")
            if scoped is not None:
                return scoped
        return self._env.get(name)

    def is_enabled(self, scope: Optional[int] = None) -> bool:
        raw = self._value("COUPON_ENABLED", scope)
        return raw is not None and raw.strip().lower() in _TRUE_VALUES

    def get_eligible_group_ids(self, scope: Optional[int] = None) -> FrozenSet[int]:
        raw = self._value("COUPON_CUSTOMER_GROUPS", scope) or ""
        group_ids = set()
        for part in raw.split(","):
            part = part.strip()
            if not part:
                continue
            try:
                group_ids.add(int(part))
            except ValueError as e:
                raise ConfigurationError(
                    f"COUPON_CUSTOMER_GROUPS must list integer ids, got {part!r}"
                ) from e
        return frozenset(group_ids)

    def get_discount_amount(self, scope: Optional[int] = None) -> float:
        raw = self._value("COUPON_DISCOUNT_AMOUNT", scope)
        if raw is None or raw.strip() == "":
            raise ConfigurationError("COUPON_DISCOUNT_AMOUNT is not set")
        try:
            amount = float(raw)
        except ValueError as e:
            raise ConfigurationError(f"COUPON_DISCOUNT_AMOUNT must be numeric, got {raw!r}") from e
        if not 0 < amount <= 100:
            raise ConfigurationError("COUPON_DISCOUNT_AMOUNT must be a percentage in (0, 100]")
        return amount


__all__ = ["ConfigProvider", "EnvironmentConfigProvider"]
