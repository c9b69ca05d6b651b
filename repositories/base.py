"""
Repository contracts consumed by the engine.

The engine depends only on these protocols. Implementations:
- repositories.rule_repository / repositories.coupon_repository (Supabase)
- repositories.memory (in-process, used by tests and local runs)

Contract notes:
- RuleRepository.create raises DuplicateError when a rule with the same
  from_date already exists.
- CouponRepository.create raises DuplicateError for an existing code and
  NotFoundError when the referenced rule no longer exists.
- delete_by_id removes the rule's coupons with it.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol

from domain.coupon import Coupon, CouponSpec
from domain.rule import DiscountRule, RuleSpec


class RuleRepository(Protocol):
    def find_by_from_date(self, from_date: date) -> Optional[DiscountRule]: ...

    def find_expired_by_name_prefix(self, today: date, prefix: str) -> List[DiscountRule]: ...

    def create(self, spec: RuleSpec) -> int: ...

    def delete_by_id(self, rule_id: int) -> None: ...


class CouponRepository(Protocol):
    def find_by_code(self, code: str) -> Optional[Coupon]: ...

    def create(self, spec: CouponSpec) -> None: ...


__all__ = ["CouponRepository", "RuleRepository"]
