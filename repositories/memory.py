"""
In-memory repositories.

Thread-safe stand-ins for the Supabase tables with the same uniqueness and
foreign-key behavior:
- discount rules are unique by from_date
- coupons are unique by code and must reference an existing rule
- deleting a rule deletes its coupons
"""

from __future__ import annotations

import itertools
import threading
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from domain.coupon import Coupon, CouponSpec
from domain.errors import DuplicateError, NotFoundError
from domain.rule import DiscountRule, RuleSpec


class InMemoryRuleRepository:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self._rules: Dict[int, DiscountRule] = {}
        self._coupon_repositories: List["InMemoryCouponRepository"] = []

    def find_by_from_date(self, from_date: date) -> Optional[DiscountRule]:
        with self._lock:
            for rule in self._rules.values():
                if rule.from_date == from_date:
                    return rule
            return None

    def find_expired_by_name_prefix(self, today: date, prefix: str) -> List[DiscountRule]:
        with self._lock:
            return [
                rule
                for rule in self._rules.values()
                if rule.to_date < today and rule.name.startswith(prefix)
            ]

    def get(self, rule_id: int) -> Optional[DiscountRule]:
        with self._lock:
            return self._rules.get(rule_id)

    def all(self) -> List[DiscountRule]:
        with self._lock:
            return list(self._rules.values())

    def add(self, rule: DiscountRule) -> None:
        """Insert a fully-formed rule (fixtures seeding historic data)."""

        with self._lock:
            self._rules[rule.rule_id] = rule

    def create(self, spec: RuleSpec) -> int:
        with self._lock:
            if self.find_by_from_date(spec.from_date) is not None:
                raise DuplicateError(f"A rule for {spec.from_date.isoformat()} already exists")
            rule_id = next(self._ids)
            while rule_id in self._rules:
                rule_id = next(self._ids)
            self._rules[rule_id] = DiscountRule.from_spec(rule_id, spec)
            return rule_id

    def delete_by_id(self, rule_id: int) -> None:
        with self._lock:
            if self._rules.pop(rule_id, None) is None:
                raise NotFoundError(f"Rule not found: {rule_id}")
            for coupons in self._coupon_repositories:
                coupons.delete_by_rule_id(rule_id)


class InMemoryCouponRepository:
    def __init__(self, rules: InMemoryRuleRepository) -> None:
        # Shares the rule table lock so rule deletes and coupon inserts never interleave.
        self._lock = rules._lock
        self._ids = itertools.count(1)
        self._coupons: Dict[str, Coupon] = {}
        self._rules = rules
        rules._coupon_repositories.append(self)

    def find_by_code(self, code: str) -> Optional[Coupon]:
        with self._lock:
            return self._coupons.get(code)

    def all(self) -> List[Coupon]:
        with self._lock:
            return list(self._coupons.values())

    def create(self, spec: CouponSpec) -> None:
        with self._lock:
            if spec.code in self._coupons:
                raise DuplicateError(f"Coupon code already exists: {spec.code}")
            if self._rules.get(spec.rule_id) is None:
                raise NotFoundError(f"Rule not found: {spec.rule_id}")
            self._coupons[spec.code] = Coupon(
                coupon_id=next(self._ids),
                code=spec.code,
                rule_id=spec.rule_id,
                coupon_type=spec.coupon_type,
                created_at=datetime.now(timezone.utc),
            )

    def delete_by_rule_id(self, rule_id: int) -> None:
        with self._lock:
            for code in [c.code for c in self._coupons.values() if c.rule_id == rule_id]:
                del self._coupons[code]


__all__ = ["InMemoryCouponRepository", "InMemoryRuleRepository"]
