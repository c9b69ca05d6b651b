"""
Domain: monthly discount rules.

Rules implemented here:
- One DiscountRule per calendar month, scoped to that month's MonthWindow.
- Rules carry a percentage discount, eligible customer groups and website scope.
- Rules never list codes up front: auto-generation is on and each coupon is a
  specific, single-use code.
- Names follow "<prefix> coupons for <Month Year>"; pruning relies on that shape
  to leave unrelated rules alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Tuple

from .month_window import MonthWindow

RULE_NAME_INFIX: str = " coupons for "


class CouponType(str, Enum):
    SPECIFIC = "specific_coupon"


class SimpleAction(str, Enum):
    BY_PERCENT = "by_percent"


def rule_name_prefix(prefix: str) -> str:
    """Leading text shared by every rule name this engine owns."""

    return f"{prefix}{RULE_NAME_INFIX}"


def rule_name(prefix: str, window: MonthWindow) -> str:
    return f"{rule_name_prefix(prefix)}{window.label}"


@dataclass(frozen=True, slots=True)
class RuleSpec:
    """Everything needed to create a DiscountRule; the store assigns the id."""

    name: str
    from_date: date
    to_date: date
    discount_amount: float
    customer_group_ids: Tuple[int, ...]
    website_ids: Tuple[int, ...]
    is_active: bool = True
    coupon_type: CouponType = CouponType.SPECIFIC
    simple_action: SimpleAction = SimpleAction.BY_PERCENT
    use_auto_generation: bool = True
    stop_rules_processing: bool = False

    def __post_init__(self) -> None:
        if self.to_date < self.from_date:
            raise ValueError("to_date must not precede from_date")
        if not 0 < self.discount_amount <= 100:
            raise ValueError("discount_amount must be a percentage in (0, 100]")

    @classmethod
    def for_window(
        cls,
        window: MonthWindow,
        *,
        prefix: str,
        discount_amount: float,
        customer_group_ids: Tuple[int, ...],
        website_id: int,
    ) -> "RuleSpec":
        return cls(
            name=rule_name(prefix, window),
            from_date=window.start_date,
            to_date=window.end_date,
            discount_amount=discount_amount,
            customer_group_ids=tuple(sorted(customer_group_ids)),
            website_ids=(website_id,),
        )


@dataclass(frozen=True, slots=True)
class DiscountRule:
    """A persisted RuleSpec."""

    rule_id: int
    name: str
    from_date: date
    to_date: date
    discount_amount: float
    customer_group_ids: Tuple[int, ...]
    website_ids: Tuple[int, ...]
    is_active: bool = True
    coupon_type: CouponType = CouponType.SPECIFIC
    simple_action: SimpleAction = SimpleAction.BY_PERCENT
    use_auto_generation: bool = True
    stop_rules_processing: bool = False

    @classmethod
    def from_spec(cls, rule_id: int, spec: RuleSpec) -> "DiscountRule":
        return cls(
            rule_id=rule_id,
            name=spec.name,
            from_date=spec.from_date,
            to_date=spec.to_date,
            discount_amount=spec.discount_amount,
            customer_group_ids=spec.customer_group_ids,
            website_ids=spec.website_ids,
            is_active=spec.is_active,
            coupon_type=spec.coupon_type,
            simple_action=spec.simple_action,
            use_auto_generation=spec.use_auto_generation,
            stop_rules_processing=spec.stop_rules_processing,
        )

    def is_expired(self, today: date) -> bool:
        """Expired once to_date is strictly before `today`."""

        return self.to_date < today

    def is_owned_by(self, prefix: str) -> bool:
        return self.name.startswith(rule_name_prefix(prefix))
