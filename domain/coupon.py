"""
Domain: issued coupon codes.

Rules implemented here:
- A coupon code is globally unique across all coupons.
- Coupons reference their DiscountRule by id; they do not own it.
- Coupons are never mutated; they disappear only with their rule.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .time import require_utc_timestamp


class CouponKind(str, Enum):
    SPECIFIC_AUTOGENERATED = "specific_autogenerated"


@dataclass(frozen=True, slots=True)
class CouponSpec:
    code: str
    rule_id: int
    coupon_type: CouponKind = CouponKind.SPECIFIC_AUTOGENERATED

    def __post_init__(self) -> None:
        if not self.code or self.code != self.code.strip():
            raise ValueError("code must be a non-empty string without surrounding whitespace")


@dataclass(frozen=True, slots=True)
class Coupon:
    """Immutable record of one issued code."""

    coupon_id: int
    code: str
    rule_id: int
    coupon_type: CouponKind = CouponKind.SPECIFIC_AUTOGENERATED
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.created_at is not None:
            require_utc_timestamp("created_at", self.created_at)
