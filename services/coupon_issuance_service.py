"""
Coupon issuance for a single customer.

Steps, in order:
1. Derive the customer's code for the current month
2. Ensure the month's rule exists (committed before step 3)
3. Attach the code to that rule

Calling assign twice in the same month derives the same code and the second
attach is a no-op. Eligibility (module enabled, customer group) is the
caller's job; see services.customer_event_handler.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from domain.customer import Customer
from domain.time import require_utc_timestamp, utc_now
from services.code_generator import CodeGenerator
from services.monthly_rule_manager import MonthlyRuleManager

logger = logging.getLogger(__name__)


class CouponIssuanceService:
    def __init__(
        self,
        *,
        generator: CodeGenerator,
        manager: MonthlyRuleManager,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._generator = generator
        self._manager = manager
        self._clock = clock

    def assign(self, customer: Customer) -> str:
        """
        Issue (or re-confirm) the customer's code for this month.

        Returns:
            The customer's code

        Raises:
            CouponEngineError subclasses from generation or persistence; nothing
            is swallowed here
        """

        now = self._clock()
        require_utc_timestamp("now", now)

        code = self._generator.generate(customer.customer_id, self._manager.today(now))
        rule_id = self._manager.ensure_rule_for_current_month(now)
        created = self._manager.attach_coupon(rule_id, code)

        logger.info(
            "Coupon assigned",
            extra={"customer_id": customer.customer_id, "rule_id": rule_id, "created": created},
        )
        return code


__all__ = ["CouponIssuanceService"]
