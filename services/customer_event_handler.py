"""
Customer event handling.

Entry point for host events about a customer (registration, group change).
Checks the two issuance preconditions before anything touches a repository:
- the module is enabled for the customer's website
- the customer's group is one of the eligible groups

If a rule disappears mid-issuance (pruned concurrently), the whole workflow is
retried once; the code is content-addressed so the retry converges.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config.provider import ConfigProvider
from domain.customer import Customer
from domain.errors import NotFoundError
from services.coupon_issuance_service import CouponIssuanceService

logger = logging.getLogger(__name__)


class IssuanceStatus(str, Enum):
    ISSUED = "issued"
    SKIPPED_DISABLED = "skipped_disabled"
    SKIPPED_INELIGIBLE = "skipped_ineligible"


@dataclass(frozen=True, slots=True)
class IssuanceResult:
    status: IssuanceStatus
    code: Optional[str] = None


class CustomerEventHandler:
    def __init__(self, *, issuance: CouponIssuanceService, config: ConfigProvider) -> None:
        self._issuance = issuance
        self._config = config

    def handle(self, customer: Customer) -> IssuanceResult:
        scope = customer.website_id

        if not self._config.is_enabled(scope):
            logger.debug("Coupon module disabled, ignoring customer event")
            return IssuanceResult(IssuanceStatus.SKIPPED_DISABLED)

        if customer.group_id not in self._config.get_eligible_group_ids(scope):
            logger.debug(
                "Customer group not eligible",
                extra={"customer_id": customer.customer_id, "group_id": customer.group_id},
            )
            return IssuanceResult(IssuanceStatus.SKIPPED_INELIGIBLE)

        try:
            code = self._issuance.assign(customer)
        except NotFoundError:
            logger.warning(
                "Rule vanished during issuance, retrying once",
                extra={"customer_id": customer.customer_id},
            )
            code = self._issuance.assign(customer)

        return IssuanceResult(IssuanceStatus.ISSUED, code)


__all__ = ["CustomerEventHandler", "IssuanceResult", "IssuanceStatus"]
