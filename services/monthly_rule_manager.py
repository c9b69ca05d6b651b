"""
Monthly rule management.

Handles:
- Ensuring exactly one discount rule exists for the current month window
- Attaching issued codes to that rule (lookup before create)
- Pruning rules whose window has elapsed

At most one rule per calendar month, even with concurrent callers:
1. Rule creation for a month is single-flight within this process.
2. Across processes, the store's unique from_date rejects the loser with
   DuplicateError; the loser re-fetches and uses the winner's rule.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import date, datetime
from typing import Callable, Dict, Iterator, List, Optional
from zoneinfo import ZoneInfo

from config.provider import ConfigProvider
from domain.coupon import CouponSpec
from domain.errors import DuplicateError, NotFoundError, RepositoryIOError
from domain.month_window import MonthWindow
from domain.rule import DiscountRule, RuleSpec, rule_name_prefix
from domain.time import local_date, utc_now
from repositories.base import CouponRepository, RuleRepository

logger = logging.getLogger(__name__)


class MonthlyRuleManager:
    def __init__(
        self,
        *,
        rules: RuleRepository,
        coupons: CouponRepository,
        config: ConfigProvider,
        rule_name_prefix: str,
        default_website_id: int,
        timezone: ZoneInfo = ZoneInfo("UTC"),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._rules = rules
        self._coupons = coupons
        self._config = config
        self._prefix = rule_name_prefix
        self._default_website_id = default_website_id
        self._timezone = timezone
        self._clock = clock

        self._locks_guard = threading.Lock()
        # start_date -> (lock, number of callers using it)
        self._month_locks: Dict[date, tuple[threading.Lock, int]] = {}

    def today(self, now: Optional[datetime] = None) -> date:
        """Calendar date of `now` (default: the clock) in the configured timezone."""

        return local_date(now if now is not None else self._clock(), self._timezone)

    def current_window(self, now: Optional[datetime] = None) -> MonthWindow:
        return MonthWindow.containing(self.today(now))

    @contextmanager
    def _single_flight(self, start_date: date) -> Iterator[None]:
        """Serialize rule creation for one month; the lock lives while anyone uses it."""

        with self._locks_guard:
            lock, users = self._month_locks.get(start_date, (threading.Lock(), 0))
            self._month_locks[start_date] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._locks_guard:
                lock, users = self._month_locks[start_date]
                if users == 1:
                    del self._month_locks[start_date]
                else:
                    self._month_locks[start_date] = (lock, users - 1)

    def ensure_rule_for_current_month(self, now: Optional[datetime] = None) -> int:
        """
        Return the id of the current month's rule, creating it if absent.

        Idempotent: repeated calls within a month return the same id. The rule is
        always scoped to the default website, whichever customer triggered it.

        Raises:
            ConfigurationError: Discount or group configuration is invalid
            RepositoryIOError: The store could not be reached
        """

        window = self.current_window(now)

        existing = self._rules.find_by_from_date(window.start_date)
        if existing is not None:
            return existing.rule_id

        with self._single_flight(window.start_date):
            existing = self._rules.find_by_from_date(window.start_date)
            if existing is not None:
                return existing.rule_id

            spec = RuleSpec.for_window(
                window,
                prefix=self._prefix,
                discount_amount=self._config.get_discount_amount(self._default_website_id),
                customer_group_ids=tuple(self._config.get_eligible_group_ids(self._default_website_id)),
                website_id=self._default_website_id,
            )

            try:
                rule_id = self._rules.create(spec)
            except DuplicateError:
                winner = self._rules.find_by_from_date(window.start_date)
                if winner is None:
                    raise NotFoundError(
                        f"Rule for {window.start_date.isoformat()} rejected as duplicate but not found"
                    )
                logger.info(
                    "Discount rule created concurrently, reusing it",
                    extra={"rule_id": winner.rule_id, "from_date": window.start_date.isoformat()},
                )
                return winner.rule_id

        logger.info(
            "Discount rule created",
            extra={
                "rule_id": rule_id,
                "rule_name": spec.name,
                "from_date": spec.from_date.isoformat(),
                "to_date": spec.to_date.isoformat(),
            },
        )
        return rule_id

    def attach_coupon(self, rule_id: int, code: str) -> bool:
        """
        Bind `code` to `rule_id` unless the code was already issued.

        Returns:
            True if a coupon was created, False if the code already existed

        Raises:
            NotFoundError: The rule was removed before the coupon could be stored
        """

        if self._coupons.find_by_code(code) is not None:
            logger.debug("Coupon already issued", extra={"rule_id": rule_id})
            return False

        try:
            self._coupons.create(CouponSpec(code=code, rule_id=rule_id))
        except DuplicateError:
            logger.debug("Coupon issued concurrently", extra={"rule_id": rule_id})
            return False

        logger.info("Coupon attached", extra={"rule_id": rule_id})
        return True

    def find_expired(self, now: Optional[datetime] = None) -> List[DiscountRule]:
        """Owned rules whose to_date is strictly before today."""

        today = self.today(now)
        candidates = self._rules.find_expired_by_name_prefix(today, rule_name_prefix(self._prefix))
        # The store filter is a LIKE; re-check so a loose match never deletes a foreign rule.
        return [rule for rule in candidates if rule.is_expired(today) and rule.is_owned_by(self._prefix)]

    def prune_expired(self, now: Optional[datetime] = None) -> int:
        """
        Delete expired rules one by one.

        A failure on one rule is logged and does not stop the others.

        Returns:
            Number of rules actually deleted
        """

        deleted = 0
        for rule in self.find_expired(now):
            try:
                self._rules.delete_by_id(rule.rule_id)
            except (NotFoundError, RepositoryIOError) as e:
                logger.warning(
                    "Failed to prune discount rule",
                    extra={"rule_id": rule.rule_id, "rule_name": rule.name, "error": str(e)},
                )
                continue
            deleted += 1
            logger.info(
                "Pruned expired discount rule",
                extra={"rule_id": rule.rule_id, "rule_name": rule.name, "to_date": rule.to_date.isoformat()},
            )
        return deleted


__all__ = ["MonthlyRuleManager"]
