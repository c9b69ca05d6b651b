"""Scheduled removal of expired monthly rules."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from config.provider import ConfigProvider
from domain.time import utc_now
from services.monthly_rule_manager import MonthlyRuleManager

logger = logging.getLogger(__name__)


class PruneJob:
    """
    Stateless wrapper around MonthlyRuleManager.prune_expired.

    Safe on any cadence; does nothing (and touches no repository) while the
    module is disabled.
    """

    def __init__(
        self,
        *,
        manager: MonthlyRuleManager,
        config: ConfigProvider,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._manager = manager
        self._config = config
        self._clock = clock

    def run(self, now: Optional[datetime] = None) -> int:
        if not self._config.is_enabled():
            logger.info("Coupon module disabled, skipping prune")
            return 0

        deleted = self._manager.prune_expired(now if now is not None else self._clock())
        logger.info("Prune finished", extra={"deleted_count": deleted})
        return deleted


__all__ = ["PruneJob"]
