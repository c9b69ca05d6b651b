"""
Pytest configuration and shared fixtures.

Adds the project root to the Python path so tests can import domain,
repositories, services, etc., and provides in-memory stores plus a fixed clock.
"""

import sys
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.provider import EnvironmentConfigProvider  # noqa: E402
from config.settings import AppSettings  # noqa: E402
from repositories.memory import InMemoryCouponRepository, InMemoryRuleRepository  # noqa: E402
from services.wiring import build_services  # noqa: E402

TEST_SALT = "test-salt-not-for-production"


class FixedClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class CountingRuleRepository:
    """Wraps a RuleRepository and records every call."""

    def __init__(self, inner) -> None:
        self.inner = inner
        self.calls: list[str] = []

    def find_by_from_date(self, from_date: date):
        self.calls.append("find_by_from_date")
        return self.inner.find_by_from_date(from_date)

    def find_expired_by_name_prefix(self, today: date, prefix: str):
        self.calls.append("find_expired_by_name_prefix")
        return self.inner.find_expired_by_name_prefix(today, prefix)

    def create(self, spec):
        self.calls.append("create")
        return self.inner.create(spec)

    def delete_by_id(self, rule_id: int) -> None:
        self.calls.append("delete_by_id")
        self.inner.delete_by_id(rule_id)


class CountingCouponRepository:
    """Wraps a CouponRepository and records every call."""

    def __init__(self, inner) -> None:
        self.inner = inner
        self.calls: list[str] = []

    def find_by_code(self, code: str):
        self.calls.append("find_by_code")
        return self.inner.find_by_code(code)

    def create(self, spec) -> None:
        self.calls.append("create")
        self.inner.create(spec)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(salt=TEST_SALT, rule_name_prefix="Employee discount")


@pytest.fixture
def env() -> dict[str, str]:
    return {
        "COUPON_ENABLED": "1",
        "COUPON_CUSTOMER_GROUPS": "4,5",
        "COUPON_DISCOUNT_AMOUNT": "10",
    }


@pytest.fixture
def config(env) -> EnvironmentConfigProvider:
    return EnvironmentConfigProvider(env)


@pytest.fixture
def rule_store() -> InMemoryRuleRepository:
    return InMemoryRuleRepository()


@pytest.fixture
def coupon_store(rule_store) -> InMemoryCouponRepository:
    return InMemoryCouponRepository(rule_store)


@pytest.fixture
def rules(rule_store) -> CountingRuleRepository:
    return CountingRuleRepository(rule_store)


@pytest.fixture
def coupons(coupon_store) -> CountingCouponRepository:
    return CountingCouponRepository(coupon_store)


@pytest.fixture
def services(settings, config, rules, coupons, clock):
    return build_services(settings=settings, config=config, rules=rules, coupons=coupons, clock=clock)
