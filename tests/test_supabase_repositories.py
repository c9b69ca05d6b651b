"""
Tests for the Supabase repositories against a recording fake client.

Covers:
- Row ↔ domain mapping for rules and coupons.
- Query shape (filters on from_date, to_date, name, code).
- PostgREST error codes map to DuplicateError / NotFoundError / RepositoryIOError.
- Deleting a rule deletes its coupons first.
"""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace
from typing import Any

import httpx
import pytest
from postgrest.exceptions import APIError

from domain.coupon import CouponKind, CouponSpec
from domain.errors import DuplicateError, NotFoundError, RepositoryIOError
from domain.month_window import MonthWindow
from domain.rule import RuleSpec
from repositories.coupon_repository import SupabaseCouponRepository
from repositories.rule_repository import SupabaseRuleRepository

RULE_ROW = {
    "rule_id": 7,
    "name": "Employee discount coupons for January 2025",
    "from_date": "2025-01-01",
    "to_date": "2025-06-30",
    "discount_amount": "10.0",
    "customer_group_ids": [4, 5],
    "website_ids": [1],
    "is_active": True,
    "coupon_type": "specific_coupon",
    "simple_action": "by_percent",
    "use_auto_generation": True,
    "stop_rules_processing": False,
}


class FakeQuery:
    def __init__(self, client: "FakeClient", table: str) -> None:
        self.client = client
        self.table = table
        self.ops: list[tuple[Any, ...]] = []

    def __getattr__(self, name: str):
        def record(*args: Any) -> "FakeQuery":
            self.ops.append((name, *args))
            return self

        return record

    def execute(self) -> SimpleNamespace:
        self.client.queries.append((self.table, self.ops))
        outcome = self.client.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return SimpleNamespace(data=outcome, error=None)


class FakeClient:
    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.queries: list[tuple[str, list[tuple[Any, ...]]]] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


def _api_error(code: str) -> APIError:
    return APIError({"message": "boom", "code": code, "hint": None, "details": None})


def _spec() -> RuleSpec:
    return RuleSpec.for_window(
        MonthWindow.containing(date(2025, 1, 1)),
        prefix="Employee discount",
        discount_amount=10.0,
        customer_group_ids=(5, 4),
        website_id=1,
    )


class TestSupabaseRuleRepository:
    def test_find_by_from_date_maps_row(self) -> None:
        client = FakeClient([RULE_ROW])

        rule = SupabaseRuleRepository(client).find_by_from_date(date(2025, 1, 1))

        assert rule is not None
        assert rule.rule_id == 7
        assert rule.to_date == date(2025, 6, 30)
        assert rule.discount_amount == 10.0
        assert rule.customer_group_ids == (4, 5)
        table, ops = client.queries[0]
        assert table == "discount_rules"
        assert ("eq", "from_date", "2025-01-01") in ops

    def test_find_by_from_date_returns_none_when_empty(self) -> None:
        assert SupabaseRuleRepository(FakeClient([])).find_by_from_date(date(2025, 1, 1)) is None

    def test_find_expired_filters_on_date_and_prefix(self) -> None:
        client = FakeClient([RULE_ROW])

        rules = SupabaseRuleRepository(client).find_expired_by_name_prefix(
            date(2025, 7, 1), "Employee_discount coupons for "
        )

        assert [r.rule_id for r in rules] == [7]
        _, ops = client.queries[0]
        assert ("lt", "to_date", "2025-07-01") in ops
        assert ("like", "name", "Employee\\_discount coupons for %") in ops

    def test_create_returns_new_id(self) -> None:
        client = FakeClient([{**RULE_ROW, "rule_id": 11}])

        assert SupabaseRuleRepository(client).create(_spec()) == 11
        _, ops = client.queries[0]
        payload = ops[0][1]
        assert ops[0][0] == "insert"
        assert payload["from_date"] == "2025-01-01"
        assert payload["to_date"] == "2025-06-30"
        assert payload["customer_group_ids"] == [4, 5]
        assert payload["coupon_type"] == "specific_coupon"

    def test_create_reads_back_when_insert_returns_nothing(self) -> None:
        client = FakeClient([], [{**RULE_ROW, "rule_id": 12}])

        assert SupabaseRuleRepository(client).create(_spec()) == 12

    def test_unique_violation_is_duplicate(self) -> None:
        with pytest.raises(DuplicateError):
            SupabaseRuleRepository(FakeClient(_api_error("23505"))).create(_spec())

    def test_other_api_errors_are_io_errors(self) -> None:
        with pytest.raises(RepositoryIOError):
            SupabaseRuleRepository(FakeClient(_api_error("42P01"))).find_by_from_date(date(2025, 1, 1))

    def test_transport_errors_are_io_errors(self) -> None:
        with pytest.raises(RepositoryIOError):
            SupabaseRuleRepository(FakeClient(httpx.ConnectError("refused"))).find_by_from_date(date(2025, 1, 1))

    def test_delete_removes_coupons_then_rule(self) -> None:
        client = FakeClient([], [RULE_ROW])

        SupabaseRuleRepository(client).delete_by_id(7)

        assert [table for table, _ in client.queries] == ["coupons", "discount_rules"]
        assert ("eq", "rule_id", 7) in client.queries[0][1]

    def test_failed_rule_delete_surfaces_after_coupons_are_gone(self) -> None:
        client = FakeClient([], _api_error("57014"))

        with pytest.raises(RepositoryIOError):
            SupabaseRuleRepository(client).delete_by_id(7)

        assert [table for table, _ in client.queries] == ["coupons", "discount_rules"]

    def test_delete_of_missing_rule_is_not_found(self) -> None:
        with pytest.raises(NotFoundError):
            SupabaseRuleRepository(FakeClient([], [])).delete_by_id(7)


class TestSupabaseCouponRepository:
    def test_find_by_code_maps_row(self) -> None:
        client = FakeClient(
            [{"coupon_id": 3, "code": "ABCDEFGH", "rule_id": 7, "coupon_type": "specific_autogenerated",
              "created_at_utc": "2025-01-15T12:00:00Z"}]
        )

        coupon = SupabaseCouponRepository(client).find_by_code("ABCDEFGH")

        assert coupon is not None
        assert coupon.rule_id == 7
        assert coupon.coupon_type is CouponKind.SPECIFIC_AUTOGENERATED
        assert coupon.created_at is not None and coupon.created_at.utcoffset().total_seconds() == 0
        assert ("eq", "code", "ABCDEFGH") in client.queries[0][1]

    def test_create_inserts_payload(self) -> None:
        client = FakeClient([{"coupon_id": 3}])

        SupabaseCouponRepository(client).create(CouponSpec(code="ABCDEFGH", rule_id=7))

        table, ops = client.queries[0]
        assert table == "coupons"
        assert ops[0][1]["code"] == "ABCDEFGH"
        assert ops[0][1]["rule_id"] == 7
        assert ops[0][1]["coupon_type"] == "specific_autogenerated"

    def test_duplicate_code_and_missing_rule_are_mapped(self) -> None:
        with pytest.raises(DuplicateError):
            SupabaseCouponRepository(FakeClient(_api_error("23505"))).create(CouponSpec(code="A", rule_id=7))
        with pytest.raises(NotFoundError):
            SupabaseCouponRepository(FakeClient(_api_error("23503"))).create(CouponSpec(code="A", rule_id=7))
