"""
Discount rule repository (persistence).

This module provides *only* persistence operations for the DiscountRule domain
entity. It does not decide when a rule is needed or expired; it only inserts,
fetches and deletes rows.

Table expectations:
- `discount_rules.from_date` carries a UNIQUE constraint (one rule per month).
- `coupons.rule_id` references `discount_rules.rule_id`; dependent coupons are
  deleted explicitly before their rule so the schema does not need ON DELETE CASCADE.
"""

from __future__ import annotations

from datetime import date
from typing import Any, List, Mapping, Optional

from supabase import Client  # type: ignore[import-not-found]

from domain.errors import NotFoundError
from domain.rule import CouponType, DiscountRule, RuleSpec, SimpleAction
from repositories.client import rows_of, run_query
from repositories.coupon_repository import COUPONS_TABLE

# Supabase table name for discount rules.
# Keep this aligned with your database schema.
RULES_TABLE: str = "discount_rules"


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise TypeError(f"Unsupported date type: {type(value)!r}")


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _row_to_rule(row: Mapping[str, Any]) -> DiscountRule:
    """Convert a Supabase row into a DiscountRule."""

    return DiscountRule(
        rule_id=int(row["rule_id"]),
        name=str(row["name"]),
        from_date=_parse_date(row["from_date"]),
        to_date=_parse_date(row["to_date"]),
        discount_amount=float(row["discount_amount"]),
        customer_group_ids=tuple(int(g) for g in row.get("customer_group_ids") or ()),
        website_ids=tuple(int(w) for w in row.get("website_ids") or ()),
        is_active=bool(row.get("is_active", True)),
        coupon_type=CouponType(row.get("coupon_type", CouponType.SPECIFIC.value)),
        simple_action=SimpleAction(row.get("simple_action", SimpleAction.BY_PERCENT.value)),
        use_auto_generation=bool(row.get("use_auto_generation", True)),
        stop_rules_processing=bool(row.get("stop_rules_processing", False)),
    )


def _spec_to_payload(spec: RuleSpec) -> dict[str, Any]:
    return {
        "name": spec.name,
        "from_date": spec.from_date.isoformat(),
        "to_date": spec.to_date.isoformat(),
        "discount_amount": spec.discount_amount,
        "customer_group_ids": list(spec.customer_group_ids),
        "website_ids": list(spec.website_ids),
        "is_active": spec.is_active,
        "coupon_type": spec.coupon_type.value,
        "simple_action": spec.simple_action.value,
        "use_auto_generation": spec.use_auto_generation,
        "stop_rules_processing": spec.stop_rules_processing,
    }


class SupabaseRuleRepository:
    """RuleRepository backed by the `discount_rules` table."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def find_by_from_date(self, from_date: date) -> Optional[DiscountRule]:
        response = run_query(
            "fetch rule",
            lambda: self._client.table(RULES_TABLE)
            .select("*")
            .eq("from_date", from_date.isoformat())
            .limit(1)
            .execute(),
        )
        rows = rows_of(response)
        if not rows:
            return None
        return _row_to_rule(rows[0])

    def find_expired_by_name_prefix(self, today: date, prefix: str) -> List[DiscountRule]:
        response = run_query(
            "list expired rules",
            lambda: self._client.table(RULES_TABLE)
            .select("*")
            .lt("to_date", today.isoformat())
            .like("name", f"{_escape_like(prefix)}%")
            .execute(),
        )
        return [_row_to_rule(row) for row in rows_of(response)]

    def create(self, spec: RuleSpec) -> int:
        """
        Insert a rule and return its id.

        Raises:
            DuplicateError: A rule with the same from_date already exists
        """

        response = run_query(
            "create rule",
            lambda: self._client.table(RULES_TABLE).insert(_spec_to_payload(spec)).execute(),
        )
        rows = rows_of(response)
        if not rows:
            # Insert succeeded without returning the row; read it back.
            created = self.find_by_from_date(spec.from_date)
            if created is None:
                raise NotFoundError(f"Rule for {spec.from_date.isoformat()} vanished after insert")
            return created.rule_id
        return int(rows[0]["rule_id"])

    def delete_by_id(self, rule_id: int) -> None:
        """
        Delete a rule and its coupons.

        Not atomic: coupons go first, so if the rule delete then fails the rule
        survives without coupons. Only expired rules are pruned, whose coupons can
        no longer be redeemed, and the next prune run retries the rule.

        Raises:
            NotFoundError: No rule with that id
        """

        run_query(
            "delete coupons",
            lambda: self._client.table(COUPONS_TABLE).delete().eq("rule_id", rule_id).execute(),
        )
        response = run_query(
            "delete rule",
            lambda: self._client.table(RULES_TABLE).delete().eq("rule_id", rule_id).execute(),
        )
        if not rows_of(response):
            raise NotFoundError(f"Rule not found: {rule_id}")


__all__ = ["RULES_TABLE", "SupabaseRuleRepository"]
