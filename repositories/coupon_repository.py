"""
Coupon repository (persistence).

Provides *only* persistence operations for issued coupons. Uniqueness of codes
is enforced by a UNIQUE constraint on `coupons.code`; this module reports a
violation as DuplicateError and a missing rule as NotFoundError.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from supabase import Client  # type: ignore[import-not-found]

from domain.coupon import Coupon, CouponKind, CouponSpec
from repositories.client import rows_of, run_query

# Supabase table name for coupons.
COUPONS_TABLE: str = "coupons"


def _parse_utc_datetime(value: Any) -> datetime:
    """
    Parse a Supabase timestamp into a timezone-aware UTC datetime.

    Supabase commonly returns ISO-8601 strings, sometimes with a trailing 'Z'.
    """

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _row_to_coupon(row: Mapping[str, Any]) -> Coupon:
    """Convert a Supabase row into a Coupon."""

    return Coupon(
        coupon_id=int(row["coupon_id"]),
        code=str(row["code"]),
        rule_id=int(row["rule_id"]),
        coupon_type=CouponKind(row.get("coupon_type", CouponKind.SPECIFIC_AUTOGENERATED.value)),
        created_at=_parse_utc_datetime(row["created_at_utc"]) if row.get("created_at_utc") else None,
    )


class SupabaseCouponRepository:
    """CouponRepository backed by the `coupons` table."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def find_by_code(self, code: str) -> Optional[Coupon]:
        response = run_query(
            "fetch coupon",
            lambda: self._client.table(COUPONS_TABLE)
            .select("*")
            .eq("code", code)
            .limit(1)
            .execute(),
        )
        rows = rows_of(response)
        if not rows:
            return None
        return _row_to_coupon(rows[0])

    def create(self, spec: CouponSpec) -> None:
        """
        Insert a coupon bound to spec.rule_id.

        Raises:
            DuplicateError: The code already exists
            NotFoundError: The rule no longer exists
        """

        payload: dict[str, Any] = {
            "code": spec.code,
            "rule_id": spec.rule_id,
            "coupon_type": spec.coupon_type.value,
            "created_at_utc": datetime.now(timezone.utc).isoformat(),
        }
        run_query(
            "create coupon",
            lambda: self._client.table(COUPONS_TABLE).insert(payload).execute(),
        )


__all__ = ["COUPONS_TABLE", "SupabaseCouponRepository"]
