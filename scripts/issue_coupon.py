#!/usr/bin/env python3
"""
Issue this month's code for one customer by hand.

Runs the same eligibility checks as a customer event. Useful for support
requests and for verifying a new deployment end to end.

Usage:
    python scripts/issue_coupon.py 100234 --group-id 4
    python scripts/issue_coupon.py 100234 --group-id 4 --website-id 2
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path so we can import services
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.customer import Customer
from domain.errors import CouponEngineError
from services.customer_event_handler import IssuanceStatus
from services.wiring import build_supabase_services


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Issue a monthly discount code for a customer")
    parser.add_argument("customer_id", help="Internal customer id")
    parser.add_argument("--group-id", type=int, required=True, help="Customer group id")
    parser.add_argument("--website-id", type=int, default=None, help="Website scope")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        customer = Customer(
            customer_id=args.customer_id,
            group_id=args.group_id,
            website_id=args.website_id,
        )
        result = build_supabase_services().events.handle(customer)
    except (CouponEngineError, ValueError) as e:
        print(f"[ERROR] Issuance failed: {e}", file=sys.stderr)
        return 1

    if result.status is IssuanceStatus.ISSUED:
        print(f"[SUCCESS] Code for customer {customer.customer_id}: {result.code}")
        return 0

    print(f"[SKIPPED] {result.status.value}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
