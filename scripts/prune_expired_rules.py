#!/usr/bin/env python3
"""
Prune expired discount rules.

Intended for a daily cron entry. Deletes rules this engine owns whose
validity window has elapsed; does nothing while the module is disabled.

Usage:
    python scripts/prune_expired_rules.py
    python scripts/prune_expired_rules.py --dry-run --verbose
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path so we can import services
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.errors import CouponEngineError
from services.wiring import build_supabase_services


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Delete expired monthly discount rules")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the rules that would be deleted without deleting them"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        services = build_supabase_services()

        if args.dry_run:
            expired = services.manager.find_expired()
            print(f"{len(expired)} expired rule(s):")
            for rule in expired:
                print(f"  [{rule.rule_id}] {rule.name} (to {rule.to_date.isoformat()})")
            return 0

        deleted = services.prune_job.run()
    except CouponEngineError as e:
        print(f"[ERROR] Prune failed: {e}", file=sys.stderr)
        return 1

    print(f"[SUCCESS] Deleted {deleted} expired rule(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
