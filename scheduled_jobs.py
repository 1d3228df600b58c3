#!/usr/bin/env python3
"""
Standalone entry point for the daily deadline sweep and rule seeding.
Meant to be run from OS cron / a managed scheduler, e.g.:

    0 8 * * *  TZ=America/Winnipeg  python scheduled_jobs.py sweep
"""

import sys
import logging
import argparse
from datetime import datetime
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from app.core.clock import local_now
from app.core.config import settings
from app.core.database import Base, SessionLocal, engine
from app import models  # noqa: F401
from app.services.deadline_sweep import run_deadline_sweep
from app.services.rule_catalog import seed_rules, CATALOG_VERSION

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def run_sweep(now: datetime) -> dict:
    """Run the three sweep passes once for `now` (local time)"""
    db = SessionLocal()

    try:
        print(f"🔄 Running deadline sweep for {now.isoformat()} ({settings.timezone})")
        print(f"📊 Database: {settings.database_url}")
        print("-" * 50)

        result = run_deadline_sweep(db, now)

        print("\n📋 Sweep Results:")
        for days, sent in sorted(result.reminders_sent.items(), reverse=True):
            print(f"   📨 {days}-day reminders: {sent}")
        print(f"   ⏰ Permits expired: {result.permits_expired}")
        print(f"   ⚠️  Items overdue:   {result.items_overdue}")
        print(f"   ✉️  Emails failed:   {result.emails_failed}")
        print(f"   ❌ Record errors:   {result.errors}")

        return result.as_dict()
    finally:
        db.close()


def run_seed() -> dict:
    db = SessionLocal()

    try:
        results = seed_rules(db)
        print(f"✅ Rule catalog {CATALOG_VERSION}: {results['created']} created, {results['updated']} updated")
        return results
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(
        description="NorthStar scheduled jobs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scheduled_jobs.py seed-rules
  python scheduled_jobs.py sweep
  python scheduled_jobs.py sweep --now 2026-03-02T08:00:00
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    sweep_parser = subparsers.add_parser("sweep", help="Run the daily deadline sweep")
    sweep_parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        help="Local time to sweep as (default: current time in the deployment timezone)",
    )

    subparsers.add_parser("seed-rules", help="Seed or refresh the compliance rule catalog")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    Base.metadata.create_all(bind=engine)

    try:
        if args.command == "sweep":
            run_sweep(args.now or local_now())
        elif args.command == "seed-rules":
            run_seed()
    except Exception as e:
        print(f"\n❌ Error: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
