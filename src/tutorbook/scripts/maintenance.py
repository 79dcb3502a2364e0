"""Maintenance commands: monthly rollover and housekeeping of old data."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date

from tutorbook.api.v1.dependencies import (
    get_calendar,
    get_clock,
    get_ledger,
    get_marker_store,
    get_rollover_scheduler,
)
from tutorbook.core.errors import TutorbookError
from tutorbook.core.settings import settings
from tutorbook.db.session import SessionLocal, create_tables

logger = logging.getLogger("tutorbook.maintenance")


async def rollover() -> int:
    db = SessionLocal()
    try:
        scheduler = get_rollover_scheduler(db, get_ledger(db), get_marker_store(), get_clock())
        result = await scheduler.run()
    finally:
        db.close()
    if result.already_done:
        print(f"Rollover for {result.month_key} already done.")
    else:
        print(f"Rollover for {result.month_key}: {len(result.created)} balances carried.")
    return 0


async def purge_outside_hours(first_day: date, last_day: date) -> int:
    db = SessionLocal()
    try:
        removed = await get_calendar(db).purge_outside_hours(first_day, last_day)
    finally:
        db.close()
    print(f"Removed {removed} sessions outside operating hours.")
    return 0


async def clean_orphans() -> int:
    db = SessionLocal()
    try:
        removed = await get_ledger(db).clean_orphans()
    finally:
        db.close()
    print(f"Removed {removed} orphaned movements.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tutorbook maintenance commands")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("rollover", help="Carry last month's unpaid balances forward")
    purge = sub.add_parser("purge-outside-hours", help="Delete sessions outside operating hours")
    purge.add_argument("--from", dest="first_day", type=date.fromisoformat, required=True)
    purge.add_argument("--to", dest="last_day", type=date.fromisoformat, required=True)
    sub.add_parser("clean-orphans", help="Delete movements of unknown students")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level.upper())
    create_tables()
    try:
        if args.command == "rollover":
            return asyncio.run(rollover())
        if args.command == "purge-outside-hours":
            return asyncio.run(purge_outside_hours(args.first_day, args.last_day))
        return asyncio.run(clean_orphans())
    except TutorbookError as err:
        logger.error("%s failed: %s", args.command, err)
        return 1


if __name__ == "__main__":
    sys.exit(main())
