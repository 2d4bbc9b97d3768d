"""
Command-line entry point for the scheduled jobs.

Usage:
  python -m src.jobs statements [--date 2025-06-20]
  python -m src.jobs snapshots [--date 2025-06-20]
  python -m src.jobs installments [--user USER_ID ...] [--date 2025-06-20]
  python -m src.jobs recurring [--date 2025-06-20]
"""

import argparse
import asyncio
import sys
from dataclasses import asdict
from datetime import datetime

import structlog

from src.core.logging import setup_logging

from . import run_installments, run_recurring, run_snapshots, run_statements


def _parse_date(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a Card Ledger scheduled job")
    parser.add_argument("job", choices=["statements", "snapshots", "installments", "recurring"])
    parser.add_argument("--date", type=_parse_date, help="Run as of this date (ISO format)")
    parser.add_argument(
        "--user",
        action="append",
        default=[],
        help="User to process (installments job, repeatable; default: every user with an open plan)",
    )
    args = parser.parse_args()

    setup_logging()
    logger = structlog.get_logger("src.jobs")

    if args.job == "statements":
        result = asdict(asyncio.run(run_statements(args.date)))
    elif args.job == "snapshots":
        result = asdict(asyncio.run(run_snapshots(args.date)))
    elif args.job == "recurring":
        result = asdict(asyncio.run(run_recurring(args.date)))
    else:
        result = asdict(asyncio.run(run_installments(args.user or None, args.date)))

    logger.info("job_finished", job=args.job, **result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
