"""
Command line access to slot computation over a JSON document file.

Usage:
    python -m studio_booking.cli slots 2026-10-19 --data studio_data.json
    python -m studio_booking.cli next --from 2026-10-17 --weekend
    python -m studio_booking.cli week 2026-10-19
    python -m studio_booking.cli migrate --data studio_data.json
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import Optional, Sequence

from studio_booking.config import settings
from studio_booking.errors import InvalidDateError, StoreUnavailable
from studio_booking.logging_context import get_request_logger, new_request_id
from studio_booking.migration import run_migrations
from studio_booking.scheduling.slot_computer import SearchMode, SlotComputer
from studio_booking.stores.availability_store import AvailabilityStore
from studio_booking.stores.booking_ledger import BookingLedger
from studio_booking.stores.document_store import JsonFileDocumentStore

logger = get_request_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="studio-slots",
        description="Compute bookable artist time slots for the studio.",
    )
    parser.add_argument(
        "--data",
        type=str,
        default=settings.store.data_path,
        help="Path to the JSON document store (default: %(default)s).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging output.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    slots = sub.add_parser("slots", help="Show every slot for a date.")
    slots.add_argument("date", help="Date as YYYY-MM-DD.")

    nxt = sub.add_parser("next", help="Find the next date with a free slot.")
    nxt.add_argument("--from", dest="from_date", default=None, help="Search after this date.")
    nxt.add_argument("--weekend", action="store_true", help="Only Saturdays and Sundays.")

    week = sub.add_parser("week", help="Show seven days of slots.")
    week.add_argument("start_date", help="First date as YYYY-MM-DD.")

    sub.add_parser("migrate", help="Normalise legacy availability and booking documents.")
    return parser


def _emit(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, indent=2) + "\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    request_id = new_request_id("CLI")
    logger.debug("Running %s as %s", args.command, request_id)

    store = JsonFileDocumentStore(args.data)
    computer = SlotComputer(AvailabilityStore(store), BookingLedger(store))

    try:
        if args.command == "slots":
            _emit(computer.compute_day_slots(args.date).model_dump(mode="json"))
        elif args.command == "next":
            mode = SearchMode.WEEKEND if args.weekend else SearchMode.DAILY
            found = computer.find_next_available_date(args.from_date, mode=mode)
            _emit(found.model_dump(mode="json") if found else None)
        elif args.command == "week":
            _emit([day.model_dump(mode="json") for day in computer.compute_week_slots(args.start_date)])
        elif args.command == "migrate":
            report = run_migrations(store)
            _emit(asdict(report))
            return 0 if report.ok else 1
    except InvalidDateError as exc:
        logger.error("%s", exc)
        return 2
    except StoreUnavailable as exc:
        logger.error("Store unavailable: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
