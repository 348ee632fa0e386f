"""Run one extraction and print the calendar.

Usage:
    python -m hondenwedstrijd
    python -m hondenwedstrijd --endpoint https://my.orweja.nl/home/kalender/1 --status open
    python -m hondenwedstrijd --category A --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from hondenwedstrijd.config import settings
from hondenwedstrijd.log import configure_logging
from hondenwedstrijd.schemas import CompetitionEvent, RegistrationStatus, StrategyPolicy
from hondenwedstrijd.services.records import filter_events
from hondenwedstrijd.services.scanner import NoDataFoundError, ScanOptions, fetch_all


def _format_event(event: CompetitionEvent) -> str:
    parts = [f"{event.date:%d-%m-%Y}", event.type]
    for value in (event.category, event.organizer, event.location):
        if value:
            parts.append(value)
    parts.append(event.registration_status.label)
    return " | ".join(parts)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Fetch the dog trial competition calendar")
    parser.add_argument("--endpoint", action="append", dest="endpoints",
                        help="Endpoint URL, repeatable; tried in the given order")
    parser.add_argument("--category", help="Only events in this category")
    parser.add_argument("--status", choices=[s.value for s in RegistrationStatus],
                        help="Only events with this registration status")
    parser.add_argument("--policy", choices=[p.value for p in StrategyPolicy],
                        default=settings.strategy_policy,
                        help="How markup strategies are combined per endpoint")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    options = ScanOptions.from_settings()
    options.strategy_policy = StrategyPolicy(args.policy)

    try:
        events = asyncio.run(fetch_all(args.endpoints, options=options))
    except NoDataFoundError as e:
        print(e.description, file=sys.stderr)
        return 1

    status = RegistrationStatus(args.status) if args.status else None
    events = filter_events(events, category=args.category, status=status)

    if args.json:
        print(json.dumps([e.model_dump(mode="json") for e in events], indent=2, ensure_ascii=False))
    else:
        for event in events:
            print(_format_event(event))
        print(f"{len(events)} wedstrijden", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
