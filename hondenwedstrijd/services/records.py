from __future__ import annotations

from datetime import date
from typing import Iterable

from hondenwedstrijd.schemas import CompetitionEvent, RegistrationStatus


def finalize(events: Iterable[CompetitionEvent]) -> list[CompetitionEvent]:
    """Deduplicate on ``(date, type)`` and sort chronologically.

    The first occurrence of an identity key is kept; later duplicates are
    dropped even when their location or status differs.
    """
    seen: set[tuple[date, str]] = set()
    unique: list[CompetitionEvent] = []
    for event in events:
        key = event.identity_key
        if key not in seen:
            seen.add(key)
            unique.append(event)
    unique.sort(key=lambda e: e.date)
    return unique


def distinct_categories(events: Iterable[CompetitionEvent]) -> list[str]:
    """Sorted non-empty categories present in *events*."""
    return sorted({e.category for e in events if e.category})


def filter_events(
    events: Iterable[CompetitionEvent],
    category: str | None = None,
    status: RegistrationStatus | None = None,
) -> list[CompetitionEvent]:
    return [
        e for e in events
        if (category is None or e.category == category)
        and (status is None or e.registration_status == status)
    ]
