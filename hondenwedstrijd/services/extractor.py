from __future__ import annotations

import logging

from pydantic import ValidationError

from hondenwedstrijd.metrics import CANDIDATES_REJECTED_TOTAL, STRATEGY_CANDIDATES_TOTAL
from hondenwedstrijd.parsers.base import BaseStrategy
from hondenwedstrijd.parsers.dates import normalize_date
from hondenwedstrijd.parsers.element import Element
from hondenwedstrijd.parsers.registry import get_strategies
from hondenwedstrijd.parsers.status import classify_status
from hondenwedstrijd.schemas import Candidate, CompetitionEvent, StrategyPolicy

logger = logging.getLogger(__name__)

# Where the calendar is likely to live, most specific first
CONTAINER_SELECTORS = [
    "#kalender",
    ".kalender",
    "#calendar",
    ".calendar",
    "main",
    "[role=main]",
    "#content",
    ".content",
    "article",
]


def find_container(document: Element) -> Element:
    """Return the first element matching a content selector, else the document."""
    for selector in CONTAINER_SELECTORS:
        found = document.select_first(selector)
        if found is not None:
            logger.debug("Content container matched %r", selector)
            return found
    return document


def build_event(candidate: Candidate, locale: str = "nl") -> CompetitionEvent | None:
    """Finalise a candidate, or return None when it is not a usable record."""
    event_date = normalize_date(candidate.date_text, locale)
    if event_date is None:
        logger.debug("Rejecting %s candidate, unparseable date %r", candidate.strategy, candidate.date_text)
        CANDIDATES_REJECTED_TOTAL.labels(reason="date").inc()
        return None
    if not candidate.has_key_fields:
        logger.debug("Rejecting %s candidate dated %s, no type/category/location", candidate.strategy, event_date)
        CANDIDATES_REJECTED_TOTAL.labels(reason="empty").inc()
        return None
    try:
        return CompetitionEvent(
            date=event_date,
            type=candidate.type,
            category=candidate.category,
            organizer=candidate.organizer,
            location=candidate.location,
            notes=candidate.notes,
            registration_status=classify_status(candidate.status_text),
        )
    except ValidationError as e:
        logger.debug("Rejecting %s candidate: %s", candidate.strategy, e)
        CANDIDATES_REJECTED_TOTAL.labels(reason="invalid").inc()
        return None


def run_strategies(
    container: Element,
    strategies: list[BaseStrategy],
    policy: StrategyPolicy = StrategyPolicy.UNION,
    locale: str = "nl",
) -> list[CompetitionEvent]:
    """Run strategies in order and finalise their candidates.

    UNION concatenates every strategy's events in priority order;
    FIRST_SUCCESS stops at the first strategy yielding a valid event.
    """
    events: list[CompetitionEvent] = []
    for strategy in strategies:
        candidates = strategy.extract(container)
        built = [e for e in (build_event(c, locale) for c in candidates) if e is not None]
        STRATEGY_CANDIDATES_TOTAL.labels(strategy=strategy.name).inc(len(candidates))
        logger.info(
            "Strategy %s: %d candidates, %d valid events",
            strategy.name, len(candidates), len(built),
        )
        events.extend(built)
        if built and policy is StrategyPolicy.FIRST_SUCCESS:
            break
    return events


def extract_events(
    html: str,
    policy: StrategyPolicy = StrategyPolicy.UNION,
    locale: str = "nl",
    min_columns: int | None = None,
) -> list[CompetitionEvent]:
    """Parse one fetched document into (not yet deduplicated) events."""
    document = Element.parse(html)
    container = find_container(document)
    options = {"min_columns": min_columns} if min_columns is not None else {}
    return run_strategies(container, get_strategies(**options), policy=policy, locale=locale)
