from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from hondenwedstrijd.config import settings
from hondenwedstrijd.metrics import ENDPOINT_FETCH_TOTAL
from hondenwedstrijd.schemas import CompetitionEvent, StrategyPolicy
from hondenwedstrijd.services.extractor import extract_events
from hondenwedstrijd.services.fetcher import EndpointError, fetch_document, make_client
from hondenwedstrijd.services.records import finalize

logger = logging.getLogger(__name__)


@dataclass
class EndpointOutcome:
    url: str
    outcome: str  # ok, empty or an EndpointError reason
    events: int = 0
    detail: str = ""


class NoDataFoundError(Exception):
    """No endpoint produced a single usable event."""

    description = "Er zijn geen wedstrijden gevonden. Probeer het later opnieuw."

    def __init__(self, outcomes: list[EndpointOutcome] | None = None):
        self.outcomes = outcomes or []
        summary = ", ".join(f"{o.url}: {o.detail or o.outcome}" for o in self.outcomes)
        super().__init__(f"No data found across {len(self.outcomes)} endpoint(s) [{summary}]")


@dataclass
class ScanOptions:
    strategy_policy: StrategyPolicy = StrategyPolicy.UNION
    endpoint_policy: StrategyPolicy = StrategyPolicy.FIRST_SUCCESS
    locale: str = "nl"
    min_columns: int = 3
    timeout: float = 30.0

    @classmethod
    def from_settings(cls) -> ScanOptions:
        return cls(
            strategy_policy=StrategyPolicy(settings.strategy_policy),
            endpoint_policy=StrategyPolicy(settings.endpoint_policy),
            locale=settings.locale,
            min_columns=settings.min_table_columns,
            timeout=settings.fetch_timeout,
        )


async def _scan_endpoint(
    client: httpx.AsyncClient, url: str, options: ScanOptions
) -> list[CompetitionEvent]:
    """Fetch and parse one endpoint; EndpointError on fetch failure."""
    html = await fetch_document(client, url, timeout=options.timeout)
    return extract_events(
        html,
        policy=options.strategy_policy,
        locale=options.locale,
        min_columns=options.min_columns,
    )


async def _fetch_sequentially(
    client: httpx.AsyncClient,
    endpoints: list[str],
    options: ScanOptions,
    outcomes: list[EndpointOutcome],
) -> list[CompetitionEvent]:
    collected: list[CompetitionEvent] = []
    for url in endpoints:
        try:
            events = await _scan_endpoint(client, url, options)
        except EndpointError as e:
            logger.warning("Endpoint %s failed (%s): %s", url, e.reason, e)
            ENDPOINT_FETCH_TOTAL.labels(endpoint=url, outcome=e.reason).inc()
            outcomes.append(EndpointOutcome(url, e.reason, detail=str(e)))
            continue

        if not events:
            logger.warning("Endpoint %s returned no events, trying next", url)
            ENDPOINT_FETCH_TOTAL.labels(endpoint=url, outcome="empty").inc()
            outcomes.append(EndpointOutcome(url, "empty"))
            continue

        ENDPOINT_FETCH_TOTAL.labels(endpoint=url, outcome="ok").inc()
        outcomes.append(EndpointOutcome(url, "ok", events=len(events)))
        logger.info("Endpoint %s: %d events", url, len(events))
        collected.extend(events)
        if options.endpoint_policy is StrategyPolicy.FIRST_SUCCESS:
            break
    return collected


async def fetch_all(
    endpoints: list[str] | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    options: ScanOptions | None = None,
) -> list[CompetitionEvent]:
    """Extract the calendar from the first endpoint that yields events.

    Endpoints are tried one at a time, in order. Failures and empty pages
    fall through to the next endpoint. Raises NoDataFoundError when every
    endpoint came up empty. Cancelling the calling task aborts the fetch
    in flight; nothing is returned or published in that case.
    """
    endpoints = list(endpoints or settings.endpoints)
    options = options or ScanOptions.from_settings()
    outcomes: list[EndpointOutcome] = []

    if client is None:
        async with make_client() as own_client:
            collected = await _fetch_sequentially(own_client, endpoints, options, outcomes)
    else:
        collected = await _fetch_sequentially(client, endpoints, options, outcomes)

    if not collected:
        raise NoDataFoundError(outcomes)

    events = finalize(collected)
    logger.info(
        "Extraction complete: %d events (%d before dedup) from %d endpoint(s) tried",
        len(events), len(collected), len(outcomes),
    )
    return events
