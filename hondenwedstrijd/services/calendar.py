"""In-memory published calendar.

The loading flag, the last error and the event list live together in one
immutable snapshot that is swapped as a single reference, so a reader can
never combine an event list from one refresh with the loading state of
another.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Awaitable, Callable

from hondenwedstrijd.metrics import EVENTS_PUBLISHED, REFRESH_DURATION_SECONDS, REFRESH_TOTAL
from hondenwedstrijd.schemas import CompetitionEvent, RegistrationStatus
from hondenwedstrijd.services.records import distinct_categories, filter_events
from hondenwedstrijd.services.scanner import NoDataFoundError, fetch_all

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[list[CompetitionEvent]]]


@dataclass(frozen=True)
class CalendarSnapshot:
    events: tuple[CompetitionEvent, ...] = ()
    in_flight: int = 0
    last_error: str | None = None
    updated_at: datetime | None = None

    @property
    def is_loading(self) -> bool:
        return self.in_flight > 0


class CompetitionCalendar:
    """Owns the published event list and the state of refreshes.

    Refreshes may overlap (initial load plus a manual refresh); the loading
    flag stays set until the last one finishes and whichever completes last
    publishes its list. A failed refresh keeps the previous events.
    """

    def __init__(self, fetcher: Fetcher | None = None):
        self._fetcher = fetcher or fetch_all
        self._snapshot = CalendarSnapshot()
        self._task: asyncio.Task | None = None

    @property
    def snapshot(self) -> CalendarSnapshot:
        return self._snapshot

    @property
    def events(self) -> tuple[CompetitionEvent, ...]:
        return self._snapshot.events

    @property
    def categories(self) -> list[str]:
        return distinct_categories(self._snapshot.events)

    @property
    def is_loading(self) -> bool:
        return self._snapshot.is_loading

    @property
    def last_error(self) -> str | None:
        return self._snapshot.last_error

    def filter(
        self, category: str | None = None, status: RegistrationStatus | None = None
    ) -> list[CompetitionEvent]:
        return filter_events(self._snapshot.events, category=category, status=status)

    async def refresh(self) -> bool:
        """Run one extraction cycle; True when a new list was published."""
        snap = self._snapshot
        self._snapshot = replace(snap, in_flight=snap.in_flight + 1, last_error=None)
        started = time.monotonic()
        try:
            events = await self._fetcher()
        except NoDataFoundError as e:
            logger.warning("Refresh found no data: %s", e)
            REFRESH_TOTAL.labels(outcome="no_data").inc()
            snap = self._snapshot
            self._snapshot = replace(snap, in_flight=snap.in_flight - 1, last_error=e.description)
            return False
        except asyncio.CancelledError:
            logger.info("Refresh cancelled, keeping %d published events", len(self._snapshot.events))
            REFRESH_TOTAL.labels(outcome="cancelled").inc()
            snap = self._snapshot
            self._snapshot = replace(snap, in_flight=snap.in_flight - 1)
            raise
        except Exception as e:
            snap = self._snapshot
            self._snapshot = replace(snap, in_flight=snap.in_flight - 1, last_error=f"Onverwachte fout: {e}")
            raise

        snap = self._snapshot
        self._snapshot = CalendarSnapshot(
            events=tuple(events),
            in_flight=snap.in_flight - 1,
            last_error=None,
            updated_at=datetime.now(timezone.utc),
        )
        REFRESH_TOTAL.labels(outcome="completed").inc()
        REFRESH_DURATION_SECONDS.observe(time.monotonic() - started)
        EVENTS_PUBLISHED.set(len(events))
        logger.info("Published %d events", len(events))
        return True

    # -- background refreshes -------------------------------------------------

    def start_refresh(self) -> asyncio.Task:
        """Launch a refresh in the background, reusing one already running."""
        if self._task is not None and not self._task.done():
            return self._task
        self._task = asyncio.create_task(self._background_refresh())
        return self._task

    def cancel_refresh(self) -> bool:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            return True
        return False

    async def shutdown(self) -> None:
        """Cancel a running background refresh and wait for it to unwind."""
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _background_refresh(self) -> None:
        try:
            await self.refresh()
        except Exception:
            logger.exception("Background refresh failed")
