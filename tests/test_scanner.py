"""Tests for endpoint fetching and the multi-endpoint fallback.

httpx is mocked at the client level: the AsyncClient's ``get`` returns
real httpx.Response objects built from the fixtures.
"""

from __future__ import annotations

import asyncio
from datetime import date
from pathlib import Path
from unittest.mock import AsyncMock

import httpx
import pytest

from hondenwedstrijd.schemas import StrategyPolicy
from hondenwedstrijd.services.fetcher import (
    BadStatus,
    TransportFailure,
    UndecodableBody,
    fetch_document,
    make_client,
)
from hondenwedstrijd.services.scanner import NoDataFoundError, ScanOptions, fetch_all

FIXTURES = Path(__file__).parent / "fixtures"

EMPTY_PAGE = "<html><body><main><p>Geen wedstrijden gepland.</p></main></body></html>"

URL_A = "https://a.example/kalender"
URL_B = "https://b.example/kalender"
URL_C = "https://c.example/kalender"


def _calendar_page(count: int) -> str:
    rows = "".join(
        f"<tr><td>{day:02d}-05-2025</td><td>Wedstrijd {day}</td><td>Ede</td></tr>"
        for day in range(1, count + 1)
    )
    return (
        "<html><body><main><table>"
        "<tr><th>Datum</th><th>Type</th><th>Locatie</th></tr>"
        f"{rows}</table></main></body></html>"
    )


def _response(url: str, text: str = "", status_code: int = 200, **kwargs) -> httpx.Response:
    if "content" not in kwargs:
        kwargs["text"] = text
    return httpx.Response(status_code, request=httpx.Request("GET", url), **kwargs)


def _mock_client(pages: dict[str, object]) -> AsyncMock:
    """Client whose get() serves *pages*; exception values are raised."""
    async def get(url, **kwargs):
        page = pages[url]
        if isinstance(page, Exception):
            raise page
        if isinstance(page, httpx.Response):
            return page
        return _response(url, page)

    client = AsyncMock()
    client.get = AsyncMock(side_effect=get)
    return client


def _requested(client: AsyncMock) -> list[str]:
    return [c.args[0] for c in client.get.call_args_list]


# ---------------------------------------------------------------------------
# fetch_document
# ---------------------------------------------------------------------------
class TestFetchDocument:
    @pytest.mark.asyncio
    async def test_returns_decoded_body(self):
        client = _mock_client({URL_A: _calendar_page(1)})
        html = await fetch_document(client, URL_A)
        assert "Wedstrijd 1" in html

    @pytest.mark.asyncio
    async def test_transport_error(self):
        client = _mock_client({URL_A: httpx.ConnectError("connection refused")})
        with pytest.raises(TransportFailure) as exc_info:
            await fetch_document(client, URL_A)
        assert exc_info.value.reason == "transport"
        assert exc_info.value.url == URL_A

    @pytest.mark.asyncio
    async def test_non_2xx_status(self):
        client = _mock_client({URL_A: _response(URL_A, "Niet gevonden", status_code=404)})
        with pytest.raises(BadStatus) as exc_info:
            await fetch_document(client, URL_A)
        assert exc_info.value.status_code == 404
        assert exc_info.value.reason == "status"

    @pytest.mark.asyncio
    async def test_undecodable_body(self):
        resp = _response(
            URL_A,
            content=b"<p>\xff\xfe\xfa</p>",
            headers={"content-type": "text/html; charset=utf-8"},
        )
        client = _mock_client({URL_A: resp})
        with pytest.raises(UndecodableBody):
            await fetch_document(client, URL_A)

    @pytest.mark.asyncio
    async def test_empty_body(self):
        client = _mock_client({URL_A: "   "})
        with pytest.raises(UndecodableBody, match="empty body"):
            await fetch_document(client, URL_A)

    @pytest.mark.asyncio
    async def test_timeout_bounds_whole_request(self):
        async def slow_get(url, **kwargs):
            await asyncio.sleep(5)

        client = AsyncMock()
        client.get = AsyncMock(side_effect=slow_get)
        with pytest.raises(TransportFailure, match="no response"):
            await fetch_document(client, URL_A, timeout=0.05)


class TestMakeClient:
    @pytest.mark.asyncio
    async def test_browser_headers(self):
        async with make_client() as client:
            assert "iPhone" in client.headers["User-Agent"]
            assert client.follow_redirects is True


# ---------------------------------------------------------------------------
# fetch_all
# ---------------------------------------------------------------------------
class TestFetchAll:
    @pytest.mark.asyncio
    async def test_falls_through_empty_endpoint_and_stops_at_first_success(self):
        client = _mock_client({
            URL_A: EMPTY_PAGE,
            URL_B: _calendar_page(2),
            URL_C: _calendar_page(5),
        })

        events = await fetch_all([URL_A, URL_B, URL_C], client=client, options=ScanOptions())

        assert len(events) == 2
        assert _requested(client) == [URL_A, URL_B]

    @pytest.mark.asyncio
    async def test_failures_fall_through(self):
        client = _mock_client({
            URL_A: httpx.ConnectTimeout("timed out"),
            URL_B: _response(URL_B, "Server error", status_code=503),
            URL_C: _calendar_page(3),
        })

        events = await fetch_all([URL_A, URL_B, URL_C], client=client, options=ScanOptions())

        assert [e.date for e in events] == [date(2025, 5, 1), date(2025, 5, 2), date(2025, 5, 3)]

    @pytest.mark.asyncio
    async def test_no_data_anywhere(self):
        client = _mock_client({
            URL_A: EMPTY_PAGE,
            URL_B: httpx.ConnectError("refused"),
        })

        with pytest.raises(NoDataFoundError) as exc_info:
            await fetch_all([URL_A, URL_B], client=client, options=ScanOptions())

        err = exc_info.value
        assert err.description == "Er zijn geen wedstrijden gevonden. Probeer het later opnieuw."
        assert [(o.url, o.outcome) for o in err.outcomes] == [(URL_A, "empty"), (URL_B, "transport")]

    @pytest.mark.asyncio
    async def test_union_across_endpoints_merges_and_deduplicates(self):
        client = _mock_client({
            URL_A: _calendar_page(2),
            URL_B: _calendar_page(3),
        })
        options = ScanOptions(endpoint_policy=StrategyPolicy.UNION)

        events = await fetch_all([URL_A, URL_B], client=client, options=options)

        assert _requested(client) == [URL_A, URL_B]
        assert [e.type for e in events] == ["Wedstrijd 1", "Wedstrijd 2", "Wedstrijd 3"]

    @pytest.mark.asyncio
    async def test_output_is_sorted_and_unique(self):
        client = _mock_client({URL_A: (FIXTURES / "event_cards.html").read_text(encoding="utf-8")})

        events = await fetch_all([URL_A], client=client, options=ScanOptions())

        keys = [e.identity_key for e in events]
        assert len(keys) == len(set(keys))
        assert [e.date for e in events] == sorted(e.date for e in events)

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        started = asyncio.Event()

        async def hanging_get(url, **kwargs):
            started.set()
            await asyncio.sleep(60)

        client = AsyncMock()
        client.get = AsyncMock(side_effect=hanging_get)

        task = asyncio.create_task(fetch_all([URL_A, URL_B], client=client, options=ScanOptions()))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert _requested(client) == [URL_A]


def test_scan_options_from_settings(monkeypatch):
    from hondenwedstrijd.config import settings

    monkeypatch.setattr(settings, "strategy_policy", "first-success")
    monkeypatch.setattr(settings, "min_table_columns", 4)

    options = ScanOptions.from_settings()

    assert options.strategy_policy is StrategyPolicy.FIRST_SUCCESS
    assert options.endpoint_policy is StrategyPolicy.FIRST_SUCCESS
    assert options.min_columns == 4


@pytest.mark.asyncio
async def test_malformed_endpoint_url_falls_through():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=_calendar_page(1))

    bad_url = URL_A + "\n"
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(TransportFailure):
            await fetch_document(client, bad_url)

        events = await fetch_all([bad_url, URL_B], client=client, options=ScanOptions())

    assert [e.type for e in events] == ["Wedstrijd 1"]
