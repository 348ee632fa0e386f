from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any

import httpx

from hondenwedstrijd.config import settings

logger = logging.getLogger(__name__)


class EndpointError(Exception):
    """An endpoint could not deliver a usable document.

    Always recoverable: the orchestrator moves on to the next endpoint.
    """

    reason = "endpoint"

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url


class TransportFailure(EndpointError):
    reason = "transport"


class BadStatus(EndpointError):
    reason = "status"

    def __init__(self, url: str, status_code: int):
        super().__init__(url, f"HTTP {status_code}")
        self.status_code = status_code


class UndecodableBody(EndpointError):
    reason = "decode"


@contextlib.asynccontextmanager
async def make_client(**overrides):
    """Create an httpx.AsyncClient identifying as a mobile browser."""
    kwargs: dict[str, Any] = {
        "follow_redirects": True,
        "timeout": settings.fetch_timeout,
        "headers": {
            "User-Agent": settings.user_agent,
            "Accept": "text/html,application/xhtml+xml",
            "Accept-Language": "nl-NL,nl;q=0.9,en;q=0.5",
        },
    }
    kwargs.update(overrides)
    async with httpx.AsyncClient(**kwargs) as client:
        yield client


def _decode(url: str, resp: httpx.Response) -> str:
    content = resp.content
    if not content or not content.strip():
        raise UndecodableBody(url, "empty body")
    encoding = resp.encoding or "utf-8"
    try:
        return content.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise UndecodableBody(url, f"cannot decode body as {encoding}: {e}") from e


async def fetch_document(
    client: httpx.AsyncClient, url: str, timeout: float | None = None
) -> str:
    """GET *url* and return the decoded HTML.

    The whole request, redirects and body included, is bounded by
    *timeout*. Every failure is raised as an EndpointError subclass;
    cancellation is left alone.
    """
    timeout = settings.fetch_timeout if timeout is None else timeout
    try:
        resp = await asyncio.wait_for(client.get(url), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise TransportFailure(url, f"no response within {timeout:.0f}s") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise TransportFailure(url, f"{type(e).__name__}: {e}") from e

    if not 200 <= resp.status_code < 300:
        raise BadStatus(url, resp.status_code)

    html = _decode(url, resp)
    logger.info("Fetched %s (%d chars)", url, len(html))
    return html
