"""
Scoreboard crawler.

Fetches one scoreboard page per calendar date with a bounded number of
requests in flight. Each page is decoded and handed to a callback as soon as
it arrives, so pages render in completion order rather than date order.

A failed page (network error, timeout, malformed body) is logged and
recorded in the crawl result; it never cancels the other pages. Every fetch
is awaited before crawl() returns. There is no retry.
"""

import asyncio
import logging
from datetime import date
from typing import Callable, Iterable, Optional

import httpx
from pydantic import BaseModel

from sharingan import config
from sharingan.clients.espn import ESPNClient, default_headers, scoreboard_params
from sharingan.exceptions import SharinganError, TransportError
from sharingan.models.match import Match
from sharingan.services.builder import build_matches
from sharingan.services.decoder import decode_scoreboard

logger = logging.getLogger(__name__)


class Fragment(BaseModel):
    """One crawled scoreboard page."""

    day: date
    raw: bytes
    matches: Optional[list[Match]] = None


class CrawlFailure(BaseModel):
    """A page that could not be fetched or decoded."""

    day: date
    error: str


class CrawlResult(BaseModel):
    """Outcome of a crawl."""

    succeeded: list[date] = []
    failed: list[CrawlFailure] = []

    @property
    def ok(self) -> bool:
        return not self.failed


FragmentHandler = Callable[[Fragment], None]


class ScoreboardCrawler:
    """Concurrent scoreboard fetcher for a range of dates."""

    def __init__(
        self,
        client: ESPNClient,
        max_concurrency: int = config.CRAWL_MAX_CONCURRENCY,
        build: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the crawler.

        Args:
            client: Client whose endpoint, timeout and debug settings are used
            max_concurrency: Maximum requests in flight
            build: Decode and build matches; False leaves fragments raw
            transport: Optional httpx transport (used by tests)
        """
        self.client = client
        self.max_concurrency = max(1, max_concurrency)
        self.build = build
        self.transport = transport

    async def _fetch(self, http: httpx.AsyncClient, day: date) -> bytes:
        url = self.client.scoreboard_url()
        logger.info(f"GET {url} dates={day}")
        try:
            response = await http.get(url, params=scoreboard_params(day))
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timed out for {day}: {url}", url=url) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request failed for {day}: {e}", url=url) from e

        if response.status_code >= 400:
            raise TransportError(
                f"HTTP {response.status_code} from {url} for {day}",
                url=url,
                status_code=response.status_code,
            )
        if self.client.debug:
            self.client.dump_debug(response.content)
        return response.content

    async def _crawl_one(
        self,
        http: httpx.AsyncClient,
        semaphore: asyncio.Semaphore,
        day: date,
        on_fragment: FragmentHandler,
    ) -> date:
        async with semaphore:
            raw = await self._fetch(http, day)

        matches = None
        if self.build:
            matches = build_matches(decode_scoreboard(raw))
        on_fragment(Fragment(day=day, raw=raw, matches=matches))
        return day

    async def crawl(self, days: Iterable[date], on_fragment: FragmentHandler) -> CrawlResult:
        """Fetch every date and wait for all pages to finish.

        Args:
            days: Calendar dates to fetch, one page each
            on_fragment: Called once per successfully fetched page

        Returns:
            CrawlResult listing the dates that succeeded and failed
        """
        days = list(days)
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async with httpx.AsyncClient(
            headers=default_headers(),
            timeout=self.client.timeout,
            transport=self.transport,
        ) as http:
            outcomes = await asyncio.gather(
                *(self._crawl_one(http, semaphore, day, on_fragment) for day in days),
                return_exceptions=True,
            )

        result = CrawlResult()
        for day, outcome in zip(days, outcomes):
            if isinstance(outcome, SharinganError):
                logger.warning(f"Scoreboard page for {day} failed: {outcome}")
                result.failed.append(CrawlFailure(day=day, error=str(outcome)))
            elif isinstance(outcome, Exception):
                logger.error(f"Unexpected error crawling {day}", exc_info=outcome)
                result.failed.append(CrawlFailure(day=day, error=repr(outcome)))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.succeeded.append(day)

        logger.info(
            f"Crawl finished: {len(result.succeeded)} pages ok, {len(result.failed)} failed"
        )
        return result

    def run(self, days: Iterable[date], on_fragment: FragmentHandler) -> CrawlResult:
        """Blocking wrapper around crawl()."""
        return asyncio.run(self.crawl(days, on_fragment))
