"""Crawl orchestration: search for showings, then check each seat map.

Showings are checked one at a time in discovery order. A failed seat check
is retried (up to MAX_RETRIES attempts) before moving on, and never aborts
the crawl. Only a broken search page or a missed deadline does.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime, time
from functools import partial

from playwright.async_api import Error as PlaywrightError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from mseater.config import CrawlerConfig, get_config
from mseater.errors import CrawlCancelledError, ScrapingError, TransientError
from mseater.logging import get_logger
from mseater.models import CrawlRequest, CrawlResult, Showing
from mseater.navigator import RateLimitedNavigator
from mseater.pages.search import SearchPage
from mseater.pages.seat_map import SeatMapPage
from mseater.session import BrowserSession

log = get_logger(__name__)

# Seat check attempts per showing when retrying is enabled
MAX_RETRIES = 3

SeatCheck = Callable[[Showing], Awaitable[bool]]


async def _attempt(check: SeatCheck, showing: Showing) -> bool:
    try:
        return await check(showing)
    except ScrapingError as e:
        showing.retries += 1
        log.info(
            "seat_check_failed",
            theater=showing.theater,
            showtime=showing.when.isoformat(),
            link=showing.link,
            retries=showing.retries,
            error=str(e),
        )
        raise


async def check_with_retries(showing: Showing, check: SeatCheck, retry: bool) -> bool:
    """Run check on showing, re-attempting transient failures.

    Raises:
        ScrapingError: The last failure once attempts are exhausted, or at
            once for a non-transient failure.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(MAX_RETRIES if retry else 1),
        retry=retry_if_exception_type(TransientError),
        reraise=True,
    )
    return await retrying(_attempt, check, showing)


async def classify_showings(
    showings: list[Showing], check: SeatCheck, request: CrawlRequest
) -> CrawlResult:
    """Partition showings into good, bad and failed by checking their seats.

    Args:
        showings: Showings in discovery order.
        check: Returns whether a showing has good seats, raising
            ScrapingError when the seat map can't be read.
        request: Supplies the showing limit and retry flag.

    Returns:
        CrawlResult whose lists keep discovery order.
    """
    result = CrawlResult()
    for showing in showings:
        if request.showing_limit is not None and result.attempted >= request.showing_limit:
            break
        result.attempted += 1

        try:
            good = await check_with_retries(showing, check, request.retry)
        except ScrapingError:
            result.failed_showings.append(showing)
            continue

        if good:
            result.showings.append(showing)
        else:
            result.bad_showings.append(showing)

    log.debug("seat_crawlers_finished", good_showings=len(result.showings))
    if result.attempted:
        log.info(
            "crawl_finished",
            attempted=result.attempted,
            failed=len(result.failed_showings),
            failure_rate=round(result.failure_rate, 3),
            failed_links=[s.link for s in result.failed_showings],
        )
    return result


async def check_showing(
    session: BrowserSession,
    navigator: RateLimitedNavigator,
    config: CrawlerConfig,
    num_seats: int,
    showing: Showing,
) -> bool:
    """Open the showing's seat map in a fresh page and evaluate it."""
    log.debug("crawling_seats", url=showing.link)
    try:
        async with session.new_page() as page:
            seat_page = SeatMapPage(page, navigator, config)
            await seat_page.navigate(showing.link)
            return await seat_page.check(num_seats)
    except PlaywrightError as e:
        raise TransientError(f"Seat page crashed for {showing.link!r}: {e}") from e


@asynccontextmanager
async def _deadline(seconds: float | None) -> AsyncIterator[None]:
    """Bound the enclosed crawl, converting expiry into CrawlCancelledError."""
    if seconds is None:
        yield
        return

    try:
        async with asyncio.timeout(seconds) as cm:
            yield
    except TimeoutError as e:
        if not cm.expired():
            raise
        log.warning("crawl_cancelled", timeout=seconds)
        raise CrawlCancelledError(f"Crawl timed out after {seconds}s") from e


async def _search(
    session: BrowserSession,
    navigator: RateLimitedNavigator,
    config: CrawlerConfig,
    request: CrawlRequest,
) -> list[Showing]:
    async with session.new_page() as page:
        return await SearchPage(page, navigator, config).find_showings(request)


async def crawl(request: CrawlRequest, config: CrawlerConfig | None = None) -> CrawlResult:
    """Search for showings and check the seat map of each.

    Raises:
        SearchError: If no showings could be found.
        CrawlCancelledError: If request.timeout expired.
        PermanentError: If the browser could not be started.
    """
    config = config or get_config()
    async with _deadline(request.timeout):
        async with BrowserSession(config) as session:
            navigator = RateLimitedNavigator(request.request_interval)
            showings = await _search(session, navigator, config, request)
            check = partial(check_showing, session, navigator, config, request.num_seats)
            return await classify_showings(showings, check, request)


async def crawl_search(
    request: CrawlRequest, config: CrawlerConfig | None = None
) -> list[Showing]:
    """Return the showings for request without checking any seats."""
    config = config or get_config()
    async with _deadline(request.timeout):
        async with BrowserSession(config) as session:
            navigator = RateLimitedNavigator(request.request_interval)
            return await _search(session, navigator, config, request)


async def crawl_seats(
    request: CrawlRequest, link: str, config: CrawlerConfig | None = None
) -> bool:
    """Check a single seat map. A one-off, so no pacing delay applies.

    Raises:
        ScrapingError: If the seat map could not be read. No retries.
    """
    config = config or get_config()
    showing = Showing(link=link, theater="", when=datetime.combine(request.show_date, time()))
    async with _deadline(request.timeout):
        async with BrowserSession(config) as session:
            navigator = RateLimitedNavigator(request.request_interval)
            return await check_showing(session, navigator, config, request.num_seats, showing)
