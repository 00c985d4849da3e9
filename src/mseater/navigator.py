"""Rate-limited page navigation.

Every navigation after the first waits a random delay from the request
interval so consecutive page loads look like a person clicking around.
One navigator is shared by every page in a crawl, so the search page and
each seat page are paced against each other.
"""

import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from mseater.logging import get_logger
from mseater.models import DurationRange

if TYPE_CHECKING:
    from playwright.async_api import Page, Response

log = get_logger(__name__)


class RateLimitedNavigator:
    """Paces Page.goto calls by a sampled delay, except the very first one."""

    def __init__(
        self,
        interval: DurationRange,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self.interval = interval
        self.has_navigated_once = False
        self._sleep = sleep
        self._rng = rng

    async def wait_turn(self) -> float:
        """Block until the next navigation may start.

        Returns:
            The delay waited, in seconds (0 for the first navigation).
        """
        if not self.has_navigated_once:
            self.has_navigated_once = True
            return 0.0

        delay = self.interval.sample(self._rng)
        log.debug("navigation_delay", seconds=round(delay, 2))
        await self._sleep(delay)
        return delay

    async def goto(self, page: "Page", url: str, **kwargs: Any) -> "Response | None":
        """Navigate page to url once the pacing delay has elapsed."""
        await self.wait_turn()
        log.info("visiting", url=url)
        return await page.goto(url, **kwargs)
