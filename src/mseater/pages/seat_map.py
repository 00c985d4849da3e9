"""SeatMapPage - reads the interactive seat map of one showing.

DOM assumptions, from poking around seat pages:
  - The seating chart is a flat list of div.seat-map__seat elements.
  - Seats are listed left to right, top to bottom.
  - Seats are absolutely positioned; seats in one row share the same `top`.
  - aria-disabled="true" marks a reserved seat, "false" an open one.
  - Wheelchair and companion seats carry extra classes and are skipped:
    they are usually open and would make every showing look good.
"""

import tempfile
from pathlib import Path

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from mseater.config import CrawlerConfig
from mseater.errors import TransientError
from mseater.logging import get_logger
from mseater.models import RawSeatDescriptor
from mseater.navigator import RateLimitedNavigator
from mseater.seats import build_seat_grid, has_good_seats

log = get_logger(__name__)

_TOP_SCRIPT = "element => window.getComputedStyle(element).getPropertyValue('top')"


class SeatMapPage:
    """Seat selection page reached from a showtime link."""

    ANY_SEAT = ".seat-map__seat"
    STANDARD_SEAT = ".seat-map__seat:not(.wheelchair):not(.companion)"

    def __init__(
        self, page: Page, navigator: RateLimitedNavigator, config: CrawlerConfig
    ) -> None:
        self.page = page
        self.navigator = navigator
        self.config = config

    async def navigate(self, link: str) -> None:
        """Load the seat page and wait for the seat map to render.

        Raises:
            TransientError: If the page fails to load or no seat appears in time.
        """
        try:
            await self.navigator.goto(self.page, link)
        except PlaywrightError as e:
            raise TransientError(f"Failed to load page at {link!r}: {e}") from e

        try:
            await self.page.locator(self.ANY_SEAT).first.wait_for(
                timeout=self.config.seat_map_timeout_ms
            )
        except PlaywrightTimeoutError as e:
            raise TransientError(f"Seat map did not render at {link!r}") from e

    async def extract_seats(self) -> list[RawSeatDescriptor]:
        """Read every standard seat in document order.

        Raises:
            TransientError: If no seats are found or a seat's reservation
                state can't be read. No partial list is returned.
        """
        try:
            seat_divs = await self.page.locator(self.STANDARD_SEAT).all()
        except PlaywrightError as e:
            raise TransientError(f"Failed to find seats: {e}") from e

        if not seat_divs:
            dump = await self._dump_page()
            log.info("no_seats_found", url=self.page.url, page_dump=dump)
            raise TransientError(f"No seats found at {self.page.url!r}")

        descriptors: list[RawSeatDescriptor] = []
        for seat_div in seat_divs:
            descriptors.append(await self._read_seat(seat_div))
        return descriptors

    async def _read_seat(self, seat_div: Locator) -> RawSeatDescriptor:
        try:
            top = await seat_div.evaluate(_TOP_SCRIPT)
            disabled = await seat_div.get_attribute("aria-disabled")
        except PlaywrightError as e:
            raise TransientError(f"Failed to read seat element: {e}") from e

        if disabled == "true":
            reserved = True
        elif disabled == "false":
            reserved = False
        else:
            raise TransientError(f"Failed to parse aria-disabled attribute {disabled!r}")

        return RawSeatDescriptor(vertical_position=top, reserved=reserved)

    async def check(self, num_seats: int) -> bool:
        """Build the seat grid and report whether good seats remain.

        Must be called after navigate().
        """
        grid = build_seat_grid(await self.extract_seats())
        good = has_good_seats(grid, num_seats)
        log.debug(
            "crawled_seats",
            url=self.page.url,
            seats=len(grid.seats),
            rows=grid.max_row + 1,
            good=good,
        )
        return good

    async def _dump_page(self) -> str | None:
        """Save the page HTML for later inspection, returning the file path."""
        try:
            content = await self.page.content()
        except PlaywrightError as e:
            log.warning("page_dump_failed", error=str(e))
            return None

        dump_dir = self.config.page_dump_dir
        try:
            if dump_dir:
                Path(dump_dir).mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                prefix="seating-",
                suffix=".html",
                dir=dump_dir,
                delete=False,
                encoding="utf-8",
            ) as dump:
                dump.write(content)
        except OSError as e:
            log.warning("page_dump_failed", dump_dir=dump_dir, error=str(e))
            return None
        return dump.name
