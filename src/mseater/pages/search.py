"""SearchPage - lists showings of a movie near a zip code.

Navigates to /{zip}_movietimes?date=YYYY-MM-DD and walks the results:

  .fd-showtimes .fd-theater
    .fd-theater__name > a                      theater name
    .fd-movie                                  one per movie at the theater
      .fd-movie__title | .fd-movie__no-showtimes
      li.fd-movie__showtimes-variant           one per format (standard, IMAX...)
        .fd-movie__amenity-list > li > button  "Reserved seating" etc.
        li.showtimes-btn-list__item > a        showtime text + seat map href

Only loading the page and finding theaters is fatal. Once theaters are
found, a broken theater, movie, variant or showtime is logged and skipped.
"""

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from mseater.config import CrawlerConfig
from mseater.errors import SearchError
from mseater.logging import get_logger
from mseater.models import CrawlRequest, Showing
from mseater.navigator import RateLimitedNavigator
from mseater.utils import parse_showtime

log = get_logger(__name__)


class SearchPage:
    """Movie times search results for one zip code and date."""

    THEATER = ".fd-showtimes .fd-theater"
    THEATER_NAME = ".fd-theater__name > a"
    MOVIE = ".fd-movie"
    MOVIE_TITLE = ".fd-movie__title"
    NO_SHOWTIMES = ".fd-movie__no-showtimes"
    VARIANT = "li.fd-movie__showtimes-variant"
    AMENITY = ".fd-movie__amenity-list > li > button"
    SHOWTIME = "li.showtimes-btn-list__item > a"

    def __init__(
        self, page: Page, navigator: RateLimitedNavigator, config: CrawlerConfig
    ) -> None:
        self.page = page
        self.navigator = navigator
        self.config = config

    def url_for(self, request: CrawlRequest) -> str:
        return (
            f"{self.config.base_url}/{request.zip_code}_movietimes"
            f"?date={request.show_date.isoformat()}"
        )

    async def find_showings(self, request: CrawlRequest) -> list[Showing]:
        """Load the search page and collect reserved-seating showings.

        Raises:
            SearchError: If the page can't be loaded, lists no theaters, or
                yields no matching showings.
        """
        url = self.url_for(request)
        search_log = log.bind(search_page=url)
        search_log.debug("searching")

        try:
            await self.navigator.goto(self.page, url)
            theaters = await self.page.locator(self.THEATER).all()
        except PlaywrightError as e:
            raise SearchError(f"Failed to load page at {url!r}: {e}") from e
        if not theaters:
            raise SearchError(f"Failed to find theaters on page {url!r}")

        showings: list[Showing] = []
        for theater in theaters:
            try:
                showings.extend(await self._theater_showings(theater, request, search_log))
            except PlaywrightError as e:
                search_log.info("theater_parse_failed", error=str(e))

        if not showings:
            raise SearchError(f"No reserved-seating showings of {request.title!r} at {url!r}")

        search_log.debug("finished_parsing_showings", showings=len(showings))
        return showings

    async def _theater_showings(
        self, theater: Locator, request: CrawlRequest, theater_log: structlog.BoundLogger
    ) -> list[Showing]:
        name_node = theater.locator(self.THEATER_NAME).first
        if await name_node.count() == 0:
            theater_log.info("theater_name_missing")
            return []
        theater_name = (await name_node.text_content() or "").strip()
        theater_log = theater_log.bind(theater=theater_name)
        theater_log.debug("handling_theater")

        movies = await theater.locator(self.MOVIE).all()
        if not movies:
            theater_log.info("movie_nodes_missing")
            return []

        showings: list[Showing] = []
        for movie in movies:
            try:
                if await movie.locator(self.NO_SHOWTIMES).first.is_visible():
                    theater_log.debug("no_showings_available")
                    continue
                title = await movie.locator(self.MOVIE_TITLE).first.text_content(
                    timeout=self.config.title_timeout_ms
                )
            except PlaywrightError as e:
                theater_log.info("movie_title_missing", error=str(e))
                continue
            title = (title or "").strip()
            if request.title.lower() not in title.lower():
                continue

            movie_log = theater_log.bind(title=title)
            movie_log.debug("found_matching_movie")
            showings.extend(await self._movie_showings(movie, theater_name, request, movie_log))

        return showings

    async def _movie_showings(
        self,
        movie: Locator,
        theater_name: str,
        request: CrawlRequest,
        movie_log: structlog.BoundLogger,
    ) -> list[Showing]:
        try:
            variants = await movie.locator(self.VARIANT).all()
        except PlaywrightError as e:
            movie_log.info("variants_missing", error=str(e))
            return []
        if not variants:
            movie_log.info("variants_missing")
            return []

        showings: list[Showing] = []
        for i, variant in enumerate(variants):
            variant_log = movie_log.bind(variant=i)
            if not await self._has_reserved_seating(variant, variant_log):
                continue

            try:
                buttons = await variant.locator(self.SHOWTIME).all()
            except PlaywrightError as e:
                variant_log.info("showtimes_missing", error=str(e))
                continue
            if not buttons:
                variant_log.info("showtimes_missing")
                continue

            for button in buttons:
                showing = await self._read_showtime(button, theater_name, request, variant_log)
                if showing is not None:
                    showings.append(showing)

        return showings

    async def _read_showtime(
        self,
        button: Locator,
        theater_name: str,
        request: CrawlRequest,
        variant_log: structlog.BoundLogger,
    ) -> Showing | None:
        try:
            text = await button.text_content() or ""
        except PlaywrightError as e:
            variant_log.info("showtime_text_failed", error=str(e))
            return None
        try:
            when = parse_showtime(text, request.show_date)
        except ValueError:
            variant_log.info("showtime_parse_failed", time=text.strip())
            return None

        try:
            link = await button.get_attribute("href")
        except PlaywrightError as e:
            variant_log.info("showtime_link_failed", showtime=when.isoformat(), error=str(e))
            return None
        if not link:
            variant_log.info("showtime_link_missing", showtime=when.isoformat())
            return None

        return Showing(link=link, theater=theater_name, when=when)

    async def _has_reserved_seating(
        self, variant: Locator, variant_log: structlog.BoundLogger
    ) -> bool:
        try:
            amenities = await variant.locator(self.AMENITY).all()
        except PlaywrightError as e:
            variant_log.info("amenities_missing", error=str(e))
            return False

        for amenity in amenities:
            try:
                text = await amenity.text_content() or ""
            except PlaywrightError as e:
                variant_log.info("amenity_text_failed", error=str(e))
                continue
            if "reserve" in text.lower():
                return True
        return False
