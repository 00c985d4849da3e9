"""Shared scraping utilities for page setup and time text parsing."""

from datetime import date, datetime, time

from playwright.async_api import Page, Route

from mseater.logging import get_logger

log = get_logger(__name__)

# Stylesheets are deliberately allowed: seat rows come from computed `top`.
BLOCKED_RESOURCE_TYPES: frozenset[str] = frozenset({"image", "font", "media"})


async def configure_page_for_scraping(page: Page, *, timeout_ms: float = 30000) -> None:
    """Set up a Playwright page for crawling.

    Blocks images, fonts and media to cut page weight, and applies the
    default action and navigation timeouts.

    Args:
        page: Playwright Page instance.
        timeout_ms: Default timeout for actions and navigations.
    """

    async def _block_resources(route: Route) -> None:
        if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
            await route.abort()
        else:
            await route.continue_()

    await page.route("**/*", _block_resources)
    page.set_default_timeout(timeout_ms)
    page.set_default_navigation_timeout(timeout_ms)


def parse_showtime(text: str, show_date: date) -> datetime:
    """Parse showtime button text like "9:30a" or " 12:30p " on show_date.

    Raises:
        ValueError: If the text is not a 12-hour clock time.
    """
    cleaned = text.strip().lower()
    if cleaned.endswith(("a", "p")):
        cleaned += "m"
    parsed = datetime.strptime(cleaned, "%I:%M%p").time()
    return datetime.combine(show_date, time(parsed.hour, parsed.minute))


def format_clock(when: datetime) -> str:
    """Format a datetime as "3:04pm"."""
    hour = when.hour % 12 or 12
    suffix = "am" if when.hour < 12 else "pm"
    return f"{hour}:{when.minute:02d}{suffix}"
