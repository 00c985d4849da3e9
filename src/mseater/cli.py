"""Find showings of a movie that still have good seats together.

Searches showings near a zip code, opens the seat map of each one with
reserved seating, and lists those with enough adjacent seats away from the
edges of the seat map.

Run with: mseater --title dune --zip 48104
Tomorrow: mseater --title dune --zip 48104 --date tomorrow --num-seats 3
Debug:    mseater --title dune --zip 48104 --debug --headed --showing-limit 2
Search:   mseater --title dune --zip 48104 --debug-step search
One map:  mseater --title dune --zip 48104 --debug-step seats:https://...

Exit codes:
  0 = success (table on stdout, failure report on stderr)
  1 = error (message on stderr)
"""

import argparse
import asyncio
import re
import sys
from datetime import date, timedelta

from dotenv import load_dotenv

from mseater.config import get_config
from mseater.crawler import crawl, crawl_search, crawl_seats
from mseater.errors import ScrapingError
from mseater.logging import get_logger, setup_logging
from mseater.models import CrawlRequest, DurationRange, Showing
from mseater.utils import format_clock

log = get_logger(__name__)

_ZIP_RE = re.compile(r"^[0-9]{5}$")
_MONTH_DAY_RE = re.compile(r"^([0-9]{2})-([0-9]{2})$")
_WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for the table."""
    print(msg, file=sys.stderr)


def parse_date(text: str, today: date | None = None) -> date:
    """Parse MM-DD, "today", "tomorrow" or a weekday name.

    A weekday means the next such day after today. MM-DD means the next
    time that date comes around, today included.
    """
    today = today or date.today()
    day = text.strip().lower()
    if day == "today":
        return today
    if day == "tomorrow":
        return today + timedelta(days=1)
    if day in _WEEKDAYS:
        ahead = (_WEEKDAYS.index(day) - today.weekday() - 1) % 7 + 1
        return today + timedelta(days=ahead)

    match = _MONTH_DAY_RE.match(day)
    if not match:
        raise argparse.ArgumentTypeError(
            f'{text!r} is not MM-DD, "today", "tomorrow" or a weekday'
        )
    month, dom = int(match.group(1)), int(match.group(2))
    try:
        candidate = date(today.year, month, dom)
        if candidate < today:
            candidate = date(today.year + 1, month, dom)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"{text!r} is not a valid date: {e}") from e
    return candidate


def parse_zip(text: str) -> str:
    if not _ZIP_RE.match(text):
        raise argparse.ArgumentTypeError(f"{text!r} is not a valid 5 digit zip code")
    return text


def parse_interval(text: str) -> DurationRange:
    try:
        return DurationRange.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def parse_debug_step(text: str) -> tuple[str, str | None]:
    """Parse "search" or "seats:<link>" into (step, link)."""
    if text == "search":
        return ("search", None)
    if text.startswith("seats:") and len(text) > len("seats:"):
        return ("seats", text.removeprefix("seats:"))
    raise argparse.ArgumentTypeError(f"unknown step: {text!r}")


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"{text!r} must not be negative")
    return value


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Find movie showings that still have good seats together.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    search = parser.add_argument_group("search parameters")
    search.add_argument("--title", required=True, help="All or part of the movie title.")
    search.add_argument(
        "--date",
        type=parse_date,
        default="today",
        help='Day to search as MM-DD or "today", "tomorrow", or a weekday e.g. "tuesday".',
    )
    search.add_argument("--zip", type=parse_zip, required=True, help="Zip code to search near.")
    search.add_argument(
        "--num-seats",
        type=int,
        default=2,
        help="The number of contiguous seats to find (default: 2).",
    )

    output = parser.add_argument_group("output controls")
    output.add_argument("--link", action="store_true", help="Show links in showtime results.")
    output.add_argument("--show-bad", action="store_true", help="Also output bad showtimes.")

    requests = parser.add_argument_group("request controls")
    requests.add_argument(
        "--timeout",
        type=float,
        default=0,
        help="Overall timeout for searching, in seconds (default: unlimited).",
    )
    requests.add_argument(
        "--retry",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Retry failed seat crawling (default: on).",
    )
    requests.add_argument(
        "--request-interval",
        type=parse_interval,
        default="15-25",
        help=(
            "Seconds to wait between HTTP requests, either a number (e.g. \"5\") "
            "or a range (e.g. \"3-10\"). Pacing requests avoids being flagged as a bot."
        ),
    )

    debug = parser.add_argument_group("debug controls")
    debug.add_argument("--debug", action="store_true", help="Show debug log output.")
    debug.add_argument(
        "--debug-step",
        type=parse_debug_step,
        default=None,
        help='Run only one step: "search" or "seats:<link>".',
    )
    debug.add_argument(
        "--showing-limit",
        type=_non_negative_int,
        default=None,
        help="The max number of showings to check (default: unlimited).",
    )
    debug.add_argument("--headed", action="store_true", help="Launch a visible browser.")

    args = parser.parse_args(argv)
    if args.num_seats < 1:
        parser.error("too few seats specified: must be at least 1")
    return args


def build_request(args: argparse.Namespace) -> CrawlRequest:
    return CrawlRequest(
        title=args.title,
        show_date=args.date,
        zip_code=args.zip,
        num_seats=args.num_seats,
        showing_limit=args.showing_limit,
        retry=args.retry,
        request_interval=args.request_interval,
        timeout=args.timeout or None,
    )


def format_showings(showings: list[Showing], show_links: bool = False) -> str:
    """Format showings as an aligned table sorted by theater then time.

    Columns: Theater | Time [| Link]
    """
    if not showings:
        return "(no showings)"

    headers = ["Theater", "Time"]
    if show_links:
        headers.append("Link")

    rows = []
    for s in sorted(showings, key=Showing.sort_key):
        row = [s.theater, format_clock(s.when)]
        if show_links:
            row.append(s.link)
        rows.append(row)

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    separator = "-+-".join("-" * w for w in widths)
    row_lines = [
        " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip()
        for row in rows
    ]

    return "\n".join([header_line.rstrip(), separator, *row_lines])


async def main(args: argparse.Namespace) -> None:
    config = get_config()
    if args.headed:
        config = config.model_copy(update={"headless": False})
    request = build_request(args)
    log.debug("crawl_request", **request.model_dump(mode="json"))

    if args.debug_step is not None:
        step, link = args.debug_step
        if step == "search":
            showings = await crawl_search(request, config)
            print(format_showings(showings, args.link))
        else:
            good = await crawl_seats(request, link, config)
            _log(f"crawl_seats({link}) returned {good}")
        return

    result = await crawl(request, config)

    print(format_showings(result.showings, args.link))
    if args.show_bad:
        print("=== Bad showings ===")
        print(format_showings(result.bad_showings, args.link))

    report = result.failure_report()
    if report:
        _log(report)


def run(argv: list[str] | None = None) -> None:
    """Console script entry point."""
    load_dotenv()
    args = _parse_args(argv)

    config = get_config()
    setup_logging(
        json_output=config.log_json,
        log_level="DEBUG" if args.debug else config.log_level,
    )

    try:
        asyncio.run(main(args))
    except ScrapingError as e:
        print(f"Failure: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
