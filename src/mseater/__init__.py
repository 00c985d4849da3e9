"""Seat map crawler: finds showings with good seats left together.

Searches movie times near a zip code, reads each showing's seat map and keeps
the showings with enough adjacent open seats away from the edges.
"""

from mseater.crawler import classify_showings, crawl, crawl_search, crawl_seats
from mseater.models import CrawlRequest, CrawlResult, DurationRange, Showing
from mseater.seats import build_seat_grid, has_good_seats

__all__ = [
    "crawl",
    "crawl_search",
    "crawl_seats",
    "classify_showings",
    "build_seat_grid",
    "has_good_seats",
    "CrawlRequest",
    "CrawlResult",
    "DurationRange",
    "Showing",
]
