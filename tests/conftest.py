"""Shared test fixtures."""

from datetime import date, datetime
from pathlib import Path

import pytest

from mseater.config import CrawlerConfig
from mseater.models import CrawlRequest, DurationRange, RawSeatDescriptor, Showing


@pytest.fixture
def config(tmp_path: Path) -> CrawlerConfig:
    """Config that never reads a developer's .env file."""
    return CrawlerConfig(_env_file=None, page_dump_dir=str(tmp_path / "dumps"))


@pytest.fixture
def request_factory():
    def make(**overrides) -> CrawlRequest:
        fields = {
            "title": "dune",
            "show_date": date(2026, 10, 18),
            "zip_code": "48104",
            "num_seats": 2,
            "request_interval": DurationRange(lower=0, upper=0),
        }
        fields.update(overrides)
        return CrawlRequest(**fields)

    return make


@pytest.fixture
def showings() -> list[Showing]:
    return [
        Showing(
            link=f"https://tickets.example/seats/{i}",
            theater=theater,
            when=datetime(2026, 10, 18, hour, 30),
        )
        for i, (theater, hour) in enumerate(
            [("State Theatre", 19), ("Michigan", 18), ("State Theatre", 13), ("Rave", 21)]
        )
    ]


def grid_descriptors(grid: list[str]) -> list[RawSeatDescriptor]:
    """Turn rows like "..aa...." into descriptors, "." reserved and "a" open.

    Each row gets its own `top` value, as the seat map renders it.
    """
    descriptors = []
    for i, row in enumerate(grid):
        for cell in row:
            if cell not in ".a":
                raise ValueError(f"invalid grid character {cell!r}")
            descriptors.append(
                RawSeatDescriptor(vertical_position=f"{40 + 24 * i}px", reserved=cell == ".")
            )
    return descriptors
