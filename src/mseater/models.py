"""Pydantic models for crawl requests, showings and seat maps.

All data structures use Pydantic v2 for validation, serialization, and type safety.
"""

import random
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DurationRange(BaseModel):
    """A range of allowable delays, in seconds."""

    model_config = ConfigDict(frozen=True)

    lower: float = Field(ge=0)
    upper: float = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "DurationRange":
        if self.upper < self.lower:
            raise ValueError(
                f"upper bound {self.upper} cannot be less than lower bound {self.lower}"
            )
        return self

    @classmethod
    def parse(cls, text: str) -> "DurationRange":
        """Parse "5" (a fixed delay) or "3-10" (a range) as whole seconds.

        Raises:
            ValueError: If the text is neither form or the bounds are inverted.
        """
        text = text.strip()
        if text.isdigit():
            return cls(lower=int(text), upper=int(text))

        lower, sep, upper = text.partition("-")
        if not sep or not lower.isdigit() or not upper.isdigit():
            raise ValueError(f"invalid interval: {text!r}")
        return cls(lower=int(lower), upper=int(upper))

    def sample(self, rng: random.Random | None = None) -> float:
        """Return a random delay within the range.

        A degenerate range (lower == upper) always yields that value.
        """
        if self.lower == self.upper:
            return self.upper
        rng = rng or random
        return rng.uniform(self.lower, self.upper)

    def __str__(self) -> str:
        if self.lower == self.upper:
            return f"{self.lower:g}s"
        return f"{self.lower:g}-{self.upper:g}s"


class RawSeatDescriptor(BaseModel):
    """One seat element as rendered on the seat map.

    vertical_position is only compared for equality: a change from the
    previous descriptor starts a new row.
    """

    model_config = ConfigDict(frozen=True)

    vertical_position: str | float
    reserved: bool


class Seat(BaseModel):
    """A seat placed on the inferred row/column grid."""

    model_config = ConfigDict(frozen=True)

    row: int = Field(ge=0)
    col: int = Field(ge=0)
    reserved: bool = False


class SeatGrid(BaseModel):
    """Seats in construction order (row-major) plus the grid extents."""

    seats: list[Seat]
    max_row: int  # -1 for an empty grid
    max_col: int  # widest row's last column index


class Showing(BaseModel):
    """A single screening of a movie at a theater."""

    link: str  # Seat map URL from the showtime button
    theater: str
    when: datetime
    retries: int = 0  # Failed seat checks, owned by the crawler

    def sort_key(self) -> tuple[str, datetime]:
        return (self.theater, self.when)


class CrawlRequest(BaseModel):
    """Parameters for one crawl. Immutable for its duration."""

    model_config = ConfigDict(frozen=True)

    title: str  # All or part of the movie title
    show_date: date
    zip_code: str = Field(pattern=r"^[0-9]{5}$")
    num_seats: int = Field(default=2, ge=1)

    # None means unlimited
    showing_limit: int | None = Field(default=None, ge=0)
    # The seating page is slow to load and sometimes fails to render at all
    retry: bool = True
    request_interval: DurationRange = Field(
        default_factory=lambda: DurationRange(lower=15, upper=25)
    )
    # Overall deadline in seconds, None for no deadline
    timeout: float | None = Field(default=None, gt=0)


class CrawlResult(BaseModel):
    """Showings partitioned by seat check outcome."""

    showings: list[Showing] = Field(default_factory=list)  # Good seats available
    bad_showings: list[Showing] = Field(default_factory=list)
    failed_showings: list[Showing] = Field(default_factory=list)
    attempted: int = 0  # Showings whose seat check ran, retries not counted

    @property
    def failure_rate(self) -> float:
        if self.attempted == 0:
            return 0.0
        return len(self.failed_showings) / self.attempted

    def failure_report(self) -> str:
        """Human-readable summary of failed seat checks.

        Empty when no showing was attempted.
        """
        if self.attempted == 0:
            return ""
        lines = [
            f"Failed {len(self.failed_showings)} of {self.attempted} requests "
            f"({self.failure_rate:.1%} failure rate)"
        ]
        if self.failed_showings:
            lines.append(
                "Failed to handle the following URLs. You may want to check them yourself:"
            )
            lines.extend(f"\t{showing.link}" for showing in self.failed_showings)
        return "\n".join(lines)
