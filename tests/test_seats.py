"""Tests for seat grid inference and seat quality evaluation."""

import pytest

from conftest import grid_descriptors
from mseater.models import RawSeatDescriptor, Seat, SeatGrid
from mseater.seats import BUFFER, build_seat_grid, has_good_seats


def evaluate(grid: list[str], num_seats: int = 2) -> bool:
    return has_good_seats(build_seat_grid(grid_descriptors(grid)), num_seats)


# ---------------------------------------------------------------------------
# build_seat_grid
# ---------------------------------------------------------------------------


class TestBuildSeatGrid:
    def test_new_row_starts_when_position_changes(self) -> None:
        grid = build_seat_grid(
            [
                RawSeatDescriptor(vertical_position="10px", reserved=False),
                RawSeatDescriptor(vertical_position="10px", reserved=True),
                RawSeatDescriptor(vertical_position="34px", reserved=False),
                RawSeatDescriptor(vertical_position="34px", reserved=False),
                RawSeatDescriptor(vertical_position="34px", reserved=True),
            ]
        )
        assert [(s.row, s.col, s.reserved) for s in grid.seats] == [
            (0, 0, False),
            (0, 1, True),
            (1, 0, False),
            (1, 1, False),
            (1, 2, True),
        ]
        assert grid.max_row == 1
        assert grid.max_col == 2

    def test_position_is_compared_to_previous_seat_only(self) -> None:
        # Returning to an earlier `top` is still a new row
        grid = build_seat_grid(
            [
                RawSeatDescriptor(vertical_position="10px", reserved=False),
                RawSeatDescriptor(vertical_position="34px", reserved=False),
                RawSeatDescriptor(vertical_position="10px", reserved=False),
            ]
        )
        assert [s.row for s in grid.seats] == [0, 1, 2]
        assert [s.col for s in grid.seats] == [0, 0, 0]
        assert grid.max_row == 2
        assert grid.max_col == 0

    def test_single_seat(self) -> None:
        grid = build_seat_grid([RawSeatDescriptor(vertical_position="0px", reserved=False)])
        assert grid.seats == [Seat(row=0, col=0, reserved=False)]
        assert grid.max_row == 0
        assert grid.max_col == 0

    def test_empty_input(self) -> None:
        grid = build_seat_grid([])
        assert grid.seats == []
        assert grid.max_row == -1

    def test_max_col_is_widest_row(self) -> None:
        grid = build_seat_grid(grid_descriptors(["aaaa", "aaaaaaaa", "aaaaaa"]))
        assert grid.max_row == 2
        assert grid.max_col == 7

    def test_numeric_positions(self) -> None:
        grid = build_seat_grid(
            [
                RawSeatDescriptor(vertical_position=12.5, reserved=False),
                RawSeatDescriptor(vertical_position=12.5, reserved=False),
                RawSeatDescriptor(vertical_position=36.5, reserved=False),
            ]
        )
        assert [(s.row, s.col) for s in grid.seats] == [(0, 0), (0, 1), (1, 0)]

    def test_keeps_render_order(self) -> None:
        descriptors = grid_descriptors(["a.a", ".a."])
        grid = build_seat_grid(descriptors)
        assert [s.reserved for s in grid.seats] == [d.reserved for d in descriptors]


# ---------------------------------------------------------------------------
# has_good_seats
# ---------------------------------------------------------------------------

FULL_7X8 = ["aaaaaaaa"] * 7


class TestHasGoodSeats:
    @pytest.mark.parametrize(
        ("name", "grid", "good"),
        [
            ("empty theater", FULL_7X8, True),
            ("too shallow", ["aaaaaaaa"] * 2, False),
            ("too skinny", ["aa"] * 8, False),
            (
                "only one",
                [
                    "........",
                    "........",
                    "........",
                    "...a....",
                    "........",
                    "........",
                    "........",
                ],
                False,
            ),
            (
                "too close to edges",
                [
                    ".........",
                    ".........",
                    "...aa....",
                    "..aa.aa..",
                    "..aa.aa..",
                    "....aa...",
                    ".........",
                    ".........",
                ],
                False,
            ),
            (
                "enough space",
                [
                    "........",
                    "........",
                    "........",
                    "...aa...",
                    "........",
                    "........",
                    "........",
                ],
                True,
            ),
            (
                "centered block",
                [
                    "........",
                    "........",
                    "........",
                    "...aa...",
                    "...aa...",
                    "........",
                    "........",
                ],
                True,
            ),
            (
                "multiple spaces",
                [
                    "........",
                    "........",
                    "........",
                    "...aa...",
                    "...aa...",
                    "........",
                    "........",
                    "........",
                ],
                True,
            ),
            (
                "short row pair touching side buffer",
                [
                    "........",
                    "........",
                    "........",
                    "..aa...",
                    "........",
                    "........",
                    "........",
                ],
                False,
            ),
            (
                "short row pair judged against widest row",
                [
                    "........",
                    "........",
                    "........",
                    "...aa..",
                    "........",
                    "........",
                    "........",
                ],
                True,
            ),
        ],
    )
    def test_grids(self, name: str, grid: list[str], good: bool) -> None:
        assert evaluate(grid) is good

    def test_back_rows_never_count(self) -> None:
        # Row 4 of 7 is inside the back buffer (4 > 6 - BUFFER)
        grid = [
            "........",
            "........",
            "........",
            "........",
            "aaaaaaaa",
            "aaaaaaaa",
            "aaaaaaaa",
        ]
        assert evaluate(grid, num_seats=1) is False

    def test_front_rows_never_count(self) -> None:
        grid = ["aaaaaaaa"] * BUFFER + ["........"] * 4
        assert evaluate(grid, num_seats=1) is False

    def test_reserved_seat_breaks_run(self) -> None:
        grid = ["..........."] * 3 + ["...aa.aa..."] + ["..........."] * 3
        assert evaluate(grid, num_seats=2) is True
        assert evaluate(grid, num_seats=3) is False

    def test_run_does_not_continue_into_next_row(self) -> None:
        # Last open seat of row 3 and first candidate of row 4 are not adjacent
        grid = [
            "..........",
            "..........",
            "..........",
            "......a...",
            "...a......",
            "..........",
            "..........",
            "..........",
        ]
        assert evaluate(grid, num_seats=2) is False

    def test_larger_party(self) -> None:
        grid = ["............"] * 3 + ["...aaaaaa..."] + ["............"] * 3
        assert evaluate(grid, num_seats=6) is True
        assert evaluate(grid, num_seats=7) is False

    def test_single_seat_party(self) -> None:
        assert evaluate(FULL_7X8, num_seats=1) is True

    def test_uses_grid_extents_not_seat_positions(self) -> None:
        seats = [Seat(row=r, col=c) for r in range(7) for c in range(8)]
        assert has_good_seats(SeatGrid(seats=seats, max_row=6, max_col=7), 2) is True
        # Pretending the grid is narrower pushes col 4 into the side buffer
        assert has_good_seats(SeatGrid(seats=seats, max_row=6, max_col=6), 2) is False

    def test_empty_grid(self) -> None:
        assert has_good_seats(SeatGrid(seats=[], max_row=-1, max_col=0), 1) is False
