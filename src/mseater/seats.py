"""Seat map inference and seat quality evaluation.

The seat map is a flat list of absolutely positioned elements rendered left
to right, top to bottom. Seats in one row share the same vertical position,
so a new row starts whenever that position changes. Rows are assumed to be
centered, which isn't always true (rows often miss a few seats at one end),
but it is good enough to find seats away from the edges.
"""

from collections.abc import Iterable

from mseater.models import RawSeatDescriptor, Seat, SeatGrid

# Rows and columns this close to any edge of the grid never count as good
BUFFER = 3


def build_seat_grid(descriptors: Iterable[RawSeatDescriptor]) -> SeatGrid:
    """Assign row and column indexes to seat descriptors in render order.

    Args:
        descriptors: Seat descriptors in document order.

    Returns:
        SeatGrid with seats in the same order, the last row index and the
        widest row's last column index.
    """
    seats: list[Seat] = []
    current_position: str | float | None = None
    row = -1
    col = 0
    max_col = 0

    for descriptor in descriptors:
        if row == -1 or descriptor.vertical_position != current_position:
            current_position = descriptor.vertical_position
            row += 1
            col = 0

        seats.append(Seat(row=row, col=col, reserved=descriptor.reserved))

        max_col = max(max_col, col)
        col += 1

    return SeatGrid(seats=seats, max_row=row, max_col=max_col)


def has_good_seats(grid: SeatGrid, num_seats: int) -> bool:
    """Check whether num_seats adjacent open seats exist away from the edges.

    Seats must be in one row, outside BUFFER of the front and back rows and
    of column zero and grid.max_col. The grid-wide max_col is used for every
    row, so the right edge of a short row is judged against the widest row.
    The first qualifying block wins.

    Relies on grid.seats being row-major, as build_seat_grid emits them.
    """
    contiguous = 0
    for seat in grid.seats:
        if seat.col == 0:
            contiguous = 0

        # Seats run front to back, so nothing past the back buffer can qualify
        if seat.row > grid.max_row - BUFFER:
            break

        if (
            seat.row < BUFFER
            or seat.col < BUFFER
            or seat.col > grid.max_col - BUFFER
            or seat.reserved
        ):
            contiguous = 0
            continue

        contiguous += 1
        if contiguous >= num_seats:
            return True

    return False
