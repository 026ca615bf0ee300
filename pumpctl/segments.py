"""Editable table of gradient segments (time, start and end concentration)."""

from __future__ import annotations

from typing import Callable

COLUMN_HEADERS = ("Time (min)", "[Start] (mM)", "[End] (mM)")
EMPTY_CELL = "<empty>"


def _format_number(value: float) -> str:
    return f"{float(value):g}"


def _to_float(cell: str) -> float:
    try:
        return float(cell)
    except ValueError:
        return 0.0


class SegmentTable:
    """Rows of text cells; subscribers are told whenever the segments change."""

    def __init__(self) -> None:
        self.column_headers: list[str] = list(COLUMN_HEADERS)
        self._rows: list[list[str]] = []
        self._subscribers: list[Callable[[], None]] = []

    def subscribe(self, callback: Callable[[], None]) -> None:
        self._subscribers.append(callback)

    def notify(self) -> None:
        """Tell every subscriber that the segments changed."""
        for callback in list(self._subscribers):
            callback()

    def row_count(self) -> int:
        return len(self._rows)

    def column_count(self) -> int:
        return len(self.column_headers)

    def cell(self, row: int, column: int) -> str:
        return self._rows[row][column]

    def header(self, section: int, horizontal: bool = True) -> str:
        if horizontal:
            return self.column_headers[section]
        return str(section)

    def insert_rows(self, row: int, count: int) -> bool:
        """Insert `count` placeholder rows at `row`."""
        if row < 0 or row > len(self._rows):
            raise IndexError(f"row {row} out of range")
        for _ in range(count):
            self._rows.insert(row, [EMPTY_CELL] * self.column_count())
        return True

    def move_rows(self, source_row: int, count: int, destination: int) -> bool:
        """Move a single row before `destination`; return False if the move is invalid."""
        size = len(self._rows)
        if (
            source_row < 0
            or destination < 0
            or source_row >= size
            or destination > size
            or source_row == destination
            or count != 1
        ):
            return False
        moved = self._rows.pop(source_row)
        if destination > source_row:
            destination -= 1
        self._rows.insert(destination, moved)
        return True

    def remove_rows(self, position: int, rows: int) -> bool:
        if position < 0 or position + rows > len(self._rows):
            return False
        del self._rows[position : position + rows]
        return True

    def add_segment(
        self, time_minutes: float, start_conc: int, end_conc: int, insert_row: int = -1
    ) -> None:
        """Insert a segment at `insert_row`, or append when it is out of range."""
        if insert_row < 0 or insert_row > len(self._rows):
            insert_row = len(self._rows)
        self._rows.insert(
            insert_row,
            [_format_number(time_minutes), str(int(start_conc)), str(int(end_conc))],
        )
        self.notify()

    def remove_segment(self, pos: int = -1) -> None:
        """Remove the row at `pos`, or the last row when `pos` is out of range."""
        if not self._rows:
            return
        if pos < 0 or pos >= len(self._rows):
            pos = len(self._rows) - 1
        del self._rows[pos]
        self.notify()

    def segments(self) -> list[list[float]]:
        """Numeric rows; cells that are not numbers read as 0.0."""
        return [[_to_float(cell) for cell in row] for row in self._rows]

    def clear_segments(self) -> None:
        self._rows.clear()
        self.notify()