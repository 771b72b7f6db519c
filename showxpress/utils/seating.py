import re
import string
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

ROW_LETTERS = string.ascii_uppercase

_LABEL_RE = re.compile(r"^([A-Z])([1-9][0-9]*)$")


def seat_label(row: str, number: int) -> str:
    """'A', 7 -> 'A7'."""
    return f"{row.strip().upper()}{number}"


def parse_label(label: str) -> Optional[Tuple[str, int]]:
    """'A7' -> ('A', 7). Returns None when the label is malformed."""
    match = _LABEL_RE.match(label.strip().upper())
    if not match:
        return None
    return match.group(1), int(match.group(2))


def _sort_key(label: str):
    parsed = parse_label(label)
    if parsed is None:
        return (len(ROW_LETTERS), 0, label)
    return (ROW_LETTERS.index(parsed[0]), parsed[1], label)


def sort_labels(labels: Iterable[str]) -> List[str]:
    """Order labels the way the seat map renders them: by row, then seat number."""
    return sorted(labels, key=_sort_key)


@dataclass(frozen=True)
class SeatLayout:
    """
    Rectangular seating plan filled row by row.

    100 seats at 10 per row gives rows A-J with seats 1-10. When the total is
    not a multiple of the row width, the last row is shorter.
    """

    total_seats: int
    seats_per_row: int = 10

    def __post_init__(self) -> None:
        if self.total_seats < 1:
            raise ValueError("total_seats must be at least 1")
        if self.seats_per_row < 1:
            raise ValueError("seats_per_row must be at least 1")
        if self.row_count > len(ROW_LETTERS):
            raise ValueError(
                f"Layout needs {self.row_count} rows, only {len(ROW_LETTERS)} row letters exist"
            )

    @property
    def row_count(self) -> int:
        return -(-self.total_seats // self.seats_per_row)

    @property
    def rows(self) -> str:
        return ROW_LETTERS[: self.row_count]

    def seats_in_row(self, row: str) -> int:
        if len(row) != 1 or row not in self.rows:
            return 0
        index = self.rows.index(row)
        return min(self.seats_per_row, self.total_seats - index * self.seats_per_row)

    def contains(self, row: str, number: int) -> bool:
        return 1 <= number <= self.seats_in_row(row)

    def contains_label(self, label: str) -> bool:
        parsed = parse_label(label)
        return parsed is not None and self.contains(*parsed)

    def labels(self) -> List[str]:
        return [
            seat_label(row, number)
            for row in self.rows
            for number in range(1, self.seats_in_row(row) + 1)
        ]
