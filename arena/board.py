from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class InvariantViolation(RuntimeError):
    """Raised when core code is called in a state its guards should exclude."""


class Mark(Enum):
    EMPTY = " "
    HUMAN = "X"
    ENGINE = "O"

    def opponent(self) -> "Mark":
        if self is Mark.HUMAN:
            return Mark.ENGINE
        if self is Mark.ENGINE:
            return Mark.HUMAN
        raise InvariantViolation("EMPTY has no opponent")

    @property
    def symbol(self) -> Optional[str]:
        return None if self is Mark.EMPTY else self.value


Line = Tuple[int, int, int]

# Rows top to bottom, columns left to right, then diagonals
LINES: Tuple[Line, ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)


@dataclass(frozen=True)
class Board:
    """A 3x3 grid stored as 9 cells in row-major order.

    Boards are values: ``place`` returns a new board and leaves the receiver
    untouched, so a search can branch from one position without undo bookkeeping.
    """

    cells: Tuple[Mark, ...] = (Mark.EMPTY,) * 9

    def __post_init__(self) -> None:
        if len(self.cells) != 9:
            raise InvariantViolation(f"Board needs 9 cells, got {len(self.cells)}")

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def from_symbols(cls, symbols: str) -> "Board":
        """Parse a 9-char string such as ``"XX OO    "`` (space or '.' is empty)."""
        if len(symbols) != 9:
            raise ValueError(f"Expected 9 symbols, got {len(symbols)}")
        lookup = {" ": Mark.EMPTY, ".": Mark.EMPTY, "X": Mark.HUMAN, "O": Mark.ENGINE}
        try:
            return cls(tuple(lookup[ch.upper()] for ch in symbols))
        except KeyError as exc:
            raise ValueError(f"Unknown board symbol: {exc.args[0]!r}") from None

    def __getitem__(self, index: int) -> Mark:
        return self.cells[index]

    def place(self, index: int, mark: Mark) -> "Board":
        if mark is Mark.EMPTY:
            raise InvariantViolation("Cannot place an EMPTY mark")
        if not 0 <= index < 9:
            raise InvariantViolation(f"Cell index out of range: {index}")
        if self.cells[index] is not Mark.EMPTY:
            raise InvariantViolation(f"Cell {index} is already occupied")
        cells = list(self.cells)
        cells[index] = mark
        return Board(tuple(cells))

    def is_open(self, index: int) -> bool:
        return 0 <= index < 9 and self.cells[index] is Mark.EMPTY

    def empty_cells(self) -> List[int]:
        return [i for i, c in enumerate(self.cells) if c is Mark.EMPTY]

    def is_full(self) -> bool:
        return all(c is not Mark.EMPTY for c in self.cells)

    def count(self, mark: Mark) -> int:
        return sum(1 for c in self.cells if c is mark)

    def to_symbols(self) -> List[Optional[str]]:
        return [c.symbol for c in self.cells]

    def pretty(self) -> str:
        rows = [" | ".join(c.value for c in self.cells[i:i + 3]) for i in range(0, 9, 3)]
        return "\n---------\n".join(rows)
