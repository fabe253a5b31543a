from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .board import LINES, Board, Line, Mark


class Outcome(Enum):
    ONGOING = "ongoing"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class Verdict:
    outcome: Outcome
    mark: Optional[Mark] = None
    line: Optional[Line] = None

    @classmethod
    def ongoing(cls) -> "Verdict":
        return cls(Outcome.ONGOING)

    @classmethod
    def draw(cls) -> "Verdict":
        return cls(Outcome.DRAW)

    @classmethod
    def win(cls, mark: Mark, line: Line) -> "Verdict":
        return cls(Outcome.WIN, mark, line)

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not Outcome.ONGOING

    def won_by(self, mark: Mark) -> bool:
        return self.outcome is Outcome.WIN and self.mark is mark


class Evaluator:
    """Classifies a board as won, drawn or still in play.

    Lines are scanned in ``LINES`` order and the first complete one is the one
    reported, so a board with two complete lines always highlights the same one.
    """

    @classmethod
    def evaluate(cls, board: Board) -> Verdict:
        for a, b, c in LINES:
            mark = board[a]
            if mark is not Mark.EMPTY and mark is board[b] and mark is board[c]:
                return Verdict.win(mark, (a, b, c))
        if board.is_full():
            return Verdict.draw()
        return Verdict.ongoing()
