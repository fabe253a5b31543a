from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .board import Board, InvariantViolation, Mark
from .evaluator import Evaluator, Outcome

logger = logging.getLogger(__name__)

WIN_SCORE = 10
LOSS_SCORE = -10
DRAW_SCORE = 0

DEFAULT_BLUNDER_RATE = 0.3


@dataclass
class SearchResult:
    best_move: Optional[int]
    score: int
    nodes: int
    scored_moves: Optional[List[Tuple[int, int]]] = None


class AIPlayer:
    """Exhaustive minimax for 3x3 tic-tac-toe with a random-move throttle.

    Scores are +10 for a won leaf, -10 for a lost leaf and 0 for a draw, with
    no depth discount: a win in one move and a win in five score the same, so
    the engine does not hurry its wins or stall its losses. Root moves are
    scanned in index order and the first strictly best one is kept.

    ``blunder_rate`` is the chance per call that ``choose_move`` skips the
    search and plays a uniformly random empty cell instead. Pass a seeded
    ``random.Random`` (or any object with ``random()`` and ``choice()``) as
    ``rng`` to make that roll reproducible.
    """

    def __init__(
        self,
        player: Mark = Mark.ENGINE,
        blunder_rate: float = DEFAULT_BLUNDER_RATE,
        rng: Optional[random.Random] = None,
    ) -> None:
        if player is Mark.EMPTY:
            raise ValueError("AIPlayer needs HUMAN or ENGINE as its mark")
        if not 0.0 <= blunder_rate <= 1.0:
            raise ValueError(f"blunder_rate must be within [0, 1], got {blunder_rate}")
        self.player = player
        self.opponent = player.opponent()
        self.blunder_rate = blunder_rate
        self.rng = rng if rng is not None else random.Random()
        # key: (cells, maximizing) -> exact score for self.player
        self.transposition_table: Dict[Tuple[Tuple[Mark, ...], bool], int] = {}

    def choose_move(self, board: Board) -> int:
        """Return the cell to play: a random empty cell or the search result."""
        self._check_playable(board)
        if self.rng.random() < self.blunder_rate:
            move = self.rng.choice(board.empty_cells())
            logger.debug("%s throttled: random move %d", self.player.value, move)
            return move
        result = self.search(board)
        if result.best_move is None:
            raise InvariantViolation("Search found no move on an open board")
        return result.best_move

    def search(self, board: Board) -> SearchResult:
        self._check_playable(board)
        best_score = LOSS_SCORE - 1
        best_move: Optional[int] = None
        nodes = 0
        scored_moves: List[Tuple[int, int]] = []

        for cell in board.empty_cells():
            score, sub_nodes = self._minimax(board.place(cell, self.player), maximizing=False)
            nodes += sub_nodes + 1
            scored_moves.append((cell, score))
            if score > best_score:
                best_score = score
                best_move = cell

        logger.debug(
            "%s search: move=%s score=%d nodes=%d",
            self.player.value, best_move, best_score, nodes,
        )
        return SearchResult(best_move=best_move, score=best_score, nodes=nodes, scored_moves=scored_moves)

    def _minimax(self, board: Board, maximizing: bool) -> Tuple[int, int]:
        key = (board.cells, maximizing)
        if key in self.transposition_table:
            return self.transposition_table[key], 0

        verdict = Evaluator.evaluate(board)
        if verdict.won_by(self.player):
            return WIN_SCORE, 1
        if verdict.won_by(self.opponent):
            return LOSS_SCORE, 1
        if verdict.outcome is Outcome.DRAW:
            return DRAW_SCORE, 1

        nodes = 0
        mover = self.player if maximizing else self.opponent
        values = []
        for cell in board.empty_cells():
            score, child_nodes = self._minimax(board.place(cell, mover), not maximizing)
            nodes += child_nodes + 1
            values.append(score)
        value = max(values) if maximizing else min(values)
        self.transposition_table[key] = value
        return value, nodes

    @staticmethod
    def _check_playable(board: Board) -> None:
        if board.is_full():
            raise InvariantViolation("No empty cell to search on a full board")
        verdict = Evaluator.evaluate(board)
        if verdict.is_terminal:
            raise InvariantViolation(f"Board is already decided: {verdict.outcome.value}")
