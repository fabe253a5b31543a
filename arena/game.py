from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from .ai import AIPlayer
from .board import Board, InvariantViolation, Mark
from .evaluator import Evaluator, Outcome, Verdict

logger = logging.getLogger(__name__)

# reporter(game, result) with result in {"win", "loss", "draw"}
Reporter = Callable[[str, str], None]

GAME_ID = "ttt"


class TurnState(Enum):
    AWAITING_HUMAN = "awaiting_human"
    ENGINE_THINKING = "engine_thinking"
    TERMINAL = "terminal"


@dataclass
class Score:
    wins: int = 0
    losses: int = 0
    draws: int = 0

    def add(self, result: str) -> None:
        if result == "win":
            self.wins += 1
        elif result == "loss":
            self.losses += 1
        elif result == "draw":
            self.draws += 1
        else:
            raise ValueError(f"Unknown result: {result}")


class Round:
    """One human-vs-engine tic-tac-toe round plus the session score.

    The round is driven by two inputs: ``submit_human_move`` from the player
    and ``engine_tick`` from whoever schedules the engine's visible
    "thinking" pause. Neither blocks. Moves that are illegal for the current
    state are ignored and the unchanged snapshot is returned.

    Every transition runs under one lock, so a host serving requests from
    several threads cannot slip two moves past the same turn guard.
    """

    def __init__(self, ai: Optional[AIPlayer] = None, reporter: Optional[Reporter] = None) -> None:
        self.ai = ai if ai is not None else AIPlayer(player=Mark.ENGINE)
        if self.ai.player is not Mark.ENGINE:
            raise InvariantViolation("Round engine must play the ENGINE mark")
        self.reporter = reporter
        self.score = Score()
        self.board = Board.empty()
        self.verdict = Verdict.ongoing()
        self.state = TurnState.AWAITING_HUMAN
        self.result: Optional[str] = None
        self.last_move: Optional[int] = None
        self._lock = threading.RLock()

    def reset_round(self) -> Dict[str, object]:
        with self._lock:
            self.board = Board.empty()
            self.verdict = Verdict.ongoing()
            self.state = TurnState.AWAITING_HUMAN
            self.result = None
            self.last_move = None
            return self.snapshot()

    def submit_human_move(self, cell: int) -> Dict[str, object]:
        with self._lock:
            if self.state is not TurnState.AWAITING_HUMAN:
                logger.debug("Refused move %s in state %s", cell, self.state.value)
                return self.snapshot()
            if not self.board.is_open(cell):
                logger.debug("Refused move %s: cell not open", cell)
                return self.snapshot()

            self._place(cell, Mark.HUMAN)
            if self.verdict.won_by(Mark.HUMAN):
                self._finish("win")
            elif self.verdict.outcome is Outcome.DRAW:
                self._finish("draw")
            else:
                self.state = TurnState.ENGINE_THINKING
            return self.snapshot()

    def engine_tick(self) -> Dict[str, object]:
        """Play the engine's move if one is pending."""
        with self._lock:
            if self.state is not TurnState.ENGINE_THINKING:
                return self.snapshot()

            cell = self.ai.choose_move(self.board)
            self._place(cell, Mark.ENGINE)
            if self.verdict.won_by(Mark.ENGINE):
                self._finish("loss")
            elif self.verdict.outcome is Outcome.DRAW:
                self._finish("draw")
            else:
                self.state = TurnState.AWAITING_HUMAN
            return self.snapshot()

    def _place(self, cell: int, mark: Mark) -> None:
        self.board = self.board.place(cell, mark)
        self.last_move = cell
        self.verdict = Evaluator.evaluate(self.board)

    def _finish(self, result: str) -> None:
        self.state = TurnState.TERMINAL
        self.result = result
        self.score.add(result)
        logger.info("Round finished: %s (score %s)", result, asdict(self.score))
        logger.debug("Final board:\n%s", self.board.pretty())
        if self.reporter is None:
            return
        try:
            self.reporter(GAME_ID, result)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to report %s result %r", GAME_ID, result)

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            winner = self.verdict.mark.symbol if self.verdict.mark is not None else None
            return {
                "board": self.board.to_symbols(),
                "state": self.state.value,
                "verdict": self.verdict.outcome.value,
                "winner": winner,
                "winning_line": list(self.verdict.line) if self.verdict.line else None,
                "result": self.result,
                "score": asdict(self.score),
                "last_move": self.last_move,
            }
