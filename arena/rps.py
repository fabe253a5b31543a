from __future__ import annotations

import logging
import random
import threading
from dataclasses import asdict
from enum import Enum
from typing import Dict, Optional

from .game import Reporter, Score

logger = logging.getLogger(__name__)

GAME_ID = "rps"


class Choice(Enum):
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"

    @property
    def beats(self) -> "Choice":
        return _BEATS[self]

    @classmethod
    def parse(cls, value: str) -> "Choice":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown choice: {value!r}") from None


_BEATS = {
    Choice.ROCK: Choice.SCISSORS,
    Choice.SCISSORS: Choice.PAPER,
    Choice.PAPER: Choice.ROCK,
}


def judge(player: Choice, computer: Choice) -> str:
    if player is computer:
        return "draw"
    return "win" if player.beats is computer else "loss"


class RpsRound:
    """Rock-paper-scissors against a uniformly random computer."""

    def __init__(self, rng: Optional[random.Random] = None, reporter: Optional[Reporter] = None) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.reporter = reporter
        self.score = Score()
        self.rounds_played = 0
        self.player_choice: Optional[Choice] = None
        self.computer_choice: Optional[Choice] = None
        self.result: Optional[str] = None
        self._lock = threading.RLock()

    def play(self, choice: Choice) -> Dict[str, object]:
        with self._lock:
            computer = self.rng.choice(list(Choice))
            result = judge(choice, computer)
            self.player_choice = choice
            self.computer_choice = computer
            self.result = result
            self.rounds_played += 1
            self.score.add(result)
            logger.info("RPS %s vs %s: %s", choice.value, computer.value, result)
            if self.reporter is not None:
                try:
                    self.reporter(GAME_ID, result)
                except Exception:  # noqa: BLE001
                    logger.exception("Failed to report %s result %r", GAME_ID, result)
            return self.snapshot()

    def reset(self) -> Dict[str, object]:
        with self._lock:
            self.player_choice = None
            self.computer_choice = None
            self.result = None
            return self.snapshot()

    def snapshot(self) -> Dict[str, object]:
        return {
            "player_choice": self.player_choice.value if self.player_choice else None,
            "computer_choice": self.computer_choice.value if self.computer_choice else None,
            "result": self.result,
            "round": self.rounds_played + 1,
            "score": asdict(self.score),
        }
