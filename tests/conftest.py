from __future__ import annotations

from typing import List, Tuple

import pytest

from arena import AIPlayer, Mark, Round
from web import create_app


class ScriptedAI:
    """Stands in for AIPlayer and plays a fixed list of cells."""

    player = Mark.ENGINE

    def __init__(self, moves: List[int]) -> None:
        self.moves = list(moves)

    def choose_move(self, board) -> int:
        return self.moves.pop(0)


@pytest.fixture
def perfect_ai() -> AIPlayer:
    return AIPlayer(player=Mark.ENGINE, blunder_rate=0.0)


@pytest.fixture
def reports() -> List[Tuple[str, str]]:
    return []


@pytest.fixture
def ttt_round(perfect_ai, reports) -> Round:
    return Round(ai=perfect_ai, reporter=lambda game, result: reports.append((game, result)))


@pytest.fixture
def scripted_ai():
    return ScriptedAI


@pytest.fixture
def scripted_round(reports):
    def build(engine_moves: List[int]) -> Round:
        return Round(ai=ScriptedAI(engine_moves), reporter=lambda game, result: reports.append((game, result)))

    return build


@pytest.fixture
def client():
    app = create_app({"TESTING": True, "BLUNDER_RATE": 0.0, "RANDOM_SEED": 7})
    return app.test_client()
