"""Game arena core: tic-tac-toe against a minimax engine, plus rock-paper-scissors.

Modules:
- board: Board value, marks and the fixed winning lines
- evaluator: Win/draw/ongoing classification of a board
- ai: Minimax search with a random-move difficulty throttle
- game: Tic-tac-toe round state machine and session score
- rps: Rock-paper-scissors round
- stats: In-memory per-player stats and leaderboard
"""

from .board import Board, InvariantViolation, Mark, LINES
from .evaluator import Evaluator, Outcome, Verdict
from .ai import AIPlayer, SearchResult
from .game import Round, Score, TurnState
from .rps import Choice, RpsRound, judge
from .stats import StatsStore, PlayerStats, LeaderboardEntry

__all__ = [
    "Board",
    "InvariantViolation",
    "Mark",
    "LINES",
    "Evaluator",
    "Outcome",
    "Verdict",
    "AIPlayer",
    "SearchResult",
    "Round",
    "Score",
    "TurnState",
    "Choice",
    "RpsRound",
    "judge",
    "StatsStore",
    "PlayerStats",
    "LeaderboardEntry",
]
