from __future__ import annotations

import threading
from dataclasses import asdict, dataclass
from typing import Dict, List

GAMES = ("rps", "ttt")
RESULTS = ("win", "loss", "draw")
_RESULT_SUFFIX = {"win": "wins", "loss": "losses", "draw": "draws"}


@dataclass
class PlayerStats:
    rps_wins: int = 0
    rps_losses: int = 0
    rps_draws: int = 0
    ttt_wins: int = 0
    ttt_losses: int = 0
    ttt_draws: int = 0

    @property
    def total_wins(self) -> int:
        return self.rps_wins + self.ttt_wins

    @property
    def total_games(self) -> int:
        return sum(asdict(self).values())

    @property
    def win_rate(self) -> int:
        """Share of games won as a rounded integer percentage."""
        if self.total_games == 0:
            return 0
        return int(round(100 * self.total_wins / self.total_games))

    def to_dict(self) -> Dict[str, int]:
        data = asdict(self)
        data.update(total_wins=self.total_wins, total_games=self.total_games, win_rate=self.win_rate)
        return data


@dataclass
class LeaderboardEntry:
    rank: int
    nickname: str
    total_wins: int
    total_games: int
    win_rate: int


class StatsStore:
    """In-memory per-player counters, keyed by nickname in first-seen order."""

    def __init__(self) -> None:
        self._records: Dict[str, PlayerStats] = {}
        self._lock = threading.Lock()

    def register(self, nickname: str) -> PlayerStats:
        with self._lock:
            return self._records.setdefault(nickname, PlayerStats())

    def get(self, nickname: str) -> PlayerStats:
        """Stats for ``nickname``; unknown players read as all zeros."""
        return self._records.get(nickname, PlayerStats())

    def record(self, nickname: str, game: str, result: str) -> None:
        if game not in GAMES:
            raise ValueError(f"Unknown game: {game}")
        if result not in RESULTS:
            raise ValueError(f"Unknown result: {result}")
        field_name = f"{game}_{_RESULT_SUFFIX[result]}"
        with self._lock:
            stats = self._records.setdefault(nickname, PlayerStats())
            setattr(stats, field_name, getattr(stats, field_name) + 1)

    def leaderboard(self) -> List[LeaderboardEntry]:
        # sorted() is stable, so ties keep first-seen order
        with self._lock:
            records = list(self._records.items())
        ranked = sorted(records, key=lambda item: item[1].total_wins, reverse=True)
        return [
            LeaderboardEntry(
                rank=i,
                nickname=nickname,
                total_wins=stats.total_wins,
                total_games=stats.total_games,
                win_rate=stats.win_rate,
            )
            for i, (nickname, stats) in enumerate(ranked, start=1)
        ]
