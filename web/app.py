from __future__ import annotations

import random
import sys
import threading
from collections import OrderedDict
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from flask import Flask, jsonify, request

# Ensure project root is importable when running this file directly
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from arena import AIPlayer, Choice, Mark, Round, RpsRound, StatsStore

DEFAULT_CONFIG: Dict[str, Any] = {
    "BLUNDER_RATE": 0.3,
    "THINKING_DELAY_MS": 400,
    "RANDOM_SEED": None,
    "DEFAULT_PLAYER": "guest",
    "MAX_SESSIONS": 1000,
}


class _Session:
    """The rounds one player has open: one tic-tac-toe, one rock-paper-scissors."""

    def __init__(self, nickname: str, store: StatsStore, rng: random.Random, ai: AIPlayer) -> None:
        def report(game: str, result: str) -> None:
            store.record(nickname, game, result)

        self.ttt = Round(ai=ai, reporter=report)
        self.rps = RpsRound(rng=rng, reporter=report)


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_CONFIG)
    app.config.from_prefixed_env("ARENA")
    if config:
        app.config.from_mapping(config)

    store = StatsStore()
    rng = random.Random(app.config["RANDOM_SEED"])
    # One engine for every session so the transposition table is shared
    ai = AIPlayer(player=Mark.ENGINE, blunder_rate=float(app.config["BLUNDER_RATE"]), rng=rng)
    # nickname -> session, least recently used first
    sessions: "OrderedDict[str, _Session]" = OrderedDict()
    sessions_lock = threading.Lock()

    def payload() -> Dict[str, Any]:
        return request.get_json(silent=True) or {}

    def current_session() -> _Session:
        nickname = payload().get("player") or request.args.get("player") or app.config["DEFAULT_PLAYER"]
        nickname = str(nickname)
        with sessions_lock:
            session = sessions.get(nickname)
            if session is None:
                app.logger.info("New session for %s", nickname)
                session = sessions[nickname] = _Session(nickname, store, rng, ai)
                while len(sessions) > int(app.config["MAX_SESSIONS"]):
                    evicted, _ = sessions.popitem(last=False)
                    app.logger.info("Evicted idle session for %s", evicted)
            else:
                sessions.move_to_end(nickname)
            return session

    def ttt_response(snap: Dict[str, object]):
        snap["thinking_delay_ms"] = int(app.config["THINKING_DELAY_MS"])
        return jsonify(snap)

    @app.get("/api/ttt/state")
    def api_ttt_state():
        return ttt_response(current_session().ttt.snapshot())

    @app.post("/api/ttt/move")
    def api_ttt_move():
        data = payload()
        if "cell" not in data:
            return jsonify({"error": "Missing cell"}), 400
        cell = data["cell"]
        # bool is an int subclass; reject it along with floats and strings
        if isinstance(cell, bool) or not isinstance(cell, int):
            return jsonify({"error": f"Cell must be an integer, got {cell!r}"}), 400
        return ttt_response(current_session().ttt.submit_human_move(cell))

    @app.post("/api/ttt/tick")
    def api_ttt_tick():
        return ttt_response(current_session().ttt.engine_tick())

    @app.post("/api/ttt/reset")
    def api_ttt_reset():
        return ttt_response(current_session().ttt.reset_round())

    @app.post("/api/rps/play")
    def api_rps_play():
        raw = payload().get("choice")
        if raw is None:
            return jsonify({"error": "Missing choice"}), 400
        try:
            choice = Choice.parse(raw)
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400
        return jsonify(current_session().rps.play(choice))

    @app.post("/api/rps/reset")
    def api_rps_reset():
        return jsonify(current_session().rps.reset())

    @app.get("/api/stats/<nickname>")
    def api_stats(nickname: str):
        return jsonify({"nickname": nickname, **store.get(nickname).to_dict()})

    @app.get("/api/leaderboard")
    def api_leaderboard():
        return jsonify([asdict(entry) for entry in store.leaderboard()])

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=True)
