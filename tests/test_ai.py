from __future__ import annotations

import random

import pytest

from arena import AIPlayer, Board, Evaluator, InvariantViolation, Mark, Outcome, SearchResult


class FixedRoll:
    """rng stub: ``random()`` returns a fixed roll, ``choice`` takes the last item."""

    def __init__(self, roll: float) -> None:
        self.roll = roll

    def random(self) -> float:
        return self.roll

    def choice(self, seq):
        return seq[-1]


def test_takes_immediate_win_over_losing_moves(perfect_ai):
    # X threatens 8; O wins at once on 5
    board = Board.from_symbols("  XOO XX ")
    result = perfect_ai.search(board)
    scored = dict(result.scored_moves)
    assert result.best_move == 5
    assert result.score == 10
    assert scored[0] == -10
    assert scored[1] == -10


def test_no_depth_discount_lowest_index_forced_win_is_kept(perfect_ai):
    # Cell 5 wins immediately, but cell 2 makes a double threat on 5 and 6 that
    # also wins by force. Both score +10 and the lower index is kept.
    board = Board.from_symbols("XX OO    ")
    result = perfect_ai.search(board)
    scored = dict(result.scored_moves)
    assert scored[2] == 10
    assert scored[5] == 10
    assert result.best_move == 2


def test_blocks_line_human_would_complete(perfect_ai):
    board = Board.from_symbols("    O XX ")
    result = perfect_ai.search(board)
    assert result.best_move == 8
    assert result.score == 0
    assert all(score == -10 for cell, score in result.scored_moves if cell != 8)


def test_empty_board_is_a_draw_and_first_cell_is_kept(perfect_ai):
    result = perfect_ai.search(Board.empty())
    assert result.score == 0
    assert result.best_move == 0
    assert [cell for cell, _ in result.scored_moves] == list(range(9))


def test_answers_center_with_a_corner(perfect_ai):
    board = Board.empty().place(4, Mark.HUMAN)
    result = perfect_ai.search(board)
    scored = dict(result.scored_moves)
    assert result.best_move == 0
    for corner in (0, 2, 6, 8):
        assert scored[corner] == 0
    for edge in (1, 3, 5, 7):
        assert scored[edge] == -10


def test_search_leaves_input_board_untouched(perfect_ai):
    board = Board.from_symbols("X   O    ")
    before = board.cells
    perfect_ai.search(board)
    perfect_ai.choose_move(board)
    assert board.cells == before


def test_self_play_from_empty_board_is_a_draw():
    players = {
        Mark.HUMAN: AIPlayer(player=Mark.HUMAN, blunder_rate=0.0),
        Mark.ENGINE: AIPlayer(player=Mark.ENGINE, blunder_rate=0.0),
    }
    board = Board.empty()
    mover = Mark.HUMAN
    while not Evaluator.evaluate(board).is_terminal:
        board = board.place(players[mover].choose_move(board), mover)
        mover = mover.opponent()
    assert Evaluator.evaluate(board).outcome is Outcome.DRAW


def test_human_cannot_force_a_win_after_opening_in_center(perfect_ai):
    def human_can_win(board: Board) -> bool:
        for cell in board.empty_cells():
            after_human = board.place(cell, Mark.HUMAN)
            verdict = Evaluator.evaluate(after_human)
            if verdict.won_by(Mark.HUMAN):
                return True
            if verdict.is_terminal:
                continue
            after_engine = after_human.place(perfect_ai.choose_move(after_human), Mark.ENGINE)
            if not Evaluator.evaluate(after_engine).is_terminal and human_can_win(after_engine):
                return True
        return False

    board = Board.empty().place(4, Mark.HUMAN)
    board = board.place(perfect_ai.choose_move(board), Mark.ENGINE)
    assert not human_can_win(board)


def test_random_branch_picks_an_empty_cell():
    ai = AIPlayer(blunder_rate=1.0, rng=random.Random(3))
    board = Board.from_symbols("XOX O X  ")
    for _ in range(20):
        assert ai.choose_move(board) in board.empty_cells()


def test_roll_below_rate_skips_search():
    board = Board.from_symbols("XX OO    ")
    ai = AIPlayer(blunder_rate=0.3, rng=FixedRoll(0.29))
    assert ai.choose_move(board) == 8


def test_roll_at_rate_runs_search():
    board = Board.from_symbols("XX OO    ")
    ai = AIPlayer(blunder_rate=0.3, rng=FixedRoll(0.3))
    assert ai.choose_move(board) == 2


def test_transposition_table_does_not_change_results(perfect_ai):
    board = Board.from_symbols("    O XX ")
    first = perfect_ai.search(board)
    second = perfect_ai.search(board)
    assert first.scored_moves == second.scored_moves
    assert second.nodes <= first.nodes


def test_full_board_is_an_invariant_violation(perfect_ai):
    with pytest.raises(InvariantViolation):
        perfect_ai.choose_move(Board.from_symbols("XOXXOOOXX"))


def test_decided_board_is_an_invariant_violation(perfect_ai):
    with pytest.raises(InvariantViolation):
        perfect_ai.search(Board.from_symbols("XXXOO    "))


@pytest.mark.parametrize("rate", [-0.1, 1.5])
def test_blunder_rate_must_be_a_probability(rate):
    with pytest.raises(ValueError):
        AIPlayer(blunder_rate=rate)


def test_empty_mark_cannot_play():
    with pytest.raises(ValueError):
        AIPlayer(player=Mark.EMPTY)


def test_search_without_a_move_is_an_invariant_violation(perfect_ai, monkeypatch):
    monkeypatch.setattr(perfect_ai, "search", lambda board: SearchResult(best_move=None, score=0, nodes=0))
    with pytest.raises(InvariantViolation):
        perfect_ai.choose_move(Board.empty())
