"""
Unit tests for game.py module.

Tests:
- New game defaults
- place(): captures, prisoners, rejection leaves state unchanged
- Ko rejection and its release after an intervening move
- pass_turn(): two passes end and score the game exactly once
- Operations after the game has ended
- AI entry points
"""

import random

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import go9.game as game_module
from go9.ai import Tier
from go9.board import BLACK, EMPTY, WHITE, Board
from go9.game import (
    GameState,
    Phase,
    Prisoners,
    ai_move,
    is_ended,
    legal_moves,
    new_game,
    pass_turn,
    place,
    play_ai_turn,
    score,
)
from go9.groups import compute_group
from go9.rules import MoveError


def board_from(*rows: str) -> Board:
    """Pad the given top rows to a 9x9 board."""
    rows = [row.ljust(9, ".") for row in rows]
    rows += ["." * 9] * (9 - len(rows))
    return Board.from_rows(rows)


@pytest.fixture
def ko_state():
    """Black to move; Black at (2, 1) captures the White stone at (1, 1)."""
    board = board_from(
        ".BW",
        "BW.W",
        ".BW",
    )
    return GameState(board=board, current_color=BLACK)


def end_game(state: GameState) -> GameState:
    return pass_turn(pass_turn(state).state).state


class TestNewGame:
    
    def test_defaults(self):
        state = new_game()
        
        assert state.size == 9
        assert state.komi == 5.5
        assert state.current_color == BLACK
        assert state.pass_count == 0
        assert state.prisoners == Prisoners(0, 0)
        assert state.ko_snapshot is None
        assert state.last_move is None
        assert state.phase == Phase.IN_PROGRESS
        assert not is_ended(state)
    
    def test_custom(self):
        state = new_game(board_size=13, komi=6.5)
        
        assert state.size == 13
        assert state.komi == 6.5
    
    def test_invalid_size(self):
        with pytest.raises(ValueError):
            new_game(board_size=25)


class TestPlace:
    """Tests for place()."""
    
    def test_first_move(self):
        """Black at the centre of an empty board: group with four liberties."""
        result = place(new_game(), 4, 4)
        
        assert result.legal
        assert result.reason is None
        state = result.state
        assert state.board.get(4, 4) == BLACK
        assert compute_group(state.board, 4, 4).liberty_count == 4
        assert state.current_color == WHITE
        assert state.last_move == (4, 4)
        assert state.ko_snapshot == Board.empty().serialize()
        assert state.moves == ((BLACK, (4, 4)),)
    
    def test_corner_capture_updates_prisoners(self):
        """White at (0, 0), Black at (1, 0); Black plays (0, 1) and captures."""
        state = GameState(board=board_from("WB"), current_color=BLACK)
        result = place(state, 0, 1)
        
        assert result.legal
        assert result.captured == ((0, 0),)
        assert result.state.board.get(0, 0) == EMPTY
        assert result.state.prisoners == Prisoners(1, 0)
    
    def test_occupied_leaves_state_unchanged(self):
        state = place(new_game(), 4, 4).state
        result = place(state, 4, 4)
        
        assert not result.legal
        assert result.reason == MoveError.OCCUPIED
        assert result.state is state
    
    def test_invalid_coordinate(self):
        state = new_game()
        result = place(state, 9, 9)
        
        assert result.reason == MoveError.INVALID_COORDINATE
        assert result.state is state
    
    def test_suicide_leaves_state_unchanged(self):
        state = GameState(
            board=board_from(".B", "B"),
            current_color=WHITE,
            prisoners=Prisoners(2, 3),
        )
        board_before = state.board.serialize()
        
        result = place(state, 0, 0)
        
        assert not result.legal
        assert result.reason == MoveError.SUICIDE
        assert result.state is state
        assert state.board.serialize() == board_before
        assert state.prisoners == Prisoners(2, 3)
        assert state.current_color == WHITE
    
    def test_place_resets_pass_count(self):
        state = pass_turn(new_game()).state
        assert state.pass_count == 1
        
        state = place(state, 4, 4).state
        assert state.pass_count == 0
        
        state = pass_turn(state).state
        assert not is_ended(state)
    
    def test_prisoners_accumulate_per_colour(self):
        state = new_game()
        for x, y in [(1, 0), (0, 0), (8, 8)]:
            state = place(state, x, y).state
        assert state.current_color == WHITE
        state = place(state, 7, 8).state
        result = place(state, 0, 1)
        
        assert result.captured == ((0, 0),)
        assert result.state.prisoners == Prisoners(1, 0)


class TestKo:
    """Tests for the one-ply ko rule."""
    
    def test_immediate_recapture_rejected(self, ko_state):
        taken = place(ko_state, 2, 1)
        assert taken.legal
        assert taken.captured == ((1, 1),)
        
        retake = place(taken.state, 1, 1)
        
        assert not retake.legal
        assert retake.reason == MoveError.KO
        assert retake.state is taken.state
    
    def test_recapture_allowed_after_exchange_elsewhere(self, ko_state):
        state = place(ko_state, 2, 1).state
        state = place(state, 7, 7).state   # White elsewhere
        state = place(state, 8, 8).state   # Black elsewhere
        
        retake = place(state, 1, 1)
        
        assert retake.legal
        assert retake.captured == ((2, 1),)
        assert retake.state.prisoners == Prisoners(1, 1)
    
    def test_pass_does_not_clear_ko(self, ko_state):
        """Only the position before the last placement is compared."""
        state = place(ko_state, 2, 1).state
        state = pass_turn(state).state  # White passes
        
        assert state.current_color == BLACK
        assert state.ko_snapshot == ko_state.board.serialize()


class TestPass:
    """Tests for pass_turn()."""
    
    def test_single_pass(self):
        result = pass_turn(new_game())
        
        assert result.legal
        assert result.state.pass_count == 1
        assert result.state.current_color == WHITE
        assert result.state.moves == ((BLACK, None),)
        assert not is_ended(result.state)
    
    def test_two_passes_end_game(self):
        state = end_game(place(new_game(), 4, 4).state)
        
        assert is_ended(state)
        assert state.phase == Phase.ENDED
        assert state.pass_count == 2
        assert state.final_score is not None
        assert state.final_score.black == 81
        assert state.final_score.white == 5.5
    
    def test_scoring_runs_once(self, monkeypatch):
        calls = []
        real_score_board = game_module.score_board
        
        def counting_score_board(board, komi):
            calls.append(board)
            return real_score_board(board, komi)
        
        monkeypatch.setattr(game_module, "score_board", counting_score_board)
        
        state = pass_turn(new_game()).state
        assert calls == []
        state = pass_turn(state).state
        assert len(calls) == 1
        
        score(state)
        pass_turn(state)
        place(state, 0, 0)
        assert len(calls) == 1


class TestAfterEnd:
    """Operations once the game is over."""
    
    def test_place_rejected(self):
        state = end_game(new_game())
        result = place(state, 4, 4)
        
        assert not result.legal
        assert result.reason == MoveError.MOVE_AFTER_GAME_ENDED
        assert result.state is state
    
    def test_pass_rejected(self):
        state = end_game(new_game())
        result = pass_turn(state)
        
        assert result.reason == MoveError.MOVE_AFTER_GAME_ENDED
        assert result.state is state
        assert result.state.pass_count == 2
    
    def test_no_legal_moves_or_ai(self):
        state = end_game(new_game())
        
        assert legal_moves(state) == []
        assert ai_move(state, Tier.EASY, random.Random(0)) is None
        move, result = play_ai_turn(state, Tier.EASY, random.Random(0))
        assert move is None
        assert result.reason == MoveError.MOVE_AFTER_GAME_ENDED


class TestScore:
    
    def test_provisional_score(self):
        state = place(new_game(), 4, 4).state
        result = score(state)
        
        assert result.black == 81
        assert result.white == 5.5
        assert not is_ended(state)
    
    def test_final_score_returned(self):
        state = end_game(new_game())
        assert score(state) is state.final_score


class TestAiEntryPoints:
    
    def test_legal_moves_for_side_to_move(self):
        state = place(new_game(), 4, 4).state
        
        assert len(legal_moves(state)) == 80
        assert len(legal_moves(state, BLACK)) == 80
    
    def test_ai_move_does_not_change_state(self):
        state = new_game()
        move = ai_move(state, Tier.HARD, random.Random(1))
        
        assert move == (4, 4)
        assert state.board == Board.empty()
    
    def test_play_ai_turn(self):
        move, result = play_ai_turn(new_game(), Tier.HARD, random.Random(1))
        
        assert move == (4, 4)
        assert result.legal
        assert result.state.board.get(4, 4) == BLACK
        assert result.state.current_color == WHITE
    
    def test_play_ai_turn_passes_without_moves(self):
        state = GameState(
            board=Board.from_rows(["BBB", "B.B", "BBB"]),
            current_color=BLACK,
        )
        move, result = play_ai_turn(state, Tier.MEDIUM, random.Random(0))
        
        assert move is None
        assert result.legal
        assert result.state.pass_count == 1
        assert result.state.current_color == WHITE
    
    def test_play_ai_turn_skips_ko_retake(self, ko_state):
        """Medium tries the ko retake first, then chooses another point."""
        state = place(ko_state, 2, 1).state
        assert place(state, 1, 1).reason == MoveError.KO
        
        move, result = play_ai_turn(state, Tier.MEDIUM, random.Random(0))
        
        assert move is not None
        assert move != (1, 1)
        assert result.legal
        assert result.state.pass_count == 0
        assert result.state.board.get(*move) == WHITE


class TestPrisoners:
    
    def test_indexing(self):
        prisoners = Prisoners(black=2, white=5)
        
        assert prisoners[BLACK] == 2
        assert prisoners[WHITE] == 5
        with pytest.raises(KeyError):
            prisoners["X"]
    
    def test_add_returns_new_value(self):
        prisoners = Prisoners()
        updated = prisoners.add(WHITE, 3)
        
        assert prisoners == Prisoners(0, 0)
        assert updated == Prisoners(0, 3)
    
    def test_game_state_is_hashable(self):
        state = place(new_game(), 4, 4).state
        
        assert hash(state) == hash(place(new_game(), 4, 4).state)
        assert hash(end_game(state)) is not None


class TestToDict:
    
    def test_to_dict(self):
        state = place(new_game(), 4, 4).state
        d = state.to_dict()
        
        assert d['board_size'] == 9
        assert d['board'][4] == "....B...."
        assert d['current_color'] == WHITE
        assert d['moves'] == ["B E5"]
        assert d['last_move'] == [4, 4]
        assert d['prisoners'] == {BLACK: 0, WHITE: 0}
        assert d['phase'] == "in_progress"
        assert d['score'] is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
