"""
Game controller - turn, pass and end-of-game state machine.

GameState is an immutable value. Every operation takes a state and returns
a MoveResult carrying the next state; a rejected request returns the very
same state object, so nothing is ever partially applied.

Usage:
    state = new_game()
    result = place(state, 4, 4)
    if result.legal:
        state = result.state
    else:
        print(result.reason.value)

    state = pass_turn(pass_turn(state).state).state
    assert is_ended(state)
    print(score(state).to_dict())
"""

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from . import ai
from .board import BLACK, DEFAULT_BOARD_SIZE, WHITE, Board, Point, coords_to_gtp, opponent
from .rules import MoveError, try_move, violates_ko
from .scoring import DEFAULT_KOMI, ScoreResult, score_board


class Phase(str, Enum):
    IN_PROGRESS = "in_progress"
    ENDED = "ended"


@dataclass(frozen=True)
class Prisoners:
    """Opponent stones captured by each colour; indexable by 'B' or 'W'."""
    black: int = 0
    white: int = 0

    def __getitem__(self, color: str) -> int:
        if color == BLACK:
            return self.black
        if color == WHITE:
            return self.white
        raise KeyError(color)

    def add(self, color: str, count: int) -> 'Prisoners':
        if color == BLACK:
            return replace(self, black=self.black + count)
        return replace(self, white=self.white + count)

    def to_dict(self) -> Dict[str, int]:
        return {BLACK: self.black, WHITE: self.white}


@dataclass(frozen=True)
class GameState:
    """
    Complete state of one game.

    Attributes:
        board: Current position
        current_color: Colour to move ('B' or 'W')
        pass_count: Consecutive passes so far
        prisoners: Opponent stones captured by each colour
        ko_snapshot: Serialized board from before the last placement
        last_move: Point of the last placement, None after a pass or at start
        phase: IN_PROGRESS or ENDED
        komi: Compensation for White, fixed at creation
        moves: Move record as (color, point or None for a pass)
        final_score: Set once, when the game ends
    """
    board: Board
    current_color: str = BLACK
    pass_count: int = 0
    prisoners: Prisoners = Prisoners()
    ko_snapshot: Optional[str] = None
    last_move: Optional[Point] = None
    phase: Phase = Phase.IN_PROGRESS
    komi: float = DEFAULT_KOMI
    moves: Tuple[Tuple[str, Optional[Point]], ...] = ()
    final_score: Optional[ScoreResult] = None

    @property
    def size(self) -> int:
        return self.board.size

    @property
    def move_number(self) -> int:
        return len(self.moves)

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'board_size': self.board.size,
            'board': self.board.to_rows(),
            'current_color': self.current_color,
            'pass_count': self.pass_count,
            'prisoners': self.prisoners.to_dict(),
            'last_move': list(self.last_move) if self.last_move else None,
            'phase': self.phase.value,
            'komi': self.komi,
            'moves': [
                f"{color} {coords_to_gtp(*point, self.board.size) if point else 'PASS'}"
                for color, point in self.moves
            ],
            'score': self.final_score.to_dict() if self.final_score else None,
        }

    def __repr__(self) -> str:
        return (
            f"GameState(size={self.board.size}, "
            f"moves={len(self.moves)}, "
            f"next={self.current_color}, "
            f"passes={self.pass_count}, "
            f"phase={self.phase.value})"
        )


@dataclass(frozen=True)
class MoveResult:
    """Outcome of place() or pass_turn()."""
    legal: bool
    state: GameState
    reason: Optional[MoveError] = None
    captured: Tuple[Point, ...] = ()


def new_game(board_size: int = DEFAULT_BOARD_SIZE, komi: float = DEFAULT_KOMI) -> GameState:
    """
    Start a new game on an empty board with Black to move.

    Args:
        board_size: Size of the board (default 9)
        komi: Compensation added to White's score
    """
    return GameState(board=Board.empty(board_size), komi=komi)


def is_ended(state: GameState) -> bool:
    return state.phase == Phase.ENDED


def place(state: GameState, x: int, y: int) -> MoveResult:
    """
    Play a stone for the side to move at (x, y).

    Checks, in order: game over, bounds, occupancy, captures/suicide, ko.
    On success the captured stones are credited to the mover, the pass
    counter resets and the turn passes to the opponent.

    Returns:
        MoveResult; on rejection `state` is the unchanged input state
    """
    if is_ended(state):
        return MoveResult(legal=False, state=state, reason=MoveError.MOVE_AFTER_GAME_ENDED)

    color = state.current_color
    attempt = try_move(state.board, x, y, color)
    if not attempt.legal:
        return MoveResult(legal=False, state=state, reason=attempt.reason)

    if violates_ko(attempt.board, state.ko_snapshot):
        return MoveResult(legal=False, state=state, reason=MoveError.KO)

    next_state = replace(
        state,
        board=attempt.board,
        current_color=opponent(color),
        pass_count=0,
        prisoners=state.prisoners.add(color, attempt.capture_count),
        ko_snapshot=state.board.serialize(),
        last_move=(x, y),
        moves=state.moves + ((color, (x, y)),),
    )
    return MoveResult(legal=True, state=next_state, captured=attempt.captured)


def pass_turn(state: GameState) -> MoveResult:
    """
    Pass for the side to move.

    The second consecutive pass ends the game and scores it.
    """
    if is_ended(state):
        return MoveResult(legal=False, state=state, reason=MoveError.MOVE_AFTER_GAME_ENDED)

    pass_count = state.pass_count + 1
    next_state = replace(
        state,
        current_color=opponent(state.current_color),
        pass_count=pass_count,
        last_move=None,
        moves=state.moves + ((state.current_color, None),),
    )

    if pass_count >= 2:
        next_state = replace(
            next_state,
            phase=Phase.ENDED,
            final_score=score_board(next_state.board, next_state.komi),
        )

    return MoveResult(legal=True, state=next_state)


def score(state: GameState) -> ScoreResult:
    """
    Return the score of the game.

    For an ended game this is the result computed when it ended; otherwise
    the current position is scored as it stands.
    """
    if state.final_score is not None:
        return state.final_score
    return score_board(state.board, state.komi)


def legal_moves(state: GameState, color: Optional[str] = None) -> List[Point]:
    """
    List legal placements for `color` (default: side to move).

    Ko is not applied, matching the AI's candidate list.
    """
    if is_ended(state):
        return []
    return ai.legal_moves(state.board, color or state.current_color)


def ai_move(
    state: GameState,
    tier=ai.Tier.HARD,
    rng: Optional[random.Random] = None,
    exclude: Iterable[Point] = (),
) -> Optional[Point]:
    """
    Choose the computer's move for the side to move, skipping `exclude`.

    Returns:
        (x, y), or None if there is no legal move or the game has ended
    """
    if is_ended(state):
        return None
    return ai.choose_move(state.board, state.current_color, tier, rng, exclude)


def play_ai_turn(
    state: GameState,
    tier=ai.Tier.HARD,
    rng: Optional[random.Random] = None,
) -> Tuple[Optional[Point], MoveResult]:
    """
    Let the computer play one turn.

    The chosen move goes through place(). A choice rejected as ko is set
    aside and the computer chooses again; it passes when nothing is left.

    Returns:
        (chosen point or None for a pass, MoveResult)
    """
    if is_ended(state):
        return None, MoveResult(legal=False, state=state, reason=MoveError.MOVE_AFTER_GAME_ENDED)

    rejected = set()
    while True:
        move = ai_move(state, tier, rng, rejected)
        if move is None:
            return None, pass_turn(state)
        result = place(state, *move)
        if result.legal:
            return move, result
        rejected.add(move)
