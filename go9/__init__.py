"""
9x9 Go - rule engine, territory scoring and computer opponent.

Engine operations live in go9.game and work on immutable GameState values.
"""

__version__ = "0.1.0"

from .ai import Tier
from .board import BLACK, EMPTY, WHITE, Board, create_board
from .game import (
    GameState,
    MoveResult,
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
from .groups import Group, compute_group
from .rules import MoveError, try_move, violates_ko
from .scoring import ScoreResult, score_board

__all__ = [
    "BLACK",
    "WHITE",
    "EMPTY",
    "Board",
    "create_board",
    "Group",
    "compute_group",
    "MoveError",
    "try_move",
    "violates_ko",
    "ScoreResult",
    "score_board",
    "Tier",
    "GameState",
    "MoveResult",
    "Phase",
    "Prisoners",
    "new_game",
    "place",
    "pass_turn",
    "is_ended",
    "score",
    "legal_moves",
    "ai_move",
    "play_ai_turn",
]
