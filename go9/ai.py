"""
Heuristic computer opponent.

Three tiers, all built on the same legality check as human moves:
- easy: uniform random legal move
- medium: first capture, else a random centre move, else random
- hard: one-ply evaluation (captures, centrality, own liberties) with
  random jitter to break ties
"""

import random
from enum import Enum
from typing import Iterable, List, Optional

from .board import EMPTY, Board, Point
from .groups import compute_group
from .rules import try_move

CAPTURE_WEIGHT = 12
JITTER = 0.5

# Adjustment by the liberty count of the mover's group after the move
ATARI_PENALTY = -20
TWO_LIBERTY_PENALTY = -2
SAFE_BONUS = 3


class Tier(str, Enum):
    """AI difficulty levels."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value) -> 'Tier':
        """Accept a Tier or its name ("easy", "Medium", ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Tier must be one of {[t.value for t in cls]}, got {value!r}"
            )


def legal_moves(board: Board, color: str) -> List[Point]:
    """
    List every point where `color` may play, in scan order.

    A point qualifies when the placed group keeps a liberty or the move
    captures. Ko is not considered here; it is checked when the chosen move
    is played through the game controller.
    """
    return [
        (x, y) for x, y in board.points()
        if board.grid[y][x] == EMPTY and try_move(board, x, y, color).legal
    ]


def center_distance(board: Board, x: int, y: int) -> int:
    """Manhattan distance from (x, y) to the centre point."""
    center = board.size // 2
    return abs(x - center) + abs(y - center)


def is_central(board: Board, x: int, y: int) -> bool:
    """True inside the 3x3 block around the centre point."""
    center = board.size // 2
    return abs(x - center) <= 1 and abs(y - center) <= 1


def liberty_adjustment(liberty_count: int) -> int:
    if liberty_count == 1:
        return ATARI_PENALTY
    if liberty_count == 2:
        return TWO_LIBERTY_PENALTY
    if liberty_count >= 3:
        return SAFE_BONUS
    return 0


def evaluate_move(board: Board, x: int, y: int, color: str) -> Optional[float]:
    """
    Score a candidate move for the hard tier, without jitter.

    score = 12 * captured stones + (max distance - distance to centre)
            + liberty adjustment of the resulting own group

    Returns:
        The score, or None if the move is illegal
    """
    attempt = try_move(board, x, y, color)
    if not attempt.legal:
        return None

    max_distance = 2 * (board.size // 2)
    own = compute_group(attempt.board, x, y)

    return (
        CAPTURE_WEIGHT * attempt.capture_count
        + (max_distance - center_distance(board, x, y))
        + liberty_adjustment(own.liberty_count)
    )


def _easy_move(board: Board, color: str, moves: List[Point], rng: random.Random) -> Point:
    return rng.choice(moves)


def _medium_move(board: Board, color: str, moves: List[Point], rng: random.Random) -> Point:
    for x, y in moves:
        if try_move(board, x, y, color).capture_count > 0:
            return (x, y)

    central = [(x, y) for x, y in moves if is_central(board, x, y)]
    if central:
        return rng.choice(central)
    return rng.choice(moves)


def _hard_move(board: Board, color: str, moves: List[Point], rng: random.Random) -> Point:
    best_move = moves[0]
    best_score = float("-inf")

    for x, y in moves:
        score = evaluate_move(board, x, y, color) + rng.random() * JITTER
        if score > best_score:
            best_score = score
            best_move = (x, y)

    return best_move


_STRATEGIES = {
    Tier.EASY: _easy_move,
    Tier.MEDIUM: _medium_move,
    Tier.HARD: _hard_move,
}


def choose_move(
    board: Board,
    color: str,
    tier=Tier.HARD,
    rng: Optional[random.Random] = None,
    exclude: Iterable[Point] = (),
) -> Optional[Point]:
    """
    Pick a move for `color` at the given difficulty.

    Args:
        board: Current position
        color: Colour to move
        tier: Tier or tier name
        rng: Random source; pass a seeded random.Random for reproducible play
        exclude: Points not to consider, e.g. a move already rejected as ko

    Returns:
        (x, y), or None when there is no legal move
    """
    strategy = _STRATEGIES[Tier.parse(tier)]
    excluded = set(exclude)
    moves = [move for move in legal_moves(board, color) if move not in excluded]
    if not moves:
        return None
    return strategy(board, color, moves, rng if rng is not None else random.Random())
