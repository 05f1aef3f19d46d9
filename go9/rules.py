"""
Move legality: capture resolution, suicide and ko.

Every check runs against a new board value; the board passed in is never
modified, so a rejected move leaves no trace.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Set, Tuple

from .board import EMPTY, Board, Point, opponent
from .groups import compute_group


class MoveError(str, Enum):
    """Reasons a move or pass is rejected."""
    INVALID_COORDINATE = "InvalidCoordinate"
    OCCUPIED = "Occupied"
    SUICIDE = "Suicide"
    KO = "Ko"
    MOVE_AFTER_GAME_ENDED = "MoveAfterGameEnded"


@dataclass(frozen=True)
class MoveAttempt:
    """Outcome of trying a single placement on a board."""
    legal: bool
    reason: Optional[MoveError] = None
    board: Optional[Board] = None
    captured: Tuple[Point, ...] = ()
    
    @property
    def capture_count(self) -> int:
        return len(self.captured)


def find_captures(board: Board, x: int, y: int, color: str) -> List[Point]:
    """
    List the opposing stones left without liberties next to (x, y).
    
    `board` must already hold the stone just placed at (x, y). Stones are
    reported once each, in the order their groups are discovered.
    """
    captured: List[Point] = []
    seen: Set[Point] = set()
    enemy = opponent(color)
    
    for nx, ny in board.neighbors(x, y):
        if board.grid[ny][nx] != enemy or (nx, ny) in seen:
            continue
        group = compute_group(board, nx, ny)
        seen.update(group.stones)
        if group.liberty_count == 0:
            captured.extend(sorted(group.stones, key=lambda p: (p[1], p[0])))
    
    return captured


def try_move(board: Board, x: int, y: int, color: str) -> MoveAttempt:
    """
    Try placing `color` at (x, y).
    
    Steps:
    1. Reject off-board points and occupied points
    2. Place the stone on a new board
    3. Remove every adjacent opposing group that has no liberties left
    4. Reject as suicide if the mover's group has no liberties and
       nothing was captured
    
    Returns:
        MoveAttempt with the resulting board and captured points when legal
    """
    if not board.in_bounds(x, y):
        return MoveAttempt(legal=False, reason=MoveError.INVALID_COORDINATE)
    
    if board.grid[y][x] != EMPTY:
        return MoveAttempt(legal=False, reason=MoveError.OCCUPIED)
    
    scratch = board.with_stone(x, y, color)
    captured = find_captures(scratch, x, y, color)
    if captured:
        scratch = scratch.without_stones(captured)
    
    own = compute_group(scratch, x, y)
    if own.liberty_count == 0 and not captured:
        return MoveAttempt(legal=False, reason=MoveError.SUICIDE)
    
    return MoveAttempt(legal=True, board=scratch, captured=tuple(captured))


def violates_ko(resulting_board: Board, previous_snapshot: Optional[str]) -> bool:
    """
    Check whether a move would recreate the position before the last move.
    
    Only the single previous position is compared, so longer repetition
    cycles are not detected.
    """
    if previous_snapshot is None:
        return False
    return resulting_board.serialize() == previous_snapshot
