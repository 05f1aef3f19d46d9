"""
Connected-group and liberty analysis.

A group is the maximal set of same-coloured stones joined by orthogonal
adjacency; its liberties are the distinct empty points touching it.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Set

from .board import EMPTY, Board, Point


@dataclass(frozen=True)
class Group:
    """A connected group of stones and its liberties."""
    color: str
    stones: FrozenSet[Point]
    liberties: FrozenSet[Point]
    
    @property
    def liberty_count(self) -> int:
        return len(self.liberties)
    
    @property
    def in_atari(self) -> bool:
        return len(self.liberties) == 1
    
    def __len__(self) -> int:
        return len(self.stones)


def compute_group(board: Board, x: int, y: int) -> Group:
    """
    Find the group containing the stone at (x, y).
    
    Walks the group with an explicit stack, so the walk never recurses and
    each point is expanded at most once.
    
    Args:
        board: Board snapshot to analyse
        x, y: An occupied point
        
    Returns:
        Group with its stones and liberty set
        
    Raises:
        ValueError: If (x, y) is empty
    """
    color = board.get(x, y)
    if color == EMPTY:
        raise ValueError(f"No stone at ({x}, {y})")
    
    stones: Set[Point] = set()
    liberties: Set[Point] = set()
    stack = [(x, y)]
    
    while stack:
        point = stack.pop()
        if point in stones:
            continue
        stones.add(point)
        
        for nx, ny in board.neighbors(*point):
            value = board.grid[ny][nx]
            if value == EMPTY:
                liberties.add((nx, ny))
            elif value == color and (nx, ny) not in stones:
                stack.append((nx, ny))
    
    return Group(color=color, stones=frozenset(stones), liberties=frozenset(liberties))


def all_groups(board: Board) -> List[Group]:
    """Return every group on the board once, ordered by its first stone in scan order."""
    groups = []
    seen: Set[Point] = set()
    for x, y in board.points():
        if (x, y) in seen or board.grid[y][x] == EMPTY:
            continue
        group = compute_group(board, x, y)
        seen.update(group.stones)
        groups.append(group)
    return groups


def atari_groups(board: Board, color: Optional[str] = None) -> List[Group]:
    """
    Return the groups that have exactly one liberty left.
    
    Args:
        board: Board snapshot
        color: Restrict to one colour (None for both)
    """
    return [
        group for group in all_groups(board)
        if group.in_atari and (color is None or group.color == color)
    ]
