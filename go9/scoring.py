"""
End-of-game territory scoring.

Score = stones on the board + empty regions bordered by a single colour,
with komi added to White.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple

from .board import BLACK, EMPTY, WHITE, Board, Point

DEFAULT_KOMI = 5.5

TerritoryMap = Tuple[Tuple[Optional[str], ...], ...]


@dataclass(frozen=True)
class ScoreResult:
    """Final tally for both colours."""
    black: float
    white: float
    territory_map: TerritoryMap
    black_stones: int = 0
    white_stones: int = 0
    black_territory: int = 0
    white_territory: int = 0
    komi: float = DEFAULT_KOMI
    
    @property
    def winner(self) -> Optional[str]:
        """'B' or 'W' for a strictly higher total, None for a tie."""
        if self.black > self.white:
            return BLACK
        if self.white > self.black:
            return WHITE
        return None
    
    @property
    def margin(self) -> float:
        return abs(self.black - self.white)
    
    def result_string(self) -> str:
        """SGF-style result, e.g. "B+3.5", "W+0.5" or "0" for a tie."""
        if self.winner is None:
            return "0"
        return f"{self.winner}+{self.margin:g}"
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'black': self.black,
            'white': self.white,
            'winner': self.winner,
            'result': self.result_string(),
            'komi': self.komi,
            'black_stones': self.black_stones,
            'white_stones': self.white_stones,
            'black_territory': self.black_territory,
            'white_territory': self.white_territory,
            'territory_map': [list(row) for row in self.territory_map],
        }


def flood_region(board: Board, x: int, y: int) -> Tuple[Set[Point], Set[str]]:
    """
    Flood-fill the empty region containing (x, y).
    
    Returns:
        (region points, set of stone colours bordering the region)
    """
    region: Set[Point] = set()
    borders: Set[str] = set()
    stack = [(x, y)]
    
    while stack:
        point = stack.pop()
        if point in region:
            continue
        region.add(point)
        for nx, ny in board.neighbors(*point):
            value = board.grid[ny][nx]
            if value == EMPTY:
                if (nx, ny) not in region:
                    stack.append((nx, ny))
            else:
                borders.add(value)
    
    return region, borders


def score_board(board: Board, komi: float = DEFAULT_KOMI) -> ScoreResult:
    """
    Score a finished position.
    
    1. Count the stones of each colour
    2. Flood-fill every empty region; a region bordered only by one colour
       is that colour's territory, anything else is dame
    3. Add komi to White
    
    Args:
        board: Final board position
        komi: Compensation added to White's total
        
    Returns:
        ScoreResult with totals and the territory map
    """
    owners: List[List[Optional[str]]] = [[None] * board.size for _ in range(board.size)]
    territory = {BLACK: 0, WHITE: 0}
    visited: Set[Point] = set()
    
    for x, y in board.points():
        if board.grid[y][x] != EMPTY or (x, y) in visited:
            continue
        region, borders = flood_region(board, x, y)
        visited.update(region)
        if len(borders) != 1:
            continue
        owner = next(iter(borders))
        territory[owner] += len(region)
        for rx, ry in region:
            owners[ry][rx] = owner
    
    black_stones = board.count(BLACK)
    white_stones = board.count(WHITE)
    
    return ScoreResult(
        black=black_stones + territory[BLACK],
        white=white_stones + territory[WHITE] + komi,
        territory_map=tuple(tuple(row) for row in owners),
        black_stones=black_stones,
        white_stones=white_stones,
        black_territory=territory[BLACK],
        white_territory=territory[WHITE],
        komi=komi,
    )
