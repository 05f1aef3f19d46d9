"""
Board representation for the 9x9 Go engine.

Provides:
- Stone colour constants and helpers
- Board: an immutable grid of intersections
- GTP coordinate conversion (e.g. "E5" <-> (4, 4))
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

DEFAULT_BOARD_SIZE = 9
MIN_BOARD_SIZE = 2
MAX_BOARD_SIZE = 19

EMPTY = '.'
BLACK = 'B'
WHITE = 'W'
COLORS = (BLACK, WHITE)

# GTP column letters (I is skipped in Go)
GTP_COLUMNS = "ABCDEFGHJKLMNOPQRST"

# Orthogonal neighbour offsets
DIRECTIONS = ((0, 1), (0, -1), (1, 0), (-1, 0))

Point = Tuple[int, int]


def opponent(color: str) -> str:
    """Return the other player's colour."""
    if color == BLACK:
        return WHITE
    if color == WHITE:
        return BLACK
    raise ValueError(f"Color must be 'B' or 'W', got {color!r}")


def color_name(color: str) -> str:
    return "Black" if color == BLACK else "White"


# ============================================================================
# Coordinate Conversion
# ============================================================================

def gtp_to_coords(gtp_coord: str, board_size: int = DEFAULT_BOARD_SIZE) -> Point:
    """
    Convert GTP coordinate (e.g., "E5") to (x, y) tuple.
    
    In GTP:
    - Columns are A-T (I is skipped), left to right
    - Rows are 1-N, bottom to top
    
    We use:
    - x: 0 to board_size-1, left to right
    - y: 0 to board_size-1, top to bottom
    
    Args:
        gtp_coord: GTP coordinate string (e.g., "C3", "E5")
        board_size: Size of the board
        
    Returns:
        (x, y) tuple
        
    Raises:
        ValueError: If coordinate is invalid
    """
    if not gtp_coord or len(gtp_coord) < 2:
        raise ValueError(f"Invalid GTP coordinate: {gtp_coord}")
    
    col = gtp_coord[0].upper()
    try:
        row = int(gtp_coord[1:])
    except ValueError:
        raise ValueError(f"Invalid GTP coordinate: {gtp_coord}")
    
    if col not in GTP_COLUMNS:
        raise ValueError(f"Invalid column letter: {col}")
    
    x = GTP_COLUMNS.index(col)
    y = board_size - row
    
    if not (0 <= x < board_size and 0 <= y < board_size):
        raise ValueError(f"Coordinate {gtp_coord} out of bounds for {board_size}x{board_size}")
    
    return (x, y)


def coords_to_gtp(x: int, y: int, board_size: int = DEFAULT_BOARD_SIZE) -> str:
    """
    Convert (x, y) coordinates to GTP string.
    
    Args:
        x: Column index (0-based, left to right)
        y: Row index (0-based, top to bottom)
        board_size: Size of the board
        
    Returns:
        GTP coordinate string (e.g., "E5")
    """
    if not (0 <= x < board_size and 0 <= y < board_size):
        raise ValueError(f"Point ({x}, {y}) out of bounds for {board_size}x{board_size}")
    return f"{GTP_COLUMNS[x]}{board_size - y}"


# ============================================================================
# Board
# ============================================================================

@dataclass(frozen=True)
class Board:
    """
    Immutable N x N grid of intersections.
    
    Attributes:
        size: Board size (fixed at creation)
        grid: Tuple of rows, indexed grid[y][x]; each cell is EMPTY, BLACK or WHITE
    """
    size: int
    grid: Tuple[Tuple[str, ...], ...]
    
    def __post_init__(self):
        """Validate dimensions and cell values."""
        if not (MIN_BOARD_SIZE <= self.size <= MAX_BOARD_SIZE):
            raise ValueError(
                f"Board size must be {MIN_BOARD_SIZE}-{MAX_BOARD_SIZE}, got {self.size}"
            )
        if len(self.grid) != self.size or any(len(row) != self.size for row in self.grid):
            raise ValueError(f"Grid must be {self.size}x{self.size}")
        for row in self.grid:
            for value in row:
                if value not in (EMPTY, BLACK, WHITE):
                    raise ValueError(f"Invalid intersection value: {value!r}")
    
    @classmethod
    def empty(cls, size: int = DEFAULT_BOARD_SIZE) -> 'Board':
        """Create an empty board."""
        return cls(size=size, grid=tuple((EMPTY,) * size for _ in range(size)))
    
    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> 'Board':
        """
        Build a board from text rows, top row first.
        
        Each row holds one character per column: '.', 'B' or 'W'.
        Whitespace inside a row is ignored, so "B . W" works too.
        """
        grid = tuple(tuple(row.replace(" ", "").upper()) for row in rows)
        return cls(size=len(grid), grid=grid)
    
    @classmethod
    def from_stones(
        cls,
        stones: Dict[Point, str],
        size: int = DEFAULT_BOARD_SIZE,
    ) -> 'Board':
        """Build a board from a {(x, y): color} mapping."""
        cells = [[EMPTY] * size for _ in range(size)]
        for (x, y), color in stones.items():
            if not (0 <= x < size and 0 <= y < size):
                raise ValueError(f"Point ({x}, {y}) out of bounds for {size}x{size}")
            cells[y][x] = color
        return cls(size=size, grid=tuple(tuple(row) for row in cells))
    
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size
    
    def get(self, x: int, y: int) -> str:
        """Return the value at (x, y)."""
        if not self.in_bounds(x, y):
            raise ValueError(f"Point ({x}, {y}) out of bounds for {self.size}x{self.size}")
        return self.grid[y][x]
    
    def is_empty(self, x: int, y: int) -> bool:
        return self.get(x, y) == EMPTY
    
    def neighbors(self, x: int, y: int) -> Iterator[Point]:
        """Yield the orthogonal neighbours of (x, y) that lie on the board."""
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.size and 0 <= ny < self.size:
                yield (nx, ny)
    
    def points(self) -> Iterator[Point]:
        """Yield every point in scan order (row by row, top to bottom)."""
        for y in range(self.size):
            for x in range(self.size):
                yield (x, y)
    
    def stones(self) -> Dict[Point, str]:
        """Return all placed stones as {(x, y): color}."""
        return {
            (x, y): value
            for y, row in enumerate(self.grid)
            for x, value in enumerate(row)
            if value != EMPTY
        }
    
    def count(self, color: str) -> int:
        return sum(row.count(color) for row in self.grid)
    
    def with_stone(self, x: int, y: int, color: str) -> 'Board':
        """Return a new board with `color` written at (x, y)."""
        if not self.in_bounds(x, y):
            raise ValueError(f"Point ({x}, {y}) out of bounds for {self.size}x{self.size}")
        row = self.grid[y][:x] + (color,) + self.grid[y][x + 1:]
        return Board(size=self.size, grid=self.grid[:y] + (row,) + self.grid[y + 1:])
    
    def without_stones(self, points: Iterable[Point]) -> 'Board':
        """Return a new board with every given point cleared."""
        cells = [list(row) for row in self.grid]
        for x, y in points:
            cells[y][x] = EMPTY
        return Board(size=self.size, grid=tuple(tuple(row) for row in cells))
    
    def serialize(self) -> str:
        """
        Serialize the position to a string, one line per row.
        
        Two boards are equal positions exactly when their serializations match.
        """
        return "\n".join("".join(row) for row in self.grid)
    
    def to_rows(self) -> List[str]:
        return ["".join(row) for row in self.grid]
    
    def __repr__(self) -> str:
        return (
            f"Board(size={self.size}, "
            f"black={self.count(BLACK)}, "
            f"white={self.count(WHITE)})"
        )


def create_board(
    size: int = DEFAULT_BOARD_SIZE,
    moves: Optional[List[str]] = None,
) -> Board:
    """
    Factory function to create a Board with optional stones.
    
    Stones are written directly without capture resolution; use
    go9.game to play a legal sequence.
    
    Args:
        size: Board size
        moves: List of stones in GTP format, e.g., ["B E5", "W C3"]
        
    Returns:
        Board instance
    """
    board = Board.empty(size)
    for move in moves or []:
        parts = move.strip().split()
        if len(parts) != 2:
            raise ValueError(f"Invalid move format: {move}. Expected 'COLOR COORD'")
        color, coord = parts[0].upper(), parts[1]
        if color not in COLORS:
            raise ValueError(f"Color must be 'B' or 'W', got {color}")
        x, y = gtp_to_coords(coord, size)
        if not board.is_empty(x, y):
            raise ValueError(f"Position {coord} is already occupied")
        board = board.with_stone(x, y, color)
    return board
