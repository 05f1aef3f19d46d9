"""
Unit tests for scoring.py module.

Tests:
- Stone counting and territory flood-fill
- Dame (neutral) regions
- Komi and winner determination
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from go9.board import BLACK, WHITE, Board
from go9.scoring import DEFAULT_KOMI, flood_region, score_board


def board_from(*rows: str) -> Board:
    """Pad the given top rows to a 9x9 board."""
    rows = [row.ljust(9, ".") for row in rows]
    rows += ["." * 9] * (9 - len(rows))
    return Board.from_rows(rows)


@pytest.fixture
def corner_board():
    """Black walls off the top-left corner; one White stone far away."""
    return board_from(
        "..B",
        "..B",
        "..B",
        "BBB",
        "",
        "",
        "",
        "",
        "........W",
    )


class TestFloodRegion:
    
    def test_enclosed_region(self, corner_board):
        region, borders = flood_region(corner_board, 0, 0)
        
        assert len(region) == 6
        assert borders == {BLACK}
    
    def test_open_region_touches_both(self, corner_board):
        region, borders = flood_region(corner_board, 5, 5)
        
        assert len(region) == 81 - 12 - 1
        assert borders == {BLACK, WHITE}


class TestScoreBoard:
    """Tests for score_board."""
    
    def test_corner_territory(self, corner_board):
        """The enclosed corner counts for Black; the shared region is dame."""
        result = score_board(corner_board, komi=5.5)
        
        assert result.black_stones == 6
        assert result.black_territory == 6
        assert result.black == 12
        assert result.white_stones == 1
        assert result.white_territory == 0
        assert result.white == 6.5
        assert result.winner == BLACK
        assert result.margin == 5.5
        assert result.result_string() == "B+5.5"
    
    def test_territory_map(self, corner_board):
        result = score_board(corner_board)
        
        assert result.territory_map[0][0] == BLACK
        assert result.territory_map[2][1] == BLACK
        # Stones are never territory
        assert result.territory_map[0][2] is None
        # Dame
        assert result.territory_map[8][0] is None
        assert sum(row.count(BLACK) for row in result.territory_map) == 6
        assert sum(row.count(WHITE) for row in result.territory_map) == 0
    
    def test_empty_board_is_dame(self):
        """A region bordered by no stones scores for nobody."""
        result = score_board(Board.empty(), komi=5.5)
        
        assert result.black == 0
        assert result.white == 5.5
        assert result.winner == WHITE
    
    def test_single_color_owns_everything(self):
        board = Board.empty().with_stone(4, 4, WHITE)
        result = score_board(board, komi=0.5)
        
        assert result.white_territory == 80
        assert result.white == 81.5
        assert result.black == 0
    
    def test_default_komi(self):
        assert score_board(Board.empty()).komi == DEFAULT_KOMI == 5.5
    
    def test_tie_with_integer_komi(self):
        result = score_board(Board.empty(), komi=0)
        
        assert result.winner is None
        assert result.result_string() == "0"
    
    def test_split_board(self):
        """Each side owns the empty points on its half."""
        board = Board.from_rows([
            ".B.W.",
            ".B.W.",
            ".B.W.",
            ".B.W.",
            ".B.W.",
        ])
        result = score_board(board, komi=0.5)
        
        # Column 0 is Black's, column 4 is White's, column 2 is dame
        assert result.black_territory == 5
        assert result.white_territory == 5
        assert result.black == 10
        assert result.white == 10.5
        assert result.territory_map[0][2] is None
        assert result.result_string() == "W+0.5"
    
    def test_to_dict(self, corner_board):
        d = score_board(corner_board).to_dict()
        
        assert d['winner'] == BLACK
        assert d['result'] == "B+5.5"
        assert d['territory_map'][0][0] == BLACK
        assert len(d['territory_map']) == 9


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
