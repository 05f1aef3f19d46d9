"""
SGF (Smart Game Format) handler for the 9x9 Go engine.

Provides import/export of game records using the sgfmill library.
"""

from datetime import date
from typing import Any, Dict, List, Tuple

from sgfmill import sgf

from . import __version__
from .board import BLACK, WHITE, Point, coords_to_gtp, gtp_to_coords
from .game import GameState, new_game, pass_turn, place
from .scoring import DEFAULT_KOMI


def _point_to_sgf(point: Point, board_size: int) -> Tuple[int, int]:
    """
    Convert an engine point (x, y) to an sgfmill point (row, col).

    sgfmill counts rows from the bottom; the engine counts y from the top.
    """
    x, y = point
    return (board_size - 1 - y, x)


def _sgf_to_point(sgf_point: Tuple[int, int], board_size: int) -> Point:
    row, col = sgf_point
    return (col, board_size - 1 - row)


def game_to_sgf(
    state: GameState,
    black_player: str = "Black",
    white_player: str = "White",
    game_name: str = "9x9 Go",
) -> str:
    """
    Create an SGF string from a game.

    Args:
        state: Game to export (in progress or ended)
        black_player: Black player name
        white_player: White player name
        game_name: Name of the game

    Returns:
        SGF formatted string
    """
    size = state.board.size
    game = sgf.Sgf_game(size=size)
    root = game.get_root()

    root.set("KM", state.komi)
    root.set("PB", black_player)
    root.set("PW", white_player)
    root.set("DT", date.today().isoformat())
    root.set("GN", game_name)
    root.set("AP", ("go9", __version__))

    if state.final_score is not None:
        root.set("RE", state.final_score.result_string())

    current_node = root
    for color, point in state.moves:
        new_node = current_node.new_child()
        if point is None:
            new_node.set_move(color.lower(), None)
        else:
            new_node.set_move(color.lower(), _point_to_sgf(point, size))
        current_node = new_node

    return game.serialise().decode("utf-8")


def parse_sgf(sgf_content: str) -> Dict[str, Any]:
    """
    Parse an SGF string and extract game information.

    Args:
        sgf_content: Raw SGF file content as string

    Returns:
        Dictionary containing:
        - board_size: int
        - komi: float
        - moves: List of move strings in format "B E5" or "W PASS"
        - metadata: Dict with player names, date, result, etc.

    Raises:
        ValueError: If the SGF cannot be parsed
    """
    game = sgf.Sgf_game.from_string(sgf_content)
    root = game.get_root()
    board_size = game.get_size()

    komi = game.get_komi() if root.has_property("KM") else DEFAULT_KOMI

    black_setup, white_setup, _ = root.get_setup_stones()
    if black_setup or white_setup:
        raise ValueError("SGF setup stones (AB/AW) are not supported")

    metadata = {}
    for prop, key in [("PB", "black_player"), ("PW", "white_player"),
                      ("DT", "date"), ("RE", "result"), ("GN", "game_name")]:
        if root.has_property(prop):
            metadata[key] = root.get(prop)

    moves = []
    for node in game.get_main_sequence():
        if node is root:
            continue
        color, sgf_point = node.get_move()
        if color is None:
            continue
        if sgf_point is None:
            moves.append(f"{color.upper()} PASS")
        else:
            x, y = _sgf_to_point(sgf_point, board_size)
            moves.append(f"{color.upper()} {coords_to_gtp(x, y, board_size)}")

    return {
        "board_size": board_size,
        "komi": float(komi),
        "moves": moves,
        "metadata": metadata,
    }


def replay_moves(
    moves: List[str],
    board_size: int = 9,
    komi: float = DEFAULT_KOMI,
) -> GameState:
    """
    Rebuild a game by playing each move through the rule engine.

    Args:
        moves: Moves like ["B E5", "W C3", "B PASS"]
        board_size: Size of the board
        komi: Komi value

    Returns:
        The resulting GameState

    Raises:
        ValueError: If a move is malformed, out of turn or illegal
    """
    state = new_game(board_size=board_size, komi=komi)

    for number, move in enumerate(moves, start=1):
        parts = move.strip().split()
        if len(parts) != 2:
            raise ValueError(f"Invalid move format: {move}. Expected 'COLOR COORD'")
        color, coord = parts[0].upper(), parts[1].upper()
        if color not in (BLACK, WHITE):
            raise ValueError(f"Color must be 'B' or 'W', got {color}")
        if color != state.current_color:
            raise ValueError(f"Move {number} ({move}) is out of turn")

        if coord == "PASS":
            result = pass_turn(state)
        else:
            result = place(state, *gtp_to_coords(coord, board_size))

        if not result.legal:
            raise ValueError(f"Move {number} ({move}) is illegal: {result.reason.value}")
        state = result.state

    return state


def replay_sgf(sgf_content: str) -> GameState:
    """Parse an SGF record and replay it into a GameState."""
    data = parse_sgf(sgf_content)
    return replay_moves(data["moves"], data["board_size"], data["komi"])


def load_sgf_file(file_path: str) -> Dict[str, Any]:
    """
    Load and parse an SGF file from disk.

    Args:
        file_path: Path to the SGF file

    Returns:
        Parsed game data (same as parse_sgf)
    """
    with open(file_path, "rb") as f:
        content = f.read().decode("utf-8", errors="replace")
    return parse_sgf(content)


def save_sgf_file(file_path: str, sgf_content: str) -> None:
    """
    Save an SGF string to a file.

    Args:
        file_path: Path to save the file
        sgf_content: SGF formatted string
    """
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(sgf_content)
