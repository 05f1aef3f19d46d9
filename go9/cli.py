"""
Command-line interface for the 9x9 Go engine.

Usage:
    # Play against the computer (you are Black)
    python -m go9.cli --mode pve --tier hard

    # Two humans at one terminal
    python -m go9.cli --mode pvp

    # Computer self-play, saving the record
    python -m go9.cli --ai-vs-ai --seed 7 --sgf game.sgf
"""

import argparse
import json
import random
import sys
from typing import List, Optional

from .ai import Tier
from .board import BLACK, GTP_COLUMNS, WHITE, color_name, coords_to_gtp, gtp_to_coords
from .config import load_config
from .game import GameState, is_ended, new_game, pass_turn, place, play_ai_turn
from .groups import atari_groups
from .sgf_handler import game_to_sgf, save_sgf_file

# Self-play stops after this many moves even without two passes
MAX_SELF_PLAY_MOVES = 400

REASON_MESSAGES = {
    "InvalidCoordinate": "That point is not on the board.",
    "Occupied": "That point is already occupied.",
    "Suicide": "Illegal move: suicide.",
    "Ko": "Illegal move: ko.",
    "MoveAfterGameEnded": "The game is over.",
}


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="go9",
        description="9x9 Go with a built-in computer opponent",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Moves are entered as GTP coordinates (e.g. E5), "pass" or "quit".

Examples:
  # Play Black against the hard computer
  %(prog)s --mode pve --tier hard

  # Human vs human
  %(prog)s --mode pvp

  # Self-play with a fixed seed, print the score as JSON
  %(prog)s --ai-vs-ai --seed 7 --json
        """
    )

    parser.add_argument(
        "--mode",
        choices=["pve", "pvp"],
        default="pve",
        help="pve: you play Black against the computer; pvp: two humans (default: pve)"
    )

    parser.add_argument(
        "--tier", "-t",
        choices=[t.value for t in Tier],
        default=None,
        help="Computer difficulty (default from config: hard)"
    )

    parser.add_argument(
        "--size", "-s",
        type=int,
        default=None,
        help="Board size (default from config: 9)"
    )

    parser.add_argument(
        "--komi", "-k",
        type=float,
        default=None,
        help="Komi for White (default from config: 5.5)"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible computer moves"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to config.yaml file"
    )

    parser.add_argument(
        "--sgf",
        type=str,
        default=None,
        help="Save the game record to this SGF file when the game ends"
    )

    parser.add_argument(
        "--ai-vs-ai",
        action="store_true",
        help="Let the computer play both sides"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the final result as JSON"
    )

    return parser.parse_args(args)


def format_board(state: GameState) -> str:
    """Render the board as text with GTP labels; atari stones are lower-case."""
    size = state.board.size
    atari = set()
    for group in atari_groups(state.board):
        atari.update(group.stones)

    header = "   " + " ".join(GTP_COLUMNS[:size])
    lines = [header]
    for y in range(size):
        cells = []
        for x in range(size):
            value = state.board.grid[y][x]
            if (x, y) in atari:
                value = value.lower()
            cells.append(value)
        lines.append(f"{size - y:2d} " + " ".join(cells) + f" {size - y}")
    lines.append(header)
    lines.append(
        f"Captures - Black: {state.prisoners[BLACK]}  White: {state.prisoners[WHITE]}"
    )
    return "\n".join(lines)


def format_score(state: GameState) -> str:
    result = state.final_score
    lines = [
        "=" * 40,
        "Game over",
        "=" * 40,
        f"Black: {result.black:g} ({result.black_stones} stones + {result.black_territory} territory)",
        f"White: {result.white:g} ({result.white_stones} stones + {result.white_territory} territory + {result.komi:g} komi)",
    ]
    if result.winner is None:
        lines.append("Result: tie")
    else:
        lines.append(f"Result: {color_name(result.winner)} wins by {result.margin:g}")
    lines.append("=" * 40)
    return "\n".join(lines)


def describe_move(state: GameState, color: str, move, captured) -> str:
    where = "passes" if move is None else f"plays {coords_to_gtp(*move, state.board.size)}"
    text = f"{color_name(color)} {where}"
    if captured:
        text += f", capturing {len(captured)}"
    return text


def human_turn(state: GameState, read=input) -> Optional[GameState]:
    """
    Prompt until the side to move enters a legal move.

    Returns:
        The next state, or None if the player quits
    """
    color = state.current_color
    while True:
        text = read(f"{color_name(color)} to move: ").strip()
        if text.lower() in ("quit", "exit", "q"):
            return None
        if text.lower() == "pass":
            print(f"{color_name(color)} passes")
            return pass_turn(state).state
        try:
            x, y = gtp_to_coords(text, state.board.size)
        except ValueError as e:
            print(f"Error: {e}")
            continue

        result = place(state, x, y)
        if result.legal:
            print(describe_move(state, color, (x, y), result.captured))
            return result.state
        print(REASON_MESSAGES[result.reason.value])


def computer_turn(state: GameState, tier: Tier, rng: random.Random) -> GameState:
    color = state.current_color
    move, result = play_ai_turn(state, tier, rng)
    print(describe_move(state, color, move, result.captured))
    return result.state


def play(state: GameState, args: argparse.Namespace, tier: Tier, rng: random.Random) -> Optional[GameState]:
    """Run the game loop until it ends; None if a player quits."""
    moves_played = 0
    while not is_ended(state):
        if not args.ai_vs_ai:
            print()
            print(format_board(state))

        computer_to_move = args.ai_vs_ai or (args.mode == "pve" and state.current_color == WHITE)
        if computer_to_move:
            state = computer_turn(state, tier, rng)
        else:
            state = human_turn(state)
            if state is None:
                return None

        moves_played += 1
        if args.ai_vs_ai and moves_played >= MAX_SELF_PLAY_MOVES:
            state = pass_turn(pass_turn(state).state).state
    return state


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)

    try:
        config = load_config(parsed.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 1

    tier = Tier.parse(parsed.tier or config.ai.tier)
    seed = parsed.seed if parsed.seed is not None else config.ai.seed
    rng = random.Random(seed)

    try:
        state = new_game(
            board_size=parsed.size or config.game.board_size,
            komi=parsed.komi if parsed.komi is not None else config.game.komi,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        final = play(state, parsed, tier, rng)
    except (KeyboardInterrupt, EOFError):
        print("\nInterrupted.", file=sys.stderr)
        return 130

    if final is None:
        print("Game abandoned.")
        return 0

    print()
    print(format_board(final))
    if parsed.json:
        print(json.dumps(final.final_score.to_dict(), indent=2))
    else:
        print(format_score(final))

    if parsed.sgf:
        save_sgf_file(parsed.sgf, game_to_sgf(final))
        print(f"Saved game record to {parsed.sgf}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
