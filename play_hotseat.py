#!/usr/bin/env python3
"""Play Sternhalma (Chinese Checkers) hot-seat from the terminal."""

from __future__ import annotations

import argparse
from typing import List, Optional

from sternhalma.board import display_board
from sternhalma.game import Game, IllegalMoveError
from sternhalma.hexgrid import Hex
from sternhalma.layout import MAX_PLAYERS, MIN_PLAYERS
from sternhalma.move_gen import Move, get_player_moves
from sternhalma.state import MatchPhase


def parse_hex(token: str) -> Optional[Hex]:
    """Parse ``q,r``; None if malformed."""
    try:
        return Hex.from_key(token)
    except ValueError:
        return None


def fmt_move(origin: Hex, move: Move) -> str:
    """Human-readable move string."""
    if move.is_jump:
        path = " > ".join(p.key for p in move.path)
        return f"{origin.key} -> {move.target.key}  jump x{move.hops}: {path}"
    return f"{origin.key} -> {move.target.key}  step"


def list_moves(game: Game, origin: Optional[Hex] = None) -> List[str]:
    player = game.current_player
    if player is None:
        return []
    if origin is not None:
        return [fmt_move(origin, m) for m in game.get_valid_moves(origin)]
    lines: List[str] = []
    for pos, moves in sorted(
        get_player_moves(game.state, player.home_triangle_index).items(),
        key=lambda item: (item[0].r, item[0].q),
    ):
        lines.extend(fmt_move(pos, m) for m in moves)
    return lines


def print_play_help() -> None:
    print("Play commands:")
    print("  <q,r> <q,r>               - move the piece at the first cell to the second")
    print("  moves [q,r]               - list legal moves (all pieces, or one)")
    print("  board                     - display board")
    print("  players <n>               - restart with n players (2..6)")
    print("  reset                     - restart with the same players")
    print("  quit                      - exit")


def handle_command(game: Game, raw: str) -> bool:
    """Run one command line.  Returns True if a move was played."""
    parts = raw.split()
    cmd = parts[0].lower()

    if cmd in {"help", "?"}:
        print_play_help()
        return False
    if cmd in {"quit", "exit"}:
        raise SystemExit(0)
    if cmd in {"board", "show"}:
        display_board(game.state.occupants())
        return False
    if cmd in {"moves", "m"}:
        origin = parse_hex(parts[1]) if len(parts) == 2 else None
        if len(parts) == 2 and origin is None:
            print("Usage: moves [q,r]")
            return False
        lines = list_moves(game, origin)
        if not lines:
            print("  (no legal moves)")
        for line in lines:
            print(f"  {line}")
        return False
    if cmd == "reset":
        game.reset_game()
        print("Game reset.")
        return False
    if cmd == "players":
        try:
            count = int(parts[1])
        except (IndexError, ValueError):
            print(f"Usage: players <{MIN_PLAYERS}..{MAX_PLAYERS}>")
            return False
        game.set_player_count(count)
        print(f"New game with {game.player_count} players.")
        return False

    if len(parts) == 2:
        src, dst = parse_hex(parts[0]), parse_hex(parts[1])
        if src is None or dst is None:
            print("Cells are written q,r (e.g. 4,-7 4,-6).")
            return False
        try:
            result = game.play(src, dst)
        except IllegalMoveError as exc:
            print(f"Illegal: {exc}")
            return False
        print(fmt_move(result.from_pos, result.move))
        return True

    print("Invalid input. Type: help")
    return False


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Sternhalma hot-seat.")
    parser.add_argument(
        "--players",
        type=int,
        default=2,
        help="Number of players, 2..6 (default: 2).",
    )
    parser.add_argument(
        "--max-moves",
        type=int,
        default=5000,
        help="Safety stop after N moves (default: 5000).",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    game = Game(args.players)

    print(f"Players: {', '.join(p.name for p in game.players)}")
    print_play_help()

    while game.phase == MatchPhase.IN_PROGRESS and game.move_count < args.max_moves:
        print()
        display_board(game.state.occupants())
        player = game.current_player
        print(
            f"To move: {player.name} (triangle {player.home_triangle_index}, "
            f"goal {player.goal_triangle_index}) | move={game.move_count}"
        )
        while True:
            raw = input(f"{player.name.lower()}> ").strip()
            if raw and handle_command(game, raw):
                break
            if game.current_player is not player:
                # reset / players changed the table
                break

    print()
    display_board(game.state.occupants())
    if game.winner is not None:
        print(f"Result: {game.winner.name.upper()} WINS after {game.move_count} moves")
    else:
        print(f"Stopped after {args.max_moves} moves.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
