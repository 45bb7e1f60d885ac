#!/usr/bin/env python3
"""
Viral Sweeper - Main entry point.

Usage:
    python main.py play [--size N] [--viruses H] [--seed S] [--no-color]
    python main.py simulate [--games G] [--size N] [--viruses H] [--seed S]
"""
import argparse
import logging
import time
from typing import Optional, Tuple

import numpy as np

from viralsweeper import (
    BoardConfig,
    ConfigurationError,
    GameSession,
    TerminalEvent,
    ViralSweeperEnv,
    render_cells,
    GRID_SIZE,
    VIRUSES,
)


def parse_move(text: str, size: int) -> Optional[Tuple[int, int]]:
    """Parse 'row col' into an on-board position, or None."""
    parts = text.replace(",", " ").split()
    if len(parts) != 2:
        return None
    try:
        row, col = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= row < size and 0 <= col < size):
        return None
    return row, col


def play(args: argparse.Namespace) -> None:
    """Play interactively in the terminal."""
    config = BoardConfig(args.size, args.viruses)
    color = not args.no_color
    rng = np.random.default_rng(args.seed)

    while True:
        session = GameSession(config, rng=rng)
        snapshot = session.snapshot()
        print(f"\nBoard: {config.size}x{config.size} with {config.num_viruses} viruses")

        while not snapshot.is_terminal:
            print()
            print(render_cells(snapshot.cells, color=color))
            try:
                text = input(f"Click (row col, 0-{config.size - 1}, q to quit): ")
            except EOFError:
                return
            if text.strip().lower() == "q":
                return
            move = parse_move(text, config.size)
            if move is None:
                print("Enter two numbers within the board, e.g. '3 7'")
                continue
            snapshot = session.on_click(*move)

        print()
        print(render_cells(snapshot.cells, color=color))
        if snapshot.event == TerminalEvent.DEFEAT:
            print(f"\n*** You have been infected! ({snapshot.clicks} clicks) ***")
        else:
            print(f"\n*** You have won! ({snapshot.clicks} clicks) ***")

        try:
            again = input("Play again? [y/N] ")
        except EOFError:
            return
        if again.strip().lower() != "y":
            return


def simulate(args: argparse.Namespace) -> None:
    """Play games by clicking random hidden cells and report results."""
    config = BoardConfig(args.size, args.viruses)
    env = ViralSweeperEnv(config=config)
    rng = np.random.default_rng(args.seed)

    print(f"Simulating {args.games} games on {config.size}x{config.size} "
          f"with {config.num_viruses} viruses...")

    wins = 0
    total_clicks = 0
    total_revealed = 0
    start_time = time.time()

    for game in range(args.games):
        seed = None if args.seed is None else args.seed + game
        env.reset(seed=seed)
        done = False
        info = {}

        while not done:
            valid_indices = np.flatnonzero(env.get_action_mask())
            action = int(rng.choice(valid_indices))
            _, _, terminated, truncated, info = env.step(action)
            done = terminated or truncated

        if info["event"] == TerminalEvent.VICTORY.name:
            wins += 1
        total_clicks += info["clicks"]
        total_revealed += info["revealed"]

    elapsed = time.time() - start_time
    print(f"Results over {args.games} games:")
    print(f"  Win rate: {wins / args.games:.1%}")
    print(f"  Avg clicks: {total_clicks / args.games:.1f}")
    print(f"  Avg revealed: {total_revealed / args.games:.1f} cells")
    print(f"  Speed: {args.games / max(elapsed, 1e-9):.1f} games/s")


def add_board_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--size", type=int, default=GRID_SIZE, help="Board size (NxN)"
    )
    parser.add_argument(
        "--viruses", type=int, default=VIRUSES, help="Number of viruses"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for virus layout"
    )


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Viral Sweeper - clear the grid without catching a virus"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log engine events"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    add_board_arguments(play_parser)
    play_parser.add_argument(
        "--no-color", action="store_true", help="Disable ANSI colours"
    )

    # Simulate command
    simulate_parser = subparsers.add_parser(
        "simulate", help="Play random games and report statistics"
    )
    add_board_arguments(simulate_parser)
    simulate_parser.add_argument(
        "--games", type=int, default=100, help="Number of games to play"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    if args.command == "simulate" and args.games < 1:
        parser.error("--games must be at least 1")

    try:
        if args.command == "play":
            play(args)
        elif args.command == "simulate":
            simulate(args)
        else:
            parser.print_help()
    except ConfigurationError as e:
        parser.error(str(e))


if __name__ == "__main__":
    main()
