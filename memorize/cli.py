"""
Memorize CLI - Command-line interface for the engine.

Usage:
    memorize play [--level-set NAME | --level PAIRS ...]   Play in the terminal
    memorize levels                                        List built-in level sets
    memorize serve [--host HOST] [--port PORT]             Run the API server
"""

import argparse
import logging
import random
import sys
import time

from .config import Settings
from .engine_core import GameController, InvalidLevelConfigError, ManualScheduler, PhaseKind, Snapshot
from .games import LEVEL_SETS, build_levels, get_level_set

HOW_TO_PLAY = """How to Play:
  • Tap two cards to flip them
  • Find matching pairs of emojis
  • Matched cards stay face up
  • Match every card to clear the level"""


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Memorize - Card matching game",
        prog="memorize",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--level-set", default=None, help="Built-in level set")
    play_parser.add_argument(
        "--level", type=int, action="append", dest="pair_counts", metavar="PAIRS",
        help="Add a custom level with PAIRS pairs (repeatable)",
    )
    play_parser.add_argument("--seed", type=int, default=None, help="Shuffle seed")
    play_parser.add_argument("--delay", type=float, default=None, help="Flip-back delay in seconds")

    # Levels command
    subparsers.add_parser("levels", help="List built-in level sets")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    args = parser.parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(levelname)s - [%(name)s] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.command == "play":
        cmd_play(args, settings)
    elif args.command == "levels":
        cmd_levels(args)
    elif args.command == "serve":
        cmd_serve(args, settings)
    else:
        parser.print_help()
        sys.exit(1)


def render_board(snapshot: Snapshot, columns: int = 4) -> str:
    """
    Draw the board as text.

    Cards are numbered from 1. Face-down cards show `?`, face-up cards
    their symbol in brackets, matched cards their symbol in parentheses.
    """
    cells = []
    for card in snapshot.cards:
        if card.matched:
            face = f"({card.symbol})"
        elif card.face_up:
            face = f"[{card.symbol}]"
        else:
            face = "[ ?]"
        cells.append(f"{card.id + 1:>2}:{face}")
    rows = [
        "  ".join(cells[start:start + columns])
        for start in range(0, len(cells), columns)
    ]
    return "\n".join(rows)


def cmd_play(args, settings=None, input_fn=input, output=print, sleep=time.sleep):
    """Play a game in the terminal."""
    settings = settings or Settings.from_env()
    try:
        if args.pair_counts:
            levels = build_levels(args.pair_counts)
        else:
            levels = get_level_set(args.level_set or settings.level_set)
        scheduler = ManualScheduler()
        delay = settings.mismatch_delay if args.delay is None else args.delay
        controller = GameController(
            levels,
            scheduler=scheduler,
            mismatch_delay=delay,
            transition_delay=settings.transition_delay,
            rng=random.Random(args.seed),
        )
    except (InvalidLevelConfigError, KeyError) as e:
        output(f"Error: {e.args[0]}")
        sys.exit(1)

    output("Memorize")
    output(HOW_TO_PLAY)
    controller.begin()

    try:
        while True:
            snapshot = controller.snapshot()
            kind = snapshot.phase.kind

            if kind is PhaseKind.PLAYING:
                output("")
                output(f"Level {snapshot.level_number} of {snapshot.level_count}")
                output(render_board(snapshot))
                if scheduler.next_due is not None:
                    # Let the pending flip-back or level transition happen
                    wait = scheduler.next_due - scheduler.now
                    sleep(wait)
                    scheduler.advance(wait)
                    continue
                answer = input_fn("Card number (r = restart, q = quit): ").strip().lower()
                if answer == "q":
                    return
                if answer == "r":
                    controller.restart()
                    continue
                if answer.isdigit():
                    controller.tap(int(answer) - 1)
                else:
                    output("Enter a card number")

            elif kind is PhaseKind.LEVEL_CLEARED:
                output(f"Level {snapshot.phase.level} cleared!")
                answer = input_fn("Press Enter for the next level (q = quit): ").strip().lower()
                if answer == "q":
                    return
                controller.advance_level()

            elif kind is PhaseKind.COMPLETED:
                output("🎉 Game Over!")
                output("Congratulations! You've matched all the cards!")
                answer = input_fn("Play again? [y/N]: ").strip().lower()
                if answer != "y":
                    return
                controller.restart()

            else:
                controller.begin()
    except EOFError:
        output("")


def cmd_levels(args, output=print):
    """List built-in level sets."""
    for name in sorted(LEVEL_SETS):
        levels = LEVEL_SETS[name]()
        shapes = ", ".join(
            f"{level.pair_count} pairs ({level.card_count} cards)" for level in levels
        )
        output(f"{name}: {shapes}")


def cmd_serve(args, settings):
    """Run the API server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "memorize.api.app:app",
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
