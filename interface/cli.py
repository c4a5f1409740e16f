"""Play against the engine in a terminal."""

import argparse
import logging
from typing import Callable, List, Optional, Tuple

import chess

from chess_engine.config import CONFIG
from chess_engine.core.utils import format_score, format_search_info
from chess_engine.main import Engine

HELP = (
    "commands: <uci move> (e2e4, e7e8q), undo, reset, eval, "
    "depth N, pruning on|off, help, quit"
)


def outcome_message(engine: Engine) -> Optional[str]:
    outcome = engine.outcome()
    if outcome is None:
        return None
    if outcome.winner is None:
        return "it's a draw!"
    return f"{chess.COLOR_NAMES[outcome.winner]} won!"


def handle_command(engine: Engine, line: str) -> Tuple[bool, str]:
    """Apply one line of user input. Returns (keep_running, message)."""
    tokens = line.strip().lower().split()
    if not tokens:
        return True, HELP
    cmd = tokens[0]

    if cmd in ("quit", "exit"):
        return False, "bye"
    if cmd == "help":
        return True, HELP
    if cmd == "undo":
        # Take back the engine reply and the player's move.
        engine.undo_move()
        engine.undo_move()
        return True, "took back the last move pair"
    if cmd == "reset":
        engine.reset()
        return True, "new game"
    if cmd == "eval":
        return True, f"eval {format_score(engine.evaluation())}"
    if cmd == "depth":
        if len(tokens) < 2 or not tokens[1].isdigit():
            return True, "usage: depth N"
        return True, f"depth set to {engine.set_depth(int(tokens[1]))}"
    if cmd == "pruning":
        if len(tokens) < 2 or tokens[1] not in ("on", "off"):
            return True, "usage: pruning on|off"
        engine.pruning = tokens[1] == "on"
        return True, f"alpha-beta {'on' if engine.pruning else 'off'}"

    if engine.is_game_over():
        return True, "game is over, type reset or quit"
    if not engine.make_move(cmd):
        return True, f"Illegal move: {cmd}"
    return True, f"you played {engine.board.move_history[-1]}"


def run(engine: Engine, human: chess.Color,
        read: Callable[[str], str] = input, write: Callable[[str], None] = print):
    running = True
    announced = False
    while running:
        over = outcome_message(engine)
        if over is None:
            announced = False
            if engine.board.board.turn != human:
                result = engine.play_engine_move()
                write(f"Engine plays: {result.best_move.uci()} | Eval: {format_score(result.score)}")
                write(format_search_info(result))
                continue
        elif not announced:
            write(over)
            announced = True

        write(str(engine.board.board))
        write("----------------------------")
        try:
            line = read("> ")
        except EOFError:
            break
        running, message = handle_command(engine, line)
        write(message)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Play chess against a minimax engine.")
    parser.add_argument("--depth", type=int, default=CONFIG.search.depth)
    parser.add_argument("--no-pruning", action="store_true", help="plain minimax instead of alpha-beta")
    parser.add_argument("--black", action="store_true", help="play the black pieces")
    args = parser.parse_args(argv)

    logging.basicConfig(level=CONFIG.log_level)
    engine = Engine(depth=args.depth, pruning=False if args.no_pruning else None)
    human = chess.BLACK if args.black or CONFIG.ui.human_color == "black" else chess.WHITE
    run(engine, human)


if __name__ == "__main__":
    main()
