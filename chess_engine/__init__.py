"""Minimax chess opponent: static evaluation plus fixed-depth game-tree search."""

from chess_engine.main import Engine

__version__ = "1.0.0"
