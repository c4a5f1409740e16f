"""Static evaluator: material plus piece-square tables.

Scores are centipawns from White's side of the board (positive favours White,
negative favours Black) regardless of who is to move. The king table switches
from shelter to activity once the game reaches an endgame.
"""

from enum import Enum
from typing import Any, Iterable, Optional, Protocol, runtime_checkable

import chess

from chess_engine.config import PIECE_VALUES
from chess_engine.core.board import DEFAULT_RULES, Rules
from chess_engine.core.tables import (
    KING_ENDGAME_TABLE,
    KING_MIDGAME_TABLE,
    PIECE_SQUARE_TABLES,
)


class GamePhase(Enum):
    MIDGAME = "midgame"
    ENDGAME = "endgame"


@runtime_checkable
class PositionEvaluator(Protocol):
    """Anything the search can call at its leaves."""

    def evaluate(self, position: Any) -> int:
        ...


def _count(squares: Iterable[int]) -> int:
    return sum(1 for _ in squares)


def _side_in_endgame(position: Any, color: chess.Color, rules: Rules) -> bool:
    queens = _count(rules.pieces(position, chess.QUEEN, color))
    if queens == 0:
        return True
    others = sum(
        _count(rules.pieces(position, pt, color))
        for pt in (chess.KNIGHT, chess.BISHOP, chess.ROOK)
    )
    return queens == 1 and others <= 1


def game_phase(position: Any, rules: Rules = DEFAULT_RULES) -> GamePhase:
    """Endgame once each side has no queen, or a lone queen with at most one other piece."""
    if _side_in_endgame(position, chess.WHITE, rules) and _side_in_endgame(position, chess.BLACK, rules):
        return GamePhase.ENDGAME
    return GamePhase.MIDGAME


def piece_square_value(piece_type: chess.PieceType, color: chess.Color, square: int, phase: GamePhase) -> int:
    """Positional bonus of one piece, from its owner's point of view."""
    if piece_type == chess.KING:
        table = KING_ENDGAME_TABLE if phase is GamePhase.ENDGAME else KING_MIDGAME_TABLE
    else:
        table = PIECE_SQUARE_TABLES[piece_type]
    # Vertical flip (index ^ 56); 63 - index would also swap files.
    index = square if color == chess.WHITE else chess.square_mirror(square)
    return table[index]


class Evaluator:
    def __init__(self, rules: Optional[Rules] = None):
        self.rules = rules or DEFAULT_RULES

    def evaluate(self, position: Any) -> int:
        """Return static eval in centipawns, positive favors White."""
        phase = game_phase(position, self.rules)
        score = 0
        for color, sign in ((chess.WHITE, 1), (chess.BLACK, -1)):
            for pt in chess.PIECE_TYPES:
                for sq in self.rules.pieces(position, pt, color):
                    score += sign * (PIECE_VALUES[pt] + piece_square_value(pt, color, sq, phase))
        return score
