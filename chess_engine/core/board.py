"""Rules-engine boundary and the python-chess backed board wrapper.

The search and evaluation code never touches board internals. Everything it
needs goes through the small ``Rules`` capability set below, so tests can swap
in a hand-built game tree instead of a full chess implementation.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

import chess


class GameStatus(Enum):
    ONGOING = "ongoing"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


@runtime_checkable
class Rules(Protocol):
    """Queries the core consumes from a rules engine."""

    def legal_moves(self, position: Any) -> Iterable[Any]:
        ...

    def apply(self, position: Any, move: Any) -> Any:
        """Return the position after ``move``; ``position`` is left untouched."""
        ...

    def status(self, position: Any) -> GameStatus:
        ...

    def side_to_move(self, position: Any) -> chess.Color:
        ...

    def pieces(self, position: Any, piece_type: chess.PieceType, color: chess.Color) -> Iterable[int]:
        """Squares (a1=0 .. h8=63) holding ``piece_type`` of ``color``."""
        ...


class PythonChessRules:
    """``Rules`` implementation over ``chess.Board``."""

    def legal_moves(self, position: chess.Board) -> Iterable[chess.Move]:
        return position.legal_moves

    def apply(self, position: chess.Board, move: chess.Move) -> chess.Board:
        child = position.copy(stack=False)
        child.push(move)
        return child

    def status(self, position: chess.Board) -> GameStatus:
        # Only mate and stalemate end the tree walk; claimable draws do not.
        if position.is_checkmate():
            return GameStatus.CHECKMATE
        if position.is_stalemate():
            return GameStatus.STALEMATE
        return GameStatus.ONGOING

    def side_to_move(self, position: chess.Board) -> chess.Color:
        return position.turn

    def pieces(self, position: chess.Board, piece_type: chess.PieceType, color: chess.Color) -> Iterable[int]:
        return position.pieces(piece_type, color)


DEFAULT_RULES = PythonChessRules()


class ChessBoard:
    def __init__(self, fen: str = None):
        """Initialize from FEN or the standard starting position."""
        self.board = chess.Board(fen) if fen else chess.Board()
        self.move_history: List[str] = []
        self.captured: Dict[chess.Color, List[chess.PieceType]] = {chess.WHITE: [], chess.BLACK: []}

    def reset(self):
        """Reset to the initial position."""
        self.board.reset()
        self.move_history.clear()
        self._clear_captured()

    def set_fen(self, fen: str):
        """Set board state from a FEN string. Raises ValueError on bad input."""
        self.board.set_fen(fen)
        self.move_history.clear()
        self._clear_captured()

    def get_fen(self) -> str:
        """Return the current FEN."""
        return self.board.fen()

    def parse_move(self, move_str: str) -> Optional[chess.Move]:
        """Parse a UCI string into a legal move, or None.

        A pawn reaching the last rank without a piece suffix promotes to a queen.
        """
        try:
            move = chess.Move.from_uci(move_str.strip())
        except (ValueError, AttributeError):
            return None
        if move.promotion is None and self._is_promotion_square(move):
            move = chess.Move(move.from_square, move.to_square, promotion=chess.QUEEN)
        if move in self.board.legal_moves:
            return move
        return None

    def push(self, move: chess.Move):
        """Play an already validated move, recording captures and history."""
        captured = self._captured_piece(move)
        if captured is not None:
            self.captured[not self.board.turn].append(captured)
        self.board.push(move)
        self.move_history.append(move.uci())

    def make_move(self, move_str: str) -> bool:
        """Push a UCI move (e.g. 'e2e4'). Returns True if legal."""
        move = self.parse_move(move_str)
        if move is None:
            return False
        self.push(move)
        return True

    def undo_move(self):
        """Pop the last move."""
        if not self.move_history:
            return
        self.board.pop()
        self.move_history.pop()
        self._rebuild_captured()

    def get_legal_moves(self) -> List[str]:
        """Return legal moves as UCI strings."""
        return [m.uci() for m in self.board.legal_moves]

    def legal_moves_from(self, square: chess.Square) -> List[chess.Move]:
        """Legal moves of the piece standing on ``square``."""
        return [m for m in self.board.legal_moves if m.from_square == square]

    def is_game_over(self) -> bool:
        """True once the side to move is mated or stalemated."""
        return DEFAULT_RULES.status(self.board) is not GameStatus.ONGOING

    def print_board(self):
        """Print ASCII representation."""
        print(self.board)

    def _is_promotion_square(self, move: chess.Move) -> bool:
        piece = self.board.piece_at(move.from_square)
        if piece is None or piece.piece_type != chess.PAWN:
            return False
        last_rank = 7 if piece.color == chess.WHITE else 0
        return chess.square_rank(move.to_square) == last_rank

    def _captured_piece(self, move: chess.Move) -> Optional[chess.PieceType]:
        return captured_piece_type(self.board, move)

    def _clear_captured(self):
        for pieces in self.captured.values():
            pieces.clear()

    def _rebuild_captured(self):
        # Replay the remaining history from the root of the move stack.
        self._clear_captured()
        replay = self.board.root()
        for move in self.board.move_stack:
            captured = captured_piece_type(replay, move)
            if captured is not None:
                self.captured[not replay.turn].append(captured)
            replay.push(move)


def captured_piece_type(board: chess.Board, move: chess.Move) -> Optional[chess.PieceType]:
    """Type of the piece ``move`` removes from ``board``, if any."""
    if board.is_en_passant(move):
        return chess.PAWN
    victim = board.piece_at(move.to_square)
    if victim is None or victim.color == board.turn:
        return None
    return victim.piece_type
