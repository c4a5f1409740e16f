import logging
from typing import Dict, List, Optional, Tuple

import chess

from chess_engine.config import CONFIG
from chess_engine.core.board import ChessBoard, GameStatus
from chess_engine.core.search import SearchConfig, SearchEngine, SearchResult

_log = logging.getLogger(__name__)


class Engine:
    """A human-vs-computer game: one board, one searcher, and the play settings."""

    def __init__(self, depth: Optional[int] = None, pruning: Optional[bool] = None, fen: Optional[str] = None):
        self.board = ChessBoard(fen)
        self.search = SearchEngine()
        self.depth = CONFIG.search.clamp_depth(depth if depth is not None else CONFIG.search.depth)
        self.pruning = CONFIG.search.use_pruning if pruning is None else pruning
        self.last_result: Optional[SearchResult] = None

    def set_depth(self, depth: int) -> int:
        self.depth = CONFIG.search.clamp_depth(depth)
        return self.depth

    def analyse(self, depth: Optional[int] = None, use_pruning: Optional[bool] = None) -> SearchResult:
        """Search the current position for the side to move."""
        config = SearchConfig.for_position(
            self.board.board,
            depth=self.depth if depth is None else depth,
            use_pruning=self.pruning if use_pruning is None else use_pruning,
            rules=self.search.rules,
        )
        self.last_result = self.search.search(self.board.board.copy(), config)
        return self.last_result

    def get_best_move(self) -> Tuple[Optional[str], int]:
        result = self.analyse()
        return (result.best_move.uci() if result.best_move else None), result.score

    def play_engine_move(self) -> Optional[SearchResult]:
        """Let the engine reply. Returns None when the game is already over."""
        if self.is_game_over():
            return None
        result = self.analyse()
        if result.best_move is not None:
            self.board.push(result.best_move)
            _log.info("engine plays %s (score %d, %d nodes)", result.best_move.uci(), result.score, result.nodes_visited)
        return result

    def make_move(self, move_uci: str) -> bool:
        ok = self.board.make_move(move_uci)
        if ok:
            _log.info("player plays %s", self.board.move_history[-1])
        return ok

    def undo_move(self):
        self.board.undo_move()

    def reset(self):
        self.board.reset()
        self.last_result = None

    def evaluation(self) -> int:
        """Static score of the current position, White positive."""
        return self.search.evaluator.evaluate(self.board.board)

    def status(self) -> GameStatus:
        return self.search.rules.status(self.board.board)

    def is_game_over(self) -> bool:
        return self.status() is not GameStatus.ONGOING

    def winner(self) -> Optional[chess.Color]:
        """Colour that delivered mate; None while playing or after stalemate."""
        if self.status() is GameStatus.CHECKMATE:
            return not self.board.board.turn
        return None

    def outcome(self) -> Optional[chess.Outcome]:
        """None while playing; otherwise how the game ended (winner None is a draw)."""
        status = self.status()
        if status is GameStatus.CHECKMATE:
            return chess.Outcome(chess.Termination.CHECKMATE, self.winner())
        if status is GameStatus.STALEMATE:
            return chess.Outcome(chess.Termination.STALEMATE, None)
        return None

    @property
    def captured(self) -> Dict[chess.Color, List[chess.PieceType]]:
        return self.board.captured

    def print_board(self):
        self.board.print_board()
