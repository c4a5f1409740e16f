"""Core engine components: rules boundary, evaluator, and minimax search."""

from .board import ChessBoard, GameStatus, PythonChessRules, Rules
from .evaluator import Evaluator, GamePhase, game_phase, piece_square_value
from .search import SCORE_MAX, SCORE_MIN, SearchConfig, SearchEngine, SearchResult
