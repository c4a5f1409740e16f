"""Fixed-depth minimax search, with or without alpha-beta pruning.

Both walkers share the same shape: count the node, stop at depth 0 or at a
finished game and return the static evaluation, otherwise try every legal
move and keep the first strictly better score for the side to play. White
maximizes, Black minimizes. Pruning only skips siblings that cannot change the
result, so the chosen move and score never depend on ``use_pruning``.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import chess

from chess_engine.core.board import DEFAULT_RULES, GameStatus, Rules
from chess_engine.core.evaluator import Evaluator, PositionEvaluator

_log = logging.getLogger(__name__)

# i32 bounds; only ever seen as "nothing found yet", never as a leaf score.
SCORE_MIN = -(2 ** 31)
SCORE_MAX = 2 ** 31 - 1

Node = Tuple[int, Optional[Any]]


@dataclass(frozen=True)
class SearchConfig:
    depth: int
    use_pruning: bool = True
    maximizing: bool = True

    def __post_init__(self):
        if self.depth < 0:
            raise ValueError(f"search depth must be >= 0, got {self.depth}")

    @classmethod
    def for_position(cls, position: Any, depth: int, use_pruning: bool = True,
                     rules: Rules = DEFAULT_RULES) -> "SearchConfig":
        """Search on behalf of the side to move (White maximizes)."""
        return cls(depth=depth, use_pruning=use_pruning,
                   maximizing=rules.side_to_move(position) == chess.WHITE)


@dataclass(frozen=True)
class SearchResult:
    score: int
    best_move: Optional[Any]
    nodes_visited: int
    elapsed: float  # seconds


class SearchEngine:
    def __init__(self, evaluator: Optional[PositionEvaluator] = None, rules: Optional[Rules] = None):
        self.rules = rules or DEFAULT_RULES
        self.evaluator = evaluator or Evaluator(self.rules)
        self.nodes = 0

    def search(self, position: Any, config: SearchConfig) -> SearchResult:
        self.nodes = 0
        start = time.perf_counter()

        if config.use_pruning:
            score, move = self.minimax_alpha_beta(position, config.depth, SCORE_MIN, SCORE_MAX, config.maximizing)
        else:
            score, move = self.minimax(position, config.depth, config.maximizing)

        elapsed = time.perf_counter() - start
        _log.debug(
            "depth=%d pruning=%s maximizing=%s score=%d move=%s nodes=%d time=%.3fs",
            config.depth, config.use_pruning, config.maximizing, score, move, self.nodes, elapsed,
        )
        return SearchResult(score=score, best_move=move, nodes_visited=self.nodes, elapsed=elapsed)

    def _is_leaf(self, position: Any, depth: int) -> bool:
        return depth == 0 or self.rules.status(position) is not GameStatus.ONGOING

    def minimax(self, position: Any, depth: int, maximizing: bool) -> Node:
        self.nodes += 1
        if self._is_leaf(position, depth):
            return self.evaluator.evaluate(position), None

        best_move = None
        best_score = SCORE_MIN if maximizing else SCORE_MAX

        for move in self.rules.legal_moves(position):
            child = self.rules.apply(position, move)
            score, _ = self.minimax(child, depth - 1, not maximizing)

            if maximizing:
                if score > best_score:
                    best_score, best_move = score, move
            elif score < best_score:
                best_score, best_move = score, move

        return best_score, best_move

    def minimax_alpha_beta(self, position: Any, depth: int, alpha: int, beta: int, maximizing: bool) -> Node:
        self.nodes += 1
        if self._is_leaf(position, depth):
            return self.evaluator.evaluate(position), None

        best_move = None
        best_score = SCORE_MIN if maximizing else SCORE_MAX

        for move in self.rules.legal_moves(position):
            child = self.rules.apply(position, move)
            score, _ = self.minimax_alpha_beta(child, depth - 1, alpha, beta, not maximizing)

            if maximizing:
                if score > best_score:
                    best_score, best_move = score, move
                alpha = max(alpha, score)
            else:
                if score < best_score:
                    best_score, best_move = score, move
                beta = min(beta, score)

            # The opponent already has a better option elsewhere.
            if beta <= alpha:
                break

        return best_score, best_move
