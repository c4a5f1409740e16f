"""FastAPI REST interface for playing against the engine."""

import logging
import threading
from typing import Optional

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from chess_engine.config import CONFIG
from chess_engine.core.search import SearchResult
from chess_engine.main import Engine

logging.basicConfig(level=CONFIG.log_level)
_log = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# One shared game; every request, searches included, holds the lock.
engine = Engine()
_board_lock = threading.Lock()


class FenRequest(BaseModel):
    fen: str


class MoveRequest(BaseModel):
    move: str  # UCI format e.g. "e2e4"


class SearchRequest(BaseModel):
    depth: Optional[int] = Field(default=None, ge=0, le=CONFIG.search.max_depth)
    use_pruning: Optional[bool] = None


class SettingsRequest(BaseModel):
    depth: Optional[int] = None
    use_pruning: Optional[bool] = None


def _search_payload(result: SearchResult) -> dict:
    return {
        "best_move": result.best_move.uci() if result.best_move else None,
        "score": result.score,
        "nodes": result.nodes_visited,
        "elapsed": result.elapsed,
    }


def _board_payload() -> dict:
    board = engine.board.board
    winner = engine.winner()
    return {
        "fen": board.fen(),
        "turn": chess.COLOR_NAMES[board.turn],
        "legal_moves": engine.board.get_legal_moves(),
        "status": engine.status().value,
        "is_game_over": engine.is_game_over(),
        "winner": chess.COLOR_NAMES[winner] if winner is not None else None,
        "captured": {
            chess.COLOR_NAMES[color]: [chess.piece_symbol(pt) for pt in pieces]
            for color, pieces in engine.captured.items()
        },
    }


@app.get("/board")
def get_board():
    with _board_lock:
        return _board_payload()


@app.post("/position")
def set_position(req: FenRequest):
    with _board_lock:
        try:
            engine.board.set_fen(req.fen)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid FEN: {e}")
        return {"fen": engine.board.get_fen()}


@app.post("/move")
def make_move(req: MoveRequest):
    with _board_lock:
        if engine.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        if not engine.make_move(req.move):
            raise HTTPException(status_code=400, detail=f"Illegal move: {req.move}")
        return {"fen": engine.board.get_fen(), "move": engine.board.move_history[-1]}


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _board_lock:
        if engine.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        result = engine.analyse(depth=req.depth, use_pruning=req.use_pruning)
        return {**_search_payload(result), "fen": engine.board.get_fen()}


@app.post("/engine-move")
def engine_move():
    with _board_lock:
        result = engine.play_engine_move()
        if result is None:
            raise HTTPException(status_code=400, detail="Game is already over")
        return {**_search_payload(result), **_board_payload()}


@app.get("/evaluate")
def evaluate_position():
    with _board_lock:
        return {"score": engine.evaluation(), "fen": engine.board.get_fen()}


@app.post("/settings")
def update_settings(req: SettingsRequest):
    with _board_lock:
        if req.depth is not None:
            engine.set_depth(req.depth)
        if req.use_pruning is not None:
            engine.pruning = req.use_pruning
        return {"depth": engine.depth, "use_pruning": engine.pruning}


@app.post("/reset")
def reset_board():
    with _board_lock:
        engine.reset()
        _log.info("board reset")
        return {"fen": engine.board.get_fen()}


def main():
    """Entry point for running the server."""
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=CONFIG.ui.api_port)


if __name__ == "__main__":
    main()
