"""
Integration test suite for the minimax chess engine.

Tests components working together end-to-end:
- Engine vs engine games through the search core
- Game session wrapper (human move, engine reply, outcome, settings)
- Terminal interface command handling and play loop
- FastAPI REST API flows
"""

import chess
import pytest

from chess_engine.config import CONFIG
from chess_engine.core.board import GameStatus
from chess_engine.core.search import SearchConfig, SearchEngine
from chess_engine.main import Engine

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
STALEMATE = "5k2/5P2/5K2/8/8/8/8/8 b - - 0 1"


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE
# ════════════════════════════════════════════════════════════════════════════


class TestSelfPlay:
    def test_engine_vs_engine_plays_legal_moves(self):
        """Both sides use the same searcher and alternate correctly."""
        engine = SearchEngine()
        board = chess.Board()

        for i in range(8):
            expected_turn = chess.WHITE if i % 2 == 0 else chess.BLACK
            assert board.turn == expected_turn
            result = engine.search(board, SearchConfig.for_position(board, depth=2))
            assert result.best_move in board.legal_moves
            board.push(result.best_move)

    def test_pruned_and_plain_play_the_same_game(self):
        plain, pruned = SearchEngine(), SearchEngine()
        board = chess.Board()
        for _ in range(4):
            a = plain.search(board, SearchConfig.for_position(board, depth=2, use_pruning=False))
            b = pruned.search(board, SearchConfig.for_position(board, depth=2, use_pruning=True))
            assert a.best_move == b.best_move
            assert a.score == b.score
            board.push(a.best_move)

    def test_queen_ending_reaches_game_over_or_keeps_material(self):
        """White keeps its queen while pushing the lone king around."""
        engine = Engine(depth=2, fen="8/8/8/4k3/8/8/8/4K2Q w - - 0 1")
        for _ in range(20):
            if engine.is_game_over():
                break
            engine.play_engine_move()
        assert engine.evaluation() > 800 or engine.winner() == chess.WHITE


# ════════════════════════════════════════════════════════════════════════════
#  GAME SESSION
# ════════════════════════════════════════════════════════════════════════════


class TestEngineWrapper:
    def test_defaults_from_config(self):
        engine = Engine()
        assert engine.depth == CONFIG.search.clamp_depth(CONFIG.search.depth)
        assert engine.pruning == CONFIG.search.use_pruning

    def test_depth_is_clamped(self):
        engine = Engine(depth=20)
        assert engine.depth == CONFIG.search.max_depth
        assert engine.set_depth(0) == CONFIG.search.min_depth

    def test_human_then_engine(self):
        engine = Engine(depth=1)
        assert engine.make_move("e2e4") is True
        result = engine.play_engine_move()
        assert result is not None
        assert result.best_move is not None
        assert engine.board.board.turn == chess.WHITE
        assert len(engine.board.move_history) == 2
        assert engine.last_result is result

    def test_invalid_move_rejected(self):
        engine = Engine(depth=1)
        assert engine.make_move("e2e5") is False
        assert engine.board.get_fen() == chess.STARTING_FEN

    def test_get_best_move_from_fen(self):
        engine = Engine(depth=1, fen="4k3/8/8/3q4/8/8/8/3RK3 w - - 0 1")
        move, score = engine.get_best_move()
        assert move == "d1d5"
        assert score > 0
        # Analysis alone never changes the board.
        assert engine.board.get_fen() == "4k3/8/8/3q4/8/8/8/3RK3 w - - 0 1"

    def test_analyse_overrides(self):
        engine = Engine(depth=3)
        result = engine.analyse(depth=0)
        assert result.best_move is None
        assert result.nodes_visited == 1
        assert result.score == engine.evaluation()

    def test_checkmate_outcome(self):
        engine = Engine(fen=FOOLS_MATE)
        assert engine.status() is GameStatus.CHECKMATE
        assert engine.winner() == chess.BLACK
        assert engine.play_engine_move() is None

    def test_outcome_summary(self):
        assert Engine().outcome() is None
        mate = Engine(fen=FOOLS_MATE).outcome()
        assert mate.termination == chess.Termination.CHECKMATE
        assert mate.winner == chess.BLACK
        draw = Engine(fen=STALEMATE).outcome()
        assert draw.termination == chess.Termination.STALEMATE
        assert draw.winner is None

    def test_stalemate_outcome(self):
        engine = Engine(fen=STALEMATE)
        assert engine.status() is GameStatus.STALEMATE
        assert engine.winner() is None
        assert engine.is_game_over()

    def test_reset_clears_stats(self):
        engine = Engine(depth=1)
        engine.make_move("e2e4")
        engine.play_engine_move()
        engine.reset()
        assert engine.board.get_fen() == chess.STARTING_FEN
        assert engine.last_result is None
        assert engine.captured == {chess.WHITE: [], chess.BLACK: []}

    def test_engine_takes_hanging_queen(self):
        engine = Engine(depth=2, fen="4k3/8/8/3q4/8/8/8/3RK3 w - - 0 1")
        engine.play_engine_move()
        assert engine.captured[chess.BLACK] == [chess.QUEEN]


# ════════════════════════════════════════════════════════════════════════════
#  TERMINAL INTERFACE
# ════════════════════════════════════════════════════════════════════════════


class TestCLI:
    def setup_method(self):
        from interface import cli

        self.cli = cli
        self.engine = Engine(depth=1)

    def test_move_command(self):
        running, msg = self.cli.handle_command(self.engine, "e2e4")
        assert running is True
        assert "e2e4" in msg
        assert self.engine.board.move_history == ["e2e4"]

    def test_illegal_move_message(self):
        running, msg = self.cli.handle_command(self.engine, "e2e5")
        assert running is True
        assert msg.startswith("Illegal move")

    def test_quit(self):
        running, _ = self.cli.handle_command(self.engine, "quit")
        assert running is False

    def test_depth_and_pruning_settings(self):
        _, msg = self.cli.handle_command(self.engine, "depth 5")
        assert self.engine.depth == 5
        assert "5" in msg
        self.cli.handle_command(self.engine, "depth 99")
        assert self.engine.depth == CONFIG.search.max_depth
        self.cli.handle_command(self.engine, "pruning off")
        assert self.engine.pruning is False
        _, msg = self.cli.handle_command(self.engine, "pruning maybe")
        assert msg.startswith("usage")

    def test_undo_takes_back_pair(self):
        self.cli.handle_command(self.engine, "e2e4")
        self.engine.play_engine_move()
        self.cli.handle_command(self.engine, "undo")
        assert self.engine.board.get_fen() == chess.STARTING_FEN

    def test_eval_command(self):
        _, msg = self.cli.handle_command(self.engine, "eval")
        assert msg == "eval +0.00"

    def test_moves_refused_after_game_over(self):
        engine = Engine(fen=FOOLS_MATE)
        _, msg = self.cli.handle_command(engine, "e2e4")
        assert "over" in msg
        assert self.cli.outcome_message(engine) == "black won!"
        assert self.cli.outcome_message(Engine(fen=STALEMATE)) == "it's a draw!"

    def test_play_loop(self):
        inputs = iter(["e2e4"])
        output = []

        def read(prompt):
            try:
                return next(inputs)
            except StopIteration:
                raise EOFError

        self.cli.run(self.engine, chess.WHITE, read=read, write=output.append)
        text = "\n".join(output)
        assert "Engine plays:" in text
        assert "nodes searched in" in text
        assert len(self.engine.board.move_history) == 2

    def test_engine_opens_when_human_is_black(self):
        output = []

        def read(prompt):
            raise EOFError

        self.cli.run(self.engine, chess.BLACK, read=read, write=output.append)
        assert len(self.engine.board.move_history) == 1
        assert output[0].startswith("Engine plays:")


# ════════════════════════════════════════════════════════════════════════════
#  REST API
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    """Tests FastAPI REST API endpoints."""

    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app, engine

        self.client = TestClient(app)
        # Reset state before each test
        engine.reset()
        engine.set_depth(2)
        engine.pruning = True

    def test_get_board_initial(self):
        response = self.client.get("/board")
        assert response.status_code == 200
        data = response.json()
        assert data["fen"] == chess.STARTING_FEN
        assert data["turn"] == "white"
        assert data["status"] == "ongoing"
        assert data["is_game_over"] is False
        assert len(data["legal_moves"]) == 20

    def test_post_move_valid(self):
        response = self.client.post("/move", json={"move": "e2e4"})
        assert response.status_code == 200
        data = response.json()
        assert data["move"] == "e2e4"
        assert "4P3" in data["fen"]  # Pawn on e4 in FEN notation

    def test_post_move_illegal(self):
        response = self.client.post("/move", json={"move": "e2e5"})
        assert response.status_code == 400

    def test_post_move_invalid_format(self):
        response = self.client.post("/move", json={"move": "zzzz"})
        assert response.status_code == 400

    def test_set_position_valid(self):
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
        response = self.client.post("/position", json={"fen": fen})
        assert response.status_code == 200
        assert response.json()["fen"] == fen

    def test_set_position_invalid(self):
        response = self.client.post("/position", json={"fen": "invalid"})
        assert response.status_code == 400

    def test_search_returns_move(self):
        response = self.client.post("/search", json={"depth": 1, "use_pruning": False})
        assert response.status_code == 200
        data = response.json()
        assert data["nodes"] == 21
        move = chess.Move.from_uci(data["best_move"])
        assert move in chess.Board().legal_moves
        # Search alone does not play the move.
        assert data["fen"] == chess.STARTING_FEN

    def test_search_rejects_depth_above_max(self):
        """Too deep a request is refused before any search starts."""
        from interface.api import engine

        calls = []
        original = engine.search.search
        engine.search.search = lambda position, config: calls.append(config) or original(position, config)
        try:
            response = self.client.post("/search", json={"depth": CONFIG.search.max_depth + 1})
        finally:
            del engine.search.search
        assert response.status_code == 422
        assert calls == []

    def test_search_accepts_depth_zero(self):
        response = self.client.post("/search", json={"depth": 0})
        assert response.status_code == 200
        data = response.json()
        assert data["best_move"] is None
        assert data["nodes"] == 1

    def test_search_rejects_negative_depth(self):
        response = self.client.post("/search", json={"depth": -1})
        assert response.status_code == 422

    def test_search_default_settings(self):
        response = self.client.post("/search")
        assert response.status_code == 200
        assert response.json()["best_move"] is not None

    def test_search_game_over_returns_400(self):
        self.client.post("/position", json={"fen": FOOLS_MATE})
        response = self.client.post("/search")
        assert response.status_code == 400
        board = self.client.get("/board").json()
        assert board["status"] == "checkmate"
        assert board["winner"] == "black"

    def test_engine_move_plays_reply(self):
        self.client.post("/move", json={"move": "e2e4"})
        response = self.client.post("/engine-move")
        assert response.status_code == 200
        data = response.json()
        assert data["turn"] == "white"
        assert data["best_move"] is not None
        assert data["nodes"] > 0

    def test_engine_move_game_over(self):
        self.client.post("/position", json={"fen": STALEMATE})
        assert self.client.post("/engine-move").status_code == 400

    def test_evaluate(self):
        response = self.client.get("/evaluate")
        assert response.status_code == 200
        assert response.json()["score"] == 0

    def test_settings(self):
        response = self.client.post("/settings", json={"depth": 9, "use_pruning": False})
        assert response.json() == {"depth": CONFIG.search.max_depth, "use_pruning": False}

    def test_captured_reported(self):
        for m in ["e2e4", "d7d5", "e4d5"]:
            self.client.post("/move", json={"move": m})
        data = self.client.get("/board").json()
        assert data["captured"]["black"] == ["p"]
        assert data["captured"]["white"] == []

    def test_reset_board(self):
        self.client.post("/move", json={"move": "e2e4"})
        response = self.client.post("/reset")
        assert response.status_code == 200
        assert response.json()["fen"] == chess.STARTING_FEN
