# chess_engine/config.py
from dataclasses import dataclass, field
import os
import tomllib

import chess

# Material values (centipawns). The king term only has to dominate every
# other term, it carries no strategic signal by itself.
PIECE_VALUES = {
    chess.PAWN: 100,
    chess.KNIGHT: 320,
    chess.BISHOP: 330,
    chess.ROOK: 500,
    chess.QUEEN: 900,
    chess.KING: 20000,
}

@dataclass
class SearchSettings:
    depth: int = 3
    use_pruning: bool = True
    min_depth: int = 1
    max_depth: int = 7

    def clamp_depth(self, depth: int) -> int:
        """Clamp a requested depth into the playable range."""
        return max(self.min_depth, min(self.max_depth, int(depth)))

@dataclass
class UIConfig:
    engine_name: str = "MinimaxChess"
    engine_author: str = "minimax-chess developers"
    api_port: int = 8000
    human_color: str = "white"

@dataclass
class Config:
    search: SearchSettings = field(default_factory=SearchSettings)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "ui"):
            for k, v in raw.get(section, {}).items():
                target = getattr(cfg, section)
                if hasattr(target, k):
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"]).upper()
        return cfg

# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("CHESS_ENGINE_CONFIG_TOML", "config.toml"))
# allow env override of depth for quick debugging
override_depth = os.environ.get("CHESS_ENGINE_SEARCH_DEPTH")
if override_depth and override_depth.isdigit():
    CONFIG.search.depth = CONFIG.search.clamp_depth(int(override_depth))
