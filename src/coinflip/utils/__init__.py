"""Utilities module."""

from .config import (
    PLAYER_KINDS,
    Config,
    MCTSConfig,
    GameConfig,
    MatchConfig,
    get_default_config,
)
from .seed import make_rng
from .logging import (
    MatchLogger,
    console,
    create_progress,
    print_config,
    print_search_result,
)

__all__ = [
    "PLAYER_KINDS",
    "Config",
    "MCTSConfig",
    "GameConfig",
    "MatchConfig",
    "get_default_config",
    "make_rng",
    "MatchLogger",
    "console",
    "create_progress",
    "print_config",
    "print_search_result",
]
