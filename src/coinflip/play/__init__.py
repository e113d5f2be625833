"""Match play - drives the real game with MCTS or fixed callers."""

from .match import (
    RoundRecord,
    MatchRecord,
    SeriesResult,
    make_player,
    play_match,
    play_series,
)

__all__ = [
    "RoundRecord",
    "MatchRecord",
    "SeriesResult",
    "make_player",
    "play_match",
    "play_series",
]
