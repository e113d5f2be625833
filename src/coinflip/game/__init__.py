"""Game module - coin-flip rules and outcome sources."""

from .coinflip import (
    MOVES,
    WIN_REWARD,
    TIE_REWARD,
    LOSS_REWARD,
    Coin,
    Side,
    CallerRule,
    GameState,
    OutcomeSource,
    initial_state,
    legal_moves,
    apply_move,
    resolve_round,
    round_winner,
    is_terminal,
    winner,
    reward,
    render,
)

from .outcome import (
    random_outcome_source,
    fixed_outcome_source,
    sequence_outcome_source,
)

__all__ = [
    "MOVES",
    "WIN_REWARD",
    "TIE_REWARD",
    "LOSS_REWARD",
    "Coin",
    "Side",
    "CallerRule",
    "GameState",
    "OutcomeSource",
    "initial_state",
    "legal_moves",
    "apply_move",
    "resolve_round",
    "round_winner",
    "is_terminal",
    "winner",
    "reward",
    "render",
    "random_outcome_source",
    "fixed_outcome_source",
    "sequence_outcome_source",
]
