"""
Coin-flip game logic.

Each round one side (the caller) calls Heads or Tails, a coin is flipped,
and the caller scores a point if the call matches the flip. Otherwise the
other side scores. After a fixed number of rounds the side with more points
wins; equal points is a tie.

States are immutable. The flip is never taken from global random state:
apply_move() receives an outcome source so that searches and real play share
the same transition and tests can script the coin.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Optional, Tuple

from ..errors import ConfigurationError, InvalidStateError


class Coin(IntEnum):
    """A coin face. Used both as a flip outcome and as a call (move)."""

    HEADS = 0
    TAILS = 1

    def __str__(self) -> str:
        return self.name.capitalize()

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)


# Move order used for expansion and every tie-break
MOVES: Tuple[Coin, ...] = (Coin.HEADS, Coin.TAILS)

OutcomeSource = Callable[[], Coin]


class Side(Enum):
    """One of the two players."""

    A = "A"
    B = "B"

    @property
    def opponent(self) -> Side:
        return Side.B if self is Side.A else Side.A

    def __str__(self) -> str:
        return self.value


class CallerRule(Enum):
    """Decides which side calls the coin in a given round."""

    FIXED = "fixed"  # A calls every round
    ALTERNATE = "alternate"  # A on even rounds, B on odd rounds

    @classmethod
    def parse(cls, value) -> CallerRule:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            available = ", ".join(r.value for r in cls)
            raise ConfigurationError(
                f"Unknown caller rule '{value}'. Available: {available}"
            ) from None


# Terminal rewards, always from side A's perspective
WIN_REWARD = 1.0
TIE_REWARD = 0.5
LOSS_REWARD = 0.0


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a match between rounds."""

    round: int
    score_a: int
    score_b: int
    total_rounds: int
    caller_rule: CallerRule = CallerRule.FIXED

    def __post_init__(self):
        if not isinstance(self.caller_rule, CallerRule):
            object.__setattr__(self, "caller_rule", CallerRule.parse(self.caller_rule))
        if self.total_rounds < 1:
            raise InvalidStateError(
                f"total_rounds must be at least 1, got {self.total_rounds}"
            )
        if not 0 <= self.round <= self.total_rounds:
            raise InvalidStateError(
                f"round {self.round} outside 0..{self.total_rounds}"
            )
        if self.score_a < 0 or self.score_b < 0:
            raise InvalidStateError("Scores must be non-negative")
        if self.score_a + self.score_b != self.round:
            raise InvalidStateError(
                f"Scores {self.score_a}+{self.score_b} do not add up to round {self.round}"
            )

    @classmethod
    def initial(
        cls,
        total_rounds: int,
        caller_rule: CallerRule = CallerRule.FIXED,
    ) -> GameState:
        return initial_state(total_rounds, caller_rule)

    @property
    def current_caller(self) -> Side:
        """Side whose call decides the current round."""
        if self.caller_rule is CallerRule.ALTERNATE and self.round % 2 == 1:
            return Side.B
        return Side.A

    def apply_move(self, move: Coin, outcome_source: OutcomeSource) -> GameState:
        return apply_move(self, move, outcome_source)


def initial_state(
    total_rounds: int,
    caller_rule: CallerRule = CallerRule.FIXED,
) -> GameState:
    """Create the state before the first flip."""
    if total_rounds < 1:
        raise ConfigurationError(f"total_rounds must be at least 1, got {total_rounds}")
    return GameState(
        round=0,
        score_a=0,
        score_b=0,
        total_rounds=total_rounds,
        caller_rule=CallerRule.parse(caller_rule),
    )


def is_terminal(state: GameState) -> bool:
    return state.round == state.total_rounds


def legal_moves(state: GameState) -> Tuple[Coin, ...]:
    """Both calls are legal until the last round has been played."""
    if is_terminal(state):
        return ()
    return MOVES


def round_winner(state: GameState, move: Coin, outcome: Coin) -> Side:
    """The caller wins the round if the call matches the flip."""
    caller = state.current_caller
    return caller if move == outcome else caller.opponent


def resolve_round(state: GameState, move: Coin, outcome: Coin) -> GameState:
    """
    Advance one round with an already known flip.

    Args:
        state: State before the round
        move: The caller's call
        outcome: The flip

    Returns:
        State after the round

    Raises:
        InvalidStateError: if the state is terminal or move is not a Coin
    """
    if is_terminal(state):
        raise InvalidStateError(
            f"Game is over after {state.total_rounds} rounds, no moves remain"
        )
    if not isinstance(move, Coin):
        raise InvalidStateError(f"Invalid move {move!r}, must be a Coin")

    winner = round_winner(state, move, Coin(outcome))
    return GameState(
        round=state.round + 1,
        score_a=state.score_a + (1 if winner is Side.A else 0),
        score_b=state.score_b + (1 if winner is Side.B else 0),
        total_rounds=state.total_rounds,
        caller_rule=state.caller_rule,
    )


def apply_move(state: GameState, move: Coin, outcome_source: OutcomeSource) -> GameState:
    """
    Play one round: flip the coin and score it against the call.

    The outcome source is only consulted once the move has been checked,
    so a rejected move never consumes a flip.
    """
    if is_terminal(state):
        raise InvalidStateError(
            f"Game is over after {state.total_rounds} rounds, no moves remain"
        )
    if not isinstance(move, Coin):
        raise InvalidStateError(f"Invalid move {move!r}, must be a Coin")
    return resolve_round(state, move, outcome_source())


def winner(state: GameState) -> Optional[Side]:
    """Side with the strictly higher score, or None for a tie."""
    if not is_terminal(state):
        raise InvalidStateError(
            f"Winner is undefined at round {state.round} of {state.total_rounds}"
        )
    if state.score_a > state.score_b:
        return Side.A
    if state.score_b > state.score_a:
        return Side.B
    return None


def reward(state: GameState) -> float:
    """Terminal reward for side A: 1 win, 0.5 tie, 0 loss."""
    result = winner(state)
    if result is None:
        return TIE_REWARD
    return WIN_REWARD if result is Side.A else LOSS_REWARD


def render(state: GameState) -> str:
    """Render the score line for display."""
    if is_terminal(state):
        result = winner(state)
        status = "tie" if result is None else f"{result} wins"
        return f"Final {state.score_a}-{state.score_b} ({status})"
    return (
        f"Round {state.round + 1}/{state.total_rounds}  "
        f"A {state.score_a} - {state.score_b} B  "
        f"({state.current_caller} to call)"
    )
