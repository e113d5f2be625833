"""
Match runner: plays the real game round by round.

Before every round the calling side picks a call (a fresh MCTS search, or a
fixed policy), then the match coin is flipped and the round is scored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from ..errors import ConfigurationError, InvalidStateError
from ..game import (
    CallerRule,
    Coin,
    GameState,
    OutcomeSource,
    Side,
    initial_state,
    is_terminal,
    random_outcome_source,
    resolve_round,
    round_winner,
    winner,
)
from ..mcts import MCTS, DEFAULT_EXPLORATION, create_random_rollout_policy


@dataclass
class RoundRecord:
    """Record of one played round."""

    round: int  # 0-based
    caller: Side
    call: Coin
    outcome: Coin
    winner: Side
    score_a: int  # After the round
    score_b: int
    win_probability: Optional[float] = None  # Caller's estimate, MCTS only

    def to_dict(self) -> dict:
        return {
            "round": self.round,
            "caller": self.caller.value,
            "call": self.call.name,
            "outcome": self.outcome.name,
            "winner": self.winner.value,
            "score_a": self.score_a,
            "score_b": self.score_b,
            "win_probability": self.win_probability,
        }


@dataclass
class MatchRecord:
    """Record of a complete match."""

    rounds: List[RoundRecord]
    final_state: GameState

    @property
    def score_a(self) -> int:
        return self.final_state.score_a

    @property
    def score_b(self) -> int:
        return self.final_state.score_b

    @property
    def winner(self) -> Optional[Side]:
        """Winning side, None for a tie."""
        return winner(self.final_state)

    @property
    def is_tie(self) -> bool:
        return self.winner is None

    @property
    def winner_label(self) -> str:
        result = self.winner
        return "Tie" if result is None else f"{result} wins"

    def summary(self) -> dict:
        result = self.winner
        return {
            "total_rounds": self.final_state.total_rounds,
            "score_a": self.score_a,
            "score_b": self.score_b,
            "winner": None if result is None else result.value,
        }


@dataclass
class SeriesResult:
    """Results of several matches, counted for side A."""

    a_wins: int = 0
    b_wins: int = 0
    ties: int = 0
    matches: List[MatchRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.a_wins + self.b_wins + self.ties

    @property
    def score(self) -> float:
        """Side A's score counting ties as half."""
        return (self.a_wins + 0.5 * self.ties) / self.total if self.total > 0 else 0.0


CallPolicy = Callable[[GameState], Tuple[Coin, Optional[float]]]


def make_player(
    kind: str,
    iterations: int = 1000,
    exploration_constant: float = DEFAULT_EXPLORATION,
    time_limit: Optional[float] = None,
    rng: Optional[np.random.Generator] = None,
    outcome_source: Optional[OutcomeSource] = None,
) -> CallPolicy:
    """
    Build a calling policy for one side.

    Args:
        kind: "mcts", "heads", "tails" or "random"
        iterations: Search budget per call (mcts only)
        exploration_constant: UCB1 constant (mcts only)
        time_limit: Soft deadline per call (mcts only)
        rng: Generator for simulated flips, rollouts and random calls
        outcome_source: Coin for simulated flips (a fair coin from rng if None)

    Returns:
        Function mapping a state to (call, estimated win probability)
    """
    if rng is None:
        rng = np.random.default_rng()

    if kind == "heads":
        return lambda state: (Coin.HEADS, None)
    if kind == "tails":
        return lambda state: (Coin.TAILS, None)
    if kind == "random":
        pick = create_random_rollout_policy(rng)
        return lambda state: (pick(state), None)
    if kind != "mcts":
        raise ConfigurationError(
            f"Unknown player '{kind}'. Available: mcts, heads, tails, random"
        )

    if iterations < 1:
        raise ConfigurationError(f"iterations must be at least 1, got {iterations}")

    # Simulated flips use their own coin so searching never touches the match coin
    if outcome_source is None:
        outcome_source = random_outcome_source(rng)
    mcts = MCTS(
        outcome_source=outcome_source,
        exploration_constant=exploration_constant,
        rng=rng,
        time_limit=time_limit,
    )

    def call(state: GameState) -> Tuple[Coin, Optional[float]]:
        result = mcts.search(state, iterations)
        return result.move, result.win_probability

    return call


def play_match(
    total_rounds: int,
    player_a: CallPolicy,
    player_b: CallPolicy,
    outcome_source: OutcomeSource,
    caller_rule: CallerRule = CallerRule.FIXED,
    round_callback: Optional[Callable[[RoundRecord], None]] = None,
) -> MatchRecord:
    """
    Play a complete match.

    Args:
        total_rounds: Number of rounds
        player_a: Calling policy for side A
        player_b: Calling policy for side B
        outcome_source: The real coin
        caller_rule: Which side calls each round
        round_callback: Optional callback(record) after every round

    Returns:
        MatchRecord with every round and the final state
    """
    state = initial_state(total_rounds, caller_rule)
    players: Dict[Side, CallPolicy] = {Side.A: player_a, Side.B: player_b}
    rounds: List[RoundRecord] = []

    while not is_terminal(state):
        caller = state.current_caller
        call, estimate = players[caller](state)
        if not isinstance(call, Coin):
            raise InvalidStateError(f"{caller} returned invalid call {call!r}, must be a Coin")
        outcome = outcome_source()
        round_won_by = round_winner(state, call, outcome)
        next_state = resolve_round(state, call, outcome)

        record = RoundRecord(
            round=state.round,
            caller=caller,
            call=call,
            outcome=outcome,
            winner=round_won_by,
            score_a=next_state.score_a,
            score_b=next_state.score_b,
            win_probability=estimate,
        )
        rounds.append(record)
        if round_callback:
            round_callback(record)

        state = next_state

    return MatchRecord(rounds=rounds, final_state=state)


def play_series(
    num_matches: int,
    total_rounds: int,
    player_a: CallPolicy,
    player_b: CallPolicy,
    outcome_source: OutcomeSource,
    caller_rule: CallerRule = CallerRule.FIXED,
    progress_callback: Optional[Callable[[int, MatchRecord], None]] = None,
) -> SeriesResult:
    """
    Play several matches with the same players and coin.

    Args:
        num_matches: Number of matches to play
        progress_callback: Optional callback(matches_completed, record)

    Returns:
        SeriesResult from side A's perspective
    """
    if num_matches < 1:
        raise ConfigurationError(f"num_matches must be at least 1, got {num_matches}")

    result = SeriesResult()
    for i in range(num_matches):
        record = play_match(
            total_rounds=total_rounds,
            player_a=player_a,
            player_b=player_b,
            outcome_source=outcome_source,
            caller_rule=caller_rule,
        )
        result.matches.append(record)
        if record.winner is Side.A:
            result.a_wins += 1
        elif record.winner is Side.B:
            result.b_wins += 1
        else:
            result.ties += 1

        if progress_callback:
            progress_callback(i + 1, record)

    return result
