"""
Outcome sources: zero-argument callables that return a coin flip.

The engine only ever calls a source; seeding and scripting live here.
"""

from __future__ import annotations

from itertools import cycle as _cycle
from typing import Iterable, Optional

import numpy as np

from .coinflip import Coin, OutcomeSource
from ..errors import ConfigurationError


def random_outcome_source(rng: Optional[np.random.Generator] = None) -> OutcomeSource:
    """
    Create a fair coin backed by a numpy Generator.

    Args:
        rng: Generator to draw from (a fresh unseeded one if None)

    Returns:
        Callable returning Heads or Tails with probability 0.5 each
    """
    if rng is None:
        rng = np.random.default_rng()

    def flip() -> Coin:
        return Coin(int(rng.integers(2)))

    return flip


def fixed_outcome_source(coin: Coin) -> OutcomeSource:
    """Create a coin that always lands on the same face."""
    coin = Coin(coin)

    def flip() -> Coin:
        return coin

    return flip


def sequence_outcome_source(coins: Iterable[Coin], cycle: bool = True) -> OutcomeSource:
    """
    Create a coin that replays a scripted sequence of flips.

    Args:
        coins: Flips to replay, in order
        cycle: Restart from the beginning when the script runs out

    Raises:
        ConfigurationError: if the script is empty, or when a non-cycling
            script is exhausted
    """
    script = [Coin(c) for c in coins]
    if not script:
        raise ConfigurationError("Outcome sequence must not be empty")
    it = _cycle(script) if cycle else iter(script)

    def flip() -> Coin:
        try:
            return next(it)
        except StopIteration:
            raise ConfigurationError(
                f"Outcome sequence exhausted after {len(script)} flips"
            ) from None

    return flip
