"""
Coin-flip MCTS - Monte Carlo Tree Search for a repeated heads-or-tails game.

Two sides play a fixed number of rounds. Each round the caller calls Heads
or Tails, the coin is flipped, and the caller scores if the call matches.
Whoever leads after the last round wins.

Usage:
    from coinflip.game import initial_state, random_outcome_source
    from coinflip.mcts import MCTS, run_search
    from coinflip.utils import make_rng

    state = initial_state(total_rounds=10)
    move = run_search(state, iterations=1000, seed=42)

    rng = make_rng(42)
    mcts = MCTS(outcome_source=random_outcome_source(rng), rng=rng)
    result = mcts.search(state, iterations=1000)
    print(result.move, result.win_probability)
"""

__version__ = "0.1.0"

from . import errors
from . import game
from . import mcts
from . import play
from . import utils

__all__ = [
    "errors",
    "game",
    "mcts",
    "play",
    "utils",
    "__version__",
]
