"""
MCTS search implementation with UCB1.

UCB1 selection formula:
U(child) = mean(child) + c * sqrt(ln(N(parent)) / N(child))

mean(child) is taken from the point of view of the side calling at the
parent: the stored average when A calls, 1 - average when B calls.

Each iteration:
1. Select: descend by UCB1 while the node is fully expanded and not terminal
2. Expand: attach the first unexplored call (Heads before Tails)
3. Simulate: play random calls to the end of the game, off-tree
4. Backup: add the terminal reward (A's perspective) up to the root

The decision is the most visited root child (robust child).
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

import numpy as np

from .node import Node, Tree
from ..errors import ConfigurationError
from ..game import (
    Coin,
    GameState,
    OutcomeSource,
    Side,
    apply_move,
    is_terminal,
    legal_moves,
    reward,
    random_outcome_source,
)

RolloutPolicy = Callable[[GameState], Coin]

DEFAULT_EXPLORATION = math.sqrt(2)


@dataclass
class ChildStats:
    """Statistics of one root child, for diagnostics."""

    move: Coin
    visits: int
    mean_reward: float  # Side A's perspective
    win_probability: float  # Root caller's perspective


@dataclass
class SearchResult:
    """
    Outcome of one search.

    move is None when the root state was already terminal.
    """

    move: Optional[Coin]
    caller: Optional[Side]
    win_probability: Optional[float]
    iterations: int = 0
    root_visits: int = 0
    num_nodes: int = 1
    elapsed: float = 0.0
    timed_out: bool = False
    child_stats: Dict[Coin, ChildStats] = field(default_factory=dict)
    tree: Optional[Tree] = field(default=None, repr=False)

    @property
    def game_over(self) -> bool:
        return self.move is None


class MCTS:
    """
    Monte Carlo Tree Search with UCB1 and random rollouts.

    Args:
        outcome_source: Coin used for every simulated flip
        exploration_constant: UCB1 exploration weight (default sqrt(2))
        rollout_policy: Picks a call during simulation (default uniform random)
        rng: Generator for the default rollout policy
        time_limit: Optional soft deadline in seconds, checked between iterations
        check_invariants: Assert visit accounting while searching
    """

    def __init__(
        self,
        outcome_source: OutcomeSource,
        exploration_constant: float = DEFAULT_EXPLORATION,
        rollout_policy: Optional[RolloutPolicy] = None,
        rng: Optional[np.random.Generator] = None,
        time_limit: Optional[float] = None,
        check_invariants: bool = False,
    ):
        if not math.isfinite(exploration_constant) or exploration_constant < 0:
            raise ConfigurationError(
                f"exploration_constant must be finite and >= 0, got {exploration_constant}"
            )
        if time_limit is not None and time_limit <= 0:
            raise ConfigurationError(f"time_limit must be positive, got {time_limit}")

        self.outcome_source = outcome_source
        self.exploration_constant = exploration_constant
        self.rollout_policy = rollout_policy or create_random_rollout_policy(rng)
        self.time_limit = time_limit
        self.check_invariants = check_invariants

    def search(self, state: GameState, iterations: int) -> SearchResult:
        """
        Run MCTS from the given state.

        Args:
            state: Starting game state
            iterations: Number of select/expand/simulate/backup cycles

        Returns:
            SearchResult with the recommended call

        Raises:
            ConfigurationError: if iterations < 1
        """
        if iterations < 1:
            raise ConfigurationError(f"iterations must be at least 1, got {iterations}")

        if is_terminal(state):
            return SearchResult(move=None, caller=None, win_probability=None)

        tree = Tree(state)
        root = tree.root
        start = time.perf_counter()
        deadline = start + self.time_limit if self.time_limit is not None else None

        done = 0
        timed_out = False
        while done < iterations:
            if deadline is not None and done > 0 and time.perf_counter() >= deadline:
                timed_out = True
                break
            self._iterate(tree)
            done += 1

        if self.check_invariants:
            child_visits = sum(c.visits for c in root.children.values())
            assert root.visits == done, f"root visits {root.visits} != {done}"
            assert child_visits == done, f"child visits {child_visits} != {done}"

        return self._result(tree, done, time.perf_counter() - start, timed_out)

    def _iterate(self, tree: Tree) -> None:
        """Run one simulation: select -> expand -> simulate -> backup."""
        node = self._select(tree)
        node = self._expand(tree, node)
        value = self._simulate(node.state)
        self._backup(tree, node, value)

    def _select(self, tree: Tree) -> Node:
        """Descend by UCB1 until a terminal or not fully expanded node."""
        node = tree.root
        while not node.is_terminal() and node.is_fully_expanded():
            if self.check_invariants:
                assert all(c.visits > 0 for c in node.children.values()), (
                    f"unvisited child under fully expanded node {node.id}"
                )
            node = tree.best_child_by_ucb1(node, self.exploration_constant)
        return node

    def _expand(self, tree: Tree, node: Node) -> Node:
        """Attach the first unexplored call. Terminal nodes are returned as is."""
        if node.is_terminal():
            return node
        move = node.unexplored_moves()[0]
        child_state = apply_move(node.state, move, self.outcome_source)
        return tree.add_child(node, move, child_state)

    def _simulate(self, state: GameState) -> float:
        """Play out to the end of the game and return A's reward."""
        while not is_terminal(state):
            move = self.rollout_policy(state)
            state = apply_move(state, move, self.outcome_source)
        return reward(state)

    def _backup(self, tree: Tree, node: Node, value: float) -> None:
        """
        Backup value through the parent chain.

        The value stays in A's perspective at every level; selection does
        the flip for B.
        """
        for current in tree.path_to_root(node):
            current.update(value)

    def _result(
        self,
        tree: Tree,
        iterations: int,
        elapsed: float,
        timed_out: bool,
    ) -> SearchResult:
        root = tree.root
        caller = root.state.current_caller
        best = tree.best_child_by_visits(root)

        stats = {
            move: ChildStats(
                move=move,
                visits=child.visits,
                mean_reward=child.mean_reward,
                win_probability=child.value_for(caller),
            )
            for move, child in sorted(root.children.items())
        }

        return SearchResult(
            move=best.move,
            caller=caller,
            win_probability=best.value_for(caller),
            iterations=iterations,
            root_visits=root.visits,
            num_nodes=len(tree),
            elapsed=elapsed,
            timed_out=timed_out,
            child_stats=stats,
            tree=tree,
        )


def create_random_rollout_policy(
    rng: Optional[np.random.Generator] = None,
) -> RolloutPolicy:
    """Create a rollout policy calling uniformly at random."""
    if rng is None:
        rng = np.random.default_rng()

    def policy(state: GameState) -> Coin:
        moves = legal_moves(state)
        return moves[int(rng.integers(len(moves)))]

    return policy


def create_greedy_rollout_policy(coin: Coin = Coin.HEADS) -> RolloutPolicy:
    """Create a rollout policy that always makes the same call."""
    coin = Coin(coin)

    def policy(state: GameState) -> Coin:
        return coin

    return policy


def run_search(
    initial_state: GameState,
    iterations: int,
    exploration_constant: float = DEFAULT_EXPLORATION,
    outcome_source: Optional[OutcomeSource] = None,
    seed: Optional[int] = None,
) -> Optional[Coin]:
    """
    Recommend a call for the side to move.

    Args:
        initial_state: State to search from
        iterations: Search budget
        exploration_constant: UCB1 exploration weight
        outcome_source: Simulated coin (seeded fair coin if None)
        seed: Seed for the default coin and rollout policy

    Returns:
        The recommended call, or None if the game is already over
    """
    rng = np.random.default_rng(seed)
    if outcome_source is None:
        outcome_source = random_outcome_source(rng)

    mcts = MCTS(
        outcome_source=outcome_source,
        exploration_constant=exploration_constant,
        rng=rng,
    )
    return mcts.search(initial_state, iterations).move
