"""MCTS module."""

from .node import Node, Tree
from .search import (
    DEFAULT_EXPLORATION,
    MCTS,
    ChildStats,
    SearchResult,
    create_random_rollout_policy,
    create_greedy_rollout_policy,
    run_search,
)

__all__ = [
    "Node",
    "Tree",
    "DEFAULT_EXPLORATION",
    "MCTS",
    "ChildStats",
    "SearchResult",
    "create_random_rollout_policy",
    "create_greedy_rollout_policy",
    "run_search",
]
