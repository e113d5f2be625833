"""
MCTS tree data structures.

Each node represents a game state and stores:
- visits: number of simulations that passed through it
- total_reward: sum of their rewards, always from side A's perspective
- children: one child per explored call (Heads / Tails)

Nodes live in a Tree arena. A child refers to its parent by id only, so the
tree has a single owner for every node and no reference cycles.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from ..errors import EmptyTreeError, InvalidStateError
from ..game import Coin, GameState, Side, MOVES, is_terminal, legal_moves


@dataclass
class Node:
    """
    MCTS tree node.

    Children are created lazily during expansion, at most one per move.
    """

    id: int
    state: GameState
    move: Optional[Coin] = None  # Call that led to this node
    parent_id: Optional[int] = None

    visits: int = 0
    total_reward: float = 0.0

    children: Dict[Coin, Node] = field(default_factory=dict)

    @property
    def mean_reward(self) -> float:
        """Average reward for side A, 0.0 before the first visit."""
        if self.visits == 0:
            return 0.0
        return self.total_reward / self.visits

    def value_for(self, side: Side) -> float:
        """Average reward seen from the given side."""
        mean = self.mean_reward
        return mean if side is Side.A else 1.0 - mean

    def is_terminal(self) -> bool:
        return is_terminal(self.state)

    def is_fully_expanded(self) -> bool:
        return len(self.children) == len(legal_moves(self.state))

    def unexplored_moves(self) -> List[Coin]:
        """Legal moves without a child yet, Heads before Tails."""
        return [m for m in legal_moves(self.state) if m not in self.children]

    def update(self, reward: float) -> None:
        self.visits += 1
        self.total_reward += reward


class Tree:
    """
    Arena owning every node of one search.

    Args:
        state: Root state
    """

    def __init__(self, state: GameState):
        self._nodes: List[Node] = []
        self.root = self._new_node(state, move=None, parent_id=None)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def _new_node(
        self,
        state: GameState,
        move: Optional[Coin],
        parent_id: Optional[int],
    ) -> Node:
        node = Node(id=len(self._nodes), state=state, move=move, parent_id=parent_id)
        self._nodes.append(node)
        return node

    def parent(self, node: Node) -> Optional[Node]:
        if node.parent_id is None:
            return None
        return self._nodes[node.parent_id]

    def add_child(self, parent: Node, move: Coin, state: GameState) -> Node:
        """Create and attach the child for an unexplored move."""
        if move in parent.children:
            raise InvalidStateError(f"Node {parent.id} already has a child for {move}")
        if move not in legal_moves(parent.state):
            raise InvalidStateError(f"{move} is not legal at node {parent.id}")
        child = self._new_node(state, move=move, parent_id=parent.id)
        parent.children[move] = child
        return child

    def path_to_root(self, node: Node) -> Iterator[Node]:
        """Yield node, its parent, ... up to and including the root."""
        current: Optional[Node] = node
        while current is not None:
            yield current
            current = self.parent(current)

    def depth(self) -> int:
        """Length of the longest root-to-leaf path, in edges."""
        return max(n.state.round for n in self._nodes) - self.root.state.round

    def ucb1(self, parent: Node, child: Node, exploration_constant: float) -> float:
        """
        UCB1 score of child as seen by the side calling at parent.

        U = exploit + c * sqrt(ln(N_parent) / N_child)
        """
        if child.visits == 0:
            raise InvalidStateError(
                f"UCB1 is undefined for unvisited node {child.id}; expand it first"
            )
        exploit = child.value_for(parent.state.current_caller)
        explore = exploration_constant * math.sqrt(math.log(parent.visits) / child.visits)
        return exploit + explore

    def best_child_by_ucb1(self, node: Node, exploration_constant: float) -> Node:
        """
        Child maximizing UCB1. Ties go to the lowest move index.

        Raises:
            EmptyTreeError: if the node has no children
            InvalidStateError: if any child has never been visited
        """
        if not node.children:
            raise EmptyTreeError(f"Node {node.id} has no children to select from")

        best: Optional[Node] = None
        best_score = -math.inf
        for move in MOVES:
            child = node.children.get(move)
            if child is None:
                continue
            score = self.ucb1(node, child, exploration_constant)
            if score > best_score:
                best, best_score = child, score
        return best

    def best_child_by_visits(self, node: Node) -> Node:
        """
        Robust child: most visits, then best average for the caller,
        then lowest move index.

        Raises:
            EmptyTreeError: if the node has no children
        """
        if not node.children:
            raise EmptyTreeError(f"Node {node.id} has no children to choose from")

        caller = node.state.current_caller
        best: Optional[Node] = None
        best_key = None
        for move in MOVES:
            child = node.children.get(move)
            if child is None:
                continue
            key = (child.visits, child.value_for(caller))
            if best_key is None or key > best_key:
                best, best_key = child, key
        return best
