"""
Monte Carlo Tree Search Node for the port game.

This module defines the MCTSNode class which represents a node in the MCTS tree.
Nodes never reference each other directly: the parent and the children are
integer indices into the arena owned by MCTSTree.
"""
from __future__ import annotations
from typing import List, Optional, Dict, Any
import math

from port_mcts.core.port import PortState
from port_mcts.core.actions import Action
from port_mcts.mcts.config import MCTSConfig


class MCTSNode:
    """
    A node in the Monte Carlo Tree Search.

    Each node owns a port snapshot and tracks statistics about the
    simulations that pass through it: visit count and accumulated score.
    """

    __slots__ = ("state", "action", "parent", "children", "visits", "total_score", "depth")

    def __init__(
        self,
        state: PortState,
        action: Optional[Action] = None,
        parent: Optional[int] = None,
        depth: int = 0,
    ):
        """
        Initialize an MCTS node.

        Args:
            state: The port state this node represents (owned by the node)
            action: The action that led to this state (None for root)
            parent: Arena index of the parent node (None for root)
            depth: Distance from the root (root = 0)
        """
        self.state = state
        self.action = action
        self.parent = parent
        self.children: List[int] = []

        # Node statistics
        self.visits = 0
        self.total_score = 0.0
        self.depth = depth

    def is_expanded(self) -> bool:
        return bool(self.children)

    def average_score(self) -> float:
        """
        Mean backpropagated score, or 0.0 for a node never visited.
        """
        if self.visits == 0:
            return 0.0
        return self.total_score / self.visits

    def ucb1(self, parent_visits: int, exploration_constant: float) -> float:
        """
        Calculate the UCB1 score of this node.

        UCB1 = average_score + exploration_constant * sqrt(ln(parent_visits) / visits)

        Args:
            parent_visits: Visit count of the parent node
            exploration_constant: Weight of the exploration term

        Returns:
            UCB1 score, +inf for a node never visited
        """
        # Always explore unvisited nodes first
        if self.visits == 0:
            return MCTSConfig.INFINITE_VALUE

        exploitation = self.average_score()
        exploration = math.sqrt(math.log(parent_visits) / self.visits)

        return exploitation + exploration_constant * exploration

    def update(self, score: float) -> None:
        """
        Record one simulation result.

        Args:
            score: The playout score
        """
        self.visits += 1
        self.total_score += score

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.to_dict() if self.action is not None else None,
            "parent": self.parent,
            "children": list(self.children),
            "visits": self.visits,
            "total_score": self.total_score,
            "average_score": self.average_score(),
            "depth": self.depth,
        }

    def __str__(self) -> str:
        return (f"MCTSNode(action={self.action}, "
                f"depth={self.depth}, "
                f"visits={self.visits}, "
                f"score={self.total_score:.2f}, "
                f"children={len(self.children)})")
