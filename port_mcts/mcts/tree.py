"""
Arena-backed search tree for Monte Carlo Tree Search.

All nodes of one search live in a single list and refer to each other by
index, so there are no reference cycles between parents and children. The
tree is append-only: nodes are never removed, the whole arena is discarded
by the next init_root.
"""
from __future__ import annotations
from typing import Callable, Dict, List, Optional, Tuple

from port_mcts.core.port import PortState
from port_mcts.core.actions import Action, generate_actions, apply_action
from port_mcts.mcts.node import MCTSNode

ActionGenerator = Callable[[PortState], List[Action]]
StateTransition = Callable[[PortState, Action], PortState]


class MCTSTree:
    """
    Search tree stored as a flat arena of MCTSNode.

    The action generator and the state transition are injectable; they
    default to the port game's exhaustive enumeration and pure transition.
    """

    def __init__(
        self,
        action_generator: ActionGenerator = generate_actions,
        transition: StateTransition = apply_action,
    ):
        self.nodes: List[MCTSNode] = []
        self.root_id: Optional[int] = None
        self.action_generator = action_generator
        self.transition = transition

    def _root(self) -> int:
        if self.root_id is None:
            raise RuntimeError("Tree not initialized")
        return self.root_id

    def init_root(self, state: PortState) -> None:
        """
        Discard any previous tree and start a new one from `state`.

        Args:
            state: Snapshot owned by the root from now on
        """
        self.nodes.clear()
        self.nodes.append(MCTSNode(state=state, action=None, parent=None, depth=0))
        self.root_id = 0

    def select_ucb1(self, exploration_constant: float) -> int:
        """
        Descend from the root to a leaf, following the highest UCB1 child.

        Ties go to the first child in insertion order.

        Args:
            exploration_constant: UCB1 exploration weight

        Returns:
            Index of the selected leaf
        """
        current_id = self._root()

        while True:
            node = self.nodes[current_id]
            if not node.is_expanded():
                return current_id

            parent_visits = node.visits
            best_id = node.children[0]
            best_value = self.nodes[best_id].ucb1(parent_visits, exploration_constant)

            for child_id in node.children[1:]:
                value = self.nodes[child_id].ucb1(parent_visits, exploration_constant)
                # Strict comparison keeps the earliest child on ties
                if value > best_value:
                    best_id = child_id
                    best_value = value

            current_id = best_id

    def expand(self, node_id: int, max_depth: int) -> int:
        """
        Add one child per legal action to a node.

        Expansion is skipped when the node is at the depth cap or has no
        legal action; the node itself is returned in that case.

        Args:
            node_id: Index of the node to expand
            max_depth: Depth at which nodes are treated as terminal

        Returns:
            Index of the first new child, or `node_id` if nothing was added
        """
        node = self.nodes[node_id]

        if node.depth >= max_depth:
            return node_id

        actions = self.action_generator(node.state)
        if not actions:
            return node_id

        child_ids = []
        for action in actions:
            new_state = self.transition(node.state, action)
            child_id = len(self.nodes)
            self.nodes.append(MCTSNode(
                state=new_state,
                action=action,
                parent=node_id,
                depth=node.depth + 1,
            ))
            child_ids.append(child_id)

        node.children = child_ids

        return child_ids[0]

    def backpropagate(self, node_id: int, score: float) -> None:
        """
        Add one visit and `score` to every node from `node_id` up to the root.

        Args:
            node_id: Index of the simulated node
            score: Playout score
        """
        current: Optional[int] = node_id
        while current is not None:
            node = self.nodes[current]
            node.update(score)
            current = node.parent

    def best_action(self) -> Optional[Action]:
        """
        Get the action of the most visited root child.

        Visit count is more robust than average score. Ties go to the
        first child in insertion order.

        Returns:
            The best action, or None if the root has no children
        """
        best_id = self.most_visited_child(self._root())
        if best_id is None:
            return None

        return self.nodes[best_id].action

    def most_visited_child(self, node_id: int) -> Optional[int]:
        """Index of the child with the most visits (first wins ties), or None."""
        children = self.nodes[node_id].children
        if not children:
            return None

        best_id = children[0]
        for child_id in children[1:]:
            if self.nodes[child_id].visits > self.nodes[best_id].visits:
                best_id = child_id
        return best_id

    def get_node(self, node_id: int) -> MCTSNode:
        return self.nodes[node_id]

    def get_state(self, node_id: int) -> PortState:
        return self.nodes[node_id].state

    def node_depth(self, node_id: int) -> int:
        if 0 <= node_id < len(self.nodes):
            return self.nodes[node_id].depth
        return 0

    def node_count(self) -> int:
        return len(self.nodes)

    def max_depth(self) -> int:
        """Depth of the deepest node in the arena (0 for an empty tree)."""
        return max((node.depth for node in self.nodes), default=0)

    def get_principal_variation(self, max_depth: int = 10) -> List[Tuple[Action, float]]:
        """
        Get the principal variation (most visited path) from the root.

        This is useful for analysis and debugging.

        Args:
            max_depth: Maximum number of moves to follow

        Returns:
            List of (action, average score) pairs
        """
        result = []
        if self.root_id is None:
            return result

        best_id = self.most_visited_child(self.root_id)

        while best_id is not None and len(result) < max_depth:
            child = self.nodes[best_id]
            result.append((child.action, child.average_score()))
            best_id = self.most_visited_child(best_id)

        return result

    def get_action_statistics(self, exploration_constant: float = 0.0) -> Dict[str, Dict[str, float]]:
        """
        Get statistics for all root actions.

        Args:
            exploration_constant: Weight used for the reported UCB1 value

        Returns:
            Dictionary mapping action strings to statistics
        """
        result = {}
        if self.root_id is None:
            return result

        root = self.nodes[self.root_id]
        for child_id in root.children:
            child = self.nodes[child_id]
            result[str(child.action)] = {
                "visits": child.visits,
                "score": child.total_score,
                "value": child.average_score(),
                "ucb1": child.ucb1(root.visits, exploration_constant),
            }

        return result

    def __len__(self) -> int:
        return len(self.nodes)
