"""
Monte Carlo Tree Search (MCTS) algorithm for the port game.

This module implements the core MCTS loop with the four standard phases:
1. Selection: Descend the tree with UCB1 to a leaf
2. Expansion: Add one child per legal action, hand the first one on
3. Simulation: Run a random playout to estimate the node's value
4. Backpropagation: Update statistics from the node up to the root

The only nondeterministic input is the numpy random generator, which can be
injected or seeded through the configuration.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Callable, Dict, Optional, Tuple, Any
import logging

import numpy as np

from port_mcts.core.port import PortState
from port_mcts.core.actions import Action
from port_mcts.mcts.config import MCTSConfig
from port_mcts.mcts.tree import MCTSTree, ActionGenerator, StateTransition

logger = logging.getLogger(__name__)

ScoringFunction = Callable[[PortState], int]


def default_score(state: PortState) -> int:
    return state.calculate_score()


@dataclass
class MCTSStatistics:
    """Observability counters of the last search; not used for decisions."""
    simulations_performed: int = 0
    total_nodes: int = 0
    max_depth_reached: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class MCTSEngine:
    """
    Monte Carlo Tree Search engine.

    Each engine owns exactly one tree, rebuilt at the start of every search,
    so nothing learned in one search carries over to the next.
    """

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        rng: Optional[np.random.Generator] = None,
        scoring_function: ScoringFunction = default_score,
        action_generator: Optional[ActionGenerator] = None,
        transition: Optional[StateTransition] = None,
    ):
        """
        Initialize an MCTS engine.

        Args:
            config: MCTS configuration parameters
            rng: Random generator for playouts and score noise; built from
                 `config.seed` when omitted
            scoring_function: Maps a final playout state to an integer score
            action_generator: Replaces the default action enumeration
            transition: Replaces the default state transition
        """
        self.config = config or MCTSConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.scoring_function = scoring_function

        tree_kwargs = {}
        if action_generator is not None:
            tree_kwargs["action_generator"] = action_generator
        if transition is not None:
            tree_kwargs["transition"] = transition
        self.tree = MCTSTree(**tree_kwargs)

        self._simulations_performed = 0

    def search(self, state: PortState) -> Optional[Action]:
        """
        Run a full search from `state` and return the recommended action.

        The input state is cloned and never modified.

        Args:
            state: Current port state

        Returns:
            The most visited root action, or None if the root has no legal action
        """
        self.tree.init_root(state.clone())
        self._simulations_performed = 0

        logger.debug("Starting MCTS search: %s", self.config)

        for _ in range(self.config.num_simulations):
            # 1. Selection
            leaf_id = self.tree.select_ucb1(self.config.exploration_constant)

            # 2. Expansion
            expanded_id = self.tree.expand(leaf_id, self.config.max_depth)

            # 3. Simulation
            score = self.simulate(expanded_id)

            # 4. Backpropagation
            self.tree.backpropagate(expanded_id, score)

            self._simulations_performed += 1

        best_action = self.tree.best_action()

        logger.debug(
            "MCTS search finished: %d simulations, %d nodes, best action %s",
            self._simulations_performed, self.tree.node_count(), best_action
        )

        return best_action

    def simulate(self, node_id: int) -> float:
        """
        Run a random playout from a node.

        Every step goes through the pure transition, so the node's own state
        is never modified. The playout stops at the depth cap or when no
        action is available. Uniform noise in
        [-noise_magnitude, noise_magnitude) is added to the final score.

        Args:
            node_id: Index of the node to simulate from

        Returns:
            Noisy playout score
        """
        state = self.tree.get_state(node_id)
        depth = self.tree.node_depth(node_id)

        while depth < self.config.max_depth:
            actions = self.tree.action_generator(state)
            if not actions:
                break

            action = actions[int(self.rng.integers(len(actions)))]
            state = self.tree.transition(state, action)
            depth += 1

        score = float(self.scoring_function(state))
        if self.config.noise_magnitude > 0:
            noise = self.config.noise_magnitude
            score += float(self.rng.uniform(-noise, noise))

        return score

    def get_tree(self) -> MCTSTree:
        return self.tree

    def get_statistics(self) -> MCTSStatistics:
        """
        Get statistics about the last search.

        Returns:
            MCTSStatistics
        """
        return MCTSStatistics(
            simulations_performed=self._simulations_performed,
            total_nodes=self.tree.node_count(),
            max_depth_reached=self.tree.max_depth(),
        )


def mcts_search(
    state: PortState,
    config: Optional[MCTSConfig] = None,
    rng: Optional[np.random.Generator] = None
) -> Tuple[Optional[Action], Dict[str, Any]]:
    """
    Run Monte Carlo Tree Search to find the best action.

    Convenience wrapper that builds a throwaway engine.

    Args:
        state: Current port state
        config: MCTS configuration parameters
        rng: Optional random generator

    Returns:
        Tuple of (best action or None, search statistics)
    """
    engine = MCTSEngine(config=config, rng=rng)
    action = engine.search(state)
    return action, engine.get_statistics().to_dict()
