"""
Monte Carlo Tree Search (MCTS) implementation for the port game.

This package provides the MCTS engine that acts as the AI opponent. Every
search runs a fixed number of simulations, each made of:

1. Selection: Starting from the root, follow the child with the highest UCB1
   value until reaching a node without children.
2. Expansion: Create one child per legal action (full width) and continue
   with the first of them.
3. Simulation: From that node, play random actions up to the depth cap and
   score the final port state.
4. Backpropagation: Add the score and one visit to every node on the path
   back to the root.

The tree is an index-addressed arena rebuilt for every search, and the
recommended action is the most visited root child.
"""

from port_mcts.mcts.node import MCTSNode
from port_mcts.mcts.tree import MCTSTree
from port_mcts.mcts.agent import MCTSAgent, MCTSAgentFactory
from port_mcts.mcts.search import (
    MCTSEngine,
    MCTSStatistics,
    mcts_search,
    default_score
)
from port_mcts.mcts.config import MCTSConfig

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    num_simulations=1000,       # Simulations per search
    exploration_constant=1.41,  # UCB1 exploration parameter (sqrt(2))
    max_depth=50,               # Depth cap for expansion and playouts
    max_actions_per_turn=1,     # Reserved
    noise_magnitude=5.0         # Half-width of the playout score noise
)

__all__ = [
    'MCTSAgent',
    'MCTSAgentFactory',
    'MCTSNode',
    'MCTSTree',
    'MCTSConfig',
    'MCTSEngine',
    'MCTSStatistics',
    'mcts_search',
    'default_score',
    'DEFAULT_CONFIG'
]
