"""
Port MCTS - A berth and crane allocation game with a Monte Carlo Tree Search opponent.

This package provides the port game rules (ships, berths, cranes and the
transition between port states) along with an MCTS engine that plays the
game as an AI opponent.
"""

__version__ = "0.1.0"
__author__ = "Port MCTS Team"

# Make key components available at package level
from port_mcts.core.port import PortState, create_port
from port_mcts.core.actions import Action, generate_actions, apply_action
from port_mcts.mcts.search import MCTSEngine

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))

# Default port layout
DEFAULT_CONFIG = {
    "num_berths": 2,
    "num_cranes": 2,
    "crane_speed": 2.0,
}
