"""
Port MCTS Core Package

This package contains the core game logic, including:
- Port state representation (ships, berths, cranes)
- Actions, the action generator and the state transition
- The player-versus-AI game session
- Constants

All core components can be imported directly from this package.
"""

# Entities
from port_mcts.core.entities import Ship, Berth, Crane

# Port state
from port_mcts.core.port import PortState, create_port

# Actions
from port_mcts.core.actions import (
    Action, ActionType,
    DockShipAction, AssignCraneAction, UnassignCraneAction, PassAction,
    generate_actions, apply_action, create_action_from_dict
)

# Game session
from port_mcts.core.game import GameSession, GameMode, create_session

# Constants
from port_mcts.core.constants import (
    DEFAULT_NUM_BERTHS, DEFAULT_NUM_CRANES,
    CONTAINERS_PER_CRANE_STEP, POINTS_PER_CONTAINER
)

__all__ = [
    # Entities
    'Ship', 'Berth', 'Crane',

    # Port
    'PortState', 'create_port',

    # Actions
    'Action', 'ActionType',
    'DockShipAction', 'AssignCraneAction', 'UnassignCraneAction', 'PassAction',
    'generate_actions', 'apply_action', 'create_action_from_dict',

    # Game
    'GameSession', 'GameMode', 'create_session',

    # Constants
    'DEFAULT_NUM_BERTHS', 'DEFAULT_NUM_CRANES',
    'CONTAINERS_PER_CRANE_STEP', 'POINTS_PER_CONTAINER'
]
