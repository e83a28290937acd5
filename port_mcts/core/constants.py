"""
Constants for the port game.

This module defines the game constants used throughout the port implementation,
including port sizes, action durations, container processing rates and the
scoring weights.
"""
from typing import Final


# Port layout
DEFAULT_NUM_BERTHS: Final[int] = 2
DEFAULT_NUM_CRANES: Final[int] = 2
DEFAULT_CRANE_SPEED: Final[float] = 2.0  # Containers per time unit

# Simulated time consumed by each action
DOCK_SHIP_DURATION: Final[float] = 1.0
ASSIGN_CRANE_DURATION: Final[float] = 1.0
UNASSIGN_CRANE_DURATION: Final[float] = 0.5
PASS_DURATION: Final[float] = 0.5

# Containers unloaded by one assigned crane during a processing step
CONTAINERS_PER_CRANE_STEP: Final[int] = 10

# Scoring
POINTS_PER_CONTAINER: Final[int] = 10
WAITING_PENALTY_PER_TIME_UNIT: Final[float] = 5.0

# Ship arrivals
BASE_SHIP_CONTAINERS: Final[int] = 20
CONTAINERS_INCREMENT_PER_SHIP: Final[int] = 10
SHIP_IDS_PER_TURN: Final[int] = 10

# Game end conditions
VICTORY_SCORE: Final[int] = 1000
MAX_WAITING_SHIPS: Final[int] = 10
MAX_TURNS: Final[int] = 30

# AI and simulation settings
DEFAULT_MCTS_SIMULATIONS: Final[int] = 1000
DEFAULT_MCTS_EXPLORATION: Final[float] = 1.41  # UCB1 exploration parameter (sqrt(2))
DEFAULT_MCTS_MAX_DEPTH: Final[int] = 50
DEFAULT_SCORE_NOISE: Final[float] = 5.0
