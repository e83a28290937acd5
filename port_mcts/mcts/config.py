"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the configuration parameters for the MCTS algorithm,
including the simulation budget, exploration constant, depth cap and the
score noise added at the end of every playout.
"""
from dataclasses import dataclass, fields
from typing import Optional, ClassVar

from port_mcts.core.constants import (
    DEFAULT_MCTS_SIMULATIONS, DEFAULT_MCTS_EXPLORATION,
    DEFAULT_MCTS_MAX_DEPTH, DEFAULT_SCORE_NOISE
)


@dataclass
class MCTSConfig:
    """
    Configuration parameters for Monte Carlo Tree Search.

    This class defines all tunable parameters for the MCTS algorithm,
    with validation and sensible defaults.
    """
    # Search parameters
    num_simulations: int = DEFAULT_MCTS_SIMULATIONS
    """Number of select/expand/simulate/backpropagate iterations per search"""

    exploration_constant: float = DEFAULT_MCTS_EXPLORATION
    """UCB1 exploration parameter (default is roughly sqrt(2))"""

    max_depth: int = DEFAULT_MCTS_MAX_DEPTH
    """Depth cap for both tree expansion and playouts"""

    max_actions_per_turn: int = 1
    """Reserved for callers that chain several actions per turn; unused by the search"""

    # Simulation parameters
    noise_magnitude: float = DEFAULT_SCORE_NOISE
    """Half-width of the uniform noise added to every playout score"""

    seed: Optional[int] = None
    """Seed for the random generator when none is injected (None = nondeterministic)"""

    # Constants
    INFINITE_VALUE: ClassVar[float] = float('inf')
    """UCB1 value of a node that has never been visited"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.num_simulations < 0:
            raise ValueError("num_simulations must be non-negative")

        if self.exploration_constant <= 0:
            raise ValueError("exploration_constant must be positive")

        if self.max_depth < 0:
            raise ValueError("max_depth must be non-negative")

        if self.max_actions_per_turn <= 0:
            raise ValueError("max_actions_per_turn must be positive")

        if self.noise_magnitude < 0:
            raise ValueError("noise_magnitude must be non-negative")

    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.

        Returns:
            Default MCTSConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for speed (fewer simulations).

        This is the budget the game session gives its AI opponent.

        Returns:
            Fast MCTSConfig object
        """
        return cls(
            num_simulations=100,
            max_depth=20,
        )

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for deep search.

        Returns:
            Deep MCTSConfig object
        """
        return cls(
            num_simulations=5000,
            exploration_constant=1.2,  # Slightly less exploration
            max_depth=100,
            noise_magnitude=10.0,
        )

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        # Filter out any keys that aren't valid parameters
        names = {f.name for f in fields(cls)}
        valid_params = {k: v for k, v in config_dict.items() if k in names}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = [f"{name}={value}" for name, value in self.to_dict().items()]
        return f"MCTSConfig({', '.join(params)})"
