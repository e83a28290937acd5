"""
Monte Carlo Tree Search Agent for the port game.

This module provides the MCTSAgent class, a ready-to-use AI opponent that
uses Monte Carlo Tree Search to pick its next port action. The agent can be
configured with different parameters and keeps statistics about its
searches.
"""
from typing import Dict, List, Optional, Tuple, Any, Callable
import time
import json
import logging

import numpy as np
from rich.console import Console
from rich.table import Table

from port_mcts.core.port import PortState
from port_mcts.core.actions import Action
from port_mcts.mcts.config import MCTSConfig
from port_mcts.mcts.search import MCTSEngine

logger = logging.getLogger(__name__)


class MCTSAgent:
    """
    Monte Carlo Tree Search agent for the port game.

    The agent wraps one MCTSEngine. A search that finds no legal root action
    yields None, which callers treat as a pass.
    """

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent",
        verbose: bool = False,
        rng: Optional[np.random.Generator] = None,
        console: Optional[Console] = None
    ):
        """
        Initialize an MCTS agent.

        Args:
            config: MCTS configuration parameters
            name: Name of the agent
            verbose: Whether to print a summary after every search
            rng: Random generator shared by all searches of this agent
            console: Rich console used for verbose output
        """
        self.config = config or MCTSConfig()
        self.name = name
        self.verbose = verbose
        self.engine = MCTSEngine(config=self.config, rng=rng)
        self.console = console or Console()

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all actions and their statistics
        self.action_history: List[Tuple[Optional[Action], Dict[str, Any]]] = []

    def select_action(self, state: PortState) -> Optional[Action]:
        """
        Select an action using Monte Carlo Tree Search.

        Args:
            state: Current port state

        Returns:
            Selected action, or None if no legal action exists
        """
        start_time = time.time()
        action = self.engine.search(state)
        elapsed = time.time() - start_time

        stats: Dict[str, Any] = self.engine.get_statistics().to_dict()
        stats["time_elapsed"] = elapsed
        stats["simulations_per_second"] = stats["simulations_performed"] / max(0.001, elapsed)
        stats["action_visits"] = {
            name: values["visits"]
            for name, values in self.engine.tree.get_action_statistics().items()
        }

        self.last_stats = stats
        self.action_history.append((action, stats))

        logger.info("%s selected %s after %d simulations (%.3fs)",
                    self.name, action, stats["simulations_performed"], elapsed)

        if self.verbose:
            self._print_search_info(action, stats)

        return action

    def _print_search_info(self, action: Optional[Action], stats: Dict[str, Any]) -> None:
        """
        Print a summary of the search with the top root actions.

        Args:
            action: Selected action
            stats: Search statistics
        """
        self.console.print(f"\n[bold]{self.name}[/bold] selected: {action if action is not None else 'Pass'}")
        self.console.print(
            f"Simulations: {stats['simulations_performed']}  "
            f"Time: {stats['time_elapsed']:.3f}s ({stats['simulations_per_second']:.1f} sim/s)  "
            f"Nodes: {stats['total_nodes']}  "
            f"Max depth: {stats['max_depth_reached']}"
        )

        action_stats = self.get_action_statistics()
        if not action_stats:
            return

        table = Table(title="Top actions")
        table.add_column("#", justify="right")
        table.add_column("Action")
        table.add_column("Visits", justify="right")
        table.add_column("Value", justify="right")

        ranked = sorted(action_stats.items(), key=lambda x: x[1]["visits"], reverse=True)
        for i, (action_str, values) in enumerate(ranked[:5]):
            table.add_row(str(i + 1), action_str, str(values["visits"]), f"{values['value']:.2f}")

        self.console.print(table)

    def get_action_callback(self) -> Callable[[PortState], Optional[Action]]:
        """
        Get a callback function for selecting actions.

        Returns:
            Callback that takes a port state and returns an action or None
        """
        return lambda state: self.select_action(state)

    def get_last_statistics(self) -> Dict[str, Any]:
        return self.last_stats

    def get_principal_variation(self) -> List[Tuple[Action, float]]:
        """
        Get the principal variation (most visited path) from the last search.

        Returns:
            List of (action, value) pairs
        """
        return self.engine.tree.get_principal_variation()

    def get_action_statistics(self) -> Dict[str, Dict[str, float]]:
        """
        Get statistics for all root actions from the last search.

        Returns:
            Dictionary mapping action strings to statistics
        """
        return self.engine.tree.get_action_statistics(self.config.exploration_constant)

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.action_history = []

    def save_statistics(self, filename: str) -> None:
        """
        Save statistics to a file.

        Args:
            filename: Name of the file to save to
        """
        history = []
        for action, stats in self.action_history:
            history.append({
                "action": action.to_dict() if action is not None else None,
                "stats": {k: v for k, v in stats.items() if not isinstance(v, dict)}
            })

        data = {
            "agent_name": self.name,
            "config": self.config.to_dict(),
            "history": history,
            "total_actions": len(self.action_history)
        }

        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)

    def __str__(self) -> str:
        return f"{self.name} (MCTS, {self.config.num_simulations} simulations)"


class MCTSAgentFactory:
    """
    Factory for creating MCTS agents with different strengths.
    """

    @staticmethod
    def create_fast(rng: Optional[np.random.Generator] = None) -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.fast(), name="Fast MCTS", rng=rng)

    @staticmethod
    def create_standard(rng: Optional[np.random.Generator] = None) -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.default(), name="Standard MCTS", rng=rng)

    @staticmethod
    def create_strong(rng: Optional[np.random.Generator] = None) -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.deep(), name="Strong MCTS", rng=rng)

    @staticmethod
    def create_custom(
        num_simulations: int = 1000,
        exploration_constant: float = 1.41,
        max_depth: int = 50,
        seed: Optional[int] = None,
        name: str = "Custom MCTS"
    ) -> MCTSAgent:
        """
        Create a custom MCTS agent.

        Args:
            num_simulations: Number of MCTS simulations per search
            exploration_constant: UCB1 exploration parameter
            max_depth: Depth cap for expansion and playouts
            seed: Seed for the agent's random generator
            name: Name of the agent

        Returns:
            MCTSAgent
        """
        config = MCTSConfig(
            num_simulations=num_simulations,
            exploration_constant=exploration_constant,
            max_depth=max_depth,
            seed=seed
        )
        return MCTSAgent(config=config, name=name)
