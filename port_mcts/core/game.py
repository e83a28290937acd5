"""
Game session for the port game.

A session pits a human player's port against an AI port of identical shape.
Both ports receive the same arriving ships; each side decides its own
docking and crane assignments, the AI through Monte Carlo Tree Search.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Any, TYPE_CHECKING
from enum import Enum, auto
import logging
import uuid

from port_mcts.core.constants import (
    DEFAULT_NUM_BERTHS, DEFAULT_NUM_CRANES,
    BASE_SHIP_CONTAINERS, CONTAINERS_INCREMENT_PER_SHIP, SHIP_IDS_PER_TURN,
    VICTORY_SCORE, MAX_WAITING_SHIPS, MAX_TURNS
)
from port_mcts.core.entities import Ship
from port_mcts.core.port import create_port
from port_mcts.core.actions import Action

if TYPE_CHECKING:
    from port_mcts.mcts.agent import MCTSAgent

logger = logging.getLogger(__name__)


class GameMode(Enum):
    """Enum representing different game modes."""
    VERSUS_AI = auto()
    TUTORIAL = auto()
    SANDBOX = auto()


class GameSession:
    """
    Manager for one player-versus-AI game.

    The session owns both ports and the AI agent, counts turns, spawns
    ships and decides when the game is over.
    """

    def __init__(
        self,
        mode: GameMode = GameMode.VERSUS_AI,
        num_berths: int = DEFAULT_NUM_BERTHS,
        num_cranes: int = DEFAULT_NUM_CRANES,
        agent: Optional[MCTSAgent] = None
    ):
        """
        Initialize a game session.

        Args:
            mode: Game mode
            num_berths: Berths in each port
            num_cranes: Cranes in each port
            agent: AI agent; defaults to a fast MCTS agent
        """
        # Imported here because the mcts package depends on core
        from port_mcts.mcts.agent import MCTSAgentFactory

        self.session_id = str(uuid.uuid4())
        self.mode = mode
        self.player_port = create_port(num_berths, num_cranes)
        self.ai_port = create_port(num_berths, num_cranes)
        self.current_turn = 0
        self.agent = agent or MCTSAgentFactory.create_fast()

    def start_turn(self) -> int:
        """
        Advance to the next turn.

        Returns:
            The new turn number
        """
        self.current_turn += 1
        logger.debug("Session %s: turn %d started", self.session_id, self.current_turn)
        return self.current_turn

    def spawn_ships(self, count: int) -> None:
        """
        Add `count` arriving ships to both ports.

        Ship ids are derived from the turn number so they stay unique across
        turns; ships of one wave carry increasingly many containers.

        Args:
            count: Number of ships to spawn
        """
        if count < 0:
            raise ValueError("count must be non-negative")
        if count > SHIP_IDS_PER_TURN:
            raise ValueError(f"Cannot spawn more than {SHIP_IDS_PER_TURN} ships per turn")

        for i in range(count):
            ship_id = self.current_turn * SHIP_IDS_PER_TURN + i
            containers = BASE_SHIP_CONTAINERS + i * CONTAINERS_INCREMENT_PER_SHIP
            arrival_time = float(self.current_turn)

            self.player_port.add_ship(Ship(id=ship_id, containers=containers, arrival_time=arrival_time))
            self.ai_port.add_ship(Ship(id=ship_id, containers=containers, arrival_time=arrival_time))

        logger.debug("Session %s: %d ships arrived", self.session_id, count)

    def apply_player_action(self, action: Action) -> bool:
        """
        Apply a player action to the player's port.

        Session moves only change berths and cranes; the clock and
        container processing are left to end_turn.

        Args:
            action: Action chosen by the player

        Returns:
            True if the action was applied, False if it is not legal
        """
        if not action.validate(self.player_port):
            logger.debug("Session %s: rejected player action %s", self.session_id, action)
            return False

        action.perform(self.player_port)
        return True

    def ai_take_turn(self) -> Optional[Action]:
        """
        Let the AI pick and apply its action.

        A pass leaves the AI port untouched. A search without a legal root
        action is treated as a pass and is not retried.

        Returns:
            The chosen action, or None if the AI proposed nothing usable
        """
        action = self.agent.select_action(self.ai_port)

        if action is None:
            return None

        if not action.validate(self.ai_port):
            logger.warning("Session %s: AI proposed an illegal action %s", self.session_id, action)
            return None

        action.perform(self.ai_port)
        return action

    def process_containers(self) -> None:
        """Unload every docked ship with cranes, in both ports."""
        for port in (self.player_port, self.ai_port):
            port.unload_docked_ships()

    def free_completed_ships(self) -> List[int]:
        """
        Send fully unloaded ships away, releasing their cranes and berths.

        Returns:
            IDs of the ships that left the player's port
        """
        self.ai_port.release_completed_ships()
        completed = self.player_port.release_completed_ships()
        if completed:
            logger.debug("Session %s: ships %s left the player port", self.session_id, completed)
        return completed

    def end_turn(self) -> Optional[Action]:
        """
        Close the current turn.

        Containers are processed, completed ships leave, the AI makes its
        move and the next turn starts.

        Returns:
            The AI's action for this turn
        """
        self.process_containers()
        self.free_completed_ships()
        action = self.ai_take_turn()
        self.start_turn()
        return action

    def is_game_over(self) -> bool:
        """
        Check whether the game has ended.

        The game ends on a high enough player score, on too many ships
        waiting at the player's port, or after the last turn.

        Returns:
            True if the game is over
        """
        if self.player_port.calculate_score() > VICTORY_SCORE:
            return True

        if len(self.player_port.waiting_ships()) > MAX_WAITING_SHIPS:
            return True

        return self.current_turn >= MAX_TURNS

    def get_winner(self) -> Optional[str]:
        """
        Get the winner of a finished game.

        Returns:
            "player", "ai" or "tie", or None while the game is running
        """
        if not self.is_game_over():
            return None

        player_score = self.player_port.calculate_score()
        ai_score = self.ai_port.calculate_score()

        if player_score > ai_score:
            return "player"
        elif ai_score > player_score:
            return "ai"
        return "tie"

    def get_scores(self) -> Dict[str, int]:
        return {
            "player": self.player_port.calculate_score(),
            "ai": self.ai_port.calculate_score(),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "mode": self.mode.name,
            "current_turn": self.current_turn,
            "player_port": self.player_port.to_dict(),
            "ai_port": self.ai_port.to_dict(),
            "game_over": self.is_game_over(),
            "winner": self.get_winner(),
        }

    def __str__(self) -> str:
        scores = self.get_scores()
        return (f"GameSession(turn={self.current_turn}, "
                f"player={scores['player']}, ai={scores['ai']})")


def create_session(
    num_berths: int = DEFAULT_NUM_BERTHS,
    num_cranes: int = DEFAULT_NUM_CRANES,
    seed: Optional[int] = None
) -> GameSession:
    """
    Create a player-versus-AI session with a fast, optionally seeded, AI.

    Args:
        num_berths: Berths in each port
        num_cranes: Cranes in each port
        seed: Seed for the AI's random generator

    Returns:
        New GameSession
    """
    from port_mcts.mcts.agent import MCTSAgent
    from port_mcts.mcts.config import MCTSConfig

    config = MCTSConfig.fast()
    config.seed = seed
    agent = MCTSAgent(config=config, name="Port AI")
    return GameSession(num_berths=num_berths, num_cranes=num_cranes, agent=agent)
