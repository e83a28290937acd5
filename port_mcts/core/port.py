"""
Port state for the berth and crane allocation game.

This module defines the core snapshot the search works on, including:
- PortState: ships, berths, cranes and the simulated clock of one port
- The transition that applies an action and runs one processing step
- Helper functions for port setup and serialization

Every MCTS node owns its own PortState, so cloning is explicit and cheap
compared to a generic deepcopy.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, TYPE_CHECKING
import json

from port_mcts.core.constants import (
    DEFAULT_NUM_BERTHS, DEFAULT_NUM_CRANES, DEFAULT_CRANE_SPEED,
    CONTAINERS_PER_CRANE_STEP, POINTS_PER_CONTAINER, WAITING_PENALTY_PER_TIME_UNIT
)
from port_mcts.core.entities import Ship, Berth, Crane

if TYPE_CHECKING:
    from port_mcts.core.actions import Action


@dataclass
class PortState:
    """
    Complete snapshot of one port.

    Ships are keyed by ship id, berths by berth id and cranes by crane id.
    A ship is docked iff its `docked_at` is set iff that berth's occupant is
    the ship; a crane is assigned iff its id is in the ship's crane list.
    """
    ships: Dict[int, Ship] = field(default_factory=dict)
    berths: Dict[int, Berth] = field(default_factory=dict)
    cranes: Dict[int, Crane] = field(default_factory=dict)
    current_time: float = 0.0

    # Queries are sorted by id so that action enumeration is deterministic

    def waiting_ships(self) -> List[Ship]:
        """Ships that have arrived but are not docked yet."""
        return [self.ships[k] for k in sorted(self.ships) if not self.ships[k].is_docked()]

    def docked_ships(self) -> List[Ship]:
        return [self.ships[k] for k in sorted(self.ships) if self.ships[k].is_docked()]

    def free_berths(self) -> List[Berth]:
        return [self.berths[k] for k in sorted(self.berths) if self.berths[k].is_free()]

    def free_cranes(self) -> List[Crane]:
        return [self.cranes[k] for k in sorted(self.cranes) if self.cranes[k].is_free()]

    def calculate_score(self) -> int:
        """
        Calculate the current score of the port.

        Each processed container of a ship still in port is worth
        POINTS_PER_CONTAINER; every waiting ship costs its waiting time
        times WAITING_PENALTY_PER_TIME_UNIT (truncated to an integer).

        Returns:
            Integer score
        """
        score = 0

        for ship in self.ships.values():
            score += ship.containers_processed * POINTS_PER_CONTAINER

        for ship in self.waiting_ships():
            wait_time = ship.waiting_time(self.current_time)
            score -= int(wait_time * WAITING_PENALTY_PER_TIME_UNIT)

        return score

    def add_ship(self, ship: Ship) -> None:
        """
        Register an arriving ship.

        Args:
            ship: The ship to add

        Raises:
            ValueError: If a ship with the same id is already in port
        """
        if ship.id in self.ships:
            raise ValueError(f"Ship {ship.id} is already in port")
        self.ships[ship.id] = ship

    def apply_action(self, action: Action) -> None:
        """
        Apply an action in place, then run one processing step.

        Args:
            action: Action to apply
        """
        action.execute(self)
        self.process_containers()

    def process_containers(self) -> List[int]:
        """
        Run one processing step.

        Every docked ship with at least one crane is unloaded, and the ships
        completed by this step free their cranes and berth and leave the port.

        Returns:
            IDs of the ships that completed during this step
        """
        completed = self.unload_docked_ships()
        for ship_id in completed:
            self.release_ship(ship_id)
        return completed

    def unload_docked_ships(self) -> List[int]:
        """
        Unload CONTAINERS_PER_CRANE_STEP containers per assigned crane from
        every docked ship. Ships stay in port even when emptied.

        Returns:
            IDs of the unloaded ships that have no containers left
        """
        emptied = []

        for ship in self.docked_ships():
            if not ship.assigned_cranes:
                continue

            ship.process_containers(CONTAINERS_PER_CRANE_STEP * len(ship.assigned_cranes))
            if ship.is_completed():
                emptied.append(ship.id)

        return emptied

    def release_ship(self, ship_id: int) -> bool:
        """Free the cranes of a docked ship, then undock it and let it leave."""
        ship = self.ships.get(ship_id)
        if ship is None or not ship.is_docked():
            return False

        for crane_id in list(ship.assigned_cranes):
            self.free_crane(crane_id)
        return self.undock_ship(ship_id, ship.docked_at)

    def release_completed_ships(self) -> List[int]:
        """
        Release every docked ship that has been fully unloaded.

        Returns:
            IDs of the ships that left the port
        """
        completed = [ship.id for ship in self.docked_ships() if ship.is_completed()]
        for ship_id in completed:
            self.release_ship(ship_id)
        return completed

    def free_crane(self, crane_id: int) -> None:
        """Release a crane from the ship it is working on, if any."""
        crane = self.cranes.get(crane_id)
        if crane is None or crane.assigned_to is None:
            return

        ship = self.ships.get(crane.assigned_to)
        if ship is not None:
            ship.unassign_crane(crane_id)
        crane.unassign()

    def undock_ship(self, ship_id: int, berth_id: int) -> bool:
        """
        Undock a ship from its berth and remove it from the port.

        Returns:
            True if the ship was docked at that berth and has left
        """
        ship = self.ships.get(ship_id)
        if ship is None or ship.docked_at != berth_id:
            return False

        for crane_id in ship.assigned_cranes:
            crane = self.cranes.get(crane_id)
            if crane is not None:
                crane.unassign()

        ship.undock()
        berth = self.berths.get(berth_id)
        if berth is not None:
            berth.free()

        del self.ships[ship_id]
        return True

    def clone(self) -> 'PortState':
        """
        Create an independent copy of this port.

        Returns:
            Cloned PortState
        """
        return PortState(
            ships={k: s.clone() for k, s in self.ships.items()},
            berths={k: b.clone() for k, b in self.berths.items()},
            cranes={k: c.clone() for k, c in self.cranes.items()},
            current_time=self.current_time,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ships": [self.ships[k].to_dict() for k in sorted(self.ships)],
            "berths": [self.berths[k].to_dict() for k in sorted(self.berths)],
            "cranes": [self.cranes[k].to_dict() for k in sorted(self.cranes)],
            "current_time": self.current_time,
            "score": self.calculate_score(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PortState':
        ships = [Ship.from_dict(s) for s in data.get("ships", [])]
        berths = [Berth.from_dict(b) for b in data.get("berths", [])]
        cranes = [Crane.from_dict(c) for c in data.get("cranes", [])]
        return cls(
            ships={s.id: s for s in ships},
            berths={b.id: b for b in berths},
            cranes={c.id: c for c in cranes},
            current_time=data.get("current_time", 0.0),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> 'PortState':
        return cls.from_dict(json.loads(json_str))

    def __str__(self) -> str:
        return (f"PortState(time={self.current_time:.1f}, "
                f"ships={len(self.ships)}, "
                f"waiting={len(self.waiting_ships())}, "
                f"free_berths={len(self.free_berths())}, "
                f"free_cranes={len(self.free_cranes())}, "
                f"score={self.calculate_score()})")


def create_port(
    num_berths: int = DEFAULT_NUM_BERTHS,
    num_cranes: int = DEFAULT_NUM_CRANES,
    crane_speed: float = DEFAULT_CRANE_SPEED,
    ships: Optional[List[Ship]] = None
) -> PortState:
    """
    Create an empty port with numbered berths and cranes.

    Args:
        num_berths: Number of berths (ids 0..num_berths-1)
        num_cranes: Number of cranes (ids 0..num_cranes-1)
        crane_speed: Processing speed of every crane
        ships: Optional ships already in port

    Returns:
        New PortState
    """
    if num_berths < 0 or num_cranes < 0:
        raise ValueError("num_berths and num_cranes must be non-negative")

    port = PortState(
        berths={i: Berth(id=i) for i in range(num_berths)},
        cranes={i: Crane(id=i, processing_speed=crane_speed) for i in range(num_cranes)},
    )
    for ship in ships or []:
        port.add_ship(ship)
    return port
