"""
Ships, berths and cranes of a port.

Each entity is a small mutable dataclass identified by an integer id. The
relations between them (a ship docked at a berth, a crane working a ship)
are stored as ids on both sides and kept consistent by PortState.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from port_mcts.core.constants import DEFAULT_CRANE_SPEED, CONTAINERS_PER_CRANE_STEP


@dataclass
class Ship:
    """
    A cargo ship waiting for, or being serviced at, a berth.
    """
    id: int
    containers: int  # Total containers carried on arrival
    containers_remaining: Optional[int] = None  # Defaults to `containers`
    arrival_time: float = 0.0
    docked_at: Optional[int] = None  # Berth ID
    assigned_cranes: List[int] = field(default_factory=list)  # Crane IDs, in assignment order

    def __post_init__(self):
        if self.containers < 0:
            raise ValueError("containers must be non-negative")
        if self.containers_remaining is None:
            self.containers_remaining = self.containers
        elif not 0 <= self.containers_remaining <= self.containers:
            raise ValueError("containers_remaining must be between 0 and containers")

    def is_docked(self) -> bool:
        return self.docked_at is not None

    def is_completed(self) -> bool:
        return self.containers_remaining == 0

    @property
    def containers_processed(self) -> int:
        return self.containers - self.containers_remaining

    def dock(self, berth_id: int) -> None:
        self.docked_at = berth_id

    def undock(self) -> None:
        self.docked_at = None
        self.assigned_cranes.clear()

    def assign_crane(self, crane_id: int) -> None:
        if crane_id not in self.assigned_cranes:
            self.assigned_cranes.append(crane_id)

    def unassign_crane(self, crane_id: int) -> None:
        self.assigned_cranes = [c for c in self.assigned_cranes if c != crane_id]

    def process_containers(self, count: int) -> None:
        """Unload up to `count` containers, never going below zero."""
        self.containers_remaining = max(0, self.containers_remaining - count)

    def waiting_time(self, current_time: float) -> float:
        return current_time - self.arrival_time

    def clone(self) -> 'Ship':
        return Ship(
            id=self.id,
            containers=self.containers,
            containers_remaining=self.containers_remaining,
            arrival_time=self.arrival_time,
            docked_at=self.docked_at,
            assigned_cranes=list(self.assigned_cranes),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "containers": self.containers,
            "containers_remaining": self.containers_remaining,
            "arrival_time": self.arrival_time,
            "docked_at": self.docked_at,
            "assigned_cranes": list(self.assigned_cranes),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Ship':
        return cls(
            id=data["id"],
            containers=data["containers"],
            containers_remaining=data.get("containers_remaining", data["containers"]),
            arrival_time=data.get("arrival_time", 0.0),
            docked_at=data.get("docked_at"),
            assigned_cranes=list(data.get("assigned_cranes", [])),
        )

    def __str__(self) -> str:
        return f"Ship#{self.id}"


@dataclass
class Berth:
    """A docking position that holds at most one ship."""
    id: int
    occupied_by: Optional[int] = None  # Ship ID

    def is_free(self) -> bool:
        return self.occupied_by is None

    def occupy(self, ship_id: int) -> None:
        self.occupied_by = ship_id

    def free(self) -> None:
        self.occupied_by = None

    def clone(self) -> 'Berth':
        return Berth(id=self.id, occupied_by=self.occupied_by)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "occupied_by": self.occupied_by}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Berth':
        return cls(id=data["id"], occupied_by=data.get("occupied_by"))

    def __str__(self) -> str:
        return f"Berth#{self.id}"


@dataclass
class Crane:
    """Unloading equipment that works on at most one docked ship."""
    id: int
    assigned_to: Optional[int] = None  # Ship ID
    processing_speed: float = DEFAULT_CRANE_SPEED  # Containers per time unit

    def is_free(self) -> bool:
        return self.assigned_to is None

    def assign(self, ship_id: int) -> None:
        self.assigned_to = ship_id

    def unassign(self) -> None:
        self.assigned_to = None

    def containers_per_turn(self) -> int:
        return int(self.processing_speed * CONTAINERS_PER_CRANE_STEP)

    def clone(self) -> 'Crane':
        return Crane(id=self.id, assigned_to=self.assigned_to, processing_speed=self.processing_speed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "assigned_to": self.assigned_to,
            "processing_speed": self.processing_speed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Crane':
        return cls(
            id=data["id"],
            assigned_to=data.get("assigned_to"),
            processing_speed=data.get("processing_speed", DEFAULT_CRANE_SPEED),
        )

    def __str__(self) -> str:
        return f"Crane#{self.id}"
