"""
Actions for the port game.

This module defines all possible actions on a port:
- Docking a waiting ship at a free berth
- Assigning a free crane to a docked ship
- Unassigning a crane (manual only, never generated for the search)
- Passing

It also provides the two functions the search engine is built on: the
exhaustive action generator and the pure state transition.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, ClassVar

from port_mcts.core.constants import (
    DOCK_SHIP_DURATION, ASSIGN_CRANE_DURATION,
    UNASSIGN_CRANE_DURATION, PASS_DURATION
)
from port_mcts.core.port import PortState


class ActionType(Enum):
    """Enum representing the different types of actions on a port."""
    DOCK_SHIP = auto()
    ASSIGN_CRANE = auto()
    UNASSIGN_CRANE = auto()
    PASS = auto()


class Action(ABC):
    """
    Abstract base class for all port actions.

    Concrete actions are frozen dataclasses, so they are hashable and
    compare by value.
    """
    action_type: ClassVar[ActionType]
    duration: ClassVar[float]

    @abstractmethod
    def validate(self, state: PortState) -> bool:
        """
        Validate if the action is legal in the given port state.

        Args:
            state: Current port state

        Returns:
            True if the action is valid, False otherwise
        """
        pass

    @abstractmethod
    def perform(self, state: PortState) -> None:
        """
        Apply the effect of the action to the port, leaving its clock alone.

        Unknown ids are ignored, so performing never fails.

        Args:
            state: Port state to modify
        """
        pass

    def execute(self, state: PortState) -> None:
        """
        Perform the action and advance the port clock by its duration.

        Args:
            state: Port state to modify
        """
        self.perform(state)
        state.current_time += self.duration

    @abstractmethod
    def to_dict(self) -> Dict:
        """
        Convert the action to a dictionary for serialization.

        Returns:
            Dictionary representation of the action
        """
        pass

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict) -> Action:
        pass

    @abstractmethod
    def __str__(self) -> str:
        pass


@dataclass(frozen=True)
class DockShipAction(Action):
    """Dock a waiting ship at a free berth."""
    action_type: ClassVar[ActionType] = ActionType.DOCK_SHIP
    duration: ClassVar[float] = DOCK_SHIP_DURATION
    ship_id: int
    berth_id: int

    def validate(self, state: PortState) -> bool:
        ship = state.ships.get(self.ship_id)
        berth = state.berths.get(self.berth_id)
        if ship is None or berth is None:
            return False
        return not ship.is_docked() and berth.is_free()

    def perform(self, state: PortState) -> None:
        ship = state.ships.get(self.ship_id)
        if ship is not None:
            ship.dock(self.berth_id)

        berth = state.berths.get(self.berth_id)
        if berth is not None:
            berth.occupy(self.ship_id)

    def to_dict(self) -> Dict:
        return {
            "action_type": self.action_type.name,
            "ship_id": self.ship_id,
            "berth_id": self.berth_id,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> DockShipAction:
        return cls(ship_id=data["ship_id"], berth_id=data["berth_id"])

    def __str__(self) -> str:
        return f"Dock Ship#{self.ship_id} at Berth#{self.berth_id}"


@dataclass(frozen=True)
class AssignCraneAction(Action):
    """Assign a free crane to a docked ship."""
    action_type: ClassVar[ActionType] = ActionType.ASSIGN_CRANE
    duration: ClassVar[float] = ASSIGN_CRANE_DURATION
    crane_id: int
    ship_id: int

    def validate(self, state: PortState) -> bool:
        crane = state.cranes.get(self.crane_id)
        ship = state.ships.get(self.ship_id)
        if crane is None or ship is None:
            return False
        return crane.is_free() and ship.is_docked()

    def perform(self, state: PortState) -> None:
        crane = state.cranes.get(self.crane_id)
        if crane is not None:
            crane.assign(self.ship_id)

        ship = state.ships.get(self.ship_id)
        if ship is not None:
            ship.assign_crane(self.crane_id)

    def to_dict(self) -> Dict:
        return {
            "action_type": self.action_type.name,
            "crane_id": self.crane_id,
            "ship_id": self.ship_id,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> AssignCraneAction:
        return cls(crane_id=data["crane_id"], ship_id=data["ship_id"])

    def __str__(self) -> str:
        return f"Assign Crane#{self.crane_id} to Ship#{self.ship_id}"


@dataclass(frozen=True)
class UnassignCraneAction(Action):
    """
    Release a crane from the ship it works on.

    Part of the action vocabulary but never produced by generate_actions.
    """
    action_type: ClassVar[ActionType] = ActionType.UNASSIGN_CRANE
    duration: ClassVar[float] = UNASSIGN_CRANE_DURATION
    crane_id: int

    def validate(self, state: PortState) -> bool:
        crane = state.cranes.get(self.crane_id)
        return crane is not None and not crane.is_free()

    def perform(self, state: PortState) -> None:
        state.free_crane(self.crane_id)

    def to_dict(self) -> Dict:
        return {"action_type": self.action_type.name, "crane_id": self.crane_id}

    @classmethod
    def from_dict(cls, data: Dict) -> UnassignCraneAction:
        return cls(crane_id=data["crane_id"])

    def __str__(self) -> str:
        return f"Unassign Crane#{self.crane_id}"


@dataclass(frozen=True)
class PassAction(Action):
    """Do nothing but let time pass."""
    action_type: ClassVar[ActionType] = ActionType.PASS
    duration: ClassVar[float] = PASS_DURATION

    def validate(self, state: PortState) -> bool:
        return True

    def perform(self, state: PortState) -> None:
        pass

    def to_dict(self) -> Dict:
        return {"action_type": self.action_type.name}

    @classmethod
    def from_dict(cls, data: Dict) -> PassAction:
        return cls()

    def __str__(self) -> str:
        return "Pass"


def generate_actions(state: PortState) -> List[Action]:
    """
    Enumerate every legal action on a port, without pruning.

    Dock actions come first (ships, then berths, ascending by id), followed
    by crane assignments (cranes, then docked ships, ascending by id). When
    neither exists the only action is a pass.

    Args:
        state: Current port state

    Returns:
        List of distinct actions, never empty
    """
    actions: List[Action] = []

    free_berths = state.free_berths()
    for ship in state.waiting_ships():
        for berth in free_berths:
            actions.append(DockShipAction(ship_id=ship.id, berth_id=berth.id))

    docked_ships = state.docked_ships()
    for crane in state.free_cranes():
        for ship in docked_ships:
            actions.append(AssignCraneAction(crane_id=crane.id, ship_id=ship.id))

    if not actions:
        actions.append(PassAction())

    return actions


def apply_action(state: PortState, action: Action) -> PortState:
    """
    Apply an action to a copy of a port state.

    The action is executed, then one processing step runs, so every
    transition is a decision plus one tick of container unloading.

    Args:
        state: Port state (left untouched)
        action: Action to apply

    Returns:
        New port state
    """
    new_state = state.clone()
    new_state.apply_action(action)
    return new_state


def create_action_from_dict(data: Dict) -> Action:
    """
    Create an action from a dictionary representation.

    Args:
        data: Dictionary representation of an action

    Returns:
        Action object
    """
    action_type = ActionType[data["action_type"]]

    if action_type == ActionType.DOCK_SHIP:
        return DockShipAction.from_dict(data)
    elif action_type == ActionType.ASSIGN_CRANE:
        return AssignCraneAction.from_dict(data)
    elif action_type == ActionType.UNASSIGN_CRANE:
        return UnassignCraneAction.from_dict(data)
    elif action_type == ActionType.PASS:
        return PassAction.from_dict(data)
    else:
        raise ValueError(f"Unknown action type: {action_type}")
