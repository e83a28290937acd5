#!/usr/bin/env python
"""
Tests for the port game rules.

Covers the ship/berth/crane entities, the port snapshot, the action
generator and the state transition with its implicit processing step.
"""
import json
import unittest

from port_mcts.core.entities import Ship, Berth, Crane
from port_mcts.core.port import PortState, create_port
from port_mcts.core.actions import (
    ActionType, DockShipAction, AssignCraneAction, UnassignCraneAction, PassAction,
    generate_actions, apply_action, create_action_from_dict
)


def assert_consistent(test: unittest.TestCase, state: PortState) -> None:
    """Check the docking and crane assignment invariants of a port."""
    for ship in state.ships.values():
        if ship.docked_at is not None:
            test.assertEqual(state.berths[ship.docked_at].occupied_by, ship.id)
        for crane_id in ship.assigned_cranes:
            test.assertEqual(state.cranes[crane_id].assigned_to, ship.id)

    for berth in state.berths.values():
        if berth.occupied_by is not None:
            test.assertEqual(state.ships[berth.occupied_by].docked_at, berth.id)

    for crane in state.cranes.values():
        if crane.assigned_to is not None:
            test.assertIn(crane.id, state.ships[crane.assigned_to].assigned_cranes)


class TestEntities(unittest.TestCase):
    """Test case for ships, berths and cranes."""

    def test_ship_creation(self):
        ship = Ship(id=1, containers=50)
        self.assertEqual(ship.containers_remaining, 50)
        self.assertFalse(ship.is_docked())
        self.assertFalse(ship.is_completed())
        self.assertEqual(str(ship), "Ship#1")

    def test_ship_rejects_invalid_containers(self):
        with self.assertRaises(ValueError):
            Ship(id=1, containers=-1)
        with self.assertRaises(ValueError):
            Ship(id=1, containers=10, containers_remaining=11)

    def test_container_processing_floors_at_zero(self):
        ship = Ship(id=1, containers=50)
        ship.process_containers(20)
        self.assertEqual(ship.containers_remaining, 30)
        self.assertEqual(ship.containers_processed, 20)

        ship.process_containers(40)
        self.assertEqual(ship.containers_remaining, 0)
        self.assertTrue(ship.is_completed())

    def test_crane_assignment_on_ship_is_unique(self):
        ship = Ship(id=1, containers=50)
        ship.assign_crane(3)
        ship.assign_crane(3)
        self.assertEqual(ship.assigned_cranes, [3])

        ship.unassign_crane(3)
        self.assertEqual(ship.assigned_cranes, [])

    def test_waiting_time(self):
        ship = Ship(id=1, containers=10, arrival_time=2.0)
        self.assertEqual(ship.waiting_time(5.5), 3.5)

    def test_berth_occupation(self):
        berth = Berth(id=1)
        self.assertTrue(berth.is_free())
        berth.occupy(7)
        self.assertEqual(berth.occupied_by, 7)
        berth.free()
        self.assertTrue(berth.is_free())

    def test_crane_availability(self):
        crane = Crane(id=1, processing_speed=2.0)
        self.assertTrue(crane.is_free())
        crane.assign(4)
        self.assertFalse(crane.is_free())
        crane.unassign()
        self.assertTrue(crane.is_free())
        self.assertEqual(crane.containers_per_turn(), 20)


class TestPortState(unittest.TestCase):
    """Test case for the port snapshot."""

    def setUp(self):
        self.port = create_port(2, 2)
        self.port.add_ship(Ship(id=1, containers=30, arrival_time=0.0))
        self.port.add_ship(Ship(id=2, containers=40, arrival_time=0.0))

    def test_create_port(self):
        port = create_port(3, 4)
        self.assertEqual(sorted(port.berths), [0, 1, 2])
        self.assertEqual(sorted(port.cranes), [0, 1, 2, 3])
        self.assertEqual(port.ships, {})
        self.assertEqual(port.current_time, 0.0)

    def test_add_duplicate_ship_raises(self):
        with self.assertRaises(ValueError):
            self.port.add_ship(Ship(id=1, containers=10))

    def test_queries(self):
        self.assertEqual([s.id for s in self.port.waiting_ships()], [1, 2])
        self.assertEqual(self.port.docked_ships(), [])
        self.assertEqual([b.id for b in self.port.free_berths()], [0, 1])
        self.assertEqual([c.id for c in self.port.free_cranes()], [0, 1])

    def test_clone_is_independent(self):
        clone = self.port.clone()
        clone.ships[1].dock(0)
        clone.berths[0].occupy(1)
        clone.current_time = 9.0

        self.assertFalse(self.port.ships[1].is_docked())
        self.assertTrue(self.port.berths[0].is_free())
        self.assertEqual(self.port.current_time, 0.0)

    def test_score_penalizes_waiting_ships(self):
        self.assertEqual(self.port.calculate_score(), 0)

        self.port.current_time = 2.0
        # Two waiting ships, 2.0 time units each, 5 points per unit
        self.assertEqual(self.port.calculate_score(), -20)

    def test_score_rewards_processed_containers(self):
        self.port.ships[1].dock(0)
        self.port.berths[0].occupy(1)
        self.port.ships[1].process_containers(10)
        self.port.current_time = 1.3

        # 10 containers * 10 points, minus int(1.3 * 5) for the waiting ship
        self.assertEqual(self.port.calculate_score(), 100 - 6)

    def test_free_crane(self):
        AssignCraneAction(crane_id=0, ship_id=1).execute(self.port)
        self.port.free_crane(0)
        self.assertTrue(self.port.cranes[0].is_free())
        self.assertEqual(self.port.ships[1].assigned_cranes, [])

    def test_undock_ship(self):
        DockShipAction(ship_id=1, berth_id=0).execute(self.port)
        AssignCraneAction(crane_id=0, ship_id=1).execute(self.port)

        self.assertFalse(self.port.undock_ship(1, 1))
        self.assertTrue(self.port.undock_ship(1, 0))

        self.assertNotIn(1, self.port.ships)
        self.assertTrue(self.port.berths[0].is_free())
        self.assertTrue(self.port.cranes[0].is_free())

    def test_unload_keeps_emptied_ships_in_port(self):
        DockShipAction(ship_id=1, berth_id=0).perform(self.port)
        DockShipAction(ship_id=2, berth_id=1).perform(self.port)
        AssignCraneAction(crane_id=0, ship_id=1).perform(self.port)

        self.assertEqual(self.port.unload_docked_ships(), [])
        self.assertEqual(self.port.ships[1].containers_remaining, 20)
        # No crane, nothing unloaded
        self.assertEqual(self.port.ships[2].containers_remaining, 40)

        self.port.unload_docked_ships()
        self.assertEqual(self.port.unload_docked_ships(), [1])
        self.assertTrue(self.port.ships[1].is_completed())
        self.assertEqual(self.port.berths[0].occupied_by, 1)
        self.assertEqual(self.port.cranes[0].assigned_to, 1)

    def test_release_completed_ships(self):
        DockShipAction(ship_id=1, berth_id=0).perform(self.port)
        DockShipAction(ship_id=2, berth_id=1).perform(self.port)
        AssignCraneAction(crane_id=0, ship_id=1).perform(self.port)
        AssignCraneAction(crane_id=1, ship_id=1).perform(self.port)
        self.port.ships[1].process_containers(30)

        self.assertEqual(self.port.release_completed_ships(), [1])

        self.assertNotIn(1, self.port.ships)
        self.assertTrue(self.port.berths[0].is_free())
        self.assertEqual(len(self.port.free_cranes()), 2)
        self.assertEqual(self.port.ships[2].docked_at, 1)
        assert_consistent(self, self.port)

    def test_release_ship_requires_docking(self):
        self.assertFalse(self.port.release_ship(1))
        self.assertFalse(self.port.release_ship(99))
        self.assertIn(1, self.port.ships)

    def test_json_serialization(self):
        DockShipAction(ship_id=1, berth_id=0).execute(self.port)
        data = json.loads(self.port.to_json())
        self.assertEqual(data["score"], self.port.calculate_score())

        restored = PortState.from_json(self.port.to_json())
        self.assertEqual(restored.to_dict(), self.port.to_dict())
        assert_consistent(self, restored)


class TestActionGeneration(unittest.TestCase):
    """Test case for the exhaustive action generator."""

    def test_dock_actions_cover_every_pair(self):
        port = create_port(2, 1)
        for i in range(3):
            port.add_ship(Ship(id=i, containers=30))

        actions = generate_actions(port)

        self.assertEqual(len(actions), 3 * 2)
        self.assertTrue(all(isinstance(a, DockShipAction) for a in actions))
        self.assertEqual(len(set(actions)), len(actions))
        self.assertEqual(actions[0], DockShipAction(ship_id=0, berth_id=0))
        self.assertEqual(actions[1], DockShipAction(ship_id=0, berth_id=1))

    def test_crane_actions_for_docked_ships(self):
        port = create_port(2, 2)
        port.add_ship(Ship(id=1, containers=30))
        port.add_ship(Ship(id=2, containers=30))
        DockShipAction(ship_id=1, berth_id=0).execute(port)

        actions = generate_actions(port)

        docks = [a for a in actions if isinstance(a, DockShipAction)]
        assigns = [a for a in actions if isinstance(a, AssignCraneAction)]
        self.assertEqual(docks, [DockShipAction(ship_id=2, berth_id=1)])
        self.assertEqual(assigns, [
            AssignCraneAction(crane_id=0, ship_id=1),
            AssignCraneAction(crane_id=1, ship_id=1),
        ])
        # Dock actions come before crane assignments
        self.assertEqual(actions, docks + assigns)

    def test_pass_when_nothing_to_do(self):
        self.assertEqual(generate_actions(create_port(2, 2)), [PassAction()])

        # Waiting ship but no berth
        port = create_port(0, 2)
        port.add_ship(Ship(id=1, containers=30))
        self.assertEqual(generate_actions(port), [PassAction()])

    def test_pass_is_never_combined(self):
        port = create_port(1, 1)
        port.add_ship(Ship(id=1, containers=30))
        actions = generate_actions(port)
        self.assertNotIn(PassAction(), actions)

    def test_unassign_is_never_generated(self):
        port = create_port(2, 2)
        port.add_ship(Ship(id=1, containers=100))
        state = apply_action(port, DockShipAction(ship_id=1, berth_id=0))
        state = apply_action(state, AssignCraneAction(crane_id=0, ship_id=1))

        actions = generate_actions(state)
        self.assertFalse(any(isinstance(a, UnassignCraneAction) for a in actions))

    def test_docked_pair_is_not_reoffered(self):
        port = create_port(2, 1)
        port.add_ship(Ship(id=1, containers=30))
        port.add_ship(Ship(id=2, containers=30))

        state = apply_action(port, DockShipAction(ship_id=1, berth_id=0))
        actions = generate_actions(state)

        self.assertNotIn(DockShipAction(ship_id=1, berth_id=0), actions)
        self.assertNotIn(DockShipAction(ship_id=2, berth_id=0), actions)
        self.assertIn(DockShipAction(ship_id=2, berth_id=1), actions)


class TestStateTransition(unittest.TestCase):
    """Test case for apply_action and the processing step."""

    def setUp(self):
        self.port = create_port(1, 1)
        self.port.add_ship(Ship(id=1, containers=30, arrival_time=0.0))

    def test_apply_action_is_pure(self):
        before = self.port.to_dict()
        apply_action(self.port, DockShipAction(ship_id=1, berth_id=0))
        self.assertEqual(self.port.to_dict(), before)

    def test_dock_ship(self):
        state = apply_action(self.port, DockShipAction(ship_id=1, berth_id=0))
        self.assertEqual(state.ships[1].docked_at, 0)
        self.assertEqual(state.berths[0].occupied_by, 1)
        self.assertEqual(state.current_time, 1.0)
        # No crane yet, nothing processed
        self.assertEqual(state.ships[1].containers_remaining, 30)
        assert_consistent(self, state)

    def test_assign_crane_processes_one_step(self):
        state = apply_action(self.port, DockShipAction(ship_id=1, berth_id=0))
        state = apply_action(state, AssignCraneAction(crane_id=0, ship_id=1))

        self.assertEqual(state.cranes[0].assigned_to, 1)
        self.assertEqual(state.ships[1].assigned_cranes, [0])
        self.assertEqual(state.ships[1].containers_remaining, 20)
        self.assertEqual(state.current_time, 2.0)
        assert_consistent(self, state)

    def test_completed_ship_leaves_and_frees_resources(self):
        state = apply_action(self.port, DockShipAction(ship_id=1, berth_id=0))
        state = apply_action(state, AssignCraneAction(crane_id=0, ship_id=1))
        state = apply_action(state, PassAction())
        self.assertEqual(state.ships[1].containers_remaining, 10)

        state = apply_action(state, PassAction())

        self.assertNotIn(1, state.ships)
        self.assertTrue(state.berths[0].is_free())
        self.assertTrue(state.cranes[0].is_free())
        self.assertEqual(state.current_time, 3.0)
        self.assertEqual(generate_actions(state), [PassAction()])

    def test_processing_scales_with_crane_count(self):
        port = create_port(1, 2)
        port.add_ship(Ship(id=1, containers=100))
        state = apply_action(port, DockShipAction(ship_id=1, berth_id=0))
        state = apply_action(state, AssignCraneAction(crane_id=0, ship_id=1))
        self.assertEqual(state.ships[1].containers_remaining, 90)

        state = apply_action(state, AssignCraneAction(crane_id=1, ship_id=1))
        self.assertEqual(state.ships[1].containers_remaining, 70)

    def test_unassign_crane(self):
        port = create_port(1, 1)
        port.add_ship(Ship(id=1, containers=100))
        state = apply_action(port, DockShipAction(ship_id=1, berth_id=0))
        state = apply_action(state, AssignCraneAction(crane_id=0, ship_id=1))
        state = apply_action(state, UnassignCraneAction(crane_id=0))

        self.assertTrue(state.cranes[0].is_free())
        self.assertEqual(state.ships[1].assigned_cranes, [])
        self.assertEqual(state.current_time, 2.5)
        # Processing ran before the unassignment only
        self.assertEqual(state.ships[1].containers_remaining, 90)
        assert_consistent(self, state)

    def test_perform_leaves_clock_alone(self):
        port = self.port.clone()
        DockShipAction(ship_id=1, berth_id=0).perform(port)
        AssignCraneAction(crane_id=0, ship_id=1).perform(port)
        PassAction().perform(port)

        self.assertEqual(port.current_time, 0.0)
        self.assertEqual(port.ships[1].containers_remaining, 30)
        self.assertEqual(port.cranes[0].assigned_to, 1)

    def test_pass_only_advances_clock(self):
        state = apply_action(self.port, PassAction())
        self.assertEqual(state.current_time, 0.5)
        self.assertEqual(state.ships[1].containers_remaining, 30)

    def test_unknown_ids_are_ignored(self):
        state = apply_action(self.port, DockShipAction(ship_id=99, berth_id=0))
        self.assertEqual(state.current_time, 1.0)
        self.assertFalse(state.ships[1].is_docked())


class TestActions(unittest.TestCase):
    """Test case for action validation and serialization."""

    def setUp(self):
        self.port = create_port(1, 1)
        self.port.add_ship(Ship(id=1, containers=30))

    def test_validate(self):
        self.assertTrue(DockShipAction(ship_id=1, berth_id=0).validate(self.port))
        self.assertFalse(DockShipAction(ship_id=2, berth_id=0).validate(self.port))
        self.assertFalse(AssignCraneAction(crane_id=0, ship_id=1).validate(self.port))
        self.assertFalse(UnassignCraneAction(crane_id=0).validate(self.port))
        self.assertTrue(PassAction().validate(self.port))

        self.port.apply_action(DockShipAction(ship_id=1, berth_id=0))
        self.assertFalse(DockShipAction(ship_id=1, berth_id=0).validate(self.port))
        self.assertTrue(AssignCraneAction(crane_id=0, ship_id=1).validate(self.port))

    def test_equality_and_hashing(self):
        self.assertEqual(PassAction(), PassAction())
        self.assertEqual(DockShipAction(1, 0), DockShipAction(ship_id=1, berth_id=0))
        self.assertNotEqual(DockShipAction(1, 0), DockShipAction(0, 1))
        self.assertEqual(len({PassAction(), PassAction(), UnassignCraneAction(0)}), 2)

    def test_dict_round_trip(self):
        for action in [DockShipAction(1, 0), AssignCraneAction(0, 1),
                       UnassignCraneAction(0), PassAction()]:
            self.assertEqual(create_action_from_dict(action.to_dict()), action)

        self.assertEqual(DockShipAction(1, 0).action_type, ActionType.DOCK_SHIP)
        self.assertEqual(str(AssignCraneAction(0, 1)), "Assign Crane#0 to Ship#1")


if __name__ == "__main__":
    unittest.main()
