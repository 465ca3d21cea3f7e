"""Tests for ship agents."""
from porttown.core.events import (
    ActionStateChangedEvent, ShipCargoChangedEvent, TradeTargetChangedEvent,
)
from porttown.core.ledger import Ledger
from porttown.core.registries import Good
from porttown.core.world import World
from porttown.entities.ports import create_port
from porttown.entities.ships import Ship, ShipType, create_ship
from porttown.simulation.economy import TownEconomy
from porttown.simulation.selection import ActionState

FISH = Good("fish", "Fish", 4.0)


class TestShip:
    """Tests for Ship state."""

    def test_create_ship(self):
        """Test factory defaults and registration."""
        world = World()
        ship = create_ship(world, "Gull", ShipType.SLOOP, cargo={FISH: 4})

        assert world.ships["Gull"] is ship
        assert ship.ledger.balance == 500.0
        assert ship.cargo_quantity(FISH) == 4

    def test_cargo_events(self):
        """Test cargo changes are published."""
        world = World()
        received = []
        world.event_bus.subscribe(ShipCargoChangedEvent, received.append)
        ship = create_ship(world, "Gull")

        ship.add_cargo(FISH, 3)
        ship.remove_cargo(FISH, 1)
        ship.remove_cargo(FISH, 10)

        assert len(received) == 2

    def test_remove_cargo_syncs_selection(self):
        """Test selections shrink with the hold."""
        ship = Ship("Gull", Ledger("Gull", 0.0))
        ship.add_cargo(FISH, 5)
        ship.set_action_state(ActionState.DROPPING)
        ship.toggle_selection(FISH)
        ship.set_selected_quantity(FISH, 5)

        ship.remove_cargo(FISH, 3)

        assert ship.selection.selected_quantity(FISH) == 2

    def test_selection_buttons(self):
        """Test the +/-1 and +/-10 buttons clamp to the hold."""
        ship = Ship("Gull", Ledger("Gull", 0.0))
        ship.add_cargo(FISH, 14)
        ship.set_action_state(ActionState.SELLING)
        ship.toggle_selection(FISH)

        assert ship.increase_selected(FISH, large_step=True) == 11
        assert ship.increase_selected(FISH, large_step=True) == 14
        assert ship.decrease_selected(FISH) == 13
        assert ship.decrease_selected(FISH, large_step=True) == 3
        assert ship.decrease_selected(FISH, large_step=True) == 0

    def test_action_state_events(self):
        """Test action state changes are published once per change."""
        ship = Ship("Gull", Ledger("Gull", 0.0))
        received = []
        ship.event_bus.subscribe(ActionStateChangedEvent, received.append)

        ship.set_action_state(ActionState.SELLING)
        ship.set_action_state(ActionState.SELLING)
        ship.exit_action_state()

        assert [e.state for e in received] == ["selling", "normal"]

    def test_trade_targets(self):
        """Test port and other-ship associations change only through set/clear."""
        world = World()
        town = TownEconomy("Saltmarsh", Ledger("Saltmarsh", 100.0))
        port = create_port(world, "Saltmarsh Quay", town)
        ship = create_ship(world, "Wayfarer")
        other = create_ship(world, "Gull")
        received = []
        world.event_bus.subscribe(TradeTargetChangedEvent, received.append)

        assert not ship.has_trade_target
        ship.set_current_port(port)
        ship.set_current_other_ship(other)
        assert ship.current_port is port
        assert ship.current_other_ship is other

        ship.clear_current_port()
        ship.clear_current_other_ship()
        assert not ship.has_trade_target
        assert received[0].port_name == "Saltmarsh Quay"
        assert received[1].other_ship_name == "Gull"
        assert len(received) == 4

    def test_cannot_target_itself(self):
        """Test a ship is never its own trade partner."""
        ship = Ship("Gull", Ledger("Gull", 0.0))
        ship.set_current_other_ship(ship)
        assert ship.current_other_ship is None

    def test_snapshot(self):
        """Test the read-only snapshot."""
        ship = Ship("Gull", Ledger("Gull", 25.0))
        ship.add_cargo(FISH, 2)

        snap = ship.snapshot()

        assert snap.balance == 25.0
        assert snap.action_state == ActionState.NORMAL
        assert snap.port_name is None
        assert snap.slots[0].held == 2
