"""Shared fixtures: a small world of trucks, warehouses and inventory."""

import pytest

from truck_assignment.models import InventoryItem, Truck, Warehouse
from truck_assignment.planner import AssignmentPlanner

from tests.fakes import FakeProvider


@pytest.fixture
def truck():
    return Truck(id=1, registration="TRK-001", model="Volvo FH",
                 capacity_weight=1000.0, capacity_volume=10.0)


@pytest.fixture
def warehouses():
    return [
        Warehouse(id=1, name="Warehouse A", location="Leeds"),
        Warehouse(id=2, name="Warehouse B", location="Bristol"),
        Warehouse(id=3, name="Warehouse C", location="York"),
    ]


@pytest.fixture
def inventory():
    return [
        InventoryItem(id=11, name="Blue Widget", sku="BW1", quantity=2,
                      weight=400.0, volume=1.5, warehouse_id=1),
        InventoryItem(id=12, name="Red Gadget", sku="RG2", quantity=1,
                      weight=300.0, volume=2.0, warehouse_id=1),
        InventoryItem(id=13, name="Green Crate", sku="GC3", quantity=4,
                      weight=25.0, volume=0.5, warehouse_id=1),
        InventoryItem(id=21, name="Yellow Drum", sku="YD1", quantity=3,
                      weight=10.0, volume=0.2, warehouse_id=2),
    ]


@pytest.fixture
def provider(truck, warehouses, inventory):
    return FakeProvider([truck], warehouses, inventory)


@pytest.fixture
def planner(provider):
    planner = AssignmentPlanner(provider)
    planner.load()
    return planner


@pytest.fixture
def ready_planner(planner):
    """Truck, origin A, destination B and one item within capacity."""
    planner.select_truck(1)
    planner.select_destination(2)
    planner.toggle_item(12)
    return planner
