from truck_assignment.errors import ValidationError
from truck_assignment.models import InventoryItem, Truck, Warehouse
from truck_assignment.optimizer import suggest_selection
from truck_assignment.planner import AssignmentPlanner


class InMemoryBackend:
    # Stands in for ApiClient so the demo runs without a server
    def __init__(self, trucks, warehouses, inventory):
        self.trucks = trucks
        self.warehouses = warehouses
        self.inventory = inventory
        self.assignments = []

    def list_trucks(self):
        return self.trucks

    def list_warehouses(self):
        return self.warehouses

    def list_inventory(self, warehouse_id):
        return [i for i in self.inventory if i.warehouse_id == warehouse_id]

    def submit_assignment(self, truck_id, origin_id, destination_id, inventory_ids):
        self.assignments.append((truck_id, origin_id, destination_id, list(inventory_ids)))
        return {"success": True, "assignmentId": len(self.assignments),
                "message": "Inventory assigned successfully"}


def main():
    backend = InMemoryBackend(
        trucks=[
            Truck(id=1, registration="TRK-001", model="Volvo FH",
                  capacity_weight=1000.0, capacity_volume=10.0),
        ],
        warehouses=[
            Warehouse(id=1, name="North Hub", location="Leeds"),
            Warehouse(id=2, name="South Hub", location="Bristol"),
        ],
        inventory=[
            InventoryItem(id=11, name="Blue Widget", sku="BW1", quantity=2,
                          weight=400.0, volume=1.5, warehouse_id=1),
            InventoryItem(id=12, name="Red Gadget", sku="RG2", quantity=1,
                          weight=300.0, volume=2.0, warehouse_id=1),
            InventoryItem(id=13, name="Green Crate", sku="GC3", quantity=4,
                          weight=40.0, volume=0.5, warehouse_id=1),
        ],
    )

    planner = AssignmentPlanner(backend, navigate=lambda truck_id, resp: print(
        f"-> go to truck {truck_id} (assignment {resp['assignmentId']})"))
    planner.load()

    planner.select_truck(1)
    planner.select_destination(2)
    planner.toggle_item(11)
    planner.toggle_item(12)
    print("Totals:", planner.totals)

    try:
        planner.submit()
    except ValidationError as e:
        print("Blocked:", e.message)

    result = suggest_selection(planner.inventory, planner.truck)
    print("Suggestion status:", result["status"])
    planner.apply_suggestion([item.id for item in result["chosen_items"]])
    print("Suggested totals:", planner.totals)

    planner.submit()
    print("Recorded assignments:", backend.assignments)


if __name__ == "__main__":
    main()
