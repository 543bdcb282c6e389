# plan_from_csv.py
# Reads trucks and inventory from CSV exports, suggests which items fit on
# a truck, prints the result and saves a manifest CSV.

import argparse
import csv
import os

from truck_assignment.capacity import capacity_problems, compute_totals, utilisation
from truck_assignment.manifest import manifest_csv
from truck_assignment.models import InventoryItem, Truck
from truck_assignment.optimizer import suggest_selection


def load_trucks_from_csv(csv_path):
    # Columns follow the backend JSON: truckId, registrationNumber, model,
    # capacityWeight, capacityVolume, driverName, status
    trucks = []
    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            trucks.append(Truck.from_json(row))
    return trucks


def load_inventory_from_csv(csv_path, warehouse_id=None):
    # Columns: inventoryId, name, sku, quantity, weight, volume, warehouseId
    items = []
    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            if warehouse_id is not None and row.get("warehouseId") != warehouse_id:
                continue
            items.append(InventoryItem.from_json(row))
    return items


def parse_args():
    parser = argparse.ArgumentParser(
        description="Suggest a truck load from CSV exports of trucks and inventory."
    )

    parser.add_argument(
        "--trucks",
        required=True,
        help="Path to the trucks CSV file."
    )

    parser.add_argument(
        "--inventory",
        required=True,
        help="Path to the inventory CSV file."
    )

    parser.add_argument(
        "--truck-id",
        required=True,
        help="Which truck to load (matches the truckId column)."
    )

    parser.add_argument(
        "--warehouse-id",
        default=None,
        help="Only consider inventory stored in this warehouse (matches warehouseId)."
    )

    parser.add_argument(
        "--objective",
        choices=["weight", "units"],
        default="weight",
        help="Maximise loaded weight or number of units moved."
    )

    parser.add_argument(
        "--output",
        default="output/assignment_manifest.csv",
        help="Where to write the manifest CSV."
    )

    return parser.parse_args()


def save_manifest(items, output_path):
    folder = os.path.dirname(output_path)
    if folder != "" and not os.path.exists(folder):
        os.makedirs(folder)

    with open(output_path, "w", newline="") as f:
        f.write(manifest_csv(items))


def main():
    args = parse_args()

    trucks = load_trucks_from_csv(args.trucks)
    truck = None
    for t in trucks:
        if str(t.id) == args.truck_id:
            truck = t
    if truck is None:
        raise SystemExit(f"Truck {args.truck_id} not found in {args.trucks}")

    items = load_inventory_from_csv(args.inventory, args.warehouse_id)

    print("Truck:", truck.label)
    print("Capacity:", truck.capacity_weight, "kg /", truck.capacity_volume, "m³")
    print("Candidate items:", len(items))
    print("Objective:", args.objective)
    print()

    result = suggest_selection(items, truck, objective=args.objective)
    chosen = result["chosen_items"]

    totals = compute_totals(chosen)
    usage = utilisation(totals, truck)

    print("Status:", result["status"])
    print("Total Weight:", round(result["total_weight"], 2), f"kg ({usage['weight_pct']}%)")
    print("Total Volume:", round(result["total_volume"], 2), f"m³ ({usage['volume_pct']}%)")
    print("Total Units:", result["total_units"])
    for problem in capacity_problems(totals, truck):
        print("WARNING:", problem)
    print()
    print("Chosen Items:")

    for item in chosen:
        print(
            "  Item", item.id,
            "|", item.name,
            "| sku =", item.sku,
            "| qty =", item.quantity,
            "| weight =", round(item.total_weight(), 2),
            "| volume =", round(item.total_volume(), 2)
        )

    save_manifest(chosen, args.output)
    print()
    print("Saved manifest to:", args.output)


if __name__ == "__main__":
    main()
