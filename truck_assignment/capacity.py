# capacity.py
# Pure helpers for selection totals and truck capacity checks.


def compute_totals(items):
    """
    items: iterable of InventoryItem objects (the current selection)

    Totals are rebuilt from scratch on every call, so removing an item
    never leaves rounding residue behind.
    """
    total_weight = 0.0
    total_volume = 0.0
    total_units = 0
    count = 0

    for item in items:
        total_weight += item.weight * item.quantity
        total_volume += item.volume * item.quantity
        total_units += item.quantity
        count += 1

    return {
        "weight": total_weight,
        "volume": total_volume,
        "units": total_units,
        "items": count,
    }


def format_amount(value):
    # 1100.0 -> "1100", 12.3456 -> "12.35"
    if float(value).is_integer():
        return str(int(value))
    return str(round(value, 2))


# Float sums such as 0.1 + 0.2 land a hair above the exact limit
EPS = 1e-6


def weight_exceeded(totals, truck):
    return totals["weight"] > truck.capacity_weight + EPS


def volume_exceeded(totals, truck):
    return totals["volume"] > truck.capacity_volume + EPS


def capacity_problems(totals, truck):
    """Return the capacity messages for this truck, weight first."""
    problems = []

    if weight_exceeded(totals, truck):
        problems.append(
            f"Total weight ({format_amount(totals['weight'])} kg) exceeds "
            f"truck capacity ({format_amount(truck.capacity_weight)} kg)"
        )

    if volume_exceeded(totals, truck):
        problems.append(
            f"Total volume ({format_amount(totals['volume'])} m³) exceeds "
            f"truck capacity ({format_amount(truck.capacity_volume)} m³)"
        )

    return problems


def utilisation(totals, truck):
    # Percent of each capacity used by the selection
    return {
        "weight_pct": round(totals["weight"] / truck.capacity_weight * 100, 1),
        "volume_pct": round(totals["volume"] / truck.capacity_volume * 100, 1),
    }
