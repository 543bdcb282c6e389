# optimizer.py
# Suggests which inventory items to put on a truck.
# Each item ships whole (its full quantity on hand) or not at all.

import pulp

from .capacity import compute_totals

OBJECTIVES = ("weight", "units")


def suggest_selection(items, truck, objective="weight", exclude_ids=None):
    """
    items:     list of InventoryItem objects (one origin warehouse)
    truck:     Truck with capacity_weight / capacity_volume
    objective: "weight" -> fill as much of the weight capacity as possible
               "units"  -> move as many units as possible
    exclude_ids: item ids the user does not want considered
    """
    if objective not in OBJECTIVES:
        raise ValueError(f"objective must be one of {OBJECTIVES}, got {objective!r}")

    # Nothing to gain from zero-quantity lines
    candidates = []
    for item in items:
        if item.quantity <= 0:
            continue
        if exclude_ids and item.id in exclude_ids:
            continue
        candidates.append(item)

    if not candidates:
        return _result("Optimal", [])

    prob = pulp.LpProblem("Truck_Load_Suggestion", pulp.LpMaximize)

    # Binary decision variable per item; keys are positions since ids
    # are not guaranteed to be valid variable names
    x = {}
    for pos, item in enumerate(candidates):
        x[pos] = pulp.LpVariable(f"x_{pos}", cat=pulp.LpBinary)

    if objective == "weight":
        prob += pulp.lpSum(item.total_weight() * x[pos] for pos, item in enumerate(candidates))
    else:
        prob += pulp.lpSum(item.quantity * x[pos] for pos, item in enumerate(candidates))

    # Weight capacity
    prob += pulp.lpSum(
        item.total_weight() * x[pos] for pos, item in enumerate(candidates)
    ) <= truck.capacity_weight

    # Volume capacity
    prob += pulp.lpSum(
        item.total_volume() * x[pos] for pos, item in enumerate(candidates)
    ) <= truck.capacity_volume

    prob.solve(pulp.PULP_CBC_CMD(msg=False))

    chosen = []
    for pos, item in enumerate(candidates):
        value = pulp.value(x[pos])
        if value is not None and value > 0.5:
            chosen.append(item)

    return _result(pulp.LpStatus[prob.status], chosen)


def _result(status, chosen):
    totals = compute_totals(chosen)
    return {
        "status": status,
        "chosen_items": chosen,
        "total_weight": totals["weight"],
        "total_volume": totals["volume"],
        "total_units": totals["units"],
    }
