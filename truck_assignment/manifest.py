# manifest.py
# Tables of a selection for display and CSV download.

import io

import pandas as pd

from .capacity import compute_totals

COLUMNS = [
    "id",
    "name",
    "sku",
    "quantity",
    "unit_weight_kg",
    "unit_volume_m3",
    "total_weight_kg",
    "total_volume_m3",
]


def selection_dataframe(items):
    rows = []
    for item in items:
        rows.append({
            "id": item.id,
            "name": item.name,
            "sku": item.sku,
            "quantity": item.quantity,
            "unit_weight_kg": item.weight,
            "unit_volume_m3": item.volume,
            "total_weight_kg": round(item.total_weight(), 2),
            "total_volume_m3": round(item.total_volume(), 2),
        })
    return pd.DataFrame(rows, columns=COLUMNS)


def manifest_dataframe(items):
    """Selection rows followed by a TOTAL row."""
    items = list(items)
    df = selection_dataframe(items)
    totals = compute_totals(items)

    total_row = {
        "id": "TOTAL",
        "name": "",
        "sku": "",
        "quantity": totals["units"],
        "unit_weight_kg": "",
        "unit_volume_m3": "",
        "total_weight_kg": round(totals["weight"], 2),
        "total_volume_m3": round(totals["volume"], 2),
    }
    if df.empty:
        return pd.DataFrame([total_row], columns=COLUMNS)
    return pd.concat([df, pd.DataFrame([total_row])], ignore_index=True)


def manifest_csv(items):
    buffer = io.StringIO()
    manifest_dataframe(items).to_csv(buffer, index=False)
    return buffer.getvalue()
