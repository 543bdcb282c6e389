# models.py
# Simple data containers for trucks, warehouses and inventory items,
# plus the mapping from the backend's JSON shapes.

from enum import Enum


class TruckStatus(Enum):
    AVAILABLE = "available"
    ASSIGNED = "assigned"
    IN_TRANSIT = "in-transit"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out-of-service"

    @classmethod
    def parse(cls, value):
        # Backend sends IN_TRANSIT, screens use in-transit
        if value is None or value == "":
            return cls.AVAILABLE
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower().replace("_", "-"))


def _number(value, default=0.0):
    # BigDecimal fields can come through as strings
    if value is None or value == "":
        return default
    return float(value)


class Truck:
    def __init__(self, id, registration, capacity_weight, capacity_volume,
                 model="", driver_id=None, driver_name=None,
                 status=TruckStatus.AVAILABLE):
        if capacity_weight <= 0 or capacity_volume <= 0:
            raise ValueError(
                f"Truck {id}: capacity must be positive "
                f"(weight={capacity_weight}, volume={capacity_volume})"
            )

        self.id = id
        self.registration = registration
        self.model = model

        # Capacity limits used by the planner
        self.capacity_weight = capacity_weight
        self.capacity_volume = capacity_volume

        # Optional driver reference
        self.driver_id = driver_id
        self.driver_name = driver_name

        self.status = TruckStatus.parse(status)

    @property
    def label(self):
        if self.model:
            return f"{self.registration} - {self.model}"
        return self.registration

    @classmethod
    def from_json(cls, data):
        return cls(
            id=data["truckId"],
            registration=str(data.get("registrationNumber", "")),
            model=str(data.get("model") or ""),
            capacity_weight=_number(data.get("capacityWeight")),
            capacity_volume=_number(data.get("capacityVolume")),
            driver_id=data.get("driverId"),
            driver_name=data.get("driverName"),
            status=data.get("status"),
        )

    def __repr__(self):
        return (f"Truck(id={self.id!r}, registration={self.registration!r}, "
                f"capacity_weight={self.capacity_weight}, "
                f"capacity_volume={self.capacity_volume})")


class Warehouse:
    def __init__(self, id, name, location="", active=True):
        self.id = id
        self.name = name
        self.location = location
        self.active = active

    @property
    def label(self):
        if self.location:
            return f"{self.name} - {self.location}"
        return self.name

    @classmethod
    def from_json(cls, data):
        active = data.get("isActive")
        return cls(
            id=data["warehouseId"],
            name=str(data.get("name", "")),
            location=str(data.get("location") or ""),
            active=True if active is None else bool(active),
        )

    def __repr__(self):
        return f"Warehouse(id={self.id!r}, name={self.name!r})"


class InventoryItem:
    def __init__(self, id, name, sku, quantity, weight, volume,
                 warehouse_id=None):
        if quantity < 0:
            raise ValueError(f"Inventory item {id}: quantity cannot be negative ({quantity})")

        self.id = id
        self.name = name
        self.sku = sku
        self.quantity = quantity

        # Per-unit figures; the planner ships the full quantity on hand
        self.weight = weight
        self.volume = volume

        self.warehouse_id = warehouse_id

    def total_weight(self):
        return self.weight * self.quantity

    def total_volume(self):
        return self.volume * self.quantity

    def matches(self, term):
        # Case-insensitive substring match on name or SKU
        needle = term.strip().casefold()
        if needle == "":
            return True
        return needle in self.name.casefold() or needle in self.sku.casefold()

    @classmethod
    def from_json(cls, data):
        name = data.get("name")
        if name is None:
            name = data.get("itemName", "")
        return cls(
            id=data["inventoryId"],
            name=str(name),
            sku=str(data.get("sku") or ""),
            quantity=int(data.get("quantity") or 0),
            weight=_number(data.get("weight")),
            volume=_number(data.get("volume")),
            warehouse_id=data.get("warehouseId"),
        )

    def __repr__(self):
        return (f"InventoryItem(id={self.id!r}, sku={self.sku!r}, "
                f"quantity={self.quantity})")
