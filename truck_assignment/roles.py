# roles.py
# Closed set of user roles and what each one is allowed to do.

from enum import Enum


class Role(Enum):
    ADMIN = "admin"
    LOGISTICS_MANAGER = "logistics_manager"
    WAREHOUSE_STAFF = "warehouse_staff"
    DELIVERY_DRIVER = "delivery_driver"

    @classmethod
    def parse(cls, value):
        # Backend may send "ROLE_admin" or "ADMIN"
        text = str(value).strip().lower()
        if text.startswith("role_"):
            text = text[len("role_"):]
        return cls(text)


class Action(Enum):
    VIEW_DASHBOARD = "view_dashboard"
    MANAGE_WAREHOUSES = "manage_warehouses"
    ADD_INVENTORY = "add_inventory"
    REORDER_INVENTORY = "reorder_inventory"
    ASSIGN_INVENTORY = "assign_inventory"
    MANAGE_TRUCKS = "manage_trucks"
    VIEW_ASSIGNMENTS = "view_assignments"


CAPABILITIES = {
    Role.ADMIN: frozenset(Action),
    Role.LOGISTICS_MANAGER: frozenset(Action),
    Role.WAREHOUSE_STAFF: frozenset({
        Action.VIEW_DASHBOARD,
        Action.ADD_INVENTORY,
        Action.ASSIGN_INVENTORY,
        Action.VIEW_ASSIGNMENTS,
    }),
    Role.DELIVERY_DRIVER: frozenset({
        Action.VIEW_DASHBOARD,
        Action.VIEW_ASSIGNMENTS,
    }),
}


def can(role, action):
    if role is None:
        return False
    return action in CAPABILITIES[role]


def permitted_actions(role):
    if role is None:
        return frozenset()
    return CAPABILITIES[role]
