# planner.py
# In-progress inventory-to-truck assignment: selectors, item selection,
# running totals, validation and submission.

import logging
from enum import Enum

from . import config
from .capacity import capacity_problems, compute_totals, utilisation
from .errors import (
    AssignmentRejected,
    AuthorizationError,
    InvalidStateError,
    TransportError,
    ValidationError,
)
from .models import TruckStatus

logger = logging.getLogger(__name__)

SAME_WAREHOUSE_MESSAGE = "Origin and destination warehouses cannot be the same"


class PlannerState(Enum):
    EMPTY = "empty"
    ORIGIN_CHOSEN = "origin_chosen"
    CONFIGURING = "configuring"
    VALID = "valid"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class AssignmentPlanner:
    """
    One planner per assignment screen.

    provider must offer list_trucks(), list_warehouses(),
    list_inventory(warehouse_id) and
    submit_assignment(truck_id, origin_id, destination_id, inventory_ids);
    ApiClient does. navigate, if given, is called with
    (truck_id, response) after a successful submission.
    """

    def __init__(self, provider, navigate=None):
        self.provider = provider
        self.navigate = navigate

        self.trucks = []
        self.warehouses = []
        self.inventory = []

        self.truck_id = None
        self.origin_id = None
        self.destination_id = None
        self.search = ""

        # item id -> InventoryItem, in the order the user picked them
        self._selected = {}
        self.totals = compute_totals([])

        self.error = None
        self.last_response = None
        self._submitting = False
        self._submitted = False

    # -----------------------------
    # Derived state
    # -----------------------------

    @property
    def state(self):
        if self._submitting:
            return PlannerState.SUBMITTING
        if self._submitted:
            return PlannerState.SUBMITTED
        if self.check() is None:
            return PlannerState.VALID
        if self.truck_id is None and self.destination_id is None and not self._selected:
            if self.origin_id is None:
                return PlannerState.EMPTY
            return PlannerState.ORIGIN_CHOSEN
        return PlannerState.CONFIGURING

    @property
    def truck(self):
        return self._find(self.trucks, self.truck_id)

    @property
    def origin(self):
        return self._find(self.warehouses, self.origin_id)

    @property
    def destination(self):
        return self._find(self.warehouses, self.destination_id)

    @property
    def selected_ids(self):
        return list(self._selected)

    def selected_items(self):
        return list(self._selected.values())

    def is_selected(self, item_id):
        return item_id in self._selected

    def destination_options(self):
        return [w for w in self.warehouses if w.id != self.origin_id]

    def visible_inventory(self):
        return [item for item in self.inventory if item.matches(self.search)]

    def utilisation(self):
        truck = self.truck
        if truck is None:
            return None
        return utilisation(self.totals, truck)

    # -----------------------------
    # Loading
    # -----------------------------

    def load(self):
        """Fetch trucks and warehouses; default the origin to the first warehouse."""
        self._ensure_editable()
        # Only trucks free to take a new load are offered
        self.trucks = [t for t in self.provider.list_trucks()
                       if t.status == TruckStatus.AVAILABLE]
        self.warehouses = list(self.provider.list_warehouses())
        logger.info("Loaded %d trucks and %d warehouses",
                    len(self.trucks), len(self.warehouses))

        if self.origin_id is None and self.warehouses:
            self.select_origin(self.warehouses[0].id)

    # -----------------------------
    # Mutations
    # -----------------------------

    def select_truck(self, truck_id):
        self._ensure_editable()
        if truck_id is not None and self._find(self.trucks, truck_id) is None:
            raise ValidationError(f"Unknown truck {truck_id}")
        self.truck_id = truck_id
        self.error = None

    def select_origin(self, warehouse_id):
        self._ensure_editable()
        if warehouse_id == self.origin_id:
            return
        if warehouse_id is not None and self._find(self.warehouses, warehouse_id) is None:
            raise ValidationError(f"Unknown warehouse {warehouse_id}")

        logger.info("Origin warehouse changed %s -> %s", self.origin_id, warehouse_id)
        self.origin_id = warehouse_id
        self.inventory = []
        self._clear_selection()

        # Destination can never equal the origin
        if warehouse_id is not None and self.destination_id == warehouse_id:
            self.destination_id = None

        if warehouse_id is not None:
            try:
                self.inventory = list(self.provider.list_inventory(warehouse_id))
            except (TransportError, AuthorizationError) as e:
                logger.error("Could not load inventory for warehouse %s: %s",
                             warehouse_id, e.message)
                self.error = e.message
                raise

    def select_destination(self, warehouse_id):
        self._ensure_editable()
        if warehouse_id is not None:
            if self._find(self.warehouses, warehouse_id) is None:
                raise ValidationError(f"Unknown warehouse {warehouse_id}")
            if warehouse_id == self.origin_id:
                raise ValidationError(SAME_WAREHOUSE_MESSAGE)
        self.destination_id = warehouse_id
        self.error = None

    def toggle_item(self, item_id):
        self._ensure_editable()
        if item_id in self._selected:
            del self._selected[item_id]
        else:
            self._selected[item_id] = self._inventory_item(item_id)
        self._recompute()

    def remove_item(self, item_id):
        self._ensure_editable()
        if item_id in self._selected:
            del self._selected[item_id]
            self._recompute()

    def apply_suggestion(self, item_ids):
        self._ensure_editable()
        chosen = {item_id: self._inventory_item(item_id) for item_id in item_ids}
        self._selected = chosen
        self._recompute()

    def set_search(self, term):
        # Filtering only changes what is shown, never the selection
        self.search = term or ""

    # -----------------------------
    # Validation and submission
    # -----------------------------

    def check(self):
        """Return the first failing rule's message, or None when submittable."""
        if self.truck_id is None:
            return "Please select a truck"
        if self.origin_id is None:
            return "Please select an origin warehouse"
        if self.destination_id is None:
            return "Please select a destination warehouse"
        if self.origin_id == self.destination_id:
            return SAME_WAREHOUSE_MESSAGE
        if not self._selected:
            return "Please select at least one inventory item"

        truck = self.truck
        if truck is None:
            return "Please select a truck"
        problems = capacity_problems(self.totals, truck)
        if problems:
            return problems[0]
        return None

    def validate(self):
        message = self.check()
        if message is not None:
            raise ValidationError(message)

    def can_submit(self):
        return self.state == PlannerState.VALID

    def submit(self):
        self._ensure_editable()

        message = self.check()
        if message is not None:
            logger.warning("Submission blocked: %s", message)
            self.error = message
            raise ValidationError(message)

        truck_id = self.truck_id
        self.error = None
        self._submitting = True
        logger.info("Submitting %d items on truck %s (%s -> %s)",
                    len(self._selected), truck_id, self.origin_id, self.destination_id)
        try:
            response = self.provider.submit_assignment(
                truck_id, self.origin_id, self.destination_id, self.selected_ids
            )
        except AssignmentRejected as e:
            logger.warning("Assignment rejected: %s", e.message)
            self.error = e.message
            raise
        except AuthorizationError as e:
            self.error = e.message
            raise
        except TransportError as e:
            logger.error("Assignment submit failed: %s", e.message)
            self.error = config.RETRY_MESSAGE
            raise
        finally:
            self._submitting = False

        self.last_response = response
        self._submitted = True
        self.truck_id = None
        self.origin_id = None
        self.destination_id = None
        self.inventory = []
        self._clear_selection()
        logger.info("Assignment submitted for truck %s", truck_id)

        if self.navigate is not None:
            self.navigate(truck_id, response)
        return response

    # -----------------------------
    # Internals
    # -----------------------------

    def _ensure_editable(self):
        if self._submitting:
            raise InvalidStateError("An assignment is being submitted; please wait.")
        if self._submitted:
            raise InvalidStateError("This assignment has already been submitted.")

    def _inventory_item(self, item_id):
        item = self._find(self.inventory, item_id)
        if item is None:
            raise ValidationError(f"Inventory item {item_id} is not in the origin warehouse")
        return item

    def _clear_selection(self):
        self._selected = {}
        self._recompute()

    def _recompute(self):
        self.totals = compute_totals(self._selected.values())
        # A shown error belongs to the selection it was raised for
        self.error = None

    @staticmethod
    def _find(rows, row_id):
        if row_id is None:
            return None
        for row in rows:
            if row.id == row_id:
                return row
        return None
