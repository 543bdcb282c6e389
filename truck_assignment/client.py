# client.py
# Thin REST client for the logistics backend. Every call carries the
# bearer token from the Session it was built with.

import logging

import requests

from . import config
from .errors import AssignmentRejected, AuthorizationError, TransportError
from .models import InventoryItem, Truck, Warehouse

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load data. Please try again later."


class ApiClient:
    def __init__(self, session, base_url=None, http=None, timeout=None):
        self.session = session
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout or config.REQUEST_TIMEOUT

    # -----------------------------
    # Read operations
    # -----------------------------

    def list_trucks(self):
        return _parse_rows(self._get("/trucks"), Truck.from_json, "truck")

    def list_warehouses(self):
        return _parse_rows(self._get("/warehouses"), Warehouse.from_json, "warehouse")

    def list_inventory(self, warehouse_id):
        rows = self._get(f"/inventory/warehouse/{warehouse_id}")
        return _parse_rows(rows, InventoryItem.from_json, "inventory item")

    def assignments_by_truck(self, truck_id):
        return self._get(f"/inventory-assignments/truck/{truck_id}")

    def assignments_by_warehouse(self, warehouse_id):
        return self._get(f"/inventory-assignments/warehouse/{warehouse_id}")

    # -----------------------------
    # Write operation
    # -----------------------------

    def submit_assignment(self, truck_id, origin_id, destination_id, inventory_ids):
        """
        POST the assignment. Returns the backend response dict when it
        reports success, raises AssignmentRejected when it does not.
        """
        body = {
            "truckId": truck_id,
            "warehouseId": origin_id,
            "destinationWarehouseId": destination_id,
            "inventoryIds": list(inventory_ids),
        }
        response = self._send("POST", "/inventory-assignments", json=body)
        data = _json_or_none(response)

        # A 5xx without a message never told us anything; let the user retry
        if response.status_code >= 500 and not _message(data):
            logger.error("Assignment submit returned %s", response.status_code)
            raise TransportError(config.RETRY_MESSAGE)

        if response.status_code >= 400 or not isinstance(data, dict) or not data.get("success"):
            message = _message(data) or "Failed to assign inventory"
            logger.warning("Assignment rejected (%s): %s", response.status_code, message)
            raise AssignmentRejected(message, response=data)

        logger.info("Assignment %s created for truck %s",
                    data.get("assignmentId"), truck_id)
        return data

    # -----------------------------
    # Plumbing
    # -----------------------------

    def _get(self, path):
        response = self._send("GET", path)
        data = _json_or_none(response)
        if response.status_code >= 400 or data is None:
            logger.error("GET %s returned %s", path, response.status_code)
            raise TransportError(_message(data) or LOAD_FAILED_MESSAGE)
        return data

    def _send(self, method, path, json=None):
        # Raises before anything goes out when there is no usable token
        headers = self.session.auth_header()
        headers["Accept"] = "application/json"

        url = self.base_url + path
        logger.debug("%s %s", method, url)

        try:
            response = self.http.request(method, url, json=json, headers=headers,
                                         timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.warning("%s %s timed out", method, url)
            raise TransportError(config.RETRY_MESSAGE) from e
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError(config.RETRY_MESSAGE) from e

        if response.status_code in (401, 403):
            logger.warning("%s %s refused with %s", method, url, response.status_code)
            raise AuthorizationError(config.SESSION_EXPIRED_MESSAGE)

        return response


def _json_or_none(response):
    try:
        return response.json()
    except ValueError:
        return None


def _message(data):
    if isinstance(data, dict):
        return data.get("message") or data.get("error")
    return None


def _parse_rows(rows, from_json, kind):
    # Rows that do not map onto a model are logged and skipped
    if not isinstance(rows, list):
        logger.error("Expected a list of %s rows, got %s", kind, type(rows).__name__)
        raise TransportError(LOAD_FAILED_MESSAGE)

    parsed = []
    for row in rows:
        try:
            parsed.append(from_json(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed %s row %r: %s", kind, row, e)
    return parsed
