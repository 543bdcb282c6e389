"""Tests for the assignment planner state machine."""

import pytest

from truck_assignment import config
from truck_assignment.capacity import compute_totals
from truck_assignment.errors import (
    AssignmentRejected,
    AuthorizationError,
    InvalidStateError,
    TransportError,
    ValidationError,
)
from truck_assignment.models import InventoryItem, Truck, TruckStatus
from truck_assignment.planner import AssignmentPlanner, PlannerState

from tests.fakes import FakeProvider


class TestLoading:
    def test_new_planner_is_empty(self, provider):
        planner = AssignmentPlanner(provider)
        assert planner.state == PlannerState.EMPTY
        assert planner.selected_ids == []
        assert planner.totals["weight"] == 0.0

    def test_load_defaults_origin_to_first_warehouse(self, planner, provider):
        assert planner.origin_id == 1
        assert provider.inventory_calls == [1]
        assert [i.id for i in planner.inventory] == [11, 12, 13]
        assert planner.state == PlannerState.ORIGIN_CHOSEN

    def test_inventory_load_failure_is_reported(self, planner, provider):
        def broken(warehouse_id):
            raise TransportError("Failed to load data. Please try again later.")
        provider.list_inventory = broken

        with pytest.raises(TransportError):
            planner.select_origin(2)
        assert planner.error == "Failed to load data. Please try again later."
        assert planner.inventory == []

    def test_only_available_trucks_are_offered(self, truck, warehouses, inventory):
        parked = Truck(id=2, registration="TRK-002", capacity_weight=800.0,
                       capacity_volume=8.0, status=TruckStatus.MAINTENANCE)
        planner = AssignmentPlanner(FakeProvider([truck, parked], warehouses, inventory))

        planner.load()

        assert [t.id for t in planner.trucks] == [1]
        with pytest.raises(ValidationError):
            planner.select_truck(2)


class TestSelectors:
    def test_changing_origin_empties_selection(self, planner):
        for item_id in (11, 12, 13):
            planner.toggle_item(item_id)
        assert len(planner.selected_ids) == 3

        planner.select_origin(2)

        assert planner.selected_ids == []
        assert planner.totals == compute_totals([])
        assert [i.id for i in planner.inventory] == [21]

    def test_reselecting_same_origin_keeps_selection(self, planner, provider):
        planner.toggle_item(11)
        planner.select_origin(1)
        assert planner.selected_ids == [11]
        assert provider.inventory_calls == [1]

    def test_origin_change_drops_matching_destination(self, planner):
        planner.select_destination(2)
        planner.select_origin(2)
        assert planner.destination_id is None

    def test_destination_options_exclude_origin(self, planner):
        assert [w.id for w in planner.destination_options()] == [2, 3]
        planner.select_origin(3)
        assert [w.id for w in planner.destination_options()] == [1, 2]

    def test_destination_equal_to_origin_is_rejected(self, planner):
        planner.select_destination(2)
        with pytest.raises(ValidationError) as exc:
            planner.select_destination(1)
        assert "cannot be the same" in exc.value.message
        assert planner.destination_id == 2

    def test_unknown_truck_is_rejected(self, planner):
        with pytest.raises(ValidationError):
            planner.select_truck(99)
        assert planner.truck_id is None

    def test_state_moves_to_configuring_then_valid(self, planner):
        planner.select_truck(1)
        assert planner.state == PlannerState.CONFIGURING
        planner.select_destination(2)
        planner.toggle_item(12)
        assert planner.state == PlannerState.VALID
        assert planner.can_submit()


class TestItemSelection:
    def test_toggle_twice_restores_selection(self, planner):
        planner.toggle_item(11)
        before_ids = planner.selected_ids
        before_totals = dict(planner.totals)

        planner.toggle_item(13)
        planner.toggle_item(13)

        assert planner.selected_ids == before_ids
        assert planner.totals == before_totals

    def test_totals_are_weight_and_volume_times_quantity(self, planner):
        planner.toggle_item(11)
        planner.toggle_item(13)
        assert planner.totals["weight"] == 400.0 * 2 + 25.0 * 4
        assert planner.totals["volume"] == 1.5 * 2 + 0.5 * 4
        assert planner.totals["units"] == 6
        assert planner.totals["items"] == 2

    def test_removing_an_item_subtracts_exactly(self, truck, warehouses):
        items = [
            InventoryItem(id=1, name="A", sku="A", quantity=3, weight=0.1, volume=0.01, warehouse_id=1),
            InventoryItem(id=2, name="B", sku="B", quantity=7, weight=0.2, volume=0.03, warehouse_id=1),
            InventoryItem(id=3, name="C", sku="C", quantity=1, weight=0.3, volume=0.07, warehouse_id=1),
        ]
        planner = AssignmentPlanner(FakeProvider([truck], warehouses, items))
        planner.load()
        for item_id in (1, 2, 3):
            planner.toggle_item(item_id)

        planner.remove_item(2)

        assert planner.totals == compute_totals([items[0], items[2]])

    def test_unknown_item_is_rejected(self, planner):
        with pytest.raises(ValidationError):
            planner.toggle_item(21)
        assert planner.selected_ids == []

    def test_apply_suggestion_replaces_selection(self, planner):
        planner.toggle_item(11)
        planner.apply_suggestion([12, 13])
        assert planner.selected_ids == [12, 13]
        assert planner.totals["weight"] == 400.0

    def test_apply_suggestion_with_unknown_id_changes_nothing(self, planner):
        planner.toggle_item(11)
        with pytest.raises(ValidationError):
            planner.apply_suggestion([12, 999])
        assert planner.selected_ids == [11]

    def test_utilisation_of_selected_truck(self, planner):
        assert planner.utilisation() is None
        planner.select_truck(1)
        planner.toggle_item(12)
        assert planner.utilisation() == {"weight_pct": 30.0, "volume_pct": 20.0}


class TestSearch:
    def test_filter_matches_name_or_sku_case_insensitively(self, planner):
        planner.set_search("blue")
        assert [i.id for i in planner.visible_inventory()] == [11]
        planner.set_search("rg2")
        assert [i.id for i in planner.visible_inventory()] == [12]

    def test_filtering_preserves_hidden_selection(self, planner):
        planner.set_search("blue")
        planner.toggle_item(11)

        planner.set_search("red")
        assert [i.id for i in planner.visible_inventory()] == [12]
        assert planner.is_selected(11)

        planner.set_search("")
        assert 11 in [i.id for i in planner.visible_inventory()]
        assert planner.is_selected(11)
        assert planner.selected_ids == [11]


class TestValidation:
    def assert_blocked(self, planner, provider, message):
        with pytest.raises(ValidationError) as exc:
            planner.submit()
        assert exc.value.message == message
        assert planner.error == message
        assert provider.submissions == []

    def test_requires_truck(self, planner, provider):
        planner.select_destination(2)
        planner.toggle_item(12)
        self.assert_blocked(planner, provider, "Please select a truck")

    def test_requires_origin(self, ready_planner, provider):
        ready_planner.select_origin(None)
        self.assert_blocked(ready_planner, provider, "Please select an origin warehouse")

    def test_requires_destination(self, ready_planner, provider):
        ready_planner.select_destination(None)
        self.assert_blocked(ready_planner, provider, "Please select a destination warehouse")

    def test_rechecks_same_warehouse_at_submit(self, ready_planner, provider):
        # Bypasses the selector guard to exercise the submit-time check
        ready_planner.destination_id = ready_planner.origin_id
        self.assert_blocked(ready_planner, provider,
                            "Origin and destination warehouses cannot be the same")

    def test_requires_an_item(self, ready_planner, provider):
        ready_planner.toggle_item(12)
        self.assert_blocked(ready_planner, provider, "Please select at least one inventory item")

    def test_weight_over_capacity(self, ready_planner, provider):
        ready_planner.toggle_item(11)
        assert ready_planner.totals["weight"] == 1100.0
        self.assert_blocked(ready_planner, provider,
                            "Total weight (1100 kg) exceeds truck capacity (1000 kg)")
        assert not ready_planner.can_submit()

    def test_volume_over_capacity(self, truck, warehouses):
        bulky = InventoryItem(id=5, name="Foam Blocks", sku="FB5", quantity=2,
                              weight=1.0, volume=6.0, warehouse_id=1)
        provider = FakeProvider([truck], warehouses, [bulky])
        planner = AssignmentPlanner(provider)
        planner.load()
        planner.select_truck(1)
        planner.select_destination(2)
        planner.toggle_item(5)
        self.assert_blocked(planner, provider,
                            "Total volume (12 m³) exceeds truck capacity (10 m³)")

    def test_weight_is_reported_before_volume(self, truck, warehouses):
        heavy = InventoryItem(id=5, name="Steel", sku="ST", quantity=1,
                              weight=2000.0, volume=20.0, warehouse_id=1)
        planner = AssignmentPlanner(FakeProvider([truck], warehouses, [heavy]))
        planner.load()
        planner.select_truck(1)
        planner.select_destination(2)
        planner.toggle_item(5)
        assert planner.check().startswith("Total weight")

    def test_validate_passes_when_ready(self, ready_planner):
        ready_planner.validate()
        assert ready_planner.check() is None

    def test_blocked_message_clears_when_selection_changes(self, ready_planner, provider):
        ready_planner.toggle_item(11)
        with pytest.raises(ValidationError):
            ready_planner.submit()
        assert ready_planner.error is not None

        ready_planner.remove_item(11)

        assert ready_planner.error is None
        assert ready_planner.can_submit()

    def test_blocked_message_clears_when_selectors_change(self, planner, provider):
        planner.toggle_item(12)
        with pytest.raises(ValidationError):
            planner.submit()
        assert planner.error == "Please select a truck"

        planner.select_truck(1)
        assert planner.error is None

        with pytest.raises(ValidationError):
            planner.submit()
        assert planner.error == "Please select a destination warehouse"

        planner.select_destination(2)
        assert planner.error is None


class TestSubmission:
    def test_successful_submit_sends_once_and_resets(self, ready_planner, provider):
        visited = []
        ready_planner.navigate = lambda truck_id, response: visited.append((truck_id, response))

        response = ready_planner.submit()

        assert provider.submissions == [(1, 1, 2, [12])]
        assert response["assignmentId"] == 7
        assert ready_planner.selected_ids == []
        assert ready_planner.totals == compute_totals([])
        assert ready_planner.state == PlannerState.SUBMITTED
        assert visited == [(1, provider.response)]

    def test_submitted_planner_rejects_changes(self, ready_planner):
        ready_planner.submit()
        with pytest.raises(InvalidStateError):
            ready_planner.toggle_item(11)
        with pytest.raises(InvalidStateError):
            ready_planner.submit()

    def test_server_rejection_keeps_selection(self, ready_planner, provider):
        provider.error = AssignmentRejected("Truck TRK-001 already has an active assignment")

        with pytest.raises(AssignmentRejected):
            ready_planner.submit()

        assert ready_planner.error == "Truck TRK-001 already has an active assignment"
        assert ready_planner.selected_ids == [12]
        assert ready_planner.state == PlannerState.VALID

    def test_transport_failure_is_retryable(self, ready_planner, provider):
        provider.error = TransportError(config.RETRY_MESSAGE)

        with pytest.raises(TransportError):
            ready_planner.submit()
        assert ready_planner.error == config.RETRY_MESSAGE
        assert ready_planner.selected_ids == [12]

        provider.error = None
        ready_planner.submit()
        assert len(provider.submissions) == 2
        assert ready_planner.error is None

    def test_authorization_failure_is_surfaced(self, ready_planner, provider):
        provider.error = AuthorizationError(config.SESSION_EXPIRED_MESSAGE)
        with pytest.raises(AuthorizationError):
            ready_planner.submit()
        assert ready_planner.error == config.SESSION_EXPIRED_MESSAGE
        assert ready_planner.state == PlannerState.VALID

    def test_changes_are_rejected_while_submitting(self, ready_planner, provider):
        seen = []

        def mutate():
            seen.append(ready_planner.state)
            with pytest.raises(InvalidStateError):
                ready_planner.toggle_item(13)
            with pytest.raises(InvalidStateError):
                ready_planner.select_origin(2)

        provider.during_submit = mutate
        ready_planner.submit()

        assert seen == [PlannerState.SUBMITTING]
        assert provider.submissions == [(1, 1, 2, [12])]
