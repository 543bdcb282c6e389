# app.py
# Web app to log in, pick a truck and two warehouses, check inventory
# items against the truck's capacity, and submit the assignment.

import pandas as pd
import streamlit as st

from truck_assignment import config
from truck_assignment.capacity import format_amount
from truck_assignment.client import ApiClient
from truck_assignment.errors import PlannerError
from truck_assignment.manifest import manifest_csv, selection_dataframe
from truck_assignment.optimizer import suggest_selection
from truck_assignment.planner import AssignmentPlanner, PlannerState
from truck_assignment.roles import Action, can
from truck_assignment.session import login


st.set_page_config(page_title="Inventory Assignment", layout="wide")
config.configure_logging()


def init_state():
    defaults = {
        "session": None,
        "planner": None,
        "page": "assign",
        "detail_truck_id": None,
        "flash": None,
        # bumped whenever the selection changes outside a checkbox click,
        # so the checkboxes are rebuilt from the planner
        "selection_rev": 0,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def bump_selection():
    st.session_state.selection_rev += 1


def go_to_truck(truck_id, response):
    st.session_state.page = "truck_detail"
    st.session_state.detail_truck_id = truck_id
    st.session_state.flash = "Inventory assigned successfully!"
    st.session_state.planner = None
    bump_selection()


def new_planner(client):
    planner = AssignmentPlanner(client, navigate=go_to_truck)
    planner.load()
    return planner


def option_index(options, value):
    if value in options:
        return options.index(value)
    return 0


init_state()

st.sidebar.header("Backend")
base_url = st.sidebar.text_input("API base URL", value=config.API_BASE_URL)

# -----------------------------
# Login
# -----------------------------
if st.session_state.session is None:
    st.title("Shipment Tracking System")
    with st.form("login"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in")

    if submitted:
        try:
            st.session_state.session = login(username, password, base_url=base_url)
            st.rerun()
        except PlannerError as e:
            st.error(e.message)
    st.stop()

session = st.session_state.session
client = ApiClient(session, base_url=base_url)

role_name = session.role.value if session.role else "unknown"
st.sidebar.header("Signed in")
st.sidebar.write(f"**{session.username}** ({role_name})")

# Menu entries follow the role's capabilities
pages = {}
if can(session.role, Action.ASSIGN_INVENTORY):
    pages["Assign Inventory to Truck"] = "assign"
if can(session.role, Action.VIEW_ASSIGNMENTS):
    pages["Truck Assignments"] = "truck_detail"

if not pages:
    st.error("Your role has no access to inventory transport.")
    st.stop()

labels = list(pages.keys())
current = st.session_state.page
default_label = labels[0]
for label, page in pages.items():
    if page == current:
        default_label = label
choice = st.sidebar.radio("Inventory Transport", labels, index=labels.index(default_label))
st.session_state.page = pages[choice]

if st.sidebar.button("Log out"):
    session.clear()
    st.session_state.session = None
    st.session_state.planner = None
    st.rerun()

if st.session_state.flash:
    st.success(st.session_state.flash)
    st.session_state.flash = None

# -----------------------------
# Truck detail (assignments for one truck)
# -----------------------------
if st.session_state.page == "truck_detail":
    st.title("Truck Assignments")
    try:
        trucks = client.list_trucks()
    except PlannerError as e:
        st.error(e.message)
        st.stop()

    truck_ids = [t.id for t in trucks]
    if not truck_ids:
        st.info("No trucks found.")
        st.stop()

    labels_by_id = {t.id: t.label for t in trucks}
    truck_id = st.selectbox(
        "Truck",
        truck_ids,
        index=option_index(truck_ids, st.session_state.detail_truck_id),
        format_func=lambda tid: labels_by_id[tid],
    )
    st.session_state.detail_truck_id = truck_id

    try:
        assignments = client.assignments_by_truck(truck_id)
    except PlannerError as e:
        st.error(e.message)
        st.stop()

    if assignments:
        st.dataframe(pd.json_normalize(assignments))
    else:
        st.info("No assignments for this truck yet.")
    st.stop()

# -----------------------------
# Assignment screen
# -----------------------------
st.title("Inventory Assignment")
st.write("Assign inventory items to trucks for delivery.")

if st.session_state.planner is None:
    try:
        st.session_state.planner = new_planner(client)
    except PlannerError as e:
        st.error(e.message)
        st.stop()

planner = st.session_state.planner
busy = planner.state in (PlannerState.SUBMITTING, PlannerState.SUBMITTED)
rev = st.session_state.selection_rev

col_truck, col_origin, col_dest = st.columns(3)

truck_options = [None] + [t.id for t in planner.trucks]
truck_labels = {t.id: t.label for t in planner.trucks}
with col_truck:
    truck_choice = st.selectbox(
        "Select Truck",
        truck_options,
        index=option_index(truck_options, planner.truck_id),
        format_func=lambda tid: "-- Select Truck --" if tid is None else truck_labels[tid],
        disabled=busy,
        help="Only available trucks are shown",
    )

warehouse_labels = {w.id: w.label for w in planner.warehouses}
origin_options = [None] + [w.id for w in planner.warehouses]
with col_origin:
    origin_choice = st.selectbox(
        "Origin Warehouse",
        origin_options,
        index=option_index(origin_options, planner.origin_id),
        format_func=lambda wid: "-- Select Origin --" if wid is None else warehouse_labels[wid],
        disabled=busy,
        help="Warehouse where inventory is currently stored",
    )

try:
    if truck_choice != planner.truck_id:
        planner.select_truck(truck_choice)
    if origin_choice != planner.origin_id:
        planner.select_origin(origin_choice)
        bump_selection()
        st.rerun()
except PlannerError as e:
    st.error(e.message)

dest_options = [None] + [w.id for w in planner.destination_options()]
with col_dest:
    dest_choice = st.selectbox(
        "Destination Warehouse",
        dest_options,
        index=option_index(dest_options, planner.destination_id),
        format_func=lambda wid: "-- Select Destination --" if wid is None else warehouse_labels[wid],
        disabled=busy or planner.origin_id is None,
        help="Warehouse where inventory will be delivered",
    )

try:
    if dest_choice != planner.destination_id:
        planner.select_destination(dest_choice)
except PlannerError as e:
    st.error(e.message)

# Selected truck details with capacity usage
truck = planner.truck
if truck is not None:
    usage = planner.utilisation()
    st.subheader("Selected Truck Details")
    c1, c2, c3 = st.columns(3)
    c1.metric("Registration", truck.registration)
    c2.metric("Model", truck.model or "-")
    c3.metric("Driver", truck.driver_name or "No Driver Assigned")

    c4, c5 = st.columns(2)
    c4.metric(
        "Weight Capacity",
        f"{format_amount(truck.capacity_weight)} kg",
        f"{format_amount(planner.totals['weight'])} kg selected ({usage['weight_pct']}%)",
        delta_color="inverse",
    )
    c5.metric(
        "Volume Capacity",
        f"{format_amount(truck.capacity_volume)} m³",
        f"{format_amount(planner.totals['volume'])} m³ selected ({usage['volume_pct']}%)",
        delta_color="inverse",
    )

main_col, side_col = st.columns([2, 1])

with main_col:
    if planner.origin_id is not None:
        st.subheader("Select Inventory Items")
        search = st.text_input("Search inventory by name or SKU...", value=planner.search,
                               disabled=busy)
        planner.set_search(search)

        visible = planner.visible_inventory()
        if len(visible) == 0:
            st.info("No inventory items found in this warehouse")
        else:
            header = st.columns([1, 3, 2, 2, 2, 2, 3])
            for col, title in zip(header, ["Select", "Item", "SKU", "Quantity",
                                           "Weight", "Volume", "Total"]):
                col.markdown(f"**{title}**")

            for item in visible:
                row = st.columns([1, 3, 2, 2, 2, 2, 3])
                picked = row[0].checkbox(
                    "select",
                    value=planner.is_selected(item.id),
                    key=f"pick_{rev}_{item.id}",
                    label_visibility="collapsed",
                    disabled=busy,
                )
                row[1].write(item.name)
                row[2].write(item.sku)
                row[3].write(f"{item.quantity} units")
                row[4].write(f"{item.weight} kg/unit")
                row[5].write(f"{item.volume} m³/unit")
                row[6].write(f"{item.total_weight():.2f} kg / {item.total_volume():.2f} m³")

                if picked != planner.is_selected(item.id):
                    planner.toggle_item(item.id)

        # Optional helper: let the solver pick a load for the chosen truck
        if truck is not None and planner.inventory:
            st.markdown("---")
            objective = st.radio("Suggest a load that maximises", ["weight", "units"],
                                 horizontal=True, disabled=busy)
            if st.button("Suggest load", disabled=busy):
                result = suggest_selection(planner.inventory, truck, objective=objective)
                planner.apply_suggestion([item.id for item in result["chosen_items"]])
                bump_selection()
                st.session_state.flash = (
                    f"Suggested {len(result['chosen_items'])} items "
                    f"({result['status']}): {format_amount(result['total_weight'])} kg, "
                    f"{format_amount(result['total_volume'])} m³"
                )
                st.rerun()

with side_col:
    st.subheader("Selected Items")
    selected = planner.selected_items()
    if len(selected) == 0:
        st.write("No items selected")
        st.caption("Select items from the inventory list")
    else:
        st.dataframe(selection_dataframe(selected)[["name", "sku", "quantity"]],
                     hide_index=True)

        for item in selected:
            if st.button(f"Remove {item.sku or item.name}", key=f"remove_{rev}_{item.id}",
                         disabled=busy):
                planner.remove_item(item.id)
                bump_selection()
                st.rerun()

        totals = planner.totals
        st.write(f"Total Items: **{totals['items']} items**")
        st.write(f"Total Units: **{totals['units']} units**")
        st.write(f"Total Weight: **{totals['weight']:.2f} kg**")
        st.write(f"Total Volume: **{totals['volume']:.2f} m³**")

        st.download_button(
            label="Download manifest as CSV",
            data=manifest_csv(selected),
            file_name="assignment_manifest.csv",
            mime="text/csv",
        )

    problem = planner.check()
    if problem is not None and len(selected) > 0:
        st.warning(problem)

    if planner.error:
        st.error(planner.error)

    if st.button("Assign to Truck", type="primary", disabled=not planner.can_submit()):
        try:
            with st.spinner("Assigning..."):
                planner.submit()
            st.rerun()
        except PlannerError as e:
            st.error(e.message)
