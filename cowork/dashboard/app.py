"""Streamlit dashboard for the co-working space directory."""

from __future__ import annotations

import os
import sys
import time
import uuid
from datetime import datetime
from typing import List, Sequence

import pandas as pd
import pydeck as pdk
import streamlit as st

project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from cowork.common.config import AppConfig, load_config
from cowork.common.errors import CoworkError, NetworkError
from cowork.common.geo import map_center
from cowork.common.logging_setup import setup_logging
from cowork.common.models import CityGroup, DetectionMethod, DuplicateGroup, Listing, LocationQuery, UploadMetadata
from cowork.ingest.api_client import WorkflowClient
from cowork.ingest.csv_loader import extract_location_queries, read_csv
from cowork.ingest.store import ListingStore
from cowork.processing.duplicates import collect_duplicate_rows, detect_duplicates, rows_to_remove
from cowork.processing.export import export_to_csv
from cowork.processing.grouping import group_by_city, group_by_country
from cowork.processing.search import filter_cities, filter_listings
from cowork.processing.stats import calculate_dashboard_stats

PAGES = ("Dashboard", "Countries", "Cities", "All Spaces", "Duplicates", "Upload")
METHOD_LABELS = {
    DetectionMethod.PLACE_ID.value: "Place ID (exact match)",
    DetectionMethod.NAME_ADDRESS.value: "Name + address (case-insensitive)",
    DetectionMethod.COORDINATES.value: "Coordinates (within ~11 m)",
}
CACHE_TTL = int(os.environ.get("COWORK_UI_REFRESH_SECONDS", "60"))
LISTING_COLUMNS = ["name", "address", "city", "state", "country", "rating", "reviews", "open_state", "website"]


@st.cache_data(ttl=CACHE_TTL)
def load_store_listings(base_path: str) -> List[Listing]:
    return ListingStore(base_path).all_listings()


def listings_frame(listings: Sequence[Listing], columns: Sequence[str] = LISTING_COLUMNS) -> pd.DataFrame:
    return pd.DataFrame([{column: getattr(item, column) for column in columns} for item in listings], columns=list(columns))


def city_frame(groups: Sequence[CityGroup]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"city": g.city, "state": g.state, "country": g.country, "region": g.region, "spaces": g.total_spaces}
            for g in groups
        ],
        columns=["city", "state", "country", "region", "spaces"],
    )


def refresh_data(config: AppConfig) -> None:
    """Fetch the backend snapshot and mirror it into the local store."""

    client = WorkflowClient.from_config(config.api)
    try:
        listings = client.fetch_spaces()
    except NetworkError as exc:
        st.error(f"Failed to fetch data from API: {exc}")
        if "listings" not in st.session_state:
            st.session_state["listings"] = load_store_listings(config.store.base_path)
        return

    st.session_state["listings"] = listings
    st.session_state["last_fetch"] = datetime.now()
    store = ListingStore(config.store.base_path)
    upload_id = f"api-fetch-{uuid.uuid4().hex[:8]}"
    store.save_listings(listings, upload_id)
    store.save_upload(
        UploadMetadata(
            id=upload_id,
            filename="Workflow API",
            timestamp=st.session_state["last_fetch"],
            record_count=len(listings),
            processing_time=0.0,
        )
    )
    load_store_listings.clear()


def render_dashboard(listings: List[Listing], config: AppConfig) -> None:
    stats = calculate_dashboard_stats(listings, top_cities=config.dashboard.top_cities)
    row1 = st.columns(4)
    row1[0].metric("Total spaces", stats.total_spaces)
    row1[1].metric("Cities", stats.total_cities)
    row1[2].metric("Countries", stats.total_countries)
    row1[3].metric("Average rating", stats.average_rating)
    row2 = st.columns(5)
    row2[0].metric("Rated 4+", stats.spaces_with_high_rating)
    row2[1].metric("Open now", stats.spaces_currently_open)
    row2[2].metric("Wheelchair accessible", stats.wheelchair_accessible)
    row2[3].metric("Women-owned", stats.women_owned)
    row2[4].metric("LGBTQ+ friendly", stats.lgbtq_friendly)

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Top cities")
        if stats.top_cities:
            top = pd.DataFrame([{"city": c.city, "count": c.count} for c in stats.top_cities])
            st.bar_chart(top.set_index("city")["count"])
    with col2:
        st.subheader("Country distribution")
        if stats.country_distribution:
            countries = pd.DataFrame([{"country": c.country, "count": c.count} for c in stats.country_distribution])
            st.dataframe(countries, use_container_width=True)


def render_countries(listings: List[Listing]) -> None:
    countries = group_by_country(listings)
    st.caption(f"{len(countries)} countries")
    for country in countries:
        label = f"{country.country} - {country.total_spaces} spaces, {country.total_cities} cities, {country.total_states} states"
        with st.expander(label):
            states = pd.DataFrame(
                [{"state": s.state, "cities": s.total_cities, "spaces": s.total_spaces} for s in country.states]
            )
            st.dataframe(states, use_container_width=True)
            st.dataframe(city_frame(country.cities), use_container_width=True)


def render_city_map(listings: Sequence[Listing]) -> None:
    center = map_center(listings)
    if center is None:
        st.info("No coordinates available for this city.")
        return
    located = listings_frame([item for item in listings if item.has_coordinates], ["name", "address", "rating", "latitude", "longitude"])
    layer = pdk.Layer(
        "ScatterplotLayer",
        data=located,
        get_position="[longitude, latitude]",
        get_radius=40,
        get_fill_color="[30, 144, 255, 180]",
        pickable=True,
    )
    deck = pdk.Deck(
        initial_view_state=pdk.ViewState(latitude=center[0], longitude=center[1], zoom=12),
        layers=[layer],
        tooltip={"text": "{name}\n{address}\nRating: {rating}"},
    )
    st.pydeck_chart(deck)


def render_cities(listings: List[Listing]) -> None:
    query = st.text_input("Search cities", key="city_query")
    cities = filter_cities(group_by_city(listings), query)
    st.caption(f"Showing {len(cities)} {'city' if len(cities) == 1 else 'cities'}")
    if not cities:
        st.info("Try adjusting your search criteria." if query else "Upload data to see cities.")
        return
    st.dataframe(city_frame(cities), use_container_width=True)

    labels = [f"{g.city}, {g.state or '-'}, {g.country}" for g in cities]
    selected = st.selectbox("City detail", options=range(len(cities)), format_func=lambda i: labels[i])
    city = cities[selected]
    st.subheader(f"{city.city} ({city.total_spaces} spaces)")
    render_city_map(city.spaces)
    st.dataframe(listings_frame(city.spaces), use_container_width=True)


def render_all_spaces(listings: List[Listing]) -> None:
    query = st.text_input("Search by name, address, city or country", key="space_query")
    filtered = filter_listings(listings, query)
    st.caption(f"Showing {len(filtered)} of {len(listings)} spaces")
    st.download_button(
        "Export CSV",
        data=export_to_csv(filtered),
        file_name=f"coworking-spaces-{datetime.now():%Y-%m-%d}.csv",
        mime="text/csv",
        disabled=not filtered,
    )
    if filtered:
        st.dataframe(listings_frame(filtered), use_container_width=True)
    else:
        st.info("Try adjusting your search criteria." if query else "Upload data to see spaces.")


def _delete_and_rescan(config: AppConfig, rows: List[int], method: str) -> bool:
    if not rows:
        st.error("No row numbers available for deletion.")
        return False
    try:
        WorkflowClient.from_config(config.api).delete_rows(rows)
    except NetworkError as exc:
        st.error(f"Failed to remove duplicates: {exc}")
        return False
    st.success(f"Removed {len(rows)} duplicate{'s' if len(rows) > 1 else ''}")
    refresh_data(config)
    st.session_state["duplicate_groups"] = detect_duplicates(
        st.session_state.get("listings", []), method, config.duplicates.coordinate_threshold
    )
    return True


def clear_all_duplicates(config: AppConfig, groups: List[DuplicateGroup], method: str) -> bool:
    """Keep-first delete across every group; scan results survive a failed delete."""

    if not _delete_and_rescan(config, collect_duplicate_rows(groups), method):
        return False
    st.session_state["duplicate_groups"] = []
    return True


def render_duplicates(listings: List[Listing], config: AppConfig) -> None:
    methods = list(METHOD_LABELS)
    default_index = methods.index(config.duplicates.default_method) if config.duplicates.default_method in methods else 0
    method = st.radio("Detection method", options=methods, index=default_index, format_func=METHOD_LABELS.get)
    if st.button("Scan for duplicates"):
        groups = detect_duplicates(listings, method, config.duplicates.coordinate_threshold)
        st.session_state["duplicate_groups"] = groups
        st.toast(f"Found {len(groups)} duplicate {'group' if len(groups) == 1 else 'groups'}")

    groups = st.session_state.get("duplicate_groups", [])
    if not groups:
        st.info("No duplicate groups. Run a scan to check the current data.")
        return

    to_remove = sum(len(group) - 1 for group in groups)
    st.warning(f"{len(groups)} groups, {to_remove} entries would be removed by keeping the first of each group.")
    confirm = st.checkbox("I understand this permanently deletes the duplicate entries")
    if st.button("Clear all duplicates", disabled=not confirm):
        clear_all_duplicates(config, groups, method)

    for index, group in enumerate(groups):
        with st.expander(f"{group[0].name} - {len(group)} entries"):
            st.dataframe(listings_frame(group, ["name", "address", "city", "place_id", "latitude", "longitude", "row_number"]))
            keep_col, all_col = st.columns(2)
            if keep_col.button("Keep first, remove others", key=f"keep-{index}"):
                _delete_and_rescan(config, rows_to_remove(group, keep_first=True), method)
            if all_col.button("Remove all", key=f"all-{index}"):
                _delete_and_rescan(config, rows_to_remove(group, keep_first=False), method)


def _run_workflow(config: AppConfig, action, success: str) -> None:
    with st.spinner("Workflow started, processing your data..."):
        started = time.monotonic()
        try:
            response = action(WorkflowClient.from_config(config.api))
        except NetworkError as exc:
            st.error(f"Processing failed: {exc}")
            return
    st.success(response.get("message") or success)
    st.caption(f"Finished in {time.monotonic() - started:.1f}s")
    refresh_data(config)


def render_upload(config: AppConfig) -> None:
    csv_tab, single_tab, default_tab = st.tabs(["CSV upload", "Single location", "Default data"])
    with csv_tab:
        uploaded = st.file_uploader("Locations CSV (city, state, country, region, search_query)", type=["csv"])
        if uploaded is not None:
            frame = read_csv(uploaded)
            st.dataframe(frame.head(5), use_container_width=True)
            queries = extract_location_queries(frame)
            st.caption(f"{len(queries)} locations ready to process")
            if st.button("Process CSV", disabled=not queries):
                _run_workflow(
                    config,
                    lambda client: client.process_locations(queries),
                    f"Processed {len(queries)} locations",
                )
    with single_tab:
        with st.form("single_location"):
            city = st.text_input("City")
            state = st.text_input("State")
            country = st.text_input("Country")
            region = st.text_input("Region")
            search_query = st.text_input("Search query (optional)")
            submitted = st.form_submit_button("Process location")
        if submitted:
            if not (city and state and country):
                st.error("Please provide city, state, and country.")
            else:
                query = LocationQuery(city=city, state=state, country=country, region=region, search_query=search_query)
                _run_workflow(config, lambda client: client.process_location(query), f"Processed coworking spaces for {city}")
    with default_tab:
        if st.button("Load default data"):
            _run_workflow(config, lambda client: client.start_default_workflow(), "Default data loaded successfully")
        if st.button("Fetch now"):
            refresh_data(config)


def main() -> None:
    config = load_config()
    setup_logging(config.logging.level, config.logging.file)

    st.set_page_config(page_title="Co-working Directory", layout="wide")
    st.title("Co-working Space Directory")

    try:
        if "listings" not in st.session_state:
            refresh_data(config)
        if st.sidebar.button("Refresh data now"):
            refresh_data(config)
    except CoworkError as exc:
        st.error(str(exc))
    last_fetch = st.session_state.get("last_fetch")
    st.sidebar.caption(f"Last fetched: {last_fetch:%Y-%m-%d %H:%M:%S}" if last_fetch else "Not fetched yet")

    default_page = config.dashboard.default_page if config.dashboard.default_page in PAGES else PAGES[0]
    page = st.sidebar.radio("Page", options=PAGES, index=PAGES.index(default_page))
    listings = st.session_state.get("listings", [])

    try:
        if page == "Upload":
            render_upload(config)
        elif not listings:
            st.warning("No data yet. Use the Upload page or refresh from the workflow backend.")
        elif page == "Dashboard":
            render_dashboard(listings, config)
        elif page == "Countries":
            render_countries(listings)
        elif page == "Cities":
            render_cities(listings)
        elif page == "All Spaces":
            render_all_spaces(listings)
        else:
            render_duplicates(listings, config)
    except CoworkError as exc:
        st.error(str(exc))


if __name__ == "__main__":
    main()
