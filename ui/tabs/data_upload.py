"""
Data upload tab for the Medoid Cluster Optimizer Streamlit app.
Handles distance-matrix and locations file upload and validation.
"""
import streamlit as st
import logging
from typing import Dict, Any, Optional
from config import Config
from exceptions import DataValidationError
from session_manager import SessionManager

logger = logging.getLogger(__name__)


def _upload_distance_matrix(services: Dict[str, Any], session: SessionManager) -> None:
    uploaded_file = st.file_uploader("Distance Matrix (JSON)", type=Config.ALLOWED_UPLOAD_TYPES,
                                     help='Array of {"from": int, "to": int, "distance": number} entries.')
    if not uploaded_file:
        return

    file_id = f"{uploaded_file.name}-{uploaded_file.size}"
    if session.get('distance_file_id') != file_id:
        session.set('distance_file_id', file_id)
        session.clear_results()
        try:
            entries = services['data_manager'].load_distance_matrix(uploaded_file)
            session.set('distance_entries', entries)
            session.set('distance_error', None)
        except DataValidationError as e:
            session.set('distance_entries', None)
            session.set('distance_error', str(e))

    if session.get('distance_error'):
        st.error(session.get('distance_error'))
        return

    entries = session.get('distance_entries')
    if not entries:
        st.warning("The distance matrix is empty.")
        return

    summary = services['data_manager'].summarize(entries)
    c1, c2, c3 = st.columns(3)
    c1.metric("Entries", summary['entries'])
    c2.metric("Unique Points", summary['unique_nodes'])
    c3.metric("Pair Coverage", f"{summary['coverage_pct']:.1f}%")
    if summary['known_pairs'] < summary['possible_pairs']:
        st.info(f"{summary['possible_pairs'] - summary['known_pairs']} point pairs have no distance "
                "and are treated as unreachable.")

    st.dataframe(services['data_manager'].entries_to_dataframe(entries), width="stretch")


def _upload_locations(services: Dict[str, Any], session: SessionManager) -> None:
    uploaded_file = st.file_uploader("Locations (JSON, optional)", type=Config.ALLOWED_UPLOAD_TYPES,
                                     help='Array of {"name", "lat", "lon", "point"} entries for the map view.')
    if not uploaded_file:
        return

    file_id = f"{uploaded_file.name}-{uploaded_file.size}"
    if session.get('locations_file_id') != file_id:
        session.set('locations_file_id', file_id)
        session.set('show_map', False)
        try:
            session.set('locations', services['data_manager'].load_locations(uploaded_file))
            session.set('locations_error', None)
        except DataValidationError as e:
            session.set('locations', None)
            session.set('locations_error', str(e))

    if session.get('locations_error'):
        st.error(f"Location Data Error: {session.get('locations_error')}")
        return

    locations = session.get('locations')
    st.success(f"Loaded {len(locations)} locations")
    st.dataframe(locations, width="stretch")


def tab_data_upload(services: Optional[Dict[str, Any]], session: SessionManager) -> None:
    """Handle the data upload tab functionality."""
    st.header("Data Upload")

    if services is None:
        st.warning("Application configuration error. Please refresh the page.")
        return

    _upload_distance_matrix(services, session)
    _upload_locations(services, session)
