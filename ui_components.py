"""
UI components and setup functions for the Medoid Cluster Optimizer Streamlit app.
"""
import streamlit as st
import os
from typing import Dict, Any
from config import Config
from data_manager import DataManager
from session_manager import SessionManager
from visualizer import MapBuilder
from calculations.cluster_service import ClusterService


def setup_sidebar() -> Dict[str, Any]:
    """
    Setup and configure the sidebar with clustering parameters.

    Returns:
        Dictionary with the clustering parameters, run options and services.
        Parameter consistency (min <= max) is checked by the cluster service,
        which reports it as an error instead of the sidebar silently fixing it.
    """
    if os.path.exists("logo.png"):
        st.sidebar.image("logo.png")
    st.sidebar.header("⚙️ Settings")

    st.sidebar.subheader("Cluster Count")
    count_cols = st.sidebar.columns(2)

    with count_cols[0]:
        min_clusters = st.number_input("Min Clusters", min_value=1, max_value=100,
                                       value=Config.DEFAULT_MIN_CLUSTERS, step=1, key="min_clusters")

    with count_cols[1]:
        max_clusters = st.number_input("Max Clusters", min_value=1, max_value=100,
                                       value=Config.DEFAULT_MAX_CLUSTERS, step=1, key="max_clusters")

    min_cluster_size = st.sidebar.number_input(
        "Min Cluster Size", min_value=1, max_value=1000, value=Config.DEFAULT_MIN_CLUSTER_SIZE, step=1,
        help="Clusters with fewer members are discarded from a candidate solution."
    )

    if min_clusters > max_clusters:
        st.sidebar.error("Min clusters cannot exceed max clusters.")

    st.sidebar.subheader("Search Options")
    seed = st.sidebar.number_input(
        "Random Seed", min_value=0, max_value=2**31 - 1, value=Config.RANDOM_SEED, step=1,
        help="Same seed and data always give the same clusters."
    )
    max_iterations = st.sidebar.slider("Max Iterations", 1, 100, Config.MAX_ITERATIONS)
    max_workers = st.sidebar.slider(
        "Worker Processes", 1, max(os.cpu_count() or 1, 2), min(Config.MAX_WORKERS, max(os.cpu_count() or 1, 2)),
        help="Candidate cluster counts are evaluated in parallel when more than one worker is allowed."
    )

    return {
        'params': {
            'min_clusters': int(min_clusters),
            'max_clusters': int(max_clusters),
            'min_cluster_size': int(min_cluster_size)
        },
        'seed': int(seed),
        'data_manager': DataManager(),
        'map_builder': MapBuilder(),
        'cluster_service': ClusterService(max_workers=int(max_workers), max_iterations=int(max_iterations))
    }


def init_session_state() -> SessionManager:
    """Initialize Streamlit session state variables."""
    return SessionManager()
