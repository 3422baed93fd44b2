"""
Clustering tab for the Medoid Cluster Optimizer Streamlit app.
Runs the multi-k search and shows clusters, per-k metrics and the cluster map.
"""
import streamlit as st
import logging
from typing import Dict, Any, Optional
from exceptions import OptimizationError
from session_manager import SessionManager
from shared.geo_utils import missing_cluster_points
import shared.utils as utils

logger = logging.getLogger(__name__)


def _show_result(result: Dict[str, Any]) -> None:
    if 'error' in result:
        st.error(f"Error: {result['error']}")
        return

    if result.get('warning'):
        st.warning(result['warning'])

    clusters = result.get('chosen_clusters')
    if clusters:
        st.success(f"Clustering completed: k={result['chosen_k']} with {len(clusters)} clusters")
        st.subheader("Generated Clusters")
        for cluster in clusters:
            st.markdown(f"**Cluster {cluster['id']}** ({len(cluster['members'])} members): "
                        f"{', '.join(str(m) for m in cluster['members'])}")
    elif not result.get('warning'):
        st.info("The algorithm did not form any clusters. Consider adjusting parameters.")

    metrics = result.get('all_metrics')
    if metrics:
        st.subheader("Candidate Cluster Counts")
        metrics_df = utils.metrics_to_dataframe(metrics)
        display_df = metrics_df.copy()
        display_df['total_intra_cluster_distance'] = [
            utils.format_distance(m['total_intra_cluster_distance']) for m in metrics
        ]
        st.dataframe(display_df, width="stretch", hide_index=True)

        chart_df = metrics_df[metrics_df['feasible']].set_index('k')[['total_intra_cluster_distance']]
        if not chart_df.empty:
            st.line_chart(chart_df)


def _show_map(services: Dict[str, Any], session: SessionManager) -> None:
    if not session.has_locations():
        st.info("Upload valid location data to enable the map display.")
        return

    result = session.get('result') or {}
    clusters = result.get('chosen_clusters')
    locations = session.get('locations')

    missing = missing_cluster_points(clusters, locations)
    if missing:
        st.warning(f"Points {sorted(missing)} from clusters not found in location data. "
                   "Please ensure location data includes all points present in your clusters.")
        return

    label = "Hide Map" if session.get('show_map') else "Show Map"
    if st.button(label):
        session.set('show_map', not session.get('show_map'))
        st.rerun()

    if session.get('show_map'):
        cluster_map = services['map_builder'].create_cluster_map(locations, clusters)
        st.components.v1.html(cluster_map._repr_html_(), height=600)


def tab_clustering(services: Optional[Dict[str, Any]], session: SessionManager) -> None:
    """Handle the clustering tab functionality."""
    st.header("Clustering")

    if services is None:
        st.warning("Application configuration error. Please refresh the page.")
        return

    entries = session.get('distance_entries')
    if entries is None:
        st.warning("Please upload a distance matrix first in the Data Upload tab.")
    else:
        params = services['params']
        if st.button("Run Clustering", type="primary"):
            try:
                with st.spinner("Evaluating candidate cluster counts..."):
                    result = services['cluster_service'].run_clustering(entries, params, seed=services['seed'])
                session.set('result', result)
                session.set('result_params', dict(params, seed=services['seed']))
                session.set('show_map', False)
            except OptimizationError as e:
                st.error(f"Clustering Error: {str(e)}")
                logger.error(f"Clustering error: {e}")

    result = session.get('result')
    if result:
        used = session.get('result_params')
        if used:
            st.caption(f"Run with k={used['min_clusters']}..{used['max_clusters']}, "
                       f"min cluster size={used['min_cluster_size']}, seed={used['seed']}")
        _show_result(result)

    _show_map(services, session)
