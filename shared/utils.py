"""
Utility functions for the Medoid Cluster Optimizer.
Formatting and tabulation helpers shared by the UI tabs and exports.
"""

import math
import logging
import pandas as pd
from typing import Any, List, Optional
from calculations.types import Cluster, ClusterMetric

logger = logging.getLogger(__name__)

INFINITY_LABEL = "∞"


def format_distance(value: Optional[float], precision: int = 2) -> str:
    """Format a distance for display; the unknown/infeasible sentinel renders as ∞."""
    if value is None or not math.isfinite(value):
        return INFINITY_LABEL
    return f"{value:,.{precision}f}"


def validate_coordinates(lat: Any, lon: Any) -> bool:
    """Validate coordinates are within world bounds."""
    try:
        lat_float, lon_float = float(lat), float(lon)
    except (ValueError, TypeError):
        return False

    return -90.0 <= lat_float <= 90.0 and -180.0 <= lon_float <= 180.0


def metrics_to_dataframe(metrics: List[ClusterMetric]) -> pd.DataFrame:
    """
    Per-k metrics as a DataFrame.

    Infinite totals become NaN so charts leave a gap instead of an unbounded bar.
    """
    rows = []
    for metric in metrics:
        total = metric['total_intra_cluster_distance']
        rows.append({
            'k': metric['k'],
            'total_intra_cluster_distance': total if math.isfinite(total) else float('nan'),
            'number_of_valid_clusters': metric['number_of_valid_clusters'],
            'feasible': metric['number_of_valid_clusters'] > 0 and math.isfinite(total)
        })
    return pd.DataFrame(rows, columns=['k', 'total_intra_cluster_distance', 'number_of_valid_clusters', 'feasible'])


def clusters_to_dataframe(clusters: List[Cluster]) -> pd.DataFrame:
    """One row per (cluster, member) pair."""
    rows = [
        {'cluster_id': cluster['id'], 'point': member}
        for cluster in clusters
        for member in cluster['members']
    ]
    return pd.DataFrame(rows, columns=['cluster_id', 'point'])
