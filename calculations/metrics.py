"""
Metrics and cost calculation logic.
"""
import math
from typing import List
import numpy as np
from .types import ClusterMetric

# Sentinel for unknown distances and for k values without a valid solution
INFINITE_DISTANCE = float('inf')

def is_finite_distance(value: float) -> bool:
    return value is not None and math.isfinite(value)

def medoid_costs(sub_matrix: np.ndarray) -> np.ndarray:
    """
    Sum of distances from each member to every other member of the same cluster.

    Args:
        sub_matrix: Square distance matrix restricted to the cluster members

    Returns:
        Array of per-member costs; a member with any unknown pair has an infinite cost
    """
    if sub_matrix.size == 0:
        return np.array([], dtype=float)
    # inf + finite stays inf; no inf - inf can occur since the diagonal is 0
    return sub_matrix.sum(axis=1)

def infeasible_metric(k: int) -> ClusterMetric:
    """Metric row for a k that was skipped or produced no valid cluster."""
    return {
        'k': k,
        'total_intra_cluster_distance': INFINITE_DISTANCE,
        'number_of_valid_clusters': 0
    }

def is_valid_metric(metric: ClusterMetric) -> bool:
    """A row is a selection candidate when it has a valid cluster and a finite cost."""
    return metric['number_of_valid_clusters'] > 0 and is_finite_distance(metric['total_intra_cluster_distance'])

def sort_metrics(metrics: List[ClusterMetric]) -> List[ClusterMetric]:
    return sorted(metrics, key=lambda m: m['k'])
