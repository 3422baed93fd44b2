"""
Parameter and feasibility checks that run before any clustering work.
"""
import logging
import numbers
from typing import Any, List, Optional
from config import Config
from exceptions import InvalidParameterError
from .types import ClusteringParams

logger = logging.getLogger(__name__)


def _require_int(params: Any, name: str) -> int:
    if name not in params:
        raise InvalidParameterError(f"Missing parameter '{name}'.", parameter=name)
    value = params[name]
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterError(f"Parameter '{name}' must be an integer, got {value!r}.", parameter=name)
    return int(value)


def validate_params(params: ClusteringParams) -> None:
    """
    Reject parameter sets for which no result can be computed.

    Raises:
        InvalidParameterError: on a missing/non-integer value, a non-positive value,
            or min_clusters greater than max_clusters
    """
    min_clusters = _require_int(params, 'min_clusters')
    max_clusters = _require_int(params, 'max_clusters')
    min_cluster_size = _require_int(params, 'min_cluster_size')

    if min_clusters <= 0:
        raise InvalidParameterError("Minimum clusters must be a positive integer.", parameter='min_clusters')
    if max_clusters <= 0:
        raise InvalidParameterError("Maximum clusters must be a positive integer.", parameter='max_clusters')
    if min_cluster_size <= 0:
        raise InvalidParameterError("Minimum cluster size must be a positive integer.", parameter='min_cluster_size')
    if min_clusters > max_clusters:
        raise InvalidParameterError(
            f"Minimum clusters ({min_clusters}) cannot be greater than maximum clusters ({max_clusters}).",
            parameter='max_clusters'
        )


def validate_feasibility(unique_node_count: int, params: ClusteringParams) -> List[str]:
    """
    Flag data/parameter combinations that are likely unsatisfiable.

    Never raises; the search still runs and the warnings travel with its result.

    Returns:
        List of warning messages, empty when nothing looks impossible
    """
    min_clusters = params['min_clusters']
    min_cluster_size = params['min_cluster_size']
    warnings = []

    if unique_node_count < min_clusters:
        warnings.append(
            f"Cannot form {min_clusters} clusters from only {unique_node_count} unique data points."
        )
    if unique_node_count < min_cluster_size:
        warnings.append(
            f"Minimum cluster size of {min_cluster_size} exceeds the {unique_node_count} unique data points available."
        )
    if unique_node_count < min_clusters * min_cluster_size:
        warnings.append(
            f"It might be impossible to form {min_clusters} clusters, each with at least "
            f"{min_cluster_size} members, from only {unique_node_count} unique data points. "
            "Consider reducing the minimum number of clusters or the minimum cluster size."
        )

    for message in warnings:
        logger.warning(message)
    return warnings


def check_scaling_ceiling(unique_node_count: int) -> Optional[str]:
    """Warn when the dense oracle will be large."""
    if unique_node_count > Config.MAX_NODES_WARNING:
        message = (f"{unique_node_count} unique data points exceed the recommended maximum of "
                   f"{Config.MAX_NODES_WARNING}; the dense distance table grows quadratically.")
        logger.warning(message)
        return message
    return None
