"""
Cluster service: validates a request, runs the multi-k search and assembles
the structured clustering result.
"""
import json
import logging
import math
from typing import Any, Callable, List, Optional, Sequence
from data_manager import DataManager
from exceptions import DataValidationError
from .types import ClusteringParams, ClusteringResult, DistanceEntry
from .validation import validate_params, validate_feasibility, check_scaling_ceiling
from .distance_oracle import collect_nodes, build_distance_oracle
from .search import search, CONFIG_TIMEOUT

logger = logging.getLogger(__name__)

NO_DATA_WARNING = "No data provided in the distance matrix or the file is empty."


class ClusterService:
    """
    Entry point of the clustering engine.

    Exactly one of 'error' or a (possibly empty) result is populated per call:
    malformed input and invalid parameters short-circuit before any clustering,
    while feasibility problems only add a 'warning' to the best-effort result.
    """

    def __init__(self,
                 data_manager: Optional[DataManager] = None,
                 max_workers: Optional[int] = None,
                 max_iterations: Optional[int] = None):
        self.data_manager = data_manager or DataManager()
        self.max_workers = max_workers
        self.max_iterations = max_iterations

    def run_from_document(self,
                          document: Any,
                          params: ClusteringParams,
                          seed: Optional[int] = None,
                          cancel_check: Optional[Callable[[], bool]] = None,
                          timeout: Any = CONFIG_TIMEOUT) -> ClusteringResult:
        """Parse a raw distance-matrix document (JSON text or bytes) and cluster it."""
        try:
            entries = self.data_manager.parse_distance_matrix(document)
        except DataValidationError as e:
            logger.error(f"Rejected distance matrix: {e}")
            return {'error': str(e)}
        return self.run_clustering(entries, params, seed=seed, cancel_check=cancel_check, timeout=timeout)

    def run_clustering(self,
                       entries: Sequence[DistanceEntry],
                       params: ClusteringParams,
                       seed: Optional[int] = None,
                       cancel_check: Optional[Callable[[], bool]] = None,
                       timeout: Any = CONFIG_TIMEOUT) -> ClusteringResult:
        """
        Cluster validated distance entries.

        Args:
            entries: Distance entries (already schema-checked)
            params: min_clusters, max_clusters, min_cluster_size
            seed: Base random seed (Config.RANDOM_SEED by default)
            cancel_check: Cooperative cancellation flag forwarded to the search
            timeout: Search time budget in seconds (Config.SEARCH_TIMEOUT_SECONDS by default, None for no budget)

        Returns:
            ClusteringResult dictionary; unset keys are omitted

        Raises:
            SearchCancelledError: if the search is cancelled or times out
        """
        try:
            validate_params(params)
        except DataValidationError as e:
            logger.error(f"Invalid clustering parameters: {e}")
            return {'error': str(e)}

        if not entries:
            logger.warning(NO_DATA_WARNING)
            return {'warning': NO_DATA_WARNING}

        nodes = collect_nodes(entries)
        logger.info(f"Clustering {len(entries)} distance entries over {len(nodes)} unique nodes "
                    f"(k={params['min_clusters']}..{params['max_clusters']}, "
                    f"min size={params['min_cluster_size']})")

        warnings: List[str] = validate_feasibility(len(nodes), params)
        scaling_warning = check_scaling_ceiling(len(nodes))
        if scaling_warning:
            warnings.append(scaling_warning)

        oracle = build_distance_oracle(entries, nodes)
        outcome = search(
            nodes,
            oracle,
            params,
            seed=seed,
            max_iterations=self.max_iterations,
            max_workers=self.max_workers,
            cancel_check=cancel_check,
            timeout=timeout
        )

        if outcome['warning']:
            warnings.append(outcome['warning'])

        result: ClusteringResult = {'all_metrics': outcome['all_metrics']}
        if outcome['chosen_k'] is not None:
            result['chosen_clusters'] = outcome['chosen_clusters']
            result['chosen_k'] = outcome['chosen_k']
        if warnings:
            result['warning'] = "\n".join(warnings)
        return result


def _json_safe(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _json_safe(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(val) for val in value]
    return value


def result_to_json(result: ClusteringResult, indent: int = 2) -> str:
    """Serialize a result as strict JSON; the infinite-distance sentinel becomes null."""
    return json.dumps(_json_safe(result), indent=indent, ensure_ascii=False)
