"""
Multi-k search: runs the medoid partitioner for every candidate cluster count
and selects the best outcome.
"""
import logging
import time
from concurrent.futures import ProcessPoolExecutor, as_completed, TimeoutError as FuturesTimeoutError
from typing import Any, Callable, Dict, List, Optional, Sequence
import numpy as np
from config import Config
from exceptions import SearchCancelledError
from .types import ClusteringParams, ClusterMetric, PartitionResult, SearchOutcome
from .distance_oracle import DistanceOracle
from .k_cluster import partition
from .metrics import infeasible_metric, is_valid_metric, sort_metrics

logger = logging.getLogger(__name__)

# Default for search(timeout=...): use Config.SEARCH_TIMEOUT_SECONDS. None disables the budget.
CONFIG_TIMEOUT = object()


def trial_rng(seed: int, k: int) -> np.random.Generator:
    """Independent generator per (seed, k) so results do not depend on scheduling."""
    return np.random.default_rng([seed, k])


def _run_trial(k: int,
               nodes: List[int],
               oracle: DistanceOracle,
               min_cluster_size: int,
               max_iterations: int,
               seed: int,
               cancel_check: Optional[Callable[[], bool]] = None) -> PartitionResult:
    """Run one partition trial. Module-level so it can be pickled into worker processes."""
    return partition(
        k,
        nodes,
        oracle,
        min_cluster_size,
        max_iterations=max_iterations,
        rng=trial_rng(seed, k),
        cancel_check=cancel_check
    )


def metric_from_partition(k: int, result: Optional[PartitionResult]) -> ClusterMetric:
    if result is None or not result['clusters']:
        return infeasible_metric(k)
    return {
        'k': k,
        'total_intra_cluster_distance': result['total_intra_cluster_distance'],
        'number_of_valid_clusters': len(result['clusters'])
    }


def select_best_k(metrics: Sequence[ClusterMetric]) -> Optional[int]:
    """
    Pick the k with the strictly lowest finite total intra-cluster distance.

    Ties go to the lower k, so the choice never depends on the order rows arrived in.
    Returns None when no row has a valid cluster.
    """
    candidates = [m for m in metrics if is_valid_metric(m)]
    if not candidates:
        return None
    best = min(candidates, key=lambda m: (m['total_intra_cluster_distance'], m['k']))
    return best['k']


class _Deadline:
    """Combines an optional caller cancel flag with an optional time budget."""

    def __init__(self, cancel_check: Optional[Callable[[], bool]], timeout: Optional[float]):
        self.cancel_check = cancel_check
        self.expires_at = time.monotonic() + timeout if timeout is not None else None

    def remaining(self) -> Optional[float]:
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - time.monotonic())

    def expired(self) -> bool:
        if self.cancel_check is not None and self.cancel_check():
            return True
        return self.expires_at is not None and time.monotonic() >= self.expires_at

    def check(self, where: str) -> None:
        if self.expired():
            raise SearchCancelledError(f"Clustering search cancelled {where}")


def _run_sequential(trial_ks: List[int], nodes: List[int], oracle: DistanceOracle,
                    min_cluster_size: int, max_iterations: int, seed: int,
                    deadline: _Deadline) -> Dict[int, Optional[PartitionResult]]:
    results = {}
    for k in trial_ks:
        deadline.check(f"before k={k}")
        try:
            results[k] = _run_trial(k, nodes, oracle, min_cluster_size, max_iterations, seed,
                                    cancel_check=deadline.expired)
        except SearchCancelledError:
            raise
        except Exception as e:
            logger.error(f"Clustering trial for k={k} failed: {e}")
            results[k] = None
    return results


def _run_parallel(trial_ks: List[int], nodes: List[int], oracle: DistanceOracle,
                  min_cluster_size: int, max_iterations: int, seed: int,
                  max_workers: int, deadline: _Deadline) -> Dict[int, Optional[PartitionResult]]:
    results = {}
    workers = min(max_workers, len(trial_ks))
    logger.info(f"Dispatching {len(trial_ks)} trials to {workers} worker processes")

    # Cancellation returns without waiting for trials already running in workers
    executor = ProcessPoolExecutor(max_workers=workers)
    try:
        futures = {}
        for k in trial_ks:
            deadline.check(f"before dispatching k={k}")
            future = executor.submit(_run_trial, k, nodes, oracle, min_cluster_size, max_iterations, seed)
            futures[future] = k

        for future in as_completed(futures, timeout=deadline.remaining()):
            k = futures[future]
            try:
                results[k] = future.result()
            except Exception as e:
                logger.error(f"Clustering trial for k={k} failed: {e}")
                results[k] = None
            deadline.check(f"after k={k}")
    except FuturesTimeoutError:
        executor.shutdown(wait=False, cancel_futures=True)
        raise SearchCancelledError("Clustering search exceeded its time budget")
    except BaseException:
        executor.shutdown(wait=False, cancel_futures=True)
        raise

    executor.shutdown(wait=True)
    return results


def search(nodes: Sequence[int],
           oracle: DistanceOracle,
           params: ClusteringParams,
           seed: Optional[int] = None,
           max_iterations: Optional[int] = None,
           max_workers: Optional[int] = None,
           cancel_check: Optional[Callable[[], bool]] = None,
           timeout: Any = CONFIG_TIMEOUT) -> SearchOutcome:
    """
    Evaluate every k from min_clusters to max_clusters and keep the best one.

    Args:
        nodes: Node identifiers to cluster
        oracle: Distance oracle covering the nodes
        params: Validated clustering parameters
        seed: Base seed; each k gets its own generator derived from (seed, k)
        max_iterations: Partitioner iteration cap (Config.MAX_ITERATIONS by default)
        max_workers: Process pool bound; 1 forces in-process execution
        cancel_check: Polled per k (and per iteration in-process); True cancels the search
        timeout: Time budget in seconds for the whole search; None means no budget.
            Checked per k. On cancellation queued trials are dropped and trials
            already running in worker processes are abandoned, not awaited.

    Returns:
        SearchOutcome with the chosen clusters/k (None when no k is feasible),
        one metric row per k in ascending order, and an optional warning

    Raises:
        SearchCancelledError: on cancellation or timeout
    """
    seed = Config.RANDOM_SEED if seed is None else seed
    max_iterations = Config.MAX_ITERATIONS if max_iterations is None else max_iterations
    max_workers = Config.MAX_WORKERS if max_workers is None else max_workers
    if timeout is CONFIG_TIMEOUT:
        timeout = Config.SEARCH_TIMEOUT_SECONDS

    min_clusters = params['min_clusters']
    max_clusters = params['max_clusters']
    min_cluster_size = params['min_cluster_size']

    node_ids = sorted(set(int(node) for node in nodes))
    n = len(node_ids)
    deadline = _Deadline(cancel_check, timeout)

    metrics: Dict[int, ClusterMetric] = {}
    trial_ks = []
    for k in range(min_clusters, max_clusters + 1):
        if k > n or k * min_cluster_size > n:
            logger.info(f"k={k}: {k} clusters of at least {min_cluster_size} cannot be formed from {n} nodes")
            metrics[k] = infeasible_metric(k)
        else:
            trial_ks.append(k)

    if max_workers is not None and max_workers > 1 and len(trial_ks) >= Config.PARALLEL_MIN_TRIALS:
        results = _run_parallel(trial_ks, node_ids, oracle, min_cluster_size, max_iterations, seed,
                                max_workers, deadline)
    else:
        results = _run_sequential(trial_ks, node_ids, oracle, min_cluster_size, max_iterations, seed,
                                  deadline)

    for k in trial_ks:
        metrics[k] = metric_from_partition(k, results.get(k))

    all_metrics = sort_metrics(list(metrics.values()))
    best_k = select_best_k(all_metrics)

    if best_k is None:
        warning = (f"Could not form any clusters satisfying the minimum size of {min_cluster_size} "
                   f"for any cluster count between {min_clusters} and {max_clusters} "
                   f"from {n} unique data points. Consider reducing the minimum cluster size "
                   "or the minimum number of clusters.")
        logger.warning(warning)
        return {
            'chosen_clusters': None,
            'chosen_k': None,
            'all_metrics': all_metrics,
            'warning': warning
        }

    chosen_clusters = results[best_k]['clusters']
    warnings = []
    if len(chosen_clusters) < min_clusters:
        warnings.append(f"Could only form {len(chosen_clusters)} clusters satisfying the minimum size of "
                        f"{min_cluster_size}. This is less than the desired minimum of {min_clusters} clusters.")

    covered = sum(len(cluster['members']) for cluster in chosen_clusters)
    if covered < n:
        warnings.append(f"The chosen clusters cover only {covered} of {n} unique data points. The rest have no "
                        "known distance to any medoid or fell in clusters below the minimum size.")

    for message in warnings:
        logger.warning(message)

    logger.info(f"Selected k={best_k} with {len(chosen_clusters)} clusters out of {len(all_metrics)} candidates")
    return {
        'chosen_clusters': chosen_clusters,
        'chosen_k': best_k,
        'all_metrics': all_metrics,
        'warning': "\n".join(warnings) if warnings else None
    }
