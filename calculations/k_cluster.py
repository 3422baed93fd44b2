"""
Single-k clustering using medoid-based local search (PAM-style).
"""
import logging
from typing import Callable, List, Optional, Sequence
import numpy as np
from config import Config
from exceptions import SearchCancelledError
from .types import Cluster, PartitionResult
from .distance_oracle import DistanceOracle
from .metrics import INFINITE_DISTANCE, medoid_costs

logger = logging.getLogger(__name__)

UNASSIGNED = -1


def _empty_result() -> PartitionResult:
    return {'clusters': [], 'medoids': [], 'total_intra_cluster_distance': INFINITE_DISTANCE}


def assign_to_medoids(dist: np.ndarray, medoids: List[int]) -> np.ndarray:
    """
    Label each node with the slot of its nearest medoid.

    Medoids must be in ascending order so that np.argmin, which returns the first
    minimum, breaks ties towards the lower identifier. Nodes with no finite
    distance to any medoid are labelled UNASSIGNED.
    """
    sub = dist[:, medoids]
    labels = np.argmin(sub, axis=1)
    nearest = sub[np.arange(len(dist)), labels]
    labels[~np.isfinite(nearest)] = UNASSIGNED
    return labels


def best_medoid(dist: np.ndarray, members: np.ndarray, current: int) -> int:
    """Member with the smallest summed distance to the rest of its cluster."""
    costs = medoid_costs(dist[np.ix_(members, members)])
    best = int(np.argmin(costs))
    if not np.isfinite(costs[best]):
        # Every candidate has an unknown pair; the current medoid still reaches all members
        return current
    return int(members[best])


def refill_medoids(candidates: List[int], k: int, n: int,
                   rng: np.random.Generator) -> Optional[List[int]]:
    """
    Deduplicate the candidate medoids and top them up at random to exactly k.

    Returns:
        Sorted list of k distinct positions, or None when the node set is too small
    """
    chosen = sorted(set(candidates))
    missing = k - len(chosen)
    if missing <= 0:
        return chosen

    available = np.setdiff1d(np.arange(n), chosen)
    if len(available) < missing:
        return None
    extra = rng.choice(available, size=missing, replace=False)
    return sorted(chosen + [int(p) for p in extra])


def partition(k: int,
              nodes: Sequence[int],
              oracle: DistanceOracle,
              min_cluster_size: int,
              max_iterations: int = Config.MAX_ITERATIONS,
              rng: Optional[np.random.Generator] = None,
              cancel_check: Optional[Callable[[], bool]] = None) -> PartitionResult:
    """
    Partition nodes into k clusters around medoids.

    Args:
        k: Target number of clusters
        nodes: Node identifiers to cluster (must all be known to the oracle)
        oracle: Distance oracle covering the nodes
        min_cluster_size: Clusters smaller than this are discarded after the final assignment
        max_iterations: Upper bound on assignment/update rounds
        rng: Seeded generator for initialization, lost-medoid recovery and refill
        cancel_check: Polled once per iteration; returning True aborts the trial

    Returns:
        PartitionResult with surviving clusters, their medoids and the summed
        medoid-to-member distance (float('inf') with no clusters when infeasible)

    Raises:
        SearchCancelledError: if cancel_check requests cancellation
    """
    node_ids = sorted(set(int(node) for node in nodes))
    n = len(node_ids)

    if k <= 0 or k > n:
        logger.debug(f"k={k}: infeasible for {n} nodes, skipping")
        return _empty_result()

    if rng is None:
        rng = np.random.default_rng(Config.RANDOM_SEED)

    dist = oracle.submatrix(node_ids)
    medoids = sorted(int(p) for p in rng.choice(n, size=k, replace=False))

    for iteration in range(max_iterations):
        if cancel_check is not None and cancel_check():
            raise SearchCancelledError(f"Clustering for k={k} cancelled at iteration {iteration + 1}")

        labels = assign_to_medoids(dist, medoids)

        candidates = []
        for slot, medoid in enumerate(medoids):
            members = np.flatnonzero(labels == slot)
            if members.size == 0:
                replacement = int(rng.integers(n))
                logger.debug(f"k={k}: medoid {node_ids[medoid]} lost all members, recovering with {node_ids[replacement]}")
                candidates.append(replacement)
            else:
                candidates.append(best_medoid(dist, members, medoid))

        next_medoids = refill_medoids(candidates, k, n, rng)
        if next_medoids is None:
            logger.warning(f"k={k}: cannot refill to {k} distinct medoids from {n} nodes, abandoning trial")
            return _empty_result()

        if next_medoids == medoids:
            logger.debug(f"k={k}: converged after {iteration + 1} iterations")
            break
        medoids = next_medoids

    labels = assign_to_medoids(dist, medoids)

    groups = []
    for slot, medoid in enumerate(medoids):
        members = np.flatnonzero(labels == slot)
        if len(members) < min_cluster_size:
            continue
        groups.append((medoid, members))

    if not groups:
        logger.debug(f"k={k}: no cluster reached the minimum size of {min_cluster_size}")
        return _empty_result()

    total = 0.0
    for medoid, members in groups:
        total += float(dist[medoid, members].sum())

    groups.sort(key=lambda group: group[1][0])
    clusters: List[Cluster] = [
        {'id': cluster_id, 'members': [node_ids[p] for p in members]}
        for cluster_id, (_, members) in enumerate(groups, start=1)
    ]
    surviving_medoids = sorted(node_ids[medoid] for medoid, _ in groups)

    logger.info(f"k={k}: {len(clusters)} valid clusters, total intra-cluster distance {total:.2f}")
    return {
        'clusters': clusters,
        'medoids': surviving_medoids,
        'total_intra_cluster_distance': total
    }
