"""
Distance oracle construction.

Turns the sparse, possibly incomplete distance list into a dense symmetric
lookup over every observed node. Nodes are given a compact 0..N-1 rank once,
and distances live in an N x N numpy array indexed by rank.

Scaling ceiling: memory and build time are quadratic in the node count
(N * N * 8 bytes). The oracle is meant for node sets that fit comfortably in
memory, not for very large inputs.
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence
import numpy as np
from .types import DistanceEntry
from .metrics import INFINITE_DISTANCE

logger = logging.getLogger(__name__)


def collect_nodes(entries: Iterable[DistanceEntry]) -> List[int]:
    """Return the sorted set of identifiers appearing as either endpoint."""
    nodes = set()
    for entry in entries:
        nodes.add(int(entry['from']))
        nodes.add(int(entry['to']))
    return sorted(nodes)


class DistanceOracle:
    """
    Read-only, complete distance query surface over a node set.

    distance(a, a) is 0, distance(a, b) is the supplied value in either
    direction, and pairs without an entry are float('inf').
    """

    def __init__(self, nodes: Sequence[int], matrix: np.ndarray):
        self.nodes = list(nodes)
        self.index: Dict[int, int] = {node: rank for rank, node in enumerate(self.nodes)}
        self.matrix = matrix
        self.matrix.setflags(write=False)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node: int) -> bool:
        return node in self.index

    def rank(self, node: int) -> int:
        """Compact matrix index of a node identifier. Raises KeyError for unknown nodes."""
        return self.index[node]

    def distance(self, a: int, b: int) -> float:
        """Symmetric distance between two node identifiers."""
        if a == b:
            if a not in self.index:
                raise KeyError(a)
            return 0.0
        return float(self.matrix[self.index[a], self.index[b]])

    def submatrix(self, nodes: Sequence[int]) -> np.ndarray:
        """Dense distance matrix restricted to the given nodes, in the given order."""
        ranks = [self.index[n] for n in nodes]
        return self.matrix[np.ix_(ranks, ranks)]

    def unknown_pair_count(self) -> int:
        """Number of unordered node pairs without a supplied distance."""
        return int(np.isinf(self.matrix).sum() // 2)

    def is_complete(self) -> bool:
        return self.unknown_pair_count() == 0


def build_distance_oracle(entries: Sequence[DistanceEntry],
                          nodes: Optional[Sequence[int]] = None) -> DistanceOracle:
    """
    Build a complete symmetric oracle from a sparse entry list.

    Args:
        entries: Ordered distance entries; a later entry for the same pair overrides an earlier one
        nodes: Node set to cover; derived from the entries when omitted

    Returns:
        DistanceOracle over the sorted node set
    """
    if nodes is None:
        nodes = collect_nodes(entries)
    else:
        nodes = sorted(set(int(n) for n in nodes))

    n = len(nodes)
    index = {node: rank for rank, node in enumerate(nodes)}

    matrix = np.full((n, n), INFINITE_DISTANCE, dtype=float)
    np.fill_diagonal(matrix, 0.0)

    for entry in entries:
        i = index[int(entry['from'])]
        j = index[int(entry['to'])]
        if i == j:
            continue
        value = float(entry['distance'])
        matrix[i, j] = value
        matrix[j, i] = value

    oracle = DistanceOracle(nodes, matrix)
    logger.info(f"Built distance oracle: {n} nodes, {len(entries)} entries, "
                f"{oracle.unknown_pair_count()} unknown pairs")
    return oracle
