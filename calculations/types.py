"""
Shared type definitions for the clustering engine.
"""
from typing import List, Optional, TypedDict

# The literal keys 'from'/'to' are not valid identifiers, so the functional syntax is required
DistanceEntry = TypedDict('DistanceEntry', {'from': int, 'to': int, 'distance': float})

class ClusteringParams(TypedDict):
    min_clusters: int
    max_clusters: int
    min_cluster_size: int

class Cluster(TypedDict):
    id: int
    members: List[int]  # Ascending node identifiers

class ClusterMetric(TypedDict):
    k: int
    total_intra_cluster_distance: float  # float('inf') when k produced no valid cluster
    number_of_valid_clusters: int

class PartitionResult(TypedDict):
    clusters: List[Cluster]
    medoids: List[int]
    total_intra_cluster_distance: float

class SearchOutcome(TypedDict):
    chosen_clusters: Optional[List[Cluster]]
    chosen_k: Optional[int]
    all_metrics: List[ClusterMetric]
    warning: Optional[str]

class ClusteringResult(TypedDict, total=False):
    chosen_clusters: List[Cluster]
    chosen_k: int
    all_metrics: List[ClusterMetric]
    warning: str
    error: str
