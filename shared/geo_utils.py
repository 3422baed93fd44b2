"""
Shared geographic utilities for consistent behavior across the map views.
"""
from typing import Dict, List, Optional, Set, Tuple
import pandas as pd
from config import Config
from calculations.types import Cluster


def map_center(locations: Optional[pd.DataFrame]) -> Tuple[float, float]:
    """
    Mean position of the given locations.

    Falls back to the configured default centre when no location is usable.
    """
    if locations is None or locations.empty:
        return Config.DEFAULT_CENTER_LAT, Config.DEFAULT_CENTER_LON

    valid = locations.dropna(subset=['lat', 'lon'])
    if valid.empty:
        return Config.DEFAULT_CENTER_LAT, Config.DEFAULT_CENTER_LON
    return float(valid['lat'].mean()), float(valid['lon'].mean())


def point_to_cluster(clusters: Optional[List[Cluster]]) -> Dict[int, int]:
    """Map each clustered point to its cluster id."""
    mapping = {}
    for cluster in clusters or []:
        for member in cluster['members']:
            mapping[member] = cluster['id']
    return mapping


def missing_cluster_points(clusters: Optional[List[Cluster]], locations: Optional[pd.DataFrame]) -> Set[int]:
    """
    Clustered points that have no entry in the locations data.

    A non-empty result means the cluster map cannot be drawn faithfully.
    """
    clustered = set(point_to_cluster(clusters))
    if locations is None or locations.empty:
        return clustered
    known = set(int(p) for p in locations['point'])
    return clustered - known
