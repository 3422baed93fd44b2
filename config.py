"""
Configuration constants and settings for the Medoid Cluster Optimizer.
"""

import os
from dotenv import load_dotenv
from exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()


def _env_number(name: str, default, cast):
    value = os.getenv(name, '')
    if not value.strip():
        return default
    try:
        return cast(value)
    except ValueError:
        raise ConfigurationError(f"Environment variable {name} must be a number, got {value!r}")


def _env_int(name: str, default):
    return _env_number(name, default, int)


def _env_float(name: str, default):
    return _env_number(name, default, float)


class Config:
    """Application configuration constants."""

    # Clustering parameter defaults (sidebar)
    DEFAULT_MIN_CLUSTERS = 2
    DEFAULT_MAX_CLUSTERS = 5
    DEFAULT_MIN_CLUSTER_SIZE = 2

    # Partitioner
    MAX_ITERATIONS = 10
    RANDOM_SEED = _env_int('CLUSTERING_SEED', 42)

    # Multi-k search
    MAX_WORKERS = _env_int('CLUSTERING_MAX_WORKERS', 4)
    PARALLEL_MIN_TRIALS = 3  # below this many trials the search runs in-process
    SEARCH_TIMEOUT_SECONDS = _env_float('CLUSTERING_TIMEOUT', None)

    # Dense N x N float64 oracle: 5000 nodes is ~200 MB
    MAX_NODES_WARNING = 5000

    # Geographic and visualization parameters
    DEFAULT_CENTER_LAT = 31.7683  # Jerusalem
    DEFAULT_CENTER_LON = 35.2137
    MAP_ZOOM_START = 11
    POINT_RADIUS = 6
    CLUSTER_COLORS = ['red', 'blue', 'green', 'purple', 'orange',
                      'darkred', 'lightred', 'beige', 'darkblue', 'darkgreen',
                      'cadetblue', 'pink', 'black']
    UNCLUSTERED_COLOR = 'gray'

    # Uploads
    ALLOWED_UPLOAD_TYPES = ['json']
