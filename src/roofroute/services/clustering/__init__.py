"""Route clustering services."""

from .nearest_neighbor import nearest_neighbor_chain
from .service import estimate_day_distance, generate_clusters, resolve_start_location

__all__ = [
    "nearest_neighbor_chain",
    "generate_clusters",
    "estimate_day_distance",
    "resolve_start_location",
]
