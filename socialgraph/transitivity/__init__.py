"""Transitivity engine: local clustering coefficients and global transitivity."""

from socialgraph.transitivity.clustering import (
    average_clustering,
    connected_triples,
    global_clustering,
    local_clustering,
    triangle_counts,
)

__all__ = [
    "average_clustering",
    "connected_triples",
    "global_clustering",
    "local_clustering",
    "triangle_counts",
]
