"""
src/spatial: Grid partitioning and cluster aggregation for radar readings.

This module provides the pure clustering core: ``(points, zoom) -> render items``.
"""

from .grid import (
    CellKey,
    GeoPoint,
    GridConfig,
    cell_key,
    compute_grid_size,
    filter_valid_points,
    is_valid_coordinate,
    partition,
)
from .clustering import (
    ClusteringConfig,
    ClusteringDiagnostics,
    ClusterRecord,
    RenderItem,
    aggregate,
    build_cluster,
    cluster_points,
    flatten_members,
    summarize_render_items,
)

__all__ = [
    "CellKey",
    "GeoPoint",
    "GridConfig",
    "cell_key",
    "compute_grid_size",
    "filter_valid_points",
    "is_valid_coordinate",
    "partition",
    "ClusteringConfig",
    "ClusteringDiagnostics",
    "ClusterRecord",
    "RenderItem",
    "aggregate",
    "build_cluster",
    "cluster_points",
    "flatten_members",
    "summarize_render_items",
]
