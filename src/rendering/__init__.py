"""
Rendering Module for Radar Map

Provides the consumer side of the clustering core:
- Count-threshold render policy (cluster only above 100 points)
- Marker encoding (reflectivity colors, radius by rainfall or cluster size)
- Cluster popup detail

Usage:
    from src.rendering import RenderPolicy, marker_style

    result = RenderPolicy().select_render_items(points, zoom_level=9)
    styles = [marker_style(item) for item in result.items]
"""

from .policy import (
    DEFAULT_CLUSTER_THRESHOLD,
    MIN_ZOOM_FOR_INDIVIDUAL_MARKERS,
    RenderPolicy,
    RenderResult,
    render_mode_label,
    select_render_items,
)

from .encoding import (
    CLUSTER_DETAIL_LIMIT,
    REFLECTIVITY_SCALE,
    ClusterDetail,
    MarkerStyle,
    cluster_detail,
    marker_radius,
    marker_style,
    reflectivity_color,
)

__all__ = [
    # Policy
    "DEFAULT_CLUSTER_THRESHOLD",
    "MIN_ZOOM_FOR_INDIVIDUAL_MARKERS",
    "RenderPolicy",
    "RenderResult",
    "render_mode_label",
    "select_render_items",

    # Encoding
    "CLUSTER_DETAIL_LIMIT",
    "REFLECTIVITY_SCALE",
    "ClusterDetail",
    "MarkerStyle",
    "cluster_detail",
    "marker_radius",
    "marker_style",
    "reflectivity_color",
]
