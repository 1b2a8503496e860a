"""
Marker encoding for radar render items.

Maps render items to circle-marker styles using a weather-radar color scale
for reflectivity, and builds the popup detail for cluster markers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from src.spatial import ClusterRecord, GeoPoint, RenderItem


# (lower bound in dBZ, color), checked from the top down
REFLECTIVITY_SCALE: List[Tuple[float, str]] = [
    (50.0, "#FF0000"),  # severe
    (45.0, "#FF6600"),
    (35.0, "#FFAA00"),
    (25.0, "#FFFF00"),
    (15.0, "#00FF00"),
    (10.0, "#00FFFF"),
    (5.0, "#0099FF"),
]
DEFAULT_COLOR = "#0066FF"

CLUSTER_DETAIL_LIMIT = 10


@dataclass(frozen=True)
class MarkerStyle:
    """Circle-marker path options."""

    fill_color: str
    radius: float
    color: str
    weight: int
    opacity: float
    fill_opacity: float


@dataclass
class ClusterDetail:
    """Popup content for a cluster marker."""

    cluster_id: str
    member_count: int
    members: List[GeoPoint]
    remaining: int


def reflectivity_color(reflectivity: Optional[float]) -> str:
    """Return the fill color for a reflectivity value (missing counts as 0)."""
    value = reflectivity or 0.0
    for lower, color in REFLECTIVITY_SCALE:
        if value >= lower:
            return color
    return DEFAULT_COLOR


def marker_radius(item: RenderItem) -> float:
    """Radius from rainfall rate for points, from member count for clusters."""
    if item.is_cluster:
        return float(np.clip(4 + math.log10(max(item.member_count, 1)) * 2, 4, 15))
    intensity = item.rainfall_rate or 0.0
    return float(np.clip(5 + intensity * 2, 4, 10))


def marker_style(item: RenderItem) -> MarkerStyle:
    is_cluster = item.is_cluster
    return MarkerStyle(
        fill_color=reflectivity_color(item.reflectivity),
        radius=marker_radius(item),
        color="#333" if is_cluster else "white",
        weight=2 if is_cluster else 1,
        opacity=0.8,
        fill_opacity=0.8 if is_cluster else 0.7,
    )


def cluster_detail(cluster: ClusterRecord, limit: int = CLUSTER_DETAIL_LIMIT) -> ClusterDetail:
    """
    Build the popup detail for ``cluster``.

    Args:
        cluster: Cluster record to expand
        limit: Maximum number of members listed

    Returns:
        ClusterDetail with the first ``limit`` members, in cell order, and
        the number of members left out
    """
    shown = list(cluster.members[:limit])
    return ClusterDetail(
        cluster_id=cluster.id,
        member_count=cluster.member_count,
        members=shown,
        remaining=cluster.member_count - len(shown),
    )
