"""
Grid-cell aggregation of radar readings into render items.

This module provides:
1. Per-cell policy (individual points vs one synthetic cluster)
2. Detail-zoom override for small cells
3. Deterministic cluster identity and labeling
4. Averaged cluster statistics (reflectivity, rainfall rate, altitude)
5. Diagnostics for each clustering run

Missing statistics are counted as 0 before averaging, so sparse fields pull
cluster averages toward zero. Renderers showing these numbers should say
"average over all members", not "average over reporting members".
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .grid import CellKey, GeoPoint, GridConfig, compute_grid_size, partition


logger = logging.getLogger(__name__)


@dataclass
class ClusteringConfig(GridConfig):
    """Configuration for grid clustering (grid constants plus cell policy)."""

    detail_max_cell_size: int = 3
    """Largest cell emitted as individual points at or above the detail zoom."""


@dataclass(frozen=True)
class ClusterRecord:
    """Synthetic marker standing in for two or more readings in one cell."""

    id: str
    """Render key: ``cluster_<first member id>_<member count>``."""

    name: str
    """Human-readable count summary."""

    lat: float
    """Mean latitude of members."""

    lng: float
    """Mean longitude of members."""

    reflectivity: float
    """Mean reflectivity (missing values counted as 0)."""

    rainfall_rate: float
    """Mean rainfall rate (missing values counted as 0)."""

    altitude: float
    """Mean altitude (missing values counted as 0)."""

    member_count: int
    """Number of readings merged into this cluster (always >= 2)."""

    members: Tuple[GeoPoint, ...] = field(repr=False)
    """The original member points, same objects, input order."""

    description: str = ""
    """Short statistics summary for tooltips."""

    category: str = "cluster"

    @property
    def is_cluster(self) -> bool:
        return True


RenderItem = Union[GeoPoint, ClusterRecord]


@dataclass
class ClusteringDiagnostics:
    """Summary of one clustering run."""

    num_points: int
    """Total number of points provided."""

    num_cells: int
    """Number of occupied grid cells."""

    num_clusters: int
    """Number of cluster records emitted."""

    num_individual: int
    """Number of points emitted individually."""

    grid_size: Optional[float] = None
    """Cell size in degrees (None if clustering was skipped)."""

    cluster_sizes: List[int] = field(default_factory=list)
    """Member count of each cluster."""

    @property
    def num_rendered(self) -> int:
        return self.num_clusters + self.num_individual


def _mean(values: Sequence[Optional[float]]) -> float:
    # None and NaN both count as 0
    return sum(0.0 if v is None or math.isnan(v) else v for v in values) / len(values)


def build_cluster(members: Sequence[GeoPoint]) -> ClusterRecord:
    """
    Build the cluster record for a cell.

    Args:
        members: Points of one grid cell, in cell order (at least two)

    Returns:
        ClusterRecord with averaged position and statistics
    """
    count = len(members)
    if count < 2:
        raise ValueError(f"A cluster needs at least 2 members, got {count}")

    reflectivity = _mean([m.reflectivity for m in members])
    rainfall = _mean([m.rainfall_rate for m in members])

    return ClusterRecord(
        id=f"cluster_{members[0].id}_{count}",
        name=f"Cluster ({count} points)",
        lat=_mean([m.lat for m in members]),
        lng=_mean([m.lng for m in members]),
        reflectivity=reflectivity,
        rainfall_rate=rainfall,
        altitude=_mean([m.altitude for m in members]),
        member_count=count,
        members=tuple(members),
        description=(
            f"Avg Reflectivity: {reflectivity:.1f}dBZ, "
            f"Avg Rainfall: {rainfall:.1f}mm/h"
        ),
    )


def _keep_individual(cell_size: int, zoom_level: int, config: ClusteringConfig) -> bool:
    if cell_size == 1:
        return True
    # Small cells are not worth a cluster marker once the user is close
    return zoom_level >= config.detail_zoom and cell_size <= config.detail_max_cell_size


def aggregate(
    cells: Dict[CellKey, List[GeoPoint]],
    zoom_level: int,
    config: Optional[ClusteringConfig] = None,
) -> List[RenderItem]:
    """
    Turn a cell partition into a flat render list.

    Per cell:
    - 1 point: emitted as-is
    - 2-3 points at zoom >= 12: each point emitted as-is
    - otherwise: one :class:`ClusterRecord`

    Args:
        cells: Output of :func:`~src.spatial.grid.partition`
        zoom_level: Current integer map zoom
        config: Clustering configuration (uses defaults if None)

    Returns:
        Render items in cell iteration order. Callers must not rely on the
        order across cells for anything beyond display.
    """
    if config is None:
        config = ClusteringConfig()

    items: List[RenderItem] = []
    for members in cells.values():
        if _keep_individual(len(members), zoom_level, config):
            items.extend(members)
        else:
            items.append(build_cluster(members))
    return items


def summarize_render_items(
    items: Sequence[RenderItem],
    num_points: int,
    grid_size: Optional[float] = None,
    num_cells: Optional[int] = None,
) -> ClusteringDiagnostics:
    """Count clusters and individual points in a render list."""
    cluster_sizes = [item.member_count for item in items if item.is_cluster]
    num_clusters = len(cluster_sizes)
    num_individual = len(items) - num_clusters

    return ClusteringDiagnostics(
        num_points=num_points,
        num_cells=num_cells if num_cells is not None else len(items),
        num_clusters=num_clusters,
        num_individual=num_individual,
        grid_size=grid_size,
        cluster_sizes=cluster_sizes,
    )


def cluster_points(
    points: List[GeoPoint],
    zoom_level: int,
    config: Optional[ClusteringConfig] = None,
) -> Tuple[List[RenderItem], ClusteringDiagnostics]:
    """
    Run the full partition -> aggregate pipeline.

    Returns:
        (render_items, diagnostics)
    """
    if config is None:
        config = ClusteringConfig()

    cells = partition(points, zoom_level, config)
    items = aggregate(cells, zoom_level, config)
    grid_size = compute_grid_size(points, zoom_level, config) if cells else None

    diagnostics = summarize_render_items(items, len(points), grid_size, num_cells=len(cells))
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Clustered %d points at zoom %d: grid=%s cells=%d clusters=%d individual=%d",
            diagnostics.num_points,
            zoom_level,
            grid_size,
            diagnostics.num_cells,
            diagnostics.num_clusters,
            diagnostics.num_individual,
        )
    return items, diagnostics


def flatten_members(items: Sequence[RenderItem]) -> List[GeoPoint]:
    """Recover the underlying points of a render list (clusters expanded)."""
    points: List[GeoPoint] = []
    for item in items:
        if item.is_cluster:
            points.extend(item.members)
        else:
            points.append(item)
    return points
