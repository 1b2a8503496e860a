"""
Adaptive lat/lng grid partitioning for radar readings.

The cell size adapts to both the spread of the data and the map zoom level:
- Coarse cells (extent / 30) at overview zoom, finer cells (extent / 50) from zoom 12
- Cells shrink geometrically (factor 2) for every zoom step beyond level 8
- A hard floor of 0.0005 degrees keeps cells non-degenerate

Points with NaN, infinite or out-of-range coordinates are left out of both the
extent and the buckets (see :func:`filter_valid_points`).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np


logger = logging.getLogger(__name__)

CellKey = Tuple[int, int]


@dataclass(frozen=True)
class GeoPoint:
    """A single geo-located radar reading."""

    id: str
    """Identity, unique within one render call."""

    name: str
    """Display label."""

    lat: float
    """Latitude in decimal degrees."""

    lng: float
    """Longitude in decimal degrees."""

    category: Optional[str] = None
    """Intensity tag (e.g. 'high_rain')."""

    reflectivity: Optional[float] = None
    """Radar reflectivity in dBZ."""

    rainfall_rate: Optional[float] = None
    """Rainfall rate in mm/h."""

    altitude: Optional[float] = None
    """Altitude in metres."""

    description: Optional[str] = None
    """Free-form text shown in the detail popup."""

    @property
    def is_cluster(self) -> bool:
        return False


@dataclass
class GridConfig:
    """Constants driving the adaptive cell size."""

    coarse_divisor: float = 30.0
    """Extent divisor below the detail zoom."""

    fine_divisor: float = 50.0
    """Extent divisor at or above the detail zoom."""

    detail_zoom: int = 12
    """Zoom level from which the finer divisor applies."""

    zoom_base: int = 8
    """Zoom level beyond which cells shrink geometrically."""

    min_grid_size: float = 0.0005
    """Floor for the cell size in degrees."""


DEFAULT_GRID_CONFIG = GridConfig()


def is_valid_coordinate(lat: Any, lng: Any) -> bool:
    """Return True for finite numeric coordinates inside the WGS84 ranges."""
    for value in (lat, lng):
        if isinstance(value, bool) or not isinstance(value, (int, float, np.floating, np.integer)):
            return False
        if not math.isfinite(value):
            return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


def filter_valid_points(points: Iterable[GeoPoint]) -> List[GeoPoint]:
    """Drop points whose coordinates would corrupt the bounding extent."""
    return [p for p in points if is_valid_coordinate(p.lat, p.lng)]


def compute_grid_size(
    points: List[GeoPoint],
    zoom_level: int,
    config: Optional[GridConfig] = None,
) -> float:
    """
    Compute the cell size in degrees for ``points`` at ``zoom_level``.

    Args:
        points: Points to partition (invalid coordinates are ignored)
        zoom_level: Current integer map zoom
        config: Grid constants (uses defaults if None)

    Returns:
        Cell size in degrees, never below ``config.min_grid_size``

    Example:
        >>> # 1 degree extent at zoom 5: 1/30, no zoom compression
        >>> compute_grid_size(points, 5)
        0.0333...
    """
    if config is None:
        config = DEFAULT_GRID_CONFIG

    points = filter_valid_points(points)
    if not points:
        return config.min_grid_size

    lats = np.fromiter((p.lat for p in points), dtype=float, count=len(points))
    lngs = np.fromiter((p.lng for p in points), dtype=float, count=len(points))
    lat_spread = float(lats.max() - lats.min())
    lng_spread = float(lngs.max() - lngs.min())

    divisor = config.fine_divisor if zoom_level >= config.detail_zoom else config.coarse_divisor
    base_grid_size = max(lat_spread, lng_spread) / divisor
    zoom_factor = 2.0 ** max(0, zoom_level - config.zoom_base)

    return max(config.min_grid_size, base_grid_size / zoom_factor)


def cell_key(point: GeoPoint, grid_size: float) -> CellKey:
    """Return the (row, column) grid cell containing ``point``."""
    return (math.floor(point.lat / grid_size), math.floor(point.lng / grid_size))


def partition(
    points: List[GeoPoint],
    zoom_level: int,
    config: Optional[GridConfig] = None,
) -> Dict[CellKey, List[GeoPoint]]:
    """
    Bucket ``points`` into adaptive grid cells.

    Points keep their input order inside each bucket, so the first member of
    a cell is always the earliest input point that fell into it.
    Points with invalid coordinates are skipped and counted in a warning.

    Returns:
        Mapping of cell key to the points in that cell (empty for empty input)
    """
    valid = filter_valid_points(points)
    if len(valid) < len(points):
        logger.warning(
            "Partition skipped %d point(s) with invalid coordinates",
            len(points) - len(valid),
        )
    if not valid:
        return {}

    grid_size = compute_grid_size(valid, zoom_level, config)

    cells: Dict[CellKey, List[GeoPoint]] = {}
    for point in valid:
        cells.setdefault(cell_key(point, grid_size), []).append(point)
    return cells
