"""
Render Policy

Decides, from the candidate point count and zoom level, whether a point set
is drawn as-is or run through the grid clustering pipeline. Small sets are
always drawn point by point. The decision is recomputed on every call with
no hysteresis, so a set hovering around the threshold can flip between
representations from one recompute to the next.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from src.spatial import (
    ClusteringConfig,
    ClusteringDiagnostics,
    GeoPoint,
    RenderItem,
    cluster_points,
    filter_valid_points,
    summarize_render_items,
)


logger = logging.getLogger(__name__)

DEFAULT_CLUSTER_THRESHOLD = 100

# Status bar label switches to "Individual" from this zoom level
MIN_ZOOM_FOR_INDIVIDUAL_MARKERS = 13


@dataclass
class RenderResult:
    """
    Output of one render policy evaluation.

    Attributes:
        items: Flat list of render items (points and clusters)
        clustered: Whether the clustering pipeline ran
        total_points: Number of valid candidate points
        skipped_invalid: Points dropped for invalid coordinates
        diagnostics: Clustering summary for this evaluation
    """
    items: List[RenderItem]
    clustered: bool
    total_points: int
    skipped_invalid: int = 0
    diagnostics: Optional[ClusteringDiagnostics] = None

    @property
    def grid_size(self) -> Optional[float]:
        return self.diagnostics.grid_size if self.diagnostics else None


@dataclass
class RenderPolicy:
    """Count-threshold policy in front of the clustering pipeline."""

    cluster_threshold: int = DEFAULT_CLUSTER_THRESHOLD
    config: ClusteringConfig = field(default_factory=ClusteringConfig)

    def should_cluster(self, point_count: int) -> bool:
        """Clustering only pays off above the threshold."""
        return point_count > self.cluster_threshold

    def select_render_items(self, points: List[GeoPoint], zoom_level: int) -> RenderResult:
        """
        Return what to draw for ``points`` at ``zoom_level``.

        Points with NaN, non-numeric or out-of-range coordinates are dropped
        before the threshold is applied.
        """
        valid = filter_valid_points(points)
        skipped = len(points) - len(valid)
        if skipped:
            logger.warning("Skipping %d point(s) with invalid coordinates", skipped)

        if not self.should_cluster(len(valid)):
            return RenderResult(
                items=list(valid),
                clustered=False,
                total_points=len(valid),
                skipped_invalid=skipped,
                diagnostics=summarize_render_items(valid, len(valid), num_cells=0),
            )

        items, diagnostics = cluster_points(valid, zoom_level, self.config)
        return RenderResult(
            items=items,
            clustered=True,
            total_points=len(valid),
            skipped_invalid=skipped,
            diagnostics=diagnostics,
        )


def select_render_items(
    points: List[GeoPoint],
    zoom_level: int,
    policy: Optional[RenderPolicy] = None,
) -> RenderResult:
    """Convenience wrapper using the default policy."""
    if policy is None:
        policy = RenderPolicy()
    return policy.select_render_items(points, zoom_level)


def render_mode_label(zoom_level: int) -> str:
    """Status bar label for the current zoom."""
    if zoom_level < MIN_ZOOM_FOR_INDIVIDUAL_MARKERS:
        return "Clustered"
    return "Individual"
