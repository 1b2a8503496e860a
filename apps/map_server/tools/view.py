"""Stateful map view session wrapping the pure clustering pipeline."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from src.rendering import RenderPolicy, RenderResult, render_mode_label
from src.spatial import GeoPoint, RenderItem
from src.tools import (
    DataMetadata,
    SAMPLE_STATIONS,
    document_metadata,
    filter_by_text,
    parse_coordinates,
    points_from_radar_document,
)

logger = logging.getLogger(__name__)

SEARCH_DEBOUNCE_S = 0.3
DEFAULT_ZOOM = 10
LOCATE_MIN_ZOOM = 12


@dataclass(frozen=True)
class Bounds:
    """Viewport bounds in decimal degrees."""

    south: float
    west: float
    north: float
    east: float

    def contains(self, lat: float, lng: float) -> bool:
        if not self.south <= lat <= self.north:
            return False
        if self.west <= self.east:
            return self.west <= lng <= self.east
        # Viewport crosses the antimeridian
        return lng >= self.west or lng <= self.east


@dataclass
class ViewStatus:
    rendered: int
    total: int
    zoom: int
    mode: str
    in_view: Optional[int] = None
    filename: Optional[str] = None


@dataclass
class ViewSnapshot:
    """One recompute of the view. Stale once ``revision`` is superseded."""

    revision: int
    result: RenderResult
    status: ViewStatus
    target: Optional[Tuple[float, float]] = None

    @property
    def items(self) -> List[RenderItem]:
        return self.result.items


@dataclass
class MapViewSession:
    """
    Holds the view state and recomputes the render list on every change.

    Every state change bumps ``revision`` and produces a fresh snapshot; a
    consumer holding an older snapshot should drop it (see :meth:`is_current`).
    """

    policy: RenderPolicy = field(default_factory=RenderPolicy)
    zoom: int = DEFAULT_ZOOM
    debounce_s: float = SEARCH_DEBOUNCE_S
    locate_min_zoom: int = LOCATE_MIN_ZOOM

    all_points: List[GeoPoint] = field(default_factory=lambda: list(SAMPLE_STATIONS))
    filtered_points: Optional[List[GeoPoint]] = None
    search_term: str = ""
    bounds: Optional[Bounds] = None
    target: Optional[Tuple[float, float]] = None
    metadata: Optional[DataMetadata] = None
    revision: int = 0
    last_snapshot: Optional[ViewSnapshot] = None

    _pending_search: Optional[asyncio.TimerHandle] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.filtered_points is None:
            self.filtered_points = list(self.all_points)

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def load_points(
        self, points: Sequence[GeoPoint], metadata: Optional[DataMetadata] = None
    ) -> ViewSnapshot:
        """Replace the data set; search and target are cleared."""
        self._cancel_pending_search()
        self.all_points = list(points)
        self.filtered_points = list(self.all_points)
        self.metadata = metadata
        self.search_term = ""
        self.target = None
        return self.render()

    def load_document(self, document: dict) -> ViewSnapshot:
        """
        Load a radar document, falling back to the sample stations when it
        cannot be converted.
        """
        try:
            points = points_from_radar_document(document)
        except ValueError as exc:
            logger.error("Could not load radar document: %s; using sample stations", exc)
            return self.load_points(SAMPLE_STATIONS)
        return self.load_points(points, document_metadata(document))

    # ------------------------------------------------------------------
    # View signals
    # ------------------------------------------------------------------

    def set_zoom(self, zoom: int) -> ViewSnapshot:
        self.zoom = zoom
        return self.render()

    def set_bounds(self, bounds: Optional[Bounds]) -> ViewSnapshot:
        self.bounds = bounds
        return self.render()

    def set_search_term(self, term: str) -> None:
        """
        Schedule the text filter ``debounce_s`` seconds from now.

        Must be called from a running event loop. A newer term replaces any
        pending one.
        """
        self.search_term = term
        self._cancel_pending_search()
        loop = asyncio.get_running_loop()
        self._pending_search = loop.call_later(self.debounce_s, self.apply_search_now)

    def apply_search_now(self) -> ViewSnapshot:
        """Apply the current search term immediately."""
        self._pending_search = None
        self.filtered_points = filter_by_text(self.all_points, self.search_term)
        return self.render()

    @property
    def search_pending(self) -> bool:
        return self._pending_search is not None

    def search_coordinates(self, lat_text: str, lng_text: str) -> ViewSnapshot:
        """
        Center on a typed coordinate.

        Raises:
            ValueError: If the coordinate text is invalid or out of range
        """
        self.target = parse_coordinates(lat_text, lng_text)
        self.zoom = max(self.zoom, self.locate_min_zoom)
        return self.render()

    def select_location(self, item: RenderItem) -> ViewSnapshot:
        self.target = (item.lat, item.lng)
        return self.render()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> ViewSnapshot:
        """Recompute the render list from the current state."""
        self.revision += 1
        result = self.policy.select_render_items(self.filtered_points, self.zoom)

        in_view = None
        if self.bounds is not None:
            in_view = sum(1 for item in result.items if self.bounds.contains(item.lat, item.lng))

        status = ViewStatus(
            rendered=len(result.items),
            total=result.total_points,
            zoom=self.zoom,
            mode=render_mode_label(self.zoom),
            in_view=in_view,
            filename=self.metadata.filename if self.metadata else None,
        )
        snapshot = ViewSnapshot(
            revision=self.revision,
            result=result,
            status=status,
            target=self.target,
        )
        self.last_snapshot = snapshot
        return snapshot

    def is_current(self, revision: int) -> bool:
        return revision == self.revision

    def _cancel_pending_search(self) -> None:
        if self._pending_search is not None:
            self._pending_search.cancel()
            self._pending_search = None
