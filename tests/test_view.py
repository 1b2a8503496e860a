"""
Tests for the map view session (apps/map_server/tools/view.py).

Covers recompute-on-change, stale snapshot detection, the debounced text
search and coordinate search.
"""

import asyncio

import pytest

from apps.map_server.tools.view import Bounds, MapViewSession
from src.rendering import RenderPolicy
from src.tools import SAMPLE_STATIONS


class TestSessionState:
    """Test state changes and recomputation."""

    def test_defaults_to_sample_stations(self):
        session = MapViewSession()
        snapshot = session.render()

        assert session.zoom == 10
        assert len(snapshot.items) == 5
        assert snapshot.result.clustered is False
        assert snapshot.status.mode == "Clustered"
        assert snapshot.status.rendered == snapshot.status.total == 5

    def test_load_points_clusters_large_sets(self, uniform_points):
        session = MapViewSession(zoom=5)
        snapshot = session.load_points(uniform_points)

        assert snapshot.result.clustered is True
        assert snapshot.status.total == 150
        assert snapshot.status.rendered < 150

    def test_load_points_clears_search_and_target(self, uniform_points):
        session = MapViewSession()
        session.search_term = "howrah"
        session.target = (22.0, 88.0)

        session.load_points(uniform_points)

        assert session.search_term == ""
        assert session.target is None
        assert session.filtered_points == uniform_points

    def test_zoom_change_recomputes(self, uniform_points):
        session = MapViewSession(zoom=5)
        overview = session.load_points(uniform_points)
        detail = session.set_zoom(16)

        assert detail.status.zoom == 16
        assert detail.status.mode == "Individual"
        assert detail.status.rendered >= overview.status.rendered

    def test_revision_and_staleness(self):
        session = MapViewSession()
        first = session.render()
        second = session.set_zoom(11)

        assert second.revision == first.revision + 1
        assert session.is_current(second.revision)
        assert not session.is_current(first.revision)
        assert session.last_snapshot is second

    def test_bounds_count(self):
        session = MapViewSession()
        snapshot = session.set_bounds(Bounds(south=22.55, west=88.30, north=22.60, east=88.40))

        # Kolkata (22.5726, 88.3639) and Salt Lake (22.5744, 88.4326 -> outside east)
        assert snapshot.status.in_view == 1

    def test_bounds_across_antimeridian(self):
        """Test a viewport with west > east wraps through 180 degrees."""
        bounds = Bounds(south=-10.0, west=170.0, north=10.0, east=-170.0)

        assert bounds.contains(0.0, 175.0)
        assert bounds.contains(0.0, -175.0)
        assert bounds.contains(0.0, 180.0)
        assert not bounds.contains(0.0, 0.0)
        assert not bounds.contains(20.0, 175.0)

    def test_load_document(self, radar_document):
        session = MapViewSession()
        snapshot = session.load_document(radar_document)

        assert len(snapshot.items) == 3
        assert snapshot.status.filename == "sweep_0012.nc"

    def test_invalid_document_falls_back_to_samples(self):
        session = MapViewSession()
        snapshot = session.load_document({"_id": "broken"})

        assert [item.id for item in snapshot.items] == [p.id for p in SAMPLE_STATIONS]
        assert session.metadata is None

    def test_custom_policy(self, sample_points):
        session = MapViewSession(policy=RenderPolicy(cluster_threshold=1), zoom=3)
        snapshot = session.load_points(sample_points)
        assert snapshot.result.clustered is True


class TestSearch:
    """Test debounced text search and coordinate search."""

    def test_search_is_debounced(self):
        async def scenario():
            session = MapViewSession(debounce_s=0.05)
            revision = session.revision
            session.set_search_term("howrah")

            assert session.search_pending
            assert len(session.filtered_points) == 5
            assert session.revision == revision

            await asyncio.sleep(0.15)
            return session

        session = asyncio.run(scenario())
        assert not session.search_pending
        assert [p.id for p in session.filtered_points] == ["sample_2"]
        assert session.last_snapshot.status.rendered == 1

    def test_newer_term_replaces_pending(self):
        async def scenario():
            session = MapViewSession(debounce_s=0.05)
            session.set_search_term("howrah")
            await asyncio.sleep(0.01)
            session.set_search_term("dumdum")
            await asyncio.sleep(0.15)
            return session

        session = asyncio.run(scenario())
        assert [p.id for p in session.filtered_points] == ["sample_5"]

    def test_apply_search_now(self):
        session = MapViewSession()
        session.search_term = "low_rain"
        snapshot = session.apply_search_now()

        assert [item.id for item in snapshot.items] == ["sample_3"]

    def test_clearing_search_restores_all(self):
        session = MapViewSession()
        session.search_term = "howrah"
        session.apply_search_now()
        session.search_term = ""
        snapshot = session.apply_search_now()

        assert len(snapshot.items) == 5

    def test_search_coordinates(self):
        session = MapViewSession(zoom=8)
        snapshot = session.search_coordinates("22.5", "88.3")

        assert snapshot.target == (22.5, 88.3)
        assert session.zoom == 12

    def test_search_coordinates_keeps_deeper_zoom(self):
        session = MapViewSession(zoom=15)
        session.search_coordinates("22.5", "88.3")
        assert session.zoom == 15

    def test_search_coordinates_invalid(self):
        session = MapViewSession()
        with pytest.raises(ValueError, match="out of range"):
            session.search_coordinates("95", "88")
        assert session.target is None

    def test_select_location(self, sample_points):
        session = MapViewSession()
        snapshot = session.select_location(sample_points[1])
        assert snapshot.target == (22.5958, 88.2636)
