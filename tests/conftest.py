"""
Pytest configuration and shared fixtures for radar-map tests.

This file provides:
- Sample radar readings and radar documents
- Synthetic point clouds for clustering tests
- Common test utilities
"""

import os
from typing import Any, Dict, List

import numpy as np
import pytest

from src.spatial import GeoPoint
from src.tools import SAMPLE_STATIONS


# ==============================================================================
# Sample Readings
# ==============================================================================

@pytest.fixture
def sample_points() -> List[GeoPoint]:
    """The five bundled Kolkata stations."""
    return list(SAMPLE_STATIONS)


@pytest.fixture
def tight_points() -> List[GeoPoint]:
    """Five readings spread across ~0.02 degrees."""
    return [
        GeoPoint(id=f"t{i}", name=f"Tight {i}", lat=22.57 + i * 0.005, lng=88.36 + i * 0.005,
                 category="low_rain", reflectivity=10.0 + i, rainfall_rate=0.5)
        for i in range(5)
    ]


@pytest.fixture
def uniform_points() -> List[GeoPoint]:
    """150 readings uniformly distributed over a 1 x 1 degree box."""
    rng = np.random.default_rng(42)
    lats = 22.0 + rng.random(150)
    lngs = 88.0 + rng.random(150)
    return [
        GeoPoint(
            id=f"u{i}",
            name=f"Uniform {i}",
            lat=float(lat),
            lng=float(lng),
            category="medium_rain",
            reflectivity=float(20 + i % 30),
            rainfall_rate=float(i % 5),
            altitude=float(100 + i),
        )
        for i, (lat, lng) in enumerate(zip(lats, lngs))
    ]


@pytest.fixture
def stacked_points() -> List[GeoPoint]:
    """101 readings at the same coordinate."""
    return [
        GeoPoint(id=f"p{i}", name=f"Stacked {i}", lat=22.5726, lng=88.3639,
                 reflectivity=40.0, rainfall_rate=4.0, altitude=6.0)
        for i in range(101)
    ]


@pytest.fixture
def three_point_cell() -> List[GeoPoint]:
    """Three readings with one missing reflectivity."""
    return [
        GeoPoint(id="a", name="A", lat=22.0, lng=88.0, reflectivity=30.0, rainfall_rate=1.0, altitude=10.0),
        GeoPoint(id="b", name="B", lat=22.3, lng=88.3, reflectivity=45.0, rainfall_rate=2.0, altitude=20.0),
        GeoPoint(id="c", name="C", lat=22.6, lng=88.6, reflectivity=None, rainfall_rate=3.0, altitude=None),
    ]


# ==============================================================================
# Radar Documents
# ==============================================================================

@pytest.fixture
def radar_document() -> Dict[str, Any]:
    """Small radar document as returned by the upload backend."""
    return {
        "_id": "doc1",
        "filename": "sweep_0012.nc",
        "content_type": "application/x-netcdf",
        "uploaded_at": "2024-07-01T10:00:00Z",
        "total_points": 4,
        "radar_plots": [
            {"latitude": 22.57, "longitude": 88.36, "altitude": 6, "reflectivity": 45.2,
             "rainfall_rate": 12.5, "intensity_category": "severe"},
            {"latitude": 22.58, "longitude": 88.37, "altitude": 8, "reflectivity": 32.1,
             "rainfall_rate": 1.5},
            {"latitude": "n/a", "longitude": 88.38, "altitude": 4, "reflectivity": 18.5,
             "rainfall_rate": 0.8},
            {"latitude": 22.60, "longitude": 88.39, "altitude": 12, "reflectivity": 8.0,
             "rainfall_rate": 0.5},
        ],
    }


def make_radar_document(n: int, seed: int = 7) -> Dict[str, Any]:
    """Radar document with ``n`` plots spread over a 1 x 1 degree box."""
    rng = np.random.default_rng(seed)
    return {
        "_id": "bulk",
        "filename": "bulk.nc",
        "radar_plots": [
            {
                "latitude": float(22.0 + rng.random()),
                "longitude": float(88.0 + rng.random()),
                "altitude": 10.0,
                "reflectivity": float(rng.uniform(0, 60)),
                "rainfall_rate": float(rng.uniform(0, 5)),
            }
            for _ in range(n)
        ],
    }


@pytest.fixture
def bulk_document() -> Dict[str, Any]:
    return make_radar_document(150)


# ==============================================================================
# Environment Setup
# ==============================================================================

@pytest.fixture(autouse=True)
def default_profile(monkeypatch):
    """Pin every test to the default map profile."""
    monkeypatch.setenv("RADAR_MAP_PROFILE", "default")
    yield


# ==============================================================================
# Utilities
# ==============================================================================

def point_ids(points) -> List[str]:
    return sorted(p.id for p in points)
