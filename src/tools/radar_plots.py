"""
Radar sweep documents -> GeoPoint records.

A radar document as stored by the upload backend looks like:

    {
        "_id": "66f0...",
        "filename": "sweep_0012.nc",
        "content_type": "application/x-netcdf",
        "uploaded_at": "2024-07-01T10:00:00Z",
        "total_points": 2,
        "radar_plots": [
            {"latitude": 22.57, "longitude": 88.36, "altitude": 6,
             "reflectivity": 45.2, "rainfall_rate": 12.5,
             "intensity_category": "high_rain"},
            ...
        ]
    }

Also provides the bundled sample stations and the search helpers used by the
map view.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from src.spatial import GeoPoint


logger = logging.getLogger(__name__)

# Rainfall rate (mm/h) thresholds when a plot has no intensity_category
HIGH_RAIN_THRESHOLD = 2.0
MEDIUM_RAIN_THRESHOLD = 1.0


@dataclass
class DataMetadata:
    """Summary of a loaded radar document."""

    id: Optional[str]
    filename: Optional[str]
    total_points: int
    content_type: str = "unknown"
    uploaded_at: str = "unknown"
    is_chunked: bool = False
    processing_status: str = "unknown"


SAMPLE_STATIONS: List[GeoPoint] = [
    GeoPoint(
        id="sample_1",
        name="Kolkata Weather Station",
        lat=22.5726,
        lng=88.3639,
        category="high_rain",
        reflectivity=45.2,
        rainfall_rate=12.5,
        altitude=6,
    ),
    GeoPoint(
        id="sample_2",
        name="Howrah Station",
        lat=22.5958,
        lng=88.2636,
        category="medium_rain",
        reflectivity=32.1,
        rainfall_rate=5.2,
        altitude=8,
    ),
    GeoPoint(
        id="sample_3",
        name="Salt Lake Station",
        lat=22.5744,
        lng=88.4326,
        category="low_rain",
        reflectivity=18.5,
        rainfall_rate=0.8,
        altitude=4,
    ),
    GeoPoint(
        id="sample_4",
        name="Jadavpur Station",
        lat=22.4987,
        lng=88.3731,
        category="medium_rain",
        reflectivity=28.7,
        rainfall_rate=3.1,
        altitude=12,
    ),
    GeoPoint(
        id="sample_5",
        name="Dumdum Station",
        lat=22.6405,
        lng=88.4169,
        category="high_rain",
        reflectivity=52.3,
        rainfall_rate=18.9,
        altitude=5,
    ),
]


def _intensity_category(rainfall: pd.Series) -> pd.Series:
    rainfall = rainfall.fillna(0.0)
    return pd.Series(
        np.select(
            [rainfall > HIGH_RAIN_THRESHOLD, rainfall > MEDIUM_RAIN_THRESHOLD],
            ["high_rain", "medium_rain"],
            default="low_rain",
        ),
        index=rainfall.index,
    )


def _optional_float(value: Any) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def _plots_dataframe(document: Dict[str, Any]) -> pd.DataFrame:
    plots = document.get("radar_plots") if isinstance(document, dict) else None
    if not isinstance(plots, list):
        raise ValueError("Invalid data format - no radar_plots found")
    if not plots:
        raise ValueError("No radar plots found")

    df = pd.DataFrame(plots)
    for column in ("latitude", "longitude", "altitude", "reflectivity", "rainfall_rate"):
        if column not in df:
            df[column] = np.nan
        df[column] = pd.to_numeric(df[column], errors="coerce")
    if "intensity_category" not in df:
        df["intensity_category"] = None
    return df


def points_from_radar_document(document: Dict[str, Any]) -> List[GeoPoint]:
    """
    Convert a radar document into GeoPoints.

    Point ids are ``radar_<document id>_<plot index>`` so they stay unique
    and stable across reloads of the same document. Plots whose latitude or
    longitude is not numeric are dropped.

    Raises:
        ValueError: If the document has no usable ``radar_plots`` list
    """
    df = _plots_dataframe(document)
    doc_id = document.get("_id") or "unknown"

    category = df["intensity_category"].where(
        df["intensity_category"].notna() & (df["intensity_category"] != ""),
        _intensity_category(df["rainfall_rate"]),
    )
    df = df.assign(category=category)

    valid = df["latitude"].notna() & df["longitude"].notna()
    dropped = int((~valid).sum())
    if dropped:
        logger.warning("Dropping %d radar plot(s) with non-numeric coordinates", dropped)

    points: List[GeoPoint] = []
    for index, row in df[valid].iterrows():
        reflectivity = _optional_float(row["reflectivity"])
        rainfall = _optional_float(row["rainfall_rate"])
        altitude = _optional_float(row["altitude"])
        points.append(
            GeoPoint(
                id=f"radar_{doc_id}_{index}",
                name=f"Radar Point {index + 1}",
                lat=float(row["latitude"]),
                lng=float(row["longitude"]),
                category=str(row["category"]),
                reflectivity=reflectivity,
                rainfall_rate=rainfall,
                altitude=altitude,
                description=(
                    f"Reflectivity: {reflectivity}dBZ, "
                    f"Rainfall: {rainfall}mm/h, Alt: {altitude}m"
                ),
            )
        )
    return points


def document_metadata(document: Dict[str, Any]) -> DataMetadata:
    """Return the metadata block shown alongside a loaded document."""
    plots = document.get("radar_plots") or []
    claimed = document.get("total_points")
    if claimed and claimed != len(plots):
        logger.warning(
            "Document %s claims %s total points but carries %d plots",
            document.get("_id"),
            claimed,
            len(plots),
        )

    return DataMetadata(
        id=document.get("_id"),
        filename=document.get("filename"),
        total_points=len(plots),
        content_type=document.get("content_type") or "unknown",
        uploaded_at=document.get("uploaded_at") or "unknown",
        is_chunked=bool(document.get("is_chunked", False)),
        processing_status=document.get("processing_status") or "unknown",
    )


def filter_by_text(points: Iterable[GeoPoint], term: Optional[str]) -> List[GeoPoint]:
    """Case-insensitive substring match on name or category."""
    points = list(points)
    needle = (term or "").strip().lower()
    if not needle:
        return points
    return [
        p for p in points
        if needle in p.name.lower() or needle in (p.category or "").lower()
    ]


def parse_coordinates(lat_text: str, lng_text: str) -> Tuple[float, float]:
    """
    Parse a coordinate search.

    Raises:
        ValueError: "Please enter valid coordinates" for non-numeric input,
            "Coordinates out of range" outside [-90, 90] x [-180, 180]
    """
    try:
        lat = float(lat_text)
        lng = float(lng_text)
    except (TypeError, ValueError) as exc:
        raise ValueError("Please enter valid coordinates") from exc

    if math.isnan(lat) or math.isnan(lng):
        raise ValueError("Please enter valid coordinates")
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise ValueError("Coordinates out of range")
    return lat, lng
