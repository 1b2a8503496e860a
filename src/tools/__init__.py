"""Radar data ingest and configuration utilities."""

from .radar_plots import (
    DataMetadata,
    SAMPLE_STATIONS,
    document_metadata,
    filter_by_text,
    parse_coordinates,
    points_from_radar_document,
)
from .config_loader import (
    ConfigLoader,
    clustering_config_from_profile,
    get_config,
    render_policy_from_profile,
)

__all__ = [
    "DataMetadata",
    "SAMPLE_STATIONS",
    "document_metadata",
    "filter_by_text",
    "parse_coordinates",
    "points_from_radar_document",
    "ConfigLoader",
    "clustering_config_from_profile",
    "get_config",
    "render_policy_from_profile",
]
